"""Parse carrier handed to the code emitter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from jsongenpy.diagnostics import has_errors
from jsongenpy.parser.options import ParserOptions
from jsongenpy.schema import SchemaModel, SymbolTable

if TYPE_CHECKING:
    from jsongenpy.diagnostics import Diagnostic, SchemaError


@dataclass(slots=True)
class SchemaParseResult:
    """Outcome of parsing one schema text.

    On failure `schema` is empty and `symbols` holds only what was registered
    before the error; neither should be fed to the emitter.
    """

    source_text: str
    source_path: str
    options: ParserOptions
    schema: SchemaModel
    symbols: SymbolTable
    error: SchemaError | None = None

    @property
    def diagnostics(self) -> list[Diagnostic]:
        if self.error is None:
            return []
        return [self.error.diagnostic]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    def raise_for_errors(self) -> None:
        if self.error is not None:
            raise self.error
