"""Typed errors raised by the schema front end.

Every error wraps the `Diagnostic` describing it, so callers can either
render the exception or hand the diagnostic to their own reporting layer.
"""

from jsongenpy.diagnostics.diagnostic import Diagnostic


class SchemaError(Exception):
    """Base class for all lexer/parser/schema errors."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def line(self) -> int:
        return self.diagnostic.line

    @property
    def column(self) -> int:
        return self.diagnostic.column

    def __str__(self) -> str:
        return f"{self.diagnostic.source_path}:{self.diagnostic.position}: {self.diagnostic.message}"


class LexicalError(SchemaError):
    """Input contains a character (or unterminated construct) the lexer cannot classify."""


class SchemaSyntaxError(SchemaError):
    """Token sequence violates the grammar."""


class DuplicateDefinitionError(SchemaError):
    """A struct (or a field within one struct) is defined twice."""


class UnknownTypeError(SchemaError):
    """A field type names a struct that is not defined."""

    def __init__(self, diagnostic: Diagnostic, type_name: str) -> None:
        super().__init__(diagnostic)
        self.type_name = type_name


class InvalidArrayWidthError(SchemaError):
    """An array bound is missing, zero, or not an integer literal."""


class DuplicateNameError(KeyError):
    """Raised by `SymbolTable.insert` when the name is already present."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"duplicate name {self.name!r}"
