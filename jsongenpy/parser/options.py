"""Parser modes and configuration options."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

IncludeLoader = Callable[[str, str], tuple[str, str]]
"""`(requested_path, including_source_path) -> (resolved_path, text)`.

May raise OSError or UnicodeDecodeError; the parser reports either as an
include failure.
"""


class ParseMode(StrEnum):
    """Top-level parser behavior profile."""

    STRICT = "strict"
    LEGACY = "legacy"


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Feature flags controlling grammar compatibility and resolution policy."""

    mode: ParseMode = ParseMode.STRICT
    allow_forward_references: bool = False
    allow_zero_width_arrays: bool = False
    allow_unsized_arrays: bool = False
    lenient_semicolons: bool = False
    include_loader: IncludeLoader | None = None

    @staticmethod
    def for_mode(mode: ParseMode) -> "ParserOptions":
        if mode == ParseMode.LEGACY:
            # json-gen-c accepted `int xs[];` and did not require semicolons.
            return ParserOptions(
                mode=mode,
                allow_unsized_arrays=True,
                lenient_semicolons=True,
            )

        return ParserOptions(mode=mode)
