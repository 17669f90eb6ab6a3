"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNRECOGNIZED_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNRECOGNIZED_CHARACTER",
    message="Unrecognized character",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with a double quote (or `>` for `<...>` paths).",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_COMMENT",
    message="Unterminated block comment.",
    hint="Close the comment with `*/`.",
    severity="error",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    severity="error",
    category="parser",
)

PARSER_RESERVED_NAME: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_RESERVED_NAME",
    message="Reserved word used as a name",
    hint="`struct` and the built-in type names cannot name a struct; `struct` cannot name a field.",
    severity="error",
    category="parser",
)

PARSER_INCLUDE_DISABLED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_INCLUDE_DISABLED",
    message="`#include` is not enabled for this parse",
    hint="Configure `ParserOptions.include_loader` or use `parse_schema_file`.",
    severity="error",
    category="parser",
)

PARSER_INCLUDE_CYCLE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_INCLUDE_CYCLE",
    message="Include cycle detected",
    severity="error",
    category="parser",
)

PARSER_INCLUDE_FAILED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_INCLUDE_FAILED",
    message="Could not read included file",
    severity="error",
    category="parser",
)

SCHEMA_DUPLICATE_STRUCT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="SCHEMA_DUPLICATE_STRUCT",
    message="Duplicate struct definition",
    hint="Each struct name may be defined once per schema.",
    severity="error",
    category="schema",
)

SCHEMA_DUPLICATE_FIELD: Final[DiagnosticSpec] = DiagnosticSpec(
    code="SCHEMA_DUPLICATE_FIELD",
    message="Duplicate field name",
    severity="error",
    category="schema",
)

SCHEMA_UNKNOWN_TYPE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="SCHEMA_UNKNOWN_TYPE",
    message="Unknown type",
    hint="Declare the struct before it is used, or enable forward references.",
    severity="error",
    category="schema",
)

SCHEMA_INVALID_ARRAY_WIDTH: Final[DiagnosticSpec] = DiagnosticSpec(
    code="SCHEMA_INVALID_ARRAY_WIDTH",
    message="Invalid array width",
    hint="Array widths must be positive integer literals, e.g. `int values[8];`.",
    severity="error",
    category="schema",
)
