"""Diagnostics."""

from jsongenpy.diagnostics.codes import (
    LEXER_UNRECOGNIZED_CHARACTER,
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_STRING,
    PARSER_EXPECTED_TOKEN,
    PARSER_INCLUDE_CYCLE,
    PARSER_INCLUDE_DISABLED,
    PARSER_INCLUDE_FAILED,
    PARSER_RESERVED_NAME,
    SCHEMA_DUPLICATE_FIELD,
    SCHEMA_DUPLICATE_STRUCT,
    SCHEMA_INVALID_ARRAY_WIDTH,
    SCHEMA_UNKNOWN_TYPE,
    DiagnosticSpec,
    Severity,
)
from jsongenpy.diagnostics.diagnostic import Diagnostic
from jsongenpy.diagnostics.errors import (
    DuplicateDefinitionError,
    DuplicateNameError,
    InvalidArrayWidthError,
    LexicalError,
    SchemaError,
    SchemaSyntaxError,
    UnknownTypeError,
)
from jsongenpy.diagnostics.report import has_errors, render_diagnostics

__all__ = [
    "LEXER_UNRECOGNIZED_CHARACTER",
    "LEXER_UNTERMINATED_COMMENT",
    "LEXER_UNTERMINATED_STRING",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_INCLUDE_CYCLE",
    "PARSER_INCLUDE_DISABLED",
    "PARSER_INCLUDE_FAILED",
    "PARSER_RESERVED_NAME",
    "SCHEMA_DUPLICATE_FIELD",
    "SCHEMA_DUPLICATE_STRUCT",
    "SCHEMA_INVALID_ARRAY_WIDTH",
    "SCHEMA_UNKNOWN_TYPE",
    "Diagnostic",
    "DiagnosticSpec",
    "DuplicateDefinitionError",
    "DuplicateNameError",
    "InvalidArrayWidthError",
    "LexicalError",
    "SchemaError",
    "SchemaSyntaxError",
    "Severity",
    "UnknownTypeError",
    "has_errors",
    "render_diagnostics",
]
