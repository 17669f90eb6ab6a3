"""Struct definition parser (token source + recursive-descent grammar)."""

from jsongenpy.parser.grammar import (
    parse_array_suffix,
    parse_declarations,
    parse_field_decl,
    parse_include,
    parse_schema_file_contents,
    parse_struct_decl,
    parse_type_name,
)
from jsongenpy.parser.options import IncludeLoader, ParseMode, ParserOptions
from jsongenpy.parser.parser import ParseSession, Parser, ParserState, PendingReference
from jsongenpy.parser.structdef import (
    load_include_file,
    parse_result,
    parse_schema,
    parse_schema_file,
    parse_tokens,
)
from jsongenpy.parser.token_source import TokenSource

__all__ = [
    "IncludeLoader",
    "ParseMode",
    "ParseSession",
    "Parser",
    "ParserOptions",
    "ParserState",
    "PendingReference",
    "TokenSource",
    "load_include_file",
    "parse_array_suffix",
    "parse_declarations",
    "parse_field_decl",
    "parse_include",
    "parse_result",
    "parse_schema",
    "parse_schema_file",
    "parse_schema_file_contents",
    "parse_struct_decl",
    "parse_tokens",
    "parse_type_name",
]
