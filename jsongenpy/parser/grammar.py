"""Struct definition grammar.

```
schema      := ( struct_decl | include )*
struct_decl := "struct" identifier "{" field_decl* "}" ";"
field_decl  := "struct"? type_name identifier ( "[" integer "]" )? ";"
type_name   := "bool" | "int" | "long" | "float" | "double" | "sstring" | identifier
include     := "#" "include" string
```
"""

import logging
from typing import NoReturn

from jsongenpy.diagnostics import (
    PARSER_INCLUDE_CYCLE,
    PARSER_INCLUDE_DISABLED,
    PARSER_INCLUDE_FAILED,
    PARSER_RESERVED_NAME,
    SCHEMA_DUPLICATE_FIELD,
    SCHEMA_DUPLICATE_STRUCT,
    SCHEMA_INVALID_ARRAY_WIDTH,
    SCHEMA_UNKNOWN_TYPE,
    Diagnostic,
    DuplicateDefinitionError,
    InvalidArrayWidthError,
    SchemaSyntaxError,
    UnknownTypeError,
)
from jsongenpy.lexer import Token, TokenKind, iter_tokens
from jsongenpy.parser.parser import Parser, ParserState, PendingReference
from jsongenpy.parser.token_source import TokenSource
from jsongenpy.schema import (
    BUILTIN_TYPE_NAMES,
    STRUCT_KEYWORD,
    Field,
    FieldType,
    SchemaModel,
    StructContainer,
    StructContainerBuilder,
)

logger = logging.getLogger(__name__)

INCLUDE_DIRECTIVE = "include"

_MALFORMED_WIDTH_TOKENS: frozenset[TokenKind] = frozenset(
    {TokenKind.FLOAT, TokenKind.IDENTIFIER, TokenKind.STRING}
)


def parse_schema_file_contents(parser: Parser) -> SchemaModel:
    """Parse a whole top-level input and resolve deferred references."""
    parse_declarations(parser)
    resolve_pending_references(parser)
    return SchemaModel(structs=tuple(parser.session.structs))


def parse_declarations(parser: Parser) -> None:
    while True:
        parser.enter(ParserState.EXPECT_STRUCT_KEYWORD)
        if parser.options.lenient_semicolons:
            while parser.eat(TokenKind.SEMICOLON):
                pass

        if parser.at(TokenKind.EOF):
            break
        if parser.at(TokenKind.HASH):
            parse_include(parser)
            continue
        parse_struct_decl(parser)

    parser.enter(ParserState.DONE)


def parse_struct_decl(parser: Parser) -> StructContainer:
    if not parser.at_keyword(STRUCT_KEYWORD):
        parser.error_expected("'struct'")
    parser.bump()

    parser.enter(ParserState.EXPECT_STRUCT_NAME)
    name_token = parser.expect(TokenKind.IDENTIFIER, "struct name")
    name = name_token.text
    if name == STRUCT_KEYWORD or name in BUILTIN_TYPE_NAMES:
        parser.fail(SchemaSyntaxError, PARSER_RESERVED_NAME, name_token, f"'{name}' cannot name a struct")
    if name in parser.symbols:
        parser.fail(DuplicateDefinitionError, SCHEMA_DUPLICATE_STRUCT, name_token, f"'{name}'")

    parser.enter(ParserState.EXPECT_OPEN_BRACE)
    parser.expect(TokenKind.LBRACE)

    builder = StructContainerBuilder(name, position=name_token.position)
    parser.begin_struct(builder)
    while True:
        parser.enter(ParserState.EXPECT_FIELD_OR_CLOSE_BRACE)
        if parser.options.lenient_semicolons:
            while parser.eat(TokenKind.SEMICOLON):
                pass
        if parser.at(TokenKind.RBRACE):
            break
        parse_field_decl(parser, builder)
    parser.bump()
    parser.end_struct()

    parser.enter(ParserState.EXPECT_SEMICOLON)
    _expect_terminator(parser)

    container = builder.freeze()
    parser.symbols.insert(name, container)
    parser.session.structs.append(container)
    logger.debug("registered struct %s with %d field(s) from %s", name, len(container.fields), parser.source_path)
    return container


def parse_field_decl(parser: Parser, builder: StructContainerBuilder) -> Field:
    struct_only = parser.eat_keyword(STRUCT_KEYWORD) is not None
    if struct_only:
        type_token = parser.expect(TokenKind.IDENTIFIER, "struct name")
    else:
        type_token = parser.expect(TokenKind.IDENTIFIER, "type name or '}'")
    field_type, nested_name = parse_type_name(parser, type_token, struct_only=struct_only)

    parser.enter(ParserState.EXPECT_FIELD_NAME)
    name_token = parser.expect(TokenKind.IDENTIFIER, "field name")
    name = name_token.text
    if name == STRUCT_KEYWORD:
        parser.fail(SchemaSyntaxError, PARSER_RESERVED_NAME, name_token, "'struct' cannot name a field")
    if builder.has_field(name):
        parser.fail(
            DuplicateDefinitionError,
            SCHEMA_DUPLICATE_FIELD,
            name_token,
            f"'{name}' in struct '{builder.name}'",
        )

    parser.enter(ParserState.EXPECT_ARRAY_WIDTH_OR_SEMICOLON)
    array_width = parse_array_suffix(parser) if parser.at(TokenKind.LBRACKET) else None

    parser.enter(ParserState.EXPECT_SEMICOLON)
    _expect_terminator(parser)

    item = Field(
        name=name,
        type=field_type,
        nested_struct_name=nested_name,
        array_width=array_width,
        position=name_token.position,
    )
    builder.add(item)
    return item


def parse_type_name(parser: Parser, token: Token, *, struct_only: bool = False) -> tuple[FieldType, str | None]:
    """Classify a type identifier as a built-in type or a struct reference."""
    text = token.text
    builtin = BUILTIN_TYPE_NAMES.get(text)
    if builtin is not None:
        if struct_only:
            parser.error_expected("struct name after 'struct'", token)
        return builtin, None
    if text == STRUCT_KEYWORD:
        parser.fail(SchemaSyntaxError, PARSER_RESERVED_NAME, token, "'struct' is not a type name")

    current = parser.current_struct
    if current is not None and current.name == text:
        return FieldType.NESTED_STRUCT, text
    if text in parser.symbols:
        return FieldType.NESTED_STRUCT, text
    if parser.options.allow_forward_references:
        parser.session.pending_references.append(PendingReference(token, parser.source_path))
        return FieldType.NESTED_STRUCT, text

    _fail_unknown_type(parser, token, parser.source_path)


def parse_array_suffix(parser: Parser) -> int:
    """Parse `[width]` and return the width (0 for an allowed unsized array)."""
    parser.expect(TokenKind.LBRACKET)

    if parser.at(TokenKind.RBRACKET):
        if not parser.options.allow_unsized_arrays:
            parser.fail(InvalidArrayWidthError, SCHEMA_INVALID_ARRAY_WIDTH, parser.current, "missing array width")
        parser.bump()
        return 0

    if parser.at(TokenKind.INT):
        width_token = parser.bump()
        width = int(width_token.text)
        if width < 0 or (width == 0 and not parser.options.allow_zero_width_arrays):
            parser.fail(
                InvalidArrayWidthError,
                SCHEMA_INVALID_ARRAY_WIDTH,
                width_token,
                f"array width must be positive, found '{width_token.text}'",
            )
    elif parser.current.kind in _MALFORMED_WIDTH_TOKENS:
        parser.fail(
            InvalidArrayWidthError,
            SCHEMA_INVALID_ARRAY_WIDTH,
            parser.current,
            f"expected integer literal, found {parser.current.describe()}",
        )
    else:
        parser.error_expected("array width")

    parser.expect(TokenKind.RBRACKET)
    return width


def parse_include(parser: Parser) -> None:
    """Parse `#include "file"` and splice the included declarations in place."""
    hash_token = parser.expect(TokenKind.HASH)
    directive = parser.expect(TokenKind.IDENTIFIER, "'include'")
    if directive.text != INCLUDE_DIRECTIVE:
        parser.error_expected("'include'", directive)
    path_token = parser.expect(TokenKind.STRING, "file name")

    loader = parser.options.include_loader
    if loader is None:
        parser.fail(SchemaSyntaxError, PARSER_INCLUDE_DISABLED, hash_token)

    try:
        resolved_path, text = loader(path_token.text, parser.source_path)
    except (OSError, UnicodeDecodeError) as err:
        parser.enter(ParserState.ERROR)
        raise SchemaSyntaxError(
            parser.diagnostic(PARSER_INCLUDE_FAILED, path_token, f'"{path_token.text}" ({err})')
        ) from err

    stack = parser.session.include_stack
    if resolved_path == parser.source_path or resolved_path in stack:
        chain = " -> ".join([*stack, parser.source_path, resolved_path])
        parser.fail(SchemaSyntaxError, PARSER_INCLUDE_CYCLE, path_token, chain)

    logger.debug("including %s from %s", resolved_path, parser.source_path)
    stack.append(parser.source_path)
    try:
        included = Parser(
            TokenSource(iter_tokens(text), source_path=resolved_path),
            parser.options,
            session=parser.session,
        )
        parse_declarations(included)
    finally:
        stack.pop()


def resolve_pending_references(parser: Parser) -> None:
    for pending in parser.session.pending_references:
        if pending.token.text not in parser.symbols:
            _fail_unknown_type(parser, pending.token, pending.source_path)
    parser.session.pending_references.clear()


def _expect_terminator(parser: Parser) -> None:
    if parser.options.lenient_semicolons:
        parser.eat(TokenKind.SEMICOLON)
    else:
        parser.expect(TokenKind.SEMICOLON)


def _fail_unknown_type(parser: Parser, token: Token, source_path: str) -> NoReturn:
    parser.enter(ParserState.ERROR)
    diagnostic = Diagnostic.from_spec(
        SCHEMA_UNKNOWN_TYPE,
        range=token.range,
        position=token.position,
        detail=f"'{token.text}'",
        source_path=source_path,
    )
    raise UnknownTypeError(diagnostic, token.text)
