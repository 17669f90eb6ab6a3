"""Recursive-descent parser core: token cursor, state and error reporting."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import NoReturn

from jsongenpy.diagnostics import (
    PARSER_EXPECTED_TOKEN,
    Diagnostic,
    DiagnosticSpec,
    LexicalError,
    SchemaError,
    SchemaSyntaxError,
)
from jsongenpy.lexer import Token, TokenKind
from jsongenpy.parser.options import ParserOptions
from jsongenpy.parser.token_source import TokenSource
from jsongenpy.schema import StructContainer, StructContainerBuilder, SymbolTable


class ParserState(StrEnum):
    """Where in a declaration the parser is; ERROR once it has failed."""

    EXPECT_STRUCT_KEYWORD = "expect_struct_keyword"
    EXPECT_STRUCT_NAME = "expect_struct_name"
    EXPECT_OPEN_BRACE = "expect_open_brace"
    EXPECT_FIELD_OR_CLOSE_BRACE = "expect_field_or_close_brace"
    EXPECT_FIELD_NAME = "expect_field_name"
    EXPECT_ARRAY_WIDTH_OR_SEMICOLON = "expect_array_width_or_semicolon"
    EXPECT_SEMICOLON = "expect_semicolon"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class PendingReference:
    """A struct reference left for resolution after the whole input is read."""

    token: Token
    source_path: str


@dataclass(slots=True)
class ParseSession:
    """State shared by the top-level parser and the parsers of included files."""

    symbols: SymbolTable = field(default_factory=SymbolTable)
    structs: list[StructContainer] = field(default_factory=list)
    pending_references: list[PendingReference] = field(default_factory=list)
    include_stack: list[str] = field(default_factory=list)


class Parser:
    """Token cursor over one source text.

    Errors are raised (never collected): the first problem aborts the parse.
    """

    def __init__(
        self,
        source: TokenSource,
        options: ParserOptions | None = None,
        *,
        session: ParseSession | None = None,
    ) -> None:
        self._source = source
        self._options = options or ParserOptions()
        self._session = session or ParseSession()
        self._state = ParserState.EXPECT_STRUCT_KEYWORD
        self._current_struct: StructContainerBuilder | None = None

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def session(self) -> ParseSession:
        return self._session

    @property
    def symbols(self) -> SymbolTable:
        return self._session.symbols

    @property
    def source_path(self) -> str:
        return self._source.source_path

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def current(self) -> Token:
        return self._source.current

    @property
    def current_struct(self) -> StructContainerBuilder | None:
        """The struct whose body is being parsed, if any."""
        return self._current_struct

    def enter(self, state: ParserState) -> None:
        self._state = state

    def begin_struct(self, builder: StructContainerBuilder) -> None:
        self._current_struct = builder

    def end_struct(self) -> None:
        self._current_struct = None

    def at(self, kind: TokenKind) -> bool:
        return self.current.kind == kind

    def at_keyword(self, keyword: str) -> bool:
        return self.current.kind == TokenKind.IDENTIFIER and self.current.text == keyword

    def bump(self) -> Token:
        try:
            return self._source.bump()
        except LexicalError:
            self._state = ParserState.ERROR
            raise

    def eat(self, kind: TokenKind) -> Token | None:
        if self.at(kind):
            return self.bump()
        return None

    def eat_keyword(self, keyword: str) -> Token | None:
        if self.at_keyword(keyword):
            return self.bump()
        return None

    def expect(self, kind: TokenKind, expected: str | None = None) -> Token:
        """Consume a token of `kind` or fail with "expected X, found Y"."""
        if self.at(kind):
            return self.bump()
        self.error_expected(expected or kind.display)

    def error_expected(self, expected: str, token: Token | None = None) -> NoReturn:
        token = token or self.current
        self.fail(
            SchemaSyntaxError,
            PARSER_EXPECTED_TOKEN,
            token,
            f"expected {expected}, found {token.describe()}",
        )

    def diagnostic(self, spec: DiagnosticSpec, token: Token, detail: str | None = None) -> Diagnostic:
        return Diagnostic.from_spec(
            spec,
            range=token.range,
            position=token.position,
            detail=detail,
            source_path=self.source_path,
        )

    def fail(
        self,
        error_type: type[SchemaError],
        spec: DiagnosticSpec,
        token: Token,
        detail: str | None = None,
    ) -> NoReturn:
        self._state = ParserState.ERROR
        raise error_type(self.diagnostic(spec, token, detail))
