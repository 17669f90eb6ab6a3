"""Lexer."""

from collections.abc import Iterator

from jsongenpy.diagnostics import Diagnostic, DiagnosticSpec
from jsongenpy.diagnostics.codes import (
    LEXER_UNRECOGNIZED_CHARACTER,
    LEXER_UNTERMINATED_COMMENT,
    LEXER_UNTERMINATED_STRING,
)
from jsongenpy.lexer.tokens import Token, TokenFlags, TokenKind
from jsongenpy.text import Position, TextRange, TextSize

_PUNCTUATION: dict[str, TokenKind] = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ";": TokenKind.SEMICOLON,
    "#": TokenKind.HASH,
}

_STRING_DELIMITERS: dict[str, str] = {'"': '"', "<": ">"}


class Lexer:
    """Skips whitespace and comments and emits significant tokens only.

    Never raises: characters outside the token grammar come back as
    `TokenKind.ERROR` tokens and the parser decides what to do with them.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._position = 0
        self._line = 1
        self._column = 1
        self._diagnostics: list[Diagnostic] = []
        # last two significant tokens, most recent first
        self._recent: tuple[Token | None, Token | None] = (None, None)

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """One diagnostic per error token emitted so far."""
        return self._diagnostics

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    def next_token(self) -> Token:
        skipped = self._skip_trivia()
        if isinstance(skipped, Token):
            return self._remember(skipped)

        start = self._position
        start_position = Position(self._line, self._column)
        flags = TokenFlags.PRECEDING_LINE_BREAK if skipped else TokenFlags.NONE

        if self.is_eof:
            return Token(TokenKind.EOF, "", TextRange.empty(TextSize(start)), start_position, flags)

        kind, flags = self._lex_token(flags)
        text = self._source[start : self._position]
        if kind == TokenKind.STRING:
            text = text[1:-1]

        token = Token(kind, text, TextRange(start, self._position), start_position, flags)
        if kind == TokenKind.ERROR:
            self._record_error(token)
        return self._remember(token)

    def lex(self) -> list[Token]:
        """Lex the remaining input, including the final EOF token."""
        tokens: list[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.kind == TokenKind.EOF:
                break
        return tokens

    def __iter__(self) -> Iterator[Token]:
        return iter_tokens(self._source)

    def _lex_token(self, flags: TokenFlags) -> tuple[TokenKind, TokenFlags]:
        ch = self._current_char()

        if ch == '"' or (ch == "<" and self._at_include_path()):
            return self._lex_string(ch, flags)

        if _is_digit(ch):
            return self._lex_number(), flags

        if ch == "-" and _is_digit(self._peek_char()):
            self._advance(1)
            return self._lex_number(), flags

        if _is_identifier_start(ch):
            return self._lex_identifier(), flags

        kind = _PUNCTUATION.get(ch)
        if kind is not None:
            self._advance(1)
            return kind, flags

        self._advance(1)
        return TokenKind.ERROR, flags

    def _skip_trivia(self) -> bool | Token:
        """Skip whitespace and comments.

        Returns whether a newline was skipped, or an error token for an
        unterminated block comment.
        """
        saw_newline = False
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\n":
                saw_newline = True
                self._advance(1)
                continue
            if ch in " \t\r":
                self._advance(1)
                continue
            if ch == "/" and self._peek_char() == "/":
                while not self.is_eof and self._current_char() != "\n":
                    self._advance(1)
                continue
            if ch == "/" and self._peek_char() == "*":
                start = self._position
                start_position = Position(self._line, self._column)
                end = self._source.find("*/", start + 2)
                if end == -1:
                    self._advance(len(self._source) - start)
                    token = Token(
                        TokenKind.ERROR,
                        self._source[start:],
                        TextRange(start, self._position),
                        start_position,
                        TokenFlags.UNTERMINATED,
                    )
                    self._record_error(token)
                    return token
                self._advance(end + 2 - start)
                continue
            break
        return saw_newline

    def _lex_string(self, opening: str, flags: TokenFlags) -> tuple[TokenKind, TokenFlags]:
        closing = _STRING_DELIMITERS[opening]
        flags |= TokenFlags.WAS_QUOTED if opening == '"' else TokenFlags.WAS_ANGLED
        end = self._source.find(closing, self._position + 1)
        if end == -1:
            self._advance(len(self._source) - self._position)
            return TokenKind.ERROR, flags | TokenFlags.UNTERMINATED
        self._advance(end + 1 - self._position)
        return TokenKind.STRING, flags

    def _lex_number(self) -> TokenKind:
        kind = TokenKind.INT
        self._consume_digits()
        if self._current_char() == "." and _is_digit(self._peek_char()):
            kind = TokenKind.FLOAT
            self._advance(1)
            self._consume_digits()
        if self._current_char() in "eE":
            sign = self._peek_char()
            if _is_digit(sign):
                kind = TokenKind.FLOAT
                self._advance(1)
                self._consume_digits()
            elif sign in "+-" and _is_digit(self._peek_char(2)):
                kind = TokenKind.FLOAT
                self._advance(2)
                self._consume_digits()
        return kind

    def _lex_identifier(self) -> TokenKind:
        self._advance(1)
        while not self.is_eof and _is_identifier_continue(self._current_char()):
            self._advance(1)
        return TokenKind.IDENTIFIER

    def _consume_digits(self) -> None:
        while not self.is_eof and _is_digit(self._current_char()):
            self._advance(1)

    def _remember(self, token: Token) -> Token:
        self._recent = (token, self._recent[0])
        return token

    def _at_include_path(self) -> bool:
        """`<...>` is a path literal only right after `# include`."""
        last, before = self._recent
        return (
            last is not None
            and before is not None
            and last.kind == TokenKind.IDENTIFIER
            and last.text == "include"
            and before.kind == TokenKind.HASH
        )

    def _record_error(self, token: Token) -> None:
        self._diagnostics.append(error_token_diagnostic(token))

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        for ch in self._source[self._position : self._position + steps]:
            if ch == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
        self._position = min(self._position + steps, len(self._source))


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_identifier_start(ch: str) -> bool:
    return ch == "_" or (ch.isascii() and ch.isalpha())


def _is_identifier_continue(ch: str) -> bool:
    return ch == "_" or (ch.isascii() and ch.isalnum())


def _error_token_spec(token: Token) -> DiagnosticSpec:
    if token.flags & TokenFlags.UNTERMINATED:
        if token.text.startswith("/*"):
            return LEXER_UNTERMINATED_COMMENT
        return LEXER_UNTERMINATED_STRING
    return LEXER_UNRECOGNIZED_CHARACTER


def error_token_diagnostic(token: Token, *, source_path: str = "<memory>") -> Diagnostic:
    """Describe an `ERROR` token: the offending character, or the unclosed construct."""
    unterminated = bool(token.flags & TokenFlags.UNTERMINATED)
    return Diagnostic.from_spec(
        _error_token_spec(token),
        range=token.range,
        position=token.position,
        detail=None if unterminated else repr(token.text[:1]),
        source_path=source_path,
    )


def iter_tokens(source: str) -> Iterator[Token]:
    """Lazily lex `source` from the start, ending with the EOF token."""
    lexer = Lexer(source)
    while True:
        token = lexer.next_token()
        yield token
        if token.kind == TokenKind.EOF:
            return


def dump_tokens(tokens: list[Token]) -> str:
    """Format a token list with kind, position, range and text for debugging."""
    lines = []
    for i, tok in enumerate(tokens):
        lines.append(
            f"{i:03d} {tok.kind.name:<10} at={tok.position!s:<7} range={tok.range.as_tuple()} "
            f"flags={tok.flags!r} text={tok.text!r}"
        )
    return "\n".join(lines)
