"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag

from jsongenpy.text import Position, TextRange


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1
    ERROR = 2

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENTIFIER = 20
    STRING = 21  # "..." or <...>
    INT = 22
    FLOAT = 23

    # -------------------------
    # Punctuation
    # -------------------------
    SEMICOLON = 41  # ;
    HASH = 47  # #

    LBRACE = 60  # {
    RBRACE = 61  # }
    LBRACKET = 62  # [
    RBRACKET = 63  # ]

    @property
    def display(self) -> str:
        """Human readable name used in "expected X" messages."""
        return _DISPLAY.get(self, self.name.lower())


_DISPLAY: dict[TokenKind, str] = {
    TokenKind.EOF: "end of input",
    TokenKind.ERROR: "invalid token",
    TokenKind.IDENTIFIER: "identifier",
    TokenKind.STRING: "string literal",
    TokenKind.INT: "integer literal",
    TokenKind.FLOAT: "floating literal",
    TokenKind.SEMICOLON: "';'",
    TokenKind.HASH: "'#'",
    TokenKind.LBRACE: "'{'",
    TokenKind.RBRACE: "'}'",
    TokenKind.LBRACKET: "'['",
    TokenKind.RBRACKET: "']'",
}


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PRECEDING_LINE_BREAK = 1 << 0
    WAS_QUOTED = 1 << 1  # "..."
    WAS_ANGLED = 1 << 2  # <...>
    UNTERMINATED = 1 << 3  # error token for an unclosed string/comment


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token.

    `text` is the token's source slice, except for strings where the
    delimiters are stripped.
    """

    kind: TokenKind
    text: str
    range: TextRange
    position: Position
    flags: TokenFlags = TokenFlags.NONE

    def has_preceding_line_break(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_LINE_BREAK)

    def describe(self) -> str:
        """Describe the token for "found Y" messages."""
        match self.kind:
            case TokenKind.EOF:
                return "end of input"
            case TokenKind.IDENTIFIER | TokenKind.INT | TokenKind.FLOAT:
                return f"'{self.text}'"
            case TokenKind.STRING:
                return f'"{self.text}"'
            case TokenKind.ERROR:
                return f"invalid character {self.text[:1]!r}"
            case _:
                return self.kind.display
