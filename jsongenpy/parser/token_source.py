"""Token source that feeds lexer output to the parser."""

from collections.abc import Iterable

from jsongenpy.diagnostics import LexicalError
from jsongenpy.lexer import Token, TokenKind, error_token_diagnostic


class TokenSource:
    """One-token window over a token stream (usually a `Lexer`).

    Raises `LexicalError` as soon as an `ERROR` token becomes current, so the
    parser never has to look at one.
    """

    def __init__(self, tokens: Iterable[Token], *, source_path: str = "<memory>") -> None:
        self._tokens = iter(tokens)
        self._source_path = source_path
        self._previous: Token | None = None
        self._current = self._next()

    @property
    def current(self) -> Token:
        return self._current

    @property
    def previous(self) -> Token | None:
        return self._previous

    @property
    def source_path(self) -> str:
        return self._source_path

    def bump(self) -> Token:
        """Consume the current token and return it. EOF is never consumed."""
        token = self._current
        if token.kind != TokenKind.EOF:
            self._previous = token
            self._current = self._next()
        return token

    def _next(self) -> Token:
        try:
            token = next(self._tokens)
        except StopIteration:
            raise ValueError("Token stream ended without an EOF token") from None
        if token.kind == TokenKind.ERROR:
            raise LexicalError(error_token_diagnostic(token, source_path=self._source_path))
        return token
