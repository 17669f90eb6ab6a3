"""Lexer."""

from jsongenpy.lexer.lexer import Lexer, dump_tokens, error_token_diagnostic, iter_tokens
from jsongenpy.lexer.tokens import Token, TokenFlags, TokenKind

__all__ = [
    "Lexer",
    "Token",
    "TokenFlags",
    "TokenKind",
    "dump_tokens",
    "error_token_diagnostic",
    "iter_tokens",
]
