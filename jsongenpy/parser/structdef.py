"""High-level parse entrypoints for struct definition text."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from jsongenpy.diagnostics import SchemaError
from jsongenpy.lexer import Token, iter_tokens
from jsongenpy.parser.grammar import parse_schema_file_contents
from jsongenpy.parser.options import ParseMode, ParserOptions
from jsongenpy.parser.parser import Parser, ParseSession
from jsongenpy.parser.token_source import TokenSource
from jsongenpy.schema import SchemaModel, SymbolTable

if TYPE_CHECKING:
    from jsongenpy.pipeline import SchemaParseResult


def _resolve_options(
    options: ParserOptions | None,
    mode: ParseMode | None,
) -> ParserOptions:
    if mode is not None and options is not None:
        raise ValueError("Pass either options or mode, not both")

    if options is not None:
        return options

    if mode is not None:
        return ParserOptions.for_mode(mode)

    return ParserOptions()


def parse_tokens(
    tokens: Iterable[Token],
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
    source_path: str = "<memory>",
    symbols: SymbolTable | None = None,
) -> SchemaModel:
    """Parse a token stream ending in EOF. Raises `SchemaError` on the first problem."""
    resolved_options = _resolve_options(options=options, mode=mode)
    session = ParseSession(symbols=symbols if symbols is not None else SymbolTable())
    source = TokenSource(tokens, source_path=source_path)
    parser = Parser(source, options=resolved_options, session=session)
    return parse_schema_file_contents(parser)


def parse_schema(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
    source_path: str = "<memory>",
    symbols: SymbolTable | None = None,
) -> SchemaModel:
    """Parse schema text. Raises `SchemaError` on the first problem."""
    return parse_tokens(
        iter_tokens(text),
        options=options,
        mode=mode,
        source_path=source_path,
        symbols=symbols,
    )


def parse_result(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
    source_path: str = "<memory>",
) -> SchemaParseResult:
    """Parse schema text into a result carrier; errors become diagnostics."""
    from jsongenpy.pipeline import SchemaParseResult

    resolved_options = _resolve_options(options=options, mode=mode)
    symbols = SymbolTable()
    try:
        schema = parse_schema(text, resolved_options, source_path=source_path, symbols=symbols)
    except SchemaError as err:
        return SchemaParseResult(
            source_text=text,
            source_path=source_path,
            options=resolved_options,
            schema=SchemaModel(),
            symbols=symbols,
            error=err,
        )

    return SchemaParseResult(
        source_text=text,
        source_path=source_path,
        options=resolved_options,
        schema=schema,
        symbols=symbols,
    )


def load_include_file(requested: str, including_path: str) -> tuple[str, str]:
    """Resolve `#include` paths relative to the including file's directory."""
    if including_path.startswith("<"):
        base = Path.cwd()
    else:
        base = Path(including_path).parent
    resolved = os.path.normpath(base / requested)
    return resolved, Path(resolved).read_text(encoding="utf-8")


def parse_schema_file(
    path: str | Path,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> SchemaParseResult:
    """Read a schema file (UTF-8) and parse it with `#include` support enabled."""
    resolved_options = _resolve_options(options=options, mode=mode)
    if resolved_options.include_loader is None:
        resolved_options = dataclasses.replace(resolved_options, include_loader=load_include_file)

    source_path = os.path.normpath(path)
    text = Path(source_path).read_text(encoding="utf-8")
    return parse_result(text, resolved_options, source_path=source_path)
