#!/usr/bin/env python
import argparse
from pathlib import Path

from jsongenpy.lexer import Lexer, Token, TokenFlags


def format_token(idx: int, token: Token) -> str:
    base = (
        f"[{idx}] kind={token.kind.name} "
        f"text={token.text!r} "
        f"at={token.position} "
        f"range={token.range.as_tuple()}"
    )

    if token.flags & TokenFlags.WAS_QUOTED:
        return base + " quoted"
    if token.flags & TokenFlags.WAS_ANGLED:
        return base + " angled"
    if token.flags & TokenFlags.UNTERMINATED:
        return base + " unterminated"
    return base


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump the tokens of a struct definition file")
    parser.add_argument("input", type=Path, help="Schema file to lex")
    parser.add_argument("--output", type=Path, default=None, help="Write tokens here instead of stdout")
    args = parser.parse_args()

    text = args.input.read_text(encoding="utf-8")

    lexer = Lexer(text)
    tokens = lexer.lex()
    lines = [format_token(idx, token) for idx, token in enumerate(tokens)]

    if args.output is None:
        print("\n".join(lines))
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with args.output.open("w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
        print(f"Wrote {len(tokens)} tokens to {args.output}")

    for diagnostic in lexer.diagnostics:
        print(diagnostic.render())


if __name__ == "__main__":
    main()
