#!/usr/bin/env python3
"""Parse a struct definition file and print the resulting schema model."""

from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path

from jsongenpy.diagnostics import render_diagnostics
from jsongenpy.parser import ParseMode, ParserOptions, parse_schema_file
from jsongenpy.schema import StructContainer


def _format_struct(container: StructContainer) -> list[str]:
    lines = [f"struct {container.name} ({container.position})"]
    for item in container.fields:
        suffix = ""
        if item.array_width is not None:
            suffix = f"[{item.array_width or ''}]"
        lines.append(f"    {item.type_name} {item.name}{suffix}  # {item.type.name}")
    return lines


def main() -> int:
    parser = argparse.ArgumentParser(description="Parse a schema file and dump its struct definitions")
    parser.add_argument("input", type=Path, help="Schema file to parse")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ParseMode],
        default=ParseMode.STRICT.value,
        help="Parser mode (default: strict)",
    )
    parser.add_argument(
        "--forward-references",
        action="store_true",
        help="Allow fields to reference structs declared later",
    )
    parser.add_argument(
        "--dependency-order",
        action="store_true",
        help="Print structs with dependencies first instead of in declaration order",
    )
    parser.add_argument("--verbose", action="store_true", help="Log parser progress to stderr")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    options = ParserOptions.for_mode(ParseMode(args.mode))
    if args.forward_references:
        options = dataclasses.replace(options, allow_forward_references=True)

    result = parse_schema_file(args.input, options)
    if result.has_errors:
        print(render_diagnostics(result.diagnostics))
        return 1

    try:
        structs = result.schema.dependency_order() if args.dependency_order else result.schema.structs
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    for container in structs:
        print("\n".join(_format_struct(container)))
    print(f"{len(result.schema)} struct(s), {result.symbols.bucket_count} symbol buckets")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
