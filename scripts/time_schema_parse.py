#!/usr/bin/env python3
"""Quick perf benchmark for schema parsing and symbol table lookups."""

from __future__ import annotations

import argparse
import cProfile
import io
from pathlib import Path
import pstats
import statistics
import time

from tqdm import tqdm

from jsongenpy.parser import ParseMode, parse_schema, parse_schema_file
from jsongenpy.schema import SymbolTable


def _collect_schema_files(root: Path) -> list[Path]:
    files = sorted([*root.rglob("*.schema"), *root.rglob("*.json-gen-c")])
    return [path for path in files if path.is_file()]


def _synthetic_schema(struct_count: int) -> str:
    """One flat struct per name; every struct after the first embeds its predecessor."""
    parts = ["struct S0 { int id; sstring name; double values[4]; };"]
    for index in range(1, struct_count):
        parts.append(f"struct S{index} {{ long id; S{index - 1} prev; bool flags[8]; }};")
    return "\n".join(parts) + "\n"


def _run_files_once(
    files: list[Path],
    *,
    mode: ParseMode,
    label: str,
    show_progress: bool,
) -> tuple[float, int, int]:
    start = time.perf_counter()
    total_structs = 0
    total_errors = 0
    iterator = tqdm(files, desc=label, unit="file") if show_progress else files
    for path in iterator:
        parsed = parse_schema_file(path, mode=mode)
        total_structs += len(parsed.schema)
        total_errors += len(parsed.diagnostics)
    duration = time.perf_counter() - start
    return duration, total_structs, total_errors


def _run_synthetic_once(
    source: str,
    *,
    mode: ParseMode,
    fixed_buckets: bool,
) -> tuple[float, int]:
    symbols = SymbolTable(max_load_factor=None) if fixed_buckets else SymbolTable()
    start = time.perf_counter()
    schema = parse_schema(source, mode=mode, symbols=symbols)
    duration = time.perf_counter() - start
    return duration, len(schema)


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark struct definition parsing throughput")
    parser.add_argument(
        "--schema-root",
        type=Path,
        default=None,
        help="Directory of *.schema files to parse (default: generate a synthetic schema)",
    )
    parser.add_argument(
        "--structs",
        type=int,
        default=5000,
        help="Struct count for the synthetic schema (default: 5000)",
    )
    parser.add_argument(
        "--fixed-buckets",
        action="store_true",
        help="Use a fixed 128-bucket symbol table (no resize) for the synthetic schema",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ParseMode],
        default=ParseMode.STRICT.value,
        help="Parser mode (default: strict)",
    )
    parser.add_argument("--runs", type=int, default=5, help="Measured runs")
    parser.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Run cProfile and print top hotspots",
    )
    parser.add_argument(
        "--profile-top",
        type=int,
        default=30,
        help="Number of cProfile rows to print (default: 30)",
    )
    parser.add_argument(
        "--profile-sort",
        type=str,
        default="tottime",
        help="cProfile sort key (default: tottime, common: cumulative)",
    )
    args = parser.parse_args()

    mode = ParseMode(args.mode)
    show_progress = not args.no_progress
    warmups = max(args.warmups, 0)
    runs = max(args.runs, 1)

    files: list[Path] = []
    source = ""
    if args.schema_root is not None:
        if not args.schema_root.is_dir():
            raise SystemExit(f"Invalid --schema-root: {args.schema_root}")
        files = _collect_schema_files(args.schema_root)
        if not files:
            raise SystemExit(f"No schema files found under {args.schema_root}")
    else:
        source = _synthetic_schema(max(args.structs, 1))

    def _run_once(label: str) -> tuple[float, int, int]:
        if files:
            return _run_files_once(files, mode=mode, label=label, show_progress=show_progress)
        duration, structs = _run_synthetic_once(source, mode=mode, fixed_buckets=args.fixed_buckets)
        return duration, structs, 0

    def _benchmark() -> tuple[list[float], int, int]:
        run_labels = [f"warmup {i + 1}/{warmups}" for i in range(warmups)]
        run_labels += [f"run {i + 1}/{runs}" for i in range(runs)]
        iterator = run_labels if files or not show_progress else tqdm(run_labels, desc="synthetic", unit="run")

        timings: list[float] = []
        structs_count = 0
        errors_count = 0
        for index, label in enumerate(iterator):
            duration, structs_count, errors_count = _run_once(label)
            if index >= warmups:
                timings.append(duration)
        return timings, structs_count, errors_count

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        timings, structs_count, errors_count = _benchmark()
        profiler.disable()
        stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.sort_stats(args.profile_sort).print_stats(max(args.profile_top, 1))
        print("\n[cProfile top functions]")
        print(stream.getvalue())
    else:
        timings, structs_count, errors_count = _benchmark()

    best = min(timings)
    worst = max(timings)
    mean = statistics.mean(timings)
    median = statistics.median(timings)

    print(f"Dataset: {args.schema_root or f'synthetic ({args.structs} structs)'}")
    print(f"Files: {len(files)}")
    print(f"Structs: {structs_count}")
    print(f"Errors: {errors_count}")
    print(f"Runs: {len(timings)} (warmups={warmups})")
    print(f"Best:   {best:.4f}s")
    print(f"Median: {median:.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Worst:  {worst:.4f}s")
    print(f"Structs/s (mean): {structs_count / mean:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
