"""Command-line entrypoint for computing application hashes."""

from __future__ import annotations

import argparse
import json
import statistics
import sys
import time
from pathlib import Path
from typing import TextIO

from yeth.config import CliOverrides, EngineConfig, load_effective_config
from yeth.engine import HashEngine, HashResult
from yeth.errors import YethError
from yeth.output import format_digest, graph_payload, render_graph, write_versions


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for hash runs."""
    parser = argparse.ArgumentParser(
        prog="yeth",
        description="Compute content hashes for monorepo applications and their dependencies.",
    )
    parser.add_argument("-r", "--root", default=".", help="Root directory to search for apps.")
    parser.add_argument("-a", "--app", default=None, help="Only output the hash of this app.")
    parser.add_argument(
        "-H", "--hash-only", action="store_true", help="Print only the hash (requires --app)."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show timing statistics.")
    parser.add_argument("-g", "--show-graph", action="store_true", help="Show dependency graph.")
    parser.add_argument(
        "-w",
        "--write-versions",
        action="store_true",
        help="Save each app hash to yeth.version next to its yeth.toml.",
    )
    parser.add_argument("-s", "--short-hash", action="store_true", help="Print short hashes.")
    parser.add_argument("-l", "--short-hash-length", type=int, default=None)
    parser.add_argument("-j", "--workers", type=int, default=None)
    parser.add_argument("--run-log", default=None, help="Append a JSONL record per run.")
    parser.add_argument("--format", choices=("text", "json"), default="text")
    parser.add_argument("--bench", type=int, default=None, metavar="N")
    return parser


def main(
    argv: list[str] | None = None, out: TextIO | None = None, err: TextIO | None = None
) -> int:
    """Entrypoint for the yeth command."""
    out_stream = out if out is not None else sys.stdout
    err_stream = err if err is not None else sys.stderr
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.hash_only and args.app is None:
        parser.error("--hash-only requires --app")
    if args.bench is not None and args.bench < 1:
        parser.error("--bench must be >= 1")

    overrides = CliOverrides(
        workers=args.workers,
        short_hash_length=args.short_hash_length,
        run_log=Path(args.run_log) if args.run_log is not None else None,
    )
    try:
        config = load_effective_config(Path(args.root), overrides)
        engine = HashEngine(config)
        if args.bench is not None:
            return _run_benchmark(engine, args, out_stream)
        return _run(engine, config, args, out_stream)
    except YethError as exc:
        print(f"error[{exc.code}]: {exc.message}", file=err_stream)
        return 1


def _run(engine: HashEngine, config: EngineConfig, args: argparse.Namespace, out: TextIO) -> int:
    started = time.perf_counter()
    apps = engine.discover()

    if args.show_graph:
        if args.format == "json":
            out.write(json.dumps(graph_payload(apps), indent=2, sort_keys=True) + "\n")
        else:
            out.write(render_graph(apps))
        return 0

    result = engine.compute_all(apps) if args.app is None else engine.compute_for(args.app, apps)
    short_length = config.short_hash_length if args.short_hash else None

    if args.write_versions:
        write_versions(result, apps, short_length)

    if args.format == "json":
        payload = _result_payload(result, short_length, args.app)
        out.write(json.dumps(payload, indent=2, sort_keys=True) + "\n")
    elif args.app is not None:
        digest = format_digest(result.lookup(args.app), short_length)
        out.write(f"{digest}\n" if args.hash_only else f"{digest} {args.app}\n")
    else:
        for name, digest in result.items():
            out.write(f"{format_digest(digest, short_length)} {name}\n")

    if args.verbose:
        elapsed = time.perf_counter() - started
        out.write("\n")
        out.write(f"Execution time: {elapsed * 1000:.2f}ms\n")
        out.write(f"Applications processed: {len(result)}\n")
    return 0


def _result_payload(
    result: HashResult, short_length: int | None, app: str | None
) -> dict[str, object]:
    if app is not None:
        return {"hashes": {app: format_digest(result.lookup(app), short_length)}}
    return {
        "hashes": {name: format_digest(digest, short_length) for name, digest in result.items()}
    }


def _run_benchmark(engine: HashEngine, args: argparse.Namespace, out: TextIO) -> int:
    out.write(f"Running benchmark with {args.bench} iterations...\n\n")
    timings: list[float] = []
    app_count = 0
    for iteration in range(1, args.bench + 1):
        started = time.perf_counter()
        apps = engine.discover()
        result = (
            engine.compute_all(apps) if args.app is None else engine.compute_for(args.app, apps)
        )
        elapsed = time.perf_counter() - started
        timings.append(elapsed)
        app_count = len(result)
        if args.verbose:
            out.write(f"Iteration {iteration}: {elapsed * 1000:.2f}ms\n")

    out.write("Benchmark results:\n")
    out.write(f"  Iterations: {len(timings)}\n")
    out.write(f"  Applications processed: {app_count}\n")
    out.write(f"  Average time: {statistics.fmean(timings) * 1000:.2f}ms\n")
    out.write(f"  Median time: {statistics.median(timings) * 1000:.2f}ms\n")
    out.write(f"  Min time: {min(timings) * 1000:.2f}ms\n")
    out.write(f"  Max time: {max(timings) * 1000:.2f}ms\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
