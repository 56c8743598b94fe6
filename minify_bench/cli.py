"""CLI entry point for the minifier benchmark."""

import argparse
import asyncio
import json
import logging
import stat
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from minify_bench.errors import KnownError
from minify_bench.models.config import BenchConfig
from minify_bench.models.result import BenchmarkRun
from minify_bench.orchestrator import BenchOrchestrator
from minify_bench.plugins.loading import load_plugin_manifests
from minify_bench.report import build_report, format_output, render_table
from minify_bench.status import STATUS_SYMBOLS, StatusBoard


@dataclass(frozen=True, kw_only=True)
class DriverResult:
    """Outcome of a whole run, turned into an exit code only by :func:`main`."""

    status: Literal["success", "error"]
    message: str | None = None

    @property
    def exit_code(self) -> int:
        """Process exit code for this outcome."""
        return 0 if self.status == "success" else 1


def log_results_summary(log: logging.Logger, run: BenchmarkRun) -> None:
    """Log one line per plugin with its final state and failed stages."""
    log.info("=" * 80)
    log.info("Benchmark Summary:")
    log.info("=" * 80)

    for outcome in run.outcomes:
        log.info("%s %s: %s", STATUS_SYMBOLS[outcome.state], outcome.name, outcome.state)
        for failure in outcome.failures:
            log.info("  Failed stage: %s", failure.stage)

    log.info("%d of %d plugin(s) failed", len(run.failed), len(run.outcomes))


def check_input_file(path: Path) -> None:
    """Ensure the compiled program exists and is a regular file."""
    try:
        mode = path.stat().st_mode
    except OSError as exc:
        raise KnownError(f"Problem with the passed file: {exc}") from exc

    if not stat.S_ISREG(mode):
        raise KnownError(f"Problem with the passed file: {path} is not a file.")


async def run(config: BenchConfig, *, live_status: bool | None = None) -> DriverResult:
    """Run the benchmark and print the report.

    Individual plugin failures do not affect the result: they are listed
    under the report table.
    """
    log = logging.getLogger("minify_bench")

    try:
        check_input_file(config.input_file)
        plugins = load_plugin_manifests(config.plugins)
        log.info("Plugins: %s", ", ".join(plugin.name for plugin in plugins))

        status = StatusBoard([plugin.name for plugin in plugins], live=live_status)
        orchestrator = BenchOrchestrator(config=config, status=status)
        benchmark = await orchestrator.run(plugins)

        log_results_summary(log, benchmark)
        report = build_report(benchmark)
    except KnownError as exc:
        return DriverResult(status="error", message=str(exc))

    if config.json_output:
        print(json.dumps(format_output(report), indent=2))
    else:
        print(render_table(report))

    return DriverResult(status="success")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minify-bench",
        description="Benchmark and verify JavaScript minifiers on a compiled Elm program",
    )
    parser.add_argument(
        "input_file",
        type=Path,
        help="Compiled Elm .js file",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Directory for the generated artifacts (wiped on every run)",
    )
    parser.add_argument(
        "--plugin",
        dest="plugins",
        action="append",
        default=[],
        help="Only run the named plugin (repeatable)",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the report as JSON",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress instead of showing live status lines",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = BenchConfig(
        input_file=args.input_file,
        output_dir=args.output_dir,
        plugins=tuple(args.plugins),
        json_output=args.json_output,
        verbose=args.verbose,
    )
    result = asyncio.run(run(config, live_status=False if config.verbose else None))

    if result.message:
        print(result.message, file=sys.stderr)
    sys.exit(result.exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
