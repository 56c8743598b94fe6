"""Ranked comparison report built from the stats sidecars of a run."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from pydantic import ValidationError
from tabulate import tabulate

from minify_bench.errors import MissingArtifactsError
from minify_bench.models.artifact import CandidateArtifact
from minify_bench.models.result import BenchmarkRun, PluginFailure
from minify_bench.models.stats import StatsRecord

log = logging.getLogger(__name__)

KiB = 1024
MiB = 1024 * 1024
SECOND_MS = 1000

COMPOSITE_MARKER = "+"
VARIANT_SEPARATOR = "_"
WINNER = "🏆 "
NO_WINNER = "   "

HEADERS = (
    "name",
    "version",
    "time",
    "x",
    "size",
    "%",
    "brotli ⬇",
    "% ",
    "package",
)


@dataclass(frozen=True, kw_only=True)
class ArtifactStats:
    """Stats of one artifact whose sidecar was read successfully."""

    name: str
    stats: StatsRecord
    is_baseline: bool = False


@dataclass(frozen=True, kw_only=True)
class RankedRow:
    """One rendered report row."""

    name: str
    version: str
    time: str
    multiplier: str
    size: str
    size_change: str
    brotli_size: str
    brotli_change: str
    link: str

    def cells(self) -> Sequence[str]:
        """Cells in column order."""
        return (
            self.name,
            self.version,
            self.time,
            self.multiplier,
            self.size,
            self.size_change,
            self.brotli_size,
            self.brotli_change,
            self.link,
        )


@dataclass(frozen=True, kw_only=True)
class Report:
    """Rendered rows plus every failure to list below the table."""

    rows: Sequence[RankedRow]
    errors: Sequence[tuple[str, Sequence[PluginFailure]]]


def load_stats(
    artifacts: Sequence[CandidateArtifact],
) -> tuple[Sequence[ArtifactStats], Sequence[tuple[str, PluginFailure]]]:
    """Read the sidecar of every artifact that has one.

    Missing sidecars are skipped silently; the plugin's failure is already
    recorded by the orchestrator. Sidecars that cannot be read or do not match
    the schema are rejected and returned as failures.
    """
    loaded: list[ArtifactStats] = []
    rejected: list[tuple[str, PluginFailure]] = []

    for artifact in artifacts:
        if not artifact.stats_file.exists():
            continue
        try:
            stats = StatsRecord.read(artifact.stats_file)
        except (ValidationError, OSError) as exc:
            log.warning("Rejected stats sidecar of %s", artifact.name)
            rejected.append(
                (
                    artifact.name,
                    PluginFailure(
                        stage="stats",
                        message=f"Invalid stats file {artifact.stats_file}:\n{exc}",
                    ),
                )
            )
            continue
        loaded.append(
            ArtifactStats(name=artifact.name, stats=stats, is_baseline=artifact.is_baseline)
        )

    return loaded, rejected


def rank(entries: Sequence[ArtifactStats]) -> Sequence[ArtifactStats]:
    """Pin the baseline first and sort the rest by brotli size, size, then time.

    Raises:
        MissingArtifactsError: If there is nothing to rank or no baseline

    """
    if not entries:
        raise MissingArtifactsError("Missing output files.")

    baselines = [entry for entry in entries if entry.is_baseline]
    if not baselines:
        raise MissingArtifactsError("Missing baseline output files.")

    candidates = sorted(
        (entry for entry in entries if not entry.is_baseline),
        key=lambda entry: (entry.stats.brotli_size, entry.stats.size, entry.stats.time),
    )
    return [baselines[0], *candidates]


def make_rows(
    ranked: Sequence[ArtifactStats],
    lookup_version: Callable[[str], str] | None = None,
) -> Sequence[RankedRow]:
    """Render ranked stats into rows with winner markers and deltas.

    Args:
        ranked: Output of :func:`rank`, baseline first
        lookup_version: Maps a package name to its installed version

    """
    lookup = lookup_version or installed_version
    baseline, *candidates = ranked

    fastest = min((entry.stats.time for entry in candidates), default=0.0)
    smallest_size = min(entry.stats.size for entry in ranked)
    smallest_brotli_size = min(entry.stats.brotli_size for entry in ranked)

    rows: list[RankedRow] = []
    for entry in ranked:
        stats = entry.stats
        package = None if entry.is_baseline else package_name(entry.name)

        rows.append(
            RankedRow(
                name=entry.name,
                version="" if package is None else lookup(package),
                time=""
                if entry.is_baseline
                else winner(stats.time, fastest) + print_duration_ms(stats.time),
                multiplier="" if entry.is_baseline else multiplier(stats.time, fastest),
                size=winner(stats.size, smallest_size) + print_file_size(stats.size),
                size_change=""
                if entry.is_baseline
                else percentage_change(stats.size, baseline.stats.size),
                brotli_size=winner(stats.brotli_size, smallest_brotli_size)
                + print_file_size(stats.brotli_size),
                brotli_change=""
                if entry.is_baseline
                else percentage_change(stats.brotli_size, baseline.stats.brotli_size),
                link="" if package is None else f"https://pypi.org/project/{package}/",
            )
        )

    return rows


def build_report(run: BenchmarkRun) -> Report:
    """Read the run's sidecars and build the ranked report."""
    artifacts = [
        run.baseline,
        *(outcome.artifact for outcome in run.outcomes if outcome.measured),
    ]
    entries, rejected = load_stats(artifacts)
    rows = make_rows(rank(entries))

    failures: dict[str, list[PluginFailure]] = {}
    for outcome in run.outcomes:
        if outcome.failures:
            failures.setdefault(outcome.name, []).extend(outcome.failures)
    for name, failure in rejected:
        failures.setdefault(name, []).append(failure)

    return Report(rows=rows, errors=list(failures.items()))


def render_table(report: Report) -> str:
    """Render the report table followed by one block per failed plugin."""
    table = tabulate(
        [row.cells() for row in report.rows],
        headers=HEADERS,
        tablefmt="simple_outline",
        disable_numparse=True,
    )
    blocks = [table]
    for name, failures in report.errors:
        blocks.append(f"### {name} error")
        blocks.extend(failure.message.rstrip() for failure in failures)
    return "\n".join(blocks)


def format_output(report: Report) -> dict[str, Any]:
    """Format the report for JSON output."""
    return {
        "rows": [asdict(row) for row in report.rows],
        "errors": [
            {"name": name, "stage": failure.stage, "message": failure.message}
            for name, failures in report.errors
            for failure in failures
        ],
    }


def package_name(name: str) -> str | None:
    """Derive the distribution name of a plugin, None for composites.

    ``terser_tweaked`` resolves to ``terser``; ``a+b`` has no single package.
    """
    if COMPOSITE_MARKER in name:
        return None
    return name.split(VARIANT_SEPARATOR, 1)[0]


def installed_version(package: str) -> str:
    """Installed version of a distribution, empty when it is not installed."""
    try:
        return version(package)
    except PackageNotFoundError:
        log.debug("Package %s is not installed", package)
        return ""


def to_fixed(n: float) -> str:
    """Format with as many decimals (2, 1 or 0) as fit in four characters."""
    for decimals in (2, 1):
        text = f"{n:.{decimals}f}"
        if len(text) <= 4:
            return text
    return f"{n:.0f}"


def print_file_size(file_size: int) -> str:
    if file_size >= MiB:
        divided, unit = file_size / MiB, "MiB"
    else:
        divided, unit = file_size / KiB, "KiB"
    return f"{to_fixed(divided):>4} {unit}"


def print_duration_ms(duration_ms: float) -> str:
    if duration_ms < SECOND_MS:
        text = f"{to_fixed(duration_ms)} ms"
    else:
        text = f"{to_fixed(duration_ms / SECOND_MS)} s"
    return f"{text:>7}"


def multiplier(time: float, fastest: float) -> str:
    if fastest <= 0:
        return "x1" if time <= 0 else "x∞"
    return f"x{time / fastest:.0f}"


def percentage_change(value: int, baseline_value: int) -> str:
    """Relative change against the baseline, e.g. ``-20 %`` or ``-12.5 %``."""
    if baseline_value == 0:
        return ""
    text = f"{(value / baseline_value - 1) * 100:.1f}"
    if text == "-0.0":
        text = "0.0"
    text = text.removesuffix(".0")
    return f"{text} %".rjust(7)


def winner(value: float, winning_value: float) -> str:
    return WINNER if value == winning_value else NO_WINNER
