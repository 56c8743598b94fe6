"""Tests for the report builder."""

from pathlib import Path

import pytest

from minify_bench.errors import MissingArtifactsError
from minify_bench.models.artifact import CandidateArtifact
from minify_bench.models.result import BenchmarkRun, PluginFailure, PluginOutcome
from minify_bench.models.stats import StatsRecord
from minify_bench.report import (
    ArtifactStats,
    Report,
    build_report,
    format_output,
    load_stats,
    make_rows,
    multiplier,
    package_name,
    percentage_change,
    print_duration_ms,
    print_file_size,
    rank,
    render_table,
    to_fixed,
)
from minify_bench.testing.factories import PluginFailureFactory


def _entry(
    name: str, time: float, size: int, brotli_size: int, *, is_baseline: bool = False
) -> ArtifactStats:
    return ArtifactStats(
        name=name,
        stats=StatsRecord(time=time, size=size, brotli_size=brotli_size),
        is_baseline=is_baseline,
    )


def _no_versions(package: str) -> str:
    return ""


BASELINE = _entry("baseline", 1.0, 1000, 400, is_baseline=True)


class TestRank:
    """Tests for rank."""

    def test_pins_baseline_first_even_when_smallest(self) -> None:
        """Keeps the baseline on top regardless of its size."""
        baseline = _entry("baseline", 0.1, 10, 5, is_baseline=True)
        other = _entry("terser", 5.0, 800, 300)

        assert [e.name for e in rank([other, baseline])] == ["baseline", "terser"]

    def test_sorts_by_brotli_size_then_size_then_time(self) -> None:
        """Breaks ties lexicographically on (brotliSize, size, time)."""
        entries = [
            BASELINE,
            _entry("slow", 9.0, 700, 300),
            _entry("fast", 2.0, 700, 300),
            _entry("bigger", 1.0, 750, 300),
            _entry("smallest", 50.0, 900, 250),
        ]

        ranked = rank(entries)

        assert [e.name for e in ranked] == ["baseline", "smallest", "fast", "slow", "bigger"]
        candidates = ranked[1:]
        for a, b in zip(candidates, candidates[1:]):
            key_a = (a.stats.brotli_size, a.stats.size, a.stats.time)
            key_b = (b.stats.brotli_size, b.stats.size, b.stats.time)
            assert key_a <= key_b

    def test_keeps_input_order_for_complete_ties(self) -> None:
        """Is stable when all keys are equal."""
        entries = [BASELINE, _entry("b", 1.0, 10, 5), _entry("a", 1.0, 10, 5)]

        assert [e.name for e in rank(entries)] == ["baseline", "b", "a"]

    def test_raises_without_any_entries(self) -> None:
        """Fails loudly when no sidecar exists."""
        with pytest.raises(MissingArtifactsError, match="Missing output files"):
            rank([])

    def test_raises_without_baseline(self) -> None:
        """Fails loudly when only plugin sidecars exist."""
        with pytest.raises(MissingArtifactsError, match="baseline"):
            rank([_entry("terser", 1.0, 10, 5)])


class TestMakeRows:
    """Tests for make_rows."""

    def test_baseline_has_no_time_or_percentage_columns(self) -> None:
        """Leaves time, multiplier and deltas empty for the baseline."""
        rows = make_rows([BASELINE, _entry("terser", 10.0, 800, 200)], _no_versions)

        baseline_row = rows[0]
        assert baseline_row.name == "baseline"
        assert baseline_row.time == ""
        assert baseline_row.multiplier == ""
        assert baseline_row.size_change == ""
        assert baseline_row.brotli_change == ""
        assert baseline_row.version == ""
        assert baseline_row.link == ""

    def test_percentage_against_baseline(self) -> None:
        """Renders size 800 against baseline 1000 as -20 %."""
        rows = make_rows([BASELINE, _entry("terser", 10.0, 800, 200)], _no_versions)

        assert rows[1].size_change.strip() == "-20 %"
        assert rows[1].brotli_change.strip() == "-50 %"

    def test_marks_every_winner_per_column(self) -> None:
        """Marks all rows tying for a column minimum."""
        rows = make_rows(
            [
                BASELINE,
                _entry("a", 10.0, 800, 200),
                _entry("b", 10.0, 700, 200),
                _entry("c", 30.0, 700, 250),
            ],
            _no_versions,
        )

        assert [row.time.startswith("🏆") for row in rows] == [False, True, True, False]
        assert [row.size.startswith("🏆") for row in rows] == [False, False, True, True]
        assert [row.brotli_size.startswith("🏆") for row in rows] == [
            False,
            True,
            True,
            False,
        ]

    def test_baseline_takes_part_in_size_columns(self) -> None:
        """Marks the baseline when no plugin beats it."""
        rows = make_rows([BASELINE, _entry("bloat", 1.0, 2000, 800)], _no_versions)

        assert rows[0].size.startswith("🏆")
        assert rows[0].brotli_size.startswith("🏆")
        assert rows[1].time.startswith("🏆")

    def test_multiplier_relative_to_fastest(self) -> None:
        """Shows how many times slower than the fastest plugin."""
        rows = make_rows(
            [BASELINE, _entry("fast", 10.0, 800, 200), _entry("slow", 42.0, 900, 300)],
            _no_versions,
        )

        assert rows[1].multiplier == "x1"
        assert rows[2].multiplier == "x4"

    def test_looks_up_versions_by_package_name(self) -> None:
        """Derives the package from the name, skipping composites."""
        looked_up: list[str] = []

        def lookup(package: str) -> str:
            looked_up.append(package)
            return "1.2.3"

        rows = make_rows(
            [
                BASELINE,
                _entry("terser_tweaked", 1.0, 700, 200),
                _entry("uglify-js+esbuild", 1.0, 800, 200),
            ],
            lookup,
        )

        assert looked_up == ["terser"]
        assert rows[1].version == "1.2.3"
        assert rows[1].link == "https://pypi.org/project/terser/"
        assert rows[2].version == ""
        assert rows[2].link == ""


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("rjsmin", "rjsmin"),
        ("calmjs.parse_obfuscate", "calmjs.parse"),
        ("terser_elm_guide", "terser"),
        ("rjsmin+calmjs.parse", None),
    ],
)
def test_package_name(name: str, expected: str | None) -> None:
    """Splits on the first underscore and skips composite names."""
    assert package_name(name) == expected


@pytest.mark.parametrize(
    ("value", "baseline", "expected"),
    [
        (800, 1000, "  -20 %"),
        (875, 1000, "-12.5 %"),
        (1000, 1000, "    0 %"),
        (1500, 1000, "   50 %"),
        (1, 0, ""),
    ],
)
def test_percentage_change(value: int, baseline: int, expected: str) -> None:
    """Uses one decimal, drops a trailing .0 and pads to a fixed width."""
    assert percentage_change(value, baseline) == expected


@pytest.mark.parametrize(
    ("n", "expected"),
    [
        (1.234, "1.23"),
        (12.345, "12.3"),
        (123.45, "123"),
        (1234.5, "1234"),
    ],
)
def test_to_fixed(n: float, expected: str) -> None:
    """Keeps as many decimals as fit in four characters."""
    assert to_fixed(n) == expected


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (512, "0.50 KiB"),
        (10 * 1024, "10.0 KiB"),
        (300 * 1024, " 300 KiB"),
        (3 * 1024 * 1024, "3.00 MiB"),
    ],
)
def test_print_file_size(size: int, expected: str) -> None:
    """Switches from KiB to MiB at one MiB."""
    assert print_file_size(size) == expected


@pytest.mark.parametrize(
    ("duration", "expected"),
    [
        (5.0, "5.00 ms"),
        (250.0, " 250 ms"),
        (1500.0, " 1.50 s"),
    ],
)
def test_print_duration_ms(duration: float, expected: str) -> None:
    """Switches from milliseconds to seconds at one second."""
    assert print_duration_ms(duration) == expected


def test_multiplier_handles_zero_fastest_time() -> None:
    """Does not divide by zero when a plugin took no measurable time."""
    assert multiplier(0.0, 0.0) == "x1"
    assert multiplier(5.0, 0.0) == "x∞"


class TestBuildReport:
    """Tests for reading sidecars and building the report."""

    @pytest.fixture
    def run(self, tmp_path: Path) -> BenchmarkRun:
        """Create a run with one good, one failed and one unverified plugin."""
        input_file = tmp_path / "input.js"
        baseline = CandidateArtifact.baseline(input_file, tmp_path)
        good = CandidateArtifact.for_plugin("good", input_file, tmp_path)
        crashed = CandidateArtifact.for_plugin("crashed", input_file, tmp_path)
        unverified = CandidateArtifact.for_plugin("unverified", input_file, tmp_path)

        baseline.stats_file.write_text(
            StatsRecord(time=0.1, size=1000, brotli_size=400).to_json()
        )
        good.stats_file.write_text(StatsRecord(time=5.0, size=600, brotli_size=300).to_json())
        unverified.stats_file.write_text(
            StatsRecord(time=2.0, size=500, brotli_size=250).to_json()
        )

        return BenchmarkRun(
            baseline=baseline,
            outcomes=[
                PluginOutcome(
                    artifact=crashed,
                    state="failed",
                    failures=[
                        PluginFailure(stage="minify", message="Minification failed: 1")
                    ],
                ),
                PluginOutcome(artifact=good, state="done"),
                PluginOutcome(
                    artifact=unverified,
                    state="failed",
                    failures=[
                        PluginFailure(
                            stage="verify", message="Elm.Main did not render properly"
                        )
                    ],
                ),
            ],
        )

    def test_failed_minification_is_only_in_errors(self, run: BenchmarkRun) -> None:
        """Excludes plugins without a sidecar from the ranked rows."""
        report = build_report(run)

        assert [row.name for row in report.rows] == ["baseline", "unverified", "good"]
        assert [name for name, _ in report.errors] == ["crashed", "unverified"]

    def test_render_table_lists_errors_after_table(self, run: BenchmarkRun) -> None:
        """Prints one block per failed plugin under the table."""
        output = render_table(build_report(run))

        assert "baseline" in output
        assert output.index("### crashed error") > output.index("unverified")
        assert "Minification failed: 1" in output
        assert "### unverified error\nElm.Main did not render properly" in output

    def test_format_output(self, run: BenchmarkRun) -> None:
        """Formats rows and errors as plain data."""
        output = format_output(build_report(run))

        assert [row["name"] for row in output["rows"]] == ["baseline", "unverified", "good"]
        assert output["errors"] == [
            {"name": "crashed", "stage": "minify", "message": "Minification failed: 1"},
            {
                "name": "unverified",
                "stage": "verify",
                "message": "Elm.Main did not render properly",
            },
        ]

    def test_minify_failure_with_sidecar_is_not_ranked(
        self, run: BenchmarkRun, tmp_path: Path
    ) -> None:
        """Ignores stats left behind by an adapter that did not exit cleanly."""
        crashed = CandidateArtifact.for_plugin("crashed", tmp_path / "input.js", tmp_path)
        crashed.stats_file.write_text(StatsRecord(time=1.0, size=10, brotli_size=5).to_json())

        report = build_report(run)

        assert [row.name for row in report.rows] == ["baseline", "unverified", "good"]
        assert [failure.stage for failure in dict(report.errors)["crashed"]] == ["minify"]

    def test_raises_when_nothing_was_produced(self, tmp_path: Path) -> None:
        """Fails loudly when not even the baseline has a sidecar."""
        baseline = CandidateArtifact.baseline(tmp_path / "input.js", tmp_path)

        with pytest.raises(MissingArtifactsError):
            build_report(BenchmarkRun(baseline=baseline, outcomes=[]))


def test_load_stats_rejects_malformed_sidecar(tmp_path: Path) -> None:
    """Reports invalid sidecars instead of ranking them."""
    artifact = CandidateArtifact.for_plugin("sloppy", tmp_path / "input.js", tmp_path)
    artifact.stats_file.write_text('{"time": 1, "size": 2}')

    loaded, rejected = load_stats([artifact])

    assert loaded == []
    assert len(rejected) == 1
    name, failure = rejected[0]
    assert name == "sloppy"
    assert failure.stage == "stats"
    assert "brotliSize" in failure.message


def test_render_table_includes_every_failure_message() -> None:
    """Prints all failures of a plugin in its block."""
    failures = PluginFailureFactory.batch(2)
    report_rows = make_rows([BASELINE], _no_versions)

    output = render_table(Report(rows=report_rows, errors=[("flaky", failures)]))

    assert "### flaky error" in output
    for failure in failures:
        assert failure.message.rstrip() in output


@pytest.mark.parametrize(
    "contents",
    [b"\xff\xfe garbage", b'{"time": 1, "size": 2, "brotliSize": "\xff"}'],
    ids=["binary", "bad-utf8-string"],
)
def test_load_stats_rejects_undecodable_sidecar(tmp_path: Path, contents: bytes) -> None:
    """Reports sidecars that are not UTF-8 text instead of crashing."""
    artifact = CandidateArtifact.for_plugin("garbled", tmp_path / "input.js", tmp_path)
    artifact.stats_file.write_bytes(contents)

    loaded, rejected = load_stats([artifact])

    assert loaded == []
    assert [(name, failure.stage) for name, failure in rejected] == [("garbled", "stats")]


def test_load_stats_rejects_unreadable_sidecar(tmp_path: Path) -> None:
    """Reports a sidecar path that cannot be read as a file."""
    artifact = CandidateArtifact.for_plugin("odd", tmp_path / "input.js", tmp_path)
    artifact.stats_file.mkdir()

    loaded, rejected = load_stats([artifact])

    assert loaded == []
    assert [(name, failure.stage) for name, failure in rejected] == [("odd", "stats")]
