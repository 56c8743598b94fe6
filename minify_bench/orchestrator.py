"""Benchmark orchestrator driving one minify + verify subprocess pair per plugin."""

import logging
import re
import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from minify_bench.errors import KnownError, MissingArtifactsError, SubprocessFailedError
from minify_bench.models.artifact import CandidateArtifact
from minify_bench.models.config import BenchConfig
from minify_bench.models.result import (
    BenchmarkRun,
    PluginFailure,
    PluginOutcome,
    PluginState,
)
from minify_bench.plugins.baseline import baseline_manifest
from minify_bench.plugins.manifest import PluginManifest
from minify_bench.process import ProcessResult, run_checked
from minify_bench.status import StatusBoard

log = logging.getLogger(__name__)

VERIFIER_MODULE = "minify_bench.verification.verifier"
INPUT_FILE_NAME = "input.js"

# Compiled Elm programs end with an IIFE called on `this`.
_EXPORT_TARGET = re.compile(r"\(this\)\);\s*$")


def adapt_for_dom(contents: str) -> str:
    """Make the program export itself onto ``window`` instead of ``this``."""
    return _EXPORT_TARGET.sub("(window));", contents)


@dataclass(frozen=True, kw_only=True)
class BenchOrchestrator:
    """Runs every plugin sequentially, containing per-plugin failures."""

    config: BenchConfig
    status: StatusBoard | None = field(default=None, repr=False)

    @property
    def input_file(self) -> Path:
        """DOM-adapted copy of the compiled program that every plugin reads."""
        return self.config.output_dir / INPUT_FILE_NAME

    async def run(self, plugins: Sequence[PluginManifest]) -> BenchmarkRun:
        """Prepare and verify the baseline, then benchmark each plugin in turn.

        Args:
            plugins: Adapters to benchmark, processed in name order

        Returns:
            The baseline artifact and one outcome per plugin

        Raises:
            SubprocessFailedError: If the baseline cannot be measured or verified
            KnownError: If the input file is not UTF-8 text

        """
        baseline = await self.prepare_baseline()

        ordered = sorted(plugins, key=lambda plugin: plugin.name)
        log.info("Benchmarking %d plugin(s)...", len(ordered))

        if self.status is not None:
            self.status.start()

        outcomes: list[PluginOutcome] = []
        try:
            for plugin in ordered:
                outcome = await self.run_plugin(plugin)
                outcomes.append(outcome)
                self._set_status(plugin.name, outcome.state)
        finally:
            if self.status is not None:
                self.status.finish()

        log.info("Benchmark completed")
        return BenchmarkRun(baseline=baseline, outcomes=outcomes)

    async def prepare_baseline(self) -> CandidateArtifact:
        """Reset the output directory, write the adapted input and measure it."""
        output_dir = self.config.output_dir
        shutil.rmtree(output_dir, ignore_errors=True)
        output_dir.mkdir(parents=True, exist_ok=True)

        try:
            contents = self.config.input_file.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise KnownError(f"Problem with the passed file: {exc}") from exc
        self.input_file.write_text(adapt_for_dom(contents), encoding="utf-8")

        baseline = CandidateArtifact.baseline(self.input_file, output_dir)
        log.info("Measuring baseline %s", self.config.input_file)
        await self.minify(baseline_manifest, baseline)

        result = await self.verify(baseline, warn_about_flags=True)
        if result.output.strip():
            log.warning("Baseline verification output:\n%s", result.output.rstrip())

        return baseline

    async def run_plugin(self, plugin: PluginManifest) -> PluginOutcome:
        """Minify with one plugin and verify its output.

        Never raises for plugin failures: they are recorded on the outcome.
        """
        artifact = CandidateArtifact.for_plugin(
            plugin.name, self.input_file, self.config.output_dir
        )

        self._set_status(plugin.name, "minifying")
        try:
            await self.minify(plugin, artifact)
        except (SubprocessFailedError, MissingArtifactsError, OSError) as exc:
            log.info("Minification with %s failed", plugin.name)
            return PluginOutcome(
                artifact=artifact,
                state="failed",
                failures=[PluginFailure(stage="minify", message=str(exc))],
            )

        self._set_status(plugin.name, "verifying")
        try:
            await self.verify(artifact, warn_about_flags=False)
        except (SubprocessFailedError, OSError) as exc:
            log.info("Verification of %s failed", plugin.name)
            return PluginOutcome(
                artifact=artifact,
                state="failed",
                failures=[PluginFailure(stage="verify", message=str(exc))],
            )

        return PluginOutcome(artifact=artifact, state="done")

    async def minify(
        self, plugin: PluginManifest, artifact: CandidateArtifact
    ) -> ProcessResult:
        """Run the plugin's adapter subprocess and check that it wrote both files.

        Raises:
            SubprocessFailedError: If the adapter exits non-zero
            MissingArtifactsError: If the output or its sidecar is missing

        """
        description = f"Minification script {plugin.module}"
        result = await run_checked(
            description,
            plugin.command(self.config.python, artifact.input_file, artifact.output_file),
        )

        missing = [
            str(path)
            for path in (artifact.output_file, artifact.stats_file)
            if not path.is_file()
        ]
        if missing:
            raise MissingArtifactsError(
                f"{description} exited with 0 but did not write: {', '.join(missing)}"
            )
        return result

    async def verify(
        self, artifact: CandidateArtifact, *, warn_about_flags: bool
    ) -> ProcessResult:
        """Run the verifier subprocess on the artifact's output."""
        return await run_checked(
            "Verification script",
            [
                self.config.python,
                "-m",
                VERIFIER_MODULE,
                str(artifact.output_file),
                "true" if warn_about_flags else "false",
            ],
        )

    def _set_status(self, name: str, state: PluginState) -> None:
        if self.status is not None:
            self.status.update(name, state)
