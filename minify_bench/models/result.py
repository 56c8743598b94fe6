"""Models for plugin and run outcomes."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from minify_bench.models.artifact import CandidateArtifact

type PluginState = Literal["pending", "minifying", "verifying", "done", "failed"]


@dataclass(frozen=True, kw_only=True)
class PluginFailure:
    """A contained failure of one plugin stage.

    The message already includes the captured subprocess output.
    """

    stage: Literal["minify", "verify", "stats"]
    message: str


@dataclass(frozen=True, kw_only=True)
class PluginOutcome:
    """Final state of a plugin after minification and verification."""

    artifact: CandidateArtifact
    state: Literal["done", "failed"]
    failures: Sequence[PluginFailure] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        """Plugin name."""
        return self.artifact.name

    @property
    def measured(self) -> bool:
        """Whether the adapter exited cleanly with both files, so its stats count."""
        return not any(failure.stage == "minify" for failure in self.failures)


@dataclass(frozen=True, kw_only=True)
class BenchmarkRun:
    """Baseline plus every plugin outcome of a single invocation."""

    baseline: CandidateArtifact
    outcomes: Sequence[PluginOutcome]

    @property
    def failed(self) -> Sequence[PluginOutcome]:
        """Outcomes with at least one failure, in run order."""
        return [outcome for outcome in self.outcomes if outcome.failures]
