"""File locations of the artifacts produced during a run."""

from dataclasses import dataclass
from pathlib import Path

BASELINE_NAME = "baseline"


@dataclass(frozen=True, kw_only=True)
class CandidateArtifact:
    """Input, output and sidecar paths of one plugin within a run."""

    name: str
    input_file: Path
    output_file: Path
    is_baseline: bool = False

    @property
    def stats_file(self) -> Path:
        """Sidecar path, always ``output_file + ".json"``."""
        return self.output_file.with_name(self.output_file.name + ".json")

    @classmethod
    def for_plugin(
        cls, name: str, input_file: Path, output_dir: Path
    ) -> "CandidateArtifact":
        """Build the artifact paths of a plugin inside the output directory."""
        file_name = name.replace("/", "|") + ".js"
        return cls(
            name=name,
            input_file=input_file,
            output_file=output_dir / file_name,
        )

    @classmethod
    def baseline(cls, input_file: Path, output_dir: Path) -> "CandidateArtifact":
        """Build the artifact of the unminified baseline."""
        return cls(
            name=BASELINE_NAME,
            input_file=input_file,
            output_file=output_dir / f"{BASELINE_NAME}.js",
            is_baseline=True,
        )
