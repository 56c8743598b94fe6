"""Plugin manifest definition for the adapter system."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class PluginManifest:
    """Manifest describing a minifier adapter.

    The adapter itself never runs in the driver process: ``module`` is executed
    with ``python -m`` in a subprocess that receives the input and output
    paths as its only arguments.
    """

    name: str
    module: str

    def command(self, python: str, input_file: Path, output_file: Path) -> Sequence[str]:
        """Build the subprocess command line for this adapter."""
        return [python, "-m", self.module, str(input_file), str(output_file)]
