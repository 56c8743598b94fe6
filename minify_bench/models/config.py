"""Run configuration built from the command line."""

import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import Field

from minify_bench.models.base import Model


class BenchConfig(Model):
    """Configuration of one benchmark run."""

    input_file: Path = Field(..., description="Compiled Elm .js file to minify")
    output_dir: Path = Field(
        default=Path("output"),
        description="Directory wiped and refilled with artifacts on every run",
    )
    plugins: Sequence[str] = Field(
        default_factory=tuple,
        description="Plugin names to run (empty means every registered plugin)",
    )
    python: str = Field(
        default=sys.executable,
        description="Interpreter used to spawn adapter and verifier subprocesses",
    )
    json_output: bool = Field(default=False, description="Print the report as JSON")
    verbose: bool = Field(
        default=False,
        description="Log progress at INFO instead of showing live status lines",
    )
