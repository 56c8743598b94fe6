"""Fixtures for integration tests."""

import sys
from pathlib import Path
from typing import Protocol

import pytest

from minify_bench.models.config import BenchConfig
from minify_bench.plugins.manifest import PluginManifest
from minify_bench.testing.programs import ELM_PROGRAM, FAKE_PLUGINS


class WriteScriptFn(Protocol):
    """Protocol for script writing function."""

    def __call__(self, source: str, name: str = "elm.js") -> Path:
        """Write a script and return its path."""


@pytest.fixture
def write_script(tmp_path: Path) -> WriteScriptFn:
    """Return a function writing JS sources into the temp directory."""

    def _write(source: str, name: str = "elm.js") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def elm_program(write_script: WriteScriptFn) -> Path:
    """Write the compiled program fixture."""
    return write_script(ELM_PROGRAM)


@pytest.fixture
def fake_plugins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> list[PluginManifest]:
    """Install the fake adapter modules on the subprocess import path."""
    modules_dir = tmp_path / "adapters"
    modules_dir.mkdir()
    for module, source in FAKE_PLUGINS.items():
        (modules_dir / f"{module}.py").write_text(source, encoding="utf-8")

    monkeypatch.setenv("PYTHONPATH", str(modules_dir))

    return [
        PluginManifest(name="strip", module="fake_strip"),
        PluginManifest(name="crash", module="fake_crash"),
        PluginManifest(name="killed", module="fake_killed"),
        PluginManifest(name="broken", module="fake_broken"),
    ]


@pytest.fixture
def bench_config(tmp_path: Path, elm_program: Path) -> BenchConfig:
    """Create a config running subprocesses with the current interpreter."""
    return BenchConfig(
        input_file=elm_program,
        output_dir=tmp_path / "output",
        python=sys.executable,
    )
