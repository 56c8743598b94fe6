"""Pass the input through unchanged so it gets a stats sidecar too."""

from pathlib import Path

from minify_bench.runner import minify


def transform(code: str, input_file: Path) -> str:
    return code


if __name__ == "__main__":
    minify(transform)
