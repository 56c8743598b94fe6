"""Whitespace and comment removal with rjsmin."""

from pathlib import Path

import rjsmin

from minify_bench.runner import minify


def transform(code: str, input_file: Path) -> str:
    return rjsmin.jsmin(code)


if __name__ == "__main__":
    minify(transform)
