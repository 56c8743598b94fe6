"""Douglas Crockford's jsmin algorithm, via the jsmin package."""

from pathlib import Path

from jsmin import jsmin

from minify_bench.runner import minify


def transform(code: str, input_file: Path) -> str:
    return jsmin(code, quote_chars="'\"`")


if __name__ == "__main__":
    minify(transform)
