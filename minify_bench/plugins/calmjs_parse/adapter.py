"""Parse to an ES5 AST and print it back without whitespace."""

from pathlib import Path

from calmjs.parse import es5
from calmjs.parse.unparsers.es5 import minify_print

from minify_bench.runner import minify


def transform(code: str, input_file: Path) -> str:
    return minify_print(es5(code), obfuscate=False)


if __name__ == "__main__":
    minify(transform)
