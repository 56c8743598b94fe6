"""Strip with rjsmin first, then obfuscate local names with calmjs.parse."""

from pathlib import Path

import rjsmin
from calmjs.parse import es5
from calmjs.parse.unparsers.es5 import minify_print

from minify_bench.runner import minify


def transform(code: str, input_file: Path) -> str:
    stripped = rjsmin.jsmin(code)
    return minify_print(es5(stripped), obfuscate=True, obfuscate_globals=False)


if __name__ == "__main__":
    minify(transform)
