"""Harness shared by every minifier adapter.

An adapter module calls :func:`minify` with its transform function and is
executed as ``python -m <module> INPUT OUTPUT``. The harness times the
transform, measures the output and writes the output file plus its stats
sidecar. Nothing is written when the transform raises.
"""

import asyncio
import inspect
import logging
import os
import sys
import tempfile
import time
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

import brotli

from minify_bench.errors import KnownError
from minify_bench.models.stats import StatsRecord

log = logging.getLogger(__name__)

type Transform = Callable[[str, Path], str | Awaitable[str]]


def compress(data: bytes) -> bytes:
    """Compress bytes with Brotli at its default quality."""
    return brotli.compress(data)


async def run_minifier(
    transform: Transform, input_file: Path, output_file: Path
) -> StatsRecord:
    """Run the transform on the input file and persist output and stats.

    Args:
        transform: Adapter function taking the code and the input path
        input_file: UTF-8 file to minify
        output_file: Destination of the minified code; the sidecar goes to
            ``output_file + ".json"``

    Returns:
        The stats written to the sidecar

    """
    code = input_file.read_text(encoding="utf-8")

    start = time.perf_counter()
    result = transform(code, input_file)
    if inspect.isawaitable(result):
        result = await result
    elapsed_ms = (time.perf_counter() - start) * 1000

    if not isinstance(result, str):
        raise KnownError(
            f"Expected the minifier to return a string, got {type(result).__name__}"
        )

    minified = result.encode("utf-8")
    stats = StatsRecord(
        time=elapsed_ms,
        size=len(minified),
        brotli_size=len(compress(minified)),
    )
    log.info(
        "Minified %s in %.1f ms (%d bytes, %d brotli)",
        input_file,
        stats.time,
        stats.size,
        stats.brotli_size,
    )

    _write_atomic(output_file, minified)
    _write_atomic(
        output_file.with_name(output_file.name + ".json"),
        stats.to_json().encode("utf-8"),
    )
    return stats


def _write_atomic(path: Path, data: bytes) -> None:
    """Write through a temporary file so the final name never holds partial data."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def parse_args(argv: Sequence[str]) -> tuple[Path, Path]:
    """Parse ``INPUT OUTPUT`` from the adapter command line."""
    match list(argv):
        case []:
            raise KnownError("Expected the input .js file to minify as the first argument.")
        case [_]:
            raise KnownError(
                "Expected the output .js file to put the minified code into "
                "as the second argument."
            )
        case [input_file, output_file]:
            return Path(input_file), Path(output_file)
        case [_, _, *rest]:
            raise KnownError(
                f"Expected two arguments, but got {len(rest)} extra: {rest!r}"
            )
        case _:
            raise AssertionError("Unreachable")


def minify(transform: Transform, argv: Sequence[str] | None = None) -> None:
    """Adapter entry point: run the transform and exit with the outcome."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        input_file, output_file = parse_args(sys.argv[1:] if argv is None else argv)
        asyncio.run(run_minifier(transform, input_file, output_file))
    except KnownError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
    except Exception:
        log.exception("Minification failed")
        sys.exit(1)
    sys.exit(0)
