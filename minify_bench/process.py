"""Subprocess execution with buffered output and normalized exit codes."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from minify_bench.errors import SubprocessFailedError

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ProcessResult:
    """Exit status and combined stdout + stderr of a finished subprocess."""

    exit_code: int
    output: str


def normalize_exit_code(returncode: int | None) -> int:
    """Map a raw return code to a single exit code.

    A process killed by signal N reports ``-N`` and is mapped to ``N + 128``,
    like a shell does. A missing return code maps to ``-1``.
    """
    if returncode is None:
        return -1
    if returncode < 0:
        return -returncode + 128
    return returncode


async def run_process(args: Sequence[str]) -> ProcessResult:
    """Run a command to completion, capturing its output without streaming it."""
    log.debug("Spawning: %s", " ".join(args))
    process = await asyncio.create_subprocess_exec(
        *args,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()

    return ProcessResult(
        exit_code=normalize_exit_code(process.returncode),
        output=(stdout + stderr).decode("utf-8", errors="replace"),
    )


async def run_checked(description: str, args: Sequence[str]) -> ProcessResult:
    """Run a command and raise if it does not exit with code 0.

    Raises:
        SubprocessFailedError: If the process exits non-zero
        OSError: If the process cannot be spawned

    """
    result = await run_process(args)
    if result.exit_code != 0:
        raise SubprocessFailedError(description, result.exit_code, result.output)
    return result
