"""Check that a compiled program still starts every exported application.

Executed as ``python -m minify_bench.verification.verifier FILE [true|false]``.
Exits 0 when every application mounted (flag-dependent applications only
produce a warning) and 1 on the first hard failure.
"""

import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from minify_bench.errors import (
    BadNamespaceError,
    KnownError,
    RenderFailureError,
    UnexpectedAppError,
    VerificationError,
)
from minify_bench.verification.environment import DomEnvironment, MountResult
from minify_bench.verification.namespace import (
    Branch,
    NamespaceNode,
    iter_applications,
    parse_namespace,
)

log = logging.getLogger(__name__)

ROOT_NAMESPACE = "Elm"

# Elm crashes with a link to this hint when an application needs flags.
# The coupling to elm/core's exact wording is confined to is_flags_required_error.
FLAGS_HINT_URL = "https://github.com/elm/core/blob/1.0.0/hints/2.md"

type Mount = Callable[[Sequence[str]], MountResult]


@dataclass(frozen=True, kw_only=True)
class VerificationReport:
    """Applications exercised during a successful verification."""

    applications: Sequence[str]
    flag_dependent: Sequence[str]


def is_flags_required_error(result: MountResult) -> bool:
    """Check whether a mount failed only because the program expects flags."""
    return result.is_error and FLAGS_HINT_URL in result.message


def verify_namespace(
    root: NamespaceNode,
    mount: Mount,
    *,
    warn_about_flags: bool,
    root_name: str = ROOT_NAMESPACE,
) -> VerificationReport:
    """Mount every application in the namespace, stopping at the first failure.

    Args:
        root: Namespace tree of the loaded program
        mount: Starts the application at a path on a fresh node
        warn_about_flags: Log a warning for applications that need flags
        root_name: Global name the namespace is exported under

    Returns:
        Dotted names of all exercised and all flag-dependent applications

    Raises:
        UnexpectedAppError: If an application throws an unrecognized error
        RenderFailureError: If an application leaves its node in place

    """
    applications: list[str] = []
    flag_dependent: list[str] = []

    for path in iter_applications(root, (root_name,)):
        dotted = ".".join(path)
        applications.append(dotted)
        result = mount(path)

        match result.outcome:
            case "threw" if is_flags_required_error(result):
                flag_dependent.append(dotted)
                if warn_about_flags:
                    log.warning(
                        "%s depends on automatic flag decoding, cannot test fully "
                        "that the code runs after minification.",
                        dotted,
                    )
            case "threw":
                raise UnexpectedAppError(path, result.detail or result.message)
            case "not-rendered":
                raise RenderFailureError(path, result.dom_snapshot)
            case "rendered":
                log.debug("%s rendered", dotted)

    return VerificationReport(applications=applications, flag_dependent=flag_dependent)


def verify_file(file: Path, *, warn_about_flags: bool) -> VerificationReport:
    """Load a script into a fresh environment and verify its namespace."""
    source = file.read_text(encoding="utf-8")
    environment = DomEnvironment()
    environment.load_script(source, str(file))

    raw = environment.describe(ROOT_NAMESPACE)
    root = parse_namespace(raw)
    if not isinstance(root, Branch):
        raise BadNamespaceError(
            f"Bad window.{ROOT_NAMESPACE}: {raw.get('repr', 'function')}"
        )

    try:
        return verify_namespace(
            root, environment.mount, warn_about_flags=warn_about_flags
        )
    finally:
        for message in environment.console_messages():
            log.debug("console.%s: %s", message.level, message.text)


def parse_args(argv: Sequence[str]) -> tuple[Path, bool]:
    """Parse ``FILE [true|false]`` from the verifier command line."""
    match list(argv):
        case []:
            raise KnownError("Expected the .js file to verify as the first argument.")
        case [file]:
            return Path(file), False
        case [file, "true" | "false" as flag]:
            return Path(file), flag == "true"
        case [_, flag]:
            raise KnownError(f"Expected true or false as the second argument, got {flag!r}")
        case [_, _, *rest]:
            raise KnownError(
                f"Expected at most two arguments, but got {len(rest)} extra: {rest!r}"
            )
        case _:
            raise AssertionError("Unreachable")


def main(argv: Sequence[str] | None = None) -> None:
    """Verifier entry point."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        file, warn_about_flags = parse_args(sys.argv[1:] if argv is None else argv)
        report = verify_file(file, warn_about_flags=warn_about_flags)
    except (KnownError, VerificationError) as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
    except Exception:
        log.exception("Verification failed")
        sys.exit(1)

    log.info(
        "Verified %d application(s), %d of them depend on flags",
        len(report.applications),
        len(report.flag_dependent),
    )
    sys.exit(0)


if __name__ == "__main__":  # pragma: no cover
    main()
