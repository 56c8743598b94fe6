"""Error types shared by the driver and its subprocesses."""

from collections.abc import Sequence


class KnownError(Exception):
    """Expected failure, reported by its message alone without a traceback."""


class MissingArtifactsError(KnownError):
    """Raised when an expected output or stats sidecar is missing."""


class SubprocessFailedError(KnownError):
    """Raised when a subprocess exits with a non-zero code."""

    def __init__(self, description: str, exit_code: int, output: str) -> None:
        super().__init__(f"{description} failed: {exit_code}\n\n{output}")
        self.description = description
        self.exit_code = exit_code
        self.output = output


class VerificationError(Exception):
    """Base class of hard verification failures."""


class ScriptLoadError(VerificationError, KnownError):
    """Raised when the candidate script throws while being loaded."""


class BadNamespaceError(VerificationError, KnownError):
    """Raised when the root export is missing or is not a namespace object."""


class RenderFailureError(VerificationError, KnownError):
    """Raised when an application leaves its mount node in the document."""

    def __init__(self, path: Sequence[str], dom_snapshot: str) -> None:
        super().__init__(f"{'.'.join(path)} did not render properly:\n{dom_snapshot}")
        self.path = tuple(path)
        self.dom_snapshot = dom_snapshot


class UnexpectedAppError(VerificationError):
    """Raised when an application throws an unrecognized error."""

    def __init__(self, path: Sequence[str], cause: str) -> None:
        super().__init__(f"{'.'.join(path)} threw an error:\n{cause}")
        self.path = tuple(path)
        self.cause = cause
