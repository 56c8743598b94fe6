"""Simulated browser environment backed by an embedded V8 context."""

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal

from py_mini_racer import JSEvalException, MiniRacer

from minify_bench.errors import ScriptLoadError
from minify_bench.models.base import Model

log = logging.getLogger(__name__)

DOM_SCRIPT = Path(__file__).with_name("dom.js")


class MountResult(Model):
    """What happened when an application was started on a fresh node."""

    outcome: Literal["rendered", "threw", "not-rendered"]
    is_error: bool = False
    message: str = ""
    detail: str = ""
    dom_snapshot: str = ""


class ConsoleMessage(Model):
    """A ``console.*`` call made by the loaded script."""

    level: str
    text: str


class DomEnvironment:
    """A fresh window/document pair that candidate scripts are loaded into."""

    def __init__(self) -> None:
        self._ctx = MiniRacer()
        self._ctx.eval(DOM_SCRIPT.read_text(encoding="utf-8"))

    def load_script(self, source: str, origin: str = "<script>") -> None:
        """Execute a classic script in the window's global scope."""
        try:
            self._ctx.eval(source)
        except JSEvalException as exc:
            raise ScriptLoadError(f"Loading {origin} failed:\n{exc}") from exc

    def describe(self, name: str) -> dict[str, Any]:
        """Report the shape of ``window[name]`` as nested kind/entries records."""
        return json.loads(self._call("describeRoot", name))

    def mount(self, path: Sequence[str]) -> MountResult:
        """Append a new node to the body and call the function at ``path`` with it."""
        return MountResult.model_validate_json(self._call("mount", list(path)))

    def console_messages(self) -> Sequence[ConsoleMessage]:
        """Console output produced so far."""
        return [
            ConsoleMessage.model_validate(message)
            for message in json.loads(self._call("consoleMessages"))
        ]

    def _call(self, function: str, *args: Any) -> str:
        arguments = ", ".join(json.dumps(arg) for arg in args)
        result = self._ctx.eval(f"__minifyBench.{function}({arguments})")
        if not isinstance(result, str):
            raise TypeError(f"Expected a JSON string from {function}, got {result!r}")
        return result
