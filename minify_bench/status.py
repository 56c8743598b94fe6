"""Live per-plugin status lines on the terminal."""

import sys
from collections.abc import Mapping, Sequence
from typing import TextIO

from minify_bench.models.result import PluginState

STATUS_SYMBOLS: Mapping[PluginState, str] = {
    "pending": "⚪️",
    "minifying": "⏳",
    "verifying": "🔍",
    "done": "🟢",
    "failed": "🔴",
}


class StatusBoard:
    """One status line per plugin, rewritten in place while the run progresses.

    Without a terminal (or when ``live`` is False) only the final state of each
    plugin is printed, one line per plugin.
    """

    def __init__(
        self,
        names: Sequence[str],
        stream: TextIO | None = None,
        *,
        live: bool | None = None,
    ) -> None:
        self.names = list(names)
        self.stream = stream if stream is not None else sys.stderr
        self.live = self.stream.isatty() if live is None else live

    def start(self) -> None:
        """Print every plugin as pending."""
        if not self.live or not self.names:
            return
        self.stream.write(
            "".join(f"{STATUS_SYMBOLS['pending']} {name}\n" for name in self.names)
        )
        self.stream.flush()

    def update(self, name: str, state: PluginState) -> None:
        """Show the new state of a plugin."""
        symbol = STATUS_SYMBOLS[state]
        if not self.live:
            if state in ("done", "failed"):
                self.stream.write(f"{symbol} {name}\n")
                self.stream.flush()
            return

        distance = len(self.names) - self.names.index(name)
        # Up to the plugin's line, overwrite the symbol, back down to column 0.
        self.stream.write(f"\x1b[{distance}A\r{symbol} {name}\x1b[K\x1b[{distance}B\r")
        self.stream.flush()

    def finish(self) -> None:
        """Erase the status lines."""
        if not self.live or not self.names:
            return
        self.stream.write(f"\x1b[{len(self.names)}A\r\x1b[J")
        self.stream.flush()
