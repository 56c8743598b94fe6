"""Composite adapter chaining rjsmin and calmjs.parse."""

from minify_bench.plugins.rjsmin_calmjs_parse.manifest import (
    rjsmin_calmjs_parse_manifest,
)

__all__ = ["rjsmin_calmjs_parse_manifest"]
