"""calmjs.parse adapters: plain minification and name obfuscation."""

from minify_bench.plugins.calmjs_parse.manifest import (
    calmjs_parse_manifest,
    calmjs_parse_obfuscate_manifest,
)

__all__ = ["calmjs_parse_manifest", "calmjs_parse_obfuscate_manifest"]
