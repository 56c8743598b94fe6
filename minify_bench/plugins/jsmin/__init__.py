"""jsmin adapter."""

from minify_bench.plugins.jsmin.manifest import jsmin_manifest

__all__ = ["jsmin_manifest"]
