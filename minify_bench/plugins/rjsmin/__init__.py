"""rjsmin adapter."""

from minify_bench.plugins.rjsmin.manifest import rjsmin_manifest

__all__ = ["rjsmin_manifest"]
