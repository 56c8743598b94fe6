"""Identity adapter measuring the unminified input."""

from minify_bench.plugins.baseline.manifest import baseline_manifest

__all__ = ["baseline_manifest"]
