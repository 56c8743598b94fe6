"""Baseline adapter manifest."""

from minify_bench.models.artifact import BASELINE_NAME
from minify_bench.plugins.manifest import PluginManifest

baseline_manifest = PluginManifest(
    name=BASELINE_NAME,
    module="minify_bench.plugins.baseline.adapter",
)
