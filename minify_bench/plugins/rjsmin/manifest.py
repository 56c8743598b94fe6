"""rjsmin adapter manifest."""

from minify_bench.plugins.manifest import PluginManifest

rjsmin_manifest = PluginManifest(
    name="rjsmin",
    module="minify_bench.plugins.rjsmin.adapter",
)
