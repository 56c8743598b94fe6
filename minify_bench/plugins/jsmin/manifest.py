"""jsmin adapter manifest."""

from minify_bench.plugins.manifest import PluginManifest

jsmin_manifest = PluginManifest(
    name="jsmin",
    module="minify_bench.plugins.jsmin.adapter",
)
