"""Composite adapter manifest."""

from minify_bench.plugins.manifest import PluginManifest

rjsmin_calmjs_parse_manifest = PluginManifest(
    name="rjsmin+calmjs.parse",
    module="minify_bench.plugins.rjsmin_calmjs_parse.adapter",
)
