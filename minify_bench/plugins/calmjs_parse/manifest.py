"""calmjs.parse adapter manifests."""

from minify_bench.plugins.manifest import PluginManifest

calmjs_parse_manifest = PluginManifest(
    name="calmjs.parse",
    module="minify_bench.plugins.calmjs_parse.adapter",
)

calmjs_parse_obfuscate_manifest = PluginManifest(
    name="calmjs.parse_obfuscate",
    module="minify_bench.plugins.calmjs_parse.obfuscate",
)
