"""Loading of minifier adapters from entry points."""

from collections.abc import Sequence
from importlib.metadata import entry_points

from minify_bench.errors import KnownError
from minify_bench.models.artifact import BASELINE_NAME
from minify_bench.plugins.manifest import PluginManifest

ENTRY_POINT_GROUP = "minify_bench.plugins"


class PluginNotFoundError(KnownError):
    """Raised when a requested plugin is not registered."""


def load_plugin_manifests(names: Sequence[str] = ()) -> Sequence[PluginManifest]:
    """Load plugin manifests, sorted by plugin name.

    Args:
        names: Plugin names to keep (empty means every registered plugin)

    Returns:
        Manifests in lexicographic name order

    Raises:
        PluginNotFoundError: If a requested name is not registered

    """
    manifests: dict[str, PluginManifest] = {}
    for entry in entry_points(group=ENTRY_POINT_GROUP):
        manifest: PluginManifest = entry.load()
        if manifest.name == BASELINE_NAME:
            raise ValueError(f"Plugin name '{BASELINE_NAME}' is reserved ({entry.value})")
        manifests[manifest.name] = manifest

    for name in names:
        if name not in manifests:
            raise PluginNotFoundError(
                f"Plugin '{name}' not found. Available plugins: {sorted(manifests)}"
            )

    selected = set(names) if names else set(manifests)
    return [manifests[name] for name in sorted(selected)]
