"""Tagged tree model of an exported namespace.

The candidate script exposes a nested object whose leaves are application
entry points. The JS side only reports the shape of that object; the walk over
it happens here.
"""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Leaf:
    """An application entry point (a function taking ``{node}``)."""


@dataclass(frozen=True)
class Branch:
    """A nested namespace, entries kept in export order."""

    entries: Sequence[tuple[str, "NamespaceNode"]]


type NamespaceNode = Leaf | Branch


def parse_namespace(raw: Mapping[str, Any]) -> NamespaceNode | None:
    """Build a namespace tree from the shape reported by the environment.

    Returns None when ``raw`` describes neither a function nor an object.
    Such entries are dropped from their parent branch.
    """
    match raw.get("kind"):
        case "leaf":
            return Leaf()
        case "branch":
            entries: list[tuple[str, NamespaceNode]] = []
            for key, child in raw["entries"]:
                node = parse_namespace(child)
                if node is not None:
                    entries.append((key, node))
            return Branch(entries=entries)
        case _:
            return None


def iter_applications(
    node: NamespaceNode, path: tuple[str, ...] = ()
) -> Iterator[tuple[str, ...]]:
    """Yield the path of every leaf, depth first in export order."""
    match node:
        case Leaf():
            yield path
        case Branch(entries=entries):
            for key, child in entries:
                yield from iter_applications(child, (*path, key))
