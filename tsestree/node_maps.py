"""
Correspondence maps between native (tree-sitter) and standardized nodes.

The native side is keyed by ``tree_sitter.Node.id`` (stable for the lifetime
of the tree), the standardized side by object identity. Both directions are
single valued: when several standardized nodes are built from one native
node, the first one registered (the outermost) represents it.
"""

from typing import Any, Dict, Generic, Optional, TypeVar, Union

import tree_sitter

from .types import Node, Token

StandardNode = Union[Node, Token]
K = TypeVar("K")
V = TypeVar("V")


class _MapView(Generic[K, V]):
    """Read-only view over one direction of the correspondence."""

    def __init__(self, data: Dict[Any, Any]):
        self._data = data

    def _key(self, node: Any) -> Any:
        return node

    def _accepts(self, node: Any) -> bool:
        return True

    def get(self, node: K, default: Optional[V] = None) -> Optional[V]:
        if not self._accepts(node):
            return default
        return self._data.get(self._key(node), default)

    def has(self, node: Any) -> bool:
        return self._accepts(node) and self._key(node) in self._data

    def __contains__(self, node: Any) -> bool:
        return self.has(node)

    def __getitem__(self, node: K) -> V:
        if not self._accepts(node):
            raise KeyError(node)
        return self._data[self._key(node)]

    def __len__(self) -> int:
        return len(self._data)


class NativeToStandardMap(_MapView[tree_sitter.Node, Node]):
    """Native node -> the standardized node that represents it."""

    def _accepts(self, node: Any) -> bool:
        return isinstance(node, tree_sitter.Node)

    def _key(self, node: tree_sitter.Node) -> int:
        return node.id


class StandardToNativeMap(_MapView[StandardNode, tree_sitter.Node]):
    """Standardized node or token -> the native node it was built from."""

    def _accepts(self, node: Any) -> bool:
        return isinstance(node, (Node, Token))


class AstMaps:
    """Both directions of the correspondence for one parse session."""

    def __init__(self):
        self._native_to_standard: Dict[int, Node] = {}
        self._standard_to_native: Dict[StandardNode, tree_sitter.Node] = {}
        self.native_to_standard = NativeToStandardMap(self._native_to_standard)
        self.standard_to_native = StandardToNativeMap(self._standard_to_native)

    def register(self, native: tree_sitter.Node, standard: Node) -> None:
        """Record a converted node; the first node registered for a native node wins."""
        self._standard_to_native[standard] = native
        self._native_to_standard.setdefault(native.id, standard)

    def register_token(self, native: tree_sitter.Node, token: Token) -> None:
        self._standard_to_native[token] = native

    def is_representative(self, standard: Node) -> bool:
        """True when standard -> native -> standard returns the same node."""
        native = self._standard_to_native.get(standard)
        return native is not None and self._native_to_standard.get(native.id) is standard
