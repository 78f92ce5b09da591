"""
SnapUI View - Layout Tree

Owner of one layout hierarchy. All structural edits (add, remove, reparent,
template instantiation) go through this class so that the id registry stays
in sync and structure listeners (snap caches, the viewport editor) can
invalidate whatever they derived from the old structure.

The tree does not know about rendering, selection or themes.

Usage:
    tree = LayoutTree(UiNode("Canvas", size_delta=(1920, 1080)))
    panel = tree.add_node(UiNode("Panel", size_delta=(400, 300)), tree.root)
    tree.add_structure_listener(lambda parent: print("changed", parent))
    tree.remove_node(panel)
"""

import logging
from typing import Callable, Dict, Iterator, List, Optional

from models.ui_node import UiNode


class LayoutTree:
    """Layout hierarchy with an id registry and structure notifications."""

    def __init__(self, root: Optional[UiNode] = None):
        self._logger = logging.getLogger('LayoutTree')
        self._root = root if root is not None else UiNode("Canvas")
        self._registry: Dict[str, UiNode] = {}
        self._listeners: List[Callable[[Optional[UiNode]], None]] = []
        self.structure_version = 0
        for node in self._root.iter_subtree():
            self._registry[node.id] = node
        self._logger.debug("Created layout tree with %d nodes", len(self._registry))

    @property
    def root(self) -> UiNode:
        return self._root

    def __len__(self):
        return len(self._registry)

    # ========================================
    # Queries
    # ========================================

    def iter_nodes(self, include_root: bool = True) -> Iterator[UiNode]:
        """Depth-first traversal, parent before children, in child-list order."""
        for node in self._root.iter_subtree():
            if node is self._root and not include_root:
                continue
            yield node

    def find(self, node_id: str) -> Optional[UiNode]:
        return self._registry.get(node_id)

    def contains(self, node: Optional[UiNode]) -> bool:
        """True if the node is currently linked under this tree's root."""
        if node is None:
            return False
        return node is self._root or node.is_descendant_of(self._root)

    def is_empty(self) -> bool:
        return not self._root.children

    # ========================================
    # Structural edits
    # ========================================

    def add_node(self, node: UiNode, parent: Optional[UiNode] = None, index: Optional[int] = None) -> UiNode:
        """Insert a detached node (with its subtree) under ``parent``.

        Raises:
            ValueError: if the parent is not in this tree
        """
        parent = parent if parent is not None else self._root
        if not self.contains(parent):
            raise ValueError(f"Parent {parent!r} is not part of this layout tree")
        parent.add_child(node, index)
        for added in node.iter_subtree():
            self._registry[added.id] = added
        self._logger.debug("Added %r under %r", node, parent)
        self._structure_changed(parent)
        return node

    def remove_node(self, node: UiNode):
        """Detach a node and its subtree from the tree.

        Raises:
            ValueError: if asked to remove the root
        """
        if node is self._root:
            raise ValueError("The layout root cannot be removed")
        if not self.contains(node):
            self._logger.debug("Ignoring removal of %r: not in tree", node)
            return
        parent = node.parent
        parent.remove_child(node)
        for removed in node.iter_subtree():
            self._registry.pop(removed.id, None)
            removed.mark_dirty()
        self._logger.debug("Removed %r from %r", node, parent)
        self._structure_changed(parent)

    def reparent(self, node: UiNode, new_parent: UiNode, index: Optional[int] = None):
        """Move a node (keeping its subtree) under another parent.

        Raises:
            ValueError: for the root, for nodes outside the tree, or for a
                new parent inside the node's own subtree
        """
        if node is self._root:
            raise ValueError("The layout root cannot be reparented")
        if not self.contains(node) or not self.contains(new_parent):
            raise ValueError(f"Cannot reparent {node!r}: both nodes must be in this tree")
        old_parent = node.parent
        new_parent.add_child(node, index)
        self._logger.debug("Reparented %r from %r to %r", node, old_parent, new_parent)
        self._structure_changed(old_parent)
        if new_parent is not old_parent:
            self._structure_changed(new_parent)

    def instantiate_template(self, template, parent: Optional[UiNode] = None) -> UiNode:
        """Clone a UiElementTemplate's prototype under ``parent``."""
        instance = template.instantiate()
        self._logger.info("Instantiated template '%s'", template.display_name)
        return self.add_node(instance, parent)

    # ========================================
    # Listeners
    # ========================================

    def add_structure_listener(self, callback: Callable[[Optional[UiNode]], None]):
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_structure_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _structure_changed(self, parent: Optional[UiNode]):
        self.structure_version += 1
        for callback in list(self._listeners):
            callback(parent)
