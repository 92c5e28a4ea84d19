"""
The ownership tree: an n-ary tree in which every node has at most one parent.

Everything else in the package (expressions, environments, declarations,
rule formulas, instantiations, whole documents) is built from this one
primitive. The structural mutators here are the only ones: instantiation,
body insertion, and hint processing are all expressed in terms of them.

Invariants:
    - a node has at most one parent at any time
    - the parent/child relation never gains a cycle
"""

from typing import Optional


class Structure:
    """A node in an ordered tree with single ownership."""

    def __init__(self, *children):
        self._parent = None
        self._children = []
        for child in children:
            self.insert_child(child, len(self._children))

    def parent(self) -> Optional["Structure"]:
        return self._parent

    def children(self) -> list:
        """A snapshot of the children list; mutating it does not touch the tree."""
        return list(self._children)

    def child(self, i: int) -> Optional["Structure"]:
        """The child at index i, or None if i is out of range."""
        if 0 <= i < len(self._children):
            return self._children[i]
        return None

    def num_children(self) -> int:
        return len(self._children)

    def first_child(self):
        return self.child(0)

    def last_child(self):
        return self.child(len(self._children) - 1)

    def insert_child(self, child, at_index: int = 0):
        """
        Insert child so that it lands at position at_index.

        A no-op if child is not a Structure, is this node itself, or the
        index is outside 0..num_children(). If child is currently an
        ancestor of this node, this node is first detached from its own
        parent so the tree stays acyclic. child is detached from wherever
        it was before.
        """
        if not isinstance(child, Structure):
            return
        if child is self:
            return
        if at_index < 0 or at_index > len(self._children):
            return
        walk = self._parent
        while walk is not None:
            if walk is child:
                self.remove()
                break
            walk = walk._parent
        child.remove()
        self._children.insert(at_index, child)
        child._parent = self

    def push_child(self, child):
        """Append child at the end of the children list."""
        self.insert_child(child, len(self._children))

    def remove(self):
        """Detach this node from its parent, if it has one."""
        if self._parent is not None:
            self._parent._children.pop(self.index_in_parent())
            self._parent = None

    def remove_child(self, i: int):
        if 0 <= i < len(self._children):
            self._children[i].remove()

    def index_in_parent(self) -> Optional[int]:
        if self._parent is None:
            return None
        for i, sibling in enumerate(self._parent._children):
            if sibling is self:
                return i
        return None

    def previous_sibling(self):
        index = self.index_in_parent()
        if index is None or index == 0:
            return None
        return self._parent._children[index - 1]

    def next_sibling(self):
        index = self.index_in_parent()
        if index is None:
            return None
        return self._parent.child(index + 1)

    def replace_with(self, other: "Structure"):
        """
        Put other exactly where this node sits and detach this node.

        If other had a parent it is detached from it first. Does nothing
        if this node has no parent.
        """
        original_parent = self._parent
        if original_parent is None or other is self:
            return
        original_index = self.index_in_parent()
        self.remove()
        original_parent.insert_child(other, original_index)

    def root(self) -> "Structure":
        walk = self
        while walk._parent is not None:
            walk = walk._parent
        return walk

    def is_ancestor_of(self, other: "Structure") -> bool:
        """True if self is other or one of other's ancestors."""
        walk = other
        while walk is not None:
            if walk is self:
                return True
            walk = walk._parent
        return False

    def address(self, ancestor=None) -> list:
        """Child indices leading from ancestor (default: the root) down to this node."""
        path = []
        walk = self
        while walk._parent is not None and walk is not ancestor:
            path.append(walk.index_in_parent())
            walk = walk._parent
        path.reverse()
        return path

    def index(self, address: list):
        """Follow an address down from this node; None if it leads nowhere."""
        walk = self
        for i in address:
            walk = walk.child(i)
            if walk is None:
                return None
        return walk
