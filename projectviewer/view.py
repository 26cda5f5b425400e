#  -*- coding: utf-8 -*-
"""
In-memory view surface for the project tree.

The surface is a tree of :class:`ViewNode` objects hanging from a root
:class:`ListTree`, plus an optional :class:`StatusBar`. The engine only
relies on a handful of operations:

- ``ViewNode.set_id/set_text/set_icon/set_expanded/add_child/remove``
- ``ListTree.add_node``
- ``ViewSurface.get_by_id`` (only nodes attached to the tree are found)
- ``ViewSurface.query_active`` and ``ViewSurface.status_bar``

The surface renders itself with Rich, so it can be printed as-is.
"""

from __future__ import annotations

import logging

from rich.console import RenderableType, Group
from rich.text import Text
from rich.tree import Tree

from projectviewer.display import Displayable
from projectviewer.mixin import Identifiable, Labelable, Iconable, Expandable

# ---------- ---------- ---------- ---------- ---------- ---------- typing
from typing import Iterator, TYPE_CHECKING

if TYPE_CHECKING:
    from projectviewer.store import Database


logger = logging.getLogger(__name__)


# ========== ========== ========== ========== ========== ViewNode
class ViewNode(Identifiable, Labelable, Iconable, Expandable):
    """
    Renderable node bound to one client, group or project.

    Nodes are created anonymous; the engine assigns id, text and icon when it
    binds the node to a record. Equality and hashing are by identity.

    Attributes
    ----------
    children : list[ViewNode]
        Direct children, in display order.
    parent_node : ViewNode or None
        Node this one is attached to, None when detached.
    """

    def __init__(self, text: str = '', icon: str = '') -> None:
        self._children: list[ViewNode] = []
        self._parent_node: ViewNode|None = None

        self.set_text(text)
        self.set_icon(icon)

    def __repr__(self) -> str:
        return f'{type(self).__name__}(id={self.id!r}, text={self.text!r})'

    def __iter__(self) -> Iterator[ViewNode]:
        return iter(self._children)

    def __contains__(self, node: ViewNode) -> bool:
        return any(child is node for child in self._children)

    # ========== ========== ========== ========== ========== public methods
    def add_child(self, node: ViewNode) -> None:
        """
        Attach ``node`` as the last child, detaching it from its current
        parent first.

        Raises
        ------
        ValueError
            If ``node`` is this node or one of its ancestors.
        """
        if node is self or node in self.ancestors():
            raise ValueError(f'{node!r} cannot be attached under {self!r}: circular dependency.')

        node.remove()

        self._children.append(node)
        node._parent_node = self

    def remove(self) -> None:
        """Detach this node (and its subtree) from its parent, if any."""
        parent = self._parent_node

        if parent is None:
            return

        parent._children = [child for child in parent._children if child is not self]
        self._parent_node = None

    def ancestors(self) -> list[ViewNode]:
        """Nodes from the parent node up to the top of the tree."""
        ancestors = []
        node = self._parent_node

        while node is not None:
            ancestors.append(node)
            node = node._parent_node

        return ancestors

    def walk(self) -> Iterator[ViewNode]:
        """Depth-first iteration over the subtree, this node excluded."""
        for child in self._children:
            yield child
            yield from child.walk()

    # ---------- ---------- ---------- ---------- ---------- properties
    @property
    def children(self) -> list[ViewNode]:
        return list(self._children)

    @property
    def parent_node(self) -> ViewNode|None:
        return self._parent_node

    @property
    def label(self) -> str:
        return f'{self.icon} {self.text}' if self.icon else self.text


# ========== ========== ========== ========== ========== ListTree
class ListTree(ViewNode):
    """Root container of the project tree. Records at the root hang here."""

    def add_node(self, node: ViewNode) -> None:
        self.add_child(node)


# ========== ========== ========== ========== ========== StatusBar
class StatusBar(Labelable):
    """Single-line status display."""

    def __repr__(self) -> str:
        return f'StatusBar(text={self.text!r})'


# ========== ========== ========== ========== ========== ViewSurface
class ViewSurface(Displayable):
    """
    The project tree as a whole: root list, active node and status bar.

    Parameters
    ----------
    status_bar : StatusBar or None, optional
        Status display. Pass None for a surface without one.

    Examples
    --------
    >>> surface = ViewSurface()
    >>> node = ViewNode('Foo')
    >>> node.set_id('3b5e8f0c1d2a4b6c9e7f0a1b2c3d4e5f')
    >>> surface.root.add_node(node)
    >>> surface.get_by_id('3b5e8f0c1d2a4b6c9e7f0a1b2c3d4e5f') is node
    True
    """

    def __init__(self, status_bar: StatusBar|None = None) -> None:
        self.root = ListTree()
        self.status_bar = status_bar
        self._active: ViewNode|None = None

    def __iter__(self) -> Iterator[ViewNode]:
        return self.root.walk()

    def __contains__(self, node: ViewNode) -> bool:
        return any(item is node for item in self)

    # ========== ========== ========== ========== ========== protected methods
    def _title(self) -> Text:
        return Text('Project Viewer', style='italic bold bright_yellow')

    def _content(self) -> RenderableType:
        tree = Tree(Text('projects', style='bold'),
                    guide_style=self.display_settings.tree_guide_style,
                    hide_root=True)

        active = self.query_active()

        def branch(parent: Tree, node: ViewNode) -> None:
            style = self.display_settings.selected_style if node is active else ''
            label = Text(node.label, style=style)

            if node.children and not node.expanded:
                label.append(f' (+{len(node.children)})', style='dim')
                parent.add(label)
                return

            subtree = parent.add(label)

            for child in node:
                branch(subtree, child)

        for node in self.root:
            branch(tree, node)

        contents: list[RenderableType] = [tree]

        if self.status_bar is not None:
            contents.append(Text(self.status_bar.text, style=self.display_settings.status_style))

        return Group(*contents)

    # ========== ========== ========== ========== ========== public methods
    def get_by_id(self, id_: str|None) -> ViewNode|None:
        """Return the attached node with id ``id_``, or None."""
        if id_ is None:
            return None

        for node in self:
            if node.id == id_:
                return node

        return None

    def activate(self, node: ViewNode|None) -> None:
        """Mark ``node`` as the active (focused) node."""
        self._active = node

    def query_active(self) -> ViewNode|None:
        """Return the active node if it is still attached to the tree."""
        active = self._active

        if active is not None and active in self:
            return active

        return None

    def populate(self, database: Database) -> None:
        """
        Build one node per record of ``database`` and bind them in its mapper.

        Clients are attached first, then groups, then projects, so that every
        parent node exists before its children are attached. Records already
        displayed are skipped.
        """
        for plural in ('clients', 'groups', 'projects'):

            for id_ in database.views.get(plural, []):

                if self.get_by_id(id_) is not None:
                    continue

                entity = database.records.get(id_)

                if entity is None:
                    logger.warning('No record for %s id %s; skipping.', plural[:-1], id_)
                    continue

                node = ViewNode(text=entity.name or '', icon=entity.attributes.get(entity.key('icon')) or '')
                node.set_id(id_)

                if entity.type != 'project':
                    node.set_expanded(entity.attributes.get(entity.key('expanded'), False))

                parent_node = self.get_by_id(entity.parent_id)

                if parent_node is None:
                    parent_node = self.root

                parent_node.add_child(node)

                database.mapper.set(node, entity)


__all__ = [
    'ViewNode',
    'ListTree',
    'StatusBar',
    'ViewSurface',
]
