#  -*- coding: utf-8 -*-
"""
Capability mixins for view nodes.

Each mixin contributes one descriptor-backed attribute: ``id``, ``text``,
``icon`` or ``expanded``. They are orthogonal and composed by
:class:`projectviewer.view.ViewNode`.
"""

from __future__ import annotations

from projectviewer.serialization import SerializableProperty

# ---------- ---------- ---------- ---------- ---------- ---------- typing
from typing import Any


# ========== ========== ========== ========== ========== Identifiable
class Identifiable:
    """
    Mixin for nodes carrying the identifier of the entity they display.

    The id is write-once: a node is created anonymous and receives the bound
    entity's id exactly once, when the entity is created or restored.

    Attributes
    ----------
    id : str or None
        Identifier, None until assigned.

    Examples
    --------
    >>> node = Identifiable()
    >>> node.id is None
    True
    >>> node.id = '4d1f0c2a9e6b4c8f8d3e2b1a0f9e8d7c'
    >>> node.id = 'another'
    Traceback (most recent call last):
        ...
    AttributeError: id is a write-once property and has already been set
    """

    id = SerializableProperty(writeonce=True, doc="""
    Identifier of the bound entity.

    Type
    ----
    str or None

    Raises
    ------
    AttributeError
        If the id was already set.
    ValueError
        If the value is blank.
    """)

    @id.parser
    def id(self, value: Any) -> str|None:
        if value is None:
            return None

        value = str(value).strip()

        if not value:
            raise ValueError(f"Invalid id: {value!r}. Must be a non-empty string.")

        return value

    def set_id(self, value: str) -> None:
        self.id = value


# ========== ========== ========== ========== ========== Labelable
class Labelable:
    """Mixin for nodes displaying a line of text."""

    text = SerializableProperty(default='')

    @text.parser
    def text(self, value: Any) -> str:
        return '' if value is None else str(value)

    def set_text(self, value: str) -> None:
        self.text = value


# ========== ========== ========== ========== ========== Iconable
class Iconable:
    """
    Mixin for nodes displaying an icon.

    ``icon_persisted`` records whether the last icon was set with the
    ``persist`` flag, i.e. chosen by the user rather than derived.
    """

    icon = SerializableProperty(default='')

    @icon.parser
    def icon(self, value: Any) -> str:
        return '' if value is None else str(value)

    icon_persisted = SerializableProperty(default=False)

    def set_icon(self, icon: str|None, persist: bool = False) -> None:
        self.icon = icon
        self.icon_persisted = bool(persist) and bool(self.icon)


# ========== ========== ========== ========== ========== Expandable
class Expandable:
    """Mixin for nodes that can collapse their children."""

    expanded = SerializableProperty(default=False)

    @expanded.parser
    def expanded(self, value: Any) -> bool:
        return bool(value)

    def set_expanded(self, value: bool) -> None:
        self.expanded = value

    def toggle(self) -> bool:
        self.expanded = not self.expanded
        return self.expanded


__all__ = [
    'Identifiable',
    'Labelable',
    'Iconable',
    'Expandable',
]
