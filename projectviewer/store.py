#  -*- coding: utf-8 -*-
"""
Persistent store of the project tree.

The :class:`Database` keeps, for each record type, the ordered list of ids
shown in the tree (``views``), the records themselves (``records``) and a
side table binding view nodes to records (``mapper``). Only ``views`` and
``records`` are persisted; view nodes are rebuilt from them with
:meth:`projectviewer.view.ViewSurface.populate`.
"""

from __future__ import annotations

import logging
import weakref

from pathlib import Path

from rich.console import RenderableType
from rich.text import Text

from projectviewer.serialization import Persistable, SerializableProperty, check_types
from projectviewer.display import Displayable
from projectviewer.entity import Entity

# ---------- ---------- ---------- ---------- ---------- ---------- typing
from typing import Any, Iterator


logger = logging.getLogger(__name__)


VIEW_KEYS: tuple[str, ...] = ('clients', 'groups', 'projects')


# ========== ========== ========== ========== ========== Mapper
class Mapper:
    """
    Binding table from view nodes to records.

    Nodes are held weakly: dropping the last reference to a node drops its
    binding. Keys are compared by identity.
    """

    def __init__(self) -> None:
        self._bindings: weakref.WeakKeyDictionary[Any, Entity] = weakref.WeakKeyDictionary()

    def __contains__(self, view: Any) -> bool:
        return view in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def get(self, view: Any) -> Entity|None:
        if view is None:
            return None

        return self._bindings.get(view)

    def set(self, view: Any, entity: Entity) -> None:
        check_types(entity, Entity)
        self._bindings[view] = entity

    def delete(self, view: Any) -> None:
        self._bindings.pop(view, None)

    def views_of(self, entity: Entity) -> list[Any]:
        """Return every node bound to ``entity``."""
        return [view for view, bound in self._bindings.items() if bound is entity]


# ========== ========== ========== ========== ========== Database
class Database(Persistable, Displayable):
    """
    Ordered id lists, records and view bindings of the project tree.

    Class Attributes
    ----------------
    extension : str
        File extension for saved stores ('.pvdb').

    Attributes
    ----------
    views : dict[str, list[str]]
        Ordered ids per plural type: 'clients', 'groups', 'projects'.
    records : dict[str, Entity]
        Records by id.
    mapper : Mapper
        View node to record bindings. Not persisted.
    path : Path or None
        Destination of :meth:`store`. Not persisted. When None, ``store()``
        only logs.

    Examples
    --------
    >>> db = Database(path='workspace.pvdb')
    >>> db.views['projects'].append(project.id)
    >>> db.records[project.id] = project
    >>> db.store()
    >>> Database.open('workspace.pvdb').views['projects']
    [...]
    """
    # ========== ========== ========== ========== ========== class attributes
    extension = '.pvdb'

    __eq__ = object.__eq__
    __hash__ = object.__hash__

    # ---------- ---------- ---------- views
    views: dict[str, list[str]] = SerializableProperty(
        default=lambda self: {key: [] for key in VIEW_KEYS}, doc="""
    Ordered lists of record ids per plural type.

    Missing type keys are filled with empty lists on assignment.
    """)

    @views.parser
    def views(self, value: dict[str, list[str]]) -> dict[str, list[str]]:
        check_types(value, dict)

        views = {key: [] for key in VIEW_KEYS}

        for key, ids in value.items():
            check_types(ids, list)
            views[key] = [str(id_) for id_ in ids]

        return views

    # ---------- ---------- ---------- records
    records: dict[str, Entity] = SerializableProperty(default=lambda self: {}, doc="""
    Records by id. Parents are stored as ids and relinked by ``open``.
    """)

    @records.parser
    def records(self, value: dict[str, Entity]) -> dict[str, Entity]:
        check_types(value, dict)

        for entity in value.values():
            check_types(entity, Entity)

        return dict(value)

    # ========== ========== ========== ========== ========== special methods
    def __init__(self, *args, path: Path|str|None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.path = Path(path) if path is not None else None

    def __iter__(self) -> Iterator[Entity]:
        """Iterate over the records in view order: clients, groups, projects."""
        for key in VIEW_KEYS:
            for id_ in self.views[key]:
                entity = self.records.get(id_)

                if entity is not None:
                    yield entity

    # ========== ========== ========== ========== ========== protected methods
    def _title(self) -> Text:
        return Text(type(self).__name__, style='italic bold bright_yellow')

    def _content(self) -> RenderableType:
        data = {key: str(len(ids)) for key, ids in self.views.items()}
        data['path'] = str(self.path) if self.path is not None else '-'
        return self.format_as_form(data)

    # ========== ========== ========== ========== ========== public methods
    @classmethod
    def open(cls, path: Path|str) -> Database:
        """
        Load a store from ``path`` and relink every record to its parent.

        If ``path`` does not exist, return an empty store that will be
        written there on the first ``store()``.
        """
        path = Path(path)

        if not path.is_file():
            logger.info('No store at %s; starting empty.', path)
            return cls(path=path)

        database = cls.load(path)
        database.path = path
        database.relink()

        logger.info('Loaded store from %s (%d records).', path, len(database.records))
        return database

    def relink(self) -> None:
        """
        Replace the parent ids read from disk by live parent references.

        A record whose parent id is missing from ``records`` (for example
        the child of a removed group) is logged and left at the root.
        """
        for entity in self.records.values():
            parent_id = entity.parent_id

            if parent_id is not None and entity.parent is None:

                if parent_id in self.records:
                    entity.parent = self.records[parent_id]
                else:
                    logger.warning('%r refers to unknown parent id %r; moved to the root.', entity, parent_id)
                    entity.parent = None

    def register(self, entity: Entity) -> None:
        """Append ``entity`` to its type's ordered list and record it."""
        self.views[f'{entity.type}s'].append(entity.id)
        self.records[entity.id] = entity

    def unregister(self, entity: Entity) -> bool:
        """
        Remove ``entity`` from its type's ordered list and the records.

        Returns False when the id was not in the ordered list.
        """
        ids = self.views[f'{entity.type}s']

        try:
            ids.remove(entity.id)
        except ValueError:
            return False
        finally:
            self.records.pop(entity.id, None)

        return True

    def store(self) -> None:
        """Flush to ``path``, if set."""
        if self.path is None:
            logger.debug('Store has no path; nothing flushed.')
            return

        self.save(self.path, use_default_extension=False)
        logger.debug('Store flushed to %s.', self.path)

    # ---------- ---------- ---------- ---------- ---------- properties
    @property
    def mapper(self) -> Mapper:
        try:
            return self.__mapper
        except AttributeError:
            self.__mapper = Mapper()
            return self.__mapper


__all__ = [
    'VIEW_KEYS',
    'Mapper',
    'Database',
]
