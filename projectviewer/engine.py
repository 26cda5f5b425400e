#  -*- coding: utf-8 -*-
"""
Create, update and remove clients, groups and projects.

:class:`HierarchyEngine` keeps four things consistent: the records and their
parent links, the view nodes bound to them, the store, and the status bar
showing the current selection. Every operation returns a :class:`Result`
meant to be shown to the user; creation raises :class:`InvalidInputError`
when the request is incomplete.

Examples
--------
Build ``Acme / Infra / Foo``::

    engine = HierarchyEngine(surface=ViewSurface(StatusBar()))

    acme = Client()
    engine.create_item(ItemChain(current=acme),
                       {'name': 'Acme', 'view': ViewNode()})

    infra = Group()
    engine.create_item(ItemChain(current=infra),
                       {'name': 'Infra', 'view': ViewNode(),
                        'has_client': True, 'client': acme})

    foo = Project()
    foo_view = ViewNode()
    engine.create_item(ItemChain(current=foo),
                       {'name': 'Foo', 'view': foo_view, 'paths': ['/srv/foo'],
                        'has_group': True, 'group': infra})

    engine.set_selected_project_view(foo_view)
    engine.get_status_bar().text  # 'Acme / Infra / Foo'
"""

from __future__ import annotations

import logging

from projectviewer.config import Settings
from projectviewer.entity import Entity, ItemChain, get_item_chain
from projectviewer.store import Database
from projectviewer.utils import generate_uuid, sanitize_string
from projectviewer.view import ViewNode, ViewSurface, StatusBar
from projectviewer.workspace import Workspace

# ---------- ---------- ---------- ---------- ---------- ---------- typing
from typing import Any, Mapping


logger = logging.getLogger(__name__)


# ========== ========== ========== ========== ========== Result
class Result:
    """
    Outcome of an engine operation, ready to be shown to the user.

    Attributes
    ----------
    type : str
        'success', or 'warning' for rejected requests.
    message : str
        Human-readable description.
    """

    SUCCESS = 'success'
    WARNING = 'warning'

    def __init__(self, type: str, message: str) -> None:
        if type not in (Result.SUCCESS, Result.WARNING):
            raise ValueError(f"Invalid result type: {type!r}. Must be 'success' or 'warning'.")

        self.type = type
        self.message = message

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Result):
            return NotImplemented

        return (self.type, self.message) == (other.type, other.message)

    __hash__ = None

    def __repr__(self) -> str:
        return f'Result(type={self.type!r}, message={self.message!r})'

    def as_dict(self) -> dict[str, str]:
        return {'type': self.type, 'message': self.message}


class InvalidInputError(ValueError):
    """
    Raised when a creation request is incomplete.

    Attributes
    ----------
    result : Result
        Warning to show to the user.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.result = Result(Result.WARNING, message)


# ========== ========== ========== ========== ========== SelectionContext
class SelectionContext:
    """
    Cached selection slots of one engine.

    Attributes
    ----------
    selected_project_view : ViewNode or None
        Last node selected through the engine, or resolved from the surface.
    status_bar : StatusBar or None
        Status display, resolved from the surface on first use.
    """

    def __init__(self) -> None:
        self.selected_project_view: ViewNode|None = None
        self.status_bar: StatusBar|None = None

    def clear_selection(self) -> None:
        self.selected_project_view = None

    def clear_status_bar(self) -> None:
        self.status_bar = None

    def forget(self, view: ViewNode) -> None:
        """Drop ``view`` from the selection if it is the selected node."""
        if self.selected_project_view is view:
            self.selected_project_view = None


# ========== ========== ========== ========== ========== HierarchyEngine
class HierarchyEngine:
    """
    CRUD operations and selection tracking for the project tree.

    Parameters
    ----------
    database : Database, optional
        Store of records. Defaults to ``Database.open(settings.store_path)``
        when a store path is configured, else an in-memory store.
    surface : ViewSurface, optional
        View tree the records are bound to. Defaults to an empty surface
        with a status bar.
    workspace : Workspace, optional
        Registry notified when project paths change.
    settings : Settings, optional
        Engine configuration.
    context : SelectionContext, optional
        Selection cache. Each engine gets its own by default.

    Notes
    -----
    Operations run to completion synchronously and assume a single caller.
    Nothing is rolled back when a step fails half-way (e.g. the store cannot
    be written after the view was updated).
    """

    def __init__(self,
                 database: Database|None = None,
                 surface: ViewSurface|None = None,
                 workspace: Workspace|None = None,
                 settings: Settings|None = None,
                 context: SelectionContext|None = None) -> None:

        self.settings = settings if settings is not None else Settings()

        if database is None:
            if self.settings.store_path is not None:
                database = Database.open(self.settings.store_path)
            else:
                database = Database()

        self.database = database
        self.surface = surface if surface is not None else ViewSurface(StatusBar())
        self.workspace = workspace if workspace is not None else Workspace()
        self.context = context if context is not None else SelectionContext()

    # ========== ========== ========== ========== ========== private methods
    def _reject(self, message: str) -> InvalidInputError:
        logger.warning('Creation rejected: %s', message)
        return InvalidInputError(message)

    def _parent_view(self, entity: Entity) -> ViewNode|None:
        return self.surface.get_by_id(entity.id)

    # ========== ========== ========== ========== ========== public methods
    @staticmethod
    def get_item_chain(entity: Entity|None) -> ItemChain:
        """See :func:`projectviewer.entity.get_item_chain`."""
        return get_item_chain(entity)

    def get_db(self) -> Database:
        return self.database

    def get_config(self, key: str) -> str:
        """Return ``key`` namespaced under the configured name."""
        return self.settings.config_key(key)

    def fetch_projects(self) -> list[Entity]:
        """Return the project records bound to the nodes of the tree, in tree order."""
        projects = []

        for node in self.surface:
            model = self.database.mapper.get(node)

            if model is not None and model.type == 'project':
                projects.append(model)

        return projects

    # ---------- ---------- ---------- ---------- ---------- create
    def create_item(self, original: ItemChain, changes: Mapping[str, Any]|None) -> Result:
        """
        Create the record ``original.current`` and bind it to ``changes['view']``.

        Parameters
        ----------
        original : ItemChain
            Chain whose ``current`` is a new, unparented record with a type.
        changes : mapping
            ``name`` (required), ``view`` (required), ``icon``, ``sort_by``
            (clients and groups), ``paths`` (projects), ``has_group`` and
            ``group``, ``has_client`` and ``client``.

        Returns
        -------
        Result
            Success result naming the new record.

        Raises
        ------
        InvalidInputError
            If ``original.current`` or ``changes`` is missing, the record has
            no type, or no name is given. Nothing is modified in that case.
        """
        current: Entity|None = getattr(original, 'current', None)

        if current is None or changes is None:
            raise self._reject('Please provide the minimum parameters to create a new item')

        if current.type is None:
            raise self._reject('Please select a type to create')

        if not changes.get('name'):
            raise self._reject(f'Please define a valid name for the {current.type}')

        view: ViewNode = changes.get('view')
        new_name = sanitize_string(changes['name'])

        self.database.mapper.set(view, current)

        current[current.key('id')] = generate_uuid()
        view.set_id(current.id)

        current[current.key('name')] = new_name
        view.set_text(new_name)

        current[current.key('icon')] = changes.get('icon') or ''
        view.set_icon(current[current.key('icon')])

        if current.type != 'project':
            current['sort_by'] = changes.get('sort_by') or self.settings.default_sort_by
            current[current.key('expanded')] = False
            view.set_expanded(False)
        else:
            current[current.key('paths')] = list(changes.get('paths') or [])

        if changes.get('has_group'):
            current.parent = changes['group']
            self._parent_view(changes['group']).add_child(view)

        elif changes.get('has_client'):
            current.parent = changes['client']
            self._parent_view(changes['client']).add_child(view)

        else:
            current.parent = None
            self.surface.root.add_node(view)

        self.database.register(current)
        self.database.store()

        logger.info('Created %s %r (%s).', current.type, new_name, current.id)
        return Result(Result.SUCCESS, f'{current.type} {new_name} was created')

    # ---------- ---------- ---------- ---------- ---------- update
    def update_item(self, original: ItemChain, changes: Mapping[str, Any]) -> Result:
        """
        Apply ``changes`` to ``original.current`` and its view node.

        Parameters
        ----------
        original : ItemChain
            Chain of the record to update, as given by ``get_item_chain``.
        changes : mapping
            ``name``: new name.
            ``icon``: new icon; a missing or empty icon clears it.
            ``paths``: ``{'remove': [...], 'add': [...]}`` (projects).
            ``has_group``/``group`` or ``has_client``/``client``: new parent.

        Returns
        -------
        Result
            Success result naming the record as it was before the update.

        Notes
        -----
        Without ``has_group``/``has_client``, a record that has no parent is
        (re)attached to the root list; a record that has one keeps it.
        """
        current = original.current
        current_name = current.name
        item_view = self.surface.get_by_id(current.id)

        if changes.get('name'):
            new_name = sanitize_string(changes['name'])
            current[current.key('name')] = new_name
            item_view.set_text(new_name)

        if changes.get('icon'):
            current[current.key('icon')] = changes['icon']
            item_view.set_icon(changes['icon'], persist=True)
        else:
            current[current.key('icon')] = None
            item_view.set_icon('')

        if changes.get('paths'):
            paths: list[str] = current.attributes[current.key('paths')]

            for path in changes['paths'].get('remove', []):
                if path in paths:
                    paths.remove(path)
                    self.workspace.remove_path(path)

            for path in changes['paths'].get('add', []):
                if path not in paths:
                    paths.append(path)
                    self.workspace.add_path(path)

        new_parent_view: ViewNode|None = None

        if changes.get('has_group'):
            current.parent = changes['group']
            new_parent_view = self._parent_view(changes['group'])

        elif changes.get('has_client'):
            current.parent = changes['client']
            new_parent_view = self._parent_view(changes['client'])

        elif original.parent is None and original.root is None:
            current.parent = None
            new_parent_view = self.surface.root

        if new_parent_view is not None:
            new_parent_view.add_child(item_view)

        self.database.store()

        logger.info('Updated %s %r (%s).', current.type, current_name, current.id)
        return Result(Result.SUCCESS, f'Updates to {current_name} where applied!')

    # ---------- ---------- ---------- ---------- ---------- remove
    def remove_item(self, entity: Entity) -> Result:
        """
        Remove ``entity`` from the store and detach its view node.

        A record that is not listed in the store is tolerated: only the
        store is flushed. Children of the removed node leave the tree with it.
        """
        name = entity.name
        view = None

        if self.database.unregister(entity):
            view = self.surface.get_by_id(entity.id)

        if view is not None:
            view.remove()
            self.database.mapper.delete(view)
            self.context.forget(view)

        self.database.store()

        logger.info('Removed %s %r (%s).', entity.type, name, entity.id)
        return Result(Result.SUCCESS, f'Removed {entity.type} called {name}!')

    # ---------- ---------- ---------- ---------- ---------- selection
    def set_selected_project_view(self, view: ViewNode|None) -> None:
        """Select ``view`` and refresh the status bar. None is ignored."""
        if view is None:
            return

        self.context.selected_project_view = view
        self.update_status_bar()

    def get_selected_project_view(self) -> ViewNode|None:
        """
        Return the selected node, falling back to (and caching) the active
        node of the surface.
        """
        view = self.context.selected_project_view

        if view is None:
            view = self.surface.query_active()
            self.context.selected_project_view = view

        return view

    def get_selected_project_model(self) -> Entity|None:
        view = self.get_selected_project_view()

        if view is None:
            return None

        return self.database.mapper.get(view)

    # ---------- ---------- ---------- ---------- ---------- status bar
    def clear_status_bar(self) -> None:
        self.context.clear_status_bar()

    def get_status_bar(self) -> StatusBar|None:
        status_bar = self.context.status_bar

        if status_bar is None:
            status_bar = self.surface.status_bar
            self.context.status_bar = status_bar

        return status_bar

    def update_status_bar(self) -> str|None:
        """
        Show the breadcrumb of the selected record, e.g. ``'Acme / Infra / Foo'``.

        Levels without a name are left out. Returns the text shown, or None
        when there is no status bar or no selection.
        """
        status_bar = self.get_status_bar()
        model = self.get_selected_project_model()

        if status_bar is None or model is None:
            return None

        levels = [model.resolve('client_name'), model.resolve('group_name')]
        project_name = model.resolve('project_name')

        if project_name:
            text = self.settings.status_separator.join([level for level in levels if level] + [project_name])
        else:
            text = self.settings.empty_status_text

        status_bar.set_text(text)
        return text

    def set_status_bar_text(self, text: Any) -> None:
        """Overwrite the status bar text. Non-string values are ignored."""
        status_bar = self.get_status_bar()

        if status_bar is not None and isinstance(text, str):
            status_bar.set_text(text)


__all__ = [
    'Result',
    'InvalidInputError',
    'SelectionContext',
    'HierarchyEngine',
]
