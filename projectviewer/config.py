#  -*- coding: utf-8 -*-
"""
Engine configuration.

:class:`Settings` is a Persistable, so a configuration can be saved next to
the store and loaded back::

    settings = Settings(store_path='~/.projects.pvdb')
    settings.save('projectviewer.cfg')

    settings = Settings.load('projectviewer.cfg')
"""

from __future__ import annotations

from pathlib import Path

from projectviewer.serialization import Persistable, SerializableProperty, check_types


SORT_ORDERS: tuple[str, ...] = ('position', 'alphabetically', 'reverse-alphabetically')


class Settings(Persistable):
    """
    Settings of a :class:`projectviewer.engine.HierarchyEngine`.

    Attributes
    ----------
    name : str
        Namespace of configuration keys, see ``config_key``. Default
        'project-viewer'.
    store_path : Path or None
        File the store is flushed to. None keeps the store in memory.
    default_sort_by : str
        Sort order given to new clients and groups when none is requested.
        One of ``SORT_ORDERS``. Default 'position'.
    empty_status_text : str
        Status bar text when the selection has no project name. Default
        'No selected project'.
    status_separator : str
        Separator between breadcrumb levels. Default ' / '.
    """

    extension = '.cfg'

    name: str = SerializableProperty(default='project-viewer')

    @name.parser
    def name(self, value: str) -> str:
        check_types(value, str)
        value = value.strip()

        if not value:
            raise ValueError('Settings name cannot be blank.')

        return value

    store_path: Path|None = SerializableProperty()

    @store_path.parser
    def store_path(self, value: Path|str|None) -> Path|None:
        if value is None:
            return None

        check_types(value, (str, Path))
        return Path(value).expanduser()

    default_sort_by: str = SerializableProperty(default='position')

    @default_sort_by.parser
    def default_sort_by(self, value: str) -> str:
        if value not in SORT_ORDERS:
            raise ValueError(f'Invalid sort order: {value!r}. Must be one of {SORT_ORDERS}.')

        return value

    empty_status_text: str = SerializableProperty(default='No selected project')

    status_separator: str = SerializableProperty(default=' / ')

    def config_key(self, key: str) -> str:
        """
        Return ``key`` namespaced under ``name``.

        >>> Settings().config_key('statusBar')
        'project-viewer.statusBar'
        """
        return f'{self.name}.{key}'


__all__ = [
    'SORT_ORDERS',
    'Settings',
]
