#  -*- coding: utf-8 -*-
"""
Registry of the folders currently opened as workspace roots.
"""

from __future__ import annotations

import logging

from pathlib import Path

from typing import Iterator


logger = logging.getLogger(__name__)


class Workspace:
    """
    Ordered set of workspace root paths.

    Paths are kept as the strings they were registered with. Registering a
    path twice or removing an unknown path is a no-op.

    Examples
    --------
    >>> workspace = Workspace()
    >>> workspace.add_path('/srv/foo')
    True
    >>> workspace.add_path('/srv/foo')
    False
    >>> workspace.paths
    ['/srv/foo']
    """

    def __init__(self, paths: list[str|Path]|None = None) -> None:
        self._paths: list[str] = []

        for path in paths or []:
            self.add_path(path)

    def __contains__(self, path: str|Path) -> bool:
        return str(path) in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def add_path(self, path: str|Path) -> bool:
        """Register ``path``. Return False if it was already registered."""
        path = str(path)

        if path in self._paths:
            return False

        self._paths.append(path)
        logger.debug('Workspace root added: %s', path)
        return True

    def remove_path(self, path: str|Path) -> bool:
        """Unregister ``path``. Return False if it was not registered."""
        path = str(path)

        if path not in self._paths:
            return False

        self._paths.remove(path)
        logger.debug('Workspace root removed: %s', path)
        return True

    def set_paths(self, paths: list[str|Path]) -> None:
        """Replace every registered root, e.g. when opening a project."""
        self._paths = []

        for path in paths:
            self.add_path(path)

    @property
    def paths(self) -> list[str]:
        return list(self._paths)
