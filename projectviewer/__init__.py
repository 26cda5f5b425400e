#  -*- coding: utf-8 -*-
"""
Projectviewer: organize workspace roots into clients, groups and projects.

Projectviewer keeps a three-level tree of user-defined records (clients,
groups and projects) bound to a view tree and persisted in an HDF5 store.

Key Features
------------
- **Parent chain**: records delegate missing attributes to their parent, so a
  project knows the client and group it belongs to
- **CRUD engine**: creation, update (including moving a record) and removal
  keep records, view nodes and store consistent
- **Selection tracking**: the status bar shows the breadcrumb of the selected
  project
- **Rich terminal output**: the view tree renders with the Rich library

Modules
-------
entity
    Client, Group and Project records, item chains
engine
    HierarchyEngine, Result and InvalidInputError
store
    Database (HDF5-backed) and the view-to-record Mapper
view
    In-memory view surface: ViewSurface, ViewNode, ListTree, StatusBar
config
    Persistable engine Settings
serialization
    SerializableProperty, Serializable and Persistable

Examples
--------
>>> from projectviewer import HierarchyEngine, ItemChain, Project, ViewNode
>>>
>>> engine = HierarchyEngine()
>>> foo = Project()
>>> view = ViewNode()
>>> engine.create_item(ItemChain(current=foo), {'name': 'Foo', 'view': view})
Result(type='success', message='project Foo was created')
>>> engine.set_selected_project_view(view)
>>> engine.get_status_bar().text
'Foo'
"""


from .serialization import *
from .mixin import *
from .display import *
from .entity import *
from .view import *
from .store import *
from .workspace import Workspace
from .config import Settings
from .engine import *
from .logging_config import setup_logging


__all__ = [
    "Serializable",
    "Persistable",
    "SerializableProperty",
    "DisplaySettings",
    "Displayable",
    "Entity",
    "Client",
    "Group",
    "Project",
    "ItemChain",
    "get_item_chain",
    "ViewNode",
    "ListTree",
    "StatusBar",
    "ViewSurface",
    "Database",
    "Mapper",
    "Workspace",
    "Settings",
    "Result",
    "InvalidInputError",
    "SelectionContext",
    "HierarchyEngine",
    "setup_logging",
]


try:
    # this will run if projectviewer is installed
    from importlib.metadata import metadata, PackageNotFoundError

    meta = metadata('projectviewer')

    __author__ = meta['Author-email']
    __license__ = meta['License']
    __version__ = meta['Version']

except PackageNotFoundError:
    # this will run during development
    import toml
    from pathlib import Path

    pyproject_filepath = Path(__file__).parent.parent / "pyproject.toml"

    with pyproject_filepath.open() as file:
        pyproject = toml.load(file)

    __version__ = pyproject["project"]["version"]
    __author__ = pyproject["project"]["authors"][0]["name"]
    __license__ = pyproject["project"]["license"]["text"]
