#  -*- coding: utf-8 -*-
"""
Client, group and project records and their parent chain.

Every record keeps its own attributes in a plain mapping whose keys follow
the ``<type>_<field>`` convention (``project_name``, ``group_icon``, ...).
A record may point to one parent one level up the hierarchy::

    client  <-  group  <-  project
    client  <-  project

Looking up an attribute the record does not define falls back to its parent,
then to its parent's parent. This is how a project knows the name of the
client it belongs to::

    >>> acme = Client(attributes={'client_name': 'Acme'})
    >>> infra = Group(attributes={'group_name': 'Infra'})
    >>> infra.parent = acme
    >>> foo = Project(attributes={'project_name': 'Foo'})
    >>> foo.parent = infra
    >>> foo.resolve('client_name')
    'Acme'
"""

from __future__ import annotations

from projectviewer.serialization import Serializable, SerializableProperty, serializable_property, check_types

# ---------- ---------- ---------- ---------- ---------- ---------- typing
from typing import Any, Iterator, Type


_MISSING = object()


class Entity(Serializable):
    """
    Base record of the hierarchy.

    A bare ``Entity`` has no ``type``; it exists so that callers can hand an
    untyped record to the engine and get a validation warning back. Concrete
    records are :class:`Client`, :class:`Group` and :class:`Project`.

    Class Attributes
    ----------------
    type : str or None
        Discriminator, also the prefix of attribute keys.
    parent_types : tuple[str, ...]
        Types allowed as parent.

    Attributes
    ----------
    attributes : dict[str, Any]
        Own attributes. Lookups that miss here are delegated to ``parent``.
    parent : Entity or None
        Record one level up, None for records at the root.
    parent_id : str or None
        Id of the parent. Persisted in place of the parent reference and used
        to relink records after loading.

    Notes
    -----
    ``==`` is identity, as records are bound one-to-one to view nodes and
    looked up in lists. Use :meth:`equal` to compare content.
    """

    # ========== ========== ========== ========== ========== class attributes
    type: str|None = None
    parent_types: tuple[str, ...] = ()

    __eq__ = object.__eq__
    __hash__ = object.__hash__

    # ---------- ---------- ---------- attributes
    attributes: dict[str, Any] = SerializableProperty(default=lambda self: {}, doc="""
    Own attributes of the record, keyed ``<type>_<field>``.

    Type
    ----
    dict[str, Any]

    Notes
    -----
    Only keys present here count as "own". A key present with a None value
    shadows the parent's value instead of delegating.
    """)

    @attributes.parser
    def attributes(self, value: dict[str, Any]) -> dict[str, Any]:
        check_types(value, dict)

        for key in value:
            check_types(key, str)

        return dict(value)

    # ---------- ---------- ---------- parent_id
    @serializable_property(copiable=False)
    def parent_id(self) -> str|None:
        parent = self.parent

        if parent is not None:
            return parent.id

        return self.__dict__.get('_serializable_property__parent_id')

    # ========== ========== ========== ========== ========== special methods
    def __getitem__(self, key: str) -> Any:
        value = self.resolve(key, _MISSING)

        if value is _MISSING:
            raise KeyError(f"No attribute '{key}' in {self!r} or its parents.")

        return value

    def __setitem__(self, key: str, value: Any) -> None:
        check_types(key, str)
        self.attributes[key] = value

    def __delitem__(self, key: str) -> None:
        del self.attributes[key]

    def __contains__(self, key: str) -> bool:
        return self.resolve(key, _MISSING) is not _MISSING

    def __repr__(self) -> str:
        name = self.attributes.get(self.key('name')) if self.type else None
        return f"{type(self).__name__}({name!r})"

    # ========== ========== ========== ========== ========== public methods
    def key(self, field: str) -> str:
        """
        Return the attribute key of ``field`` for this record's type.

        >>> Project().key('paths')
        'project_paths'

        Raises
        ------
        ValueError
            If the record has no type.
        """
        if self.type is None:
            raise ValueError(f'{type(self).__name__} has no type; cannot build attribute keys.')

        return f'{self.type}_{field}'

    def resolve(self, key: str, default: Any = None) -> Any:
        """
        Look ``key`` up in the record, then along its parent chain.

        Parameters
        ----------
        key : str
            Attribute key, e.g. ``'client_name'``.
        default : object, optional
            Returned when no record in the chain defines ``key``.
        """
        for entity in self.lineage():
            if key in entity.attributes:
                return entity.attributes[key]

        return default

    def lineage(self) -> Iterator[Entity]:
        """Yield the record itself, then each ancestor up to the root."""
        entity = self

        while entity is not None:
            yield entity
            entity = entity.parent

    def equal(self, other: Entity) -> bool:
        """Compare content (type and own attributes), ignoring identity and parents."""
        if type(other) is not type(self):
            return False

        return Serializable.__eq__(self, other)

    # ---------- ---------- ---------- ---------- ---------- properties
    @property
    def parent(self) -> Entity|None:
        return self.__dict__.get('_parent')

    @parent.setter
    def parent(self, value: Entity|None) -> None:
        if value is not None:
            check_types(value, Entity)

            if value is self:
                raise ValueError(f'{self!r} cannot be its own parent.')

            if value.type not in self.parent_types:
                raise TypeError(f'{type(self).__name__} cannot be placed under a {value.type!r}; '
                                f'allowed parent types: {self.parent_types}')

        self.__dict__['_parent'] = value
        # a live reference supersedes any id read from disk
        self.__dict__.pop('_serializable_property__parent_id', None)

    @property
    def chain(self) -> list[Entity]:
        """Ancestors from the parent up to the root."""
        return list(self.lineage())[1:]

    @property
    def own_keys(self) -> list[str]:
        return list(self.attributes)

    @property
    def id(self) -> str|None:
        return self.attributes.get(self.key('id')) if self.type else None

    @property
    def name(self) -> str|None:
        return self.attributes.get(self.key('name')) if self.type else None


class Client(Entity):
    """Top-level record. Never has a parent."""

    type = 'client'
    parent_types = ()


class Group(Entity):
    """Record grouping projects, optionally under a client."""

    type = 'group'
    parent_types = ('client',)


class Project(Entity):
    """Leaf record owning a list of workspace root paths."""

    type = 'project'
    parent_types = ('group', 'client')


ENTITY_TYPES: dict[str, Type[Entity]] = {
    'client': Client,
    'group': Group,
    'project': Project,
}


def entity_class(type_: str) -> Type[Entity]:
    """
    Return the record class for ``type_``.

    Raises
    ------
    KeyError
        If ``type_`` is not one of 'client', 'group' or 'project'.
    """
    try:
        return ENTITY_TYPES[type_]
    except KeyError as error:
        raise KeyError(f'Unknown entity type: {type_!r}') from error


# ========== ========== ========== ========== ========== ItemChain
class ItemChain:
    """
    Resolved ``current``/``parent``/``root`` view of a record.

    ``current`` is the record itself when it has at least one own attribute,
    ``parent`` its parent and ``root`` the parent's parent. ``root`` is never
    set without ``parent``.
    """

    def __init__(self,
                 current: Entity|None = None,
                 parent: Entity|None = None,
                 root: Entity|None = None) -> None:

        if root is not None and parent is None:
            raise ValueError('An item chain cannot have a root without a parent.')

        self.current = current
        self.parent = parent
        self.root = root

    def __repr__(self) -> str:
        return f'ItemChain(current={self.current!r}, parent={self.parent!r}, root={self.root!r})'

    def __iter__(self) -> Iterator[Entity]:
        """Iterate over the populated slots, from current to root."""
        return iter([entity for entity in (self.current, self.parent, self.root) if entity is not None])

    def __bool__(self) -> bool:
        return any(entity is not None for entity in (self.current, self.parent, self.root))


def get_item_chain(entity: Entity|None) -> ItemChain:
    """
    Resolve the item chain of ``entity``.

    An entity without own attributes leaves ``current`` empty but still
    fills ``parent`` and ``root``. ``None`` gives an empty chain.

    >>> chain = get_item_chain(foo)
    >>> chain.current is foo, chain.parent is infra, chain.root is acme
    (True, True, True)
    """
    chain = ItemChain()

    if entity is None:
        return chain

    if entity.attributes:
        chain.current = entity

    parent = entity.parent

    if parent is not None:
        chain.parent = parent

        if parent.parent is not None:
            chain.root = parent.parent

    return chain


__all__ = [
    'Entity',
    'Client',
    'Group',
    'Project',
    'ENTITY_TYPES',
    'entity_class',
    'ItemChain',
    'get_item_chain',
]
