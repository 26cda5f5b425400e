#  -*- coding: utf-8 -*-
"""
Declarative records and their HDF5 persistence.

Three layers build on each other:

``SerializableProperty``
    A ``property``-like descriptor that also knows its default value, how to
    parse an assignment, who to notify after it, and whether it takes part
    in copies.

``Serializable``
    Base class whose schema is the set of ``SerializableProperty`` found on
    the class and its bases. Instances turn into plain trees (dicts, lists,
    strings, numbers, paths, None) and back. Objects are tagged with a
    ``"__class__"`` key naming their class in a global registry::

        {
            "__class__": "projectviewer.entity.Project",
            "attributes": {"project_name": "Foo", "project_paths": []},
            "parent_id": None,
        }

``Persistable``
    A ``Serializable`` that writes that tree to an HDF5 file with h5py.
"""

from __future__ import annotations

import numpy
import h5py

from abc import ABCMeta
from numbers import Number
from pathlib import Path

# ---------- ---------- ---------- ---------- ---------- ---------- typing
from typing import TypeVar, Callable, Any, TypeAlias, Self, Type


T = TypeVar('T')

Getter: TypeAlias = Callable[[object], T]
Setter: TypeAlias = Callable[[object, Any], None]
Deleter: TypeAlias = Callable[[object], None]
Observer: TypeAlias = Callable[[object, T, T], None]
Parser: TypeAlias = Callable[[object, Any], T]


# ========== ========== ========== ========== ========== SerializableProperty
class SerializableProperty:
    """
    Schema entry of a :class:`Serializable`, usable on any class.

    Parameters
    ----------
    fget, fset, fdel : callable, optional
        Accessors, as for ``property``. When omitted, the value lives in the
        instance attribute ``_serializable_property__<name>``.
    default : object or callable, optional
        Value used while nothing (or None) is stored. A callable is called
        with the instance, which gives every instance its own mutable default.
    parser : callable, optional
        ``parser(instance, value)`` validates or converts every assignment.
    observer : callable, optional
        ``observer(instance, old, new)`` runs after every assignment.
    readonly : bool, default False
        Refuse assignment.
    writeonce : bool, default False
        Refuse assignment once a value other than None is stored.
    copiable : bool, default True
        Whether copies and content comparisons include this property.
    doc : str, optional
        Docstring; the getter's docstring otherwise.

    Notes
    -----
    None stands for "unset": assigning None stores the default, and reading
    an unset property stores and returns the default.

    Examples
    --------
    >>> class Tagged:
    ...     tags = SerializableProperty(default=lambda self: [])
    ...
    ...     @tags.parser
    ...     def tags(self, value):
    ...         return [str(tag) for tag in value]
    """

    def __init__(self,
                 fget: Getter | None = None,
                 fset: Setter | None = None,
                 fdel: Deleter | None = None,
                 *,
                 default: T | Getter | None = None,
                 parser: Parser | None = None,
                 observer: Observer | None = None,
                 readonly: bool = False,
                 writeonce: bool = False,
                 copiable: bool = True,
                 doc: str | None = None) -> None:

        if readonly and writeonce:
            raise ValueError("Cannot be both readonly and writeonce")

        self.fget: Getter | None = fget
        self.fset: Setter | None = None if readonly else fset
        self.fdel: Deleter | None = fdel

        self._default = default
        self._parser = parser
        self._observer = observer

        self._readonly = readonly
        self._writeonce = writeonce
        self._copiable = copiable

        if doc is None and fget is not None:
            doc = fget.__doc__

        self.__doc__ = doc

    def __set_name__(self, owner: type, name: str) -> None:
        self.name: str = name
        self.owner: type = owner
        self.private_name: str = f"_serializable_property__{name}"

        if self.fget is None:
            self.fget = lambda obj: getattr(obj, self.private_name)

        if self.fset is None and not self._readonly:
            self.fset = lambda obj, value: setattr(obj, self.private_name, value)

    def __get__(self, instance: object | None, owner: type) -> T | Self:
        if instance is None:
            return self

        value = self._stored(instance)

        if value is None:
            value = self._default_for(instance)

            if value is not None and self.fset is not None:
                self.fset(instance, value)

                if self._observer is not None:
                    self._observer(instance, None, value)

        return value

    def __set__(self, instance: object, value: Any) -> None:
        if self.fset is None:
            raise AttributeError(f"can't set attribute '{self.name}' (read-only property)")

        if self._writeonce and self._stored(instance) is not None:
            raise AttributeError(f"{self.name} is a write-once property and has already been set")

        if value is None:
            value = self._default_for(instance)

        if self._parser is not None:
            value = self._parser(instance, value)

        old_value = self.__get__(instance, self.owner)

        self.fset(instance, value)

        if self._observer is not None:
            self._observer(instance, old_value, value)

    def __delete__(self, instance: object) -> None:
        if self.fdel is None:
            raise AttributeError(f"can't delete attribute '{self.name}'")

        self.fdel(instance)

    # ========== ========== ========== ========== ========== private methods
    def _stored(self, instance: object) -> Any:
        if self.fget is None:
            raise AttributeError(f"unreadable attribute '{self.name}'")

        try:
            return self.fget(instance)
        except AttributeError:
            return None

    def _default_for(self, instance: object) -> Any:
        if callable(self._default):
            return self._default(instance)

        return self._default

    def _replace(self, **changes: Any) -> Self:
        config = dict(default=self._default,
                      parser=self._parser,
                      observer=self._observer,
                      readonly=self._readonly,
                      writeonce=self._writeonce,
                      copiable=self._copiable,
                      doc=self.__doc__)

        accessors = dict(fget=self.fget, fset=self.fset, fdel=self.fdel)

        for key in list(changes):
            if key in accessors:
                accessors[key] = changes.pop(key)

        config.update(changes)

        return type(self)(accessors['fget'], accessors['fset'], accessors['fdel'], **config)

    # ========== ========== ========== ========== ========== decorators
    def getter(self, fget: Getter) -> Self:
        return self._replace(fget=fget)

    def setter(self, fset: Setter) -> Self:
        return self._replace(fset=fset)

    def deleter(self, fdel: Deleter) -> Self:
        return self._replace(fdel=fdel)

    def default(self, func: Getter) -> Self:
        return self._replace(default=func)

    def parser(self, func: Parser) -> Self:
        return self._replace(parser=func)

    def observer(self, func: Observer) -> Self:
        return self._replace(observer=func)

    # ---------- ---------- ---------- ---------- ---------- properties
    @property
    def readonly(self) -> bool:
        return self._readonly

    @property
    def writeonce(self) -> bool:
        return self._writeonce

    @property
    def copiable(self) -> bool:
        return self._copiable


def serializable_property(default: T | Getter | None = None,
                          readonly: bool = False,
                          writeonce: bool = False,
                          copiable: bool = True) -> Callable[[Getter], SerializableProperty]:
    """
    Build a :class:`SerializableProperty` around the decorated getter.

    >>> class Node(Serializable):
    ...     @serializable_property(copiable=False)
    ...     def parent_id(self):
    ...         return self.__dict__.get('_serializable_property__parent_id')
    """
    def decorator(getter: Getter) -> SerializableProperty:
        return SerializableProperty(getter,
                                    default=default,
                                    readonly=readonly,
                                    writeonce=writeonce,
                                    copiable=copiable)

    return decorator


# ========== ========== ========== ========== ========== helpers
def get_full_qualified_name(cls: type) -> str:
    """Return ``'<module>.<qualname>'``, or the bare qualname of builtins."""
    module = cls.__module__

    if module is None or module == 'builtins':
        return cls.__qualname__

    return f"{module}.{cls.__qualname__}"


def check_types(obj: Any,
                types: type | tuple[type, ...],
                can_be_none: bool = False,
                raise_error: bool = True) -> bool:
    """
    ``isinstance`` check raising a readable TypeError on mismatch.

    Parameters
    ----------
    obj : object
        Value to check.
    types : type or tuple of type
        Accepted types.
    can_be_none : bool, default False
        Also accept None.
    raise_error : bool, default True
        Return False instead of raising when set to False.

    Examples
    --------
    >>> check_types('Acme', str)
    True
    >>> check_types(42, str, raise_error=False)
    False
    """
    accepted = types if isinstance(types, tuple) else (types,)

    if can_be_none:
        accepted = (*accepted, type(None))

    if isinstance(obj, accepted):
        return True

    if raise_error:
        names = ', '.join(get_full_qualified_name(cls) for cls in accepted)
        raise TypeError(f"Expected instance of one of the following classes: {names}. "
                        f"Given {get_full_qualified_name(type(obj))} instead")

    return False


# ========== ========== ========== ========== ========== SerializableMetatype
class SerializableMetatype(ABCMeta):
    """
    Metaclass of :class:`Serializable`.

    Registers every subclass under its fully qualified name, so that
    ``Serializable['projectviewer.entity.Project']`` returns the class, and
    collects each class' schema from its MRO (subclasses override bases).
    """

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any], **kwargs: Any):
        cls = super().__new__(mcs, name, bases, namespace, **kwargs)

        if name == 'Serializable' and not bases:
            cls._subclasses = {}
            cls._primitive_types = set()
            return cls

        Serializable._subclasses[get_full_qualified_name(cls)] = cls

        cls._serializable_properties = {
            attr: value
            for base in reversed(cls.__mro__) if base is not object
            for attr, value in vars(base).items() if isinstance(value, SerializableProperty)
        }

        return cls

    def __getitem__(cls, qualname: str) -> Type[Serializable]:
        if cls is not Serializable:
            raise KeyError(f'Class {cls.__name__} is not subscriptable')

        return Serializable._subclasses[qualname]

    def __contains__(cls, item: str | type) -> bool:
        if cls is not Serializable:
            raise NotImplementedError()

        if isinstance(item, str):
            return item in cls._subclasses

        if isinstance(item, type):
            return item in cls._subclasses.values()

        raise TypeError('Expected the class full qualified name or the class itself')

    def register_primitive_type(cls, primitive_type: type) -> None:
        """Let instances of ``primitive_type`` pass through serialization as they are."""
        if issubclass(primitive_type, (list, dict, tuple, Serializable)):
            raise TypeError(f'Cannot register {primitive_type} as primitive type')

        Serializable._primitive_types.add(primitive_type)

    # ---------- ---------- ---------- ---------- ---------- properties
    @property
    def primitive_types(cls) -> tuple[type, ...]:
        return tuple(Serializable._primitive_types)

    @property
    def serializable_properties(cls) -> dict[str, SerializableProperty]:
        return dict(cls._serializable_properties)

    @property
    def copiable_properties(cls) -> dict[str, SerializableProperty]:
        return {k: v for k, v in cls._serializable_properties.items() if v.copiable}


# ========== ========== ========== ========== ========== Serializable
class Serializable(metaclass=SerializableMetatype):
    """
    Registry-backed record with a declarative schema.

    Construction
    ------------
    ``Cls(**values)``
        One keyword per schema property; missing ones take their default.
        Unknown keywords raise ValueError.
    ``Cls(other)``
        Copy of ``other``'s copiable properties.

    ``==`` compares the copiable properties of two instances of the same
    class and raises TypeError for different classes.
    """

    def __init__(self, *args, **kwargs) -> None:
        if not args:
            self._initialize_from_data(kwargs)

        elif len(args) == 1 and isinstance(args[0], type(self)):
            self._initialize_from_data(Serializable.serialize(args[0], is_copy=True))

        else:
            raise ValueError("Given args do not match any available signature for initializing the Serializable interface")

    def __eq__(self, other):
        if type(other) is not type(self):
            raise TypeError(f"Comparison must be taken between the same type: "
                            f"{type(other).__name__} is not {type(self).__name__}")

        return all(numpy.all(getattr(other, key) == getattr(self, key))
                   for key in type(self).copiable_properties)

    __hash__ = object.__hash__

    def __copy__(self):
        return self.copy()

    # ========== ========== ========== ========== ========== protected methods
    def _initialize_from_data(self, data: dict[str, Any]) -> None:
        check_types(data, dict)
        data = dict(data)

        qualname = data.pop('__class__', None)

        if qualname is not None and Serializable[qualname] is not type(self):
            raise TypeError(f'Data of {qualname} cannot initialize {type(self).__name__}')

        for key in type(self).serializable_properties:
            setattr(self, key, Serializable.deserialize(data.pop(key, None)))

        if data:
            raise ValueError(f"There is no signature with the keys {data.keys()}")

    # ========== ========== ========== ========== ========== public methods
    @staticmethod
    def serialize(obj: Any, is_copy: bool = False) -> Any:
        """
        Turn ``obj`` into a plain tree.

        With ``is_copy``, only copiable properties of records are kept.

        Raises
        ------
        TypeError
            For values that are not None, containers, records or registered
            primitives.
        """
        if obj is None:
            return None

        if isinstance(obj, (tuple, list, set)):
            return [Serializable.serialize(item, is_copy) for item in obj]

        if isinstance(obj, dict):
            return {key: Serializable.serialize(value, is_copy) for key, value in obj.items()}

        if isinstance(obj, Serializable):
            cls = type(obj)
            schema = cls.copiable_properties if is_copy else cls.serializable_properties

            data = {'__class__': get_full_qualified_name(cls)}
            data.update({key: Serializable.serialize(getattr(obj, key), is_copy) for key in schema})

            return data

        if isinstance(obj, Serializable.primitive_types):
            return obj

        raise TypeError(f"No serialisation process is implemented for object of type {type(obj).__name__}.")

    @staticmethod
    def deserialize(data: Any) -> Any:
        """
        Rebuild records from a plain tree.

        Raises
        ------
        KeyError
            If a ``"__class__"`` tag names an unregistered class.
        TypeError
            For values no serialization would have produced.
        """
        if data is None:
            return None

        if isinstance(data, (tuple, list, set)):
            return [Serializable.deserialize(item) for item in data]

        if isinstance(data, dict):
            if '__class__' not in data:
                return {key: Serializable.deserialize(value) for key, value in data.items()}

            data = dict(data)
            return Serializable[data.pop('__class__')](**data)

        if isinstance(data, (*Serializable.primitive_types, Serializable)):
            return data

        raise TypeError(f"No serialisation method is implemented for object of type {type(data)}.")

    def copy(self) -> Serializable:
        return type(self)(self)


Serializable.register_primitive_type(str)
Serializable.register_primitive_type(Number)
Serializable.register_primitive_type(Path)


# ========== ========== ========== ========== ========== HDF5 encoding
_CONTAINER_KEY = '__container_type__'
_TYPE_PREFIX = '__type__:'


def _write_node(group: h5py.Group, key: str, value: Any) -> None:
    """
    Write one value of a serialized tree under ``group[key]``.

    Scalars become attributes of ``group``; lists and dicts become
    subgroups tagged with their container type. List items are keyed by
    their index. HDF5 attributes hold neither None nor paths, so these are
    written as strings with their type recorded in a sibling attribute
    ``__type__:<key>``. Keys starting with ``__`` are reserved.
    """
    if value is None:
        group.attrs[key] = ''
        group.attrs[f'{_TYPE_PREFIX}{key}'] = 'None'

    elif isinstance(value, Path):
        group.attrs[key] = str(value.absolute())
        group.attrs[f'{_TYPE_PREFIX}{key}'] = 'Path'

    elif isinstance(value, (str, Number)):
        group.attrs[key] = value

    elif isinstance(value, (list, dict)):
        subgroup = group.create_group(key, track_order=True)

        if isinstance(value, list):
            subgroup.attrs[_CONTAINER_KEY] = 'list'
            items = ((str(idx), item) for idx, item in enumerate(value))
        else:
            subgroup.attrs[_CONTAINER_KEY] = 'dict'
            items = value.items()

        for item_key, item in items:
            _write_node(subgroup, item_key, item)

    else:
        raise TypeError(f"instances of {type(value).__name__} cannot be saved in h5py.Groups")


def _decode(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode('utf-8')

    return value


def _read_node(node: Any, type_tag: str|None = None) -> Any:
    """Inverse of :func:`_write_node` for a group or an attribute value."""
    if isinstance(node, h5py.Group):
        attrs = dict(node.attrs.items())
        tags = {key.removeprefix(_TYPE_PREFIX): _decode(attrs.pop(key))
                for key in list(attrs) if key.startswith(_TYPE_PREFIX)}

        data = {key: _read_node(child) for key, child in node.items()}
        data.update({key: _read_node(value, tags.get(key)) for key, value in attrs.items()})

        container_type = data.pop(_CONTAINER_KEY)

        if container_type == 'list':
            return [data[key] for key in sorted(data, key=int)]

        if container_type == 'dict':
            return data

        raise ValueError(f"Could not resolve {_CONTAINER_KEY}={container_type}")

    node = _decode(node)

    if type_tag == 'None':
        return None

    if type_tag == 'Path':
        return Path(node)

    if isinstance(node, numpy.bool_):
        return bool(node)

    if isinstance(node, numpy.integer):
        return int(node)

    if isinstance(node, numpy.floating):
        return float(node)

    return node


# ========== ========== ========== ========== ========== Persistable
class Persistable(Serializable):
    """
    Serializable saved to and loaded from HDF5 files.

    The serialized tree is stored under the ``root`` key of the file.

    Construction
    ------------
    ``Cls(**values)`` or ``Cls(other)``
        As for :class:`Serializable`.
    ``Cls(path)``
        Load the instance saved at ``path``.

    Class Attributes
    ----------------
    extension : str
        Suffix given to files by ``save``.
    """

    extension: str = '.hdf5'

    def __init__(self, *args, **kwargs) -> None:
        if args and isinstance(args[0], (str, Path)):

            if len(args) > 1 or kwargs:
                raise ValueError(f'Unexpected arguments when loading from {args[0]}')

            self._initialize_from_data(self.load_serialized_data(args[0]))

        else:
            super().__init__(*args, **kwargs)

    # ========== ========== ========== ========== ========== public methods
    @staticmethod
    def save_serialized_data(path: Path | str, data: Any) -> None:
        with h5py.File(Path(path), 'w') as file:
            _write_node(file, 'root', data)

    @staticmethod
    def load_serialized_data(path: Path | str) -> Any:
        """
        Raises
        ------
        FileNotFoundError
            If ``path`` is not an existing file.
        """
        path = Path(path)

        if not path.is_file():
            raise FileNotFoundError(f"Path {path} does not exist")

        with h5py.File(path, 'r') as file:
            return _read_node(file['root'])

    def save(self,
             path: Path | str,
             overwrite: bool = True,
             use_default_extension: bool = True) -> Path:
        """
        Write this instance to ``path``.

        Parameters
        ----------
        path : str or Path
            Destination.
        overwrite : bool, default True
            Raise FileExistsError instead of replacing an existing file.
        use_default_extension : bool, default True
            Replace the suffix of ``path`` with the class ``extension``.

        Returns
        -------
        Path
            The file written.
        """
        path = Path(path)

        if use_default_extension:
            path = path.with_suffix(type(self).extension)

        if not overwrite and path.is_file():
            raise FileExistsError(f"Path {path} already exists")

        self.save_serialized_data(path, Serializable.serialize(self))

        return path

    @classmethod
    def load(cls, path: Path | str) -> Persistable:
        """Load the instance saved at ``path``, as the class recorded in the file."""
        return Serializable.deserialize(cls.load_serialized_data(path))


load = Persistable.load


__all__ = [
    'SerializableProperty',
    'serializable_property',
    'Serializable',
    'Persistable',
    'check_types',
    'load',
]
