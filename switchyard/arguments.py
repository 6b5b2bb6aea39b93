r"""
Switchyard option specifications.

Overview
- Shape: the value shape of an option, decided once when the option is built.
  • SCALAR: a single converted value (str, int, bool, Path, ...).
  • LIST:   a collection of strings, fed with "a;b;c" (items are not converted).
  • MAP:    a string-to-string mapping, fed with "a=1;b=2".
  • ENUM:   an enum member, partially matched by name.

- Option[_T]: a data descriptor declared on a Command subclass. It is both the
  entry of the command's option table (display name, alt name, shape) and the
  setter the parser uses to store values on the command instance.

Naming
- The display name defaults to the attribute name with underscores turned into
  hyphens ("no_build" -> "no-build"); an explicit name= overrides it.
- The alt name is the optional short form given positionally (Option("o")).
- Names are switch names without the marker: "output", not "-output".

Quick example:
    >>> class Pack(Command, name="pack"):
    ...     output = Option("o", descr="output directory")
    ...     verbose = Option("v", type=bool)
    ...     exclude = Option(type=list)
    ...     properties = Option("p", type=dict)
    ...

Public API
- Enums: Shape
- Classes: Option
"""
import builtins
import enum
import functools
import operator
import re
import typing
from collections.abc import Mapping, Sequence, Set

from rich.text import Text

from .utils import *


class Shape(enum.Enum):
    """
    Value shape of an option; governs how a raw string value is parsed.
    """
    SCALAR = "scalar"
    LIST = "list"
    MAP = "map"
    ENUM = "enum"


def _infer_shape(type, /):
    """
    Internal: infer the value shape from a declared option type.

    - enum.Enum subclasses           -> ENUM
    - Mapping types (dict, dict[..]) -> MAP
    - list/tuple/set (and generics)  -> LIST
    - anything else                  -> SCALAR
    """
    origin = typing.get_origin(type) or type
    if not isinstance(origin, builtins.type):
        return Shape.SCALAR
    if issubclass(origin, enum.Enum):
        return Shape.ENUM
    if issubclass(origin, Mapping):
        return Shape.MAP
    if issubclass(origin, Sequence | Set) and not issubclass(origin, str | bytes):
        return Shape.LIST
    return Shape.SCALAR


def _sanitize_name(cls, name, field, /):
    """
    Internal: validate an option name or alt name.

    Names start with a letter, continue with letters, digits, hyphens or
    underscores, and never end with a hyphen (a trailing hyphen is the negation
    suffix on the command line).
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    elif not re.fullmatch(r"[^\W\d_](?:[\w-]*\w)?", name):
        raise ValueError(f"{cls.__typename__} {field!r} must be a valid switch name without markers")
    return name


class ArgumentType(type):
    """
    Metaclass that gives option specs stable introspection.

    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - Every name listed in __introspectable__ becomes a read-only property
      mirroring the private "_{name}" field.
    - __repr__/__rich_repr__ list the introspectable fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Option[_T](metaclass=ArgumentType):
    """
    Named option declared as a class attribute of a Command.

    Highlights
    - Generic over the payload type _T (scalar converter provided via 'type').
    - Display name from the attribute (or name=), optional alt name.
    - Shape tagged once at construction (explicit shape= or inferred from type).
    - Descriptor protocol: reading from a command returns the stored value, the
      default, or (LIST/MAP) the command's own container, created on first access.
    """

    __introspectable__ = (
        "name",
        "altname",
        "type",
        "shape",
        "default",
        "descr",
        "hidden",
    )

    def __init__(
            self,
            altname=None,
            /,
            type=str,
            shape=Unset,
            default=Unset,
            name=Unset,
            descr=Unset,
            *,
            hidden=False
    ):
        """
        Construct an Option spec.

        Parameters
        - altname: str | None
          Short alternate switch name (e.g. "o" for -o).
        - type: Callable
          Converter for SCALAR options, the enum class for ENUM options, or a
          container type (list/dict) for LIST/MAP. Container types only select
          the shape: items are always stored as raw strings, so list[int] or
          dict[str, int] do not convert anything.
        - shape: Unset | Shape
          Explicit value shape; inferred from type when Unset.
        - default: Any
          Value read back before the option is set (SCALAR/ENUM only). Defaults
          to False for bool options and None otherwise.
        - name: Unset | str
          Display name; defaults to the attribute name.
        - descr: Unset | str | Text
          Short description for help.
        - hidden: bool
          Suppress from help output.
        """
        cls = builtins.type(self)

        if altname is not None:
            altname = _sanitize_name(cls, altname, "altname")
        if name is not Unset:
            name = _sanitize_name(cls, name, "name")

        if not callable(type):
            raise TypeError(f"{cls.__typename__} 'type' must be callable")

        if shape is Unset:
            shape = _infer_shape(type)
        elif not isinstance(shape, Shape):
            raise TypeError(f"{cls.__typename__} 'shape' must be a Shape")
        if shape is Shape.ENUM and _infer_shape(type) is not Shape.ENUM:
            raise TypeError(f"enum {cls.__typename__} 'type' must be an enum class")

        if shape in (Shape.LIST, Shape.MAP) and default is not Unset:
            raise TypeError(f"{shape.value} {cls.__typename__} cannot have a 'default'")

        if not isinstance(descr, str | Text | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

        self._name = name
        self._altname = altname
        self._type = type
        self._shape = shape
        self._default = coalesce(default, False if type is bool else None)
        self._descr = coalesce(descr)
        self._hidden = bool(hidden)
        self._attribute = Unset

    @property
    def attribute(self):
        """
        Attribute name the option is bound to (Unset before class creation).
        """
        return self._attribute

    @property
    def boolean(self):
        """
        True for switches that never consume a value token.
        """
        return self._shape is Shape.SCALAR and self._type is bool

    def __set_name__(self, owner, name):
        if self._attribute is not Unset:
            raise TypeError(f"{type(self).__typename__} {self._attribute!r} cannot be bound twice")
        self._attribute = name
        if self._name is Unset:
            self._name = _sanitize_name(type(self), re.sub(r"_+", "-", name.strip("_")), "name")

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        match self._shape:
            case Shape.LIST:
                return instance.__dict__.setdefault(self._attribute, [])
            case Shape.MAP:
                return instance.__dict__.setdefault(self._attribute, {})
            case _:
                return instance.__dict__.get(self._attribute, self._default)

    def __set__(self, instance, value):
        instance.__dict__[self._attribute] = value

    def __option__(self):
        """
        Introspection hook: identify this spec as an Option.
        """
        return self


__all__ = (
    # Enums
    "Shape",

    # Classes (specifications)
    "Option",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
