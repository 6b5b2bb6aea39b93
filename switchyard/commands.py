"""
Switchyard command layer: declare, register and run commands.

What this module provides
- Command: base class of every command. Subclasses declare their options as
  Option class attributes; the metaclass turns them into a per-command option
  table when the class is created.
- Registry: the command registry the parser resolves names against.
- invoke(registry, prompt): convenience runner (parse in shell mode, print help
  when no command is given, execute the command otherwise).

Quick start
    from switchyard import Command, Option, Registry, invoke

    registry = Registry()

    @registry.register
    class Pack(Command, name="pack", descr="create a package"):
        output = Option("o", descr="output directory")
        verbose = Option("v", type=bool)
        exclude = Option(type=list, descr="patterns to exclude, separated by ';'")
        properties = Option("p", type=dict, descr="key=value pairs, separated by ';'")

        def execute(self):
            print(self.output, self.exclude, self.properties, self.arguments)

    if __name__ == "__main__":
        invoke(registry, "pack -o out -exclude *.tmp;*.log -p id=demo Demo.spec")

Class keywords
- name: command name on the command line (defaults to the lower-cased class name).
- descr: short description shown in help.
- usage: explicit usage string for help (synthesized otherwise).
- hidden: keep the command out of the help table.
"""
import functools
import operator
import os.path
import re
import shlex
import sys
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .arguments import Option
from .helper import render
from .parser import Parser
from .utils import *


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the class keywords of a command.

    - name: defaults to the lower-cased class name; must look like a command word.
    - descr/usage: None when Unset; non-empty strings (or rich Text) otherwise.
    - hidden: coerced to bool.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(r"[^\W\d_](?:[\w-]*\w)?", name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid command name")
    metadata["name"] = name

    for field in ("descr", "usage"):
        if not isinstance(value := metadata[field], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
        metadata[field] = coalesce(value)

    metadata["hidden"] = bool(metadata["hidden"])


def _reserved():
    # only reached for Command subclasses
    return {name for name in vars(Command) if not name.startswith("__")} | {"_arguments"}


def _build_options(cls, self, namespace, /):
    """
    Internal: build the option table of a command class.

    - options of the bases come first (method resolution order, most generic
      first), then the ones declared on the class itself.
    - display and alt names must be unique case-insensitively across the table.
    - attributes of the Command base (arguments, execute, ...) cannot be options.
    """
    options = {}
    for base in reversed(self.__mro__[1:]):
        options |= getattr(base, "__options__", {})
    for attribute, object in namespace.items():
        if isinstance(object, Option):
            if attribute in _reserved():
                raise ValueError(f"{cls.__typename__} option attribute {attribute!r} is reserved")
            options[attribute] = object

    owners = {}
    for option in options.values():
        for name in filter(None, (option.name, option.altname)):
            if owners.setdefault(name.casefold(), option) is not option:
                raise ValueError(f"{cls.__typename__} option name {name!r} is already in use")

    return MappingProxyType(options)


class CommandType(type):
    """
    Metaclass that turns Command subclasses into registered-ready commands.

    Responsibilities
    - Consume the class keywords (name, descr, usage, hidden) and expose them as
      read-only class properties.
    - Build the option table (__options__) once, at class creation.
    - Provide stable __repr__/__rich_repr__ for command instances.
    """
    __typename__ = "command"

    def __new__(cls, name, bases, namespace, /, **options):
        self = super().__new__(cls, name, bases, namespace)

        metadata = {
            "name": options.pop("name", name.lower()),
            "descr": options.pop("descr", Unset),
            "usage": options.pop("usage", Unset),
            "hidden": options.pop("hidden", False),
        }
        if options:
            raise TypeError(f"{cls.__typename__} got unexpected class keywords: {", ".join(options)}")
        _sanitize_metadata(cls, metadata)

        self.__metadata__ = MappingProxyType(metadata)
        self.__options__ = _build_options(cls, self, namespace)
        return self

    def __init__(cls, name, bases, namespace, /, **options):
        super().__init__(name, bases, namespace)

    @property
    def name(cls):
        return cls.__metadata__["name"]

    @property
    def descr(cls):
        return cls.__metadata__["descr"]

    @property
    def usage(cls):
        return cls.__metadata__["usage"]

    @property
    def hidden(cls):
        return cls.__metadata__["hidden"]

    @property
    def options(cls):
        """
        Option table of the command: attribute name -> Option, in declaration order.
        """
        return cls.__options__


class Command(metaclass=CommandType):
    """
    Base class of every command.

    Lifecycle
    - Instantiated by the registry when its name is resolved.
    - Populated in place by the parser: options through their descriptors,
      positional tokens appended to arguments in input order.
    - Executed by the caller (execute()), then discarded.

    Notes
    - A command left half-populated by a parse fault must be discarded; the
      parser never rolls back.
    """

    def __init__(self):
        self._arguments = []

    @property
    def arguments(self):
        """
        Positional arguments, in input order (the list itself, not a copy).
        """
        return self._arguments

    def __rich_repr__(self):
        yield "arguments", self.arguments
        for attribute in type(self).options:
            yield attribute, getattr(self, attribute)

    def __repr__(self):
        return f"{type(self).name}({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"

    def execute(self):
        """
        Run the command. Subclasses override it.
        """
        raise NotImplementedError(f"command {type(self).name!r} does not implement execute()")


class Registry:
    """
    Registry of command classes, looked up by name (case-insensitive).

    Interface used by the parser
    - get(name) -> Command | None: a fresh instance of the registered class.
    - options(command) -> Mapping[str, Option]: the command's option table.
    """

    def __init__(self, *commands):
        self._commands = {}
        for command in commands:
            self.register(command)

    def register(self, command, /):
        """
        Register a Command subclass; returns it, so it works as a class decorator.

        Raises
        - TypeError: when command is not a Command subclass.
        - ValueError: when the name (case-insensitive) is already in use.
        """
        if not isinstance(command, type) or not issubclass(command, Command):
            raise TypeError("register() argument must be a command class")
        if self._commands.setdefault(command.name.casefold(), command) is not command:
            raise ValueError(f"command name {command.name!r} is already in use")
        return command

    def find(self, name, /):
        """
        Return the command class registered under name, or None.
        """
        if not isinstance(name, str):
            raise TypeError("find() argument must be a string")
        return self._commands.get(name.casefold())

    def get(self, name, /):
        """
        Return a new instance of the command registered under name, or None.
        """
        if (command := self.find(name)) is None:
            return None
        return command()

    def options(self, command, /):
        """
        Return the option table of a command (class or instance).
        """
        cls = command if isinstance(command, type) else type(command)
        if not issubclass(cls, Command):
            raise TypeError("options() argument must be a command")
        return cls.options

    @property
    def names(self):
        return tuple(command.name for command in self._commands.values())

    def __iter__(self):
        return iter(tuple(self._commands.values()))

    def __len__(self):
        return len(self._commands)

    def __contains__(self, name):
        return isinstance(name, str) and name.casefold() in self._commands

    def __rich_repr__(self):
        yield "commands", self.names

    def __repr__(self):
        return f"registry(commands={self.names!r})"


def _tokenize(prompt):
    """
    Normalize a prompt into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string, split with shlex.split.
    - Iterable[str]: used as-is (each element must be a string).
    """
    if prompt is Unset:
        return sys.argv[1:]
    elif isinstance(prompt, str):
        return shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() prompt must be a string or an iterable of strings")
        return tokens
    raise TypeError("invoke() prompt must be a string or an iterable of strings")


def invoke(registry, prompt=Unset, /, *, prog=Unset, slash=os.sep != "/", fancy=False, colorful=True):
    """
    Parse a prompt against a registry and run the resulting command.

    Parameters
    - registry: Registry to resolve command names against.
    - prompt: Unset (sys.argv[1:]), a shell-like string, or an iterable of strings.
    - prog: program name for usage lines and fault headers.
    - slash: accept '/' as a switch marker (defaults to True where '/' is not
      the path separator).
    - fancy/colorful: rendering options for help and faults.

    Behavior
    - Faults are rendered to stderr and the process exits with status 1.
    - Without a command, the registry help is printed and None is returned.
    - Otherwise the command is executed and returned.
    """
    if not isinstance(registry, Registry):
        raise TypeError("invoke() first argument must be a registry")

    parser = Parser(registry, slash=slash, prog=prog, shell=True, fancy=fancy, colorful=colorful)
    command = parser.parse(_tokenize(prompt))

    if command is None:
        Console().print(render(registry, prog=parser.prog, colorful=colorful, fancy=fancy))
        return None

    command.execute()
    return command


__all__ = (
    "Command",
    "Registry",
    "invoke",
)
