"""
Switchyard parser: map raw process arguments onto command objects.

What this module provides
- Cursor: forward-only cursor over the raw tokens.
- match(...): partial-name matcher with exact-match tie-breaking.
- assign(...): value assigner that stores a raw string on a command according
  to the option's shape (scalar, list, map, enum).
- Parser: the driver. Reads the command name, resolves it through a registry,
  then binds every switch to an option and collects the rest as positionals.

Command-line syntax
- Switches start with '-' (or '/' when the parser is built with slash=True).
- Names may be abbreviated as long as the prefix is not ambiguous.
- A trailing '-' negates a boolean switch: -verbose- sets verbose to False.
- Boolean switches never consume a value; every other switch consumes exactly
  the next token.
- Lists take "a;b;c", maps take "a=1;b=2" (items without '=' map to themselves).

Faults
- match()/assign() raise CommandException subclasses directly.
- Parser re-surfaces every fault through Parser.trigger(), which honors the
  parser's runtime options (shell, fancy, colorful).

Quick example
    >>> parser = Parser(registry)
    >>> command = parser.parse(["pack", "-o", "out", "-exclude", "a;b", "file.txt"])
    >>> command.output, command.exclude, command.arguments
    ('out', ['a', 'b'], ['file.txt'])
"""
import difflib
import os.path
import sys
from collections.abc import Iterable
from contextlib import contextmanager
from operator import attrgetter

from .arguments import Shape
from .conversions import convert
from .faults import *
from .utils import *


class Cursor:
    """
    forward-only cursor over raw tokens.

    next() returns the following token, or None once the input is exhausted.
    tokens are consumed exactly once.
    """

    def __init__(self, tokens, /):
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("cursor argument must be an iterable of strings")
        self._iterator = iter(tokens)

    def next(self):
        token = next(self._iterator, None)
        if token is not None and not isinstance(token, str):
            raise TypeError("cursor tokens must be strings")
        return token


def match(candidates, display, altname, option, partial, /):
    """
    resolve a partial name to exactly one candidate.

    parameters
    - candidates: iterable of named entries (options or enum members).
    - display: callable returning a candidate's display name.
    - altname: callable returning a candidate's alternate name (or None).
    - option: the raw switch token, reported in faults.
    - partial: the (possibly abbreviated) name typed by the user.

    behavior
    - candidates whose display or alt name starts with partial (case-insensitive)
      are kept.
    - none kept → UnknownOptionError.
    - exactly one kept → it is returned as-is, without checking exactness.
    - several kept → the first one whose display or alt name equals partial
      (case-insensitive) wins; otherwise AmbiguousOptionError listing every
      candidate's display name.
    """
    candidates = list(candidates)
    folded = partial.casefold()

    def names(candidate):
        yield display(candidate).casefold()
        if (alias := altname(candidate)) is not None:
            yield alias.casefold()

    matches = [x for x in candidates if any(name.startswith(folded) for name in names(x))]

    if not matches:
        everything = [display(x) for x in candidates]
        suggestions = difflib.get_close_matches(partial, everything, 5)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "expected one of: %s" % ", ".join(everything) if everything else "no values are accepted here"
        raise UnknownOptionError(
            "unknown option %r" % option,
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            input=option,
            value=partial,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        )

    if len(matches) == 1:
        return matches[0]

    for candidate in matches:
        if folded in names(candidate):
            return candidate

    raise AmbiguousOptionError(
        "ambiguous option %r, possible values: %s" % (partial, " ".join(display(x) for x in candidates)),
        title="ambiguous option",
        code=FaultCode.AMBIGUOUS_OPTION,
        input=option,
        value=partial,
        candidates=tuple(display(x) for x in matches),
        hint="type more of the name, for example: %s" % ", ".join(display(x) for x in matches),
        docs=getdoc(FaultCode.AMBIGUOUS_OPTION),
    )


def _split(value):
    # ';' separates items, empty segments are dropped
    return [item for item in value.split(";") if item]


def _insert(mapping, key, value):
    if key in mapping:
        raise KeyError("an item with the same key %r has already been added" % key)
    mapping[key] = value


def assign(command, option, token, value, /):
    """
    store a raw value on a command according to the option's shape.

    shapes
    - LIST: items of "a;b;c" are appended to the command's own list.
    - MAP: items of "k=v;k2=v2" are inserted in the command's own mapping; an item
      without '=' is used as both key and value; duplicated keys are rejected.
    - ENUM: the value is partially matched against the enum member names.
    - SCALAR: the value is converted with the option type.

    faults
    - CommandException raised while assigning (e.g. from enum matching) propagates
      unchanged.
    - any other failure is re-signaled as InvalidOptionValueError chained to it.
    """
    try:
        match option.shape:
            case Shape.LIST:
                items = getattr(command, option.attribute)
                for item in _split(value):
                    items.append(item)
            case Shape.MAP:
                mapping = getattr(command, option.attribute)
                for item in _split(value):
                    key, separator, rest = item.partition("=")
                    _insert(mapping, key, rest if separator else item)
            case Shape.ENUM:
                name = attrgetter("name")
                member = match(option.type, name, name, token, value)
                setattr(command, option.attribute, member)
            case _:
                setattr(command, option.attribute, convert(value, option.type))
    except CommandException:
        raise
    except Exception as error:
        raise InvalidOptionValueError(
            "invalid value %r for option %r" % (value, token),
            title="invalid option value",
            code=FaultCode.INVALID_OPTION_VALUE,
            input=token,
            value=value,
            option=option,
            cause=error,
            hint=str(error) or "check the expected format of %r" % token,
            docs=getdoc(FaultCode.INVALID_OPTION_VALUE),
        ) from error


class Parser:
    """
    command-line driver.

    Parameters
    - registry: any object providing get(name) -> Command | None and
      options(command) -> Mapping[str, Option] (see switchyard.commands.Registry).
    - slash: accept '/' as a switch marker besides '-' (off by default; enable
      it where '/' is not the path separator).
    - prog: program name shown in fault headers (defaults to argv[0]).
    - shell: render faults with rich and exit(1) instead of raising.
    - fancy: render faults inside a panel.
    - colorful: colorize rendered faults.
    """

    def __init__(self, registry, /, *, slash=False, prog=Unset, shell=False, fancy=False, colorful=True):
        if not callable(getattr(registry, "get", None)) or not callable(getattr(registry, "options", None)):
            raise TypeError("parser registry must implement get() and options() methods")
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        self._registry = registry
        self._slash = bool(slash)
        self._prog = coalesce(prog, os.path.basename(sys.argv[0]) or "switchyard")
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

    registry = mirror("registry")
    slash = mirror("slash")
    prog = mirror("prog")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def trigger(self, fault, /, **options):
        """
        surface a fault with this parser's runtime options merged in.
        """
        trigger(fault, **options, tool=self, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    @contextmanager
    def _surfacing(self):
        try:
            yield
        except CommandException as fault:
            self.trigger(fault)

    def _switch(self, token):
        return token.startswith("-") or (self._slash and token.startswith("/"))

    def parse(self, tokens, /):
        """
        parse a full argument vector.

        returns
        - None when the input is empty (no command given).
        - the populated command otherwise.

        faults
        - UnknownCommandError when the first token is not a registered command,
          plus every fault of extract().
        """
        cursor = tokens if isinstance(tokens, Cursor) else Cursor(tokens)
        if (name := cursor.next()) is None:
            return None

        if (command := self._registry.get(name)) is None:
            suggestions = difflib.get_close_matches(name, list(getattr(self._registry, "names", ())), 5)
            try:
                hint = "did you mean %r? run '%s' to see available commands" % (suggestions[0], self._prog)
            except IndexError:
                hint = "run '%s' to see available commands" % self._prog
            return self.trigger(UnknownCommandError(
                "unknown command %r" % name,
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                input=name,
                suggestions=suggestions,
                hint=hint,
                docs=getdoc(FaultCode.UNKNOWN_COMMAND),
            ))

        self.extract(command, cursor)
        return command

    def extract(self, command, cursor, /):
        """
        bind the remaining tokens of a cursor onto an already resolved command.

        - switch tokens are matched against the command options and assigned.
        - any other token is appended, in order, to command.arguments.

        faults
        - UnknownOptionError / AmbiguousOptionError from matching.
        - MissingOptionValueError when a non-boolean switch is the last token.
        - InvalidOptionValueError when the value cannot be stored.
        """
        if not isinstance(cursor, Cursor):
            cursor = Cursor(cursor)
        options = self._registry.options(command)

        while (token := cursor.next()) is not None:
            if not self._switch(token):
                command.arguments.append(token)
                continue

            value = None
            text = token[1:]
            if text.endswith("-"):
                text = text.rstrip("-")
                value = "false"

            with self._surfacing():
                option = match(options.values(), attrgetter("name"), attrgetter("altname"), token, text)

            if not option.boolean:
                value = cursor.next()
            elif value is None:
                value = "true"

            if value is None:
                self.trigger(MissingOptionValueError(
                    "missing value for option %r" % token,
                    title="missing option value",
                    code=FaultCode.MISSING_OPTION_VALUE,
                    input=token,
                    option=option,
                    hint="pass a value after the option (for example: %s <value>)" % token,
                    docs=getdoc(FaultCode.MISSING_OPTION_VALUE),
                ))

            with self._surfacing():
                assign(command, option, token, value)


__all__ = (
    "Cursor",
    "Parser",
    "match",
    "assign",
)
