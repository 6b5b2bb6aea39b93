"""
Switchyard faults (parser errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing parser
  errors. Codes are grouped by domain to keep logs/searches predictable.
- CommandException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The matcher and the assigner raise faults directly; the parser re-surfaces
  them through Parser.trigger(), which merges its runtime options first.
- In non-shell mode faults are raised; in shell mode they are rendered via rich
  on stderr and the process exits with status 1.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - routing (1110x)
      • UNKNOWN_COMMAND
    - switches (1111x)
      • UNKNOWN_OPTION, AMBIGUOUS_OPTION, MISSING_OPTION_VALUE
    - values (1112x)
      • INVALID_OPTION_VALUE
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND      = 11101

    # --- switch errors (11xxx) ---
    UNKNOWN_OPTION       = 11111
    AMBIGUOUS_OPTION     = 11112
    MISSING_OPTION_VALUE = 11113

    # --- value errors (11xxx) ---
    INVALID_OPTION_VALUE = 11121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base class of every parser fault.

    options
    - code, title, hint: rendering metadata.
    - input/value/candidates/...: context of the failing token.
    - tool, shell, fancy, colorful: runtime options merged in by Parser.trigger.
    - cause: underlying exception, chained when the fault is raised.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*([message] if message else []))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "#6B6F7A",  # dim footer for host docs
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        tool = self.options.get("tool")
        prog = text(getattr(main, "__prog__", getattr(tool, "prog", "switchyard")), styler("prog-name"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code else "?", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            renders.append(text(docs, styler("docs")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from self.options.get("cause")
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(CommandException): ...
class UnknownOptionError(CommandException): ...
class AmbiguousOptionError(CommandException): ...
class MissingOptionValueError(CommandException): ...
class InvalidOptionValueError(CommandException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into a copy of the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via rich console; otherwise, the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "UnknownCommandError",
    "UnknownOptionError",
    "AmbiguousOptionError",
    "MissingOptionValueError",
    "InvalidOptionValueError",
    "FaultCode",
    "trigger",
    "getdoc",
)
