"""
Switchyard help rendering.

render(registry, command=None, ...) builds a rich renderable:
- without a command: a usage line and the table of visible commands;
- with a command (class or instance): its usage line, description and options.

Palette keys
- usage-label, program-name, command-name, usage-section, description-section
- option-name, metavar, choice, option-description
- commands-title, commands-table, commands-description
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed.
"""
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .arguments import Shape


def _palette():
    return defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "command-name": "bold #36C5F0",  # SKY-BLUE → commands
        "usage-section": "bold #36C5F0",
        "description-section": "italic #A3A3A3",  # Neutral gray

        # === Options ===
        "option-name": "bold #00E6FF",
        "metavar": "bold #FFD600",  # AMBER for values
        "choice": "bold #FF4D94",
        "option-description": "#9CA3AF",  # Muted gray

        # === Commands table ===
        "commands-title": "bold #FFFFFF",
        "commands-table": "#4B5563",  # Slate border
        "commands-description": "#9CA3AF",

        # === Fancy panel ===
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))


def metavar(option, /):
    """
    Return the value placeholder of an option ("" for boolean switches).
    """
    if option.boolean:
        return ""
    match option.shape:
        case Shape.LIST:
            return "<%s;...>" % option.name
        case Shape.MAP:
            return "<key=value;...>"
        case Shape.ENUM:
            return "{%s}" % ",".join(member.name for member in option.type)
        case _:
            return "<%s>" % option.name


def render(registry, command=None, /, *, prog="switchyard", colorful=True, fancy=False):
    """
    Build the help renderable for a registry or one of its commands.

    Parameters
    - registry: the command registry (iterable of command classes).
    - command: None, a command class, or a command instance.
    - prog: program name shown in usage lines.
    - colorful: apply the palette.
    - fancy: wrap the result in a titled panel.
    """
    styles = _palette()

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

    renders = []
    usage = Text()
    usage.append("usage", styler("usage-label")).append(": ")
    usage.append(text(prog, styler("program-name"))).append(" ")

    if command is None:
        usage.append(text("<command>", styler("usage-section")))
        usage.append(" [options] [arguments]")
        renders.append(usage.append("\n"))

        table = Table(
            "name", "help",
            title=text("commands", styler("commands-title")),
            box=ROUNDED,
            style=styler("commands-table"),
            header_style=styler("commands-title"),
        )
        for cls in registry:
            if cls.hidden:
                continue
            table.add_row(
                text(cls.name, styler("command-name")),
                text(cls.descr or "no description", styler("commands-description")),
            )
        renders.append(table)
        title = "%s HELP" % prog
    else:
        cls = command if isinstance(command, type) else type(command)
        options = [option for option in registry.options(cls).values() if not option.hidden]

        usage.append(text(cls.name, styler("command-name")))
        if cls.usage:
            usage.append(" ").append(text(cls.usage, styler("usage-section")))
        else:
            for option in options:
                usage.append(" [").append(text("-" + option.name, styler("option-name")))
                if placeholder := metavar(option):
                    usage.append(" ").append(text(placeholder, styler("metavar")))
                usage.append("]")
            usage.append(" [arguments]")
        renders.append(usage.append("\n"))

        if cls.descr:
            renders.append(text(cls.descr, styler("description-section")).append("\n"))

        if options:
            table = Table.grid(padding=(0, 2))
            table.add_column(no_wrap=True)
            table.add_column()
            for option in options:
                names = Text(" | ").join(
                    text("-" + name, styler("option-name"))
                    for name in (option.name, option.altname) if name
                )
                if placeholder := metavar(option):
                    style = "choice" if option.shape is Shape.ENUM else "metavar"
                    names = Text.assemble(names, " ", text(placeholder, styler(style)))
                table.add_row(names, text(option.descr, styler("option-description")))
            renders.append(Group(text("options", styler("usage-label")).append(":"), table))
        title = "%s %s HELP" % (prog, cls.name)

    renderable = Group(*renders)

    if fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", title.upper(), " ", "]", style=styler("panel-title")),
            title_align="left",
        )

    return renderable


__all__ = (
    "render",
    "metavar",
)
