"""
Help rendering for a parameter registry.

ParameterDescriptor reads a registry (it never parses) and builds rich
renderables:

- synopsis(): the usage line
    usage: show-me [-h|--help] [--height HEIGHT] [--] <name> [<age>]
  optional elements are bracketed, ARRAY arguments end with '...', and a
  '[--]' marker separates options from arguments when both exist.
- line(parameter): left column, e.g. "-l, --location=LOCATION",
  "-m, --[no-]muted", "<name>".
- details(parameter): right column, description plus '[default: …]',
  '(multiple values allowed)' and '[required]' markers.
- table(kind): two-column grid for "arguments" or "options".
- render(): the whole help screen (optionally inside a Panel).

Palette keys can be overridden with a __styles__ mapping in __main__.
"""
import json
from collections import defaultdict

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .parameters import ParameterKind, ParameterType
from .utils import *


class ParameterDescriptor:
    """
    Read-only help view over a ParameterRegistry.

    Parameters
    - registry: the ParameterRegistry (or ArgvParser/Console) to describe
    - name: program name shown in the usage line
    - header / epilog: free text printed before / after the tables
    - colorful: apply the palette (False renders plain text)
    - fancy: wrap the help screen in a Panel
    """

    def __init__(self, registry, /, name="command", *, header=Unset, epilog=Unset, colorful=True, fancy=False):
        self._registry = registry
        self._name = name
        self._header = coalesce(header)
        self._epilog = coalesce(epilog)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._styles = defaultdict(str, {
            # === Head sections ===
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "header-section": "italic #A3A3A3",  # Neutral gray
            "epilog-section": "#737373",  # Dim footer gray

            # === Groups / parameters ===
            "group-label": "bold #FFFFFF",  # Pure white headers
            "description": "#9CA3AF",  # Muted gray
            "default": "#737373",
            "required": "bold #EF4444",

            # === Names / metavars ===
            "option-name": "bold #00E6FF",  # CYAN for value options
            "flag-name": "bold #22C55E",  # GREEN for presence-only options
            "argument-name": "bold #FFD600",
            "metavar": "bold #FFD600",  # AMBER for values

            # === Fancy panel ===
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

    def _styler(self, style):
        return self._styles[style] if self._colorful else ""

    def _text(self, fragment, style=""):
        if isinstance(fragment, Text):
            return fragment if self._colorful else Text(fragment.plain)
        return Text(str(fragment), self._styler(style))

    @staticmethod
    def _metavar(parameter):
        return parameter.name.upper().replace("-", "_")

    def _aliases(self, parameter, *, separator):
        """
        short aliases first, then long ones; negatable long names read --[no-]name.
        """
        shorts = sorted((alias for alias in parameter.names if not alias.startswith("--")), key=len)
        longs = [
            "--[no-]" + alias[2:] if parameter.negatable else alias
            for alias in parameter.names if alias.startswith("--")
        ]
        style = "option-name" if parameter.accepts_value else "flag-name"
        return Text(separator).join(self._text(alias, style) for alias in [*shorts, *longs])

    def _argument(self, parameter):
        text = Text.assemble("<", self._text(parameter.name, "argument-name"), ">")
        if parameter.is_array:
            text.append("...")
        return text

    def synopsis(self):
        usage = Text()
        usage.append(self._text("usage", "usage-label")).append(": ")
        usage.append(self._text(self._name, "program-name"))

        options = self._registry.options.values()
        arguments = self._registry.arguments.values()

        for option in options:
            item = self._aliases(option, separator="|")
            if option.accepts_value:
                item = Text.assemble(item, " ", self._text(self._metavar(option), "metavar"))
            usage.append(" ").append(item if option.required else Text.assemble("[", item, "]"))

        if options and arguments:
            usage.append(" [--]")

        for argument in arguments:
            item = self._argument(argument)
            usage.append(" ").append(item if argument.required else Text.assemble("[", item, "]"))

        return usage

    def line(self, parameter, /):
        if parameter.is_argument:
            return self._argument(parameter)

        line = self._aliases(parameter, separator=", ")
        if parameter.accepts_value:
            line.append("=" if any(alias.startswith("--") for alias in parameter.names) else " ")
            line.append(self._text(self._metavar(parameter), "metavar"))
        return line

    def details(self, parameter, /):
        details = Text()
        if parameter.description:
            details.append(self._text(parameter.description, "description"))

        if parameter.has_default and parameter.default is not None and parameter.default is not False:
            default = json.dumps(parameter.default, ensure_ascii=False, default=str)
            details.append(" " if details else "").append(self._text("[default: %s]" % default, "default"))

        if parameter.type is ParameterType.ARRAY:
            details.append(" " if details else "").append(self._text("(multiple values allowed)", "default"))

        if parameter.required:
            details.append(" " if details else "").append(self._text("[required]", "required"))

        return details

    def table(self, kind, /):
        parameters = (
            self._registry.arguments if kind is ParameterKind.ARGUMENT else self._registry.options
        ).values()

        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()

        for parameter in parameters:
            table.add_row(Text.assemble("  ", self.line(parameter)), self.details(parameter))

        return table

    def render(self):
        renders = []

        if self._header:
            renders.append(self._text(self._header, "header-section").append("\n"))

        renders.append(self.synopsis().append("\n"))

        for kind in ParameterKind:
            if not (self._registry.arguments if kind is ParameterKind.ARGUMENT else self._registry.options):
                continue
            renders.append(self._text(pluralize(kind.value), "group-label").append(":"))
            renders.append(self.table(kind))
            renders.append(Text(""))

        if self._epilog:
            renders.append(self._text(self._epilog, "epilog-section"))
        elif renders and isinstance(renders[-1], Text) and not renders[-1].plain:
            renders.pop()

        renderable = Group(*renders)

        if self._fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", f"{self._name} HELP".upper(), " ]", style=self._styler("panel-title")),
                title_align="left",
            )

        return renderable

    def __rich__(self):
        return self.render()


__all__ = (
    "ParameterDescriptor",
)
