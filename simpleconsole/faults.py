"""
simpleconsole faults: parse-time input errors and how they are shown.

Two tiers
- ParameterDefinitionError (a ValueError): a declaration breaks a rule. It is a
  programming mistake, raised from add_parameter()/set_*() and never rendered.
- InvalidParameterError: the command line is wrong. Raised by parse(); carries
  a message plus read-only options (code, title, hint, input, parameter, ...)
  and renders itself with rich:

      [ show-me — 11131 | Missing Argument ]
      required argument 'name' is missing
       → add the <name> argument in its position

Host overrides (looked up in __main__)
- __codes__: FaultCode → label shown instead of the number
- __docs__:  FaultCode → short documentation, see getdoc()
- __prog__:  program name used in the header
- __styles__: palette entries (fault-* keys below)
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    Stable numeric identifiers of input faults.

    1111x options, 1112x arguments, 1113x resolution (finalization).
    """
    # --- options (1111x) ---
    UNKNOWN_OPTION              = 11111
    VALUE_NOT_ACCEPTED          = 11112

    # --- arguments (1112x) ---
    UNKNOWN_ARGUMENT            = 11121

    # --- resolution (1113x) ---
    MISSING_PARAMETER           = 11131
    MISSING_VALUE               = 11132
    INVALID_VALUE_TYPE          = 11133

    def normalize(self):
        """
        label for this code: the host's __codes__ entry, or the number as text.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParameterDefinitionError(ValueError):
    """
    a parameter declaration breaks a declaration rule.
    """


def _palette(colorful):
    if not colorful:
        return defaultdict(str)
    return defaultdict(str, {
        "fault-prog": "bold #E6E6F0",  # near-white
        "fault-code": "bold #00E5FF",  # cyan
        "fault-title": "bold #FF4DA6",  # pink
        "fault-message": "#C8C8D0",  # light gray
        "fault-arrow": "dim #9CE19C",
        "fault-hint": "italic #9CE19C",  # soft green
    } | getattr(__import__("__main__"), "__styles__", {}))


class InvalidParameterError(Exception):
    """
    the command line does not match the declared parameters.

    str(fault) is the message; every other detail lives in fault.options, a
    read-only mapping. Rendering honours the 'colorful', 'fancy' and 'prog'
    options.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        palette = _palette(self.options.get("colorful", True))
        prog = getattr(__import__("__main__"), "__prog__", self.options.get("prog", "console"))
        code = self.code.normalize() if self.code else "-"
        title = self.options.get("title", "invalid parameter").title()

        header = Text.assemble(
            "[ ",
            (str(prog), palette["fault-prog"]),
            " — ",
            (code, palette["fault-code"]),
            " | ",
            (title, palette["fault-title"]),
            " ]",
        )

        lines = [Text(str(self), palette["fault-message"])]
        if hint := self.options.get("hint"):
            lines.append(Text.assemble((" → ", palette["fault-arrow"]), (hint, palette["fault-hint"])))

        if self.options.get("fancy", False):
            return Panel(Group(*lines), title=header, title_align="left")
        return Group(header, *lines)

    def __trigger__(self):
        """
        raise the fault, or print it when the 'shell' option is set.
        """
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        """
        same fault, same traceback, with 'overrides' merged into its options.
        """
        assert not unused, "positional arguments are not allowed"
        replaced = type(self)(self.message, **(dict(self.options) | overrides))
        replaced.__traceback__ = self.__traceback__
        return replaced


class UnknownOptionError(InvalidParameterError): ...
class UnknownArgumentError(InvalidParameterError): ...
class ValueNotAcceptedError(InvalidParameterError): ...
class MissingParameterError(InvalidParameterError): ...
class MissingValueError(InvalidParameterError): ...
class InvalidValueTypeError(InvalidParameterError): ...


def trigger(fault, /, **options):
    """
    surface 'fault' with extra runtime options (shell, console, prog, ...).

    with shell=True the fault is printed to options["console"] (stderr by
    default); otherwise it is raised.
    """
    for method in ("__trigger__", "__replace__"):
        if not callable(getattr(fault, method, None)):
            raise TypeError("trigger() argument must have a %s method" % method)
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    documentation the host registered for 'code' in __main__.__docs__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a FaultCode")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ParameterDefinitionError",
    "InvalidParameterError",
    "UnknownOptionError",
    "UnknownArgumentError",
    "ValueNotAcceptedError",
    "MissingParameterError",
    "MissingValueError",
    "InvalidValueTypeError",
    "trigger",
    "getdoc",
)
