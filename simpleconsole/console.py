"""
simpleconsole Console: process entry/exit wiring on top of ArgvParser.

A Console is an ArgvParser that also knows how to run a program:

    app = Console("show-me", header="SHOW ME - v1.0")
    app.add_parameter("name", Console.STRING, "your name", required=True)
    app.add_parameter("--muted|-m", Console.BOOLEAN, "is muted")
    app.run(main=lambda app: app.writeln("Hello " + app.get("name")))

execute()
- installs the built-in --help|-h and --verbosity|-v options (unless taken),
- parses argv into params (without the built-in keys) and applies the
  verbosity to logging,
- shows help, or calls main(app) / do_execute() and maps the result to an
  exit code (None → SUCCESS).

Input faults are rendered to stderr under the usage line and become FAILURE;
any other exception is reported (with a traceback when -v is given) and
becomes FAILURE too. With shell=False every exception propagates instead.
"""
import logging
import os
import sys
from types import MappingProxyType

from rich.console import Console as RichConsole
from rich.prompt import Confirm, Prompt
from rich.text import Text

from .descriptor import ParameterDescriptor
from .faults import *
from .logs import setup_logging
from .parameters import *
from .parser import ArgvParser
from .utils import *

logger = logging.getLogger(__name__)


class _Lines:
    """
    lines of a text stream without their line break, as input() returns them.
    """

    def __init__(self, stream):
        self._stream = stream

    def readline(self):
        return self._stream.readline().rstrip("\r\n")


class Console(ArgvParser):
    """
    Runnable parameter registry.

    Subclasses usually override configure() to declare parameters and
    do_execute() to implement the program; both default to doing nothing.
    """
    SUCCESS = 0
    FAILURE = 1

    STRING = ParameterType.STRING
    INT = ParameterType.INT
    FLOAT = ParameterType.FLOAT
    NUMERIC = ParameterType.NUMERIC
    BOOLEAN = ParameterType.BOOLEAN
    LEVEL = ParameterType.LEVEL
    ARRAY = ParameterType.ARRAY

    name = mirror("name")
    header = mirror("header")
    epilog = mirror("epilog")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    verbosity = mirror("verbosity")

    def __init__(
            self,
            name=Unset,
            *,
            header=Unset,
            epilog=Unset,
            shell=True,
            fancy=False,
            colorful=True,
            stdout=None,
            stderr=None,
            stdin=None,
    ):
        super().__init__()
        self._name = coalesce(name, os.path.basename(sys.argv[0]) or "console")
        self._header = coalesce(header, "")
        self._epilog = coalesce(epilog, "")
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._stdout = stdout or RichConsole(no_color=not colorful)
        self._stderr = stderr or RichConsole(stderr=True, no_color=not colorful)
        self._stdin = None if stdin is None else _Lines(stdin)
        self._params = {}
        self._builtins = set()
        self._verbosity = 0
        self.configure()

    @property
    def params(self):
        """
        read-only view of the last parse result.
        """
        return MappingProxyType(self._params)

    def configure(self):
        """
        hook for subclasses to declare their parameters.
        """

    def do_execute(self):
        """
        hook for subclasses: the program body, called when no main is given.
        """
        return self.SUCCESS

    def get(self, name, default=None, /):
        """
        parsed value of a parameter, looked up by result key or any alias.
        """
        parameter = self.get_parameter(name)
        return self._params.get(parameter.name if parameter else name, default)

    def _install(self, names, type, description):
        """
        declare a built-in option with the aliases nobody claimed yet; skipped
        when its long name is taken.
        """
        free = [alias for alias in names if self.get_parameter(alias) is None]
        if free and free[0] == names[0]:
            self._builtins.add(self.add_parameter(free, type, description).name)

    def _wants_help(self, argv):
        """
        tell whether a help alias appears before any '--' in argv, so that help
        wins over an otherwise invalid command line.
        """
        if (option := self.get_option("help")) is None or not option.is_boolean:
            return False
        tokens = list(argv)[1:]
        if "--" in tokens:
            tokens = tokens[:tokens.index("--")]
        return any(token in option.names for token in tokens)

    def execute(self, argv=None, main=None):
        """
        parse argv (sys.argv by default), run the program and return its exit code.
        """
        self._install(("--help", "-h"), ParameterType.BOOLEAN, "show this help message and exit")
        self._install(("--verbosity", "-v"), ParameterType.LEVEL, "increase output verbosity (-v, -vv)")

        argv = sys.argv if argv is None else argv

        try:
            self._params = self.parse(argv)
        except InvalidParameterError as fault:
            if self._wants_help(argv):
                self.show_help()
                return self.SUCCESS
            if not self._shell:
                raise
            self._stderr.print(self.describe().synopsis())
            trigger(
                fault,
                shell=True,
                fancy=self._fancy,
                colorful=self._colorful,
                prog=self._name,
                console=self._stderr,
            )
            return self.FAILURE

        verbosity = self._params.get("verbosity", 0)
        self._verbosity = verbosity if isinstance(verbosity, int) and not isinstance(verbosity, bool) else 0
        setup_logging(self._verbosity, console=self._stderr)

        wants_help = "help" in self._builtins and self._params.get("help") is True
        # built-in keys never reach params
        self._params = {key: value for key, value in self._params.items() if key not in self._builtins}

        if wants_help:
            self.show_help()
            return self.SUCCESS

        logger.debug("running %r with %r", self._name, self._params)

        try:
            code = main(self) if main is not None else self.do_execute()
        except Exception as exception:
            if not self._shell:
                raise
            if self._verbosity:
                self._stderr.print_exception(show_locals=self._verbosity > 2)
            else:
                self.error("%s: %s" % (type(exception).__name__, exception))
            return self.FAILURE

        return self.SUCCESS if code is None else int(code)

    def run(self, argv=None, main=None):
        """
        execute() and exit the process with its code.
        """
        sys.exit(self.execute(argv, main))

    def describe(self):
        return ParameterDescriptor(
            self,
            self._name,
            header=self._header,
            epilog=self._epilog,
            colorful=self._colorful,
            fancy=self._fancy,
        )

    def show_help(self):
        self._stdout.print(self.describe().render())

    def write(self, *objects):
        self._stdout.print(*objects, end="", markup=False, highlight=False)

    def writeln(self, *objects):
        self._stdout.print(*objects, markup=False, highlight=False)

    def error(self, *objects):
        self._stderr.print(*objects, style="bold red" if self._colorful else None, markup=False, highlight=False)

    def in_(self, question, default=None, boolean=False):
        """
        ask 'question' on stdout and read the answer from stdin.

        with boolean=True the answer is y/n and the result a bool; an empty
        answer gives 'default' (False when there is none).
        """
        prompt = Text(question)
        if boolean:
            return Confirm.ask(prompt, console=self._stdout, default=bool(default), stream=self._stdin)
        if default is None:
            return Prompt.ask(prompt, console=self._stdout, stream=self._stdin)
        return Prompt.ask(prompt, console=self._stdout, default=default, stream=self._stdin)


__all__ = (
    "Console",
)
