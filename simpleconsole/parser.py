"""
simpleconsole argv parser: scan a token vector into a typed mapping.

What this module provides
- ArgvParser: a ParameterRegistry that knows how to parse(argv).

Scanning (left to right, over a deque of the remaining tokens)
- ""           → positional
- "--"         → every later token is positional
- "--name"     → long option, value looked ahead; "--name=value" inline
                 ("--name=" is an explicit empty value)
- "-x"         → short option, value looked ahead
- "-xVALUE"    → inline value when -x takes one, otherwise a cluster of
                 short flags ("-mq", "-vvv", "-mufoo")
- anything else → next argument, or appended to a trailing ARRAY argument

Value assignment
- "--no-<name>" forces a negatable BOOLEAN option to False.
- Presence-only options (BOOLEAN/LEVEL/negatable) reject values.
- A missing value is taken from the next token unless it starts with '-'.
- ARRAY options accumulate, LEVEL options count, others keep the last value.

Finalization
- Missing required parameters raise; missing optional ones get [] (ARRAY),
  0 (LEVEL), their default, or False.
- Present values are validated then cast by their Parameter.

Quick example:
    parser = ArgvParser()
    parser.add_parameter("name", ParameterType.STRING)
    parser.add_parameter("--verbose|-v", ParameterType.LEVEL)
    parser.parse(["prog", "Hello", "-vv"])  # {"name": "Hello", "verbose": 2}
"""
import difflib
import logging
from collections import deque
from collections.abc import Iterable

from .faults import *
from .parameters import *
from .utils import *

logger = logging.getLogger(__name__)


class ArgvParser(ParameterRegistry):
    """
    Parameter registry plus the token scanner.

    The parser keeps no result between calls: parse() resets its working state
    (remaining tokens, argument cursor, option switch and value accumulator) and
    returns a fresh dict each time. It is not meant to be shared across threads.
    """

    def __init__(self):
        super().__init__()
        self._tokens = deque()
        self._index = 0
        self._parse_options = True
        self._values = {}

    def parse(self, argv):
        """
        parse an argv-like vector and return {result key: typed value}.

        argv[0] is the program name and is skipped. Raises an
        InvalidParameterError subclass on any input error; no partial
        result is produced.
        """
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")

        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be an iterable of strings")

        self._tokens = deque(tokens[1:])
        self._index = 0
        self._parse_options = True
        self._values = {}

        logger.debug("parsing %d token(s)", len(self._tokens))

        while self._tokens:
            self._parse_token(self._tokens.popleft())

        return self._finalize()

    def _parse_token(self, token):
        if not self._parse_options:
            self._parse_argument(token)
        elif token == "":
            self._parse_argument(token)
        elif token == "--":
            logger.debug("option parsing stopped by '--'")
            self._parse_options = False
        elif token.startswith("--"):
            self._parse_long_option(token)
        elif token.startswith("-") and token != "-":
            self._parse_short_option(token)
        else:
            self._parse_argument(token)

    def _parse_long_option(self, token):
        name, separator, value = token[2:].partition("=")

        if separator:
            # '--name=' keeps the explicit empty string
            self._set_option_value(name, value, token=token, inline=True)
        else:
            self._set_option_value(name, None, token=token)

    def _parse_short_option(self, token):
        name = token[1:]

        if len(name) == 1:
            self._set_option_value(name, None, token=token)
            return

        option = self._get_shortcut(name[0])
        if option is not None and option.accepts_value:
            # -uadmin
            self._set_option_value(option.primary, name[1:], token=token, inline=True)
        else:
            self._parse_short_option_set(name, token)

    def _parse_short_option_set(self, name, token):
        """
        walk a cluster of short options; the first value-taking option eats the
        rest of the cluster as its value.
        """
        for index, char in enumerate(name):
            if (option := self._get_shortcut(char)) is None:
                raise UnknownOptionError(
                    "option '-%s' does not exist" % char,
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    input=token,
                    hint="%r is read as a group of short options; check each letter" % token,
                    docs=getdoc(FaultCode.UNKNOWN_OPTION),
                )

            if option.accepts_value:
                rest = name[index + 1:]
                self._set_option_value(option.primary, rest or None, token=token, inline=bool(rest))
                break

            self._set_option_value(option.primary, None, token=token)

    def _parse_argument(self, token):
        if (argument := self.get_argument_by_index(self._index)) is not None:
            self._values[argument.name] = [token] if argument.is_array else token
            self._index += 1
            return

        if (last := self.get_last_argument()) is not None and last.is_array:
            self._values.setdefault(last.name, []).append(token)
            return

        if self.arguments:
            message = "too many arguments, expected arguments %s" % " ".join(map(repr, self.arguments))
            hint = "remove %r or pass it after an option that takes a value" % token
        else:
            message = "no arguments expected, got %r" % token
            hint = "remove %r; this command only takes options" % token

        raise UnknownArgumentError(
            message,
            title="unexpected argument",
            code=FaultCode.UNKNOWN_ARGUMENT,
            input=token,
            index=self._index,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
        )

    def _get_shortcut(self, char):
        for option in self.options.values():
            if char in option.shortcuts:
                return option
        return None

    def _set_option_value(self, name, value, *, token, inline=False):
        name = name.lstrip("-")

        if (option := self.get_option(name)) is None:
            if name.startswith("no-"):
                negated = self.get_option(name[3:])
                if negated is not None and negated.is_boolean and negated.negatable:
                    self._values[negated.name] = False
                    return

            aliases = [alias for x in self.options.values() for alias in x.names]
            suggestions = difflib.get_close_matches(token.partition("=")[0], aliases, 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "run with --help to see all available options"

            raise UnknownOptionError(
                "option %r does not exist" % token.partition("=")[0],
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                input=token,
                suggestions=suggestions,
                hint=hint,
                docs=getdoc(FaultCode.UNKNOWN_OPTION),
            )

        if value is not None and not option.accepts_value:
            raise ValueNotAcceptedError(
                "option %r does not accept value" % option.primary,
                title="option takes no value",
                code=FaultCode.VALUE_NOT_ACCEPTED,
                input=token,
                parameter=option,
                hint="remove the value (for example: %s)" % option.primary,
                docs=getdoc(FaultCode.VALUE_NOT_ACCEPTED),
            )

        if (value is None or (value == "" and not inline)) and option.accepts_value and self._tokens:
            following = self._tokens[0]
            if not following or not following.startswith("-"):
                value = self._tokens.popleft()

        if value is None and option.is_boolean:
            value = True

        if option.is_boolean:
            value = bool(value)

        logger.debug("option %r set from %r", option.name, token)

        if option.is_array:
            self._values.setdefault(option.name, []).append(value)
        elif option.is_level:
            self._values[option.name] = self._values.get(option.name, 0) + 1
        else:
            self._values[option.name] = value

    def _finalize(self):
        result = {}

        for name, parameter in self._parameters.items():
            if name not in self._values:
                if parameter.required:
                    typename = parameter.kind.value
                    raise MissingParameterError(
                        "required %s %r is missing" % (typename, name),
                        title="missing %s" % typename,
                        code=FaultCode.MISSING_PARAMETER,
                        input=parameter.primary,
                        parameter=parameter,
                        hint=(
                            "add the <%s> argument in its position" % name
                            if parameter.is_argument else
                            "add %s <value> to the command line" % parameter.primary
                        ),
                        docs=getdoc(FaultCode.MISSING_PARAMETER),
                    )
                result[name] = self._fallback(parameter)
                continue

            value = self._values[name]
            parameter.validate(value)
            result[name] = parameter.cast(value)

        logger.debug("parsed %r", result)
        return result

    @staticmethod
    def _fallback(parameter):
        """
        value of a parameter absent from the command line.
        """
        if parameter.is_array:
            return list(coalesce(parameter.default, None) or [])
        if parameter.is_level:
            return coalesce(parameter.default, 0)
        return coalesce(parameter.default, False)

    def compose(self, values, prog="command"):
        """
        re-derive an argv vector from a parse() result.

        arguments come first and options follow, unless an argument starts with
        '-': then options come first and arguments follow a '--' marker.
        Unset scalars (False) are left out; None becomes a bare option.
        """
        positionals = []
        for name, argument in self.arguments.items():
            value = values.get(name, False)
            if value is False or value is None:
                continue
            if argument.is_array:
                positionals.extend(map(format_number, value))
            else:
                positionals.append(format_number(value))

        switches = []
        for name, option in self.options.items():
            value = values.get(name, False)
            match option.type:
                case ParameterType.BOOLEAN:
                    if value is True:
                        switches.append(self._longest(option))
                    elif value is False and option.negatable:
                        switches.append("--no-" + option.name)
                case ParameterType.LEVEL:
                    switches.extend([self._longest(option)] * int(value or 0))
                case ParameterType.ARRAY:
                    for item in value or ():
                        switches.extend(self._assign(option, item))
                case _:
                    if value is None:
                        switches.append(self._longest(option))
                    elif value is not False:
                        switches.extend(self._assign(option, value))

        if any(token.startswith("-") for token in positionals):
            return [prog, *switches, "--", *positionals]
        return [prog, *positionals, *switches]

    @staticmethod
    def _longest(option):
        return next((alias for alias in option.names if alias.startswith("--")), option.primary)

    def _assign(self, option, value):
        text = format_number(value)
        if (alias := self._longest(option)).startswith("--"):
            return [alias + "=" + text]
        if text:
            return [alias + text]
        return [alias, text]


__all__ = (
    "ArgvParser",
)
