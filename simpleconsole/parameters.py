r"""
simpleconsole parameter declarations and registry.

Overview
- ParameterType: closed set of value types (STRING, INT, FLOAT, NUMERIC,
  BOOLEAN, LEVEL, ARRAY). Drives exhaustive validate/cast branches.
- ParameterKind: ARGUMENT (positional) or OPTION (named, '-x' / '--name').
- Parameter: one declared slot. Read-only attributes are mirrored from private
  fields; the fluent setters re-check every declaration rule.
- ParameterRegistry: insertion-ordered store with 'arguments' and 'options'
  views and by-name/by-index lookup.

Names
- A name that does not start with '-' declares an argument (one bare identifier).
- Anything else declares an option with one or more aliases separated by '|':
    "--user|-u"      → aliases ('--user', '-u'), result key 'user'
    "-v"             → aliases ('-v',), result key 'v'
- Aliases longer than one character must use the '--' prefix.
- Lookup accepts names with or without their leading dashes.

Declaration rules (ParameterDefinitionError on violation)
- arguments cannot be negatable, BOOLEAN or LEVEL;
- negatable options cannot be required;
- required parameters cannot carry a default;
- ARRAY defaults must be sequences;
- no alias may be declared twice in one registry.

Quick example:
    registry = ParameterRegistry()
    registry.add_parameter("name", ParameterType.STRING, required=True)
    registry.add_parameter("--muted|-m", ParameterType.BOOLEAN, negatable=True)
    registry.get_option("m").name  # "muted"
"""
import functools
import logging
import operator
import re
from collections.abc import Iterable, Sequence
from enum import Enum
from types import MappingProxyType

from .faults import *
from .utils import *

logger = logging.getLogger(__name__)

_NUMERIC = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*")


def is_numeric(value, /):
    """
    tell whether 'value' is a number or a string that reads as one
    (optional sign, decimals and exponent; surrounding blanks allowed).
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float):
        return True
    return isinstance(value, str) and _NUMERIC.fullmatch(value) is not None


def format_number(number, /):
    """
    shortest text for a number; integral floats drop their '.0' tail
    (1.0 → '1', 123.456 → '123.456').
    """
    if isinstance(number, float):
        text = repr(number)
        return text[:-2] if text.endswith(".0") else text
    return str(number)


class ParameterType(Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    LEVEL = "level"
    ARRAY = "array"

    @property
    def accepts_value(self):
        """
        BOOLEAN and LEVEL are presence-only; every other type carries a value.
        """
        return self not in (ParameterType.BOOLEAN, ParameterType.LEVEL)


class ParameterKind(Enum):
    ARGUMENT = "argument"
    OPTION = "option"


class DeclarationType(type):
    """
    Metaclass giving declarations a stable representation and read-only fields.

    - every name listed in __introspectable__ becomes a mirror() property over
      the private backing field "_{name}";
    - __typename__ is the hyphenated lowercase class name;
    - __repr__/__rich_repr__ list the __displayable__ (or __introspectable__)
      fields.
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _split_names(names, /):
    """
    Internal: turn a declaration name ("--user|-u" or an iterable of aliases)
    into a list of trimmed alias strings.
    """
    if isinstance(names, str):
        names = names.split("|")
    elif not isinstance(names, Iterable):
        raise TypeError("parameter names must be a string or an iterable of strings")

    aliases = []
    for name in names:
        if not isinstance(name, str):
            raise TypeError("parameter names must be strings")
        aliases.append(name.strip())
    return aliases


def _single_hyphens(word, /):
    return "--" not in word and not word.endswith("-")


def _sanitize_names(names, /):
    """
    Internal: validate aliases and derive the parameter kind.

    Accepted forms
    - argument: a single identifier, e.g. "name", "source-file"
    - option: "-x" (one character) or "--long", "--long-name"

    Returns
    - (kind, tuple of aliases)
    """
    aliases = _split_names(names)

    if not aliases or not all(aliases):
        raise ParameterDefinitionError("parameter names cannot be empty")

    if not aliases[0].startswith("-"):
        if len(aliases) > 1:
            raise ParameterDefinitionError(
                "multiple names are only allowed for options, got %r" % "|".join(aliases)
            )
        if not re.fullmatch(r"[^\W\d][\w-]*", aliases[0]) or not _single_hyphens(aliases[0]):
            raise ParameterDefinitionError("invalid argument name %r" % aliases[0])
        return ParameterKind.ARGUMENT, tuple(aliases)

    seen = set()
    for alias in aliases:
        if not alias.startswith("-"):
            raise ParameterDefinitionError(
                "multiple names are only allowed for options, got %r" % "|".join(aliases)
            )
        if not alias.startswith("--") and len(alias) > 2:
            raise ParameterDefinitionError(
                "invalid option name %r, names longer than one character must start with '--'" % alias
            )
        if not re.fullmatch(r"-[^\W_]|--[^\W_](?:[^\W_]|-)*", alias) or not _single_hyphens(alias[2:]):
            raise ParameterDefinitionError("invalid option name %r" % alias)
        if (key := alias.lstrip("-")) in seen:
            raise ParameterDefinitionError("option names cannot contain duplicates, got %r twice" % key)
        seen.add(key)

    return ParameterKind.OPTION, tuple(aliases)


class Parameter(metaclass=DeclarationType):
    """
    A declared named slot: an argument or an option.

    Attributes (read-only; use the set_* methods to reconfigure)
    - names: tuple of aliases, first is primary
    - name: primary alias without leading dashes (the result key)
    - kind: ParameterKind
    - type: ParameterType
    - description: str
    - required: bool
    - default: declared default or Unset
    - negatable: bool (options only; also recognizes --no-<name>)
    """

    __introspectable__ = (
        "names",
        "kind",
        "type",
        "description",
        "required",
        "default",
        "negatable",
    )

    __displayable__ = (
        "names",
        "type",
        "required",
        "default",
        "negatable",
    )

    def __init__(
            self,
            names,
            type=ParameterType.STRING,
            description="",
            required=False,
            default=Unset,
            negatable=False,
    ):
        if not isinstance(type, ParameterType):
            raise TypeError("parameter 'type' must be a ParameterType")
        if not isinstance(description, str):
            raise TypeError("parameter 'description' must be a string")

        self._kind, self._names = _sanitize_names(names)
        self._type = type
        self._description = description.strip()
        self._required = bool(required)
        self._default = default
        self._negatable = bool(negatable)

        self._check()

    @property
    def name(self):
        return self._names[0].lstrip("-")

    @property
    def primary(self):
        return self._names[0]

    @property
    def shortcuts(self):
        """
        single-character aliases without their dash, e.g. ('u',).
        """
        return tuple(alias[1:] for alias in self._names if not alias.startswith("--"))

    @property
    def is_argument(self):
        return self._kind is ParameterKind.ARGUMENT

    @property
    def is_option(self):
        return self._kind is ParameterKind.OPTION

    @property
    def accepts_value(self):
        return self._type.accepts_value and not self._negatable

    @property
    def is_array(self):
        return self._type is ParameterType.ARRAY

    @property
    def is_level(self):
        return self._type is ParameterType.LEVEL

    @property
    def is_boolean(self):
        return self._type is ParameterType.BOOLEAN

    @property
    def has_default(self):
        return self._default is not Unset

    def has_name(self, name, /):
        """
        tell whether 'name' (with or without leading dashes) is one of the aliases.
        """
        key = name.lstrip("-")
        return any(alias.lstrip("-") == key for alias in self._names)

    def _check(self):
        """
        Internal: enforce the declaration rules; called after every change.
        """
        if self.is_argument:
            if self._negatable:
                raise ParameterDefinitionError("argument %r cannot be negatable" % self.name)
            if self._type in (ParameterType.BOOLEAN, ParameterType.LEVEL):
                raise ParameterDefinitionError("argument %r cannot be type: %s" % (self.name, self._type.name))
        elif self._negatable and self._required:
            raise ParameterDefinitionError("negatable option %r cannot be required" % self.name)

        if self._required and self.has_default:
            raise ParameterDefinitionError(
                "default value of %r cannot be set when required is true" % self.name
            )

        if self.is_array and self.has_default and self._default is not None:
            if not isinstance(self._default, Sequence) or isinstance(self._default, str | bytes):
                raise ParameterDefinitionError("default value of %r must be an array" % self.name)

    def set_description(self, description, /):
        if not isinstance(description, str):
            raise TypeError("parameter 'description' must be a string")
        self._description = description.strip()
        return self

    def _update(self, field, value):
        """
        Internal: assign a field, rolling it back when the rules reject it.
        """
        previous = getattr(self, field)
        setattr(self, field, value)
        try:
            self._check()
        except ParameterDefinitionError:
            setattr(self, field, previous)
            raise
        return self

    def set_required(self, required=True, /):
        return self._update("_required", bool(required))

    def set_default(self, default, /):
        return self._update("_default", default)

    def set_negatable(self, negatable=True, /):
        return self._update("_negatable", bool(negatable))

    def validate(self, value, /):
        """
        check a parsed value against the declared type.

        - None passes unless the parameter is required (MissingValueError).
        - INT/FLOAT: numeric text whose int/float rendering equals the input.
        - NUMERIC: numeric text.
        - BOOLEAN: a bool or the strings "1"/"0".
        - ARRAY: a sequence.
        - STRING/LEVEL: no further check.

        raises InvalidValueTypeError naming the parameter and the expected type.
        """
        if value is None:
            if self._required:
                raise MissingValueError(
                    "required value for %r is missing" % self.name,
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    input=self.primary,
                    parameter=self,
                    hint="pass a value after %s (for example: %s <value>)" % (self.primary, self.primary),
                    docs=getdoc(FaultCode.MISSING_VALUE),
                )
            return

        match self._type:
            case ParameterType.INT:
                valid = self._round_trips(value, int)
            case ParameterType.FLOAT:
                valid = self._round_trips(value, float)
            case ParameterType.NUMERIC:
                valid = is_numeric(value)
            case ParameterType.BOOLEAN:
                valid = isinstance(value, bool) or value in ("1", "0")
            case ParameterType.ARRAY:
                valid = isinstance(value, Sequence) and not isinstance(value, str | bytes)
            case ParameterType.STRING | ParameterType.LEVEL:
                valid = True

        if not valid:
            raise InvalidValueTypeError(
                "invalid value type for %r, expected %s" % (self.name, self._type.name),
                title="invalid value type",
                code=FaultCode.INVALID_VALUE_TYPE,
                input=value,
                parameter=self,
                hint="give %s a value of type %s" % (
                    self.primary if self.is_option else "<%s>" % self.name, self._type.name
                ),
                docs=getdoc(FaultCode.INVALID_VALUE_TYPE),
            )

    @staticmethod
    def _round_trips(value, convert, /):
        if isinstance(value, bool):
            return False
        if isinstance(value, int | float):
            return isinstance(value, convert)
        if not is_numeric(value):
            return False
        try:
            return format_number(convert(value)) == value
        except ValueError:
            return False

    def cast(self, value, /):
        """
        convert a validated value to its python type; None is kept as-is.
        """
        if value is None:
            return None

        match self._type:
            case ParameterType.INT | ParameterType.LEVEL:
                return int(value)
            case ParameterType.FLOAT | ParameterType.NUMERIC:
                return float(value)
            case ParameterType.BOOLEAN:
                return value if isinstance(value, bool) else value == "1"
            case ParameterType.ARRAY:
                return list(value)
            case ParameterType.STRING:
                return value


class ParameterRegistry:
    """
    Ordered store of declared parameters.

    - parameters: read-only mapping result key → Parameter (declaration order)
    - arguments / options: the same, filtered by kind
    """

    def __init__(self):
        self._parameters = {}

    @property
    def parameters(self):
        return MappingProxyType(self._parameters)

    @property
    def arguments(self):
        return MappingProxyType({name: x for name, x in self._parameters.items() if x.is_argument})

    @property
    def options(self):
        return MappingProxyType({name: x for name, x in self._parameters.items() if x.is_option})

    def add_parameter(
            self,
            names,
            type=ParameterType.STRING,
            description="",
            required=False,
            default=Unset,
            negatable=False,
    ):
        """
        declare a parameter and return it for further (fluent) configuration.

        raises ParameterDefinitionError when a declaration rule is broken or an
        alias is already registered.
        """
        parameter = Parameter(names, type, description, required, default, negatable)

        for alias in parameter.names:
            if self.get_parameter(alias) is not None:
                raise ParameterDefinitionError(
                    "%s name %r is already in use" % (parameter.kind.value, alias)
                )

        self._parameters[parameter.name] = parameter
        logger.debug("%s %r declared as %s", parameter.kind.value, parameter.name, parameter.type.name)
        return parameter

    def get_parameter(self, name, /):
        for parameter in self._parameters.values():
            if parameter.has_name(name):
                return parameter
        return None

    def get_argument(self, name, /):
        for parameter in self._parameters.values():
            if parameter.is_argument and parameter.has_name(name):
                return parameter
        return None

    def get_option(self, name, /):
        for parameter in self._parameters.values():
            if parameter.is_option and parameter.has_name(name):
                return parameter
        return None

    def get_argument_by_index(self, index, /):
        try:
            return list(self.arguments.values())[index] if index >= 0 else None
        except IndexError:
            return None

    def get_last_argument(self):
        try:
            return list(self.arguments.values())[-1]
        except IndexError:
            return None


__all__ = (
    # Enumerations
    "ParameterType",
    "ParameterKind",

    # Classes
    "Parameter",
    "ParameterRegistry",

    # Helpers
    "is_numeric",
    "format_number",
)

# Not part of the public API.
del DeclarationType
