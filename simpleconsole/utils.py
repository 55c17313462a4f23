"""
simpleconsole utilities

- Unset: the "nothing declared" marker. A parameter declared with default=None
  really defaults to None; one declared without a default carries Unset.
- coalesce(value, default): Unset → default, anything else untouched.
- rename("name"): decorator fixing __name__/__qualname__ of generated accessors.
- mirror("attr"): read-only property over self._attr handing out copies of
  containers, so a declaration cannot be changed through what it returns.
- pluralize(word): section titles ("argument" → "arguments").

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import functools
import re
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance per process; it is falsy, prints as "Unset",
    survives copy/deepcopy/pickle as itself and cannot be subclassed.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


def coalesce(object, default=None, /):
    """
    Replace Unset with 'default'; None, 0, "" and [] are real values and stay.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator giving a generated function a stable __name__ and __qualname__.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _detach(value):
    match value:
        case str() | bytes():
            return value
        case tuple():
            return tuple(map(_detach, value))
        case Mapping():
            return {key: _detach(item) for key, item in value.items()}
        case Sequence():
            return [_detach(item) for item in value]
        case Set():
            return {_detach(item) for item in value}
    return value


def mirror(name, /):
    """
    Read-only property exposing the private field "_{name}".
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be an attribute name")

    field = "_" + name

    @rename(name)
    def getter(self):
        return _detach(getattr(self, field))

    return property(getter, doc="read-only %s" % name)


@functools.cache
def pluralize(text, /):
    """
    Pluralize the last word of 'text', keeping its casing.

    - pluralize("argument")        -> "arguments"
    - pluralize("required option") -> "required options"
    - pluralize("entry")           -> "entries"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() expects a string")

    if (match := re.search(r"(\S+)(\s*)$", text)) is None:
        return text

    word = match.group(1)
    lower = word.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and lower[-2:-1] not in ("", "a", "e", "i", "o", "u"):
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if word.isupper():
        plural = plural.upper()
    elif word[0].isupper():
        plural = plural.capitalize()

    return text[:match.start(1)] + plural + match.group(2)


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
