r"""
cliopts option declarations.

Overview
- Appearance: closed enumeration of cardinality modes. A mode fully decides how
  often an option may appear and whether it consumes a parameter token.

    mode                    min   max         parameter
    MANDATORY               1     1           yes
    MANDATORY_REPEAT        1     Unbounded   yes
    OPTIONAL                0     1           yes
    OPTIONAL_REPEAT         0     Unbounded   yes
    OPTIONAL_NO_PARAMETER   0     1           no

- Unbounded: explicit marker for “no maximum” (never an integer sentinel).
- Option: immutable descriptor built from names, a mode and an optional default.

Validation highlights
- names: a string or an iterable of strings, at least one, no duplicates. The
  first name is canonical: it keys parse results and default injection.
- A default is only meaningful for OPTIONAL and OPTIONAL_REPEAT; anything else
  is a ContractViolation raised right here, never at parse time.

Quick example:
    >>> port = Option(("--port", "-p"), Appearance.MANDATORY)
    >>> name = Option("--name", Appearance.OPTIONAL, "anon")
    >>> verbose = Option(("--verbose", "-v"), Appearance.OPTIONAL_NO_PARAMETER)
"""
import functools
import operator
import re
from collections.abc import Iterable
from enum import Enum
from typing import final

from rich.text import Text

from .faults import ContractViolation
from .utils import *


class Appearance(Enum):
    """
    cardinality mode of an option (selected once, at construction).
    """
    MANDATORY             = "mandatory"
    MANDATORY_REPEAT      = "mandatory-repeat"
    OPTIONAL              = "optional"
    OPTIONAL_REPEAT       = "optional-repeat"
    OPTIONAL_NO_PARAMETER = "optional-no-parameter"


@final
class UnboundedType:
    """
    Singleton marker for an unlimited maximum number of appearances.

    Comparisons against counts must go through an identity check
    (``maximum is Unbounded``); the marker is deliberately not an int.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __rich__(self):
        return Text(repr(self), style="dim")

    def __repr__(self):
        return "Unbounded"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnboundedType' is not an acceptable base type")


Unbounded = UnboundedType()


def looks_like_option_name(token, /):
    """
    Return True when a token starts with '-'.

    This is the only syntactic test the parser applies: it cannot tell a
    negative number such as "-5" apart from an option name.
    """
    return token[:1] == "-"


class OptionType(type):
    """
    Metaclass that turns Option into a sealed, introspectable descriptor.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_<name>" backing field.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Seal the class against subclassing to keep descriptor semantics predictable.
    """
    __introspectable__ = ()

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
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(names=('--port', '-p'), appearance=<Appearance.MANDATORY: 'mandatory'>, ...)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__init_subclass__")
        def __init_subclass__(cls, **options):  # NOQA: F-841
            raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
        self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_names(cls, names, /):
    """
    Internal: validate and normalize the declared names of an option.

    - a single string is treated as a one-name declaration;
    - names are kept exactly as declared (matching is exact); empty names and
      duplicates are rejected;
    - declaration order is preserved (the first name is canonical).

    Raises
    - ContractViolation: no names at all.
    - TypeError: names is not a string/iterable, or holds a non-string.
    - ValueError: a name is the empty string or appears twice.
    """
    if isinstance(names, str):
        names = (names,)
    elif not isinstance(names, Iterable):
        raise TypeError(f"{cls.__typename__} names must be a string or an iterable of strings")

    sanitized = []
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not name:
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif name in sanitized:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        sanitized.append(name)

    if not sanitized:
        raise ContractViolation(f"{cls.__typename__} must specify at least one name")
    return tuple(sanitized)


class Option(metaclass=OptionType):
    """
    Declared shape of a single command-line option.

    Properties (read-only)
    - names: tuple[str, ...]; names[0] is the canonical name.
    - appearance: the Appearance the option was built from.
    - min_appearances: int.
    - max_appearances: int | Unbounded.
    - no_parameter: bool; True for pure flags.
    - default_values: tuple[str, ...]; injected when the option is absent and optional.
    """
    __slots__ = ("_names", "_appearance", "_min_appearances", "_max_appearances", "_no_parameter", "_default_values")

    __introspectable__ = (
        "names",
        "appearance",
        "min_appearances",
        "max_appearances",
        "no_parameter",
        "default_values",
    )

    def __init__(self, names, appearance, default=Unset, /):
        names = _sanitize_names(type(self), names)

        if default is Unset:
            match appearance:
                case Appearance.MANDATORY:
                    bounds = 1, 1, False
                case Appearance.MANDATORY_REPEAT:
                    bounds = 1, Unbounded, False
                case Appearance.OPTIONAL:
                    bounds = 0, 1, False
                case Appearance.OPTIONAL_REPEAT:
                    bounds = 0, Unbounded, False
                case Appearance.OPTIONAL_NO_PARAMETER:
                    bounds = 0, 1, True
                case _:
                    raise ContractViolation(f"{appearance!r} is not an appearance mode")
            defaults = ()
        else:
            if not isinstance(default, str):
                raise TypeError(f"{type(self).__typename__} default must be a string")
            match appearance:
                case Appearance.OPTIONAL:
                    bounds = 0, 1, False
                case Appearance.OPTIONAL_REPEAT:
                    bounds = 0, Unbounded, False
                case Appearance.MANDATORY | Appearance.MANDATORY_REPEAT | Appearance.OPTIONAL_NO_PARAMETER:
                    raise ContractViolation(f"{names[0]!r} cannot declare a default value with {appearance.name}")
                case _:
                    raise ContractViolation(f"{appearance!r} is not an appearance mode")
            defaults = (default,)

        self._names = names
        self._appearance = appearance
        self._min_appearances, self._max_appearances, self._no_parameter = bounds
        self._default_values = defaults

    @property
    def canonical(self):
        """
        The first declared name; keys the parse result for this option.
        """
        return self._names[0]

    def __setattr__(self, name, value, /):
        # backing fields are written once, from __init__
        if hasattr(self, name):
            raise AttributeError(f"{type(self).__typename__} is read-only")
        object.__setattr__(self, name, value)


__all__ = (
    "Appearance",
    "UnboundedType",
    "Unbounded",
    "Option",
    "looks_like_option_name",
)

# Remove the internal metaclass from the module namespace; not part of the public API.
del OptionType
