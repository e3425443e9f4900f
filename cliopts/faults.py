"""
cliopts faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ParseError and subclasses: recoverable parse failures. Each carries the
  message plus read-only options (title, code, hint, the as-typed input, ...)
  and knows how to render itself with rich.
- ContractViolation: programmer mistakes in option declarations. Derives from
  BaseException so it never lands in an ordinary ``except Exception`` handler.
- OptionWarning / ShadowedNameWarning: non-fatal declaration issues.
- trigger(): central entry point to surface a fault (raise, or print and exit in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parser raises ParseError subclasses directly.
- Applications that want friendly output catch ParseError and call
  trigger(error, shell=True), which prints to stderr and exits with status 2.
"""
import inspect
import os
import sys
import warnings
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
    canonical fault codes (stable identifiers).

    grouping
    - option errors (111xx)
      • UNRECOGNIZED_OPTION, TOO_MANY_APPEARANCES, MISSING_PARAMETER, MISSING_OPTION
    - value errors (1112x)
      • UNEXPECTED_VALUE
    - warnings (12xxx)
      • SHADOWED_NAME
    """
    # --- option errors (11xxx) ---
    UNRECOGNIZED_OPTION  = 11112
    TOO_MANY_APPEARANCES = 11115
    MISSING_PARAMETER    = 11117
    MISSING_OPTION       = 11125

    # --- value errors (11xxx) ---
    UNEXPECTED_VALUE     = 11121

    # --- warnings (12xxx) ---
    SHADOWED_NAME        = 12113

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program():
    return getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) or "cli")


def _render(fault, palette):
    """
    build the rich renderable shared by errors and warnings.

    layout: "[ prog — code | title ]" header, message body, "→ hint" line.
    """
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))
    colorful = fault.options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    code = fault.options.get("code")
    header = Text.assemble(
        "[ ",
        text(_program(), "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "", "code"),
        " | ",
        text(str(fault.options.get("title", "")).title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    parts = [message]
    if hint := fault.options.get("hint"):
        parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fault.options.get("fancy", False):
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


class ParseError(Exception):
    """
    base of every recoverable parse failure.

    attributes
    - message: human-readable text naming the as-typed token(s).
    - options: read-only mapping with title, code, hint, input, index and
      fault-specific context (maximum, value, option, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(2)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnrecognizedOptionError(ParseError): ...
class UnexpectedValueError(ParseError): ...
class TooManyAppearancesError(ParseError): ...
class MissingParameterError(ParseError): ...
class MissingOptionError(ParseError): ...


class ContractViolation(BaseException):
    """
    an option declaration that can never be valid (programming error).

    raised at construction time, never during a parse of user input.
    """


class OptionWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedNameWarning(OptionWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods.
    - options are merged into a copy of the fault before triggering.
    - in shell mode errors are printed to stderr and the process exits;
      otherwise errors are raised and warnings go through the warnings module.

    typical options
    - shell, fancy, colorful, title, code, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; returns None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "UnrecognizedOptionError",
    "UnexpectedValueError",
    "TooManyAppearancesError",
    "MissingParameterError",
    "MissingOptionError",
    "ContractViolation",
    "OptionWarning",
    "ShadowedNameWarning",
    "trigger",
    "getdoc",
)
