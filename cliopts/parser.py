"""
cliopts parser.

Overview
- parse(tokens, options): strict mode. Any token that does not name a declared
  option aborts the parse.
- parse_known(tokens, options): permissive mode. Unrecognized tokens are
  collected, in order, for the caller to interpret.
- verify_option_counts(options, values): minimum/maximum check over a finished
  result (parse(..., verify=True) runs it automatically).
- get_single_option / get_optional_option / get_multi_option / get_flag:
  small accessors over a parse result.

Walk
- tokens are read left to right; each step reads a candidate option name.
- the first option (declaration order) listing the candidate among its names wins.
- flags record one "" per appearance; other options consume the next token.
- after the last token, every optional option absent from the result receives
  a copy of its default values. Mandatory options are never defaulted.

Faults
- every message names the option exactly as typed, not its canonical name.
- errors abort the parse; nothing partial is returned.
- "looks like an option" only means "starts with '-'": a negative number used
  as a parameter is reported as a missing parameter.
"""
import functools
import shlex
import sys
from collections.abc import Iterable
from types import MappingProxyType

from .faults import *
from .options import Option, Unbounded, looks_like_option_name
from .utils import Unset


def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _tokenize(prompt):
    """
    Normalize a prompt into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string, split via shlex.split.
    - Iterable[str]: used verbatim (no trimming; "" is a legitimate parameter).
    """
    if prompt is Unset:
        return sys.argv[1:]
    elif isinstance(prompt, str):
        return shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() tokens must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() tokens must be a string or an iterable of strings")


def _collect(options):
    options = tuple(options)
    for option in options:
        if not isinstance(option, Option):
            raise TypeError("parse() options must be an iterable of Option")
    return options, _owners(options)


@functools.lru_cache(maxsize=32)
def _owners(options):
    """
    map every declared name to the option that owns it.

    cached per option set (options compare by identity), so a shadowed name
    warns once rather than on every parse.
    """
    owners = {}
    for option in options:
        for name in option.names:
            if (owner := owners.setdefault(name, option)) is not option:
                trigger(ShadowedNameWarning(
                    "name %r of option %r is shadowed by option %r" % (name, option.canonical, owner.canonical),
                    title="shadowed option name",
                    code=FaultCode.SHADOWED_NAME,
                    hint="remove %r from one of the two declarations" % name,
                    input=name,
                    option=option,
                    docs=getdoc(FaultCode.SHADOWED_NAME),
                ))
    return MappingProxyType(owners)


def _walk(tokens, options, *, collect):
    """
    run the single parse walk shared by the strict and permissive modes.

    returns (values, unrecognized); unrecognized stays empty unless collect is True.
    """
    options, owners = _collect(options)

    values = {}
    unrecognized = []

    index = 0
    while index < len(tokens):
        # the name as typed on the command line; every message quotes it
        input = tokens[index]
        index += 1

        if (option := owners.get(input)) is None:
            if collect:
                unrecognized.append(input)
                continue
            if looks_like_option_name(input):
                raise UnrecognizedOptionError(
                    "unrecognized option %r" % input,
                    title="unrecognized option",
                    code=FaultCode.UNRECOGNIZED_OPTION,
                    hint="check the spelling of %r at %s position" % (input, _ordinal(index)),
                    input=input,
                    index=index,
                    docs=getdoc(FaultCode.UNRECOGNIZED_OPTION),
                )
            raise UnexpectedValueError(
                "unexpected unnamed value %r (did you forget the option name, "
                "or forget to quote a parameter list?)" % input,
                title="unexpected value",
                code=FaultCode.UNEXPECTED_VALUE,
                hint="put an option name before %r or quote it together with the previous value" % input,
                input=input,
                index=index,
                docs=getdoc(FaultCode.UNEXPECTED_VALUE),
            )

        accumulator = values.setdefault(option.canonical, [])
        if option.max_appearances is not Unbounded and len(accumulator) >= option.max_appearances:
            raise TooManyAppearancesError(
                "option %r appears too many times (i.e. more than %d times)" % (input, option.max_appearances),
                title="too many appearances",
                code=FaultCode.TOO_MANY_APPEARANCES,
                hint="pass %r at most %d times" % (input, option.max_appearances),
                input=input,
                index=index,
                maximum=option.max_appearances,
                option=option,
                docs=getdoc(FaultCode.TOO_MANY_APPEARANCES),
            )

        if option.no_parameter:
            # one empty value per appearance keeps counting uniform with parameterized options
            accumulator.append("")
            continue

        if index == len(tokens):
            raise MissingParameterError(
                "option %r is missing its parameter" % input,
                title="missing parameter",
                code=FaultCode.MISSING_PARAMETER,
                hint="add a value after %r" % input,
                input=input,
                index=index,
                option=option,
                docs=getdoc(FaultCode.MISSING_PARAMETER),
            )

        value = tokens[index]
        index += 1

        if looks_like_option_name(value):
            raise MissingParameterError(
                "option %r is missing its parameter (because %r looks like another option name)" % (input, value),
                title="missing parameter",
                code=FaultCode.MISSING_PARAMETER,
                hint="add a value between %r and %r" % (input, value),
                input=input,
                index=index - 1,
                value=value,
                option=option,
                docs=getdoc(FaultCode.MISSING_PARAMETER),
            )

        accumulator.append(value)

    for option in options:
        if option.min_appearances == 0 and option.canonical not in values:
            values[option.canonical] = list(option.default_values)

    return values, unrecognized


def parse(tokens=Unset, options=(), /, *, verify=False):
    """
    Parse tokens against options in strict mode.

    Parameters
    - tokens: Unset (sys.argv[1:]) | str (shlex-split) | Iterable[str].
    - options: iterable of Option, in priority order.
    - verify: also enforce minimum appearances (see verify_option_counts).

    Returns
    - dict mapping each canonical name to its list of values.

    Raises
    - UnrecognizedOptionError, UnexpectedValueError, TooManyAppearancesError,
      MissingParameterError, and MissingOptionError when verify is True.
    """
    options = tuple(options)
    values, _ = _walk(_tokenize(tokens), options, collect=False)
    if verify:
        verify_option_counts(options, values)
    return values


def parse_known(tokens=Unset, options=(), /, *, verify=False):
    """
    Parse tokens against options in permissive mode.

    Tokens that name no declared option are collected instead of failing; the
    token following an unrecognized one is read as a candidate on its own.
    TooManyAppearancesError and MissingParameterError still abort the parse.

    Returns
    - (values, unrecognized): the result dict and the ordered unrecognized tokens.
    """
    options = tuple(options)
    values, unrecognized = _walk(_tokenize(tokens), options, collect=True)
    if verify:
        verify_option_counts(options, values)
    return values, unrecognized


def verify_option_counts(options, values, /):
    """
    Check every option's value count against its declared bounds.

    Useful when results were merged from several sources, and as the final
    step of parse(..., verify=True).

    Raises
    - MissingOptionError: fewer values than min_appearances (absent counts as zero).
    - TooManyAppearancesError: more values than max_appearances.
    """
    for option in options:
        count = len(values.get(option.canonical, ()))
        if count < option.min_appearances:
            raise MissingOptionError(
                "option %r is mandatory" % option.canonical if count == 0 else
                "option %r appears too few times (i.e. less than %d times)" % (option.canonical, option.min_appearances),
                title="missing option",
                code=FaultCode.MISSING_OPTION,
                hint="pass %r with a value" % option.canonical,
                input=option.canonical,
                minimum=option.min_appearances,
                option=option,
                docs=getdoc(FaultCode.MISSING_OPTION),
            )
        if option.max_appearances is not Unbounded and count > option.max_appearances:
            raise TooManyAppearancesError(
                "option %r appears too many times (i.e. more than %d times)" % (option.canonical, option.max_appearances),
                title="too many appearances",
                code=FaultCode.TOO_MANY_APPEARANCES,
                hint="pass %r at most %d times" % (option.canonical, option.max_appearances),
                input=option.canonical,
                maximum=option.max_appearances,
                option=option,
                docs=getdoc(FaultCode.TOO_MANY_APPEARANCES),
            )


def get_single_option(values, name, /):
    """
    Return the only value recorded for `name`.

    Meant for MANDATORY options and OPTIONAL options with a default; any other
    count means the option was declared with the wrong mode.
    """
    parameters = values[name]
    if len(parameters) != 1:
        raise ContractViolation("option %r holds %d values, expected exactly one" % (name, len(parameters)))
    return parameters[0]


def get_optional_option(values, name, /):
    """
    Return the value recorded for `name`, or None when it never appeared.
    """
    parameters = values[name]
    if len(parameters) > 1:
        raise ContractViolation("option %r holds %d values, expected at most one" % (name, len(parameters)))
    return parameters[0] if parameters else None


def get_multi_option(values, name, /):
    """
    Return a copy of every value recorded for `name`.
    """
    return list(values[name])


def get_flag(values, name, /):
    """
    Return True when the no-parameter option `name` appeared.
    """
    return len(values.get(name, ())) > 0


__all__ = (
    "parse",
    "parse_known",
    "verify_option_counts",
    "get_single_option",
    "get_optional_option",
    "get_multi_option",
    "get_flag",
)
