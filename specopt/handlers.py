from enum import Enum
import dataclasses as dt
import logging
import typing as tp

from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from .errors import ParserExit

if TYPE_CHECKING:
    from .parser import OptionParser

_logger = logging.getLogger(__name__)

# --- Handler values ---------------------------------------------------- #


@dt.dataclass(frozen=True)
class FixedValue:
    """
    A value stored in place of whatever the command line supplied.
    """

    value: Any


@dt.dataclass(frozen=True)
class Transform:
    """
    A coercer called as `fn(parser, opt, optarg)` whose result is stored.
    """

    fn: Callable[..., Any]

    def __call__(self, parser: "OptionParser", opt: str, optarg: Any) -> Any:
        return self.fn(parser, opt, optarg)


HandlerValue = Optional[Union[FixedValue, Transform]]
Handler = Callable[["OptionParser", list[str], int, HandlerValue], int]


def wrapValue(value: Any) -> HandlerValue:
    """Tag the extra argument given to `on` as a fixed value or a transform."""
    if value is None or isinstance(value, (FixedValue, Transform)):
        return value
    if callable(value):
        return Transform(value)
    return FixedValue(value)


# --- Storage ----------------------------------------------------------- #


def store(parser: "OptionParser", opt: str, value: Any):
    """
    Store `value` under the key of `opt`, collecting repeated occurrences
    into a list.
    """
    key = parser.registry[opt].key
    current = parser.opts.get(key)

    if isinstance(current, list):
        current.append(value)
    elif current is not None:
        parser.opts[key] = [current, value]
    else:
        parser.opts[key] = value

    _logger.debug(f"Stored {opt} as {key}={parser.opts[key]!r}")


# --- Handlers ---------------------------------------------------------- #


def optional(
    parser: "OptionParser", arglist: list[str], i: int, value: HandlerValue = None
) -> int:
    """
    Option at `arglist[i]` can take an argument.

    The argument is accepted only if the following entry exists and does not
    begin with a '-'. Otherwise the stored value is `True`, the fixed value,
    or the transform applied to `None`.

    Args:
        parser: The parser being run.
        arglist: The expanded argument list.
        i: Index of the option being processed.
        value: Fixed value or transform registered with the option.

    Returns:
        Index of the next element of `arglist` to process.
    """
    if i + 1 < len(arglist) and not arglist[i + 1].startswith("-"):
        return required(parser, arglist, i, value)

    opt = arglist[i]
    if isinstance(value, Transform):
        result = value(parser, opt, None)
    elif isinstance(value, FixedValue):
        result = value.value
    else:
        result = True

    store(parser, opt, result)
    return i + 1


def required(
    parser: "OptionParser", arglist: list[str], i: int, value: HandlerValue = None
) -> int:
    """
    Option at `arglist[i]` requires an argument.

    The stored value is the argument itself, the transform applied to it, or
    a fixed value replacing it. Repeated occurrences are collected into a
    list in the order they were given:

        $ prog -e '(foo bar)' -e '(foo baz)'
        => opts["eval"] == ["(foo bar)", "(foo baz)"]

    Args:
        parser: The parser being run.
        arglist: The expanded argument list.
        i: Index of the option being processed.
        value: Fixed value or transform registered with the option.

    Returns:
        Index of the next element of `arglist` to process.
    """
    opt = arglist[i]
    if i + 1 >= len(arglist):
        parser.opterr(f"option '{opt}' requires an argument")
        return i + 1

    optarg = arglist[i + 1]
    if isinstance(value, Transform):
        result = value(parser, opt, optarg)
    elif isinstance(value, FixedValue):
        result = value.value
    else:
        result = optarg

    store(parser, opt, result)
    return i + 2


def finished(
    parser: "OptionParser", arglist: list[str], i: int, value: HandlerValue = None
) -> int:
    """
    Stop option processing: everything after `arglist[i]` is left
    unrecognised, even when it looks like an option.
    """
    parser.unrecognised.extend(arglist[i + 1 :])
    return len(arglist)


def flag(
    parser: "OptionParser", arglist: list[str], i: int, value: HandlerValue = None
) -> int:
    """
    Option at `arglist[i]` is a boolean switch.

    Unlike `required`, repeated occurrences are only collected into a list
    when a transform is registered; otherwise the option is simply `True`.
    """
    opt = arglist[i]
    if isinstance(value, Transform):
        store(parser, opt, value(parser, opt, True))
    else:
        key = parser.registry[opt].key
        parser.opts[key] = value.value if isinstance(value, FixedValue) else True

    return i + 1


def help(
    parser: "OptionParser", arglist: list[str], i: int, value: HandlerValue = None
) -> int:
    """Print the help text, then exit."""
    print(parser.helpText)
    raise ParserExit(0)


def version(
    parser: "OptionParser", arglist: list[str], i: int, value: HandlerValue = None
) -> int:
    """Print the version text, then exit."""
    print(parser.versionText)
    raise ParserExit(0)


# --- Kinds ------------------------------------------------------------- #


class Kind(Enum):
    """
    The handler an option line of the help text gets compiled to.
    """

    FLAG = "flag"
    OPTIONAL = "optional"
    REQUIRED = "required"
    FINISHED = "finished"
    HELP = "help"
    VERSION = "version"

    @property
    def handler(self) -> Handler:
        return HANDLERS[self]


HANDLERS: dict[Kind, Handler] = {
    Kind.FLAG: flag,
    Kind.OPTIONAL: optional,
    Kind.REQUIRED: required,
    Kind.FINISHED: finished,
    Kind.HELP: help,
    Kind.VERSION: version,
}


def takesArgument(handler: Callable) -> bool:
    return handler is optional or handler is required


def nameOf(handler: Callable) -> str:
    for kind, builtin in HANDLERS.items():
        if handler is builtin:
            return kind.value
    return tp.cast(str, getattr(handler, "__name__", repr(handler)))
