import logging

from .handlers import takesArgument
from .registry import Registry

_logger = logging.getLogger(__name__)


def _splitLong(registry: Registry, arg: str) -> list[str]:
    # '--long-option=option-argument', only for recognised long options
    name, sep, optarg = arg.partition("=")
    if sep and name in registry:
        return [name, optarg]
    return [arg]


def _splitShort(registry: Registry, arg: str) -> list[str]:
    split: list[str] = []
    opt = arg
    while opt:
        head, rest = opt[:2], opt[2:]
        split.append(head)

        optdef = registry.lookup(head)
        if optdef is None:
            # A typo, or not supposed to be an option at all.
            return [arg]

        if takesArgument(optdef.handler):
            # '-xshortargument' => '-x shortargument'
            if rest:
                split.append(rest)
            break

        # '-xyz' => '-x -yz'
        opt = "-" + rest if rest else ""

    return split


def expandArgs(registry: Registry, argv: list[str]) -> list[str]:
    """
    Expand an argument vector so that every option sits in its own element.

    Combined short options are separated and `=` separators are removed from
    `--long-option=optarg`. The first element, the program name, is copied
    as is.

    Args:
        registry: The options to recognise.
        argv: Argument vector, including the program name.

    Returns:
        The expanded argument vector.
    """
    result: list[str] = argv[:1]

    for arg in argv[1:]:
        if arg.startswith("--"):
            result.extend(_splitLong(registry, arg))
        elif arg.startswith("-") and len(arg) > 2:
            result.extend(_splitShort(registry, arg))
        else:
            result.append(arg)

    _logger.debug(f"Expanded {argv[1:]} to {result[1:]}")
    return result
