import logging

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .parser import OptionParser

_logger = logging.getLogger(__name__)


BOOLVALS: dict[str, bool] = {
    "false": False,
    "true": True,
    "0": False,
    "1": True,
    "no": False,
    "yes": True,
    "n": False,
    "y": True,
}


def boolean(parser: "OptionParser", opt: str, optarg: Optional[Any] = None) -> bool:
    """
    Map a truthy or falsy option argument onto a boolean.

    Args:
        parser: The parser reporting errors.
        opt: The option being processed (e.g. "--enable-nls").
        optarg: The option argument, "1" when missing.

    Returns:
        True or False according to `BOOLVALS`.
    """
    if optarg is None:
        optarg = "1"

    result = BOOLVALS.get(str(optarg).lower())
    if result is None:
        parser.opterr(f"{optarg}: Not a valid argument to {opt}.")
    return bool(result)


def file(parser: "OptionParser", opt: str, optarg: str) -> str:
    """
    Accept `optarg` only when it names a readable file.

    This opens the file for reading, so it checks read permission rather than
    bare existence.
    """
    try:
        with open(optarg, "r"):
            pass
    except OSError as e:
        _logger.debug(f"{opt}: cannot open '{optarg}': {e}")
        parser.opterr(f"{optarg}: {e.strerror or e}")
    return optarg
