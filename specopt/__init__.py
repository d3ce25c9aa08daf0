import importlib
import logging

from . import (
    coercers,
    const,
    handlers,
    vt100,
)
from .errors import OptionError, ParserExit, SpecError
from .parser import OptionParser, Opts

__all__ = [
    "OptionError",
    "OptionParser",
    "Opts",
    "ParserExit",
    "SpecError",
    "coercers",
    "handlers",
    "main",
]

_logger = logging.getLogger(__name__)


def __getattr__(name: str):
    # Load helper submodules, e.g. `specopt.export`, on first access.
    if name.startswith("_"):
        raise AttributeError(name)

    qualified = f"{__name__}.{name}"
    try:
        module = importlib.import_module(qualified)
    except ModuleNotFoundError as e:
        if e.name != qualified:
            raise
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'") from None

    _logger.debug(f"Loaded submodule '{name}' on demand")
    globals()[name] = module
    return module


def main() -> int:
    from . import cli

    try:
        return cli.run(cli.argv())

    except RuntimeError as e:
        logging.exception(e)
        vt100.error(str(e))
        return 1

    except KeyboardInterrupt:
        print()
        return 1
