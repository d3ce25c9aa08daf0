import dataclasses as dt
import logging
import re

from typing import Any, Iterator, Optional, Union

from .handlers import Handler, HandlerValue, flag, wrapValue

_logger = logging.getLogger(__name__)


@dt.dataclass
class OptionDef:
    """
    What to do when one spelling of an option is found on the command line.

    Attributes:
        key: Name the option value is stored under in the parse result.
        handler: Function consuming the option and its argument, if any.
        value: Fixed value or transform passed on to `handler`.
    """

    key: str
    handler: Handler
    value: HandlerValue = None


def normalize(spellings: Union[str, list[str]]) -> list[str]:
    """
    Turn option names as given to `on` into command line spellings.

    'x' => '-x', 'option-name' => '--option-name', '-xyz' => '-x -y -z'
    """
    if isinstance(spellings, str):
        spellings = [spellings]

    result: list[str] = []
    for spelling in spellings:
        for opt in spelling.split():
            if len(opt) == 1:
                opt = "-" + opt
            elif not opt.startswith("-"):
                opt = "--" + opt

            if re.match(r"^-[^-]+", opt):
                result.extend("-" + c for c in opt[1:])
            else:
                result.append(opt)
    return result


def deriveKey(opt: str) -> str:
    """Strip leading '-' and convert non-alphanumerics to '_'."""
    return re.sub(r"[^0-9A-Za-z]", "_", opt.lstrip("-"))


class Registry:
    """
    Maps every recognised option spelling to its `OptionDef`.
    """

    _defs: dict[str, OptionDef]

    def __init__(self):
        self._defs = {}

    def on(
        self,
        opts: Union[str, list[str]],
        handler: Optional[Handler] = None,
        value: Any = None,
    ) -> Optional[str]:
        """
        Register `handler` for every spelling in `opts`.

        Spellings already registered, by the help text or an earlier call,
        are replaced. All spellings share one key, derived from the last of
        them.

        Args:
            opts: An option name, or a list of option names.
            handler: Handler to call when any of `opts` is found, `flag` if
                not given.
            value: Fixed value or coercer passed on to `handler`.

        Returns:
            The key the option values will be stored under.
        """
        handler = handler or flag
        assert callable(handler), f"Option handler for {opts} is not callable"

        aliases = normalize(opts)
        if not aliases:
            return None

        key = deriveKey(aliases[-1])
        optdef = OptionDef(key, handler, wrapValue(value))
        for alias in aliases:
            if alias in self._defs:
                _logger.debug(f"Replacing handler for '{alias}'")
            self._defs[alias] = optdef

        _logger.debug(f"Registered {aliases} as '{key}'")
        return key

    def lookup(self, opt: str) -> Optional[OptionDef]:
        return self._defs.get(opt)

    def groups(self) -> Iterator[tuple[str, OptionDef, list[str]]]:
        """Yields `(key, optdef, spellings)` in registration order."""
        seen: dict[int, list[str]] = {}
        order: list[OptionDef] = []
        for spelling, optdef in self._defs.items():
            if id(optdef) not in seen:
                seen[id(optdef)] = []
                order.append(optdef)
            seen[id(optdef)].append(spelling)

        for optdef in order:
            yield optdef.key, optdef, seen[id(optdef)]

    def __contains__(self, opt: object) -> bool:
        return opt in self._defs

    def __getitem__(self, opt: str) -> OptionDef:
        return self._defs[opt]

    def __iter__(self) -> Iterator[str]:
        return iter(self._defs)

    def __len__(self) -> int:
        return len(self._defs)
