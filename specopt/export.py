import dataclasses as dt
import logging

from typing import Any, Optional

from dataclasses_json import DataClassJsonMixin

from . import handlers
from .parser import OptionParser

_logger = logging.getLogger(__name__)


@dt.dataclass
class OptionEntry(DataClassJsonMixin):
    key: str
    """Key the option values are stored under."""
    handler: str
    """Name of the handler, e.g. 'flag' or 'required'."""
    spellings: list[str] = dt.field(default_factory=list)
    """Every command line spelling of the option."""
    value: Optional[str] = None
    """Fixed value or coercer registered with the option."""


@dt.dataclass
class OptionTable(DataClassJsonMixin):
    program: str
    version: str
    options: list[OptionEntry] = dt.field(default_factory=list)


def _describeValue(value: handlers.HandlerValue) -> Optional[str]:
    if isinstance(value, handlers.Transform):
        return getattr(value.fn, "__name__", repr(value.fn))
    if isinstance(value, handlers.FixedValue):
        return repr(value.value)
    return None


def table(parser: OptionParser) -> OptionTable:
    """Describe the options recognised by `parser`."""
    result = OptionTable(parser.program, parser.version)
    for key, optdef, spellings in parser.registry.groups():
        result.options.append(
            OptionEntry(
                key,
                handlers.nameOf(optdef.handler),
                spellings,
                _describeValue(optdef.value),
            )
        )
    return result


def graph(parser: OptionParser, filename: str, view: bool = False) -> Any:
    """
    Render the option table of `parser`: spellings point at the key they
    store into, keys point at their handler.
    """
    from graphviz import Digraph  # type: ignore

    g = Digraph(parser.program, filename=filename)

    g.attr("graph", rankdir="LR", ranksep="1.2")
    g.attr("node", shape="plaintext")
    g.attr(
        "graph",
        label=f"<<B>{parser.program}</B> {parser.version}>",
        labelloc="t",
    )

    # Node names stay free of ':', which graphviz reads as a port.
    for n, entry in enumerate(table(parser).options):
        keyNode = f"key{n}"
        handlerNode = f"handler_{entry.handler}"

        g.node(keyNode, f"<<B>{entry.key or '(none)'}</B>>", shape="box")
        g.node(handlerNode, entry.handler, style="filled", fillcolor="lightblue")

        for m, spelling in enumerate(entry.spellings):
            g.node(f"opt{n}_{m}", spelling)
            g.edge(f"opt{n}_{m}", keyNode)

        if entry.value is not None:
            g.edge(keyNode, handlerNode, label=entry.value)
        else:
            g.edge(keyNode, handlerNode)

    _logger.info(f"Rendering option graph to '{filename}'")
    return g.render(filename=filename, view=view)
