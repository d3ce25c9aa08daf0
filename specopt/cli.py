import hashlib
import json
import logging
import os
import sys

from typing import Any, Optional

from . import const, export, logger
from .parser import OptionParser, Opts

_logger = logging.getLogger(__name__)


SPEC = f"""\
{const.ARGV0} {const.VERSION_STR}
{const.DESCRIPTION}.

Usage: {const.ARGV0} [OPTION]... SPECFILE [--] [ARG]...

Compile the option parser described by the help text in SPECFILE, use it
to parse each ARG, and print the parsed options and the unrecognised
arguments as JSON. SPECFILE may be a path, '-' for standard input, or an
http(s) URL.

Options:

  -d, --dump               print the compiled option table of SPECFILE as
                           JSON, then exit
  -g, --graph=[FILE]       render the option table of SPECFILE with
                           graphviz to FILE (default: PROGRAM.gv), then exit
  -o, --output=FILE        write the result to FILE instead of standard output
  -v, --verbose            log debugging information to standard error
      --version            display version information, then exit
      --help               display this help, then exit
  --                       end of {const.ARGV0} options, the rest is parsed
                           with SPECFILE

Environment:

  {const.EXTRA_ARGS_ENV}  extra arguments inserted before the command line
"""


def argv() -> list[str]:
    extra = os.environ.get(const.EXTRA_ARGS_ENV, None)
    return [const.ARGV0] + (extra.split() if extra else []) + sys.argv[1:]


def wget(url: str) -> str:
    import requests

    path = os.path.join(
        const.CACHE_DIR, hashlib.sha256(url.encode("utf-8")).hexdigest()
    )

    if os.path.exists(path):
        _logger.debug(f"Using cached {path} for {url}")
        return path

    _logger.debug(f"Downloading {url} to {path}")

    r = requests.get(url, timeout=30)
    r.raise_for_status()
    os.makedirs(const.CACHE_DIR, exist_ok=True)
    with open(path, "w") as f:
        f.write(r.text)

    return path


def readSpec(source: str) -> str:
    if source == "-":
        return sys.stdin.read()

    if source.startswith(("http://", "https://")):
        source = wget(source)

    try:
        with open(source, "r") as f:
            return f.read()
    except OSError as e:
        raise RuntimeError(f"Could not read spec '{source}': {e.strerror or e}") from e


def result(parser: OptionParser, unrecognised: list[str], opts: Opts) -> dict[str, Any]:
    return {
        "program": parser.program,
        "unrecognised": unrecognised,
        "opts": dict(opts),
    }


def write(text: str, output: Optional[str]):
    if output is None:
        print(text)
        return

    with open(output, "w") as f:
        f.write(text + "\n")


def run(args: list[str]) -> int:
    """
    Run the tool on `args`, the program name first.

    Returns:
        The exit status.

    Raises:
        ParserExit: When either parser ends the program (`--help`,
            `--version`, option errors).
        RuntimeError: When SPECFILE cannot be read or compiled.
    """
    tool = OptionParser(SPEC)
    rest, opts = tool.parse(args)

    logger.setup(opts.get("verbose") is True)

    if len(rest) == 0:
        tool.opterr("missing SPECFILE")

    source, rest = rest[0], rest[1:]
    _logger.info(f"Loading spec from '{source}'")
    parser = OptionParser(readSpec(source))

    output = opts.get("output")
    if isinstance(output, list):
        output = output[-1]

    if opts.get("dump"):
        write(export.table(parser).to_json(indent=2), output)
        return 0

    if "graph" in opts:
        graph = opts["graph"]
        if isinstance(graph, list):
            graph = graph[-1]
        filename = graph if isinstance(graph, str) else f"{parser.program}.gv"
        rendered = export.graph(parser, filename)
        print(rendered)
        return 0

    unrecognised, parsed = parser.parse([parser.program] + rest)
    write(json.dumps(result(parser, unrecognised, parsed), indent=2), output)
    return 0
