import logging
import sys

from typing import Any, Mapping, NoReturn, Optional, Union

from . import coercers, compiler, handlers
from .errors import OptionError
from .expander import expandArgs
from .registry import Registry

_logger = logging.getLogger(__name__)


_UNSET = object()


def _optionValue(opts: "Opts", name: str) -> Any:
    # Plain operators only: attribute access on `opts` would recurse.
    if name in opts:
        return opts[name]

    parser = object.__getattribute__(opts, "_parser")
    optdef = parser.registry.lookup(("-" if len(name) == 1 else "--") + name)
    if optdef is not None and optdef.key in opts:
        return opts[optdef.key]

    return _UNSET


class Opts(dict[str, Any]):
    """
    Parsed option values, keyed by option key.

    Attribute access reads an option key first, then any spelling of an
    option, then the parser: `opts.dryrun` finds the value stored for
    `-n, --dryrun, --dry-run` and `opts.program` finds the parser's program
    name. Option values win over `dict` methods, so `opts.update` is the
    value of `--update` when one was parsed.
    """

    def __init__(self, parser: "OptionParser", values: Optional[Mapping[str, Any]] = None):
        super().__init__(values or {})
        self._parser = parser

    def __getattribute__(self, name: str) -> Any:
        if not name.startswith("_"):
            value = _optionValue(self, name)
            if value is not _UNSET:
                return value
        return super().__getattribute__(name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._parser, name)


def merge(defaults: Mapping[str, Any], opts: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge `defaults` into `opts`. Options that are unset, `None` or `False`
    take the default value.
    """
    result = dict(opts)
    for key, value in defaults.items():
        current = result.get(key)
        if current is None or current is False:
            result[key] = value
    return result


class OptionParser:
    """
    A parser for the options described by a help text.

    The help text starts with version information and continues from a
    `Usage:` line to the end, options being the lines that start with two
    or more spaces and a hyphen:

        parser = OptionParser(inspect.cleandoc('''
        prog 1.0
        Copyright (C) 2024 Someone

        Usage: prog [OPTION]... [FILE]...

        Options:

          -v, --verbose            a combined short and long option
          -n, --dryrun, --dry-run  several spellings of the same option
          -u, --name=USER          require an argument
          -o, --output=[FILE]      accept an optional argument
              --version            display version information, then exit
              --help               display this help, then exit
        '''))

        args, opts = parser.parse()

    Instances can be reused for sequential calls to `parse`, which keeps its
    state in `unrecognised` and `opts`; they must not be shared by
    concurrent calls.
    """

    program: str
    version: str
    versionText: str
    helpText: str
    registry: Registry
    unrecognised: list[str]
    opts: dict[str, Any]

    boolean = staticmethod(coercers.boolean)
    file = staticmethod(coercers.file)

    finished = staticmethod(handlers.finished)
    flag = staticmethod(handlers.flag)
    help = staticmethod(handlers.help)
    optional = staticmethod(handlers.optional)
    required = staticmethod(handlers.required)

    def __init__(self, spec: str):
        compiled = compiler.compile(spec)

        self.program = compiled.program
        self.version = compiled.version
        self.versionText = compiled.versionText
        self.helpText = compiled.helpText
        self.registry = Registry()
        self.unrecognised = []
        self.opts = {}

        for group in compiled.groups:
            self.registry.on(group.aliases, group.kind.handler)

        _logger.info(
            f"Compiled option parser for '{self.program}' with {len(self.registry)} options"
        )

    def on(
        self,
        opts: Union[str, list[str]],
        handler: Optional[handlers.Handler] = None,
        value: Any = None,
    ) -> Optional[str]:
        """
        Add an option handler, replacing the one derived from the help text
        for any spelling that was already there.

            parser.on("--enable-nls", parser.optional, parser.boolean)
            parser.on(["-e", "--eval"], parser.required)
            parser.on("--", parser.finished)

        Handlers only ever see expanded arguments: `-xyz` and `--long=ARG`
        are split before any handler runs.
        """
        return self.registry.on(opts, handler, value)

    def opterr(self, msg: str) -> NoReturn:
        """
        Report an option error on standard error and exit with status 2.

        Use this from custom handlers and coercers for consistency with the
        built-in error messages.
        """
        if not msg.endswith("."):
            msg += "."

        _logger.info(f"Option error: {msg}")
        print(f"{self.program}: error: {msg}", file=sys.stderr)
        print(f"{self.program}: Try '{self.program} --help' for help.", file=sys.stderr)
        raise OptionError(msg)

    def parse(
        self,
        argv: Optional[list[str]] = None,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> tuple[list[str], Opts]:
        """
        Parse an argument vector.

        Args:
            argv: Argument vector with the program name first, `sys.argv`
                if not given.
            defaults: Values for options not given on the command line.

        Returns:
            The unrecognised arguments, in order, and the parsed options.

        Raises:
            ParserExit: When an option asks for the program to end, e.g.
                `--help`, or when an option is used incorrectly.
        """
        if argv is None:
            argv = sys.argv

        self.unrecognised, self.opts = [], {}
        arglist = expandArgs(self.registry, list(argv))

        i = 1
        while 0 < i < len(arglist):
            opt = arglist[i]
            optdef = self.registry.lookup(opt)

            if optdef is None or not opt.startswith("-"):
                self.unrecognised.append(opt)
                i += 1

                # Following non-'-' prefixed argument is an optarg.
                if i < len(arglist) and not arglist[i].startswith("-"):
                    self.unrecognised.append(arglist[i])
                    i += 1
            else:
                assert callable(optdef.handler)
                _logger.debug(f"Running {handlers.nameOf(optdef.handler)} for '{opt}'")
                i = optdef.handler(self, arglist, i, optdef.value)

        self.opts = Opts(self, merge(defaults or {}, self.opts))
        return self.unrecognised, self.opts
