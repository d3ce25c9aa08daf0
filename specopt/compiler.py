import dataclasses as dt
import logging
import re

from typing import Optional

from .errors import SpecError
from .handlers import Kind

_logger = logging.getLogger(__name__)

# --- Scan -------------------------------------------------------------- #


class Scan:
    """
    A simple scanner for reading the aliases at the start of an option line.
    """

    _src: str
    _off: int
    _save: list[int]

    def __init__(self, src: str, off: int = 0):
        """
        Initializes a new `Scan` object.

        Args:
            src: The string to scan.
            off: The starting offset within the string.
        """
        self._src = src
        self._off = off
        self._save = []

    def rest(self) -> str:
        """Returns the unscanned remainder of the string."""
        return self._src[self._off :]

    def save(self) -> None:
        """Saves the current scanner position."""
        self._save.append(self._off)

    def restore(self) -> None:
        """Restores the scanner position to the last saved position."""
        self._off = self._save.pop()

    def skipMatch(self, pattern: re.Pattern) -> Optional[re.Match]:
        """
        Attempts to skip over text matching `pattern` at the current position.

        Args:
            pattern: The compiled pattern to match.

        Returns:
            The match if the text was skipped, None otherwise.
        """
        m = pattern.match(self._src, self._off)
        if m is None:
            return None
        self._off = m.end()
        return m

    def isMatch(self, pattern: re.Pattern) -> bool:
        """
        Checks if the current position matches `pattern` without advancing
        the scanner.
        """
        self.save()
        result = self.skipMatch(pattern) is not None
        self.restore()
        return result


# --- Option lines ------------------------------------------------------ #

# Classification of a single alias, tried in this order. Patterns expect the
# scanned line to end with a whitespace separator.
RULES: list[tuple[re.Pattern, Kind]] = [
    (re.compile(r"--,?\s"), Kind.FINISHED),
    (re.compile(r"-[-\w]+=\[.+\],?\s"), Kind.OPTIONAL),
    (re.compile(r"-[-\w]+=\S+,?\s"), Kind.REQUIRED),
    (re.compile(r"--help,?\s"), Kind.HELP),
    (re.compile(r"--version,?\s"), Kind.VERSION),
]

_ALIAS = re.compile(r"-[-\w?]")
_SHORT = re.compile(r"-([-\w?])(?:=\S+)?,?\s+")
_LONG = re.compile(r"--([-\w]+)(?:=\S+)?,?\s+")

_SPEC = re.compile(
    r"\A(?P<versionText>[^\n]*?(?P<version>\S+)\n.*?)\s*"
    r"^(?P<helpText>[Uu]sage: (?P<program>\S+).*?)\s*\Z",
    re.DOTALL | re.MULTILINE,
)
_OPTION_LINE = re.compile(r"^  [ \t]*(-[^\n]+)", re.MULTILINE)


@dt.dataclass
class OptionGroup:
    """
    The aliases found on one option line, and the handler they share.
    """

    aliases: list[str]
    kind: Kind = Kind.FLAG


@dt.dataclass
class CompiledSpec:
    program: str
    version: str
    versionText: str
    helpText: str
    groups: list[OptionGroup] = dt.field(default_factory=list)


def classify(s: Scan) -> Optional[Kind]:
    """Returns the kind of the alias at the scanner position, if any."""
    for pattern, kind in RULES:
        if s.isMatch(pattern):
            return kind
    return None


def scanOptionLine(line: str) -> OptionGroup:
    """
    Collects the aliases at the start of an option line such as
    `-o, --output=[FILE]  accept an optional argument`.

    Aliases are returned without their leading hyphens, except for the end
    of options marker `--`. Scanning stops at the description.

    Raises:
        SpecError: If two aliases of the line ask for different handlers.
    """
    s = Scan(line + " ")
    group = OptionGroup([])
    found: Optional[Kind] = None

    while s.isMatch(_ALIAS):
        kind = classify(s)
        if kind is not None:
            if found is not None:
                raise SpecError(
                    f"Option line '{line.strip()}' is both {found.value} and {kind.value}"
                )
            found = kind

        m = s.skipMatch(_SHORT) or s.skipMatch(_LONG)
        if m is None:
            _logger.debug(f"Stopped scanning '{line.strip()}' at '{s.rest().strip()}'")
            break

        alias = m.group(1)
        group.aliases.append("--" if alias == "-" else alias)

    if found is not None:
        group.kind = found
    return group


def compile(spec: str) -> CompiledSpec:
    """
    Reads version information, help text and option lines from `spec`.

    `spec` starts with version text, the first line ending with the version
    number, followed by help text from a `Usage: PROGNAME` line to the end.
    Option lines are help text lines starting with two or more spaces and a
    hyphen.

    Raises:
        SpecError: If `spec` does not have this layout.
    """
    m = _SPEC.match(spec)
    if m is None:
        raise SpecError(
            "Option parser spec must match '<version>\\n...Usage: <program>...'"
        )

    result = CompiledSpec(
        program=m.group("program"),
        version=m.group("version"),
        versionText=m.group("versionText").rstrip(),
        helpText=m.group("helpText"),
    )

    for line in _OPTION_LINE.findall(result.helpText):
        group = scanOptionLine(line)
        _logger.debug(f"Compiled {group.aliases} as {group.kind.value}")
        result.groups.append(group)

    return result
