import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple, Union

from ..errors import ConfigurationError


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


# Fixed severity -> style tag table. Not configurable per call.
SEVERITY_STYLES = {
    Severity.FATAL: "error",
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "info",
}


def severity_style(severity: Severity) -> str:
    return SEVERITY_STYLES[severity]


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    source_file: Optional[str]
    source_line: Optional[int]
    source_column: Optional[int]
    raw_text: str
    offset: int
    pattern: str = ""
    # Whole line from the start of the match, without the newline
    message: str = ""
    # Absolute (start, end, style_tag) spans resolved from the entry's highlight groups
    highlights: Tuple[Tuple[int, int, str], ...] = ()

    @property
    def has_location(self) -> bool:
        return self.source_file is not None or self.source_line is not None

    @property
    def is_error(self) -> bool:
        return self.severity in (Severity.ERROR, Severity.FATAL)


@dataclass(frozen=True)
class PatternEntry:
    """
    One named diagnostic rule.
    Group fields are capture group indices into ``matcher``; None means the
    rule does not capture that piece of location information.
    """
    name: str
    matcher: Union[str, re.Pattern]
    severity: Severity
    file_group: Optional[int] = None
    line_group: Optional[int] = None
    column_group: Optional[int] = None
    highlight_groups: Tuple[Tuple[int, str], ...] = field(default_factory=tuple)

    def referenced_groups(self) -> Iterator[Tuple[str, int]]:
        for label in ("file_group", "line_group", "column_group"):
            group = getattr(self, label)
            if group is not None:
                yield label, group
        for group, _style in self.highlight_groups:
            yield "highlight_groups", group


class PatternTable:
    """
    Ordered, immutable collection of PatternEntry objects for one toolchain.
    Entries are validated eagerly; a broken entry raises ConfigurationError
    here so nothing is ever discovered at scan time.
    """

    def __init__(self, toolchain: str, entries: Iterable[PatternEntry]):
        self._toolchain = toolchain
        compiled = []
        seen = set()
        for entry in entries:
            if entry.name in seen:
                raise ConfigurationError(toolchain, entry.name, "duplicate pattern name")
            seen.add(entry.name)
            compiled.append(self._validate(toolchain, entry))
        self._entries = tuple(compiled)

    @staticmethod
    def _validate(toolchain: str, entry: PatternEntry) -> PatternEntry:
        if not isinstance(entry.severity, Severity):
            raise ConfigurationError(toolchain, entry.name, f"invalid severity {entry.severity!r}")

        matcher = entry.matcher
        if isinstance(matcher, str):
            try:
                matcher = re.compile(matcher, re.MULTILINE)
            except re.error as e:
                raise ConfigurationError(toolchain, entry.name, f"invalid regex: {e}") from e
            entry = replace(entry, matcher=matcher)

        for label, group in entry.referenced_groups():
            if not isinstance(group, int) or group < 0 or group > matcher.groups:
                raise ConfigurationError(
                    toolchain,
                    entry.name,
                    f"{label} refers to group {group!r} but the matcher defines {matcher.groups} group(s)",
                )
        return entry

    @property
    def toolchain(self) -> str:
        return self._toolchain

    @property
    def entries(self) -> Tuple[PatternEntry, ...]:
        return self._entries

    def names(self) -> Tuple[str, ...]:
        return tuple(e.name for e in self._entries)

    def get(self, name: str) -> Optional[PatternEntry]:
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    def __iter__(self) -> Iterator[PatternEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PatternTable({self._toolchain!r}, {len(self._entries)} entries)"
