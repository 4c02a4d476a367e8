import logging
import re
from typing import List, Optional

from .diagnostics import Diagnostic, PatternEntry, PatternTable

logger = logging.getLogger(__name__)


def _group_text(match: re.Match, group: Optional[int]) -> Optional[str]:
    if group is None:
        return None
    return match.group(group)


def _group_int(match: re.Match, group: Optional[int]) -> Optional[int]:
    text = _group_text(match, group)
    if text is None:
        return None
    return int(text, 10)


def _line_from(text: str, start: int) -> str:
    end = text.find("\n", start)
    if end < 0:
        end = len(text)
    return text[start:end].rstrip("\r")


def _build_diagnostic(entry: PatternEntry, match: re.Match, text: str, base_offset: int) -> Diagnostic:
    highlights = []
    for group, style in entry.highlight_groups:
        start, end = match.span(group)
        if start < 0:
            # Optional group that did not take part in this match
            continue
        highlights.append((base_offset + start, base_offset + end, style))

    return Diagnostic(
        severity=entry.severity,
        source_file=_group_text(match, entry.file_group),
        source_line=_group_int(match, entry.line_group),
        source_column=_group_int(match, entry.column_group),
        raw_text=match.group(0),
        offset=base_offset + match.start(),
        pattern=entry.name,
        message=_line_from(text, match.start()),
        highlights=tuple(highlights),
    )


def scan(table: PatternTable, text: str, base_offset: int = 0) -> List[Diagnostic]:
    """
    Scans a chunk of tool output and returns one Diagnostic per match,
    ordered by offset.

    At every cursor position the earliest match wins; on a tie the entry
    that comes first in the table wins. The cursor then moves past the whole
    match. This is the same result as trying every entry at every character,
    but each entry's next match is cached and only recomputed once the
    cursor has moved past its start.
    """
    entries = table.entries
    pending: List[Optional[re.Match]] = [None] * len(entries)
    exhausted = [False] * len(entries)
    diagnostics = []
    pos = 0
    end = len(text)

    while pos <= end:
        best_idx = -1
        best_match = None
        for idx, entry in enumerate(entries):
            if exhausted[idx]:
                continue
            match = pending[idx]
            if match is None or match.start() < pos:
                match = entry.matcher.search(text, pos)
                pending[idx] = match
                if match is None:
                    exhausted[idx] = True
                    continue
            if best_match is None or match.start() < best_match.start():
                best_idx, best_match = idx, match

        if best_match is None:
            break

        entry = entries[best_idx]
        try:
            diagnostics.append(_build_diagnostic(entry, best_match, text, base_offset))
        except ValueError as e:
            logger.warning(
                "Skipping match of '%s' in table '%s' at offset %d: %s",
                entry.name, table.toolchain, base_offset + best_match.start(), e,
            )

        pos = best_match.end() if best_match.end() > best_match.start() else best_match.start() + 1

    return diagnostics


class StreamScanner:
    """
    Incremental front end for scan().

    Process output arrives in chunks that do not respect line boundaries, so
    only complete lines are scanned. The unfinished tail is held back and
    rescanned together with the next chunk, which lets a message split over
    two chunks (``"UVM_ERR"`` + ``"OR top.sv(5): x\\n"``) be found exactly once.
    Offsets in the returned diagnostics are absolute within the whole stream.
    """

    def __init__(self, table: PatternTable):
        self.table = table
        self.reset()

    def reset(self):
        self._pending = ""
        self._pending_offset = 0

    @property
    def pending(self) -> str:
        """Text received but not yet scanned (the incomplete last line)."""
        return self._pending

    @property
    def consumed(self) -> int:
        """Number of characters already scanned."""
        return self._pending_offset

    def feed(self, chunk: str) -> List[Diagnostic]:
        if not chunk:
            return []
        self._pending += chunk
        boundary = self._pending.rfind("\n")
        if boundary < 0:
            return []

        complete = self._pending[:boundary + 1]
        base = self._pending_offset
        self._pending = self._pending[boundary + 1:]
        self._pending_offset += len(complete)
        return scan(self.table, complete, base)

    def flush(self) -> List[Diagnostic]:
        """Scans whatever is left once the stream has ended."""
        if not self._pending:
            return []
        rest, base = self._pending, self._pending_offset
        self._pending_offset += len(rest)
        self._pending = ""
        return scan(self.table, rest, base)
