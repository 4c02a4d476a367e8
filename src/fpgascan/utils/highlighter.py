from typing import Iterable, List

from rich.table import Table
from rich.text import Text

from ..parsing.diagnostics import Diagnostic, Severity, severity_style

# Style tag (from pattern tables) -> Rich style
STYLE_TAGS = {
    "error": "bold red",
    "warning": "yellow",
    "info": "green",
    "msg-code": "magenta",
    "file": "underline cyan",
}


def rich_style(tag: str) -> str:
    return STYLE_TAGS.get(tag, "")


def highlight_output(output: str, diagnostics: Iterable[Diagnostic], base_offset: int = 0) -> Text:
    """
    Apply diagnostic highlighting to raw tool output.

    Args:
        output: The text the diagnostics were scanned from.
        diagnostics: Diagnostics whose offsets refer to ``output``.
        base_offset: Stream offset of the first character of ``output``.

    Returns:
        A Rich Text renderable with every highlight span styled.
    """
    text = Text(output)
    for d in diagnostics:
        for start, end, tag in d.highlights:
            style = rich_style(tag)
            if style:
                text.stylize(style, start - base_offset, end - base_offset)
    return text


def _location(d: Diagnostic) -> str:
    if d.source_file is None and d.source_line is None:
        return "-"
    parts = [d.source_file or "?"]
    if d.source_line is not None:
        parts.append(str(d.source_line))
    if d.source_column is not None:
        parts.append(str(d.source_column))
    return ":".join(parts)


def diagnostics_table(diagnostics: List[Diagnostic], title: str = None) -> Table:
    table = Table(title=title, show_lines=False, header_style="bold")
    table.add_column("Severity", no_wrap=True)
    table.add_column("Location", no_wrap=True)
    table.add_column("Message")

    for d in diagnostics:
        table.add_row(
            Text(d.severity.value.upper(), style=rich_style(severity_style(d.severity))),
            Text(_location(d)),
            Text(d.message or d.raw_text),
        )
    return table


def summary_line(diagnostics: List[Diagnostic]) -> Text:
    counts = {severity: 0 for severity in Severity}
    for d in diagnostics:
        counts[d.severity] += 1

    text = Text()
    for i, severity in enumerate((Severity.FATAL, Severity.ERROR, Severity.WARNING, Severity.INFO)):
        if i:
            text.append(", ")
        text.append(f"{counts[severity]} {severity.value}", style=rich_style(severity_style(severity)))
    return text
