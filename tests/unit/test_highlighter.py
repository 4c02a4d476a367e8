"""
Tests for the rich rendering helpers.
"""
import pytest
from rich.console import Console
from rich.table import Table
from rich.text import Text
from fpgascan.parsing import get_table, scan
from fpgascan.utils.highlighter import (
    STYLE_TAGS,
    diagnostics_table,
    highlight_output,
    rich_style,
    summary_line,
)

LOG = "UVM_ERROR top.sv(10): mismatch\nUVM_INFO top.sv(20): done\nUVM_FATAL @ 0: boom\n"


@pytest.fixture
def diagnostics():
    return scan(get_table("uvm"), LOG)


class TestStyleTags:
    def test_known_tags(self):
        assert rich_style("error") == "bold red"
        assert rich_style("warning") == "yellow"
        assert rich_style("info") == "green"

    def test_unknown_tag_is_unstyled(self):
        assert rich_style("nope") == ""

    def test_every_severity_style_is_a_tag(self):
        assert {"error", "warning", "info"} <= set(STYLE_TAGS)


class TestHighlightOutput:
    def test_returns_text(self, diagnostics):
        text = highlight_output(LOG, diagnostics)
        assert isinstance(text, Text)
        assert text.plain == LOG

    def test_keyword_is_styled(self, diagnostics):
        text = highlight_output(LOG, diagnostics)
        spans = {(s.start, s.end, str(s.style)) for s in text.spans}
        assert (0, 9, "bold red") in spans
        assert (10, 16, "underline cyan") in spans

    def test_base_offset(self):
        chunk = "UVM_WARNING a.sv(1) @ 0: x\n"
        diagnostics = scan(get_table("uvm"), chunk, base_offset=500)
        text = highlight_output(chunk, diagnostics, base_offset=500)
        assert (0, 11, "yellow") in {(s.start, s.end, str(s.style)) for s in text.spans}


class TestDiagnosticsTable:
    def test_row_per_diagnostic(self, diagnostics):
        table = diagnostics_table(diagnostics, title="run")
        assert isinstance(table, Table)
        assert table.row_count == 3

    def test_renders(self, diagnostics):
        console = Console(width=120, record=True)
        console.print(diagnostics_table(diagnostics))
        output = console.export_text()
        assert "top.sv:10" in output
        assert "FATAL" in output


class TestSummaryLine:
    def test_counts(self, diagnostics):
        assert summary_line(diagnostics).plain == "1 fatal, 1 error, 0 warning, 1 info"

    def test_empty(self):
        assert summary_line([]).plain == "0 fatal, 0 error, 0 warning, 0 info"
