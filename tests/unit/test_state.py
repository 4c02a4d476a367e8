"""
Tests for the ScanState dataclass.
"""
import pytest
from fpgascan.parsing.diagnostics import Diagnostic, Severity
from fpgascan.utils.state import ScanState


def _diag(severity, source_file=None, line=None):
    return Diagnostic(severity=severity, source_file=source_file, source_line=line,
                      source_column=None, raw_text="", offset=0)


class TestScanStateDefaults:
    def test_default_fields(self):
        state = ScanState()
        assert state.toolchain == ""
        assert state.output == ""
        assert state.diagnostics == []

    def test_has_errors_false_by_default(self):
        assert ScanState().has_errors is False


class TestScanStateErrors:
    def test_has_errors_with_error(self):
        state = ScanState(diagnostics=[_diag(Severity.ERROR)])
        assert state.has_errors is True

    def test_has_errors_with_fatal(self):
        state = ScanState(diagnostics=[_diag(Severity.FATAL)])
        assert state.has_errors is True

    def test_has_errors_with_warning_only(self):
        state = ScanState(diagnostics=[_diag(Severity.WARNING), _diag(Severity.INFO)])
        assert state.has_errors is False

    def test_counts(self):
        state = ScanState(diagnostics=[_diag(Severity.WARNING), _diag(Severity.WARNING), _diag(Severity.INFO)])
        counts = state.counts()
        assert counts[Severity.WARNING] == 2
        assert counts[Severity.INFO] == 1
        assert counts[Severity.ERROR] == 0
        assert counts[Severity.FATAL] == 0


class TestScanStateUpdates:
    def test_update_appends(self):
        state = ScanState()
        state.update("a\n", [_diag(Severity.INFO)])
        state.update("b\n", [_diag(Severity.ERROR)])
        assert state.output == "a\nb\n"
        assert len(state.diagnostics) == 2
        assert state.last_update > 0

    def test_locations(self):
        state = ScanState(diagnostics=[_diag(Severity.ERROR, "top.sv", 1), _diag(Severity.FATAL)])
        assert [d.source_file for d in state.locations()] == ["top.sv"]

    def test_clear(self):
        state = ScanState()
        state.update("x", [_diag(Severity.ERROR)])
        state.clear()
        assert state.output == ""
        assert state.diagnostics == []


class TestScanStateLimits:
    def test_unbounded_by_default(self):
        state = ScanState()
        for _ in range(100):
            state.update("x" * 100, [_diag(Severity.INFO)])
        assert len(state.output) == 10000
        assert len(state.diagnostics) == 100

    def test_output_keeps_tail(self):
        state = ScanState(max_output=5)
        state.update("abc", [])
        state.update("defgh", [])
        assert state.output == "defgh"
        assert state.output_start == 3

    def test_diagnostics_drop_oldest(self):
        state = ScanState(max_diagnostics=2)
        state.update("", [_diag(Severity.ERROR, "a.sv", 1), _diag(Severity.INFO, "b.sv", 2)])
        state.update("", [_diag(Severity.WARNING, "c.sv", 3)])
        assert [d.source_file for d in state.diagnostics] == ["b.sv", "c.sv"]
        assert state.dropped_diagnostics == 1

    def test_dropped_errors_still_counted(self):
        state = ScanState(max_diagnostics=1)
        state.update("", [_diag(Severity.ERROR), _diag(Severity.INFO)])
        assert not any(d.is_error for d in state.diagnostics)
        assert state.has_errors is True
        assert state.counts()[Severity.ERROR] == 1
        assert state.counts()[Severity.INFO] == 1

    def test_clear_resets_drop_counters(self):
        state = ScanState(max_output=1, max_diagnostics=1)
        state.update("abc", [_diag(Severity.FATAL), _diag(Severity.INFO)])
        state.clear()
        assert state.output_start == 0
        assert state.dropped_diagnostics == 0
        assert state.has_errors is False
