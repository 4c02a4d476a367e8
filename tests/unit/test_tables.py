"""
Unit tests for the built-in pattern tables.
One realistic message per vendor format, plus the bare fallbacks.
"""
import pytest
from fpgascan.errors import UnknownToolchainError
from fpgascan.parsing import available_toolchains, combine, get_table, parse_diagnostics, scan
from fpgascan.parsing.diagnostics import Severity


class TestTableRegistry:
    """Test table lookup."""

    def test_known_toolchains(self):
        names = available_toolchains()
        for name in ("uvm", "ovm", "vivado", "quartus", "diamond", "gowin",
                     "yosys", "verilator", "xcelium", "questa"):
            assert name in names

    def test_lookup_is_case_insensitive(self):
        assert get_table("UVM") is get_table("uvm")

    def test_unknown_toolchain(self):
        with pytest.raises(UnknownToolchainError):
            get_table("notatool")

    def test_unknown_toolchain_is_a_key_error(self):
        with pytest.raises(KeyError):
            get_table("notatool")

    @pytest.mark.parametrize("name", ["uvm", "ovm", "vivado", "quartus", "diamond", "gowin",
                                      "yosys", "verilator", "xcelium", "questa"])
    def test_location_variant_precedes_bare(self, name):
        names = get_table(name).names()
        for idx, entry in enumerate(names):
            if entry.endswith("-bare"):
                assert names.index(entry[:-len("-bare")]) < idx

    def test_combine_keeps_order(self):
        table = combine("questa+uvm", get_table("questa"), get_table("uvm"))
        assert table.names()[0] == get_table("questa").names()[0]
        assert table.names()[-1] == get_table("uvm").names()[-1]
        assert len(table) == len(get_table("questa")) + len(get_table("uvm"))


class TestOvmDialect:
    """OVM bare rules keep the number after '@', unlike UVM."""

    def test_bare_captures_number(self):
        result = parse_diagnostics("OVM_ERROR @ 150: reporter [CHK] bad data\n", "ovm")
        assert len(result) == 1
        assert result[0].severity == Severity.ERROR
        assert result[0].source_file is None
        assert result[0].source_line == 150

    def test_location_variant(self):
        result = parse_diagnostics("OVM_WARNING top.sv(33) @ 100: reporter slow\n", "ovm")
        assert result[0].severity == Severity.WARNING
        assert result[0].source_file == "top.sv"
        assert result[0].source_line == 33

    def test_uvm_bare_captures_nothing(self):
        result = parse_diagnostics("UVM_ERROR @ 150: reporter [CHK] bad data\n", "uvm")
        assert result[0].source_line is None

    def test_uvm_text_not_matched_by_ovm(self):
        assert parse_diagnostics("UVM_ERROR top.sv(1) @ 0: x\n", "ovm") == []


class TestVivado:
    def test_error_with_file(self):
        result = parse_diagnostics("ERROR: [Synth 8-439] module 'foo' not found [/home/u/top.sv:12]\n", "vivado")
        assert result[0].severity == Severity.ERROR
        assert result[0].source_file == "/home/u/top.sv"
        assert result[0].source_line == 12
        assert result[0].pattern == "vivado-error"

    def test_error_bare(self):
        result = parse_diagnostics("ERROR: [Common 17-69] Command failed: Synthesis failed\n", "vivado")
        assert result[0].pattern == "vivado-error-bare"
        assert result[0].source_file is None

    def test_critical_warning_is_error(self):
        text = "CRITICAL WARNING: [Constraints 18-619] A clock with name 'clk' already exists [/p/top.xdc:3]\n"
        result = parse_diagnostics(text, "vivado")
        assert len(result) == 1
        assert result[0].severity == Severity.ERROR
        assert result[0].source_line == 3

    def test_info(self):
        result = parse_diagnostics("INFO: [Synth 8-6157] synthesizing module 'top' [/p/top.sv:1]\n", "vivado")
        assert result[0].severity == Severity.INFO
        assert result[0].highlights[1][2] == "msg-code"


class TestQuartus:
    def test_error_with_file(self):
        text = 'Error (10161): Verilog HDL error at top.v(12): object "x" is not declared\n'
        result = parse_diagnostics(text, "quartus")
        assert result[0].severity == Severity.ERROR
        assert result[0].source_file == "top.v"
        assert result[0].source_line == 12

    def test_info_bare(self):
        result = parse_diagnostics("Info (12021): Found 1 design units, including 1 entities\n", "quartus")
        assert result[0].severity == Severity.INFO
        assert result[0].source_file is None

    def test_critical_warning(self):
        result = parse_diagnostics("Critical Warning (332012): Synopsys Design Constraints File file not found\n", "quartus")
        assert len(result) == 1
        assert result[0].pattern == "quartus-critical-bare"


class TestDiamond:
    def test_error_with_file(self):
        result = parse_diagnostics("ERROR - synthesis: top.v(12): syntax error near 'endmodule'.\n", "diamond")
        assert result[0].source_file == "top.v"
        assert result[0].source_line == 12

    def test_warning_bare(self):
        result = parse_diagnostics("WARNING - Unused ports found\n", "diamond")
        assert result[0].severity == Severity.WARNING


class TestGowin:
    def test_error_with_file(self):
        text = "ERROR (EX3863) : Syntax error near token 'endmodule'(\"/p/top.v\":12)\n"
        result = parse_diagnostics(text, "gowin")
        assert result[0].source_file == "/p/top.v"
        assert result[0].source_line == 12

    def test_warn_bare(self):
        result = parse_diagnostics('WARN  (EX3073) : Port "x" remains unconnected\n', "gowin")
        assert result[0].severity == Severity.WARNING
        assert result[0].source_file is None


class TestYosys:
    def test_error_with_file(self):
        result = parse_diagnostics("top.v:12: ERROR: syntax error, unexpected TOK_ENDMODULE\n", "yosys")
        assert result[0].severity == Severity.ERROR
        assert result[0].source_file == "top.v"
        assert result[0].source_line == 12

    def test_error_bare(self):
        result = parse_diagnostics("ERROR: Module `foo' referenced in module `top' is not part of the design.\n", "yosys")
        assert result[0].pattern == "yosys-error-bare"


class TestVerilator:
    def test_warning_with_column(self):
        result = parse_diagnostics("%Warning-WIDTH: top.sv:12:5: Operator ASSIGN expects 8 bits\n", "verilator")
        assert result[0].severity == Severity.WARNING
        assert result[0].source_file == "top.sv"
        assert result[0].source_line == 12
        assert result[0].source_column == 5

    def test_exiting_is_bare(self):
        result = parse_diagnostics("%Error: Exiting due to 2 error(s)\n", "verilator")
        assert result[0].pattern == "verilator-error-bare"


class TestXcelium:
    def test_error_with_column(self):
        result = parse_diagnostics("xmvlog: *E,UNDIDN (./top.sv,12|5): 'x': undeclared identifier\n", "xcelium")
        assert result[0].severity == Severity.ERROR
        assert result[0].source_file == "./top.sv"
        assert result[0].source_line == 12
        assert result[0].source_column == 5

    def test_warning_bare(self):
        result = parse_diagnostics("xmsim: *W,RNQUIE: Simulation is complete.\n", "xcelium")
        assert result[0].severity == Severity.WARNING


class TestQuesta:
    def test_error_with_file(self):
        result = parse_diagnostics("** Error: top.sv(12): (vlog-2730) Undefined variable: 'x'.\n", "questa")
        assert result[0].source_file == "top.sv"
        assert result[0].source_line == 12

    def test_suppressible(self):
        result = parse_diagnostics("** Error (suppressible): top.sv(8): (vlog-2388) 'x' already declared\n", "questa")
        assert result[0].source_line == 8

    def test_fatal_in_transcript(self):
        result = parse_diagnostics("# ** Fatal: (vsim-3828) Could not link 'vsim_auto_compile.so'\n", "questa")
        assert result[0].severity == Severity.FATAL
        assert result[0].source_file is None


class TestParseDiagnostics:
    def test_accepts_a_table(self):
        table = get_table("uvm")
        assert parse_diagnostics("UVM_FATAL @ 0: x\n", table) == scan(table, "UVM_FATAL @ 0: x\n")
