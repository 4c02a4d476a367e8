"""
Toolchain configuration records.

Every vendor tool is described by one ToolchainConfig; sessions are built
from these records instead of per-vendor code.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

from ..errors import UnknownToolchainError
from ..parsing.diagnostics import PatternTable
from ..parsing.tables import combine, get_table


@dataclass(frozen=True)
class ToolchainConfig:
    name: str
    binary: str
    base_args: Tuple[str, ...]
    table: PatternTable
    completion_words: Tuple[str, ...] = ()
    prompt: str = ""


VIVADO_WORDS = (
    "close_design", "close_project", "create_clock", "create_project", "current_design",
    "get_cells", "get_clocks", "get_nets", "get_pins", "get_ports", "launch_runs",
    "link_design", "open_checkpoint", "open_hw_manager", "open_project", "opt_design",
    "place_design", "phys_opt_design", "read_verilog", "read_vhdl", "read_xdc",
    "report_drc", "report_timing", "report_timing_summary", "report_utilization",
    "reset_run", "route_design", "set_property", "start_gui", "stop_gui", "synth_design",
    "wait_on_run", "write_bitstream", "write_checkpoint",
)

QUARTUS_WORDS = (
    "execute_flow", "execute_module", "export_assignments", "get_global_assignment",
    "load_package", "project_close", "project_exists", "project_new", "project_open",
    "set_global_assignment", "set_instance_assignment", "set_location_assignment",
)

DIAMOND_WORDS = (
    "prj_dev", "prj_impl", "prj_project", "prj_run", "prj_src", "prj_strgy", "prj_syn",
)

GOWIN_WORDS = (
    "add_file", "open_project", "rm_file", "run", "saveto", "set_csr", "set_device",
    "set_file_prop", "set_option",
)

YOSYS_WORDS = (
    "abc", "check", "clean", "flatten", "hierarchy", "opt", "opt_clean", "proc",
    "read_liberty", "read_verilog", "show", "stat", "synth", "synth_ecp5", "synth_gowin",
    "synth_ice40", "synth_intel", "synth_xilinx", "techmap", "write_json", "write_verilog",
)

VERILATOR_WORDS = (
    "--binary", "--cc", "--exe", "--lint-only", "--timing", "--top-module", "--trace",
    "-Wall", "-Wno-fatal",
)

XCELIUM_WORDS = (
    "-access", "-coverage", "-define", "-elaborate", "-f", "-gui", "-incdir", "-input",
    "-linedebug", "-seed", "-timescale", "-top", "-uvm", "-uvmhome",
)

QUESTA_WORDS = (
    "add wave", "examine", "force", "log", "noforce", "quit", "restart", "run",
    "run -all", "vcom", "vlib", "vlog", "vmap", "vsim",
)

TOOLCHAINS: Dict[str, ToolchainConfig] = {
    "vivado": ToolchainConfig(
        "vivado", "vivado", ("-mode", "tcl", "-nojournal", "-nolog"),
        get_table("vivado"), VIVADO_WORDS, "Vivado% ",
    ),
    "quartus": ToolchainConfig(
        "quartus", "quartus_sh", ("-s",), get_table("quartus"), QUARTUS_WORDS, "tcl> ",
    ),
    "diamond": ToolchainConfig(
        "diamond", "diamondc", (), get_table("diamond"), DIAMOND_WORDS, "% ",
    ),
    "gowin": ToolchainConfig(
        "gowin", "gw_sh", (), get_table("gowin"), GOWIN_WORDS, "% ",
    ),
    "yosys": ToolchainConfig(
        "yosys", "yosys", ("-Q",), get_table("yosys"), YOSYS_WORDS, "yosys> ",
    ),
    "verilator": ToolchainConfig(
        "verilator", "verilator", ("--lint-only", "-Wall"), get_table("verilator"), VERILATOR_WORDS,
    ),
    # Simulators print testbench reports in the same stream as their own messages
    "xcelium": ToolchainConfig(
        "xcelium", "xrun", ("-q",),
        combine("xcelium", get_table("xcelium"), get_table("uvm")), XCELIUM_WORDS,
    ),
    "questa": ToolchainConfig(
        "questa", "vsim", ("-c",),
        combine("questa", get_table("questa"), get_table("uvm"), get_table("ovm")), QUESTA_WORDS, "VSIM> ",
    ),
}


def get_toolchain(name: str) -> ToolchainConfig:
    try:
        return TOOLCHAINS[name.lower()]
    except KeyError:
        raise UnknownToolchainError(name) from None


def resolve_table(name: str) -> PatternTable:
    """
    Pattern table to scan a toolchain's output with. Tool configs may chain
    several tables; plain dialects such as uvm/ovm map to their own table.
    """
    config = TOOLCHAINS.get(name.lower())
    if config:
        return config.table
    return get_table(name)
