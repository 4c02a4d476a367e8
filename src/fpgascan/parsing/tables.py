"""
Static pattern tables for the supported toolchains.

Every dialect follows the same layout: for each message keyword a
location-bearing rule comes first and a bare fallback (keyword only, so the
severity is still classified when no navigable location exists) comes right
after it. The fallback must never precede the location-bearing rule or it
would mask it.
"""
from typing import Dict, List, Tuple

from ..errors import UnknownToolchainError
from .diagnostics import PatternEntry, PatternTable, Severity, severity_style

# --- SHARED FRAGMENTS ---
FILE = r"[\w./+-]+"
TRANSCRIPT_PREFIX = r"(?:# )?"  # Questa/ModelSim echo simulator output behind "# "

_SEVERITY_WORDS = {
    "FATAL": Severity.FATAL,
    "ERROR": Severity.ERROR,
    "WARNING": Severity.WARNING,
    "INFO": Severity.INFO,
}


# --- TESTBENCH LOGS ---

def _uvm_entries() -> List[PatternEntry]:
    # UVM_ERROR top.sv(10) @ 0: reporter [ID] message
    # UVM_FATAL @ 0: reporter ...   (e.g. $fatal with no reporting macro)
    entries = []
    for word, severity in _SEVERITY_WORDS.items():
        key = f"UVM_{word}"
        entries.append(PatternEntry(
            name=f"uvm-{word.lower()}",
            matcher=rf"^{TRANSCRIPT_PREFIX}({key}) ({FILE})\((\d+)\)",
            severity=severity,
            file_group=2,
            line_group=3,
            highlight_groups=((1, severity_style(severity)), (2, "file")),
        ))
        entries.append(PatternEntry(
            name=f"uvm-{word.lower()}-bare",
            matcher=rf"^{TRANSCRIPT_PREFIX}({key}) @",
            severity=severity,
            highlight_groups=((1, severity_style(severity)),),
        ))
    return entries


def _ovm_entries() -> List[PatternEntry]:
    # OVM_ERROR top.sv(10) @ 150: reporter [ID] message
    # OVM_ERROR @ 150: reporter [ID] message
    # The bare OVM rule keeps the number after "@" as its line group,
    # unlike the bare UVM rule which captures nothing.
    entries = []
    for word, severity in _SEVERITY_WORDS.items():
        key = f"OVM_{word}"
        entries.append(PatternEntry(
            name=f"ovm-{word.lower()}",
            matcher=rf"^{TRANSCRIPT_PREFIX}({key}) ({FILE})\((\d+)\) @ \d+",
            severity=severity,
            file_group=2,
            line_group=3,
            highlight_groups=((1, severity_style(severity)), (2, "file")),
        ))
        entries.append(PatternEntry(
            name=f"ovm-{word.lower()}-bare",
            matcher=rf"^{TRANSCRIPT_PREFIX}({key}) @ (\d+)",
            severity=severity,
            line_group=2,
            highlight_groups=((1, severity_style(severity)),),
        ))
    return entries


# --- VENDOR COMPILERS ---

def _vivado_entries() -> List[PatternEntry]:
    # ERROR: [Synth 8-439] module 'foo' not found [/path/top.sv:12]
    keywords = [
        ("error", "ERROR", Severity.ERROR),
        ("critical", "CRITICAL WARNING", Severity.ERROR),
        ("warning", "WARNING", Severity.WARNING),
        ("info", "INFO", Severity.INFO),
    ]
    entries = []
    for name, word, severity in keywords:
        entries.append(PatternEntry(
            name=f"vivado-{name}",
            matcher=rf"^({word}): (\[[\w ./-]+\]) .*\[([^\[\]\s:]+):(\d+)\]",
            severity=severity,
            file_group=3,
            line_group=4,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code"), (3, "file")),
        ))
        entries.append(PatternEntry(
            name=f"vivado-{name}-bare",
            matcher=rf"^({word}): (\[[\w ./-]+\])?",
            severity=severity,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code")),
        ))
    return entries


def _quartus_entries() -> List[PatternEntry]:
    # Error (10161): Verilog HDL error at top.v(12): object "x" is not declared
    keywords = [
        ("error", "Error", Severity.ERROR),
        ("critical", "Critical Warning", Severity.ERROR),
        ("warning", "Warning", Severity.WARNING),
        ("info", "Info", Severity.INFO),
    ]
    entries = []
    for name, word, severity in keywords:
        entries.append(PatternEntry(
            name=f"quartus-{name}",
            matcher=rf"^[ \t]*({word}) (\(\d+\)): .* at ({FILE})\((\d+)\)",
            severity=severity,
            file_group=3,
            line_group=4,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code"), (3, "file")),
        ))
        entries.append(PatternEntry(
            name=f"quartus-{name}-bare",
            matcher=rf"^[ \t]*({word})( \(\d+\))?:",
            severity=severity,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code")),
        ))
    return entries


def _diamond_entries() -> List[PatternEntry]:
    # ERROR - synthesis: top.v(12): syntax error near 'endmodule'
    keywords = [
        ("error", "ERROR", Severity.ERROR),
        ("warning", "WARNING", Severity.WARNING),
        ("info", "INFO", Severity.INFO),
    ]
    entries = []
    for name, word, severity in keywords:
        entries.append(PatternEntry(
            name=f"diamond-{name}",
            matcher=rf"^({word}) - (?:\w+: )?({FILE})\((\d+)\):",
            severity=severity,
            file_group=2,
            line_group=3,
            highlight_groups=((1, severity_style(severity)), (2, "file")),
        ))
        entries.append(PatternEntry(
            name=f"diamond-{name}-bare",
            matcher=rf"^({word}) - ",
            severity=severity,
            highlight_groups=((1, severity_style(severity)),),
        ))
    return entries


def _gowin_entries() -> List[PatternEntry]:
    # ERROR (EX3863) : Syntax error near token 'endmodule'("/path/top.v":12)
    keywords = [
        ("error", "ERROR", Severity.ERROR),
        ("warning", "WARN", Severity.WARNING),
        ("info", "NOTE", Severity.INFO),
    ]
    entries = []
    for name, word, severity in keywords:
        entries.append(PatternEntry(
            name=f"gowin-{name}",
            matcher=rf'^({word})\s+(\(\w+\)) : .*\("([^"]+)":(\d+)\)',
            severity=severity,
            file_group=3,
            line_group=4,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code"), (3, "file")),
        ))
        entries.append(PatternEntry(
            name=f"gowin-{name}-bare",
            matcher=rf"^({word})\s+(\(\w+\)) :",
            severity=severity,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code")),
        ))
    return entries


def _yosys_entries() -> List[PatternEntry]:
    # top.v:12: ERROR: syntax error, unexpected TOK_ENDMODULE
    # ERROR: Module `foo' referenced in module `top' is not part of the design.
    keywords = [
        ("error", "ERROR", Severity.ERROR),
        ("warning", "Warning", Severity.WARNING),
    ]
    entries = []
    for name, word, severity in keywords:
        entries.append(PatternEntry(
            name=f"yosys-{name}",
            matcher=rf"^({FILE}):(\d+): ({word}):",
            severity=severity,
            file_group=1,
            line_group=2,
            highlight_groups=((1, "file"), (3, severity_style(severity))),
        ))
        entries.append(PatternEntry(
            name=f"yosys-{name}-bare",
            matcher=rf"^({word}):",
            severity=severity,
            highlight_groups=((1, severity_style(severity)),),
        ))
    return entries


def _verilator_entries() -> List[PatternEntry]:
    # %Warning-WIDTH: top.sv:12:5: Operator ASSIGN expects 8 bits
    # %Error: Exiting due to 3 error(s)
    keywords = [
        ("error", "%Error", Severity.ERROR),
        ("warning", "%Warning", Severity.WARNING),
    ]
    entries = []
    for name, word, severity in keywords:
        entries.append(PatternEntry(
            name=f"verilator-{name}",
            matcher=rf"^({word})(-[\w-]+)?: ({FILE}):(\d+):(?:(\d+):)?",
            severity=severity,
            file_group=3,
            line_group=4,
            column_group=5,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code"), (3, "file")),
        ))
        entries.append(PatternEntry(
            name=f"verilator-{name}-bare",
            matcher=rf"^({word})(-[\w-]+)?:",
            severity=severity,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code")),
        ))
    return entries


def _xcelium_entries() -> List[PatternEntry]:
    # xmvlog: *E,UNDIDN (./top.sv,12|5): 'x': undeclared identifier
    # xmsim: *W,RNQUIE: Simulation is complete.
    keywords = [
        ("fatal", "F", Severity.FATAL),
        ("error", "E", Severity.ERROR),
        ("warning", "W", Severity.WARNING),
        ("info", "N", Severity.INFO),
    ]
    entries = []
    for name, letter, severity in keywords:
        entries.append(PatternEntry(
            name=f"xcelium-{name}",
            matcher=rf"^\w+: (\*{letter}),(\w+) \(([^,()\s]+),(\d+)\|(\d+)\):",
            severity=severity,
            file_group=3,
            line_group=4,
            column_group=5,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code"), (3, "file")),
        ))
        entries.append(PatternEntry(
            name=f"xcelium-{name}-bare",
            matcher=rf"^\w+: (\*{letter}),(\w+)",
            severity=severity,
            highlight_groups=((1, severity_style(severity)), (2, "msg-code")),
        ))
    return entries


def _questa_entries() -> List[PatternEntry]:
    # ** Error: top.sv(12): (vlog-2730) Undefined variable: 'x'.
    # ** Error (suppressible): top.sv(12): (vlog-2388) ...
    # # ** Fatal: (vsim-3828) Could not link 'vsim_auto_compile.so'
    keywords = [
        ("fatal", "Fatal", Severity.FATAL),
        ("error", "Error", Severity.ERROR),
        ("warning", "Warning", Severity.WARNING),
        ("info", "Note", Severity.INFO),
    ]
    entries = []
    for name, word, severity in keywords:
        entries.append(PatternEntry(
            name=f"questa-{name}",
            matcher=rf"^{TRANSCRIPT_PREFIX}\*\* ({word})(?: \(suppressible\))?: ({FILE})\((\d+)\):",
            severity=severity,
            file_group=2,
            line_group=3,
            highlight_groups=((1, severity_style(severity)), (2, "file")),
        ))
        entries.append(PatternEntry(
            name=f"questa-{name}-bare",
            matcher=rf"^{TRANSCRIPT_PREFIX}\*\* ({word})(?: \(suppressible\))?:",
            severity=severity,
            highlight_groups=((1, severity_style(severity)),),
        ))
    return entries


_BUILDERS = {
    "uvm": _uvm_entries,
    "ovm": _ovm_entries,
    "vivado": _vivado_entries,
    "quartus": _quartus_entries,
    "diamond": _diamond_entries,
    "gowin": _gowin_entries,
    "yosys": _yosys_entries,
    "verilator": _verilator_entries,
    "xcelium": _xcelium_entries,
    "questa": _questa_entries,
}

# Built once at import so a broken entry fails loudly before any scan runs.
TABLES: Dict[str, PatternTable] = {
    name: PatternTable(name, builder()) for name, builder in _BUILDERS.items()
}


def available_toolchains() -> Tuple[str, ...]:
    return tuple(TABLES.keys())


def get_table(toolchain: str) -> PatternTable:
    """Return the immutable pattern table registered for a toolchain."""
    try:
        return TABLES[toolchain.lower()]
    except KeyError:
        raise UnknownToolchainError(toolchain) from None


def combine(toolchain: str, *tables: PatternTable) -> PatternTable:
    """
    Chain several tables into one, preserving order.
    Useful when a simulator transcript carries both its own messages and
    testbench reports (e.g. questa + uvm).
    """
    entries = [entry for table in tables for entry in table]
    return PatternTable(toolchain, entries)
