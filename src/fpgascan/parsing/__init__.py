from typing import List, Union

from .diagnostics import Diagnostic, PatternEntry, PatternTable, Severity, SEVERITY_STYLES, severity_style
from .scanner import scan, StreamScanner
from .tables import TABLES, available_toolchains, combine, get_table


def parse_diagnostics(output: str, toolchain: Union[str, PatternTable] = "uvm") -> List[Diagnostic]:
    """
    Pipeline: Raw tool output -> Pattern table -> Ordered diagnostics
    """
    table = toolchain if isinstance(toolchain, PatternTable) else get_table(toolchain)
    return scan(table, output)


__all__ = [
    "Diagnostic",
    "PatternEntry",
    "PatternTable",
    "Severity",
    "SEVERITY_STYLES",
    "severity_style",
    "scan",
    "StreamScanner",
    "TABLES",
    "available_toolchains",
    "combine",
    "get_table",
    "parse_diagnostics",
]
