"""
Toolchain detection: guesses which pattern table fits a log from its file
name, falling back to signatures in the first lines of its contents.
"""
import re
from pathlib import Path
from typing import Optional

# Substrings of the log file name that identify a toolchain
_NAME_HINTS = [
    ("vivado", "vivado"),
    ("runme", "vivado"),
    ("quartus", "quartus"),
    ("diamond", "diamond"),
    ("synthesis.log", "diamond"),
    ("gowin", "gowin"),
    ("yosys", "yosys"),
    ("verilator", "verilator"),
    ("xrun", "xcelium"),
    ("xmsim", "xcelium"),
    ("transcript", "questa"),
    ("vsim", "questa"),
]

# Header or message signatures, checked in order
_CONTENT_SIGNATURES = [
    (re.compile(r"^#.*Vivado v\d+\.\d+", re.MULTILINE), "vivado"),
    (re.compile(r"^(?:Info|Error|Warning) \(\d+\): .*Quartus", re.MULTILINE), "quartus"),
    (re.compile(r"Lattice Diamond|^(?:ERROR|WARNING|INFO) - synthesis:", re.MULTILINE), "diamond"),
    (re.compile(r"GowinSynthesis|^(?:ERROR|WARN|NOTE)\s+\(\w+\) :", re.MULTILINE), "gowin"),
    (re.compile(r"Yosys \d+\.\d+|^-- Running command", re.MULTILINE), "yosys"),
    (re.compile(r"^%(?:Error|Warning)", re.MULTILINE), "verilator"),
    (re.compile(r"^xm\w+: \*[EFWN],", re.MULTILINE), "xcelium"),
    (re.compile(r"^(?:# )?\*\* (?:Error|Warning|Fatal|Note)", re.MULTILINE), "questa"),
    (re.compile(r"^(?:# )?OVM_(?:INFO|WARNING|ERROR|FATAL)", re.MULTILINE), "ovm"),
    (re.compile(r"^(?:# )?UVM_(?:INFO|WARNING|ERROR|FATAL)", re.MULTILINE), "uvm"),
]

# Only the head of a log is inspected
_SNIFF_CHARS = 64 * 1024


def detect_from_name(file_path: str) -> Optional[str]:
    name = Path(file_path).name.lower()
    for hint, toolchain in _NAME_HINTS:
        if hint in name:
            return toolchain
    return None


def detect_from_text(text: str) -> Optional[str]:
    head = text[:_SNIFF_CHARS]
    for signature, toolchain in _CONTENT_SIGNATURES:
        if signature.search(head):
            return toolchain
    return None


def detect_toolchain(file_path: str = None, text: str = None) -> Optional[str]:
    """Detect the toolchain of a log. Returns None when nothing matches."""
    if file_path:
        found = detect_from_name(file_path)
        if found:
            return found
    if text:
        return detect_from_text(text)
    return None
