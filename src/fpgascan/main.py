import sys
import os
import argparse
from typing import List, Optional

from rich.console import Console

from .compiler.toolchains import resolve_table
from .errors import FpgaScanError
from .parsing import available_toolchains, scan
from .parsing.diagnostics import Diagnostic
from .utils.config import ConfigManager
from .utils.detect import detect_toolchain
from .utils.highlighter import diagnostics_table, highlight_output, summary_line
from .utils.log import setup_logging
from .utils.watcher import LogFollower


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(description="fpgascan: FPGA/ASIC tool output diagnostics")
    parser.add_argument("file", nargs="?", help="Log file to scan ('-' reads stdin)")
    parser.add_argument("-t", "--toolchain", help="Pattern table to use (default: detect, then config)")
    parser.add_argument("-f", "--follow", action="store_true", help="Keep watching the log file for new output")
    parser.add_argument("--highlight", action="store_true", help="Print the log with diagnostics highlighted")
    parser.add_argument("--list-toolchains", action="store_true", help="List the available pattern tables")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _pick_toolchain(args, config: ConfigManager, text: Optional[str]) -> str:
    if args.toolchain:
        return args.toolchain
    path = args.file if args.file and args.file != "-" else None
    return detect_toolchain(path, text) or config.get("toolchain", "uvm")


def _report(console: Console, diagnostics: List[Diagnostic], title: str):
    if diagnostics:
        console.print(diagnostics_table(diagnostics, title=title))
    console.print(summary_line(diagnostics))


def _follow(console: Console, args, config: ConfigManager) -> int:
    abs_path = os.path.abspath(args.file)
    toolchain = _pick_toolchain(args, config, None)
    table = resolve_table(toolchain)
    seen: List[Diagnostic] = []

    def on_diagnostics(diagnostics: List[Diagnostic]):
        seen.extend(diagnostics)
        console.print(diagnostics_table(diagnostics))

    console.print(f"Following {abs_path} with the '{table.toolchain}' table (Ctrl+C to stop)")
    follower = LogFollower(abs_path, table, on_diagnostics=on_diagnostics)
    try:
        follower.follow(interval=config.get("follow_interval", 0.5))
    except KeyboardInterrupt:
        pass
    console.print(summary_line(seen))
    return 1 if any(d.is_error for d in seen) else 0


def run(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    console = Console()
    setup_logging(args.verbose)

    if args.list_toolchains:
        for name in available_toolchains():
            console.print(name)
        return 0

    if not args.file:
        print("Error: No log file specified.")
        print("Usage: fpgascan <logfile> [-t TOOLCHAIN]")
        return 2

    config = ConfigManager()

    try:
        if args.follow:
            if args.file == "-":
                print("Error: --follow needs a file, not stdin")
                return 2
            return _follow(console, args, config)

        if args.file == "-":
            text = sys.stdin.read()
        else:
            abs_path = os.path.abspath(args.file)
            if not os.path.exists(abs_path):
                print(f"Error: File not found: {abs_path}")
                return 1
            with open(abs_path, "r", errors="replace") as f:
                text = f.read()

        table = resolve_table(_pick_toolchain(args, config, text))
        diagnostics = scan(table, text)

        if args.highlight:
            console.print(highlight_output(text, diagnostics))
        _report(console, diagnostics, title=f"{args.file} ({table.toolchain})")
        return 1 if any(d.is_error for d in diagnostics) else 0

    except (FpgaScanError, OSError) as e:
        print(f"Error: {e}")
        return 1


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
