import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..parsing.diagnostics import Diagnostic, Severity


@dataclass
class ScanState:
    """
    Everything collected from one tool run or one followed log.
    With ``max_output``/``max_diagnostics`` set, only the most recent text and
    diagnostics are kept and the dropped amounts are counted.
    """
    toolchain: str = ""
    source: str = ""

    # Raw output as received
    output: str = ""
    diagnostics: List[Diagnostic] = field(default_factory=list)
    last_update: float = 0.0

    max_output: Optional[int] = None
    max_diagnostics: Optional[int] = None
    # Stream offset of output[0]
    output_start: int = 0
    dropped_diagnostics: int = 0
    dropped_counts: Dict[Severity, int] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        """Returns True if any diagnostic seen, kept or dropped, is an error or fatal."""
        if self.dropped_counts.get(Severity.ERROR) or self.dropped_counts.get(Severity.FATAL):
            return True
        return any(d.is_error for d in self.diagnostics)

    def counts(self) -> Dict[Severity, int]:
        totals = {severity: 0 for severity in Severity}
        for d in self.diagnostics:
            totals[d.severity] += 1
        for severity, count in self.dropped_counts.items():
            totals[severity] += count
        return totals

    def locations(self) -> List[Diagnostic]:
        """Diagnostics that can be navigated to."""
        return [d for d in self.diagnostics if d.source_file is not None]

    def update(self, chunk: str, diagnostics: List[Diagnostic]):
        self.output += chunk
        if self.max_output is not None and len(self.output) > self.max_output:
            excess = len(self.output) - self.max_output
            self.output = self.output[excess:]
            self.output_start += excess

        self.diagnostics.extend(diagnostics)
        if self.max_diagnostics is not None and len(self.diagnostics) > self.max_diagnostics:
            excess = len(self.diagnostics) - self.max_diagnostics
            for d in self.diagnostics[:excess]:
                self.dropped_counts[d.severity] = self.dropped_counts.get(d.severity, 0) + 1
            del self.diagnostics[:excess]
            self.dropped_diagnostics += excess
        self.last_update = time.time()

    def clear(self):
        self.output = ""
        self.diagnostics = []
        self.output_start = 0
        self.dropped_diagnostics = 0
        self.dropped_counts = {}
        self.last_update = time.time()
