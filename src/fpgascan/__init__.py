from .errors import ConfigurationError, FpgaScanError, SessionError, ToolNotFoundError, UnknownToolchainError
from .parsing import (
    Diagnostic,
    PatternEntry,
    PatternTable,
    Severity,
    StreamScanner,
    available_toolchains,
    get_table,
    parse_diagnostics,
    scan,
)

__version__ = "0.1.0"
