from .driver import RunResult, ToolSession
from .registry import SessionRegistry
from .toolchains import TOOLCHAINS, ToolchainConfig, get_toolchain, resolve_table
