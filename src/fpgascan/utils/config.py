import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    # Pattern table used when none is given on the command line
    "toolchain": "uvm",
    # Per-toolchain binary overrides, e.g. {"vivado": "/opt/Xilinx/Vivado/2023.2/bin/vivado"}
    "binaries": {},
    # Raw tool output is appended here when set
    "log_file": None,
    # Seconds between polls when following a log file
    "follow_interval": 0.5,
    # Characters of output and number of diagnostics kept per session; None keeps everything
    "max_output": 1_000_000,
    "max_diagnostics": 10_000,
}


class ConfigManager:
    """
    Loads user settings from ~/.fpgascan/config.json, layered over DEFAULT_CONFIG.
    """
    def __init__(self, config_dir: Path = None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".fpgascan"
        self.config_file = self.config_dir / "config.json"
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config = copy.deepcopy(DEFAULT_CONFIG)

        if not self.config_file.exists():
            return config

        try:
            with open(self.config_file, "r") as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)
            return config

        if isinstance(user_config, dict):
            config.update(user_config)
        else:
            logger.warning("Ignoring config %s: top level is not an object", self.config_file)
        return config

    def save_config(self):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        self.config[key] = value
        self.save_config()

    def binary_for(self, toolchain: str) -> Any:
        """Returns the user's binary override for a toolchain, if any."""
        binaries = self.config.get("binaries") or {}
        return binaries.get(toolchain)
