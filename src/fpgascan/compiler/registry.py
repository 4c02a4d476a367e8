import logging
from typing import Dict, List, Optional

from ..errors import SessionError
from ..utils.config import ConfigManager
from .driver import ToolSession
from .toolchains import get_toolchain

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Holds at most one live session per toolchain, with explicit
    create / replace / teardown instead of implicit singletons.
    """
    def __init__(self, config_manager: Optional[ConfigManager] = None, session_factory=ToolSession):
        self.settings = config_manager
        self.session_factory = session_factory
        self._sessions: Dict[str, ToolSession] = {}

    def _build(self, toolchain: str, start: bool, **kwargs) -> ToolSession:
        config = get_toolchain(toolchain)
        session = self.session_factory(config, self.settings, **kwargs)
        if start:
            session.start()
        return session

    def create(self, toolchain: str, start: bool = True, **kwargs) -> ToolSession:
        key = toolchain.lower()
        if key in self._sessions:
            raise SessionError(f"A {key} session already exists; use replace() to restart it")
        session = self._build(key, start, **kwargs)
        self._sessions[key] = session
        return session

    def replace(self, toolchain: str, start: bool = True, **kwargs) -> ToolSession:
        key = toolchain.lower()
        self.teardown(key)
        return self.create(key, start, **kwargs)

    def get(self, toolchain: str) -> Optional[ToolSession]:
        return self._sessions.get(toolchain.lower())

    def teardown(self, toolchain: str) -> bool:
        session = self._sessions.pop(toolchain.lower(), None)
        if session is None:
            return False
        logger.info("Tearing down %s session", session.name)
        session.stop()
        return True

    def teardown_all(self):
        for name in list(self._sessions):
            self.teardown(name)

    def names(self) -> List[str]:
        return list(self._sessions)

    def __contains__(self, toolchain: str) -> bool:
        return toolchain.lower() in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
