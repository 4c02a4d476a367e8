import codecs
import logging
import os
import shutil
import subprocess
import threading
from typing import Callable, List, NamedTuple, Optional, Sequence

from ..errors import SessionError, ToolNotFoundError
from ..parsing.diagnostics import Diagnostic
from ..parsing.scanner import StreamScanner, scan
from ..utils.config import ConfigManager
from ..utils.log import append_raw_output
from ..utils.state import ScanState
from .toolchains import TOOLCHAINS, ToolchainConfig

logger = logging.getLogger(__name__)

_READ_SIZE = 4096


class RunResult(NamedTuple):
    output: str
    diagnostics: List[Diagnostic]
    returncode: int


class ToolSession:
    """
    One vendor tool process, interactive (start/send_line/stop) or one-shot (run).
    Output is scanned as it arrives and collected in ``state``.
    """
    def __init__(self, config: ToolchainConfig, config_manager: Optional[ConfigManager] = None,
                 on_diagnostic: Optional[Callable[[Diagnostic], None]] = None):
        self.config = config
        self.settings = config_manager if config_manager else ConfigManager()
        self.on_diagnostic = on_diagnostic
        self.state = ScanState(
            toolchain=config.name,
            max_output=self.settings.get("max_output"),
            max_diagnostics=self.settings.get("max_diagnostics"),
        )
        self.scanner = StreamScanner(config.table)
        self.process: Optional[subprocess.Popen] = None
        self._reader: Optional[threading.Thread] = None
        self._lock = threading.Lock()

        binary = self.settings.binary_for(config.name) or config.binary
        self.set_binary(binary)

    @property
    def name(self) -> str:
        return self.config.name

    def set_binary(self, binary: str):
        """
        Updates the executable used by the session.
        """
        path = shutil.which(binary)
        if not path:
            # Not fatal here: the session can still be configured and listed.
            logger.warning("%s binary '%s' not found on PATH", self.config.name, binary)
        self.binary = binary
        self.binary_path = path

    @staticmethod
    def discover_toolchains() -> List[str]:
        """
        Returns the names of the toolchains whose binary is found on the system.
        """
        return [name for name, config in TOOLCHAINS.items() if shutil.which(config.binary)]

    def command(self, args: Sequence[str] = ()) -> List[str]:
        if not self.binary_path:
            raise ToolNotFoundError(f"{self.config.name}: binary '{self.binary}' not configured or not found")
        return [self.binary_path, *self.config.base_args, *args]

    @property
    def is_running(self) -> bool:
        return self.process is not None and self.process.poll() is None

    # --- Interactive shell ---

    def start(self, args: Sequence[str] = ()):
        if self.is_running:
            raise SessionError(f"{self.config.name} session is already running")

        command = self.command(args)
        logger.info("Starting %s: %s", self.config.name, " ".join(command))
        self.scanner.reset()
        self.state.clear()
        self.state.source = " ".join(command)

        try:
            self.process = subprocess.Popen(
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            raise ToolNotFoundError(f"{self.config.name}: cannot execute '{command[0]}': {e}") from e

        self._reader = threading.Thread(target=self._read_output, name=f"{self.config.name}-reader", daemon=True)
        self._reader.start()

    def _read_output(self):
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        fd = self.process.stdout.fileno()
        while True:
            data = os.read(fd, _READ_SIZE)
            if not data:
                break
            self.handle_output(decoder.decode(data))
        self.handle_output(decoder.decode(b"", final=True))
        self._flush()

    def handle_output(self, chunk: str) -> List[Diagnostic]:
        """Feeds one chunk of tool output through the scanner."""
        if not chunk:
            return []
        with self._lock:
            diagnostics = self.scanner.feed(chunk)
            self.state.update(chunk, diagnostics)
        self._publish(chunk, diagnostics)
        return diagnostics

    def _flush(self) -> List[Diagnostic]:
        with self._lock:
            diagnostics = self.scanner.flush()
            self.state.update("", diagnostics)
        self._publish("", diagnostics)
        return diagnostics

    def _publish(self, chunk: str, diagnostics: List[Diagnostic]):
        # Runs on the reader thread: a failure here must not stop the pipe being drained
        log_file = self.settings.get("log_file")
        try:
            append_raw_output(log_file, chunk)
        except OSError:
            logger.exception("Cannot append %s output to %s", self.config.name, log_file)

        if self.on_diagnostic:
            for d in diagnostics:
                try:
                    self.on_diagnostic(d)
                except Exception:
                    logger.exception("on_diagnostic callback failed for %s at offset %d", d.pattern, d.offset)

    def send_line(self, text: str):
        if not self.is_running:
            raise SessionError(f"{self.config.name} session is not running")
        try:
            self.process.stdin.write((text + "\n").encode("utf-8"))
            self.process.stdin.flush()
        except BrokenPipeError as e:
            raise SessionError(f"{self.config.name} session closed its input") from e

    def end_input(self):
        """Closes the tool's stdin, the same as typing EOF at its prompt."""
        if self.process is None or self.process.stdin.closed:
            return
        self.process.stdin.close()

    def completions(self, prefix: str) -> List[str]:
        return sorted(w for w in self.config.completion_words if w.startswith(prefix))

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """Waits for the tool to exit and for its output to be drained."""
        if self.process is None:
            return None
        returncode = self.process.wait(timeout=timeout)
        if self._reader:
            self._reader.join(timeout)
        return returncode

    def stop(self, timeout: float = 5.0):
        if self.process is None:
            return

        self._close_pipe(self.process.stdin, "stdin")
        if self.process.poll() is None:
            self.process.terminate()
            try:
                self.process.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.warning("%s did not exit after terminate, killing it", self.config.name)
                self.process.kill()
                self.process.wait()

        if self._reader:
            self._reader.join(timeout)
        self._close_pipe(self.process.stdout, "stdout")
        self.process = None
        self._reader = None

    def _close_pipe(self, pipe, label: str):
        if pipe is None or pipe.closed:
            return
        try:
            pipe.close()
        except OSError as e:
            logger.debug("Closing %s %s failed: %s", self.config.name, label, e)

    # --- One-shot ---

    def run(self, args: Sequence[str] = (), cwd: Optional[str] = None) -> RunResult:
        """
        Runs the tool to completion and scans everything it printed.
        Returns: (Output, Diagnostics, Return code)
        """
        command = self.command(args)
        logger.info("Running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                cwd=cwd,
                check=False,
            )
        except OSError as e:
            raise ToolNotFoundError(f"{self.config.name}: cannot execute '{command[0]}': {e}") from e

        output = result.stdout or ""
        diagnostics = scan(self.config.table, output)
        with self._lock:
            self.state.clear()
            self.state.source = " ".join(command)
            self.state.update(output, diagnostics)
        self._publish(output, diagnostics)

        if result.returncode != 0:
            logger.info("%s exited with status %d", self.config.name, result.returncode)
        return RunResult(output, diagnostics, result.returncode)
