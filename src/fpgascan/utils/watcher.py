import codecs
import logging
import os
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from ..parsing.diagnostics import Diagnostic, PatternTable
from ..parsing.scanner import StreamScanner

logger = logging.getLogger(__name__)

# Leading bytes remembered to notice a log rewritten in place
_HEAD_SIZE = 256


class LogUpdateHandler(FileSystemEventHandler):
    """
    Listens for changes to a specific log file and triggers a callback.
    """
    def __init__(self, target_file: str, callback: Callable[[], None]):
        self.target_file = str(Path(target_file).resolve())
        self.callback = callback

    def _matches(self, event) -> bool:
        if event.is_directory:
            return False
        return str(Path(event.src_path).resolve()) == self.target_file

    def on_modified(self, event):
        if self._matches(event):
            self.callback()

    def on_created(self, event):
        if self._matches(event):
            self.callback()


class LogFollower:
    """
    Follows a growing log file (e.g. a simulation transcript) and scans the
    newly appended text as it lands on disk.
    """
    def __init__(self, log_path: str, table: PatternTable,
                 on_diagnostics: Optional[Callable[[List[Diagnostic]], None]] = None):
        self.log_path = Path(log_path).resolve()
        self.scanner = StreamScanner(table)
        self.on_diagnostics = on_diagnostics
        self.observer = None
        self._position = 0
        self._head = b""
        self._inode = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._lock = threading.Lock()

    def poll(self) -> List[Diagnostic]:
        """
        Reads whatever was appended since the last call and returns the
        diagnostics it completed. Safe to call from the watchdog thread.
        A missing file reads as nothing new.
        """
        with self._lock:
            try:
                with open(self.log_path, "rb") as f:
                    st = os.fstat(f.fileno())
                    if self._rewritten(st, f.read(len(self._head))):
                        logger.info("%s was truncated or replaced, rescanning from the start", self.log_path)
                        self._position = 0
                        self._head = b""
                        self._decoder.reset()
                        self.scanner.reset()
                    f.seek(self._position)
                    data = f.read()
            except FileNotFoundError:
                return []

            self._inode = st.st_ino
            if self._position < _HEAD_SIZE:
                self._head = (self._head + data)[:_HEAD_SIZE]
            self._position += len(data)

            diagnostics = self.scanner.feed(self._decoder.decode(data))

        if diagnostics and self.on_diagnostics:
            self.on_diagnostics(diagnostics)
        return diagnostics

    def _rewritten(self, st: os.stat_result, head: bytes) -> bool:
        if st.st_size < self._position:
            return True
        if self._inode is not None and st.st_ino != self._inode:
            return True
        return head != self._head

    def finish(self) -> List[Diagnostic]:
        """Scans the unterminated last line, for when the writer is done."""
        with self._lock:
            diagnostics = self.scanner.feed(self._decoder.decode(b"", final=True))
            diagnostics += self.scanner.flush()
        if diagnostics and self.on_diagnostics:
            self.on_diagnostics(diagnostics)
        return diagnostics

    def start(self):
        """
        Scans the current contents, then starts a background thread watching
        the directory of the log file.
        """
        if not self.log_path.parent.exists():
            raise FileNotFoundError(f"Cannot follow log in non-existent directory: {self.log_path.parent}")

        self.poll()
        handler = LogUpdateHandler(str(self.log_path), self.poll)
        self.observer = Observer()
        self.observer.schedule(handler, str(self.log_path.parent), recursive=False)
        self.observer.start()

    def stop(self):
        if self.observer and self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
        self.observer = None

    def follow(self, interval: float = 0.5, stop_event: Optional[threading.Event] = None):
        """Blocks until interrupted or stop_event is set."""
        self.start()
        try:
            while not (stop_event and stop_event.is_set()):
                time.sleep(interval)
        finally:
            self.stop()
            self.finish()
