"""
File system watcher that feeds newly created notes to the cover sorter.

This module provides:
- Watchdog-based monitoring of the vault
- A settle delay so clippers can finish writing a note before it is read
- Per-path de-duplication of creation events within that delay
- Sequential dispatch of settled notes to the pipeline
"""

import logging
import time
from pathlib import Path
from typing import Callable

from watchdog.events import (
    FileSystemEventHandler,
    FileCreatedEvent,
    FileDeletedEvent,
    FileMovedEvent,
)
from watchdog.observers import Observer

from .models import SortResult
from .sorter import CoverSorter, NOTE_EXTENSIONS

logger = logging.getLogger(__name__)

SETTLE_SECONDS = 0.3
POLL_SECONDS = 0.1


class VaultEventHandler(FileSystemEventHandler):
    """
    Queues created notes and hands them to the sorter once they settle.

    Key behaviors:
    - Only creation (and move-into-vault) events count; edits to existing
      notes are ignored
    - Filters to markdown notes outside hidden folders
    - Repeated creation events for one path collapse into a single run
    - A temp file renamed over an existing note (atomic save) is an edit,
      not a creation
    """

    def __init__(
        self,
        vault_path: Path,
        sorter: CoverSorter,
        settle_seconds: float = SETTLE_SECONDS,
        on_result: Callable[[SortResult], None] | None = None,
    ):
        """
        Args:
            vault_path: Path to the vault directory
            sorter: Pipeline that processes each settled note
            settle_seconds: How long a note must sit before it is read
            on_result: Callback for every pipeline result
        """
        super().__init__()
        self.vault_path = vault_path.resolve()
        self.sorter = sorter
        self.settle_seconds = settle_seconds
        self.on_result = on_result

        # path -> time the creation was seen
        self.pending: dict[str, float] = {}

        # Notes already on disk; a temp file renamed over one is an edit
        self.known: set[str] = {
            self._key(str(path))
            for path in self.vault_path.rglob("*")
            if path.is_file() and self._is_relevant(str(path))
        }

    @staticmethod
    def _key(path: str) -> str:
        return str(Path(path).resolve())

    def _is_relevant(self, path: str) -> bool:
        """Check if the path is a note we should look at."""
        p = Path(path)
        try:
            rel = p.resolve().relative_to(self.vault_path)
        except ValueError:
            return False

        # Skip hidden files and directories (.obsidian, .coversort, ...)
        if any(part.startswith(".") for part in rel.parts):
            return False

        return p.suffix.lower() in NOTE_EXTENSIONS

    def _queue(self, path: str) -> None:
        if path in self.pending:
            logger.debug("Duplicate creation event for %s", path)
        self.pending[path] = time.time()
        self.known.add(self._key(path))

    def flush_pending(self) -> list[SortResult]:
        """Run the sorter for every pending note that has settled."""
        now = time.time()
        ready = [
            path_str
            for path_str, seen_at in list(self.pending.items())
            if now - seen_at >= self.settle_seconds
        ]

        results = []
        for path_str in ready:
            self.pending.pop(path_str, None)
            path = Path(path_str)
            if not path.exists():
                continue

            result = self.sorter.on_document_created(path)
            results.append(result)
            if self.on_result:
                self.on_result(result)

        return results

    def on_created(self, event: FileCreatedEvent) -> None:
        """Handle file creation."""
        if event.is_directory or not self._is_relevant(event.src_path):
            return
        self._queue(event.src_path)

    def on_deleted(self, event: FileDeletedEvent) -> None:
        """Created then deleted before it settled: nothing to do."""
        if event.is_directory:
            return
        self.pending.pop(event.src_path, None)
        self.known.discard(self._key(event.src_path))

    def on_moved(self, event: FileMovedEvent) -> None:
        """Handle file rename/move."""
        if event.is_directory:
            return
        self.known.discard(self._key(event.src_path))

        # A pending note renamed before it settled follows its new name
        if event.src_path in self.pending:
            del self.pending[event.src_path]
            if self._is_relevant(event.dest_path):
                self._queue(event.dest_path)
            return

        if not self._is_relevant(event.dest_path):
            return

        # Temp file renamed into place - a create, unless it replaced a known note
        if not self._is_relevant(event.src_path) and self._key(event.dest_path) not in self.known:
            self._queue(event.dest_path)
        else:
            self.known.add(self._key(event.dest_path))


def watch_vault(
    vault_path: Path,
    sorter: CoverSorter,
    settle_seconds: float = SETTLE_SECONDS,
    on_result: Callable[[SortResult], None] | None = None,
    recursive: bool = True,
) -> tuple[Observer, VaultEventHandler]:
    """
    Start watching a vault for new notes.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = VaultEventHandler(
        vault_path=vault_path,
        sorter=sorter,
        settle_seconds=settle_seconds,
        on_result=on_result,
    )

    observer = Observer()
    observer.schedule(handler, str(vault_path), recursive=recursive)
    observer.start()

    return observer, handler


def run_watch_loop(
    vault_path: Path,
    sorter: CoverSorter,
    settle_seconds: float = SETTLE_SECONDS,
    on_result: Callable[[SortResult], None] | None = None,
) -> None:
    """
    Run the watch loop until interrupted.

    Blocks, flushing settled notes to the sorter between polls.
    """
    observer, handler = watch_vault(
        vault_path=vault_path,
        sorter=sorter,
        settle_seconds=settle_seconds,
        on_result=on_result,
    )

    try:
        while True:
            time.sleep(POLL_SECONDS)
            handler.flush_pending()
    except KeyboardInterrupt:
        observer.stop()

    observer.join()
