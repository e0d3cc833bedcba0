"""Journal store - load, mutate and rewrite the task list.

Every mutation loads the whole journal, changes it in memory and writes the
whole journal back. There is no incremental on-disk format.
"""

from __future__ import annotations

import json
import logging
from contextlib import ExitStack, contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import portalocker

from .config import DEFAULT_LOCK_TIMEOUT
from .locking import atomic_write, file_lock
from .models import Task

logger = logging.getLogger(__name__)


class TodoError(Exception):
    """Base exception for to-do journal operations."""
    pass


class UsageError(TodoError):
    """Raised when command line arguments are malformed or missing."""

    def __init__(self, message: str, usage: str = ""):
        super().__init__(message)
        self.usage = usage


class CorruptJournalError(TodoError):
    """Raised when an existing journal file cannot be parsed."""
    pass


class InvalidPositionError(TodoError):
    """Raised when a position falls outside the task list."""

    def __init__(self, position: int, length: int):
        if length == 0:
            message = f"Invalid position {position}: the journal is empty"
        else:
            message = f"Invalid position {position}: expected a value in [1,{length}]"
        super().__init__(message)
        self.position = position
        self.length = length


class JournalIOError(TodoError):
    """Raised when the journal file cannot be read or written."""
    pass


class JournalLockedError(TodoError):
    """Raised when another process holds the journal lock too long."""
    pass


class FileBackend:
    """Storage backend that reads and writes journal files on disk."""

    def read(self, path: Path) -> Optional[str]:
        """Return file contents, or None if the file does not exist."""
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, path: Path, data: str) -> None:
        with atomic_write(path) as f:
            f.write(data)

    @contextmanager
    def lock(self, path: Path, timeout: float):
        """Hold the journal's lock file for the duration of the block.

        Raises:
            JournalLockedError: If another process keeps the lock past timeout
            JournalIOError: If the lock file cannot be created
        """
        stack = ExitStack()
        try:
            stack.enter_context(file_lock(path, timeout=timeout))
        except portalocker.LockException as e:
            raise JournalLockedError(f"Journal {path} is locked by another process") from e
        except OSError as e:
            raise JournalIOError(f"Cannot lock journal {path}: {e}") from e
        with stack:
            yield


def _default_backend(backend):
    return backend if backend is not None else FileBackend()


def parse_journal(content: str, path: Path) -> list[Task]:
    """Decode journal JSON into tasks.

    Raises:
        CorruptJournalError: If the content is not a valid journal
    """
    if not content.strip():
        return []

    try:
        data = json.loads(content)
    except (ValueError, RecursionError) as e:
        raise CorruptJournalError(f"Journal {path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CorruptJournalError(
            f"Journal {path} must contain a JSON array, got {type(data).__name__}"
        )

    tasks = []
    for i, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise CorruptJournalError(f"Journal {path}: entry {i} is not an object")
        try:
            tasks.append(Task.from_dict(item))
        except (ValueError, OverflowError, OSError) as e:
            raise CorruptJournalError(f"Journal {path}: entry {i} is invalid: {e}") from e
    return tasks


def serialize_journal(tasks: Sequence[Task]) -> str:
    """Encode tasks as the journal's JSON text."""
    return json.dumps([task.to_dict() for task in tasks], indent=2, ensure_ascii=False) + "\n"


def load(path: Path, backend=None) -> list[Task]:
    """Load all tasks from the journal at ``path``.

    A missing file is an empty journal.

    Raises:
        CorruptJournalError: If the file exists but cannot be parsed
        JournalIOError: If the file cannot be read
    """
    backend = _default_backend(backend)
    try:
        content = backend.read(path)
    except OSError as e:
        raise JournalIOError(f"Cannot read journal {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise CorruptJournalError(f"Journal {path} is not valid UTF-8: {e}") from e

    if content is None:
        logger.debug("Journal %s does not exist yet", path)
        return []

    tasks = parse_journal(content, path)
    logger.debug("Loaded %d task(s) from %s", len(tasks), path)
    return tasks


def append(tasks: Sequence[Task], text: str, now: Optional[datetime] = None) -> list[Task]:
    """Return a new task list with a task for ``text`` at the end."""
    return [*tasks, Task.new(text, now=now)]


def remove_at(tasks: Sequence[Task], position: int) -> list[Task]:
    """Return a new task list without the task at 1-based ``position``.

    Raises:
        InvalidPositionError: If position is outside [1, len(tasks)]
    """
    if position < 1 or position > len(tasks):
        raise InvalidPositionError(position, len(tasks))
    index = position - 1
    return [*tasks[:index], *tasks[index + 1:]]


def save(path: Path, tasks: Sequence[Task], backend=None) -> None:
    """Replace the journal at ``path`` with ``tasks``.

    Raises:
        JournalIOError: If the file cannot be written
    """
    backend = _default_backend(backend)
    try:
        backend.write(path, serialize_journal(tasks))
    except OSError as e:
        raise JournalIOError(f"Cannot write journal {path}: {e}") from e
    logger.debug("Saved %d task(s) to %s", len(tasks), path)


class JournalStore:
    """Runs one load-mutate-save cycle against a journal file."""

    def __init__(self, path: Path, backend=None, lock_timeout: float = DEFAULT_LOCK_TIMEOUT):
        self.path = path
        self.backend = _default_backend(backend)
        self.lock_timeout = lock_timeout

    def _mutate(self, change):
        with self.backend.lock(self.path, self.lock_timeout):
            tasks = load(self.path, self.backend)
            updated, result = change(tasks)
            save(self.path, updated, self.backend)
        return result

    def list_tasks(self) -> list[Task]:
        return load(self.path, self.backend)

    def add_task(self, text: str) -> tuple[int, Task]:
        """Append a task and persist the journal.

        Returns:
            Tuple of (position, task) for the created task
        """
        def change(tasks):
            updated = append(tasks, text)
            return updated, (len(updated), updated[-1])

        position, task = self._mutate(change)
        logger.info("Added task %d to %s", position, self.path)
        return position, task

    def complete_task(self, position: int) -> Task:
        """Remove the task at ``position`` and persist the journal.

        Returns:
            The removed Task

        Raises:
            InvalidPositionError: If position is out of range (nothing is written)
        """
        def change(tasks):
            updated = remove_at(tasks, position)
            return updated, tasks[position - 1]

        task = self._mutate(change)
        logger.info("Completed task %d in %s", position, self.path)
        return task
