"""Terminal rendering of the task list."""

from __future__ import annotations

from datetime import timezone
from typing import Iterable, Iterator

from .config import DEFAULT_COLUMN_WIDTH
from .models import Task

DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M"


def format_task(position: int, task: Task, width: int = DEFAULT_COLUMN_WIDTH) -> str:
    """Render one numbered task line.

    The text is left-aligned and padded to ``width`` so timestamps line up.
    """
    created_at = task.created_at.astimezone(timezone.utc).strftime(DISPLAY_TIME_FORMAT)
    return f"{position}: {task.text:<{width}} [{created_at}](UTC)"


def format_tasks(tasks: Iterable[Task], width: int = DEFAULT_COLUMN_WIDTH) -> Iterator[str]:
    """Yield display lines for ``tasks``, numbered from 1."""
    for position, task in enumerate(tasks, start=1):
        yield format_task(position, task, width=width)
