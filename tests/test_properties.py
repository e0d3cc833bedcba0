"""Property-based tests for the journal store.

Uses hypothesis to verify the load/save and list-mutation invariants hold for
many inputs.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from hypothesis import given, settings, strategies as st

from fakes import MemoryBackend
from todo_journal.formatting import format_tasks
from todo_journal.models import Task, format_timestamp, parse_timestamp, truncate_to_millis
from todo_journal.store import InvalidPositionError, append, load, remove_at, save


JOURNAL = Path("journal.json")

timestamps = st.datetimes(
    min_value=datetime(1970, 1, 1),
    max_value=datetime(2100, 1, 1),
    timezones=st.just(timezone.utc),
)

tasks_strategy = st.builds(Task, text=st.text(max_size=200), created_at=timestamps)
task_lists = st.lists(tasks_strategy, max_size=30)


class TestTimestampProperties:
    """Property-based tests for timestamp formatting/parsing."""

    @given(dt=timestamps)
    def test_timestamp_round_trip(self, dt):
        """Formatting then parsing a timestamp preserves it to the millisecond."""
        assert parse_timestamp(format_timestamp(dt)) == truncate_to_millis(dt)


class TestRoundTripProperties:
    """save followed by load yields an equal sequence."""

    @given(tasks=task_lists)
    def test_save_load_round_trip(self, tasks):
        """Any task list survives a save/load cycle unchanged."""
        backend = MemoryBackend()
        save(JOURNAL, tasks, backend)
        assert load(JOURNAL, backend) == tasks

    @given(tasks=task_lists)
    def test_list_is_idempotent(self, tasks):
        """Rendering the same journal twice gives identical output."""
        backend = MemoryBackend()
        save(JOURNAL, tasks, backend)

        first = list(format_tasks(load(JOURNAL, backend)))
        second = list(format_tasks(load(JOURNAL, backend)))
        assert first == second
        assert len(first) == len(tasks)


class TestAppendProperties:
    """Property-based tests for append."""

    @given(tasks=task_lists, text=st.text(max_size=200), now=timestamps)
    def test_append_adds_exactly_one_at_end(self, tasks, text, now):
        """append grows the list by one and puts the new task last."""
        result = append(tasks, text, now=now)
        assert len(result) == len(tasks) + 1
        assert result[-1] == Task(text, now)
        assert result[:-1] == tasks


class TestRemoveAtProperties:
    """Property-based tests for remove_at."""

    @given(data=st.data(), tasks=st.lists(tasks_strategy, min_size=1, max_size=30))
    def test_remove_valid_position(self, data, tasks):
        """remove_at drops exactly the element at k and keeps the rest in order."""
        k = data.draw(st.integers(min_value=1, max_value=len(tasks)))
        result = remove_at(tasks, k)

        assert len(result) == len(tasks) - 1
        assert result == tasks[:k - 1] + tasks[k:]

    @given(
        tasks=task_lists,
        offset=st.integers(min_value=1, max_value=1000),
        below=st.booleans(),
    )
    def test_remove_invalid_position(self, tasks, offset, below):
        """Positions below 1 or above the length are rejected."""
        position = 1 - offset if below else len(tasks) + offset
        with pytest.raises(InvalidPositionError):
            remove_at(tasks, position)

    @given(tasks=task_lists, position=st.integers(min_value=-5, max_value=40))
    @settings(max_examples=50)
    def test_invalid_position_never_writes(self, tasks, position):
        """The stored journal is unchanged whenever remove_at rejects a position."""
        backend = MemoryBackend()
        save(JOURNAL, tasks, backend)
        before = backend.files[JOURNAL]

        try:
            save(JOURNAL, remove_at(load(JOURNAL, backend), position), backend)
        except InvalidPositionError:
            assert backend.files[JOURNAL] == before
        else:
            assert 1 <= position <= len(tasks)
