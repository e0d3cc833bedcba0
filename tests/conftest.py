"""Shared pytest fixtures for todo-journal tests."""

import tempfile
from pathlib import Path

import pytest

from fakes import MemoryBackend
from todo_journal.config import TodoConfig
from todo_journal.store import JournalStore


@pytest.fixture
def temp_project():
    """Create a temporary project directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_project):
    """Create a test configuration."""
    return TodoConfig(project_root=temp_project)


@pytest.fixture
def journal_path(config):
    """Path of the journal file inside the temporary project."""
    return config.get_journal_path()


@pytest.fixture
def store(journal_path):
    """Create a store backed by the real filesystem."""
    return JournalStore(journal_path, lock_timeout=1.0)


@pytest.fixture
def memory_backend():
    """Create an empty in-memory storage backend."""
    return MemoryBackend()


@pytest.fixture
def in_project(temp_project, monkeypatch):
    """Run the test with the temporary project as working directory."""
    monkeypatch.chdir(temp_project)
    monkeypatch.delenv("TODO_JOURNAL_FILE", raising=False)
    return temp_project
