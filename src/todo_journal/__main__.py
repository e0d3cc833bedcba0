"""Allow ``python -m todo_journal``."""

from .cli import run

run()
