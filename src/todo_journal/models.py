"""Data model for journal tasks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional


def truncate_to_millis(dt: datetime) -> datetime:
    """Drop sub-millisecond precision, matching what the journal stores."""
    return dt.replace(microsecond=dt.microsecond // 1000 * 1000)


def utc_now() -> datetime:
    """Get current UTC time with timezone info, at millisecond precision."""
    return truncate_to_millis(datetime.now(timezone.utc))


def format_timestamp(dt: datetime) -> str:
    """Format datetime as ISO 8601 with timezone."""
    return dt.astimezone(timezone.utc).isoformat(timespec='milliseconds')


def parse_timestamp(value: Any) -> datetime:
    """Parse a stored timestamp into an aware UTC datetime.

    Accepts ISO 8601 strings (naive values are taken as UTC, a trailing
    ``Z`` is allowed) and integer UNIX epoch seconds.

    Raises:
        ValueError: If the value is not a recognizable timestamp
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, int):
        return datetime.fromtimestamp(value, timezone.utc)
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class Task:
    """A single to-do entry."""
    text: str
    created_at: datetime

    def __post_init__(self):
        # Stored timestamps keep milliseconds only
        object.__setattr__(self, "created_at", truncate_to_millis(self.created_at))

    @classmethod
    def new(cls, text: str, now: Optional[datetime] = None) -> Task:
        """Create a task stamped with the current UTC time."""
        return cls(text=text, created_at=now or utc_now())

    def to_dict(self) -> dict:
        """Convert task to dictionary for JSON serialization."""
        return {
            "text": self.text,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        """Build a task from its JSON form.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if "text" not in data:
            raise ValueError("missing 'text'")
        if "created_at" not in data:
            raise ValueError("missing 'created_at'")
        text = data["text"]
        if not isinstance(text, str):
            raise ValueError(f"'text' must be a string, got {type(text).__name__}")
        return cls(text=text, created_at=parse_timestamp(data["created_at"]))
