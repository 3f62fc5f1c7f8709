"""SQLModel database models."""

from finishing.models.kv_entry import KeyValueEntry

__all__ = [
    "KeyValueEntry",
]
