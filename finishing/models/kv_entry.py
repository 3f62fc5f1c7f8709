"""
Key-value entry database model.

The tracker persists its whole session collection as one serialized
value under a fixed key, so a single generic table is enough.
"""

import datetime

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel


def utcnow() -> datetime.datetime:
    """Timezone-aware current UTC time."""
    return datetime.datetime.now(datetime.timezone.utc)


class KeyValueEntry(SQLModel, table=True):
    """One stored value, addressed by its key."""

    __tablename__ = "kv_store"

    key: str = Field(primary_key=True, max_length=255)
    value: str = Field(sa_column=Column(Text, nullable=False))

    updated_at: datetime.datetime = Field(default_factory=utcnow,
                                          sa_column=Column(DateTime(timezone=True), nullable=False), )
