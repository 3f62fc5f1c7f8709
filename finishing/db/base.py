"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from finishing.models.kv_entry import KeyValueEntry  # noqa: F401
