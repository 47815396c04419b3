"""SQLAlchemy Core table definitions for the database schema."""

from sqlalchemy import (
    Column,
    MetaData,
    PrimaryKeyConstraint,
    Table,
    Text,
    column,
    func,
    table,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.sql.expression import TableClause

# Naming convention for constraints (helps Alembic generate better names)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)


# =====================================================
# 1. PLUGIN_CONFIG
# =====================================================
# Admin-form settings, one row per key. JSONB keeps booleans and numbers typed.
plugin_config = Table(
    "plugin_config",
    metadata,
    Column("plugin_name", Text, nullable=False),
    Column("key", Text, nullable=False),
    Column("value", JSONB),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
    PrimaryKeyConstraint("plugin_name", "key"),
)


# =====================================================
# 2. HOST TABLES
# =====================================================
# Users and bookings belong to the host application. Their table and column
# names are configurable, so they are addressed with lightweight clauses
# instead of metadata-bound Tables.
def host_table(name: str, *columns: str | None) -> TableClause:
    """Build a table clause for a host table with the given (mapped) columns."""
    unique = dict.fromkeys(c for c in columns if c)
    return table(name, *(column(c) for c in unique))
