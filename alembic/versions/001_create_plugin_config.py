"""Create plugin_config table for admin-form settings.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Stores the Google Calendar sync settings (OAuth client, table and field
mappings, webhook secret, Meet flag) as one JSONB value per key.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "plugin_config",
        sa.Column("plugin_name", sa.Text(), nullable=False),
        sa.Column("key", sa.Text(), nullable=False),
        sa.Column("value", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("plugin_name", "key", name=op.f("pk_plugin_config")),
    )


def downgrade() -> None:
    op.drop_table("plugin_config")
