"""create property table"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_property"
down_revision = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "property",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("street", sa.String(), nullable=False),
        sa.Column("state", sa.String(length=2), nullable=False),
        sa.Column("zip_code", sa.String(length=5), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("long", sa.Float(), nullable=False),
        sa.Column("weather_data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_property_city"), "property", ["city"], unique=False)
    op.create_index(op.f("ix_property_state"), "property", ["state"], unique=False)
    op.create_index(op.f("ix_property_zip_code"), "property", ["zip_code"], unique=False)
    op.create_index(op.f("ix_property_created_at"), "property", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_property_created_at"), table_name="property")
    op.drop_index(op.f("ix_property_zip_code"), table_name="property")
    op.drop_index(op.f("ix_property_state"), table_name="property")
    op.drop_index(op.f("ix_property_city"), table_name="property")
    op.drop_table("property")
