"""create brands table

Revision ID: 002
Revises: 001
Create Date: 2025-06-02 10:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "brands",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=False),
        sa.Column("image_public_id", sa.String(255), nullable=True),
        sa.Column("created_by_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"]),
    )
    op.create_index("ix_brands_id", "brands", ["id"], unique=False)
    op.create_index("ix_brands_name", "brands", ["name"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_brands_name", table_name="brands")
    op.drop_index("ix_brands_id", table_name="brands")
    op.drop_table("brands")
