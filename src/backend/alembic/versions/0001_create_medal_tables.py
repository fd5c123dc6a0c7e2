"""create medals, medal_reports, medal_collections

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "medals",
        sa.Column("medal_no", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_medals_user_id", "medals", ["user_id"])
    op.create_index("ix_medals_latitude_longitude", "medals", ["latitude", "longitude"])

    op.create_table(
        "medal_reports",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("medal_no", sa.Integer(), sa.ForeignKey("medals.medal_no", ondelete="CASCADE"), nullable=False),
        sa.Column("reporter_user_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("medal_no", "reporter_user_id", name="uq_medal_reports_medal_no_reporter"),
    )
    op.create_index("ix_medal_reports_medal_no", "medal_reports", ["medal_no"])

    op.create_table(
        "medal_collections",
        sa.Column("collection_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("medal_no", sa.Integer(), sa.ForeignKey("medals.medal_no", ondelete="CASCADE"), nullable=False),
        sa.Column("collected_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "medal_no", name="uq_medal_collections_user_medal"),
    )
    op.create_index("ix_medal_collections_user_id", "medal_collections", ["user_id"])
    op.create_index("ix_medal_collections_collected_at", "medal_collections", ["collected_at"])


def downgrade() -> None:
    op.drop_table("medal_collections")
    op.drop_table("medal_reports")
    op.drop_table("medals")
