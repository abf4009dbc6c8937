"""Initial schema: users, predictions, optimizations.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "predictions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("tilt", sa.Float, nullable=False),
        sa.Column("azimuth", sa.Float, nullable=False),
        sa.Column("system_capacity_kw", sa.Float, nullable=False),
        sa.Column("predicted_power_kw", sa.Float, nullable=False),
        sa.Column("calculation_mode", sa.String(20), nullable=False, server_default="advanced"),
        sa.Column("calibration_factor", sa.Float, nullable=False, server_default="1.0"),
        sa.Column("timestamp", sa.String(64), nullable=False),
        sa.Column("weather_data", postgresql.JSONB, nullable=False),
        sa.Column("solar_geometry", postgresql.JSONB, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "ix_predictions_user_created", "predictions", ["user_id", "created_at"]
    )

    op.create_table(
        "optimizations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("optimal_tilt", sa.Float, nullable=False),
        sa.Column("optimal_azimuth", sa.Float, nullable=False),
        sa.Column("max_power_kw", sa.Float, nullable=False),
        sa.Column("current_tilt", sa.Float, nullable=False),
        sa.Column("current_azimuth", sa.Float, nullable=False),
        sa.Column("current_power_kw", sa.Float, nullable=False),
        sa.Column("improvement_percentage", sa.Float, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "ix_optimizations_user_created", "optimizations", ["user_id", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_optimizations_user_created", table_name="optimizations")
    op.drop_table("optimizations")
    op.drop_index("ix_predictions_user_created", table_name="predictions")
    op.drop_table("predictions")
    op.drop_table("users")
