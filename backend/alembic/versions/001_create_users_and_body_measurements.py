"""Create users and body_measurements

Revision ID: 001_create_users_and_body_measurements
Revises:

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from trinity.db.types import GUID

# revision identifiers, used by Alembic.
revision: str = "001_create_users_and_body_measurements"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table; gender and age drive the Navy formula and ideal ranges
    op.create_table(
        "users",
        sa.Column("user_id", GUID(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("gender", sa.String(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    # Weekly check-ins
    op.create_table(
        "body_measurements",
        sa.Column("measurement_id", GUID(), nullable=False),
        sa.Column("user_id", GUID(), nullable=False),
        sa.Column("measured_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("height_cm", sa.Float(), nullable=False),
        sa.Column("weight_kg", sa.Float(), nullable=False),
        sa.Column("neck_cm", sa.Float(), nullable=False),
        sa.Column("waist_cm", sa.Float(), nullable=False),
        sa.Column("hip_cm", sa.Float(), nullable=True),
        sa.Column("body_fat_percentage", sa.Float(), nullable=True),
        sa.Column("fat_mass_kg", sa.Float(), nullable=True),
        sa.Column("lean_mass_kg", sa.Float(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("measurement_id"),
    )
    op.create_index(
        op.f("ix_body_measurements_user_id"),
        "body_measurements",
        ["user_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_body_measurements_measured_at"),
        "body_measurements",
        ["measured_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_body_measurements_measured_at"), table_name="body_measurements"
    )
    op.drop_index(op.f("ix_body_measurements_user_id"), table_name="body_measurements")
    op.drop_table("body_measurements")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
