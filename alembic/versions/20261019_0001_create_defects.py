"""create defects table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "defects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("date_reported", sa.Date(), nullable=False),
        sa.Column("module", sa.String(length=255), nullable=False),
        sa.Column("test_case_id", sa.String(length=100), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("expected_result", sa.Text(), nullable=False),
        sa.Column("actual_result", sa.Text(), nullable=False),
        sa.Column("severity", sa.String(length=50), nullable=False),
        sa.Column("priority", sa.String(length=100), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("date_fixed", sa.Date(), nullable=True),
        sa.Column("qc_status_bbt", sa.String(length=50), nullable=False),
        sa.Column("assigned_to", sa.String(length=100), nullable=True),
        sa.Column("source_file", sa.String(length=255), nullable=True),
        sa.Column("uploaded_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "severity IN ('MAJOR', 'HIGH', 'MEDIUM', 'LOW')",
            name="ck_defects_severity",
        ),
        sa.CheckConstraint(
            "status IN ('OPEN', 'IN_PROGRESS', 'CLOSED', 'ON_HOLD', 'AS_IT_IS')",
            name="ck_defects_status",
        ),
        sa.CheckConstraint(
            "qc_status_bbt IN ('PASSED', 'FAILED', 'PENDING', 'REJECTED')",
            name="ck_defects_qc_status_bbt",
        ),
    )
    op.create_index("ix_defects_date_reported", "defects", ["date_reported"], unique=False)
    op.create_index("ix_defects_module", "defects", ["module"], unique=False)
    op.create_index("ix_defects_severity", "defects", ["severity"], unique=False)
    op.create_index("ix_defects_status", "defects", ["status"], unique=False)
    op.create_index("ix_defects_source_file", "defects", ["source_file"], unique=False)
    op.create_index(
        "ix_defects_natural_key",
        "defects",
        ["date_reported", "module"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_defects_natural_key", table_name="defects")
    op.drop_index("ix_defects_source_file", table_name="defects")
    op.drop_index("ix_defects_status", table_name="defects")
    op.drop_index("ix_defects_severity", table_name="defects")
    op.drop_index("ix_defects_module", table_name="defects")
    op.drop_index("ix_defects_date_reported", table_name="defects")
    op.drop_table("defects")
