"""students, payments and expenses tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

# Labels are the Python enum member names, matching how the models bind them
ENUM_TYPES = {
    "currency": ("USD", "ZAR", "ZIG"),
    "student_status": ("ACTIVE", "INACTIVE", "SUSPENDED", "GRADUATED"),
    "gender": ("MALE", "FEMALE", "OTHER"),
    "payment_method": ("CASH", "CARD", "BANK_TRANSFER", "CHECK"),
    "payment_status": ("COMPLETED", "PENDING", "FAILED"),
    "expense_method": ("CASH", "CHECK", "BANK_TRANSFER"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUM_TYPES[name], name=name, create_type=False)


def _timestamps() -> list:
    return [
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    for name, labels in ENUM_TYPES.items():
        postgresql.ENUM(*labels, name=name).create(op.get_bind(), checkfirst=True)

    op.create_table(
        "students",
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("admission_number", sa.String(50), nullable=True),
        sa.Column("class_name", sa.String(50), nullable=True),
        sa.Column("class_section", sa.String(20), nullable=True),
        sa.Column("status", _enum("student_status"), nullable=False),
        sa.Column("gender", _enum("gender"), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("enrollment_date", sa.Date(), nullable=True),
        sa.Column("academic_year", sa.String(20), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("parent_name", sa.String(200), nullable=True),
        sa.Column("parent_phone", sa.String(50), nullable=True),
        sa.Column("medical_notes", sa.Text(), nullable=True),
        sa.Column("total_fees", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("paid_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("outstanding_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("admission_number"),
    )
    op.create_index(op.f("ix_students_id"), "students", ["id"], unique=False)
    op.create_index(op.f("ix_students_class_name"), "students", ["class_name"], unique=False)
    op.create_index(op.f("ix_students_status"), "students", ["status"], unique=False)

    op.create_table(
        "payments",
        sa.Column("student_id", sa.UUID(), nullable=False),
        sa.Column("student_name", sa.String(200), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", _enum("currency"), nullable=False),
        sa.Column("payment_method", _enum("payment_method"), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("invoice_number", sa.String(50), nullable=True),
        sa.Column("status", _enum("payment_status"), nullable=False),
        sa.Column("account_id", sa.String(10), nullable=True),
        sa.Column("allocations", postgresql.JSONB(), nullable=True),
        sa.Column("reverses_payment_id", sa.UUID(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payments_id"), "payments", ["id"], unique=False)
    op.create_index(op.f("ix_payments_student_id"), "payments", ["student_id"], unique=False)
    op.create_index(op.f("ix_payments_payment_date"), "payments", ["payment_date"], unique=False)
    op.create_index(op.f("ix_payments_status"), "payments", ["status"], unique=False)
    op.create_index(op.f("ix_payments_account_id"), "payments", ["account_id"], unique=False)

    op.create_table(
        "expenses",
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", _enum("currency"), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("payment_method", _enum("expense_method"), nullable=False),
        sa.Column("account_id", sa.String(10), nullable=True),
        sa.Column("allocation_category", sa.String(50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_expenses_id"), "expenses", ["id"], unique=False)
    op.create_index(op.f("ix_expenses_category"), "expenses", ["category"], unique=False)
    op.create_index(op.f("ix_expenses_date"), "expenses", ["date"], unique=False)
    op.create_index(op.f("ix_expenses_account_id"), "expenses", ["account_id"], unique=False)


def downgrade() -> None:
    op.drop_table("expenses")
    op.drop_table("payments")
    op.drop_table("students")
    for name in reversed(list(ENUM_TYPES)):
        postgresql.ENUM(name=name).drop(op.get_bind(), checkfirst=True)
