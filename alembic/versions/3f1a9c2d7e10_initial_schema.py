"""
Initial schema: profiles, roles, plans, catalog, borrow records, requests, notifications.

Enum types are created once up front and referenced with create_type=False.
Pending requests are limited to one per borrow record by partial unique indexes.

Revision ID: 3f1a9c2d7e10
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


revision: str = "3f1a9c2d7e10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUMS = {
    "app_role": ("admin", "librarian", "member"),
    "borrow_status": ("issued", "returned", "overdue"),
    "request_status": ("pending", "approved", "rejected"),
    "notification_type": (
        "overdue",
        "due_reminder",
        "low_stock",
        "extension_requested",
        "extension_approved",
        "extension_rejected",
        "renewal_requested",
        "renewal_approved",
        "renewal_rejected",
    ),
}


def enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def uuid_pk() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def fk(column: str, target: str, ondelete: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        column,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def request_columns() -> list[sa.Column]:
    return [
        fk("borrow_record_id", "borrow_records.id", "CASCADE"),
        fk("member_id", "profiles.id", "CASCADE"),
        sa.Column("status", enum("request_status"), nullable=False, server_default="pending"),
        fk("librarian_id", "profiles.id", "SET NULL", nullable=True),
        sa.Column("librarian_reason", sa.Text(), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create all tables, enum types, constraints and indexes."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "membership_plans",
        uuid_pk(),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("annual_fee", sa.Numeric(10, 2), nullable=False, server_default="0.00"),
        sa.Column("duration_days", sa.Integer(), nullable=False, server_default="365"),
        sa.Column("fine_per_day", sa.Numeric(10, 2), nullable=False, server_default="5.00"),
        sa.Column("max_books_allowed", sa.Integer(), nullable=False, server_default="3"),
        *timestamps(),
    )

    op.create_table(
        "profiles",
        uuid_pk(),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        fk("membership_plan_id", "membership_plans.id", "RESTRICT", nullable=True),
        sa.Column("membership_start_date", sa.Date(), nullable=True),
        sa.Column("membership_expiry_date", sa.Date(), nullable=True),
        *timestamps(),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"])
    op.create_index("ix_profiles_membership_plan_id", "profiles", ["membership_plan_id"])

    op.create_table(
        "user_roles",
        uuid_pk(),
        fk("user_id", "profiles.id", "CASCADE"),
        sa.Column("role", enum("app_role"), nullable=False),
        *timestamps(),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_id_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"])
    op.create_index("ix_user_roles_role", "user_roles", ["role"])

    op.create_table(
        "categories",
        uuid_pk(),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        *timestamps(),
    )

    op.create_table(
        "books",
        uuid_pk(),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("author", sa.String(200), nullable=False),
        sa.Column("isbn", sa.String(20), nullable=True),
        sa.Column("publisher", sa.String(200), nullable=True),
        sa.Column("publication_year", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cover_image_url", sa.String(1000), nullable=True),
        sa.Column("total_copies", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("available_copies", sa.Integer(), nullable=False, server_default="1"),
        fk("category_id", "categories.id", "RESTRICT", nullable=True),
        *timestamps(),
        sa.CheckConstraint(
            "available_copies >= 0 AND available_copies <= total_copies",
            name="ck_books_available_copies_range",
        ),
    )
    op.create_index("ix_books_title", "books", ["title"])
    op.create_index("ix_books_author", "books", ["author"])
    op.create_index("ix_books_isbn", "books", ["isbn"])
    op.create_index("ix_books_category_id", "books", ["category_id"])

    op.create_table(
        "borrow_records",
        uuid_pk(),
        fk("book_id", "books.id", "RESTRICT"),
        fk("member_id", "profiles.id", "RESTRICT"),
        fk("issued_by", "profiles.id", "SET NULL", nullable=True),
        sa.Column("issue_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("return_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", enum("borrow_status"), nullable=False, server_default="issued"),
        sa.Column("fine_amount", sa.Numeric(10, 2), nullable=False, server_default="0.00"),
        sa.Column("renewal_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_renewals", sa.Integer(), nullable=False, server_default="2"),
        *timestamps(),
        sa.CheckConstraint("renewal_count <= max_renewals", name="ck_borrow_records_renewals"),
        sa.CheckConstraint("fine_amount >= 0", name="ck_borrow_records_fine_non_negative"),
    )
    op.create_index("ix_borrow_records_member_status", "borrow_records", ["member_id", "status"])
    op.create_index("ix_borrow_records_book_id", "borrow_records", ["book_id"])
    op.create_index("ix_borrow_records_status_due_date", "borrow_records", ["status", "due_date"])

    op.create_table(
        "extension_requests",
        uuid_pk(),
        *request_columns(),
        sa.Column("requested_days", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        *timestamps(),
    )

    op.create_table(
        "renewal_requests",
        uuid_pk(),
        *request_columns(),
        sa.Column("reason", sa.Text(), nullable=True),
        *timestamps(),
    )

    for table in ("extension_requests", "renewal_requests"):
        op.create_index(f"ix_{table}_borrow_record_id", table, ["borrow_record_id"])
        op.create_index(f"ix_{table}_member_id", table, ["member_id"])
        op.create_index(f"ix_{table}_status", table, ["status"])
        op.create_index(
            f"uq_{table}_pending",
            table,
            ["borrow_record_id"],
            unique=True,
            postgresql_where=sa.text("status = 'pending'"),
        )

    op.create_table(
        "notifications",
        uuid_pk(),
        fk("user_id", "profiles.id", "CASCADE"),
        sa.Column("type", enum("notification_type"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("related_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("dedup_key", sa.String(255), nullable=True, unique=True),
        *timestamps(),
    )
    op.create_index("ix_notifications_user_read", "notifications", ["user_id", "read"])


def downgrade() -> None:
    """Drop everything created by upgrade, in reverse dependency order."""
    for table in (
        "notifications",
        "renewal_requests",
        "extension_requests",
        "borrow_records",
        "books",
        "categories",
        "user_roles",
        "profiles",
        "membership_plans",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
