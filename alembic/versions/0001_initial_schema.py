"""Initial schema: users, donors, inventory, requests, notifications, file blobs

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

from bloodhub.db.base import UUID


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", UUID(), primary_key=True, nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "donors",
        sa.Column("id", UUID(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("branch", sa.String(100), nullable=False),
        sa.Column("roll_number", sa.String(50), nullable=False),
        sa.Column("blood_group", sa.String(3), nullable=False),
        sa.Column("contact_info", sa.String(255), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        sa.Column("last_donation_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("donation_history", sa.JSON(), nullable=False),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_donors_roll_number", "donors", ["roll_number"], unique=True)
    op.create_index("ix_donors_blood_group", "donors", ["blood_group"])
    op.create_index("ix_donors_registered_at", "donors", ["registered_at"])
    op.create_index(
        "idx_donor_group_available", "donors", ["blood_group", "is_available"]
    )

    op.create_table(
        "blood_inventory",
        sa.Column("id", UUID(), primary_key=True, nullable=False),
        sa.Column("blood_type", sa.String(3), nullable=False),
        sa.Column("units_available", sa.Integer(), nullable=False),
        sa.Column("donor_count", sa.Integer(), nullable=False),
        sa.Column("low_stock_threshold", sa.Integer(), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_blood_inventory_blood_type", "blood_inventory", ["blood_type"], unique=True
    )

    op.create_table(
        "blood_requests",
        sa.Column("id", UUID(), primary_key=True, nullable=False),
        sa.Column("patient_name", sa.String(100), nullable=False),
        sa.Column("patient_age", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("blood_type_needed", sa.String(3), nullable=False),
        sa.Column("units_required", sa.Integer(), nullable=False),
        sa.Column("hospital_name", sa.String(200), nullable=False),
        sa.Column("medical_reason", sa.Text(), nullable=False),
        sa.Column("college_roll_number", sa.String(50), nullable=False),
        sa.Column("college_email", sa.String(100), nullable=False),
        sa.Column("contact_number", sa.String(30), nullable=False),
        sa.Column("is_emergency", sa.Boolean(), nullable=True),
        sa.Column("hospital_reports_file_id", UUID(), nullable=True),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_blood_requests_blood_type_needed", "blood_requests", ["blood_type_needed"]
    )
    op.create_index("ix_blood_requests_is_emergency", "blood_requests", ["is_emergency"])
    op.create_index("ix_blood_requests_status", "blood_requests", ["status"])
    op.create_index("ix_blood_requests_requested_at", "blood_requests", ["requested_at"])
    op.create_index(
        "idx_request_emergency_status", "blood_requests", ["is_emergency", "status"]
    )

    op.create_table(
        "notifications",
        sa.Column("id", UUID(), primary_key=True, nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.String(500), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("target_audience", sa.String(10), nullable=False),
        sa.Column("related_id", UUID(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_notifications_target_audience", "notifications", ["target_audience"]
    )
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])

    op.create_table(
        "file_blobs",
        sa.Column("id", UUID(), primary_key=True, nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("content_type", sa.String(100), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("data", sa.LargeBinary(), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=True),
    )


def downgrade():
    op.drop_table("file_blobs")
    op.drop_index("ix_notifications_created_at", table_name="notifications")
    op.drop_index("ix_notifications_target_audience", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("idx_request_emergency_status", table_name="blood_requests")
    op.drop_index("ix_blood_requests_requested_at", table_name="blood_requests")
    op.drop_index("ix_blood_requests_status", table_name="blood_requests")
    op.drop_index("ix_blood_requests_is_emergency", table_name="blood_requests")
    op.drop_index("ix_blood_requests_blood_type_needed", table_name="blood_requests")
    op.drop_table("blood_requests")
    op.drop_index("ix_blood_inventory_blood_type", table_name="blood_inventory")
    op.drop_table("blood_inventory")
    op.drop_index("idx_donor_group_available", table_name="donors")
    op.drop_index("ix_donors_registered_at", table_name="donors")
    op.drop_index("ix_donors_blood_group", table_name="donors")
    op.drop_index("ix_donors_roll_number", table_name="donors")
    op.drop_table("donors")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
