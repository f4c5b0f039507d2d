"""initial taskfleet schema

Revision ID: 9b2e4c1d7a10
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "9b2e4c1d7a10"
down_revision = None
branch_labels = None
depends_on = None

ROLE = sa.Enum("PLATFORM_ADMIN", "PROJECT_MANAGER", "TASK_EXECUTOR", name="role")
PLATFORM = sa.Enum("XIAOHONGSHU", "DOUYIN", name="platform")
OPERATION_TYPE = sa.Enum("FOLLOW", "LIKE", "FAVORITE", "COMMENT", name="operationtype")
BILLING_TYPE = sa.Enum("EMPLOYEE_COUNT", "FOLLOW_COUNT", name="billingtype")
BILLING_STATUS = sa.Enum("PENDING", "PAID", "OVERDUE", name="billingstatus")
ADJUSTMENT_REASON = sa.Enum(
    "MANUAL_ADJUSTMENT", "ERROR_CORRECTION", "REFUND", "BONUS", "OTHER", name="adjustmentreason"
)
PROJECT_STATUS = sa.Enum("PLANNING", "ACTIVE", "COMPLETED", "CANCELLED", name="projectstatus")
TASK_STATUS = sa.Enum("PENDING", "IN_PROGRESS", "COMPLETED", "CANCELLED", name="taskstatus")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("username", sa.String(length=128), nullable=False),
        sa.Column("role", ROLE, nullable=False),
        sa.Column("display_name", sa.String(length=128), nullable=True),
        sa.Column("email", sa.String(length=256), nullable=True),
        sa.Column("company_name", sa.String(length=128), nullable=True),
        sa.Column("parent_id", sa.String(), nullable=True),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.ForeignKeyConstraint(["parent_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_index("idx_users_parent", "users", ["parent_id"], unique=False)
    op.create_index("idx_users_company", "users", ["company_name"], unique=False)

    op.create_table(
        "company_pricing_plans",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("company_name", sa.String(length=128), nullable=False),
        sa.Column("plan_name", sa.String(length=128), nullable=False),
        sa.Column("employee_monthly_fee", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_pricing_plan_company", "company_pricing_plans", ["company_name"], unique=False)

    op.create_table(
        "company_operation_pricing",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("company_name", sa.String(length=128), nullable=False),
        sa.Column("platform", PLATFORM, nullable=False),
        sa.Column("operation_type", OPERATION_TYPE, nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 3), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_operation_pricing_lookup",
        "company_operation_pricing",
        ["company_name", "platform", "operation_type"],
        unique=False,
    )

    op.create_table(
        "billing_records",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("subject_user_id", sa.String(), nullable=True),
        sa.Column("billing_type", BILLING_TYPE, nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 3), nullable=False),
        sa.Column("total_amount", sa.Numeric(14, 3), nullable=False),
        sa.Column("billing_period", sa.String(length=32), nullable=False),
        sa.Column("period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", BILLING_STATUS, nullable=False),
        sa.Column("reason", ADJUSTMENT_REASON, nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_billing_records_user", "billing_records", ["user_id"], unique=False)
    op.create_index("idx_billing_records_subject", "billing_records", ["subject_user_id"], unique=False)
    op.create_index("idx_billing_records_created", "billing_records", ["created_at"], unique=False)

    op.create_table(
        "projects",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("company_name", sa.String(length=128), nullable=True),
        sa.Column("manager_id", sa.String(), nullable=True),
        sa.Column("status", PROJECT_STATUS, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "tasks",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("status", TASK_STATUS, nullable=False),
        sa.Column("assignee_id", sa.String(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_tasks_project_id", "tasks", ["project_id"], unique=False)
    op.create_index("idx_tasks_assignee_id", "tasks", ["assignee_id"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actor_user_id", sa.String(), nullable=True),
        sa.Column("actor_username", sa.String(length=128), nullable=True),
        sa.Column("actor_role", ROLE, nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("company_name", sa.String(length=128), nullable=True),
        sa.Column("details_json", sa.Text(), nullable=False, server_default=sa.text("'{}'")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_occurred_at", "audit_logs", ["occurred_at"], unique=False)
    op.create_index("idx_audit_logs_company", "audit_logs", ["company_name"], unique=False)
    op.create_index("idx_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_audit_logs_entity", table_name="audit_logs")
    op.drop_index("idx_audit_logs_company", table_name="audit_logs")
    op.drop_index("idx_audit_logs_occurred_at", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_tasks_assignee_id", table_name="tasks")
    op.drop_index("idx_tasks_project_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_table("projects")
    op.drop_index("idx_billing_records_created", table_name="billing_records")
    op.drop_index("idx_billing_records_subject", table_name="billing_records")
    op.drop_index("idx_billing_records_user", table_name="billing_records")
    op.drop_table("billing_records")
    op.drop_index("idx_operation_pricing_lookup", table_name="company_operation_pricing")
    op.drop_table("company_operation_pricing")
    op.drop_index("idx_pricing_plan_company", table_name="company_pricing_plans")
    op.drop_table("company_pricing_plans")
    op.drop_index("idx_users_company", table_name="users")
    op.drop_index("idx_users_parent", table_name="users")
    op.drop_table("users")
