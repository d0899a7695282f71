# File: alembic/versions/0001_workspace_state.py | Version: 1.0 | Title: Workspace state blobs + advisory roles
import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_workspace_state"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "workspace_states",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("location_id", sa.String(length=128), nullable=False),
        sa.Column("workspace_id", sa.String(length=128), nullable=False),
        sa.Column("state_json", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("location_id", "workspace_id", name="uq_workspace_state_key"),
    )
    op.create_index(
        op.f("ix_workspace_states_location_id"), "workspace_states", ["location_id"], unique=False
    )

    op.create_table(
        "workspace_roles",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("location_id", sa.String(length=128), nullable=False),
        sa.Column("workspace_id", sa.String(length=128), nullable=False),
        sa.Column("user_email", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=True),
        sa.UniqueConstraint(
            "location_id", "workspace_id", "user_email", name="uq_workspace_role_user"
        ),
    )
    op.create_index(
        "ix_workspace_roles_scope", "workspace_roles", ["location_id", "workspace_id"], unique=False
    )


def downgrade():
    op.drop_index("ix_workspace_roles_scope", table_name="workspace_roles")
    op.drop_table("workspace_roles")
    op.drop_index(op.f("ix_workspace_states_location_id"), table_name="workspace_states")
    op.drop_table("workspace_states")
