# File: taskgrid/models/__init__.py | Version: 1.1
from taskgrid.models.workspace_state import WorkspaceRoleRow, WorkspaceStateRow

__all__ = ["WorkspaceStateRow", "WorkspaceRoleRow"]
