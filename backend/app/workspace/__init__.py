"""Workspace persistence for extracted lineage."""

from .store import (
    ConnectionRow,
    DatasourceRow,
    DATASOURCE_NOT_FOUND,
    WORKFLOW_NOT_FOUND,
    StoreResult,
    WorkflowRow,
    WorkspaceSnapshot,
    WorkspaceStore,
)

__all__ = [
    "DATASOURCE_NOT_FOUND",
    "WORKFLOW_NOT_FOUND",
    "ConnectionRow",
    "DatasourceRow",
    "StoreResult",
    "WorkflowRow",
    "WorkspaceSnapshot",
    "WorkspaceStore",
]
