"""API endpoint exporting a portable snapshot of the lineage catalogue."""
from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Blueprint, jsonify

from ..workspace.context import current_store
from ..workspace.store import WorkspaceSnapshot

bp = Blueprint("export", __name__)


def _serialize_workflows(snapshot: WorkspaceSnapshot) -> list[dict[str, Any]]:
    """Describe every workflow by name, with datasources referenced by name."""

    datasources = {row.id: row for row in snapshot.datasources}
    exported: dict[int, dict[str, Any]] = {
        workflow.id: {"name": workflow.name, "inputs": [], "outputs": []}
        for workflow in snapshot.workflows
    }
    for connection in snapshot.connections:
        workflow = exported.get(connection.workflow_id)
        datasource = datasources.get(connection.datasource_id)
        if workflow is None or datasource is None:
            continue
        section = "inputs" if connection.direction == "input" else "outputs"
        workflow[section].append(
            {"kind": datasource.kind, "path": datasource.name, "query": connection.query}
        )
    return sorted(exported.values(), key=lambda item: item["name"])


def _serialize_datasources(snapshot: WorkspaceSnapshot) -> list[dict[str, Any]]:
    return [
        {"name": row.name, "kind": row.kind, "alias": row.alias}
        for row in sorted(snapshot.datasources, key=lambda row: row.name)
    ]


@bp.get("/export")
def export_lineage() -> tuple[object, int]:
    """Return a snapshot of all workflows and datasources keyed by name."""

    snapshot = current_store().list_all()
    payload = {
        "version": 1,
        "workflows": _serialize_workflows(snapshot),
        "datasources": _serialize_datasources(snapshot),
    }
    return jsonify(payload), HTTPStatus.OK
