"""REST API endpoints for importing, listing and deleting workflows."""

from __future__ import annotations

from collections import Counter
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from ..extensions import limiter
from ..lineage.packages import MAX_MEMBER_BYTES, is_supported
from ..lineage.service import import_file
from ..lineage.views import inspect_workflow
from ..workspace.context import current_store
from ..workspace.store import WORKFLOW_NOT_FOUND

bp = Blueprint("workflows", __name__)


def _import_rate_limit() -> str:
    return current_app.config.get("IMPORT_RATE_LIMIT", "30 per minute")


@bp.post("/workflows/import")
@limiter.limit(_import_rate_limit)
def import_workflows() -> tuple[object, int]:
    """Import uploaded workflow files and packages one after another."""

    uploads = request.files.getlist("files")
    if not uploads:
        return jsonify({"error": "files are required"}), HTTPStatus.BAD_REQUEST

    store = current_store()
    max_member_size = current_app.config.get("MAX_PACKAGE_MEMBER_BYTES", MAX_MEMBER_BYTES)
    results: list[dict[str, object]] = []
    skipped: list[str] = []
    for upload in uploads:
        filename = upload.filename or ""
        if not is_supported(filename):
            skipped.append(filename)
            continue
        outcomes = import_file(
            store, filename, upload.read(), max_member_size=max_member_size
        )
        results.extend(outcome.to_dict() for outcome in outcomes)

    if skipped:
        current_app.logger.info("Skipped unsupported uploads: %s", ", ".join(skipped))

    payload = {
        "results": results,
        "skipped": skipped,
        "imported": sum(1 for result in results if result["success"]),
        "failed": sum(1 for result in results if not result["success"]),
    }
    return jsonify(payload), HTTPStatus.OK


@bp.get("/workflows")
def list_workflows() -> tuple[object, int]:
    snapshot = current_store().list_all()
    counts = Counter(
        (connection.workflow_id, connection.direction) for connection in snapshot.connections
    )
    return (
        jsonify(
            [
                {
                    "id": workflow.id,
                    "name": workflow.name,
                    "inputs": counts[(workflow.id, "input")],
                    "outputs": counts[(workflow.id, "output")],
                }
                for workflow in snapshot.workflows
            ]
        ),
        HTTPStatus.OK,
    )


@bp.get("/workflows/<int:workflow_id>")
def get_workflow(workflow_id: int) -> tuple[object, int]:
    details = inspect_workflow(current_store().list_all(), workflow_id)
    if details is None:
        return jsonify({"error": "workflow not found"}), HTTPStatus.NOT_FOUND
    return jsonify(details), HTTPStatus.OK


@bp.delete("/workflows/<int:workflow_id>")
def delete_workflow(workflow_id: int) -> tuple[object, int]:
    result = current_store().delete_workflow_cascade(workflow_id)
    if not result.success:
        if result.error == WORKFLOW_NOT_FOUND:
            return jsonify({"error": result.error}), HTTPStatus.NOT_FOUND
        return jsonify({"error": result.error}), HTTPStatus.INTERNAL_SERVER_ERROR
    return jsonify({"deleted": workflow_id, "pruned_datasources": result.value}), HTTPStatus.OK
