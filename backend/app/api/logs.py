"""API endpoints exposing workflow import log entries."""

from __future__ import annotations

import json
from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request

from ..models.logs import IMPORT_SOURCES, ImportLog

bp = Blueprint("logs", __name__)


def _serialize_entry(entry: ImportLog) -> dict[str, object]:
    return {
        "id": entry.id,
        "source": entry.source,
        "filename": entry.filename,
        "workflow": entry.workflow_name,
        "success": entry.success,
        "message": entry.message,
        "inputs": entry.inputs,
        "outputs": entry.outputs,
        "createdAt": entry.created_at.isoformat() + "Z",
    }


def _filtered_query(source: str | None, status: str | None):
    query = ImportLog.query
    if source:
        if source not in IMPORT_SOURCES:
            return None
        query = query.filter_by(source=source)
    if status:
        if status not in {"success", "failed"}:
            return None
        query = query.filter_by(success=status == "success")
    return query


@bp.get("/logs")
def get_logs() -> tuple[object, int]:
    limit = request.args.get("limit", type=int) or 200
    limit = max(1, min(limit, 200))

    query = _filtered_query(request.args.get("source"), request.args.get("status"))
    if query is None:
        return jsonify({"error": "invalid filter"}), HTTPStatus.BAD_REQUEST

    entries = query.order_by(ImportLog.id.desc()).limit(limit).all()
    return jsonify([_serialize_entry(entry) for entry in entries]), HTTPStatus.OK


@bp.get("/logs/download")
def download_logs() -> Response | tuple[object, int]:
    limit = request.args.get("limit", type=int) or 200
    limit = max(1, min(limit, 1000))

    query = _filtered_query(request.args.get("source"), request.args.get("status"))
    if query is None:
        return jsonify({"error": "invalid filter"}), HTTPStatus.BAD_REQUEST

    entries = query.order_by(ImportLog.id.desc()).limit(limit).all()
    lines = [json.dumps(_serialize_entry(entry)) for entry in reversed(entries)]
    response = Response("\n".join(lines), mimetype="application/x-ndjson")
    response.headers["Content-Disposition"] = "attachment; filename=import-logs.ndjson"
    return response
