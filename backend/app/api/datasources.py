"""REST API endpoints for datasources and their display aliases."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Blueprint, jsonify, request

from ..lineage.views import inspect_datasource
from ..workspace.context import current_store
from ..workspace.store import DATASOURCE_NOT_FOUND

bp = Blueprint("datasources", __name__)

MAX_ALIAS_LENGTH = 255


def _normalize_alias(value: Any) -> tuple[str, list[str]]:
    """Validate the alias payload; ``None`` clears the alias."""

    if value is None:
        return "", []
    if not isinstance(value, str):
        return "", ["alias must be a string or null"]
    alias = value.strip()
    if len(alias) > MAX_ALIAS_LENGTH:
        return "", [f"alias must be at most {MAX_ALIAS_LENGTH} characters"]
    return alias, []


@bp.get("/datasources")
def list_datasources() -> tuple[object, int]:
    snapshot = current_store().list_all()
    return jsonify([row.to_dict() for row in snapshot.datasources]), HTTPStatus.OK


@bp.get("/datasources/<int:datasource_id>")
def get_datasource(datasource_id: int) -> tuple[object, int]:
    details = inspect_datasource(current_store().list_all(), datasource_id)
    if details is None:
        return jsonify({"error": "datasource not found"}), HTTPStatus.NOT_FOUND
    return jsonify(details), HTTPStatus.OK


@bp.put("/datasources/<int:datasource_id>/alias")
def update_alias(datasource_id: int) -> tuple[object, int]:
    payload = request.get_json(silent=True, force=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return jsonify({"error": "payload must be an object"}), HTTPStatus.BAD_REQUEST
    if "alias" not in payload:
        return jsonify({"error": "alias is required"}), HTTPStatus.BAD_REQUEST

    alias, errors = _normalize_alias(payload.get("alias"))
    if errors:
        return jsonify({"errors": errors}), HTTPStatus.BAD_REQUEST

    result = current_store().update_datasource_alias(datasource_id, alias)
    if not result.success or result.value is None:
        if result.error == DATASOURCE_NOT_FOUND:
            return jsonify({"error": result.error}), HTTPStatus.NOT_FOUND
        return jsonify({"error": result.error}), HTTPStatus.INTERNAL_SERVER_ERROR
    return jsonify(result.value.to_dict()), HTTPStatus.OK
