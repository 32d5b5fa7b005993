"""Health check endpoint."""

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
def health() -> tuple[object, int]:
    """Return the service health status, including workspace reachability."""
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.warning("Workspace database unreachable: %s", exc)
        return jsonify({"status": "error", "workspace": "unreachable"}), HTTPStatus.SERVICE_UNAVAILABLE
    return jsonify({"status": "ok", "workspace": "ok"}), HTTPStatus.OK
