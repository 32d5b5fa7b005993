"""REST API endpoints for the lineage graph and criticality ranking."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from ..lineage.criticality import rank_by_criticality
from ..lineage.views import build_graph, search_workflows
from ..workspace.context import current_store

bp = Blueprint("lineage", __name__)


@bp.get("/lineage")
def load_all() -> tuple[object, int]:
    return jsonify(current_store().list_all().to_dict()), HTTPStatus.OK


@bp.get("/lineage/graph")
def graph() -> tuple[object, int]:
    return jsonify(build_graph(current_store().list_all())), HTTPStatus.OK


@bp.get("/lineage/criticality")
def criticality() -> tuple[object, int]:
    snapshot = current_store().list_all()
    ranked = rank_by_criticality(snapshot.workflows, snapshot.datasources, snapshot.connections)
    limit = request.args.get("limit", type=int)
    if limit is not None:
        ranked = ranked[: max(limit, 0)]
    return jsonify([score.to_dict() for score in ranked]), HTTPStatus.OK


@bp.get("/lineage/search")
def search() -> tuple[object, int]:
    term = request.args.get("q", "")
    return jsonify(search_workflows(current_store().list_all(), term)), HTTPStatus.OK
