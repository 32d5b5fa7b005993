"""Persistence of extracted lineage in a relational workspace."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..lineage.items import ConnectionItem, ExtractionResult
from ..models.connection import Connection
from ..models.datasource import Datasource
from ..models.workflow import Workflow

logger = logging.getLogger(__name__)

T = TypeVar("T")

WORKFLOW_NOT_FOUND = "workflow not found"
DATASOURCE_NOT_FOUND = "datasource not found"


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of a store operation that may fail."""

    success: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> StoreResult[T]:
        return cls(success=True, value=value)

    @classmethod
    def failure(cls, error: str) -> StoreResult[T]:
        return cls(success=False, error=error)


@dataclass(frozen=True)
class WorkflowRow:
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DatasourceRow:
    id: int
    name: str
    kind: str
    alias: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ConnectionRow:
    id: int
    workflow_id: int
    datasource_id: int
    direction: str
    query: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WorkspaceSnapshot:
    """Every row of the workflow, datasource and connection tables."""

    workflows: list[WorkflowRow] = field(default_factory=list)
    datasources: list[DatasourceRow] = field(default_factory=list)
    connections: list[ConnectionRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "workflows": [row.to_dict() for row in self.workflows],
            "datasources": [row.to_dict() for row in self.datasources],
            "connections": [row.to_dict() for row in self.connections],
        }


def _workflow_row(workflow: Workflow) -> WorkflowRow:
    return WorkflowRow(id=workflow.id, name=workflow.name)


def _datasource_row(datasource: Datasource) -> DatasourceRow:
    return DatasourceRow(
        id=datasource.id,
        name=datasource.name,
        kind=datasource.kind,
        alias=datasource.alias or "",
    )


def _connection_row(connection: Connection) -> ConnectionRow:
    return ConnectionRow(
        id=connection.id,
        workflow_id=connection.workflow_id,
        datasource_id=connection.datasource_id,
        direction=connection.direction,
        query=connection.query or "",
    )


class WorkspaceStore:
    """Lineage storage bound to one open workspace session.

    Lookups and creations only flush, so several of them can be combined in
    one transaction. Operations returning a :class:`StoreResult` commit on
    success and roll back on any database error.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_workflow_by_name(self, name: str) -> Workflow | None:
        return self.session.query(Workflow).filter_by(name=name).first()

    def create_workflow(self, name: str) -> Workflow:
        workflow = Workflow(name=name)
        self.session.add(workflow)
        self.session.flush()
        return workflow

    def find_datasource_by_name(self, name: str) -> Datasource | None:
        return self.session.query(Datasource).filter_by(name=name).first()

    def create_datasource(self, name: str, kind: str) -> Datasource:
        datasource = Datasource(name=name, kind=kind, alias="")
        self.session.add(datasource)
        self.session.flush()
        return datasource

    def _get_or_create_workflow(self, name: str) -> Workflow:
        workflow = self.find_workflow_by_name(name)
        if workflow is None:
            workflow = self.create_workflow(name)
        return workflow

    def _get_or_create_datasource(self, name: str, kind: str) -> Datasource:
        datasource = self.find_datasource_by_name(name)
        if datasource is None:
            datasource = self.create_datasource(name, kind)
        return datasource

    def _delete_connections(self, workflow_id: int) -> int:
        deleted = (
            self.session.query(Connection)
            .filter(Connection.workflow_id == workflow_id)
            .delete(synchronize_session="fetch")
        )
        self.session.flush()
        return deleted

    def _insert_connections(
        self, workflow_id: int, direction: str, items: Iterable[ConnectionItem]
    ) -> int:
        seen: set[int] = set()
        for item in items:
            datasource = self._get_or_create_datasource(item.path, item.kind)
            if datasource.id in seen:
                continue
            seen.add(datasource.id)
            self.session.add(
                Connection(
                    workflow_id=workflow_id,
                    datasource_id=datasource.id,
                    direction=direction,
                    query=item.query,
                )
            )
        self.session.flush()
        return len(seen)

    def _replace(
        self,
        workflow_id: int,
        inputs: Iterable[ConnectionItem],
        outputs: Iterable[ConnectionItem],
    ) -> None:
        self._delete_connections(workflow_id)
        self._insert_connections(workflow_id, "input", inputs)
        self._insert_connections(workflow_id, "output", outputs)

    def replace_connections(
        self,
        workflow_id: int,
        inputs: Iterable[ConnectionItem],
        outputs: Iterable[ConnectionItem],
    ) -> StoreResult[None]:
        """Atomically swap the connection set of an existing workflow."""

        try:
            self._replace(workflow_id, inputs, outputs)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Replacing connections of workflow %s failed: %s", workflow_id, exc)
            return StoreResult.failure(str(exc))
        return StoreResult.ok()

    def save_workflow(self, result: ExtractionResult) -> StoreResult[WorkflowRow]:
        """Store a normalised extraction result, replacing any previous import.

        The workflow row and any datasource rows are reused when they already
        exist; datasource aliases are left untouched.
        """

        try:
            workflow = self._get_or_create_workflow(result.workflow_name)
            self._replace(workflow.id, result.inputs, result.outputs)
            self.session.commit()
            row = _workflow_row(workflow)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Saving workflow %s failed: %s", result.workflow_name, exc)
            return StoreResult.failure(str(exc))
        return StoreResult.ok(row)

    def _prune_orphaned_datasources(self) -> int:
        referenced = select(Connection.datasource_id)
        orphans = self.session.query(Datasource).filter(Datasource.id.notin_(referenced)).all()
        for datasource in orphans:
            self.session.delete(datasource)
        self.session.flush()
        return len(orphans)

    def delete_workflow_cascade(self, workflow_id: int) -> StoreResult[int]:
        """Delete a workflow, its connections and every unreferenced datasource.

        The returned value is the number of datasources pruned.
        """

        try:
            workflow = self.session.get(Workflow, workflow_id)
            if workflow is None:
                return StoreResult.failure(WORKFLOW_NOT_FOUND)
            self._delete_connections(workflow_id)
            self.session.delete(workflow)
            self.session.flush()
            pruned = self._prune_orphaned_datasources()
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Deleting workflow %s failed: %s", workflow_id, exc)
            return StoreResult.failure(str(exc))
        return StoreResult.ok(pruned)

    def update_datasource_alias(self, datasource_id: int, alias: str) -> StoreResult[DatasourceRow]:
        try:
            datasource = self.session.get(Datasource, datasource_id)
            if datasource is None:
                return StoreResult.failure(DATASOURCE_NOT_FOUND)
            datasource.alias = alias
            self.session.commit()
            row = _datasource_row(datasource)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Updating alias of datasource %s failed: %s", datasource_id, exc)
            return StoreResult.failure(str(exc))
        return StoreResult.ok(row)

    def list_all(self) -> WorkspaceSnapshot:
        workflows = self.session.query(Workflow).order_by(Workflow.id.asc()).all()
        datasources = self.session.query(Datasource).order_by(Datasource.id.asc()).all()
        connections = self.session.query(Connection).order_by(Connection.id.asc()).all()
        return WorkspaceSnapshot(
            workflows=[_workflow_row(row) for row in workflows],
            datasources=[_datasource_row(row) for row in datasources],
            connections=[_connection_row(row) for row in connections],
        )
