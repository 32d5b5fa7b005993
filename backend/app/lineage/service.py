"""Import workflow documents into a workspace and record the outcome."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from ..models.logs import ImportLog
from ..workspace.store import WorkspaceStore
from .extractor import extract
from .normalizer import normalize
from .packages import (
    MAX_MEMBER_BYTES,
    PackageError,
    WorkflowDocument,
    is_package_file,
    read_workflow_documents,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportOutcome:
    """Result of importing one workflow document."""

    filename: str
    workflow_name: str | None
    success: bool
    error: str | None = None
    workflow_id: int | None = None
    inputs: int = 0
    outputs: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _record(store: WorkspaceStore, source: str, outcome: ImportOutcome) -> None:
    """Persist an import log entry; a failure here never fails the import."""

    entry = ImportLog(
        source=source,
        filename=outcome.filename,
        workflow_name=outcome.workflow_name,
        success=outcome.success,
        message=outcome.error or "",
        inputs=outcome.inputs,
        outputs=outcome.outputs,
    )
    try:
        store.session.add(entry)
        store.session.commit()
    except SQLAlchemyError:
        logger.exception("Failed to persist import log for %s", outcome.filename)
        store.session.rollback()


def import_document(
    store: WorkspaceStore,
    text: str,
    workflow_name: str,
    source: str = "upload",
    filename: str | None = None,
) -> ImportOutcome:
    """Extract, normalise and store the lineage of a single document."""

    result = normalize(extract(text, workflow_name))
    saved = store.save_workflow(result)
    if saved.success and saved.value is not None:
        outcome = ImportOutcome(
            filename=filename or workflow_name,
            workflow_name=workflow_name,
            success=True,
            workflow_id=saved.value.id,
            inputs=len(result.inputs),
            outputs=len(result.outputs),
        )
        logger.info(
            "Imported workflow %s (%s inputs, %s outputs)",
            workflow_name,
            outcome.inputs,
            outcome.outputs,
        )
    else:
        outcome = ImportOutcome(
            filename=filename or workflow_name,
            workflow_name=workflow_name,
            success=False,
            error=saved.error,
        )
        logger.warning("Import of workflow %s failed: %s", workflow_name, saved.error)

    _record(store, source, outcome)
    return outcome


def import_documents(
    store: WorkspaceStore,
    documents: Iterable[WorkflowDocument],
    source: str = "upload",
    filename: str | None = None,
) -> list[ImportOutcome]:
    """Import documents one after another; a failure never stops the batch.

    ``filename`` names the upload the documents came from, when they share one.
    """

    return [
        import_document(store, document.text, document.name, source=source, filename=filename)
        for document in documents
    ]


def record_failure(
    store: WorkspaceStore, filename: str, error: str, source: str = "upload"
) -> ImportOutcome:
    """Log and record a file that could not be turned into workflow documents."""

    outcome = ImportOutcome(filename=filename, workflow_name=None, success=False, error=error)
    logger.warning("Import of %s failed: %s", filename, error)
    _record(store, source, outcome)
    return outcome


def import_file(
    store: WorkspaceStore,
    filename: str,
    payload: bytes,
    source: str | None = None,
    max_member_size: int = MAX_MEMBER_BYTES,
) -> list[ImportOutcome]:
    """Import an uploaded workflow file or package."""

    if source is None:
        source = "package" if is_package_file(filename) else "upload"

    try:
        documents = read_workflow_documents(filename, payload, max_member_size)
    except PackageError as exc:
        return [record_failure(store, filename, str(exc), source=source)]

    return import_documents(store, documents, source=source, filename=filename)
