"""Read workflow documents out of uploaded files and zip packages."""
from __future__ import annotations

import io
import logging
import posixpath
import zipfile
from dataclasses import dataclass

logger = logging.getLogger(__name__)

WORKFLOW_EXTENSIONS = (".yxmd", ".yxmc", ".yxwz")
PACKAGE_EXTENSIONS = (".yxzp",)
MAX_MEMBER_BYTES = 256 * 1024 * 1024


class PackageError(Exception):
    """Raised when a workflow package cannot be opened."""


@dataclass(frozen=True)
class WorkflowDocument:
    name: str
    text: str


def decode_document(payload: bytes) -> str:
    """Decode workflow file bytes, tolerating a BOM and stray bytes."""

    return payload.decode("utf-8-sig", errors="replace")


def is_workflow_file(filename: str) -> bool:
    return filename.lower().endswith(WORKFLOW_EXTENSIONS)


def is_package_file(filename: str) -> bool:
    return filename.lower().endswith(PACKAGE_EXTENSIONS)


def is_supported(filename: str) -> bool:
    return is_workflow_file(filename) or is_package_file(filename)


def read_package(
    payload: bytes, max_member_size: int = MAX_MEMBER_BYTES
) -> list[WorkflowDocument]:
    """Return every workflow contained in a zip package, in archive order.

    Members that unpack to more than ``max_member_size`` bytes are rejected.
    """

    try:
        archive = zipfile.ZipFile(io.BytesIO(payload))
    except zipfile.BadZipFile as exc:
        raise PackageError(f"not a valid workflow package: {exc}") from exc

    documents: list[WorkflowDocument] = []
    with archive:
        for info in archive.infolist():
            if info.is_dir() or not is_workflow_file(info.filename):
                continue
            name = posixpath.basename(info.filename.replace("\\", "/"))
            if info.file_size > max_member_size:
                raise PackageError(
                    f"{info.filename} exceeds the {max_member_size} byte member limit"
                )
            try:
                with archive.open(info) as member:
                    payload_bytes = member.read(max_member_size + 1)
            except (zipfile.BadZipFile, OSError, RuntimeError) as exc:
                raise PackageError(f"cannot read {info.filename}: {exc}") from exc
            if len(payload_bytes) > max_member_size:
                raise PackageError(
                    f"{info.filename} exceeds the {max_member_size} byte member limit"
                )
            documents.append(WorkflowDocument(name=name, text=decode_document(payload_bytes)))

    logger.debug("Package contained %s workflow documents", len(documents))
    return documents


def read_workflow_documents(
    filename: str, payload: bytes, max_member_size: int = MAX_MEMBER_BYTES
) -> list[WorkflowDocument]:
    """Turn one uploaded file into the workflow documents it holds.

    Unsupported files yield no documents. Corrupt or oversized packages raise
    :class:`PackageError`.
    """

    if is_workflow_file(filename):
        return [WorkflowDocument(name=filename, text=decode_document(payload))]
    if is_package_file(filename):
        return read_package(payload, max_member_size)
    return []
