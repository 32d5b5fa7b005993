"""Normalisation and de-duplication of extracted connections."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .items import ConnectionItem, ExtractionResult


def connection_key(item: ConnectionItem) -> str:
    """Identity of a connection within one direction of a workflow.

    The query is not part of the key: several queries against the same
    datasource collapse into a single edge.
    """

    return f"{item.kind}|{item.path}"


def _dedupe(items: Iterable[ConnectionItem]) -> list[ConnectionItem]:
    seen: set[str] = set()
    unique: list[ConnectionItem] = []
    for item in items:
        normalized = replace(item, path=item.path.lower())
        key = connection_key(normalized)
        if key in seen:
            continue
        seen.add(key)
        unique.append(normalized)
    return unique


def normalize(result: ExtractionResult) -> ExtractionResult:
    """Lower-case connection paths and drop duplicate inputs and outputs.

    The first occurrence of each key wins, so its query is the one kept.
    """

    return ExtractionResult(
        workflow_name=result.workflow_name,
        inputs=_dedupe(result.inputs),
        outputs=_dedupe(result.outputs),
    )
