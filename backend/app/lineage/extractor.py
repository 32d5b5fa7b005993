"""Turn a workflow document into the list of data inputs and outputs it declares."""
from __future__ import annotations

import logging
from xml.etree import ElementTree

from .annotation import annotation_rule
from .elements import iter_nodes
from .heuristics import HEURISTIC_RULES
from .items import ExtractionResult

logger = logging.getLogger(__name__)


def extract(document_text: str, workflow_name: str) -> ExtractionResult:
    """Extract the lineage of one workflow document.

    Extraction is best effort: documents that cannot be parsed produce an
    empty result and nodes that match no rule contribute nothing.
    """

    result = ExtractionResult(workflow_name=workflow_name)

    try:
        root = ElementTree.fromstring(document_text)
    except ElementTree.ParseError as exc:
        logger.warning("Workflow %s is not valid XML: %s", workflow_name, exc)
        return result

    for node in iter_nodes(root):
        declared = annotation_rule(node)
        if declared is not None:
            result.add(declared)
            continue

        for rule in HEURISTIC_RULES:
            contribution = rule(node)
            if contribution is not None:
                result.add(contribution)

    logger.debug(
        "Extracted %s inputs and %s outputs from %s",
        len(result.inputs),
        len(result.outputs),
        workflow_name,
    )
    return result
