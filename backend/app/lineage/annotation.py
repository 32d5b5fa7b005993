"""Lineage declared by workflow authors inside node annotations.

Authors can document a tool's data access explicitly by embedding a block in
the tool's annotation text::

    --- lineage ---
    inputs:
    - type: File
      path: \\\\share\\sales\\orders.csv
    outputs:
    - type: Database
      path: odbc:DSN=Warehouse
    ---

A node carrying such a block is described by the block alone; no plugin
heuristics are applied to it.
"""
from __future__ import annotations

import re
from xml.etree.ElementTree import Element

from .elements import find_own, text_of
from .items import ConnectionItem, Contribution

_BLOCK_RE = re.compile(r"--- lineage ---(.*?)---", re.DOTALL)
_TYPE_RE = re.compile(r"- type:\s*(\w+)")
_PATH_RE = re.compile(r"path:\s*(.*)")

_INPUTS = "inputs"
_OUTPUTS = "outputs"


def annotation_text(node: Element) -> str:
    """Return the explicit annotation of ``node``, else its default annotation."""

    annotation = find_own(node, "Annotation")
    if annotation is None:
        return ""
    explicit = text_of(annotation.find(".//AnnotationText"))
    if explicit:
        return explicit
    return text_of(annotation.find(".//DefaultAnnotationText"))


def parse_lineage_block(text: str) -> Contribution | None:
    """Parse the first lineage block in ``text``.

    Returns ``None`` when the text holds no block. Records that appear before
    any section header are treated as outputs.
    """

    match = _BLOCK_RE.search(text)
    if match is None:
        return None

    sections: dict[str, list[ConnectionItem]] = {_INPUTS: [], _OUTPUTS: []}
    current: str | None = None
    lines = match.group(1).split("\n")

    index = 0
    while index < len(lines):
        line = lines[index].strip()
        index += 1
        if line.startswith("inputs:"):
            current = _INPUTS
            continue
        if line.startswith("outputs:"):
            current = _OUTPUTS
            continue
        if not line.startswith("- type:"):
            continue

        type_match = _TYPE_RE.search(line)
        if type_match is None or index >= len(lines):
            continue
        path_match = _PATH_RE.search(lines[index].strip())
        if path_match is None:
            continue

        index += 1
        target = _INPUTS if current == _INPUTS else _OUTPUTS
        sections[target].append(ConnectionItem(type_match.group(1), path_match.group(1)))

    return Contribution(inputs=tuple(sections[_INPUTS]), outputs=tuple(sections[_OUTPUTS]))


def annotation_rule(node: Element) -> Contribution | None:
    """Extraction rule reading a lineage block from the node annotation."""

    return parse_lineage_block(annotation_text(node))
