"""Transient value types produced by the workflow extractor."""
from __future__ import annotations

from dataclasses import dataclass, field

FILE = "File"
DATABASE = "Database"
API = "API"


@dataclass(frozen=True)
class ConnectionItem:
    """A single input or output declared by a workflow node."""

    kind: str
    path: str
    query: str = ""


@dataclass(frozen=True)
class Contribution:
    """Inputs and outputs a single extraction rule found on one node."""

    inputs: tuple[ConnectionItem, ...] = ()
    outputs: tuple[ConnectionItem, ...] = ()


@dataclass
class ExtractionResult:
    """Everything extracted from one workflow document."""

    workflow_name: str
    inputs: list[ConnectionItem] = field(default_factory=list)
    outputs: list[ConnectionItem] = field(default_factory=list)

    def add(self, contribution: Contribution) -> None:
        self.inputs.extend(contribution.inputs)
        self.outputs.extend(contribution.outputs)
