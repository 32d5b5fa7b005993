"""Rank workflows by how much of the lineage graph depends on their outputs.

Workflows and datasources form a bipartite graph: a workflow points at the
datasources it writes, a datasource points at the workflows that read it. The
criticality of a workflow is the number of distinct nodes reachable from its
direct outputs, found with one breadth-first traversal per workflow.
"""
from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol


class WorkflowLike(Protocol):
    id: int
    name: str


class ConnectionLike(Protocol):
    workflow_id: int
    datasource_id: int
    direction: str


@dataclass(frozen=True)
class WorkflowNode:
    id: int


@dataclass(frozen=True)
class DatasourceNode:
    id: int


GraphNode = WorkflowNode | DatasourceNode


@dataclass(frozen=True)
class CriticalityScore:
    """A workflow together with its downstream impact score."""

    id: int
    name: str
    criticality_score: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "criticality_score": self.criticality_score}


class DependencyGraph:
    """Read-only adjacency indexes shared by every traversal."""

    def __init__(self, connections: Iterable[ConnectionLike]) -> None:
        consumers: dict[int, list[int]] = defaultdict(list)
        produced: dict[int, list[int]] = defaultdict(list)
        for connection in connections:
            if connection.direction == "input":
                consumers[connection.datasource_id].append(connection.workflow_id)
            elif connection.direction == "output":
                produced[connection.workflow_id].append(connection.datasource_id)
        self._consumers = dict(consumers)
        self._produced = dict(produced)

    def consumers_of(self, datasource_id: int) -> list[int]:
        return self._consumers.get(datasource_id, [])

    def outputs_of(self, workflow_id: int) -> list[int]:
        return self._produced.get(workflow_id, [])

    def successors(self, node: GraphNode) -> list[GraphNode]:
        if isinstance(node, DatasourceNode):
            return [WorkflowNode(workflow_id) for workflow_id in self.consumers_of(node.id)]
        return [DatasourceNode(datasource_id) for datasource_id in self.outputs_of(node.id)]

    def downstream(self, workflow_id: int) -> list[GraphNode]:
        """Return the nodes reachable from the direct outputs of a workflow.

        The workflow itself is only included when a cycle leads back to it as
        a consumer of one of its downstream datasources.
        """

        visited: set[GraphNode] = set()
        queue: deque[GraphNode] = deque()
        for datasource_id in self.outputs_of(workflow_id):
            seed = DatasourceNode(datasource_id)
            if seed not in visited:
                visited.add(seed)
                queue.append(seed)

        reached: list[GraphNode] = []
        while queue:
            node = queue.popleft()
            reached.append(node)
            for neighbour in self.successors(node):
                if neighbour in visited:
                    continue
                visited.add(neighbour)
                queue.append(neighbour)
        return reached


def rank_by_criticality(
    workflows: Sequence[WorkflowLike],
    datasources: Sequence[Any],
    connections: Iterable[ConnectionLike],
) -> list[CriticalityScore]:
    """Score every workflow and return them ordered by descending score.

    ``datasources`` is accepted for symmetry with the stored tables; scores
    only depend on the connections. Workflows with equal scores keep their
    input order.
    """

    graph = DependencyGraph(connections)
    scores = [
        CriticalityScore(workflow.id, workflow.name, len(graph.downstream(workflow.id)))
        for workflow in workflows
    ]
    return sorted(scores, key=lambda score: score.criticality_score, reverse=True)
