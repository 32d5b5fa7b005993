"""Read models built from a workspace snapshot for the lineage views."""
from __future__ import annotations

from collections import Counter
from typing import Any

from ..workspace.store import DatasourceRow, WorkspaceSnapshot


def base_name(path: str) -> str:
    """Return the last path segment, for both Windows and POSIX separators."""

    return path.split("\\")[-1].split("/")[-1]


def datasource_display_names(datasources: list[DatasourceRow]) -> dict[int, str]:
    """Return the label shown for each datasource.

    Aliases win. Otherwise the short file name is used, unless another
    datasource shares it, in which case the full name is shown.
    """

    counts = Counter(base_name(datasource.name) for datasource in datasources)
    labels: dict[int, str] = {}
    for datasource in datasources:
        short = base_name(datasource.name)
        smart = datasource.name if counts[short] > 1 else short
        labels[datasource.id] = datasource.alias or smart
    return labels


def build_graph(snapshot: WorkspaceSnapshot) -> dict[str, list[dict[str, Any]]]:
    """Nodes and directed links of the lineage graph."""

    labels = datasource_display_names(snapshot.datasources)
    nodes: list[dict[str, Any]] = [
        {
            "id": f"workflow:{workflow.id}",
            "type": "workflow",
            "name": workflow.name,
            "display_name": workflow.name,
        }
        for workflow in snapshot.workflows
    ]
    nodes.extend(
        {
            "id": f"datasource:{datasource.id}",
            "type": datasource.kind,
            "name": datasource.name,
            "display_name": labels[datasource.id],
            "alias": datasource.alias,
        }
        for datasource in snapshot.datasources
    )

    links: list[dict[str, str]] = []
    for connection in snapshot.connections:
        workflow_node = f"workflow:{connection.workflow_id}"
        datasource_node = f"datasource:{connection.datasource_id}"
        if connection.direction == "input":
            links.append({"source": datasource_node, "target": workflow_node})
        else:
            links.append({"source": workflow_node, "target": datasource_node})

    return {"nodes": nodes, "links": links}


def inspect_workflow(snapshot: WorkspaceSnapshot, workflow_id: int) -> dict[str, Any] | None:
    """Inputs and outputs of one workflow with their queries."""

    workflow = next((row for row in snapshot.workflows if row.id == workflow_id), None)
    if workflow is None:
        return None

    datasources = {row.id: row for row in snapshot.datasources}
    sections: dict[str, list[dict[str, Any]]] = {"input": [], "output": []}
    for connection in snapshot.connections:
        if connection.workflow_id != workflow_id:
            continue
        datasource = datasources.get(connection.datasource_id)
        if datasource is None:
            continue
        sections[connection.direction].append(
            {
                "datasource_id": datasource.id,
                "name": datasource.name,
                "alias": datasource.alias,
                "kind": datasource.kind,
                "query": connection.query,
            }
        )

    return {
        "id": workflow.id,
        "name": workflow.name,
        "inputs": sections["input"],
        "outputs": sections["output"],
    }


def inspect_datasource(snapshot: WorkspaceSnapshot, datasource_id: int) -> dict[str, Any] | None:
    """Producers, consumers and distinct queries of one datasource."""

    datasource = next((row for row in snapshot.datasources if row.id == datasource_id), None)
    if datasource is None:
        return None

    workflows = {row.id: row for row in snapshot.workflows}
    producers: list[dict[str, Any]] = []
    consumers: list[dict[str, Any]] = []
    queries: list[str] = []
    for connection in snapshot.connections:
        if connection.datasource_id != datasource_id:
            continue
        if connection.query and connection.query not in queries:
            queries.append(connection.query)
        workflow = workflows.get(connection.workflow_id)
        if workflow is None:
            continue
        target = consumers if connection.direction == "input" else producers
        target.append({"workflow_id": workflow.id, "name": workflow.name})

    return {
        **datasource.to_dict(),
        "producers": producers,
        "consumers": consumers,
        "queries": queries,
    }


def search_workflows(snapshot: WorkspaceSnapshot, term: str) -> list[dict[str, Any]]:
    """Workflows whose name, datasources, aliases or queries contain ``term``."""

    needle = term.strip().lower()
    datasources = {row.id: row for row in snapshot.datasources}
    matches: list[dict[str, Any]] = []
    for workflow in snapshot.workflows:
        if not needle or needle in workflow.name.lower():
            matches.append(workflow.to_dict())
            continue
        for connection in snapshot.connections:
            if connection.workflow_id != workflow.id:
                continue
            datasource = datasources.get(connection.datasource_id)
            haystacks = [connection.query]
            if datasource is not None:
                haystacks.extend([datasource.name, datasource.alias])
            if any(needle in (value or "").lower() for value in haystacks):
                matches.append(workflow.to_dict())
                break
    return matches
