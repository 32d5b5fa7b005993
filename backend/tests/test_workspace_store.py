"""Tests for persisting lineage in the workspace store."""
from __future__ import annotations

import pathlib
import sys

import pytest
from sqlalchemy.exc import OperationalError

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.lineage.items import ConnectionItem, ExtractionResult
from backend.app.models import Connection, Datasource, ImportLog, Workflow


def _result(name: str, inputs=(), outputs=()) -> ExtractionResult:
    return ExtractionResult(name, inputs=list(inputs), outputs=list(outputs))


def _connections_of(store, workflow_id: int) -> list[tuple[str, str, str]]:
    snapshot = store.list_all()
    names = {row.id: row.name for row in snapshot.datasources}
    return sorted(
        (row.direction, names[row.datasource_id], row.query)
        for row in snapshot.connections
        if row.workflow_id == workflow_id
    )


def test_save_creates_rows(store):
    saved = store.save_workflow(
        _result(
            "sales.yxmd",
            inputs=[ConnectionItem("Database", "odbc:dsn=crm", "SELECT * FROM leads")],
            outputs=[ConnectionItem("File", "c:\\out\\leads.csv")],
        )
    )

    assert saved.success
    assert saved.value.name == "sales.yxmd"
    assert _connections_of(store, saved.value.id) == [
        ("input", "odbc:dsn=crm", "SELECT * FROM leads"),
        ("output", "c:\\out\\leads.csv", ""),
    ]
    datasource = store.find_datasource_by_name("odbc:dsn=crm")
    assert datasource.kind == "Database"
    assert datasource.alias == ""


def test_resave_replaces_connections_and_keeps_alias(store):
    first = store.save_workflow(
        _result(
            "wf.yxmd",
            inputs=[ConnectionItem("File", "c:\\a.csv"), ConnectionItem("File", "c:\\b.csv")],
        )
    )
    datasource = store.find_datasource_by_name("c:\\a.csv")
    assert store.update_datasource_alias(datasource.id, "Customer master").success

    second = store.save_workflow(_result("wf.yxmd", inputs=[ConnectionItem("File", "c:\\a.csv")]))

    assert second.value.id == first.value.id
    assert _connections_of(store, first.value.id) == [("input", "c:\\a.csv", "")]
    assert store.find_datasource_by_name("c:\\a.csv").alias == "Customer master"
    assert store.find_datasource_by_name("c:\\b.csv") is not None
    assert Workflow.query.count() == 1


def test_same_datasource_under_two_kinds_is_one_connection(store):
    saved = store.save_workflow(
        _result(
            "wf",
            inputs=[
                ConnectionItem("Database", "odbc:dsn=x", "first"),
                ConnectionItem("File", "odbc:dsn=x", "second"),
            ],
        )
    )

    assert _connections_of(store, saved.value.id) == [("input", "odbc:dsn=x", "first")]


def test_shared_datasource_is_reused(store):
    store.save_workflow(_result("producer", outputs=[ConnectionItem("File", "c:\\shared.csv")]))
    store.save_workflow(_result("consumer", inputs=[ConnectionItem("File", "c:\\shared.csv")]))

    snapshot = store.list_all()

    assert len(snapshot.datasources) == 1
    assert {row.direction for row in snapshot.connections} == {"input", "output"}


def test_delete_prunes_orphaned_datasources(store):
    producer = store.save_workflow(
        _result(
            "producer",
            outputs=[ConnectionItem("File", "c:\\shared.csv"), ConnectionItem("File", "c:\\only.csv")],
        )
    )
    store.save_workflow(_result("consumer", inputs=[ConnectionItem("File", "c:\\shared.csv")]))

    deleted = store.delete_workflow_cascade(producer.value.id)

    assert deleted.success
    assert deleted.value == 1
    assert store.find_workflow_by_name("producer") is None
    assert store.find_datasource_by_name("c:\\only.csv") is None
    assert store.find_datasource_by_name("c:\\shared.csv") is not None
    assert Connection.query.filter_by(workflow_id=producer.value.id).count() == 0


def test_delete_workflow_without_connections(store):
    saved = store.save_workflow(_result("empty"))

    deleted = store.delete_workflow_cascade(saved.value.id)

    assert deleted.success
    assert deleted.value == 0


def test_delete_unknown_workflow_reports_not_found(store):
    deleted = store.delete_workflow_cascade(12345)

    assert not deleted.success
    assert deleted.error == "workflow not found"


def test_update_alias_of_unknown_datasource(store):
    result = store.update_datasource_alias(999, "nothing")

    assert not result.success
    assert result.error == "datasource not found"


def test_failed_replace_keeps_previous_connections(store, monkeypatch: pytest.MonkeyPatch):
    from backend.app.workspace.store import WorkspaceStore

    saved = store.save_workflow(_result("wf", inputs=[ConnectionItem("File", "c:\\old.csv")]))

    def _fail(self, workflow_id, direction, items):
        raise OperationalError("INSERT INTO connections", {}, Exception("disk I/O error"))

    monkeypatch.setattr(WorkspaceStore, "_insert_connections", _fail)

    result = store.save_workflow(_result("wf", inputs=[ConnectionItem("File", "c:\\new.csv")]))

    assert not result.success
    assert "disk I/O error" in result.error
    monkeypatch.undo()
    assert _connections_of(store, saved.value.id) == [("input", "c:\\old.csv", "")]
    assert store.find_datasource_by_name("c:\\new.csv") is None


def test_replace_connections_directly(store):
    saved = store.save_workflow(_result("wf", inputs=[ConnectionItem("File", "c:\\a.csv")]))

    replaced = store.replace_connections(
        saved.value.id, [], [ConnectionItem("API", "https://api/x", "GET /x")]
    )

    assert replaced.success
    assert _connections_of(store, saved.value.id) == [("output", "https://api/x", "GET /x")]


def test_import_document_records_log(store):
    from backend.app.lineage.service import import_document

    document = (
        "<AlteryxDocument><Nodes><Node>"
        '<GuiSettings Plugin="AlteryxBasePluginsGui.DbFileInput.DbFileInput" />'
        "<Properties><Configuration><File>C:\\In.CSV</File></Configuration></Properties>"
        "</Node></Nodes></AlteryxDocument>"
    )

    outcome = import_document(store, document, "in.yxmd", source="cli")

    assert outcome.success
    assert outcome.inputs == 1
    assert store.find_datasource_by_name("c:\\in.csv") is not None
    entry = ImportLog.query.one()
    assert entry.source == "cli"
    assert entry.success is True
    assert Datasource.query.count() == 1


def test_batch_continues_after_failure(store, monkeypatch: pytest.MonkeyPatch):
    from backend.app.lineage.packages import WorkflowDocument
    from backend.app.lineage.service import import_documents
    from backend.app.workspace.store import StoreResult, WorkspaceStore

    original = WorkspaceStore.save_workflow

    def _flaky(self, result):
        if result.workflow_name == "bad.yxmd":
            return StoreResult.failure("database is locked")
        return original(self, result)

    monkeypatch.setattr(WorkspaceStore, "save_workflow", _flaky)

    outcomes = import_documents(
        store,
        [WorkflowDocument("bad.yxmd", "<AlteryxDocument />"), WorkflowDocument("good.yxmd", "<AlteryxDocument />")],
    )

    assert [outcome.success for outcome in outcomes] == [False, True]
    assert outcomes[0].error == "database is locked"
    assert store.find_workflow_by_name("good.yxmd") is not None
    assert ImportLog.query.filter_by(success=False).count() == 1


def test_oversized_package_is_recorded_as_failed(store):
    import io
    import zipfile

    from backend.app.lineage.service import import_file

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("Big.yxmd", b"<AlteryxDocument>" + b"0" * 10_000 + b"</AlteryxDocument>")

    outcomes = import_file(store, "Bundle.yxzp", buffer.getvalue(), max_member_size=100)

    assert [outcome.success for outcome in outcomes] == [False]
    assert "member limit" in outcomes[0].error
    assert store.find_workflow_by_name("Big.yxmd") is None
    entry = ImportLog.query.one()
    assert entry.source == "package"
    assert entry.filename == "Bundle.yxzp"
    assert entry.success is False
