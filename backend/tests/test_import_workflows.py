"""Tests for the command line workflow importer."""
from __future__ import annotations

import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.scripts import import_workflows

INPUT_DOCUMENT = (
    "<AlteryxDocument><Nodes><Node ToolID=\"1\">"
    "<GuiSettings Plugin=\"AlteryxBasePluginsGui.DbFileInput.DbFileInput\" />"
    "<Properties><Configuration><File>C:\\Data\\In.csv</File></Configuration></Properties>"
    "</Node></Nodes></AlteryxDocument>"
)


def test_unreadable_file_is_reported_and_batch_continues(
    tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    source_dir = tmp_path / "workflows"
    source_dir.mkdir()
    (source_dir / "a_locked.yxmd").write_text(INPUT_DOCUMENT, encoding="utf-8")
    (source_dir / "b_good.yxmd").write_text(INPUT_DOCUMENT, encoding="utf-8")
    workspace = tmp_path / "workspace.sqlite"

    original_read_bytes = pathlib.Path.read_bytes

    def _read_bytes(self: pathlib.Path) -> bytes:
        if self.name == "a_locked.yxmd":
            raise PermissionError("permission denied")
        return original_read_bytes(self)

    monkeypatch.setattr(pathlib.Path, "read_bytes", _read_bytes)

    exit_code = import_workflows.main([str(source_dir), "--workspace", str(workspace)])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "failed  a_locked.yxmd: cannot read" in output
    assert "ok      b_good.yxmd: 1 in, 0 out" in output
    assert "workflows imported=1 failed=1" in output

    from backend.app import create_app
    from backend.app.models import ImportLog, Workflow

    app = create_app(import_workflows._config_for(str(workspace)))
    with app.app_context():
        assert [workflow.name for workflow in Workflow.query.all()] == ["b_good.yxmd"]
        failed = ImportLog.query.filter_by(success=False).one()
        assert failed.source == "cli"
        assert failed.filename == "a_locked.yxmd"
