"""Tests for connection normalisation and de-duplication."""
from __future__ import annotations

import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.lineage.items import ConnectionItem, ExtractionResult
from backend.app.lineage.normalizer import connection_key, normalize


def test_paths_are_lower_cased():
    result = ExtractionResult(
        "wf",
        inputs=[ConnectionItem("File", "C:\\Data.csv")],
        outputs=[ConnectionItem("Database", "ODBC:DSN=Foo", "SELECT 1")],
    )

    normalized = normalize(result)

    assert normalized.inputs == [ConnectionItem("File", "c:\\data.csv")]
    assert normalized.outputs == [ConnectionItem("Database", "odbc:dsn=foo", "SELECT 1")]


def test_case_variants_share_a_key():
    upper = normalize(ExtractionResult("a", inputs=[ConnectionItem("File", "C:\\Data.csv")]))
    lower = normalize(ExtractionResult("b", inputs=[ConnectionItem("File", "c:\\data.csv")]))

    assert connection_key(upper.inputs[0]) == connection_key(lower.inputs[0])


def test_duplicates_collapse_and_first_query_wins():
    result = ExtractionResult(
        "wf",
        inputs=[
            ConnectionItem("Database", "odbc:DSN=Foo", "SELECT a FROM t"),
            ConnectionItem("Database", "odbc:dsn=foo", "SELECT b FROM t"),
            ConnectionItem("File", "odbc:dsn=foo"),
        ],
    )

    normalized = normalize(result)

    assert normalized.inputs == [
        ConnectionItem("Database", "odbc:dsn=foo", "SELECT a FROM t"),
        ConnectionItem("File", "odbc:dsn=foo"),
    ]


def test_inputs_and_outputs_are_deduplicated_independently():
    item = ConnectionItem("File", "c:\\shared.csv")
    normalized = normalize(ExtractionResult("wf", inputs=[item, item], outputs=[item]))

    assert normalized.inputs == [item]
    assert normalized.outputs == [item]


def test_normalize_is_idempotent():
    result = ExtractionResult(
        "wf",
        inputs=[
            ConnectionItem("File", "C:\\A.csv"),
            ConnectionItem("File", "c:\\a.csv", "ignored"),
            ConnectionItem("API", "https://Example.com/Items"),
        ],
        outputs=[ConnectionItem("Database", "aka:Warehouse", "INSERT")],
    )

    once = normalize(result)

    assert normalize(once) == once


def test_source_result_is_not_modified():
    result = ExtractionResult("wf", inputs=[ConnectionItem("File", "C:\\Keep.csv")])

    normalize(result)

    assert result.inputs == [ConnectionItem("File", "C:\\Keep.csv")]
