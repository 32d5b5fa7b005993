"""Import workflow files and packages from disk into the configured workspace."""
from __future__ import annotations

import argparse
import os
import pathlib
import sys
from collections.abc import Iterable, Iterator

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app import Config, create_app
from backend.app.lineage.packages import MAX_MEMBER_BYTES, is_supported
from backend.app.lineage.service import ImportOutcome, import_file, record_failure
from backend.app.workspace.context import current_store


def _iter_paths(paths: Iterable[pathlib.Path]) -> Iterator[pathlib.Path]:
    """Yield supported files, walking directories recursively in sorted order."""

    for path in paths:
        if path.is_dir():
            yield from (
                candidate
                for candidate in sorted(path.rglob("*"))
                if candidate.is_file() and is_supported(candidate.name)
            )
        elif path.is_file() and is_supported(path.name):
            yield path


def _config_for(database: str | None) -> type[Config]:
    if database is None:
        return Config

    class WorkspaceConfig(Config):
        SQLALCHEMY_DATABASE_URI = (
            database if "://" in database else f"sqlite:///{os.path.abspath(database)}"
        )

    return WorkspaceConfig


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("paths", nargs="+", type=pathlib.Path, help="files or directories")
    parser.add_argument(
        "--workspace",
        help="workspace database file or SQLAlchemy URL (defaults to DATABASE_URL)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    app = create_app(_config_for(args.workspace))
    outcomes: list[ImportOutcome] = []
    with app.app_context():
        store = current_store()
        max_member_size = app.config.get("MAX_PACKAGE_MEMBER_BYTES", MAX_MEMBER_BYTES)
        for path in _iter_paths(args.paths):
            try:
                payload = path.read_bytes()
            except OSError as exc:
                outcomes.append(
                    record_failure(store, path.name, f"cannot read {path}: {exc}", source="cli")
                )
                continue
            outcomes.extend(
                import_file(
                    store, path.name, payload, source="cli", max_member_size=max_member_size
                )
            )

    for outcome in outcomes:
        if outcome.success:
            print(f"ok      {outcome.workflow_name}: {outcome.inputs} in, {outcome.outputs} out")
        else:
            print(f"failed  {outcome.workflow_name or outcome.filename}: {outcome.error}")

    failed = sum(1 for outcome in outcomes if not outcome.success)
    print(
        "Import completed",
        f"workflows imported={len(outcomes) - failed}",
        f"failed={failed}",
    )
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
