"""Import log model definition."""

from __future__ import annotations

from datetime import datetime

from ..extensions import db

IMPORT_SOURCES = ("upload", "package", "cli")


class ImportLog(db.Model):
    """Records the outcome of importing a single workflow document."""

    __tablename__ = "import_logs"

    id = db.Column(db.Integer, primary_key=True)
    source = db.Column(db.Enum(*IMPORT_SOURCES, name="import_log_source"), nullable=False)
    filename = db.Column(db.String(512), nullable=False)
    workflow_name = db.Column(db.String(512), nullable=True)
    success = db.Column(db.Boolean, nullable=False, default=False)
    message = db.Column(db.Text, nullable=False, default="")
    inputs = db.Column(db.Integer, nullable=False, default=0)
    outputs = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<ImportLog {self.id} {self.filename!r}>"
