"""Connection model definition."""

from __future__ import annotations

from ..extensions import db

DIRECTIONS = ("input", "output")


class Connection(db.Model):
    """Directed edge between a workflow and a datasource."""

    __tablename__ = "connections"

    id = db.Column(db.Integer, primary_key=True)
    workflow_id = db.Column(
        db.Integer, db.ForeignKey("workflows.id", ondelete="CASCADE"), nullable=False, index=True
    )
    datasource_id = db.Column(
        db.Integer, db.ForeignKey("datasources.id"), nullable=False, index=True
    )
    direction = db.Column(db.Enum(*DIRECTIONS, name="connection_direction"), nullable=False)
    query = db.Column(db.Text, nullable=False, default="")

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<Connection {self.workflow_id} {self.direction} {self.datasource_id}>"
