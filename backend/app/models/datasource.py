"""Datasource model definition."""

from __future__ import annotations

from ..extensions import db


class Datasource(db.Model):
    """An external data endpoint referenced by one or more workflows.

    ``name`` is the lower-cased connection path and acts as the natural key.
    ``alias`` is a user supplied display name that imports never overwrite.
    """

    __tablename__ = "datasources"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(768), unique=True, nullable=False)
    kind = db.Column(db.String(64), nullable=False)
    alias = db.Column(db.String(255), nullable=False, default="")

    def __repr__(self) -> str:  # pragma: no cover - repr not critical for tests
        return f"<Datasource {self.name!r}>"
