"""Access to the workspace store of the running application."""

from __future__ import annotations

from ..extensions import db
from .store import WorkspaceStore


def current_store() -> WorkspaceStore:
    """Return a store bound to the session of the current application context."""

    return WorkspaceStore(db.session)
