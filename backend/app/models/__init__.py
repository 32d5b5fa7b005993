"""Database models for the workflow lineage backend."""

from .connection import Connection
from .datasource import Datasource
from .logs import ImportLog
from .workflow import Workflow

__all__ = ["Connection", "Datasource", "ImportLog", "Workflow"]
