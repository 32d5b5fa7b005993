"""Lineage extraction and analysis for workflow documents."""

from .criticality import CriticalityScore, rank_by_criticality
from .extractor import extract
from .items import ConnectionItem, ExtractionResult
from .normalizer import normalize

__all__ = [
    "ConnectionItem",
    "CriticalityScore",
    "ExtractionResult",
    "extract",
    "normalize",
    "rank_by_criticality",
]
