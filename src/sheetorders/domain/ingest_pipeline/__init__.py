"""Row ingestion pipeline.

Each sheet row runs through explicit, testable phases that share a
``RowContext``: validation, entity resolution, duplicate detection and
persistence.
"""

from __future__ import annotations

from .context import RowContext
from .deduplication import DuplicateDetectionPhase
from .orchestrator import IngestionPipeline, PipelinePhase
from .persistence import PersistencePhase
from .resolution import ResolutionPhase
from .validation import ValidationPhase

__all__ = [
    "DuplicateDetectionPhase",
    "IngestionPipeline",
    "PersistencePhase",
    "PipelinePhase",
    "ResolutionPhase",
    "RowContext",
    "ValidationPhase",
]
