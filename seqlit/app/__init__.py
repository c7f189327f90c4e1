"""Application layer for seqlit.

This layer orchestrates the annotation model over record streams. Pattern
matching is delegated to adapters via the matcher port.
"""

__all__ = [
    "AnnotationService",
    "RunStats",
]

from seqlit.app.annotation_service import AnnotationService, RunStats
