"""Data models for the review service."""

from .document import (
    DEFAULT_CATEGORIES,
    DocumentDescriptor,
    DocumentReview,
    DocumentStatus,
    ReviewCollection,
    ReviewMetadata,
    utc_now,
)
from .requests import (
    CompleteReviewRequest,
    FlagRequest,
    HealthResponse,
    NeighborResponse,
    OpenReviewRequest,
    ProgressResponse,
    ScanResponse,
    TranscriptionRequest,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "DocumentDescriptor",
    "DocumentReview",
    "DocumentStatus",
    "ReviewCollection",
    "ReviewMetadata",
    "utc_now",
    "CompleteReviewRequest",
    "FlagRequest",
    "HealthResponse",
    "NeighborResponse",
    "OpenReviewRequest",
    "ProgressResponse",
    "ScanResponse",
    "TranscriptionRequest",
]
