"""Request and response models for API endpoints."""

from typing import List, Optional
from pydantic import BaseModel, Field

from .document import DocumentDescriptor, DocumentReview, ReviewMetadata


class OpenReviewRequest(BaseModel):
    """Open (or re-open) a document for review."""
    reviewer_id: Optional[str] = None


class CompleteReviewRequest(BaseModel):
    """Save the reviewer's description and mark the document completed."""
    description: str = Field(..., min_length=1)
    category: str = ""
    keywords: List[str] = Field(default_factory=list)
    new_filename: str = ""
    reviewer_id: Optional[str] = None


class FlagRequest(BaseModel):
    """Mark a document as needing attention."""
    note: str = ""


class TranscriptionRequest(BaseModel):
    """Transcribed speech to attach to a document."""
    text: str = Field(..., min_length=1)


class ScanResponse(BaseModel):
    """Response model for a documents folder scan."""
    documents: List[DocumentDescriptor]
    total_found: int


class ProgressResponse(BaseModel):
    """Aggregate review progress for the browser view."""
    metadata: ReviewMetadata
    by_status: dict = Field(default_factory=dict)


class NeighborResponse(BaseModel):
    """Adjacent document in browsing order."""
    current_id: str
    document: DocumentReview


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str
    version: str
    documents_root_exists: bool
    review_data_exists: bool
