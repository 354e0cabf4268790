"""Document descriptor and review data models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, List, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..exceptions import InvalidTransitionError

DEFAULT_CATEGORIES = [
    "Engineering",
    "Mechanical",
    "Electrical",
    "Process",
    "Administrative",
]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Base model persisted with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentStatus(str, Enum):
    """Review status of a document."""
    PENDING = "Pending"
    IN_REVIEW = "InReview"
    COMPLETED = "Completed"
    SKIPPED = "Skipped"
    NEEDS_ATTENTION = "NeedsAttention"


ALLOWED_TRANSITIONS: Dict[DocumentStatus, FrozenSet[DocumentStatus]] = {
    DocumentStatus.PENDING: frozenset({DocumentStatus.IN_REVIEW}),
    DocumentStatus.IN_REVIEW: frozenset({
        DocumentStatus.IN_REVIEW,
        DocumentStatus.COMPLETED,
        DocumentStatus.SKIPPED,
        DocumentStatus.NEEDS_ATTENTION,
    }),
    DocumentStatus.COMPLETED: frozenset({DocumentStatus.IN_REVIEW}),
    DocumentStatus.SKIPPED: frozenset({DocumentStatus.IN_REVIEW}),
    DocumentStatus.NEEDS_ATTENTION: frozenset({DocumentStatus.IN_REVIEW}),
}


class DocumentDescriptor(CamelModel):
    """Filesystem facts about one document, rebuilt on every scan."""
    id: str
    original_filename: str
    relative_path: str
    file_type: str
    file_size: int = Field(..., ge=0)
    discovered_at: datetime


class DocumentReview(CamelModel):
    """Persisted review record for a single document."""
    id: str
    original_filename: str = ""
    relative_path: str = Field(
        default="",
        validation_alias=AliasChoices("relativePath", "relative_path", "filePath"),
    )
    file_type: str = ""
    file_size: int = 0
    import_date: datetime = Field(default_factory=utc_now)
    status: DocumentStatus = DocumentStatus.PENDING
    assigned_reviewer: str = ""

    # Review data
    voice_transcription: str = ""
    edited_description: str = ""
    category: str = ""
    keywords: List[str] = Field(default_factory=list)
    new_filename: str = ""

    # Tracking
    review_started: Optional[datetime] = None
    review_completed: Optional[datetime] = None
    review_duration_seconds: Optional[int] = None
    reviewer_id: str = ""

    @field_validator("import_date", "review_started", "review_completed")
    @classmethod
    def _naive_means_utc(cls, value):
        return _as_utc(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status_from_ordinal(cls, value):
        # Older state files stored the status as its position in the enum
        if isinstance(value, int) and not isinstance(value, bool):
            members = list(DocumentStatus)
            if 0 <= value < len(members):
                return members[value]
        return value

    @field_validator("keywords", mode="before")
    @classmethod
    def _split_keywords(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator(
        "original_filename", "file_type", "assigned_reviewer", "voice_transcription",
        "edited_description", "category", "new_filename", "reviewer_id",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @classmethod
    def from_descriptor(cls, descriptor: DocumentDescriptor) -> "DocumentReview":
        """Create a fresh Pending review for a newly discovered document."""
        return cls(
            id=descriptor.id,
            original_filename=descriptor.original_filename,
            relative_path=descriptor.relative_path,
            file_type=descriptor.file_type,
            file_size=descriptor.file_size,
            import_date=descriptor.discovered_at,
            status=DocumentStatus.PENDING,
        )

    def refresh_from(self, descriptor: DocumentDescriptor) -> bool:
        """Copy scan-derived fields from a descriptor.

        Status, annotations and tracking fields are left alone.

        Returns:
            True if any field changed
        """
        changed = False
        for field in ("original_filename", "relative_path", "file_type", "file_size"):
            fresh = getattr(descriptor, field)
            if getattr(self, field) != fresh:
                setattr(self, field, fresh)
                changed = True
        return changed

    def transition_to(self, target: DocumentStatus, now: Optional[datetime] = None) -> None:
        """Move to a new status, stamping review tracking fields.

        Raises:
            InvalidTransitionError: If the state machine forbids the move
        """
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(self.id, self.status.value, target.value)

        now = _as_utc(now) or utc_now()
        previous = self.status
        self.status = target

        if target == DocumentStatus.IN_REVIEW and previous != DocumentStatus.IN_REVIEW:
            # New visit: tracking from a previous completion no longer applies
            self.review_started = now
            self.review_completed = None
            self.review_duration_seconds = None
        elif target == DocumentStatus.COMPLETED:
            self.review_completed = now
            self.review_duration_seconds = None
            self.finalize_completion()

    def settle_duration(self, previous: Optional["DocumentReview"] = None) -> None:
        """Bring review_duration_seconds in line with status and timestamps.

        Args:
            previous: The stored version of this review, if any. A duration
                carried over from an earlier completion is dropped when the
                review only now enters Completed or its timestamps moved.
        """
        if self.status != DocumentStatus.COMPLETED:
            self.review_duration_seconds = None
            return

        entering = previous is None or previous.status != DocumentStatus.COMPLETED
        moved = previous is not None and (
            previous.review_started != self.review_started
            or previous.review_completed != self.review_completed
        )
        if (entering or moved) and self.review_started and self.review_completed:
            self.review_duration_seconds = None
        self.finalize_completion()

    def finalize_completion(self) -> None:
        """Derive review_duration_seconds once for a completed review."""
        if (
            self.status == DocumentStatus.COMPLETED
            and self.review_duration_seconds is None
            and self.review_started is not None
            and self.review_completed is not None
        ):
            elapsed = (self.review_completed - self.review_started).total_seconds()
            self.review_duration_seconds = max(0, int(elapsed))


class ReviewMetadata(CamelModel):
    """Aggregate metadata stored alongside the reviews."""
    version: str = "1.0"
    last_updated: datetime = Field(default_factory=utc_now)
    total_documents: int = 0
    completed_reviews: int = 0
    categories: List[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    reviewers: List[str] = Field(default_factory=list)

    @field_validator("last_updated")
    @classmethod
    def _naive_means_utc(cls, value):
        return _as_utc(value)


class ReviewCollection(CamelModel):
    """Root persisted aggregate: metadata plus every review ever seen."""
    metadata: ReviewMetadata = Field(default_factory=ReviewMetadata)
    documents: List[DocumentReview] = Field(default_factory=list)

    def find(self, document_id: str) -> Optional[DocumentReview]:
        """Return the review with the given id, if any."""
        for review in self.documents:
            if review.id == document_id:
                return review
        return None

    def upsert(self, review: DocumentReview) -> None:
        """Replace the review with the same id in place, or append it."""
        for index, existing in enumerate(self.documents):
            if existing.id == review.id:
                self.documents[index] = review
                return
        self.documents.append(review)

    def refresh_counts(self) -> None:
        """Recompute the derived document counts."""
        self.metadata.total_documents = len(self.documents)
        self.metadata.completed_reviews = sum(
            1 for review in self.documents if review.status == DocumentStatus.COMPLETED
        )

    def register_annotations(self, review: DocumentReview) -> None:
        """Add the review's category and reviewer to the metadata lists."""
        if review.category and review.category not in self.metadata.categories:
            self.metadata.categories.append(review.category)
        if review.reviewer_id and review.reviewer_id not in self.metadata.reviewers:
            self.metadata.reviewers.append(review.reviewer_id)
