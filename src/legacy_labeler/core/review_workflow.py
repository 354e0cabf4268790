"""Reviewer actions driving the document status state machine."""

import logging
from datetime import datetime
from typing import List, Optional

from ..exceptions import DocumentNotFoundError
from ..models.document import DocumentReview, DocumentStatus, utc_now
from .review_store import ReviewStore

logger = logging.getLogger(__name__)


class ReviewWorkflow:
    """Applies reviewer actions to documents and persists the result.

    Every action loads the reconciled review, moves it through the status
    state machine and saves it back through the store, so each step is
    durable on its own.
    """

    def __init__(self, store: ReviewStore):
        self.store = store

    async def open_review(
        self, document_id: str, reviewer_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> DocumentReview:
        """Open a document for review (also re-opens finished reviews)."""
        review = await self.store.get_review(document_id)
        review.transition_to(DocumentStatus.IN_REVIEW, now)
        if reviewer_id:
            review.reviewer_id = reviewer_id
        return await self._save(review)

    async def complete_review(
        self,
        document_id: str,
        description: str,
        category: str = "",
        keywords: Optional[List[str]] = None,
        new_filename: str = "",
        reviewer_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> DocumentReview:
        """Store the reviewer's description and mark the document completed.

        A document that was never opened is opened first, so the review
        duration is measured from this call.

        Raises:
            ValueError: If the description is blank
            InvalidTransitionError: If the document is finished and not re-opened
        """
        if not description or not description.strip():
            raise ValueError("A description is required to complete a review")

        now = now or utc_now()
        review = await self.store.get_review(document_id)
        if review.status == DocumentStatus.PENDING:
            review.transition_to(DocumentStatus.IN_REVIEW, now)

        review.edited_description = description.strip()
        review.category = category
        review.keywords = list(keywords or [])
        review.new_filename = new_filename
        if reviewer_id:
            review.reviewer_id = reviewer_id

        review.transition_to(DocumentStatus.COMPLETED, now)
        return await self._save(review)

    async def skip_review(self, document_id: str, now: Optional[datetime] = None) -> DocumentReview:
        """Mark an open review as skipped."""
        review = await self.store.get_review(document_id)
        review.transition_to(DocumentStatus.SKIPPED, now)
        return await self._save(review)

    async def flag_for_attention(
        self, document_id: str, note: str = "", now: Optional[datetime] = None
    ) -> DocumentReview:
        """Mark an open review as needing attention, optionally with a note."""
        review = await self.store.get_review(document_id)
        review.transition_to(DocumentStatus.NEEDS_ATTENTION, now)
        if note.strip():
            review.edited_description = "\n".join(
                part for part in (review.edited_description, note.strip()) if part
            )
        return await self._save(review)

    async def record_transcription(self, document_id: str, text: str) -> DocumentReview:
        """Append transcribed speech to the document's voice transcription."""
        review = await self.store.get_review(document_id)
        text = text.strip()
        if text:
            review.voice_transcription = " ".join(
                part for part in (review.voice_transcription, text) if part
            )
        return await self._save(review)

    async def next_document(self, document_id: str) -> DocumentReview:
        """The document after the given one, wrapping to the first."""
        return await self._neighbor(document_id, 1)

    async def previous_document(self, document_id: str) -> DocumentReview:
        """The document before the given one, wrapping to the last."""
        return await self._neighbor(document_id, -1)

    async def _neighbor(self, document_id: str, step: int) -> DocumentReview:
        documents = (await self.store.load()).documents
        for index, review in enumerate(documents):
            if review.id == document_id:
                return documents[(index + step) % len(documents)]
        raise DocumentNotFoundError(document_id)

    async def _save(self, review: DocumentReview) -> DocumentReview:
        collection = await self.store.save(review)
        logger.debug(f"Document {review.id} is now {review.status.value}")
        return collection.find(review.id)
