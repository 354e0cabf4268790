"""Review store: reconciles scanned documents with persisted reviews."""

import asyncio
import logging
from typing import List, Optional, Tuple

from ..exceptions import CorruptStateError, DocumentNotFoundError, StateWriteError
from ..infrastructure.storage import JsonStateFile
from ..models.document import (
    DocumentDescriptor,
    DocumentReview,
    ReviewCollection,
    utc_now,
)
from .inventory_scanner import InventoryScanner

logger = logging.getLogger(__name__)


def reconcile(
    baseline: ReviewCollection, descriptors: List[DocumentDescriptor]
) -> Tuple[ReviewCollection, bool]:
    """Merge freshly scanned descriptors into a persisted collection.

    Known documents get their scan-derived fields refreshed, new documents
    are appended as Pending reviews, and reviews whose file has disappeared
    are kept as they are. The baseline is not modified.

    Returns:
        Tuple of (reconciled collection, whether anything changed)
    """
    merged = baseline.model_copy(deep=True)
    index = {review.id: review for review in merged.documents}
    changed = False

    for descriptor in descriptors:
        existing = index.get(descriptor.id)
        if existing is not None:
            if existing.refresh_from(descriptor):
                changed = True
            continue

        review = DocumentReview.from_descriptor(descriptor)
        merged.documents.append(review)
        index[review.id] = review
        changed = True

    counts = (merged.metadata.total_documents, merged.metadata.completed_reviews)
    merged.refresh_counts()
    if counts != (merged.metadata.total_documents, merged.metadata.completed_reviews):
        changed = True

    return merged, changed


class ReviewStore:
    """Owns the persisted review collection for one documents root."""

    def __init__(
        self,
        documents_root: str,
        review_data_file: str,
        scanner: Optional[InventoryScanner] = None,
    ):
        """Initialize review store.

        Args:
            documents_root: Folder holding the documents to review
            review_data_file: JSON file the review collection is persisted to
            scanner: Scanner override; defaults to one over documents_root
        """
        self.documents_root = documents_root
        self.scanner = scanner or InventoryScanner(documents_root)
        self.state_file = JsonStateFile(review_data_file)
        self._cache: Optional[ReviewCollection] = None
        self._lock = asyncio.Lock()

    async def scan(self) -> List[DocumentDescriptor]:
        """Scan the documents root without touching review state."""
        return await self.scanner.scan()

    async def load(self) -> ReviewCollection:
        """Load the review collection reconciled against the documents on disk.

        Storage problems never propagate: a missing or corrupt state file
        yields an empty baseline, and a failed write of the reconciled
        collection is logged and the data is written by the next save.

        Returns:
            A copy of the reconciled collection
        """
        descriptors = await self.scanner.scan()

        async with self._lock:
            baseline, existed = await self._read_persisted()
            merged, changed = reconcile(baseline, descriptors)

            if changed or not existed:
                merged.metadata.last_updated = utc_now()
                try:
                    await self.state_file.write(merged)
                    if not existed:
                        logger.info(f"Created review data file {self.state_file.path}")
                except StateWriteError as e:
                    logger.error(f"Could not persist reconciled review data: {e}")

            self._cache = merged
            return merged.model_copy(deep=True)

    async def save(self, review: DocumentReview) -> ReviewCollection:
        """Upsert one review and rewrite the whole collection.

        Args:
            review: The review to store; replaces any record with the same id

        Returns:
            A copy of the collection as written

        Raises:
            StateWriteError: If the file could not be written; the previous
                file and the in-process copy are unchanged
        """
        async with self._lock:
            current, _ = await self._read_persisted()
            updated = current.model_copy(deep=True)

            stored = review.model_copy(deep=True)
            stored.settle_duration(current.find(stored.id))
            updated.upsert(stored)
            updated.register_annotations(stored)
            updated.refresh_counts()
            updated.metadata.last_updated = utc_now()

            await self.state_file.write(updated)
            self._cache = updated

        logger.info(
            f"Saved review {review.id} ({stored.status.value}); "
            f"{updated.metadata.completed_reviews}/{updated.metadata.total_documents} completed"
        )
        return updated.model_copy(deep=True)

    async def get_review(self, document_id: str) -> DocumentReview:
        """Get a single reconciled review by id.

        Raises:
            DocumentNotFoundError: If no review has that id
        """
        collection = await self.load()
        review = collection.find(document_id)
        if review is None:
            raise DocumentNotFoundError(document_id)
        return review

    def invalidate_cache(self) -> None:
        """Drop the in-process copy so the next call re-reads the file."""
        self._cache = None

    async def _read_persisted(self) -> Tuple[ReviewCollection, bool]:
        """Current persisted collection and whether the state file existed."""
        if self._cache is not None:
            return self._cache, True

        try:
            collection = await self.state_file.read()
        except CorruptStateError as e:
            logger.warning(f"{e}; starting from an empty review collection")
            moved_to = await self.state_file.quarantine()
            if moved_to is not None:
                logger.warning(f"Unreadable review data kept at {moved_to}")
            return ReviewCollection(), False

        if collection is None:
            logger.info(f"No review data at {self.state_file.path}; starting fresh")
            return ReviewCollection(), False

        return collection, True
