"""Unit tests for review data models."""

from datetime import datetime, timedelta, timezone

import pytest

from legacy_labeler.exceptions import InvalidTransitionError
from legacy_labeler.infrastructure.storage import parse_collection, serialize_collection
from legacy_labeler.models.document import (
    DEFAULT_CATEGORIES,
    DocumentReview,
    DocumentStatus,
    ReviewCollection,
)

T0 = datetime(2024, 3, 15, 9, 0, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestStatusTransitions:
    """DocumentReview.transition_to"""

    def test_open_stamps_review_started(self):
        review = DocumentReview(id="doc_1")
        review.transition_to(DocumentStatus.IN_REVIEW, T0)

        assert review.status == DocumentStatus.IN_REVIEW
        assert review.review_started == T0

    def test_reopening_same_visit_keeps_start(self):
        review = DocumentReview(id="doc_1")
        review.transition_to(DocumentStatus.IN_REVIEW, T0)
        review.transition_to(DocumentStatus.IN_REVIEW, T0 + timedelta(minutes=5))

        assert review.review_started == T0

    def test_complete_stamps_duration(self):
        review = DocumentReview(id="doc_1")
        review.transition_to(DocumentStatus.IN_REVIEW, T0)
        review.transition_to(DocumentStatus.COMPLETED, T0 + timedelta(seconds=95))

        assert review.review_completed == T0 + timedelta(seconds=95)
        assert review.review_duration_seconds == 95

    def test_rereview_starts_new_visit(self):
        review = DocumentReview(id="doc_1")
        review.transition_to(DocumentStatus.IN_REVIEW, T0)
        review.transition_to(DocumentStatus.COMPLETED, T0 + timedelta(seconds=10))
        later = T0 + timedelta(days=1)

        review.transition_to(DocumentStatus.IN_REVIEW, later)

        assert review.review_started == later
        assert review.review_completed is None
        assert review.review_duration_seconds is None

    @pytest.mark.parametrize("target", [DocumentStatus.SKIPPED, DocumentStatus.NEEDS_ATTENTION])
    def test_reviewer_can_set_aside(self, target):
        review = DocumentReview(id="doc_1")
        review.transition_to(DocumentStatus.IN_REVIEW, T0)
        review.transition_to(target, T0)

        assert review.status == target
        review.transition_to(DocumentStatus.IN_REVIEW, T0)

    @pytest.mark.parametrize("target", [
        DocumentStatus.COMPLETED,
        DocumentStatus.SKIPPED,
        DocumentStatus.NEEDS_ATTENTION,
        DocumentStatus.PENDING,
    ])
    def test_pending_must_be_opened_first(self, target):
        review = DocumentReview(id="doc_1")
        with pytest.raises(InvalidTransitionError):
            review.transition_to(target, T0)
        assert review.status == DocumentStatus.PENDING

    def test_completed_cannot_be_skipped(self):
        review = DocumentReview(id="doc_1", status=DocumentStatus.COMPLETED)
        with pytest.raises(InvalidTransitionError):
            review.transition_to(DocumentStatus.SKIPPED, T0)

    def test_finalize_only_once(self):
        review = DocumentReview(
            id="doc_1",
            status=DocumentStatus.COMPLETED,
            review_started=T0,
            review_completed=T0 + timedelta(seconds=30),
            review_duration_seconds=12,
        )
        review.finalize_completion()
        assert review.review_duration_seconds == 12


    def test_settle_duration_drops_stale_value(self):
        previous = DocumentReview(id="doc_1", status=DocumentStatus.IN_REVIEW, review_started=T0)
        review = DocumentReview(
            id="doc_1",
            status=DocumentStatus.COMPLETED,
            review_started=T0,
            review_completed=T0 + timedelta(seconds=300),
            review_duration_seconds=60,
        )

        review.settle_duration(previous)

        assert review.review_duration_seconds == 300

    def test_settle_duration_clears_when_not_completed(self):
        review = DocumentReview(
            id="doc_1", status=DocumentStatus.IN_REVIEW, review_duration_seconds=60
        )
        review.settle_duration()
        assert review.review_duration_seconds is None


@pytest.mark.unit
class TestCoercion:
    """Input normalisation on DocumentReview"""

    def test_keywords_from_comma_string(self):
        review = DocumentReview(id="doc_1", keywords="pump, valve ,, P&ID")
        assert review.keywords == ["pump", "valve", "P&ID"]

    def test_naive_datetimes_are_utc(self):
        review = DocumentReview(id="doc_1", review_started=datetime(2024, 1, 1, 12, 0))
        assert review.review_started.tzinfo == timezone.utc

    def test_status_from_ordinal(self):
        assert DocumentReview(id="doc_1", status=2).status == DocumentStatus.COMPLETED

    def test_null_text_fields_become_empty(self):
        review = DocumentReview(id="doc_1", category=None, editedDescription=None)
        assert review.category == ""
        assert review.edited_description == ""


@pytest.mark.unit
class TestSerialization:
    """State file text format"""

    def test_default_metadata(self):
        collection = ReviewCollection()
        assert collection.metadata.version == "1.0"
        assert collection.metadata.categories == DEFAULT_CATEGORIES

    def test_camel_case_round_trip(self):
        review = DocumentReview(
            id="doc_1",
            original_filename="scan001.pdf",
            relative_path="scan001.pdf",
            status=DocumentStatus.NEEDS_ATTENTION,
            keywords=["pump"],
            review_started=T0,
        )
        collection = ReviewCollection(documents=[review])
        collection.refresh_counts()

        text = serialize_collection(collection)

        assert '"relativePath": "scan001.pdf"' in text
        assert '"reviewDurationSeconds": null' in text
        assert '"status": "NeedsAttention"' in text
        assert parse_collection(text) == collection

    def test_reads_legacy_state_file(self):
        legacy = """{
          "metadata": {"version": "1.0", "lastUpdated": "2024-03-15T09:00:00Z",
                       "totalDocuments": 1, "completedReviews": 1,
                       "categories": ["Engineering"], "reviewers": []},
          "documents": [{
            "id": "doc_0000ABCD", "originalFilename": "scan001.pdf",
            "filePath": "Documents/scan001.pdf", "fileType": "pdf", "fileSize": 2048,
            "importDate": "2024-03-01T08:00:00Z", "status": 2, "assignedReviewer": "",
            "voiceTranscription": "", "editedDescription": "Pump schematic",
            "category": "Mechanical", "keywords": "pump, schematic", "newFilename": "",
            "reviewStarted": "2024-03-15T08:55:00Z", "reviewCompleted": "2024-03-15T09:00:00Z",
            "reviewDurationSeconds": 300, "reviewerId": ""
          }]
        }"""

        collection = parse_collection(legacy)

        [review] = collection.documents
        assert review.relative_path == "Documents/scan001.pdf"
        assert review.status == DocumentStatus.COMPLETED
        assert review.keywords == ["pump", "schematic"]
        assert review.review_duration_seconds == 300
