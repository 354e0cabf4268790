"""Document review endpoints."""

import logging
from collections import Counter
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException

from ...core.review_store import ReviewStore
from ...core.review_workflow import ReviewWorkflow
from ...exceptions import DocumentNotFoundError, InvalidTransitionError, StateWriteError
from ...models.document import DocumentReview, DocumentStatus, ReviewCollection
from ...models.requests import (
    CompleteReviewRequest,
    FlagRequest,
    NeighborResponse,
    OpenReviewRequest,
    ProgressResponse,
    ScanResponse,
    TranscriptionRequest,
)
from ..dependencies import get_reviewer_id, get_store, get_workflow

router = APIRouter(prefix="/api/v1/documents", tags=["documents"])
logger = logging.getLogger(__name__)


def _not_found(e: DocumentNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


def _not_saved(e: StateWriteError) -> HTTPException:
    logger.error(f"Review not saved: {e}")
    return HTTPException(status_code=500, detail=f"Review was not saved: {e.reason}")


@router.get(
    "",
    response_model=ReviewCollection,
    response_model_by_alias=True,
    summary="List Documents",
    description="""
Scan the documents folder and return every review, reconciled with the
persisted review data.

**Workflow**:
1. Walk the documents folder for PDF/image files
2. Merge with the stored reviews (new files become Pending)
3. Return metadata and documents

Reviews of files that were moved or deleted stay in the list.
    """,
)
async def list_documents(store: ReviewStore = Depends(get_store)):
    """List reconciled reviews."""
    return await store.load()


@router.post(
    "/scan",
    response_model=ScanResponse,
    summary="Scan Documents Folder",
    description="Scan the documents folder without changing review data.",
)
async def scan_documents(store: ReviewStore = Depends(get_store)):
    """Scan the documents folder."""
    descriptors = await store.scan()
    return ScanResponse(documents=descriptors, total_found=len(descriptors))


@router.get(
    "/metadata",
    response_model=ProgressResponse,
    summary="Review Progress",
    description="Aggregate counts for progress display, including a per-status breakdown.",
)
async def get_progress(store: ReviewStore = Depends(get_store)):
    """Get review progress."""
    collection = await store.load()
    by_status = Counter(review.status.value for review in collection.documents)
    return ProgressResponse(
        metadata=collection.metadata,
        by_status={status.value: by_status.get(status.value, 0) for status in DocumentStatus},
    )


@router.get(
    "/{document_id}",
    response_model=DocumentReview,
    response_model_by_alias=True,
    summary="Get Document",
    responses={404: {"description": "Document not found"}},
)
async def get_document(document_id: str, store: ReviewStore = Depends(get_store)):
    """Get review by document ID."""
    try:
        return await store.get_review(document_id)
    except DocumentNotFoundError as e:
        raise _not_found(e)


@router.put(
    "/{document_id}",
    response_model=DocumentReview,
    response_model_by_alias=True,
    summary="Save Document Review",
    description="""
Save a full review record. The whole review file is rewritten atomically;
derived counts are recomputed.

**Errors**:
- 400 if the body's id does not match the path
- 500 if the review could not be written (the edit was not saved)
    """,
    responses={
        400: {"description": "Document id mismatch"},
        500: {"description": "Review was not durably saved"},
    },
)
async def save_document(
    document_id: str,
    review: DocumentReview,
    store: ReviewStore = Depends(get_store),
):
    """Save review."""
    if review.id != document_id:
        raise HTTPException(status_code=400, detail="Document id does not match the path")
    try:
        collection = await store.save(review)
    except StateWriteError as e:
        raise _not_saved(e)
    return collection.find(document_id)


async def _run_action(action, document_id: str, *args, **kwargs) -> DocumentReview:
    try:
        return await action(document_id, *args, **kwargs)
    except DocumentNotFoundError as e:
        raise _not_found(e)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StateWriteError as e:
        raise _not_saved(e)


@router.post(
    "/{document_id}/open",
    response_model=DocumentReview,
    response_model_by_alias=True,
    summary="Open Review",
    responses={404: {"description": "Document not found"}, 409: {"description": "Invalid transition"}},
)
async def open_review(
    document_id: str,
    body: Optional[OpenReviewRequest] = None,
    header_reviewer: Optional[str] = Depends(get_reviewer_id),
    workflow: ReviewWorkflow = Depends(get_workflow),
):
    """Move a document into review."""
    reviewer_id = (body.reviewer_id if body else None) or header_reviewer
    return await _run_action(workflow.open_review, document_id, reviewer_id=reviewer_id)


@router.post(
    "/{document_id}/complete",
    response_model=DocumentReview,
    response_model_by_alias=True,
    summary="Complete Review",
    responses={404: {"description": "Document not found"}, 409: {"description": "Invalid transition"}},
)
async def complete_review(
    document_id: str,
    body: CompleteReviewRequest,
    header_reviewer: Optional[str] = Depends(get_reviewer_id),
    workflow: ReviewWorkflow = Depends(get_workflow),
):
    """Save the description and mark the document completed."""
    return await _run_action(
        workflow.complete_review,
        document_id,
        description=body.description,
        category=body.category,
        keywords=body.keywords,
        new_filename=body.new_filename,
        reviewer_id=body.reviewer_id or header_reviewer,
    )


@router.post(
    "/{document_id}/skip",
    response_model=DocumentReview,
    response_model_by_alias=True,
    summary="Skip Review",
)
async def skip_review(document_id: str, workflow: ReviewWorkflow = Depends(get_workflow)):
    """Mark a document as skipped."""
    return await _run_action(workflow.skip_review, document_id)


@router.post(
    "/{document_id}/flag",
    response_model=DocumentReview,
    response_model_by_alias=True,
    summary="Flag For Attention",
)
async def flag_document(
    document_id: str,
    body: Optional[FlagRequest] = None,
    workflow: ReviewWorkflow = Depends(get_workflow),
):
    """Mark a document as needing attention."""
    note = body.note if body else ""
    return await _run_action(workflow.flag_for_attention, document_id, note=note)


@router.post(
    "/{document_id}/transcription",
    response_model=DocumentReview,
    response_model_by_alias=True,
    summary="Add Voice Transcription",
    description="Append transcribed speech to the document's voice transcription.",
)
async def add_transcription(
    document_id: str,
    body: TranscriptionRequest,
    workflow: ReviewWorkflow = Depends(get_workflow),
):
    """Append a transcription."""
    return await _run_action(workflow.record_transcription, document_id, body.text)


@router.get("/{document_id}/next", response_model=NeighborResponse, summary="Next Document")
async def next_document(document_id: str, workflow: ReviewWorkflow = Depends(get_workflow)):
    """Document after the given one, wrapping around."""
    document = await _run_action(workflow.next_document, document_id)
    return NeighborResponse(current_id=document_id, document=document)


@router.get("/{document_id}/previous", response_model=NeighborResponse, summary="Previous Document")
async def previous_document(document_id: str, workflow: ReviewWorkflow = Depends(get_workflow)):
    """Document before the given one, wrapping around."""
    document = await _run_action(workflow.previous_document, document_id)
    return NeighborResponse(current_id=document_id, document=document)
