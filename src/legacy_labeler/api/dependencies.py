"""Shared API dependencies."""

from typing import Optional
from fastapi import Header, Request

from ..core.review_store import ReviewStore
from ..core.review_workflow import ReviewWorkflow


def get_store(request: Request) -> ReviewStore:
    """Review store created by the application lifespan."""
    return request.app.state.review_store


def get_workflow(request: Request) -> ReviewWorkflow:
    """Review workflow created by the application lifespan."""
    return request.app.state.review_workflow


def get_reviewer_id(
    x_reviewer_id: Optional[str] = Header(default=None, alias="X-Reviewer-ID")
) -> Optional[str]:
    """Extract the reviewer id from request headers, if sent."""
    return x_reviewer_id
