"""Scanning, reconciliation and review workflow."""

from .inventory_scanner import InventoryScanner, SUPPORTED_EXTENSIONS, generate_document_id
from .review_store import ReviewStore, reconcile
from .review_workflow import ReviewWorkflow

__all__ = [
    "InventoryScanner",
    "SUPPORTED_EXTENSIONS",
    "generate_document_id",
    "ReviewStore",
    "reconcile",
    "ReviewWorkflow",
]
