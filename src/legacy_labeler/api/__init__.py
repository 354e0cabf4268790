"""HTTP API for the review UI."""
