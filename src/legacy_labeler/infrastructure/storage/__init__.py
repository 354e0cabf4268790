"""Durable storage for review state."""

from .json_file import JsonStateFile, parse_collection, serialize_collection

__all__ = ["JsonStateFile", "parse_collection", "serialize_collection"]
