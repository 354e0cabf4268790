"""Configuration module for the review service."""

from .settings import get_settings, Settings

__all__ = ["get_settings", "Settings"]
