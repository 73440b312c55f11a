"""Common constants shared across the toolkit."""

from __future__ import annotations

from .constants import (
    ALLOWED_PAGES_PER_ROW,
    REGISTRATION,
    SEARCH,
    RegistrationConstants,
    SearchConstants,
)

__all__ = [
    "ALLOWED_PAGES_PER_ROW",
    "REGISTRATION",
    "SEARCH",
    "RegistrationConstants",
    "SearchConstants",
]
