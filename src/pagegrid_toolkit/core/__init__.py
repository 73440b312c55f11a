"""
Page Grid Core Package

Shared error taxonomy and small value types used by every stage of the
compose → capture → resolve → extract pipeline.
"""

from .errors import (
    PageGridError,
    InvalidConfigurationError,
    MissingAssetError,
    DecodeFailureError,
    RegistrationFailureError,
    GeometryOutOfBoundsError,
)
from .models import MarkerRole, ObservedPoint, PAYLOAD_ANCHOR_KEY

__all__ = [
    "PageGridError",
    "InvalidConfigurationError",
    "MissingAssetError",
    "DecodeFailureError",
    "RegistrationFailureError",
    "GeometryOutOfBoundsError",
    "MarkerRole",
    "ObservedPoint",
    "PAYLOAD_ANCHOR_KEY",
]
