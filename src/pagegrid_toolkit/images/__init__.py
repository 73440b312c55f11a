"""Image loading helpers."""

from .loader import load_image

__all__ = ["load_image"]
