"""
Sheet Composer

Draws page content, corner markers and the payload code onto a canvas.
"""

from .templates import TemplateSet
from .sheet import (
    ComposedSheet,
    MultiImageOptions,
    build_payload,
    compose_multi_image_sheet,
    compose_sheet,
    fit_within,
)
from .controller import GeneratedSheet, generate_multi_image_sheet, generate_template_sheet

__all__ = [
    "TemplateSet",
    "ComposedSheet",
    "MultiImageOptions",
    "build_payload",
    "compose_multi_image_sheet",
    "compose_sheet",
    "fit_within",
    "GeneratedSheet",
    "generate_multi_image_sheet",
    "generate_template_sheet",
]
