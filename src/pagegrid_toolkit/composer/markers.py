"""
Module: composer.markers

Purpose:
    Draw the registration codes onto a composed canvas: three corner
    markers (TL, BL, BR) and the payload code in the top-right corner.
    TR carries no marker so the payload is the only code in that corner.

Key Functions:
    - draw_corner_markers(): Paste the three marker codes
    - draw_payload_code(): Paste the payload code
    - draw_registration_codes(): Both of the above

Dependencies:
    - PIL: Pasting
    - codes.encoder: Code rendering

Used By:
    - composer.sheet
"""

from __future__ import annotations

import logging

from PIL import Image

from pagegrid_toolkit.codes.encoder import CodeEncoder
from pagegrid_toolkit.common.constants import REGISTRATION, RegistrationConstants
from pagegrid_toolkit.core.models.markers import (
    DRAWN_MARKER_ROLES,
    marker_top_left,
    payload_code_top_left,
)

logger = logging.getLogger(__name__)


def draw_corner_markers(
    canvas: Image.Image,
    encoder: CodeEncoder,
    constants: RegistrationConstants = REGISTRATION,
) -> None:
    """Paste TL, BL and BR marker codes onto ``canvas`` in place."""
    size = constants.marker_size_px
    for role in DRAWN_MARKER_ROLES:
        code = encoder.render(role.text, size)
        x, y = marker_top_left(role, canvas.width, canvas.height, size, constants.marker_margin_px)
        canvas.paste(code, (x, y))
        logger.debug(f"Marker {role} at ({x}, {y})")


def draw_payload_code(
    canvas: Image.Image,
    text: str,
    encoder: CodeEncoder,
    constants: RegistrationConstants = REGISTRATION,
) -> None:
    """Paste the payload code in the top-right corner of ``canvas`` in place."""
    size = constants.payload_code_size_px
    code = encoder.render(text, size)
    x, y = payload_code_top_left(canvas.width, size, constants.payload_code_margin_px)
    canvas.paste(code, (x, y))
    logger.debug(f"Payload code ({len(text)} chars) at ({x}, {y})")


def draw_registration_codes(
    canvas: Image.Image,
    payload_text: str,
    encoder: CodeEncoder,
    constants: RegistrationConstants = REGISTRATION,
) -> None:
    draw_corner_markers(canvas, encoder, constants)
    draw_payload_code(canvas, payload_text, encoder, constants)
