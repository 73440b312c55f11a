"""
Module: codes.encoder

Purpose:
    Encode text into a square QR code image of an exact pixel size.
    The quiet zone is drawn inside the fixed square so that page content
    reaching under a code never touches its modules.

Key Classes:
    - CodeEncoder: Protocol for text -> square code image
    - QrCodeEncoder: qrcode-backed implementation

Dependencies:
    - qrcode: QR module matrix
    - numpy: Matrix -> pixel array
    - PIL: Image scaling

Used By:
    - composer.markers
"""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np
import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M

logger = logging.getLogger(__name__)

# Minimum quiet zone from the QR standard
QUIET_ZONE_MODULES = 4


class CodeEncoder(Protocol):
    """Renders text as a square code image."""
    
    def render(self, text: str, size: int) -> Image.Image:
        ...


def render_code(
    text: str,
    size: int,
    error_correction: int = ERROR_CORRECT_M,
    quiet_zone: int = QUIET_ZONE_MODULES,
) -> Image.Image:
    """
    Render ``text`` as a QR code exactly ``size`` x ``size`` pixels.
    
    Args:
        text: Text to encode
        size: Output edge length in pixels
        error_correction: qrcode error correction constant
        quiet_zone: White border in modules, included in ``size``
        
    Returns:
        RGB image, black modules on white
        
    Raises:
        ValueError: If size is not positive
    """
    if size <= 0:
        raise ValueError(f"Code size must be positive: {size}")
    
    qr = qrcode.QRCode(
        version=None,
        error_correction=error_correction,
        box_size=1,
        border=quiet_zone,
    )
    qr.add_data(text)
    qr.make(fit=True)
    
    # get_matrix() is True for dark modules
    matrix = np.array(qr.get_matrix(), dtype=bool)
    modules = matrix.shape[0]
    if modules > size:
        logger.warning(f"Code for {len(text)} chars has {modules} modules, more than {size}px")
    
    pixels = np.where(matrix, 0, 255).astype(np.uint8)
    img = Image.fromarray(pixels)
    img = img.resize((size, size), Image.Resampling.NEAREST)
    return img.convert("RGB")


class QrCodeEncoder:
    """Default encoder producing QR codes via the qrcode package."""
    
    def __init__(self, error_correction: int = ERROR_CORRECT_M) -> None:
        self.error_correction = error_correction
    
    def render(self, text: str, size: int) -> Image.Image:
        return render_code(text, size, self.error_correction)
