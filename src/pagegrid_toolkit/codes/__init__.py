"""
Visual code channel

Adapters around the external QR encode/decode capabilities.
"""

from .encoder import CodeEncoder, QrCodeEncoder, render_code
from .detector import CodeDetector, DetectedCode, QrCodeDetector

__all__ = [
    "CodeEncoder",
    "QrCodeEncoder",
    "render_code",
    "CodeDetector",
    "DetectedCode",
    "QrCodeDetector",
]
