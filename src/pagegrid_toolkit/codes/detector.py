"""
Module: codes.detector

Purpose:
    Detect zero or more QR codes in a bitmap, returning decoded text and
    corner points in image coordinates. Multi-result detection is tried
    first with single-result detection as fallback; some detector
    builds return nothing from one call and a code from the other.

Key Classes:
    - DetectedCode: Decoded text plus corner points
    - CodeDetector: Protocol for image -> detected codes
    - QrCodeDetector: OpenCV-backed implementation

Dependencies:
    - cv2 (opencv-python-headless): QRCodeDetector
    - numpy: Image to array conversion
    - PIL: Input images
    - core.errors: Missing code positions

Used By:
    - registration.search
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Sequence, Tuple

import cv2
import numpy as np
from PIL import Image

from pagegrid_toolkit.core.errors import DecodeFailureError

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class DetectedCode:
    """
    A decoded code and its corner points.
    
    Attributes:
        text: Decoded text
        points: Corner points (x, y) in image coordinates
    """
    text: str
    points: Tuple[Point, ...]
    
    @property
    def centroid(self) -> Point:
        """Mean of the corner points."""
        if not self.points:
            raise DecodeFailureError(f"Code {self.text!r} has no points")
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return sum(xs) / len(xs), sum(ys) / len(ys)
    
    def shifted(self, dx: float, dy: float) -> "DetectedCode":
        """Copy with points offset, used to map region hits to full-image coordinates."""
        return DetectedCode(
            self.text,
            tuple((x + dx, y + dy) for x, y in self.points),
        )


class CodeDetector(Protocol):
    """Finds codes in an image."""
    
    def detect(self, image: Image.Image) -> List[DetectedCode]:
        ...


def _to_points(raw: np.ndarray) -> Tuple[Point, ...]:
    pts = np.asarray(raw, dtype=np.float64).reshape(-1, 2)
    return tuple((float(x), float(y)) for x, y in pts)


def _to_gray(image: Image.Image) -> np.ndarray:
    return np.asarray(image.convert("L"), dtype=np.uint8)


class QrCodeDetector:
    """QR detection via cv2.QRCodeDetector (multi, then single)."""
    
    def __init__(self) -> None:
        self._detector = cv2.QRCodeDetector()
    
    def detect(self, image: Image.Image) -> List[DetectedCode]:
        gray = _to_gray(image)
        codes = self._detect_multi(gray)
        if codes:
            return codes
        return self._detect_single(gray)
    
    def _detect_multi(self, gray: np.ndarray) -> List[DetectedCode]:
        try:
            ok, texts, points, _ = self._detector.detectAndDecodeMulti(gray)
        except cv2.error as e:
            logger.debug(f"Multi-code detection failed: {e}")
            return []
        if not ok or points is None:
            return []
        return _collect(texts, points)
    
    def _detect_single(self, gray: np.ndarray) -> List[DetectedCode]:
        try:
            text, points, _ = self._detector.detectAndDecode(gray)
        except cv2.error as e:
            logger.debug(f"Single-code detection failed: {e}")
            return []
        if not text or points is None or not np.size(points):
            return []
        return [DetectedCode(text, _to_points(points))]


def _collect(texts: Sequence[str], points: np.ndarray) -> List[DetectedCode]:
    """Pair texts with their point sets, dropping undecoded detections."""
    codes: List[DetectedCode] = []
    for text, pts in zip(texts, points):
        if text and np.size(pts):
            codes.append(DetectedCode(text, _to_points(pts)))
    return codes
