import pytest
import sys
from pathlib import Path
from typing import Dict, List, Tuple

import numpy as np
from PIL import Image

# Add src to sys.path so we can import pagegrid_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from pagegrid_toolkit.codes.detector import DetectedCode  # noqa: E402


# ─────────────────────────────────────────────────────────────────────────────
# Fake code channel
# ─────────────────────────────────────────────────────────────────────────────

# Saturated colours that never occur in the grey test templates
CODE_COLORS: Tuple[Tuple[int, int, int], ...] = (
    (255, 0, 0),
    (0, 200, 0),
    (0, 0, 255),
    (255, 0, 255),
    (0, 220, 220),
    (255, 160, 0),
    (120, 0, 200),
    (0, 100, 60),
)


class FakeCodeChannel:
    """
    Deterministic stand-in for a QR encoder/detector pair.
    
    Each text is rendered as a solid square of its own colour; detection
    finds pixels of that colour and reports their centre.
    """
    
    def __init__(self, tolerance: int = 40, min_pixels: int = 200) -> None:
        self.colors: Dict[str, Tuple[int, int, int]] = {}
        self.tolerance = tolerance
        self.min_pixels = min_pixels
        self.detect_calls = 0
    
    def color_for(self, text: str) -> Tuple[int, int, int]:
        if text not in self.colors:
            if len(self.colors) >= len(CODE_COLORS):
                raise RuntimeError("Fake code channel out of colours")
            self.colors[text] = CODE_COLORS[len(self.colors)]
        return self.colors[text]
    
    # CodeEncoder
    def render(self, text: str, size: int) -> Image.Image:
        return Image.new("RGB", (size, size), self.color_for(text))
    
    # CodeDetector
    def detect(self, image: Image.Image) -> List[DetectedCode]:
        self.detect_calls += 1
        pixels = np.asarray(image.convert("RGB"), dtype=np.int16)
        codes: List[DetectedCode] = []
        for text, color in self.colors.items():
            mask = np.all(np.abs(pixels - np.array(color)) <= self.tolerance, axis=-1)
            if mask.sum() < self.min_pixels:
                continue
            ys, xs = np.nonzero(mask)
            # Pixel centres sit at +0.5
            cx = float(xs.mean()) + 0.5
            cy = float(ys.mean()) + 0.5
            points = ((cx - 1, cy - 1), (cx + 1, cy - 1), (cx + 1, cy + 1), (cx - 1, cy + 1))
            codes.append(DetectedCode(text, points))
        return codes


class EmptyDetector:
    """Detector that never finds anything."""
    
    def detect(self, image: Image.Image) -> List[DetectedCode]:
        return []


# Common test fixtures
@pytest.fixture
def fake_channel():
    """Fresh fake encoder/detector pair."""
    return FakeCodeChannel()


@pytest.fixture
def empty_detector():
    return EmptyDetector()


@pytest.fixture
def page_template():
    """Portrait single-page template (400x600, light grey with a darker block)."""
    img = Image.new("RGB", (400, 600), color=(235, 235, 235))
    img.paste((180, 180, 180), (100, 200, 300, 400))
    return img


@pytest.fixture
def spread_template():
    """Two-page spread template: left half dark grey, right half light grey."""
    img = Image.new("RGB", (800, 600), color=(200, 200, 200))
    img.paste((120, 120, 120), (0, 0, 400, 600))
    return img


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path
