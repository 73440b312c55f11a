"""
Module: images.loader

Purpose:
    Thin image loader that normalizes any readable source format into an
    RGB PIL image owned by the caller.

Key Functions:
    - load_image(): Open a file and return a detached RGB image

Dependencies:
    - PIL: Image decoding

Used By:
    - composer.templates
    - composer.controller
    - extraction.controller
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from PIL import Image, ImageOps, UnidentifiedImageError

from pagegrid_toolkit.core.errors import MissingAssetError

logger = logging.getLogger(__name__)


def load_image(path: Union[str, Path]) -> Image.Image:
    """
    Load an image as RGB, honouring EXIF orientation.
    
    The file handle is closed before returning; the result is an
    independent in-memory copy.
    
    Raises:
        MissingAssetError: If the file is missing or not a readable image
    """
    path = Path(path)
    if not path.is_file():
        raise MissingAssetError(f"Image not found: {path}")
    
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            rgb = img.convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise MissingAssetError(f"Cannot read image {path}: {e}") from e
    
    logger.debug(f"Loaded {path.name} ({rgb.width}x{rgb.height})")
    return rgb
