"""
Module: extraction.writer

Purpose:
    Write images to disk: output format normalization, export directory
    clearing, zero-padded page filenames and atomic saves.

Key Functions:
    - normalize_output_format(): "jpeg" -> "jpg", unknown -> "png"
    - clear_directory(): Delete the files directly inside a directory
    - page_filename(): "001.png" style names
    - save_image(): Atomic single-image save
    - write_pages(): Save page images in order

Dependencies:
    - PIL.Image: Image saving
    - tempfile (std): Atomic writes

Used By:
    - extraction.controller
    - composer.controller
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import List, Sequence

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FORMAT = "png"

# Extension -> PIL format name
PIL_FORMATS = {
    "png": "PNG",
    "jpg": "JPEG",
}


def normalize_output_format(fmt: str) -> str:
    """
    Normalize a requested output format to a supported extension.
    
    Examples:
        >>> normalize_output_format("JPEG")
        'jpg'
        >>> normalize_output_format("tiff")
        'png'
    """
    value = (fmt or "").strip().lower().lstrip(".")
    if value == "jpeg":
        value = "jpg"
    if value not in PIL_FORMATS:
        logger.warning(f"Unsupported output format {fmt!r}, using {DEFAULT_OUTPUT_FORMAT}")
        return DEFAULT_OUTPUT_FORMAT
    return value


def clear_directory(directory: Path) -> int:
    """
    Create ``directory`` if needed and delete the files directly inside it.
    
    Subdirectories are left alone. Not safe against concurrent writers.
    
    Returns:
        Number of files deleted
    """
    directory.mkdir(parents=True, exist_ok=True)
    removed = 0
    for entry in directory.iterdir():
        if entry.is_file():
            entry.unlink()
            removed += 1
    if removed:
        logger.debug(f"Cleared {removed} file(s) from {directory}")
    return removed


def page_filename(page_number: int, fmt: str) -> str:
    """Zero-padded page filename, e.g. ``page_filename(7, "png") == "007.png"``."""
    return f"{page_number:03d}.{fmt}"


def save_image(image: Image.Image, path: Path, fmt: str) -> None:
    """Write image atomically using temp file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    pil_format = PIL_FORMATS[fmt]
    if pil_format == "JPEG" and image.mode != "RGB":
        image = image.convert("RGB")
    
    with tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=f".{fmt}",
        dir=path.parent,
        delete=False,
    ) as f:
        image.save(f, format=pil_format)
        temp_path = Path(f.name)
    
    # Use replace() instead of rename() for Windows compatibility
    temp_path.replace(path)


def write_pages(pages: Sequence[Image.Image], directory: Path, fmt: str) -> List[Path]:
    """
    Save pages as ``001.ext``, ``002.ext``, ... in page order.
    
    Args:
        pages: Page images, index 0 = page 1
        directory: Existing export directory
        fmt: Normalized output extension
        
    Returns:
        Written paths in page order
    """
    paths: List[Path] = []
    for index, page in enumerate(pages, start=1):
        path = directory / page_filename(index, fmt)
        save_image(page, path, fmt)
        paths.append(path)
    logger.info(f"Wrote {len(paths)} page(s) to {directory}")
    return paths
