"""
Module: extraction.controller

Purpose:
    Split a captured sheet into per-page image files: load, resolve
    (payload + registration), crop, and write ``001.ext``, ``002.ext``...

    The export directory is cleared before writing and the split is not
    atomic: a failure part-way leaves a partially populated directory.
    Do not run two splits into the same directory concurrently.

Key Classes:
    - SplitResult: Summary of a completed split

Key Functions:
    - split_image(): Split an in-memory image
    - split_sheet(): Split an image file

Dependencies:
    - registration.resolver: Payload decode and rectification
    - extraction.cropper, extraction.writer

Used By:
    - pagegrid_toolkit.cli
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image

from pagegrid_toolkit.codes.detector import CodeDetector
from pagegrid_toolkit.images.loader import load_image
from pagegrid_toolkit.payload.codec import MetadataPayload
from pagegrid_toolkit.registration.resolver import SheetResolver

from .cropper import extract_pages
from .writer import clear_directory, normalize_output_format, write_pages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitResult:
    """
    Summary of a completed split.
    
    Attributes:
        payload: Decoded payload
        pages_per_row: Pages per row used for cropping
        rows: Row count
        export_dir: Directory the pages were written to
        page_paths: Written files in page order
        used_marker_fallback: Markers-only rectification was needed
    """
    payload: MetadataPayload
    pages_per_row: int
    rows: int
    export_dir: Path
    page_paths: Tuple[Path, ...]
    used_marker_fallback: bool = False


def split_image(
    image: Image.Image,
    export_dir: Union[str, Path],
    output_format: str = "png",
    *,
    detector: Optional[CodeDetector] = None,
) -> SplitResult:
    """
    Split an in-memory sheet image into page files.
    
    Args:
        image: Captured sheet
        export_dir: Output directory (created, and cleared of files)
        output_format: "png" or "jpg"; "jpeg" is accepted, others fall back to png
        detector: Code detector override
        
    Raises:
        DecodeFailureError: No payload found
        RegistrationFailureError: Registration impossible
        GeometryOutOfBoundsError: A page does not fit the canvas
    """
    export_dir = Path(export_dir)
    fmt = normalize_output_format(output_format)
    clear_directory(export_dir)
    
    resolved = SheetResolver(detector).resolve(image)
    layout = resolved.layout
    pages = extract_pages(resolved.image, layout.settings, layout.page)
    paths = write_pages(pages, export_dir, fmt)
    
    logger.info(
        f"Split {len(paths)} page(s) ({layout.pages_per_row} per row, "
        f"{layout.rows} row(s)) into {export_dir}"
    )
    return SplitResult(
        payload=resolved.payload,
        pages_per_row=layout.pages_per_row,
        rows=layout.rows,
        export_dir=export_dir,
        page_paths=tuple(paths),
        used_marker_fallback=resolved.used_marker_fallback,
    )


def split_sheet(
    input_path: Union[str, Path],
    export_dir: Union[str, Path],
    output_format: str = "png",
    *,
    detector: Optional[CodeDetector] = None,
) -> SplitResult:
    """
    Split a sheet image file into page files.
    
    Raises:
        MissingAssetError: If the input image cannot be read
        (plus everything split_image raises)
    """
    image = load_image(input_path)
    return split_image(image, export_dir, output_format, detector=detector)
