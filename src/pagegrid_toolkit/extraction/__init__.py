"""
Page Extractor

Bounds-checked page crops and ordered, zero-padded page files.
"""

from .cropper import crop_page, extract_pages
from .writer import clear_directory, normalize_output_format, page_filename, write_pages
from .controller import SplitResult, split_image, split_sheet

__all__ = [
    "crop_page",
    "extract_pages",
    "clear_directory",
    "normalize_output_format",
    "page_filename",
    "write_pages",
    "SplitResult",
    "split_image",
    "split_sheet",
]
