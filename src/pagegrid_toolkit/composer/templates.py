"""
Module: composer.templates

Purpose:
    Template sources for sheet composition. A single template is either
    one page (taller than wide) or a two-page spread (wider than tall;
    left half = even pages, right half = odd pages). A template pair
    supplies distinct left and right page images of identical size.

Key Classes:
    - TemplateSet: Page-image source for the composer

Key Functions:
    - TemplateSet.single(): One template image (page or spread)
    - TemplateSet.pair(): Distinct left/right templates
    - TemplateSet.from_directory(): Resolve template files in a folder

Dependencies:
    - PIL: Images
    - images.loader: File loading

Used By:
    - composer.sheet
    - composer.controller
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from pagegrid_toolkit.core.errors import MissingAssetError
from pagegrid_toolkit.images.loader import load_image
from pagegrid_toolkit.layout.models import PageGeometry

logger = logging.getLogger(__name__)

TEMPLATE_FILENAME = "template.png"
TEMPLATE_LEFT_FILENAME = "template_left.png"
TEMPLATE_RIGHT_FILENAME = "template_right.png"


class TemplateSet:
    """
    Source of per-page template images.
    
    Use the ``single``/``pair``/``from_directory`` constructors rather
    than calling ``__init__`` directly.
    """
    
    def __init__(
        self,
        primary: Image.Image,
        right: Optional[Image.Image] = None,
    ) -> None:
        self._primary = primary.convert("RGB")
        self._right = right.convert("RGB") if right is not None else None
        
        if self._right is not None and self._primary.size != self._right.size:
            raise MissingAssetError(
                f"Left/right template sizes differ: {self._primary.size} vs {self._right.size}"
            )
        
        if self._right is not None:
            # Pair templates are whole pages, whatever their aspect
            self.page_geometry = PageGeometry(*self._primary.size)
        else:
            self.page_geometry = PageGeometry.from_template_size(*self._primary.size)
    
    @classmethod
    def single(cls, template: Image.Image) -> "TemplateSet":
        return cls(template)
    
    @classmethod
    def pair(cls, left: Image.Image, right: Image.Image) -> "TemplateSet":
        return cls(left, right)
    
    @classmethod
    def from_files(
        cls,
        template: Optional[Union[str, Path]] = None,
        *,
        left: Optional[Union[str, Path]] = None,
        right: Optional[Union[str, Path]] = None,
    ) -> "TemplateSet":
        """
        Load templates from paths: either ``left`` and ``right``, or ``template``.
        
        Raises:
            MissingAssetError: If a file is missing or only one of left/right is given
        """
        if left is not None or right is not None:
            if left is None or right is None:
                raise MissingAssetError("Both left and right templates are required")
            return cls.pair(load_image(left), load_image(right))
        if template is None:
            raise MissingAssetError("No template path given")
        return cls.single(load_image(template))
    
    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "TemplateSet":
        """
        Resolve templates in a directory.
        
        ``template_left.png`` + ``template_right.png`` select pair mode;
        otherwise ``template.png`` is used.
        
        Raises:
            MissingAssetError: If neither layout of files is present
        """
        directory = Path(directory)
        left = directory / TEMPLATE_LEFT_FILENAME
        right = directory / TEMPLATE_RIGHT_FILENAME
        if left.is_file() and right.is_file():
            logger.info(f"Using template pair from {directory}")
            return cls.from_files(left=left, right=right)
        
        fallback = directory / TEMPLATE_FILENAME
        if fallback.is_file():
            logger.info(f"Using single template {fallback}")
            return cls.from_files(fallback)
        
        raise MissingAssetError(
            f"No templates in {directory}: expected {TEMPLATE_FILENAME} "
            f"or {TEMPLATE_LEFT_FILENAME} + {TEMPLATE_RIGHT_FILENAME}"
        )
    
    @property
    def is_pair(self) -> bool:
        return self._right is not None
    
    @property
    def is_spread(self) -> bool:
        """Single template holding two pages side by side."""
        return self._right is None and self._primary.width > self._primary.height
    
    def page_image(self, page_number: int, start_with_left_page: bool) -> Image.Image:
        """
        Template image for one page, sized to ``page_geometry``.
        
        Pair mode shifts left/right by one page when starting with a left
        page. Spread mode uses the right half for odd pages.
        """
        if self._right is not None:
            is_right = page_number % 2 == 0 if start_with_left_page else page_number % 2 == 1
            return self._right if is_right else self._primary
        
        if not self.is_spread:
            return self._primary
        
        width, height = self.page_geometry.size
        left = width if page_number % 2 == 1 else 0
        return self._primary.crop((left, 0, left + width, height))
