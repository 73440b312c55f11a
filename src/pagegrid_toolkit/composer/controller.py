"""
Module: composer.controller

Purpose:
    Path-based sheet generation: resolve templates, load source images,
    compose, and save to the export directory.

Key Functions:
    - generate_template_sheet(): Template-only sheet -> template_{n}p.{ext}
    - generate_multi_image_sheet(): Source images -> template_multi_{n}p.{ext}

Dependencies:
    - composer.sheet, composer.templates
    - extraction.writer: Format normalization and atomic saving

Used By:
    - pagegrid_toolkit.cli
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from pagegrid_toolkit.codes.encoder import CodeEncoder
from pagegrid_toolkit.core.errors import InvalidConfigurationError
from pagegrid_toolkit.extraction.writer import normalize_output_format, save_image
from pagegrid_toolkit.images.loader import load_image
from pagegrid_toolkit.layout.config import LayoutSettings

from .sheet import ComposedSheet, MultiImageOptions, compose_multi_image_sheet, compose_sheet
from .templates import TemplateSet

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class GeneratedSheet:
    """A composed sheet and where it was saved."""
    sheet: ComposedSheet
    path: Path


def template_sheet_filename(total_pages: int, fmt: str) -> str:
    return f"template_{total_pages}p.{fmt}"


def multi_image_sheet_filename(total_pages: int, fmt: str) -> str:
    return f"template_multi_{total_pages}p.{fmt}"


def _output_path(output_dir: PathLike, filename: str, output_path: Optional[PathLike]) -> Path:
    if output_path is not None:
        return Path(output_path)
    return Path(output_dir) / filename


def generate_template_sheet(
    templates: TemplateSet,
    settings: LayoutSettings,
    output_dir: PathLike,
    output_format: str = "png",
    *,
    output_path: Optional[PathLike] = None,
    encoder: Optional[CodeEncoder] = None,
) -> GeneratedSheet:
    """
    Compose a template sheet and save it.
    
    Args:
        templates: Template source
        settings: Layout settings
        output_dir: Directory for the default filename
        output_format: "png" or "jpg" (normalized)
        output_path: Explicit path overriding the default filename
        encoder: Code encoder override
    """
    fmt = normalize_output_format(output_format)
    sheet = compose_sheet(templates, settings, encoder=encoder)
    path = _output_path(output_dir, template_sheet_filename(settings.total_pages, fmt), output_path)
    save_image(sheet.image, path, fmt)
    logger.info(f"Saved template sheet to {path}")
    return GeneratedSheet(sheet=sheet, path=path)


def generate_multi_image_sheet(
    templates: TemplateSet,
    image_paths: Sequence[PathLike],
    settings: LayoutSettings,
    output_dir: PathLike,
    output_format: str = "png",
    options: Optional[MultiImageOptions] = None,
    *,
    output_path: Optional[PathLike] = None,
    encoder: Optional[CodeEncoder] = None,
) -> GeneratedSheet:
    """
    Compose a multi-image sheet from files and save it.
    
    Raises:
        InvalidConfigurationError: If no images are given or the count differs
            from total_pages
        MissingAssetError: If an image cannot be read
    """
    if not image_paths:
        raise InvalidConfigurationError("No page images given")
    if len(image_paths) != settings.total_pages:
        raise InvalidConfigurationError(
            f"Image count ({len(image_paths)}) does not match total_pages ({settings.total_pages})"
        )
    
    fmt = normalize_output_format(output_format)
    sources = [load_image(p) for p in image_paths]
    sheet = compose_multi_image_sheet(templates, sources, settings, options, encoder=encoder)
    path = _output_path(output_dir, multi_image_sheet_filename(len(sources), fmt), output_path)
    save_image(sheet.image, path, fmt)
    logger.info(f"Saved multi-image sheet to {path}")
    return GeneratedSheet(sheet=sheet, path=path)
