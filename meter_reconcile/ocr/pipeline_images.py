from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from meter_reconcile.ocr.pdf_to_images import pdf_to_images

logger = logging.getLogger(__name__)

PDF_SUFFIXES = {".pdf"}


@dataclass(frozen=True)
class CaptureSource:
    label: str
    image: Any
    error: str | None = None


def _pdf_sources(path: Path, dpi: int) -> list[CaptureSource]:
    try:
        pages = pdf_to_images(path, dpi=dpi)
    except Exception as exc:
        # stands in for the whole PDF as one failed capture
        logger.warning("Could not rasterize %s: %s", path.name, exc)
        return [CaptureSource(path.name, None, error=str(exc))]

    return [
        CaptureSource(f"{path.name}#page-{page_num}", page)
        for page_num, page in enumerate(pages, start=1)
    ]


def expand_sources(inputs: Iterable, dpi: int = 300) -> list[CaptureSource]:
    """
    Capture sources in submission order.

    A PDF contributes one source per page, in page order, at its position
    in the batch. Anything else is passed through as a single image.
    """
    sources = []
    for item in inputs:
        if isinstance(item, CaptureSource):
            sources.append(item)
        elif isinstance(item, (str, Path)):
            path = Path(item)
            if path.suffix.lower() in PDF_SUFFIXES:
                sources.extend(_pdf_sources(path, dpi))
            else:
                sources.append(CaptureSource(path.name, path))
        else:
            sources.append(CaptureSource(f"capture-{len(sources) + 1}", item))
    return sources
