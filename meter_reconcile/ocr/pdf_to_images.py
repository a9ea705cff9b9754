import logging
import os
from pathlib import Path

import cv2
import numpy as np
from pdf2image import convert_from_path
from pdf2image.exceptions import PDFInfoNotInstalledError

logger = logging.getLogger(__name__)


def resolve_poppler_path():
    # POPPLER_PATH may name the bin directory or the pdfinfo binary itself
    configured = os.getenv("POPPLER_PATH")
    if not configured:
        return None
    candidate = Path(configured)
    return str(candidate.parent if candidate.is_file() else candidate)


def pdf_to_images(pdf_path, dpi=300):
    """
    Rasterize every page of a scanned meter PDF in memory.

    Returns:
        list[np.ndarray]: BGR page images in page order
    """
    kwargs = {"dpi": dpi}
    poppler_path = resolve_poppler_path()
    if poppler_path:
        kwargs["poppler_path"] = poppler_path

    try:
        pages = convert_from_path(str(pdf_path), **kwargs)
    except PDFInfoNotInstalledError as exc:
        raise RuntimeError(
            "Poppler is required to read PDF captures. Install Poppler and either add its "
            "'bin' folder to PATH or set POPPLER_PATH to that folder."
        ) from exc

    images = [cv2.cvtColor(np.array(page.convert("RGB")), cv2.COLOR_RGB2BGR) for page in pages]
    logger.debug("Rasterized %d page(s) of %s", len(images), Path(pdf_path).name)
    return images
