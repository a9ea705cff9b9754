import logging

import cv2

from meter_reconcile.errors import RecognizerUnavailableError
from meter_reconcile.preprocess.deskew import prepare_meter_image

logger = logging.getLogger(__name__)

_ocr = None


def get_ocr():
    global _ocr
    if _ocr is None:
        try:
            from paddleocr import PaddleOCR
        except Exception as exc:
            raise RecognizerUnavailableError(
                "PaddleOCR runtime is not available. Install the OCR extra: "
                "pip install 'meter-reconcile[ocr]' (Windows may need "
                "paddlepaddle==2.6.2 paddleocr==2.7.0.3)"
            ) from exc

        logger.info("Loading PaddleOCR English model")
        _ocr = PaddleOCR(
            use_angle_cls=True,
            lang="en",
            use_gpu=False,
        )
    return _ocr


def lines_from_result(result):
    """Recognized text lines, top to bottom, from a PaddleOCR result."""
    lines = []
    for page in result or []:
        for line in page or []:
            _bbox, (text, _confidence) = line
            text = (text or "").strip()
            if text:
                lines.append(text)
    return lines


def load_image(image_ref):
    if hasattr(image_ref, "shape"):
        return image_ref
    img = cv2.imread(str(image_ref))
    if img is None:
        raise ValueError(f"Could not read image {image_ref}")
    return img


def recognize_text(image_ref, enable_deskew=True, return_meta=False):
    ocr = get_ocr()
    img, meta = prepare_meter_image(load_image(image_ref), enable_deskew=enable_deskew)

    text = "\n".join(lines_from_result(ocr.ocr(img, cls=True)))
    source = "in-memory image" if hasattr(image_ref, "shape") else image_ref
    logger.debug("Recognized %d characters from %s", len(text), source)
    if return_meta:
        return text, meta
    return text
