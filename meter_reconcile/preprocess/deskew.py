from __future__ import annotations

import cv2
import numpy as np

# phone photos are far larger than OCR needs
MAX_LONG_SIDE = 2000


def limit_size(image: np.ndarray, max_long_side: int = MAX_LONG_SIDE) -> tuple[np.ndarray, float]:
    h, w = image.shape[:2]
    long_side = max(h, w)
    if long_side <= max_long_side:
        return image, 1.0

    scale = max_long_side / float(long_side)
    resized = cv2.resize(
        image,
        (int(round(w * scale)), int(round(h * scale))),
        interpolation=cv2.INTER_AREA,
    )
    return resized, scale


def _rotate_keep_bounds(image: np.ndarray, angle_deg: float) -> np.ndarray:
    h, w = image.shape[:2]
    center = (w / 2.0, h / 2.0)
    matrix = cv2.getRotationMatrix2D(center, angle_deg, 1.0)

    cos = abs(matrix[0, 0])
    sin = abs(matrix[0, 1])
    bound_w = int((h * sin) + (w * cos))
    bound_h = int((h * cos) + (w * sin))

    matrix[0, 2] += (bound_w / 2.0) - center[0]
    matrix[1, 2] += (bound_h / 2.0) - center[1]

    return cv2.warpAffine(
        image,
        matrix,
        (bound_w, bound_h),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_REPLICATE,
    )


def estimate_skew(image: np.ndarray) -> float:
    gray = image if image.ndim == 2 else cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    ink = cv2.adaptiveThreshold(
        gray,
        255,
        cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
        cv2.THRESH_BINARY_INV,
        31,
        15,
    )

    points = np.column_stack(np.where(ink > 0))
    if points.size == 0:
        return 0.0

    angle = cv2.minAreaRect(points.astype(np.float32))[-1]
    if angle < -45:
        angle += 90
    elif angle > 45:
        angle -= 90
    return float(angle)


def prepare_meter_image(
    image: np.ndarray,
    enable_deskew: bool = True,
    min_abs_angle: float = 0.7,
    max_abs_angle: float = 15.0,
) -> tuple[np.ndarray, dict]:
    """
    Shrink an oversized meter photo and straighten small rotations.

    Angles outside [min_abs_angle, max_abs_angle] are left alone: tiny
    ones are noise, large ones are usually the meter face, not skew.
    """
    image, scale = limit_size(image)
    meta = {
        "scale": round(scale, 4),
        "deskew": {"enabled": bool(enable_deskew), "applied": False},
    }
    if not enable_deskew:
        return image, meta

    angle = estimate_skew(image)
    meta["deskew"].update({
        "detected_angle_deg": round(angle, 4),
        "applied_angle_deg": 0.0,
        "method": "min_area_rect",
    })
    if abs(angle) < min_abs_angle or abs(angle) > max_abs_angle:
        return image, meta

    meta["deskew"]["applied"] = True
    meta["deskew"]["applied_angle_deg"] = round(angle, 4)
    return _rotate_keep_bounds(image, angle), meta
