"""
Column Detection Module
Finds the whitespace gutter of two-column report cards and splits the
page into left/right halves for separate recognition.
"""
import cv2
import numpy as np
from dataclasses import dataclass
from typing import Optional
import logging

from .image_processing import ImageInput, decode_image, encode_png

logger = logging.getLogger(__name__)


@dataclass
class ColumnSplitConfig:
    """Configuration for gutter detection and splitting"""
    min_image_width: int = 600
    analysis_width: int = 200

    # Vertical band analysed (fractions of height), skips header/footer
    band_top: float = 0.2
    band_bottom: float = 0.8

    # Horizontal search window for the gutter (fractions of width)
    search_start: float = 0.3
    search_end: float = 0.7

    rolling_window: int = 5
    brightness_ratio: float = 0.3
    # Brightness within this of the maximum counts as the same white band
    plateau_tolerance: float = 1.0

    overlap_ratio: float = 0.02
    min_column_width: int = 100


@dataclass
class ColumnSplit:
    """Result of splitting an image into two columns"""
    left: bytes
    right: bytes
    split_x: int
    left_width: int
    right_width: int
    original_width: int


def column_brightness(gray: np.ndarray, config: ColumnSplitConfig) -> np.ndarray:
    """
    Average brightness of every pixel column over the middle band.

    Args:
        gray: Grayscale analysis image
        config: ColumnSplitConfig

    Returns:
        1-D float array, one value per column
    """
    h = gray.shape[0]
    top = int(h * config.band_top)
    bottom = max(int(h * config.band_bottom), top + 1)
    return gray[top:bottom, :].astype(np.float64).mean(axis=0)


def _plateau_center(values: np.ndarray, peak: int, tolerance: float) -> float:
    """Midpoint of the contiguous run around peak that stays near the maximum"""
    near_max = values >= values[peak] - tolerance
    left = peak
    while left > 0 and near_max[left - 1]:
        left -= 1
    right = peak
    while right < len(values) - 1 and near_max[right + 1]:
        right += 1
    return (left + right) / 2


def detect_gutter(image: ImageInput, config: ColumnSplitConfig = None) -> Optional[int]:
    """
    Locate the vertical whitespace gutter between two text columns.

    The page is shrunk to a small analysis width, per-column brightness is
    averaged over the middle band, and the brightest rolling window inside
    the central search region is accepted only if it is close to white
    relative to the page average. The split point is the middle of the
    white stretch around that window, away from both columns.

    Args:
        image: Encoded image bytes or grayscale array
        config: Optional ColumnSplitConfig

    Returns:
        Gutter x-coordinate in original image pixels, or None
    """
    config = config or ColumnSplitConfig()
    gray = decode_image(image, grayscale=True)
    h, w = gray.shape[:2]

    if w < config.min_image_width:
        return None

    analysis_w = config.analysis_width
    analysis_h = max(1, round(h * analysis_w / w))
    small = cv2.resize(gray, (analysis_w, analysis_h), interpolation=cv2.INTER_AREA)

    brightness = column_brightness(small, config)
    overall_avg = float(brightness.mean())

    window = config.rolling_window
    half = window // 2
    start = max(int(analysis_w * config.search_start), half)
    end = min(int(analysis_w * config.search_end), analysis_w - half - 1)
    if end < start:
        return None

    rolling = np.convolve(brightness, np.ones(window) / window, mode="same")
    candidates = rolling[start:end + 1]
    best_offset = int(np.argmax(candidates))
    best_value = float(candidates[best_offset])
    best_x = start + _plateau_center(candidates, best_offset, config.plateau_tolerance)

    threshold = overall_avg + (255.0 - overall_avg) * config.brightness_ratio
    if best_value <= threshold:
        logger.debug(
            f"No gutter: brightest column {best_value:.1f} <= threshold {threshold:.1f}"
        )
        return None

    # Analysis column i covers original pixels i*scale .. (i+1)*scale
    gutter_x = round((best_x + 0.5) * w / analysis_w)
    logger.debug(f"Gutter detected at x={gutter_x} (brightness {best_value:.1f})")
    return gutter_x


def _split_at(
    gray: np.ndarray,
    split_x: int,
    config: ColumnSplitConfig
) -> Optional[ColumnSplit]:
    """Cut the image at split_x with a small overlap on each side"""
    w = gray.shape[1]
    overlap = round(w * config.overlap_ratio)

    left_end = min(split_x + overlap, w)
    right_start = max(split_x - overlap, 0)
    left_width = left_end
    right_width = w - right_start

    if left_width < config.min_column_width or right_width < config.min_column_width:
        logger.debug(
            f"Split rejected: column widths {left_width}/{right_width} "
            f"below {config.min_column_width}px"
        )
        return None

    return ColumnSplit(
        left=encode_png(gray[:, :left_end]),
        right=encode_png(gray[:, right_start:]),
        split_x=split_x,
        left_width=left_width,
        right_width=right_width,
        original_width=w,
    )


def split_columns(image: ImageInput, config: ColumnSplitConfig = None) -> Optional[ColumnSplit]:
    """
    Split at the detected gutter.

    Returns:
        ColumnSplit or None when no gutter is found or a column is too narrow
    """
    config = config or ColumnSplitConfig()
    gray = decode_image(image, grayscale=True)

    gutter_x = detect_gutter(gray, config)
    if gutter_x is None:
        return None

    return _split_at(gray, gutter_x, config)


def force_split_center(image: ImageInput, config: ColumnSplitConfig = None) -> Optional[ColumnSplit]:
    """
    Split at the horizontal midpoint regardless of gutter detection.

    Used only as a fallback when the regular recognition found too few
    subjects.
    """
    config = config or ColumnSplitConfig()
    gray = decode_image(image, grayscale=True)
    return _split_at(gray, gray.shape[1] // 2, config)

