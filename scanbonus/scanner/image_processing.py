"""
Image Processing Module
Normalizes photographed report cards for text recognition
"""
import io
import cv2
import numpy as np
from dataclasses import dataclass
from typing import Union
from PIL import Image, ImageOps, UnidentifiedImageError
import logging

from ..core.exceptions import InvalidImageException

logger = logging.getLogger(__name__)

ImageInput = Union[bytes, np.ndarray]


@dataclass
class PreprocessConfig:
    """Configuration for OCR preprocessing"""
    target_width: int = 2000
    sharpen_sigma: float = 1.5
    sharpen_amount: float = 1.0


def decode_image(data: ImageInput, grayscale: bool = True) -> np.ndarray:
    """
    Decode an encoded image buffer into a numpy array.

    Arrays are passed through (converted to grayscale when requested).

    Raises:
        InvalidImageException: If the buffer is empty or undecodable
    """
    if isinstance(data, np.ndarray):
        img = data
    else:
        if not data:
            raise InvalidImageException("empty image")
        buffer = np.frombuffer(data, dtype=np.uint8)
        flag = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
        img = cv2.imdecode(buffer, flag)
        if img is None:
            raise InvalidImageException("unsupported or corrupt image data")

    if grayscale and img.ndim == 3:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    return img


def encode_png(img: np.ndarray) -> bytes:
    """Encode an image array as PNG bytes"""
    ok, encoded = cv2.imencode(".png", img)
    if not ok:
        raise InvalidImageException("failed to encode image")
    return encoded.tobytes()


def load_oriented(raw: bytes) -> np.ndarray:
    """
    Decode raw bytes applying the embedded EXIF orientation.

    Returns:
        Image as BGR (or grayscale) numpy array
    """
    if not raw:
        raise InvalidImageException("empty image")

    try:
        with Image.open(io.BytesIO(raw)) as pil_img:
            pil_img = ImageOps.exif_transpose(pil_img)
            if pil_img.mode not in ("L", "RGB"):
                pil_img = pil_img.convert("RGB")
            arr = np.array(pil_img)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise InvalidImageException(str(e))

    if arr.ndim == 3:
        arr = cv2.cvtColor(arr, cv2.COLOR_RGB2BGR)
    return arr


def sharpen_normalize(gray: np.ndarray, sigma: float = 1.5, amount: float = 1.0) -> np.ndarray:
    """
    Apply unsharp-mask sharpening followed by min-max contrast stretch.

    Args:
        gray: Grayscale image
        sigma: Gaussian sigma of the unsharp mask
        amount: Strength of the sharpening

    Returns:
        Processed grayscale image
    """
    blur = cv2.GaussianBlur(gray, (0, 0), sigma)
    sharpened = cv2.addWeighted(gray, 1.0 + amount, blur, -amount, 0)
    sharpened = np.clip(sharpened, 0, 255).astype(np.uint8)

    return cv2.normalize(sharpened, None, 0, 255, cv2.NORM_MINMAX)


def preprocess_image(raw: bytes, config: PreprocessConfig = None) -> bytes:
    """
    Prepare a raw photo for recognition.

    Auto-rotates, downscales to the target width (never upscales),
    converts to grayscale, sharpens and normalizes contrast.

    Args:
        raw: Encoded image bytes
        config: Optional PreprocessConfig

    Returns:
        PNG-encoded grayscale image

    Raises:
        InvalidImageException: If the image cannot be decoded
    """
    config = config or PreprocessConfig()
    img = load_oriented(raw)

    h, w = img.shape[:2]
    if w > config.target_width:
        new_h = max(1, round(h * config.target_width / w))
        img = cv2.resize(img, (config.target_width, new_h), interpolation=cv2.INTER_AREA)
        logger.debug(f"Resized image from {w}x{h} to {config.target_width}x{new_h}")

    gray = decode_image(img, grayscale=True)
    processed = sharpen_normalize(gray, config.sharpen_sigma, config.sharpen_amount)

    return encode_png(processed)
