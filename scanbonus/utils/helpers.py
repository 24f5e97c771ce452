"""
Utility functions for the application
"""
import base64
import binascii
import logging
import re

from scanbonus.core import BadRequestException, Messages

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)


def strip_data_url(image: str) -> str:
    """Drop a leading data:image/...;base64, prefix if present"""
    return DATA_URL_PREFIX.sub("", image.strip(), count=1)


def decode_base64_image(image: str) -> bytes:
    """Decode a base64 image payload (data-URL prefix allowed)"""
    payload = strip_data_url(image)
    if not payload:
        raise BadRequestException(Messages.NO_IMAGE)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Rejected malformed base64 payload: {e}")
        raise BadRequestException("Image is not valid base64")


def format_file_size(size_bytes: int) -> str:
    """Format file size in human readable format"""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.2f} TB"
