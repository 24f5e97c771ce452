# Utils package
from .helpers import (
    strip_data_url,
    decode_base64_image,
    format_file_size,
)

__all__ = [
    "strip_data_url",
    "decode_base64_image",
    "format_file_size",
]
