"""
Recognition Module
Interface to the text recognition backend plus a Tesseract implementation.
"""
import asyncio
import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from PIL import Image

from ..core.exceptions import RecognitionUnavailableException
from .scan_config import ScanConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecognizedWord:
    """A single recognized word"""
    text: str
    confidence: float
    box: Tuple[int, int, int, int] = (0, 0, 0, 0)  # x, y, width, height


@dataclass(frozen=True)
class RecognitionResult:
    """Text and confidence produced by one recognition call"""
    text: str
    confidence: float
    words: Tuple[RecognizedWord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RecognitionOptions:
    """Per-request recognition hints"""
    locale: str = "en"
    country_code: Optional[str] = None


class TextRecognizer(ABC):
    """
    Text recognition backend.

    Implementations may be slow (network or heavy local model) and must
    raise RecognitionUnavailableException on failure. Retries, if any,
    belong to the implementation.
    """

    @abstractmethod
    async def recognize(
        self,
        image: bytes,
        options: RecognitionOptions,
        config: ScanConfig
    ) -> RecognitionResult:
        """Recognize text in an encoded image"""


def resolve_languages(options: RecognitionOptions, config: ScanConfig) -> str:
    """
    Pick Tesseract language codes: country first, then locale, then English.
    """
    if options.country_code and options.country_code in config.country_languages:
        return config.country_languages[options.country_code]
    if options.locale and options.locale in config.locale_languages:
        return config.locale_languages[options.locale]
    return "eng"


class TesseractRecognizer(TextRecognizer):
    """Recognizer backed by a local Tesseract installation via pytesseract"""

    def __init__(self, tesseract_cmd: Optional[str] = None, tess_config: str = "--oem 1 --psm 6"):
        import pytesseract

        self._pytesseract = pytesseract
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.tess_config = tess_config

    async def recognize(
        self,
        image: bytes,
        options: RecognitionOptions,
        config: ScanConfig
    ) -> RecognitionResult:
        langs = resolve_languages(options, config)
        return await asyncio.to_thread(self._recognize_sync, image, langs)

    def _recognize_sync(self, image: bytes, langs: str) -> RecognitionResult:
        pytesseract = self._pytesseract
        try:
            with Image.open(io.BytesIO(image)) as img:
                data = pytesseract.image_to_data(
                    img,
                    lang=langs,
                    config=self.tess_config,
                    output_type=pytesseract.Output.DICT
                )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            logger.error(f"Tesseract failed ({langs}): {e}")
            raise RecognitionUnavailableException(str(e))

        return _result_from_data(data)


def _result_from_data(data: Dict[str, List]) -> RecognitionResult:
    """Rebuild line text and mean confidence from image_to_data output"""
    words: List[RecognizedWord] = []
    lines: Dict[Tuple[int, int, int], List[str]] = {}
    line_order: List[Tuple[int, int, int]] = []

    n = len(data.get("text", []))
    for i in range(n):
        txt = (data["text"][i] or "").strip()
        if not txt:
            continue
        try:
            conf = float(data["conf"][i])
        except (TypeError, ValueError):
            conf = -1.0
        if conf < 0:
            continue

        words.append(RecognizedWord(
            text=txt,
            confidence=conf,
            box=(
                int(data["left"][i]), int(data["top"][i]),
                int(data["width"][i]), int(data["height"][i])
            )
        ))

        key = (
            int(data.get("block_num", [0] * n)[i]),
            int(data.get("par_num", [0] * n)[i]),
            int(data.get("line_num", [0] * n)[i]),
        )
        if key not in lines:
            lines[key] = []
            line_order.append(key)
        lines[key].append(txt)

    text = "\n".join(" ".join(lines[key]) for key in line_order)
    confidence = sum(w.confidence for w in words) / len(words) if words else 0.0

    return RecognitionResult(text=text, confidence=round(confidence, 2), words=tuple(words))
