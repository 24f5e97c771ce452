"""
Shared fixtures for the scan & bonus tests
"""
import asyncio

import cv2
import numpy as np
import pytest

from scanbonus.core import RecognitionUnavailableException
from scanbonus.scanner import RecognitionResult, ScanConfig, TextRecognizer


CATALOG = {
    "categories": [
        {"id": "languages", "name": {"en": "Languages"}},
        {"id": "stem", "name": {"en": "STEM"}},
        {"id": "arts", "name": {"en": "Arts"}},
    ],
    "subjects": [
        {
            "id": "math",
            "name": {"en": "Mathematics", "de": "Mathematik"},
            "category_id": "stem",
            "is_core_subject": True,
        },
        {
            "id": "german",
            "name": {"en": "German", "de": "Deutsch"},
            "category_id": "languages",
            "is_core_subject": True,
        },
        {
            "id": "english",
            "name": {"en": "English", "de": "Englisch"},
            "category_id": "languages",
            "is_core_subject": True,
        },
        {
            "id": "french",
            "name": {"en": "French", "de": "Französisch", "fr": "Français"},
            "category_id": "languages",
        },
        {
            "id": "biology",
            "name": {"en": "Biology", "de": "Biologie"},
            "category_id": "stem",
        },
        {
            "id": "history",
            "name": {"en": "History", "de": "Geschichte"},
        },
        {
            "id": "art",
            "name": {"en": "Art", "de": "Kunst"},
            "category_id": "arts",
        },
        {
            "id": "sports",
            "name": {"en": "Physical Education", "de": "Sport"},
            "aliases": ["PE"],
            "category_id": "arts",
        },
        {
            "id": "retired",
            "name": {"en": "Needlework"},
            "is_active": False,
        },
    ],
}


class FakeRecognizer(TextRecognizer):
    """
    Returns canned texts in call order.

    A response that is an exception instance is raised instead.
    """

    def __init__(self, responses, confidence: float = 90.0, delay: float = 0.0):
        self.responses = list(responses)
        self.confidence = confidence
        self.delay = delay
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self.options = []

    async def recognize(self, image, options, config):
        index = self.calls
        self.calls += 1
        self.options.append(options)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.active -= 1

        response = self.responses[index] if index < len(self.responses) else ""
        if isinstance(response, Exception):
            raise response
        return RecognitionResult(text=response, confidence=self.confidence)


def encode(img: np.ndarray, ext: str = ".png") -> bytes:
    ok, buf = cv2.imencode(ext, img)
    assert ok
    return buf.tobytes()


def blank_page(width: int = 800, height: int = 600) -> np.ndarray:
    return np.full((height, width), 255, dtype=np.uint8)


def two_column_page(width: int = 1000, height: int = 800) -> np.ndarray:
    """White page with dark text-like bars in two columns and a gutter at x 450-550"""
    img = blank_page(width, height)
    for y in range(100, height - 100, 30):
        img[y:y + 15, 50:450] = 0
        img[y:y + 15, 550:950] = 0
    return img


@pytest.fixture
def scan_config():
    return ScanConfig.from_dict(CATALOG)


@pytest.fixture
def blank_png():
    return encode(blank_page())


@pytest.fixture
def two_column_png():
    return encode(two_column_page())


@pytest.fixture
def unavailable():
    return RecognitionUnavailableException("engine offline")
