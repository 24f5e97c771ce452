"""
OCR correction helpers for common misreadings in report card text
"""
import re
import unicodedata
from typing import Dict, List, Sequence, Tuple

MAX_VARIANTS = 8


def normalize_umlauts(text: str, umlaut_map: Dict[str, str]) -> str:
    """Replace accented characters using the configured map"""
    return "".join(umlaut_map.get(ch, ch) for ch in text)


def strip_diacritics(text: str) -> str:
    """Drop combining marks (é -> e, ñ -> n)"""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def generate_ocr_variants(
    text: str,
    substitutions: Sequence[Tuple[str, str]],
    umlaut_map: Dict[str, str]
) -> List[str]:
    """
    Alternate spellings of text with common OCR confusions undone.

    The original text is always first; at most MAX_VARIANTS are returned.
    """
    variants = [text]

    def add(candidate: str):
        if candidate not in variants:
            variants.append(candidate)

    add(normalize_umlauts(text, umlaut_map))

    lower = text.lower()
    for wrong, correct in substitutions:
        idx = lower.find(wrong.lower())
        if idx >= 0:
            add(text[:idx] + correct + text[idx + len(wrong):])

    return variants[:MAX_VARIANTS]


def correct_ocr_text(text: str) -> str:
    """
    Fix frequent artifacts in free-text fields (names, school names).
    """
    corrected = text.strip()
    corrected = corrected.replace("|", "l")
    # mid-word 0 -> O
    corrected = re.sub(r"(?<=[^\W\d_])0(?=[^\W\d_])", "O", corrected)
    # capital + 1 + lower -> l
    corrected = re.sub(r"(?<=[A-Z])1(?=[a-z])", "l", corrected)
    return re.sub(r"\s+", " ", corrected)


def capitalize_proper_name(text: str) -> str:
    """E.g. 'mAX müLLER' -> 'Max Müller'"""
    return " ".join(
        "-".join(part[:1].upper() + part[1:].lower() for part in word.split("-"))
        for word in text.split()
    )
