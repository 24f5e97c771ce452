"""
Text Parser Module
Turns recognized report card text into subject/grade candidates and
document metadata.
"""
import re
import logging
from typing import Dict, List, Optional, Sequence

from .models import CandidateSubjectRow, DocumentMetadata, ParseResult
from .ocr_corrections import capitalize_proper_name, correct_ocr_text
from .scan_config import ScanConfig

logger = logging.getLogger(__name__)


GRADE_TOKEN_PATTERNS: Dict[str, re.Pattern] = {
    # German / Austrian / Russian: "2", "2+", "3-"
    "numeric_1_6": re.compile(r"^[1-6][+-]?$"),
    # Swiss / Italian decimals: "5.5", "7,5"
    "decimal": re.compile(r"^\d{1,2}[.,]\d{1,2}$"),
    # French: "15/20", "12,5/20"
    "over_20": re.compile(r"^\d{1,2}(?:[.,]\d{1,2})?/20$"),
    # Plain numbers up to two digits: "9", "14"
    "numeric": re.compile(r"^\d{1,2}[+-]?$"),
    # Letter grades: "A", "B+", "A*"
    "letter": re.compile(r"^[A-Fa-f][*+-]?$"),
    # Percentages: "85%", "92.5%"
    "percentage": re.compile(r"^\d{1,3}(?:[.,]\d)?%$"),
}

ALL_GRADE_KINDS = tuple(GRADE_TOKEN_PATTERNS)

COUNTRY_GRADE_KINDS: Dict[str, Sequence[str]] = {
    "DE": ("numeric_1_6", "decimal"),
    "AT": ("numeric_1_6", "decimal"),
    "CH": ("decimal", "numeric_1_6"),
    "RU": ("numeric_1_6",),
    "FR": ("over_20", "numeric", "decimal"),
    "IT": ("numeric", "decimal"),
    "ES": ("numeric", "decimal"),
    "NL": ("numeric", "decimal"),
    "GB": ("numeric", "letter"),
    "US": ("letter", "percentage", "numeric"),
    "CA": ("letter", "percentage", "numeric"),
    "AU": ("letter", "percentage", "numeric"),
}

# Fallback when no country is given; "en" is absent and accepts every kind
LOCALE_GRADE_KINDS: Dict[str, Sequence[str]] = {
    "de": ("numeric_1_6", "decimal"),
    "fr": ("over_20", "numeric", "decimal"),
    "it": ("numeric", "decimal"),
    "es": ("numeric", "decimal"),
    "ru": ("numeric_1_6",),
}

# "<label> [:| ...| ___] <grade>"
SUBJECT_LINE = re.compile(r"^(?P<label>.*?[^\W\d_].*?)[\s.:：_…-]+(?P<grade>\S+)$")

SCHOOL_YEAR = re.compile(r"(\d{4})\s*[/–-]\s*(\d{2,4})")
NUMERIC_DATE = re.compile(r"\b(\d{1,2})\.\s*(\d{1,2})\.\s*(\d{4})\b")
NAMED_DATE = re.compile(r"\b(\d{1,2})\.?\s+([^\W\d_]+)\s+(\d{4})\b")
NAMED_DATE_US = re.compile(r"\b([^\W\d_]+)\s+(\d{1,2}),?\s+(\d{4})\b")
CLASS_LEVEL = re.compile(
    r"\b(?:Jahrgangsstufe|Klasse|Classe|Class|Grade|Grado|Stufe|Year|Класс)\s*[:：]?\s*(\d{1,2})(?!\d)",
    re.IGNORECASE
)
# "Homeroom: Mr. Smith", "GPA: 3.8"
LABELED_LINE = re.compile(r"^[^:：]{1,40}[:：]\s*\S")
NAME_STOP = re.compile(
    r"\s{2,}|\s+(?:klasse|class|classe|grade|geb\.?|born|né)\b|\d",
    re.IGNORECASE
)

# Document titles mention a school type but are not the school's name
TITLE_WORDS = ("zeugnis", "report card", "bulletin", "pagella", "boletín", "табель")

# Months before this start a new school year
SCHOOL_YEAR_START_MONTH = 8


def is_grade_value(token: str, kinds: Sequence[str] = ALL_GRADE_KINDS) -> bool:
    """Check whether a token looks like a grade on any of the given scales"""
    token = token.strip()
    return any(GRADE_TOKEN_PATTERNS[kind].match(token) for kind in kinds)


def grade_kinds_for(
    country_code: Optional[str],
    locale: Optional[str] = None
) -> Sequence[str]:
    """Grade token kinds for a country, else for a locale, else all"""
    if country_code:
        return COUNTRY_GRADE_KINDS.get(country_code.upper(), ALL_GRADE_KINDS)
    if locale:
        return LOCALE_GRADE_KINDS.get(locale.lower(), ALL_GRADE_KINDS)
    return ALL_GRADE_KINDS


def _school_year_from_date(day: int, month: int, year: int) -> Optional[str]:
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None
    if month < SCHOOL_YEAR_START_MONTH:
        return f"{year - 1}-{year}"
    return f"{year}-{year + 1}"


def extract_school_year(line: str) -> Optional[str]:
    """'2023/24' -> '2023-2024'"""
    match = SCHOOL_YEAR.search(line)
    if not match:
        return None
    y1, y2 = match.group(1), match.group(2)
    if len(y2) == 2:
        y2 = y1[:2] + y2
    return f"{y1}-{y2}"


def extract_date_year(line: str, month_names: Dict[str, int]) -> Optional[str]:
    """Derive the school year from an issue date such as '15.07.2024'"""
    match = NUMERIC_DATE.search(line)
    if match:
        return _school_year_from_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = NAMED_DATE.search(line)
    if match and match.group(2).lower() in month_names:
        return _school_year_from_date(
            int(match.group(1)), month_names[match.group(2).lower()], int(match.group(3))
        )

    match = NAMED_DATE_US.search(line)
    if match and match.group(1).lower() in month_names:
        return _school_year_from_date(
            int(match.group(2)), month_names[match.group(1).lower()], int(match.group(3))
        )

    return None


def extract_class_level(line: str) -> Optional[int]:
    match = CLASS_LEVEL.search(line)
    if match:
        level = int(match.group(1))
        if 1 <= level <= 13:
            return level
    return None


def extract_term_type(line: str, term_keywords: Dict[str, str]) -> Optional[str]:
    """Longest keyword wins, so 'halbjahreszeugnis' beats 'jahreszeugnis'"""
    lower = line.lower()
    for keyword in sorted(term_keywords, key=len, reverse=True):
        if keyword in lower:
            return term_keywords[keyword]
    return None


def extract_labeled_value(line: str, labels: Sequence[str]) -> Optional[str]:
    """Value following 'Label:' at the start of a line"""
    for label in labels:
        match = re.match(rf"^\s*{re.escape(label)}\s*[:：]\s*(.+)$", line, re.IGNORECASE)
        if match:
            return match.group(1).strip()
    return None


def clean_student_name(value: str) -> Optional[str]:
    value = NAME_STOP.split(value, maxsplit=1)[0]
    value = correct_ocr_text(value).strip(" ,;:-")
    if not re.search(r"[^\W\d_]{2,}", value):
        return None
    return capitalize_proper_name(value)


def clean_label(label: str) -> str:
    label = re.sub(r"\s+", " ", label)
    return label.strip(" .:：_…-\t")


def _is_skipped(label: str, config: ScanConfig) -> bool:
    lower = label.lower()
    if lower in config.behavioral_grades:
        return True
    return any(keyword in lower for keyword in config.skip_keywords)


def extract_subject(
    line: str,
    config: ScanConfig,
    kinds: Sequence[str]
) -> Optional[CandidateSubjectRow]:
    """Parse a 'label … grade' line into a candidate row"""
    line = re.sub(r"(\d)\s+%", r"\1%", line)
    match = SUBJECT_LINE.match(line)
    if not match:
        return None

    grade = match.group("grade").strip()
    if not is_grade_value(grade, kinds):
        return None

    label = clean_label(match.group("label"))
    if len(label) < 2 or label[0].isdigit():
        return None
    # Two merged columns ("Deutsch 2 Mathematik 3") are not one subject
    if any(
        re.search(r"\d", token) and is_grade_value(token, kinds)
        for token in label.split()[1:]
    ):
        return None
    if _is_skipped(label, config):
        return None

    return CandidateSubjectRow(original_name=label, grade=grade)


def _looks_like_school_name(line: str, school_nouns: Sequence[str]) -> bool:
    """A free-standing line naming a school, not a "Label: value" field"""
    if LABELED_LINE.match(line):
        return False
    lower = line.lower()
    if any(word in lower for word in TITLE_WORDS):
        return False
    return any(noun.lower() in lower for noun in school_nouns)


def compute_overall_confidence(confidence: float, parsed_lines: int, total_lines: int) -> float:
    """
    Blend recognition confidence with the share of lines parsed into rows.

    Monotonic in both inputs; 0 when there is no text.
    """
    if total_lines <= 0:
        return 0.0
    confidence = min(max(confidence, 0.0), 100.0)
    ratio = min(parsed_lines / total_lines, 1.0)
    return round(confidence * (0.5 + 0.5 * ratio), 2)


def parse_ocr_text(
    text: str,
    confidence: float,
    config: ScanConfig = None,
    country_code: Optional[str] = None,
    locale: Optional[str] = None
) -> ParseResult:
    """
    Parse recognized text into subject rows and metadata.

    Args:
        text: Recognized text
        confidence: Recognition confidence (0-100)
        config: ScanConfig with keyword tables
        country_code: Optional grading-system country, narrows grade tokens
        locale: UI locale, narrows grade tokens when no country is given

    Returns:
        ParseResult
    """
    config = config or ScanConfig()
    kinds = grade_kinds_for(country_code, locale)

    lines = [line.strip() for line in (text or "").splitlines()]
    lines = [line for line in lines if line]

    metadata = DocumentMetadata()
    date_year: Optional[str] = None
    subjects: List[CandidateSubjectRow] = []

    for line in lines:
        is_meta = False

        if metadata.school_year is None:
            year = extract_school_year(line)
            if year:
                metadata.school_year = year
                is_meta = True

        if date_year is None:
            date_year = extract_date_year(line, config.month_names)

        if metadata.class_level is None:
            level = extract_class_level(line)
            if level is not None:
                metadata.class_level = level
                is_meta = True

        if metadata.term_type is None:
            metadata.term_type = extract_term_type(line, config.term_keywords)

        if metadata.student_name is None:
            value = extract_labeled_value(line, config.student_name_labels)
            if value:
                metadata.student_name = clean_student_name(value)
                is_meta = True

        if metadata.school_name is None:
            value = extract_labeled_value(line, config.school_name_labels)
            if value:
                metadata.school_name = correct_ocr_text(value)
                is_meta = True

        if is_meta:
            continue

        row = extract_subject(line, config, kinds)
        if row:
            row.confidence = confidence
            subjects.append(row)
        elif metadata.school_name is None and _looks_like_school_name(line, config.school_nouns):
            metadata.school_name = correct_ocr_text(line)

    if metadata.school_year is None and date_year:
        metadata.school_year = date_year

    overall = compute_overall_confidence(confidence, len(subjects), len(lines))
    logger.debug(f"Parsed {len(subjects)} subjects from {len(lines)} lines")

    return ParseResult(
        subjects=subjects,
        metadata=metadata,
        overall_confidence=overall,
        lines=lines,
    )
