"""
Country Detection Module
Guesses the grading-system country of a report card from school-type
vocabulary found in its text.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from .models import DocumentMetadata

logger = logging.getLogger(__name__)

SchoolTypeTable = Sequence[Tuple[Sequence[str], str]]

# Ordered by priority: the first entry with a matching keyword wins, so
# narrower vocabularies (AT, CH) sit before the broader German one.
DEFAULT_SCHOOL_TYPE_KEYWORDS: List[Tuple[List[str], str]] = [
    (["volksschule", "bundesrealgymnasium", "bundesgymnasium",
      "neue mittelschule", "polytechnische schule"], "AT"),
    (["kantonsschule", "bezirksschule", "primarschule",
      "sekundarschule", "kanton "], "CH"),
    (["gymnasium", "realschule", "hauptschule", "gesamtschule",
      "grundschule", "oberschule", "halbjahreszeugnis", "jahreszeugnis",
      "zeugnis"], "DE"),
    (["collège", "college d'enseignement", "lycée", "bulletin trimestriel",
      "bulletin semestriel", "conseil de classe", "appréciation"], "FR"),
    (["scuola secondaria", "scuola primaria", "istituto comprensivo",
      "pagella", "liceo"], "IT"),
    (["educación secundaria", "boletín de notas", "boletín",
      "calificaciones", "bachillerato"], "ES"),
    (["gcse", "key stage", "headteacher", "form tutor"], "GB"),
    (["high school", "middle school", "elementary school", "homeroom",
      "report card", "gpa"], "US"),
    (["школа", "гимназия", "лицей", "табель"], "RU"),
    (["basisschool", "havo", "vwo", "leerling"], "NL"),
]


def detect_country(
    metadata: Optional[DocumentMetadata],
    full_text: str,
    school_type_keywords: Optional[SchoolTypeTable] = None
) -> Optional[str]:
    """
    Return the country of the first keyword entry found in the document.

    Args:
        metadata: Document metadata (only ``school_name`` is used)
        full_text: Full recognized text of the document
        school_type_keywords: Ordered ``(keywords, country)`` table

    Returns:
        Country code or None
    """
    table = DEFAULT_SCHOOL_TYPE_KEYWORDS if school_type_keywords is None else school_type_keywords
    school_name = (metadata.school_name if metadata else None) or ""
    haystack = f"{school_name}\n{full_text or ''}".lower()

    for keywords, country in table:
        for keyword in keywords:
            if keyword and keyword.lower() in haystack:
                logger.debug(f"Country {country} detected via keyword '{keyword}'")
                return country

    return None
