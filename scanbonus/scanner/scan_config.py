"""
Scan Configuration Module
Read-only configuration consumed by the parser, matcher and recognizer:
subject catalog, keyword tables and language hints.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

from ..core.constants import TermType
from .country_detection import DEFAULT_SCHOOL_TYPE_KEYWORDS

logger = logging.getLogger(__name__)


DEFAULT_TERM_KEYWORDS: Dict[str, str] = {
    # German
    "jahreszeugnis": TermType.FINAL.value,
    "halbjahreszeugnis": TermType.SEMESTER.value,
    "zwischenzeugnis": TermType.MIDTERM.value,
    # French
    "bulletin annuel": TermType.FINAL.value,
    "bulletin semestriel": TermType.SEMESTER.value,
    "bulletin trimestriel": TermType.QUARTERLY.value,
    # English
    "final report": TermType.FINAL.value,
    "end of year": TermType.FINAL.value,
    "mid-term": TermType.MIDTERM.value,
    "mid term": TermType.MIDTERM.value,
    "midterm": TermType.MIDTERM.value,
    "semester": TermType.SEMESTER.value,
    "quarterly": TermType.QUARTERLY.value,
    # Italian
    "pagella finale": TermType.FINAL.value,
    "pagella": TermType.FINAL.value,
    # Spanish
    "boletín final": TermType.FINAL.value,
    "boletín trimestral": TermType.QUARTERLY.value,
}

DEFAULT_BEHAVIORAL_GRADES: Set[str] = {
    "verhalten", "mitarbeit", "betragen", "fleiss", "fleiß", "ordnung",
    "sozialverhalten", "arbeitsverhalten",
    "behavior", "behaviour", "conduct", "effort",
    "comportement", "conduite",
    "comportamento", "condotta",
    "comportamiento", "conducta",
}

DEFAULT_SKIP_KEYWORDS: List[str] = [
    "unterschrift", "signature", "firma", "bemerkung", "remarks",
    "observations", "versäumte", "absences", "fehltage", "datum",
    "klassenlehrer", "schulleiter", "principal", "teacher",
]

DEFAULT_OCR_SUBSTITUTIONS: List[Tuple[str, str]] = [
    ("rn", "m"),
    ("0", "o"),
    ("1", "l"),
    ("5", "s"),
    ("vv", "w"),
    ("cl", "d"),
    ("ii", "ü"),
    ("li", "h"),
]

DEFAULT_UMLAUT_MAP: Dict[str, str] = {
    "ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss",
    "Ä": "Ae", "Ö": "Oe", "Ü": "Ue",
}

DEFAULT_MONTH_NAMES: Dict[str, int] = {
    "januar": 1, "january": 1, "janvier": 1, "gennaio": 1, "enero": 1,
    "februar": 2, "february": 2, "février": 2, "febbraio": 2, "febrero": 2,
    "märz": 3, "march": 3, "mars": 3, "marzo": 3,
    "april": 4, "avril": 4, "aprile": 4, "abril": 4,
    "mai": 5, "may": 5, "maggio": 5, "mayo": 5,
    "juni": 6, "june": 6, "juin": 6, "giugno": 6, "junio": 6,
    "juli": 7, "july": 7, "juillet": 7, "luglio": 7, "julio": 7,
    "august": 8, "août": 8, "agosto": 8,
    "september": 9, "septembre": 9, "settembre": 9, "septiembre": 9,
    "oktober": 10, "october": 10, "octobre": 10, "ottobre": 10, "octubre": 10,
    "november": 11, "novembre": 11, "noviembre": 11,
    "dezember": 12, "december": 12, "décembre": 12, "dicembre": 12, "diciembre": 12,
}

DEFAULT_STUDENT_NAME_LABELS: List[str] = [
    "name", "schüler", "schülerin", "student", "pupil", "élève", "nom",
    "alunno", "alumno", "ученик",
]

DEFAULT_SCHOOL_NAME_LABELS: List[str] = [
    "schule", "school", "école", "établissement", "scuola", "escuela",
    "школа",
]

# Nouns that name a school; a free-standing line containing one is taken
# as the school name
DEFAULT_SCHOOL_NOUNS: List[str] = [
    "schule", "gymnasium", "lyzeum",
    "school", "academy", "college",
    "école", "collège", "lycée", "institution",
    "scuola", "liceo", "istituto",
    "escuela", "colegio", "instituto",
    "школа", "гимназия", "лицей",
    "basisschool", "lyceum",
]

DEFAULT_LOCALE_LANGUAGES: Dict[str, str] = {
    "de": "deu+eng",
    "en": "eng",
    "fr": "fra+eng",
    "it": "ita+eng",
    "es": "spa+eng",
    "ru": "rus+eng",
}

DEFAULT_COUNTRY_LANGUAGES: Dict[str, str] = {
    "DE": "deu+eng",
    "AT": "deu+eng",
    "CH": "deu+fra+ita+eng",
    "US": "eng",
    "GB": "eng",
    "FR": "fra+eng",
    "IT": "ita+eng",
    "ES": "spa+eng",
    "CA": "eng+fra",
    "BR": "por+eng",
    "JP": "jpn+eng",
    "AU": "eng",
    "IN": "eng+hin",
    "NL": "nld+eng",
    "RU": "rus+eng",
}

DEFAULT_SUPPORTED_LOCALES: List[str] = ["en", "de", "fr", "it", "es", "ru"]


@dataclass
class CatalogSubject:
    """Subject entry from the catalog"""
    id: str
    names: Dict[str, str]
    code: Optional[str] = None
    aliases: List[str] = field(default_factory=list)
    category_id: Optional[str] = None
    is_core_subject: bool = False

    def display_name(self, locale: str = "en") -> str:
        if locale in self.names:
            return self.names[locale]
        if "en" in self.names:
            return self.names["en"]
        return next(iter(self.names.values()), self.code or self.id)


@dataclass
class CatalogCategory:
    """Subject category entry"""
    id: str
    names: Dict[str, str]


@dataclass
class ScanConfig:
    """Configuration tables for the scanning pipeline"""
    subjects: List[CatalogSubject] = field(default_factory=list)
    categories: List[CatalogCategory] = field(default_factory=list)
    school_type_keywords: List[Tuple[List[str], str]] = field(
        default_factory=lambda: list(DEFAULT_SCHOOL_TYPE_KEYWORDS)
    )
    term_keywords: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TERM_KEYWORDS))
    behavioral_grades: Set[str] = field(default_factory=lambda: set(DEFAULT_BEHAVIORAL_GRADES))
    skip_keywords: List[str] = field(default_factory=lambda: list(DEFAULT_SKIP_KEYWORDS))
    ocr_substitutions: List[Tuple[str, str]] = field(
        default_factory=lambda: list(DEFAULT_OCR_SUBSTITUTIONS)
    )
    umlaut_map: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_UMLAUT_MAP))
    month_names: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_MONTH_NAMES))
    student_name_labels: List[str] = field(
        default_factory=lambda: list(DEFAULT_STUDENT_NAME_LABELS)
    )
    school_name_labels: List[str] = field(
        default_factory=lambda: list(DEFAULT_SCHOOL_NAME_LABELS)
    )
    school_nouns: List[str] = field(default_factory=lambda: list(DEFAULT_SCHOOL_NOUNS))
    locale_languages: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_LOCALE_LANGUAGES)
    )
    country_languages: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_COUNTRY_LANGUAGES)
    )
    supported_locales: List[str] = field(
        default_factory=lambda: list(DEFAULT_SUPPORTED_LOCALES)
    )

    def get_subject(self, subject_id: str) -> Optional[CatalogSubject]:
        for subject in self.subjects:
            if subject.id == subject_id:
                return subject
        return None

    @classmethod
    def from_dict(cls, data: Dict) -> "ScanConfig":
        """
        Build a config from a JSON-style mapping.

        Missing keys keep the built-in tables; present keys replace them.
        """
        config = cls()

        config.subjects = [
            CatalogSubject(
                id=s["id"],
                names=dict(s.get("name") or s.get("names") or {}),
                code=s.get("code"),
                aliases=list(s.get("aliases") or []),
                category_id=s.get("category_id"),
                is_core_subject=bool(s.get("is_core_subject", False)),
            )
            for s in data.get("subjects", [])
            if s.get("is_active", True)
        ]
        config.categories = [
            CatalogCategory(id=c["id"], names=dict(c.get("name") or {}))
            for c in data.get("categories", [])
        ]

        if "school_type_keywords" in data:
            config.school_type_keywords = [
                (list(entry["keywords"]), entry["country"])
                for entry in data["school_type_keywords"]
            ]
        if "term_keywords" in data:
            config.term_keywords = dict(data["term_keywords"])
        if "behavioral_grades" in data:
            config.behavioral_grades = {g.lower() for g in data["behavioral_grades"]}
        if "skip_keywords" in data:
            config.skip_keywords = list(data["skip_keywords"])
        if "ocr_substitutions" in data:
            config.ocr_substitutions = [
                (pair[0], pair[1]) for pair in data["ocr_substitutions"] if len(pair) == 2
            ]
        if "umlaut_map" in data:
            config.umlaut_map = dict(data["umlaut_map"])
        if "month_names" in data:
            config.month_names = {k.lower(): int(v) for k, v in data["month_names"].items()}
        if "student_name_labels" in data:
            config.student_name_labels = list(data["student_name_labels"])
        if "school_name_labels" in data:
            config.school_name_labels = list(data["school_name_labels"])
        if "school_nouns" in data:
            config.school_nouns = [n.lower() for n in data["school_nouns"]]
        if "locale_languages" in data:
            config.locale_languages = dict(data["locale_languages"])
        if "country_languages" in data:
            config.country_languages = dict(data["country_languages"])
        if "supported_locales" in data:
            config.supported_locales = list(data["supported_locales"])

        return config


def load_scan_config(path: Union[str, Path]) -> ScanConfig:
    """
    Load scan configuration from a JSON file.

    Args:
        path: Path to scan config JSON

    Returns:
        ScanConfig instance (built-in tables only if the file is missing)
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Scan config not found: {path}, using built-in tables")
        return ScanConfig()

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = ScanConfig.from_dict(data)
    logger.info(f"Loaded scan config with {len(config.subjects)} subjects from {path}")
    return config
