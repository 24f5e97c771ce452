"""
Subject Matcher Module
Maps free-text subject names from OCR to catalog subjects.
"""
import re
import logging
from dataclasses import dataclass, replace
from difflib import SequenceMatcher
from typing import List, Optional, Sequence, Tuple

from ..core.constants import MatchConfidence
from .models import CandidateSubjectRow, MatchedSubjectRow
from .ocr_corrections import generate_ocr_variants, strip_diacritics
from .scan_config import CatalogSubject, ScanConfig

logger = logging.getLogger(__name__)


@dataclass
class MatchThresholds:
    """Similarity thresholds for the confidence tiers"""
    high_ratio: float = 0.92
    medium_ratio: float = 0.80
    low_ratio: float = 0.60
    min_fragment_length: int = 3

    # Noise filter for unmatched rows
    min_name_length: int = 5
    min_alpha_run: int = 5
    min_alpha_ratio: float = 0.6


@dataclass
class _Candidate:
    subject: CatalogSubject
    text: str
    normalized: str


def normalize_for_comparison(text: str) -> str:
    """Case- and diacritic-insensitive form used for all comparisons"""
    text = strip_diacritics(text.lower()).replace("ß", "ss")
    text = re.sub(r"[/\\()\-.,:;]", " ", text)
    return re.sub(r"\s+", " ", text).strip()


def similarity(a: str, b: str) -> float:
    return SequenceMatcher(None, a, b).ratio()


def is_noise_row(row: MatchedSubjectRow, thresholds: MatchThresholds = None) -> bool:
    """
    Whether an unmatched row is most likely an OCR artifact.

    Matched rows are never noise. Unmatched rows are kept for review only
    when the name is long enough, has a real alphabetic run and is mostly
    letters.
    """
    if row.matched_subject_id:
        return False

    thresholds = thresholds or MatchThresholds()
    name = row.original_name.strip()
    if len(name) < thresholds.min_name_length:
        return True
    if not re.search(rf"[^\W\d_]{{{thresholds.min_alpha_run},}}", name):
        return True
    alpha = sum(1 for ch in name if ch.isalpha())
    return alpha / len(name) < thresholds.min_alpha_ratio


class SubjectMatcher:
    """
    Matches candidate rows against every locale name and alias in the
    subject catalog.

    Strategies are tried in order of strength; the first one that yields a
    match decides the tier:

    1. exact normalized match, or similarity >= high_ratio -> high
    2. prefix relation, or similarity >= medium_ratio -> medium
    3. containment, or similarity >= low_ratio -> low
    """

    def __init__(
        self,
        config: ScanConfig,
        thresholds: MatchThresholds = None,
        locale: str = "en"
    ):
        self.config = config
        self.thresholds = thresholds or MatchThresholds()
        self.locale = locale
        self.candidates = self._build_candidates(config.subjects)

    @staticmethod
    def _build_candidates(subjects: Sequence[CatalogSubject]) -> List[_Candidate]:
        candidates = []
        for subject in subjects:
            texts = list(subject.names.values()) + list(subject.aliases)
            seen = set()
            for text in texts:
                normalized = normalize_for_comparison(text)
                if normalized and normalized not in seen:
                    seen.add(normalized)
                    candidates.append(_Candidate(subject, text, normalized))
        return candidates

    def _variants(self, name: str) -> List[str]:
        variants = generate_ocr_variants(
            name, self.config.ocr_substitutions, self.config.umlaut_map
        )
        normalized = []
        for variant in variants:
            n = normalize_for_comparison(variant)
            if n and n not in normalized:
                normalized.append(n)
        return normalized

    def _best_ratio(self, variants: List[str]) -> Tuple[Optional[_Candidate], float, str]:
        best, best_score, best_variant = None, 0.0, ""
        for variant in variants:
            for cand in self.candidates:
                score = similarity(variant, cand.normalized)
                if score > best_score:
                    best, best_score, best_variant = cand, score, variant
        return best, best_score, best_variant

    def find_match(self, original_name: str) -> Tuple[Optional[_Candidate], MatchConfidence, dict]:
        """
        Find the catalog entry for one name.

        Returns:
            (candidate or None, confidence tier, rationale dict)
        """
        t = self.thresholds
        variants = self._variants(original_name)
        if not variants or not self.candidates:
            return None, MatchConfidence.NONE, {"strategy": "none", "variants": variants}

        def rationale(strategy: str, cand: _Candidate, variant: str, score: float) -> dict:
            return {
                "strategy": strategy,
                "variant": variant,
                "candidate": cand.text,
                "score": round(score, 3),
            }

        for variant in variants:
            for cand in self.candidates:
                if variant == cand.normalized:
                    return cand, MatchConfidence.HIGH, rationale("exact", cand, variant, 1.0)

        best, best_score, best_variant = self._best_ratio(variants)

        if best_score >= t.high_ratio:
            return best, MatchConfidence.HIGH, rationale("fuzzy", best, best_variant, best_score)

        for variant in variants:
            for cand in self.candidates:
                shorter = min(len(variant), len(cand.normalized))
                if shorter < t.min_fragment_length:
                    continue
                if cand.normalized.startswith(variant) or variant.startswith(cand.normalized):
                    return cand, MatchConfidence.MEDIUM, rationale(
                        "prefix", cand, variant, similarity(variant, cand.normalized)
                    )

        if best_score >= t.medium_ratio:
            return best, MatchConfidence.MEDIUM, rationale("fuzzy", best, best_variant, best_score)

        for variant in variants:
            for cand in self.candidates:
                shorter = min(len(variant), len(cand.normalized))
                if shorter < t.min_fragment_length:
                    continue
                if cand.normalized in variant or variant in cand.normalized:
                    return cand, MatchConfidence.LOW, rationale(
                        "contains", cand, variant, similarity(variant, cand.normalized)
                    )

        if best_score >= t.low_ratio:
            return best, MatchConfidence.LOW, rationale("fuzzy", best, best_variant, best_score)

        return None, MatchConfidence.NONE, {
            "strategy": "none",
            "variants": variants,
            "best_candidate": best.text if best else None,
            "best_score": round(best_score, 3),
        }

    def match_row(self, row: CandidateSubjectRow) -> MatchedSubjectRow:
        cand, tier, why = self.find_match(row.original_name)
        matched = MatchedSubjectRow(
            original_name=row.original_name,
            grade=row.grade,
            confidence=row.confidence,
            match_confidence=tier,
            rationale=why,
        )
        if cand is None:
            return matched

        return replace(
            matched,
            matched_subject_id=cand.subject.id,
            matched_subject_name=cand.subject.display_name(self.locale),
            is_core_subject=cand.subject.is_core_subject,
            category_id=cand.subject.category_id,
        )

    def match(self, rows: Sequence[CandidateSubjectRow]) -> List[MatchedSubjectRow]:
        matched = [self.match_row(row) for row in rows]
        logger.debug(
            f"Matched {sum(1 for m in matched if m.matched_subject_id)}/{len(matched)} subjects"
        )
        return matched


def match_subjects(
    rows: Sequence[CandidateSubjectRow],
    config: ScanConfig,
    thresholds: MatchThresholds = None,
    locale: str = "en"
) -> List[MatchedSubjectRow]:
    """
    Match candidate rows to catalog subjects.

    Args:
        rows: Parsed candidate rows
        config: ScanConfig with the subject catalog
        thresholds: Optional MatchThresholds
        locale: Locale used for matched display names

    Returns:
        List of MatchedSubjectRow in input order
    """
    return SubjectMatcher(config, thresholds, locale).match(rows)
