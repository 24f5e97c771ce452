"""
Unit tests for subject matching and noise filtering
"""
import pytest

from scanbonus.core import MatchConfidence
from scanbonus.scanner import (
    CandidateSubjectRow,
    MatchedSubjectRow,
    MatchThresholds,
    ScanConfig,
    SubjectMatcher,
    is_noise_row,
    match_subjects,
)
from scanbonus.scanner.ocr_corrections import (
    capitalize_proper_name,
    correct_ocr_text,
    generate_ocr_variants,
)
from scanbonus.scanner.scan_config import DEFAULT_OCR_SUBSTITUTIONS, DEFAULT_UMLAUT_MAP
from scanbonus.scanner.subject_matcher import normalize_for_comparison


def _row(name: str, grade: str = "2") -> CandidateSubjectRow:
    return CandidateSubjectRow(original_name=name, grade=grade, confidence=85.0)


class TestOcrCorrections:
    """Test cases for OCR correction helpers"""

    def test_variants_keep_original_first(self):
        variants = generate_ocr_variants("Mathernatik", DEFAULT_OCR_SUBSTITUTIONS, DEFAULT_UMLAUT_MAP)
        assert variants[0] == "Mathernatik"
        assert "Mathematik" in variants

    def test_variants_bounded(self):
        variants = generate_ocr_variants("rn0151vvclii", DEFAULT_OCR_SUBSTITUTIONS, DEFAULT_UMLAUT_MAP)
        assert len(variants) <= 8

    def test_umlaut_variant(self):
        variants = generate_ocr_variants("Französisch", [], DEFAULT_UMLAUT_MAP)
        assert variants == ["Französisch", "Franzoesisch"]

    def test_correct_ocr_text(self):
        assert correct_ocr_text("Goethe-Gymnasium  |ena") == "Goethe-Gymnasium lena"
        assert correct_ocr_text("R0bert") == "RObert"

    def test_capitalize_proper_name(self):
        assert capitalize_proper_name("mAX müLLER-schmidt") == "Max Müller-Schmidt"

    def test_normalize_for_comparison(self):
        assert normalize_for_comparison("  Français / Latein ") == "francais latein"
        assert normalize_for_comparison("Straße") == "strasse"


class TestSubjectMatcher:
    """Test cases for SubjectMatcher tiers"""

    def test_exact_match_any_locale(self, scan_config):
        matcher = SubjectMatcher(scan_config)
        for name in ["Mathematik", "MATHEMATICS", "mathematik"]:
            row = matcher.match_row(_row(name))
            assert row.matched_subject_id == "math"
            assert row.match_confidence == MatchConfidence.HIGH
            assert row.rationale["strategy"] == "exact"

    def test_diacritics_ignored(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("Franzosisch"))
        assert row.matched_subject_id == "french"
        assert row.match_confidence == MatchConfidence.HIGH

    def test_ocr_confusion_corrected(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("Mathernatik"))
        assert row.matched_subject_id == "math"
        assert row.match_confidence == MatchConfidence.HIGH

    def test_small_typo_is_fuzzy_high(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("Mathemattik"))
        assert row.matched_subject_id == "math"
        assert row.match_confidence == MatchConfidence.HIGH
        assert row.rationale["strategy"] == "fuzzy"

    def test_prefix_is_medium(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("Mathe"))
        assert row.matched_subject_id == "math"
        assert row.match_confidence == MatchConfidence.MEDIUM
        assert row.rationale["strategy"] == "prefix"

    def test_contains_is_low(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("Bildende Kunst"))
        assert row.matched_subject_id == "art"
        assert row.match_confidence == MatchConfidence.LOW
        assert row.rationale["strategy"] == "contains"

    def test_alias_match(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("PE"))
        assert row.matched_subject_id == "sports"

    def test_inactive_subjects_not_matched(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("Needlework"))
        assert row.matched_subject_id is None
        assert row.match_confidence == MatchConfidence.NONE

    def test_unmatched_keeps_row_data(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("Astronomie", "1"))
        assert row.matched_subject_id is None
        assert row.original_name == "Astronomie"
        assert row.grade == "1"
        assert row.confidence == 85.0
        assert row.rationale["strategy"] == "none"

    def test_display_name_follows_locale(self, scan_config):
        row = SubjectMatcher(scan_config, locale="de").match_row(_row("Mathematics"))
        assert row.matched_subject_name == "Mathematik"
        row = SubjectMatcher(scan_config, locale="it").match_row(_row("Mathematik"))
        assert row.matched_subject_name == "Mathematics"

    def test_core_flag_and_category(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("Deutsch"))
        assert row.is_core_subject is True
        assert row.category_id == "languages"

    def test_empty_catalog(self):
        row = SubjectMatcher(ScanConfig()).match_row(_row("Mathematik"))
        assert row.match_confidence == MatchConfidence.NONE

    def test_stricter_thresholds(self, scan_config):
        thresholds = MatchThresholds(high_ratio=0.99, medium_ratio=0.99, low_ratio=0.99)
        row = SubjectMatcher(scan_config, thresholds).match_row(_row("Mathemattik"))
        assert row.match_confidence != MatchConfidence.HIGH

    def test_match_subjects_preserves_order(self, scan_config):
        rows = [_row("Deutsch"), _row("Astronomie"), _row("Biologie")]
        matched = match_subjects(rows, scan_config)
        assert [m.original_name for m in matched] == ["Deutsch", "Astronomie", "Biologie"]
        assert [m.matched_subject_id for m in matched] == ["german", None, "biology"]

    def test_to_dict_hides_rationale(self, scan_config):
        row = SubjectMatcher(scan_config).match_row(_row("Deutsch"))
        data = row.to_dict()
        assert "rationale" not in data
        assert data["match_confidence"] == "high"


class TestNoiseFilter:
    """Test cases for is_noise_row"""

    def test_short_garbage_is_noise(self):
        assert is_noise_row(MatchedSubjectRow(original_name="x7!", grade="2"))

    def test_no_alpha_run_is_noise(self):
        assert is_noise_row(MatchedSubjectRow(original_name="ab1cd2ef3", grade="2"))

    def test_mostly_symbols_is_noise(self):
        assert is_noise_row(MatchedSubjectRow(original_name="Kunst.-.-.-.-", grade="2"))

    def test_plausible_unmatched_kept(self):
        assert not is_noise_row(MatchedSubjectRow(original_name="Astronomie", grade="2"))

    def test_matched_never_noise(self):
        row = MatchedSubjectRow(original_name="PE", grade="2", matched_subject_id="sports")
        assert not is_noise_row(row)

    @pytest.mark.parametrize("name", ["Mathematics", "Sozialkunde", "Physical Education"])
    def test_real_names_kept(self, name):
        assert not is_noise_row(MatchedSubjectRow(original_name=name, grade="2"))
