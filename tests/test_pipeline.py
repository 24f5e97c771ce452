"""
Tests for the scan pipeline fallback cascade, driven by a fake recognizer
"""
import asyncio

import pytest

from scanbonus.core import (
    ImageTooLargeException,
    InvalidImageException,
    RecognitionUnavailableException,
)
from scanbonus.scanner import PipelineConfig, ScanPipeline
from conftest import FakeRecognizer


HEADER = "Goethe-Gymnasium Frankfurt\nHalbjahreszeugnis\nSchuljahr 2023/24\nName: Max Mustermann"


def _lines(*names):
    return "\n".join(f"{name} 2" for name in names)


def _scan(recognizer, config, image, pipeline_config=None, **kwargs):
    pipeline = ScanPipeline(recognizer, config, pipeline_config)
    return asyncio.run(pipeline.scan(image, **kwargs))


class TestFullPath:
    """Test cases where the full-image result is kept"""

    def test_many_subjects_skip_forced_split(self, scan_config, blank_png):
        text = HEADER + "\n" + _lines(
            "Deutsch", "Mathematik", "Englisch", "Biologie",
            "Geschichte", "Kunst", "Sport", "Französisch",
        )
        recognizer = FakeRecognizer([text])
        result = _scan(recognizer, scan_config, blank_png, locale="de", country_hint="DE")

        assert recognizer.calls == 1
        assert len(result.subjects) == 8
        assert result.matched_count == 8
        assert result.debug_info["path"] == "full"
        assert result.debug_info["gutter_x"] is None

    def test_equal_count_keeps_full(self, scan_config, blank_png):
        recognizer = FakeRecognizer([
            HEADER + "\n" + _lines("Deutsch", "Mathematik"),
            _lines("Deutsch"),
            _lines("Mathematik"),
        ])
        result = _scan(recognizer, scan_config, blank_png)

        assert recognizer.calls == 3
        assert result.debug_info["path"] == "full"
        forced = result.debug_info["attempts"][-1]
        assert forced["path"] == "forced_center"
        assert forced["subject_count"] == 2
        assert forced["accepted"] is False

    def test_metadata_and_country(self, scan_config, blank_png):
        recognizer = FakeRecognizer([HEADER + "\n" + _lines(*["Deutsch"] * 8)])
        result = _scan(recognizer, scan_config, blank_png)

        assert result.metadata.school_name == "Goethe-Gymnasium Frankfurt"
        assert result.metadata.student_name == "Max Mustermann"
        assert result.metadata.school_year == "2023-2024"
        assert result.metadata.term_type == "semester"
        assert result.suggested_country_code == "DE"

    def test_options_passed_to_recognizer(self, scan_config, blank_png):
        recognizer = FakeRecognizer([_lines(*["Deutsch"] * 8)])
        _scan(recognizer, scan_config, blank_png, locale="fr", country_hint="CH")
        assert recognizer.options[0].locale == "fr"
        assert recognizer.options[0].country_code == "CH"

    def test_locale_narrows_grades_without_country(self, scan_config, blank_png):
        text = _lines(
            "Deutsch", "Mathematik", "Englisch", "Biologie",
            "Geschichte", "Kunst", "Sport", "Französisch",
        ) + "\nMathematics A"

        german = _scan(FakeRecognizer([text]), scan_config, blank_png, locale="de")
        english = _scan(FakeRecognizer([text]), scan_config, blank_png, locale="en")

        assert len(german.subjects) == 8
        assert "Mathematics" not in [s.original_name for s in german.subjects]
        assert len(english.subjects) == 9


class TestColumnFallbacks:
    """Test cases for the gutter and forced center splits"""

    def test_forced_center_wins_with_more_subjects(self, scan_config, blank_png):
        recognizer = FakeRecognizer([
            HEADER + "\n" + _lines("Deutsch", "Mathematik"),
            _lines("Deutsch", "Mathematik", "Englisch"),
            _lines("Biologie", "Geschichte", "Kunst"),
        ])
        result = _scan(recognizer, scan_config, blank_png)

        assert result.debug_info["path"] == "forced_center"
        assert [s.matched_subject_id for s in result.subjects] == [
            "german", "math", "english", "biology", "history", "art",
        ]
        # Header fields come from the full-image pass only
        assert result.metadata.school_name == "Goethe-Gymnasium Frankfurt"
        assert result.metadata.school_year == "2023-2024"

    def test_gutter_split_used(self, scan_config, two_column_png):
        recognizer = FakeRecognizer([
            HEADER + "\n" + _lines("Deutsch Mathematik"),
            _lines("Deutsch", "Mathematik", "Englisch"),
            _lines("Biologie", "Geschichte"),
        ])
        result = _scan(recognizer, scan_config, two_column_png)

        assert result.debug_info["path"] == "columns"
        assert result.debug_info["gutter_x"] is not None
        assert len(result.subjects) == 5
        assert "columns_left" in result.debug_info["raw_lines"]
        paths = [a["path"] for a in result.debug_info["attempts"]]
        assert paths == ["full", "columns"]

    def test_no_forced_split_after_gutter_split(self, scan_config, two_column_png):
        recognizer = FakeRecognizer([
            _lines("Deutsch"),
            _lines("Deutsch"),
            "",
        ])
        result = _scan(recognizer, scan_config, two_column_png)

        assert recognizer.calls == 3
        assert result.debug_info["path"] == "full"
        assert [a["path"] for a in result.debug_info["attempts"]] == ["full", "columns"]

    def test_column_failure_degrades(self, scan_config, blank_png, unavailable):
        recognizer = FakeRecognizer([
            HEADER + "\n" + _lines("Deutsch"),
            unavailable,
            _lines("Deutsch", "Mathematik", "Englisch"),
        ])
        result = _scan(recognizer, scan_config, blank_png)

        assert result.debug_info["path"] == "forced_center"
        assert len(result.subjects) == 3
        assert result.debug_info["attempts"][-1]["errors"]

    def test_both_columns_fail(self, scan_config, blank_png, unavailable):
        recognizer = FakeRecognizer([_lines("Deutsch"), unavailable, unavailable])
        result = _scan(recognizer, scan_config, blank_png)

        assert result.debug_info["path"] == "full"
        assert len(result.subjects) == 1
        assert len(result.debug_info["attempts"][-1]["errors"]) == 2

    def test_columns_recognized_concurrently(self, scan_config, blank_png):
        recognizer = FakeRecognizer(
            [_lines("Deutsch"), _lines("Mathematik"), _lines("Englisch")],
            delay=0.05,
        )
        _scan(recognizer, scan_config, blank_png)
        assert recognizer.max_active == 2


class TestMatchingStage:
    """Test cases for matching and noise filtering inside the pipeline"""

    def test_noise_dropped_and_unmatched_kept(self, scan_config, blank_png):
        recognizer = FakeRecognizer([
            _lines("Deutsch", "x7!", "Astronomie", "Deutsch", "Deutsch",
                   "Deutsch", "Deutsch", "Deutsch", "Deutsch")
        ])
        result = _scan(recognizer, scan_config, blank_png)

        names = [s.original_name for s in result.subjects]
        assert "x7!" not in names
        assert "Astronomie" in names
        assert result.debug_info["dropped_noise"] == ["x7!"]
        assert result.matched_count == len(result.subjects) - 1
        rationale = {r["original_name"]: r for r in result.debug_info["match_rationale"]}
        assert rationale["Astronomie"]["strategy"] == "none"

    def test_result_to_dict(self, scan_config, blank_png):
        recognizer = FakeRecognizer([HEADER + "\n" + _lines(*["Mathematik"] * 8)])
        data = _scan(recognizer, scan_config, blank_png).to_dict()

        assert data["subject_count"] == 8
        assert data["matched_count"] == 8
        assert data["subjects"][0]["matched_subject_id"] == "math"
        assert data["subjects"][0]["match_confidence"] == "high"
        assert data["metadata"]["school_year"] == "2023-2024"
        assert 0 < data["overall_confidence"] <= 100


class TestPipelineErrors:
    """Test cases for pipeline failures"""

    def test_first_recognition_failure_is_fatal(self, scan_config, blank_png, unavailable):
        recognizer = FakeRecognizer([unavailable])
        with pytest.raises(RecognitionUnavailableException):
            _scan(recognizer, scan_config, blank_png)
        assert recognizer.calls == 1

    def test_image_too_large(self, scan_config, blank_png):
        recognizer = FakeRecognizer([])
        with pytest.raises(ImageTooLargeException):
            _scan(recognizer, scan_config, blank_png, PipelineConfig(max_image_size=10))
        assert recognizer.calls == 0

    def test_undecodable_image(self, scan_config):
        recognizer = FakeRecognizer([])
        with pytest.raises(InvalidImageException):
            _scan(recognizer, scan_config, b"not an image")

    def test_empty_image(self, scan_config):
        with pytest.raises(InvalidImageException):
            _scan(FakeRecognizer([]), scan_config, b"")

    def test_unexpected_column_error_propagates(self, scan_config, blank_png):
        recognizer = FakeRecognizer([_lines("Deutsch"), RuntimeError("boom"), _lines("Kunst")])
        with pytest.raises(RuntimeError):
            _scan(recognizer, scan_config, blank_png)
