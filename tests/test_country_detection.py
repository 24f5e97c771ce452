"""
Unit tests for country detection
"""
from scanbonus.scanner import DocumentMetadata, detect_country


class TestDetectCountry:
    """Test cases for detect_country"""

    def test_german_school(self):
        meta = DocumentMetadata(school_name="Goethe-Gymnasium Frankfurt")
        assert detect_country(meta, "Mathematik 2") == "DE"

    def test_austrian_before_german(self):
        # "Bundesgymnasium" also contains the German keyword "gymnasium"
        assert detect_country(None, "BUNDESGYMNASIUM Wien\nJahreszeugnis") == "AT"

    def test_swiss_school(self):
        assert detect_country(None, "Kantonsschule Zürich\nZeugnis") == "CH"

    def test_french_text(self):
        assert detect_country(None, "Bulletin trimestriel\nMathématiques 15/20") == "FR"

    def test_us_report_card(self):
        assert detect_country(DocumentMetadata(), "Lincoln High School\nReport Card") == "US"

    def test_school_name_only(self):
        meta = DocumentMetadata(school_name="Liceo Scientifico Galilei")
        assert detect_country(meta, "") == "IT"

    def test_no_match(self):
        assert detect_country(None, "Mathematics 2\nHistory 3") is None
        assert detect_country(None, "") is None

    def test_custom_table_order(self):
        table = [(["academy"], "GB"), (["gymnasium"], "DE")]
        assert detect_country(None, "Gymnasium Academy", table) == "GB"
        assert detect_country(None, "Gymnasium Academy", []) is None
