"""
Scanner Module
Turns a photographed report card into matched subject/grade rows

Usage:
    from scanbonus.scanner import ScanPipeline, TesseractRecognizer, load_scan_config

    pipeline = ScanPipeline(
        recognizer=TesseractRecognizer(),
        config=load_scan_config("data/scan_config.json")
    )

    result = await pipeline.scan(image_bytes, locale="de", country_hint="DE")
    result.subjects        # matched rows, noise removed
    result.debug_info      # fallback path, raw lines, match rationale
"""

from .image_processing import (
    PreprocessConfig,
    decode_image,
    encode_png,
    preprocess_image,
)

from .column_detection import (
    ColumnSplit,
    ColumnSplitConfig,
    detect_gutter,
    split_columns,
    force_split_center,
)

from .recognition import (
    RecognizedWord,
    RecognitionResult,
    RecognitionOptions,
    TextRecognizer,
    TesseractRecognizer,
    resolve_languages,
)

from .models import (
    DocumentMetadata,
    CandidateSubjectRow,
    MatchedSubjectRow,
    ParseResult,
)

from .scan_config import (
    CatalogSubject,
    CatalogCategory,
    ScanConfig,
    load_scan_config,
)

from .text_parser import (
    parse_ocr_text,
    is_grade_value,
)

from .subject_matcher import (
    MatchThresholds,
    SubjectMatcher,
    match_subjects,
    is_noise_row,
)

from .country_detection import (
    DEFAULT_SCHOOL_TYPE_KEYWORDS,
    detect_country,
)

from .processor import (
    PipelineConfig,
    ScanPipeline,
    ScanResult,
)

__all__ = [
    # Image processing
    "PreprocessConfig",
    "decode_image",
    "encode_png",
    "preprocess_image",
    # Columns
    "ColumnSplit",
    "ColumnSplitConfig",
    "detect_gutter",
    "split_columns",
    "force_split_center",
    # Recognition
    "RecognizedWord",
    "RecognitionResult",
    "RecognitionOptions",
    "TextRecognizer",
    "TesseractRecognizer",
    "resolve_languages",
    # Models
    "DocumentMetadata",
    "CandidateSubjectRow",
    "MatchedSubjectRow",
    "ParseResult",
    # Config
    "CatalogSubject",
    "CatalogCategory",
    "ScanConfig",
    "load_scan_config",
    # Parsing & matching
    "parse_ocr_text",
    "is_grade_value",
    "MatchThresholds",
    "SubjectMatcher",
    "match_subjects",
    "is_noise_row",
    "DEFAULT_SCHOOL_TYPE_KEYWORDS",
    "detect_country",
    # Pipeline
    "PipelineConfig",
    "ScanPipeline",
    "ScanResult",
]
