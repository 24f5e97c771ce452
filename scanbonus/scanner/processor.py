"""
Scan Pipeline Module
Main entry point for turning a report card photo into matched subjects
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..core.constants import FileLimits, ScanPath
from ..core.exceptions import (
    ImageTooLargeException,
    InvalidImageException,
    RecognitionUnavailableException,
)
from .column_detection import ColumnSplit, ColumnSplitConfig, force_split_center, split_columns
from .country_detection import detect_country
from .image_processing import PreprocessConfig, preprocess_image
from .models import DocumentMetadata, MatchedSubjectRow, ParseResult
from .recognition import RecognitionOptions, RecognitionResult, TextRecognizer
from .scan_config import ScanConfig
from .subject_matcher import MatchThresholds, SubjectMatcher, is_noise_row
from .text_parser import parse_ocr_text

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Configuration for the scan pipeline"""
    max_image_size: int = FileLimits.MAX_IMAGE_SIZE
    # Below this subject count the forced center split is attempted
    forced_split_threshold: int = 8
    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)
    columns: ColumnSplitConfig = field(default_factory=ColumnSplitConfig)
    thresholds: MatchThresholds = field(default_factory=MatchThresholds)


@dataclass
class ScanResult:
    """Complete scan result"""
    subjects: List[MatchedSubjectRow]
    metadata: DocumentMetadata
    overall_confidence: float
    suggested_country_code: Optional[str] = None
    debug_info: Dict[str, Any] = field(default_factory=dict)

    @property
    def matched_count(self) -> int:
        return sum(1 for s in self.subjects if s.matched_subject_id)

    def to_dict(self) -> Dict:
        return {
            "subjects": [s.to_dict() for s in self.subjects],
            "metadata": self.metadata.to_dict(),
            "overall_confidence": self.overall_confidence,
            "suggested_country_code": self.suggested_country_code,
            "subject_count": len(self.subjects),
            "matched_count": self.matched_count,
            "debug_info": self.debug_info,
        }


class ScanPipeline:
    """
    Report card scanning pipeline.

    Orchestrates:
    1. Preprocessing
    2. Full-image recognition (authoritative metadata)
    3. Gutter-based column split, columns recognized concurrently
    4. Forced center split when no gutter split happened and few subjects
       were found
    5. Subject matching, noise filtering and country detection

    A fallback result replaces the current best only when it yields
    strictly more subjects.
    """

    def __init__(
        self,
        recognizer: TextRecognizer,
        config: ScanConfig,
        pipeline_config: PipelineConfig = None
    ):
        self.recognizer = recognizer
        self.config = config
        self.pipeline_config = pipeline_config or PipelineConfig()

    def check_size(self, image_bytes: bytes) -> None:
        if not image_bytes:
            raise InvalidImageException("empty image")
        if len(image_bytes) > self.pipeline_config.max_image_size:
            raise ImageTooLargeException(len(image_bytes), self.pipeline_config.max_image_size)

    async def _recognize_columns(
        self,
        split: ColumnSplit,
        options: RecognitionOptions
    ) -> Tuple[Optional[RecognitionResult], Optional[RecognitionResult], List[str]]:
        """Recognize both halves concurrently; failures degrade to None"""
        results = await asyncio.gather(
            self.recognizer.recognize(split.left, options, self.config),
            self.recognizer.recognize(split.right, options, self.config),
            return_exceptions=True,
        )

        recognized: List[Optional[RecognitionResult]] = []
        errors: List[str] = []
        for side, result in zip(("left", "right"), results):
            if isinstance(result, RecognitionUnavailableException):
                logger.warning(f"Column recognition failed ({side}): {result.detail}")
                errors.append(f"{side}: {result.detail}")
                recognized.append(None)
            elif isinstance(result, BaseException):
                raise result
            else:
                recognized.append(result)

        return recognized[0], recognized[1], errors

    def _parse_columns(
        self,
        left: Optional[RecognitionResult],
        right: Optional[RecognitionResult],
        options: RecognitionOptions
    ) -> Optional[ParseResult]:
        parts = [r for r in (left, right) if r is not None]
        if not parts:
            return None
        text = "\n".join(r.text for r in parts)
        confidence = sum(r.confidence for r in parts) / len(parts)
        return parse_ocr_text(
            text, confidence, self.config, options.country_code, options.locale
        )

    async def _try_split(
        self,
        path: ScanPath,
        split: ColumnSplit,
        options: RecognitionOptions,
        best: ParseResult,
        debug: Dict[str, Any]
    ) -> Optional[ParseResult]:
        """Run one column fallback; returns its parse only if it beats best"""
        left, right, errors = await self._recognize_columns(split, options)
        parsed = self._parse_columns(left, right, options)
        count = len(parsed.subjects) if parsed else 0
        accepted = parsed is not None and count > len(best.subjects)

        debug["attempts"].append({
            "path": path.value,
            "split_x": split.split_x,
            "subject_count": count,
            "accepted": accepted,
            "errors": errors,
        })
        for side, result in (("left", left), ("right", right)):
            if result is not None:
                debug["raw_lines"][f"{path.value}_{side}"] = result.text.splitlines()
        if parsed is not None:
            debug["candidates"][path.value] = [
                {"original_name": s.original_name, "grade": s.grade} for s in parsed.subjects
            ]

        logger.info(
            f"{path.value} split at x={split.split_x}: {count} subjects "
            f"({'accepted' if accepted else 'rejected'}, best so far {len(best.subjects)})"
        )
        return parsed if accepted else None

    async def scan(
        self,
        image_bytes: bytes,
        locale: str = "en",
        country_hint: Optional[str] = None
    ) -> ScanResult:
        """
        Scan a report card image.

        Args:
            image_bytes: Raw encoded image
            locale: UI locale, used for recognition languages and names
            country_hint: Optional grading-system country

        Returns:
            ScanResult

        Raises:
            ImageTooLargeException: Image exceeds the size cap
            InvalidImageException: Image cannot be decoded
            RecognitionUnavailableException: Full-image recognition failed
        """
        self.check_size(image_bytes)
        cfg = self.pipeline_config
        options = RecognitionOptions(locale=locale or "en", country_code=country_hint)

        preprocessed = await asyncio.to_thread(preprocess_image, image_bytes, cfg.preprocess)

        # 1. Full image: always first, its metadata is authoritative
        full = await self.recognizer.recognize(preprocessed, options, self.config)
        full_parse = parse_ocr_text(
            full.text, full.confidence, self.config, country_hint, options.locale
        )

        debug: Dict[str, Any] = {
            "path": ScanPath.FULL.value,
            "gutter_x": None,
            "attempts": [{
                "path": ScanPath.FULL.value,
                "subject_count": len(full_parse.subjects),
                "accepted": True,
                "errors": [],
            }],
            "raw_lines": {ScanPath.FULL.value: full_parse.lines},
            "candidates": {
                ScanPath.FULL.value: [
                    {"original_name": s.original_name, "grade": s.grade}
                    for s in full_parse.subjects
                ]
            },
        }
        logger.info(f"Full image: {len(full_parse.subjects)} subjects")

        best = full_parse
        path = ScanPath.FULL

        # 2. Gutter-based column split
        split = await asyncio.to_thread(split_columns, preprocessed, cfg.columns)
        if split is not None:
            debug["gutter_x"] = split.split_x
            parsed = await self._try_split(
                ScanPath.COLUMNS, split, options, best, debug
            )
            if parsed is not None:
                best, path = parsed, ScanPath.COLUMNS

        # 3. Forced center split, only without a gutter split
        elif len(best.subjects) < cfg.forced_split_threshold:
            forced = await asyncio.to_thread(force_split_center, preprocessed, cfg.columns)
            if forced is not None:
                parsed = await self._try_split(
                    ScanPath.FORCED_CENTER, forced, options, best, debug
                )
                if parsed is not None:
                    best, path = parsed, ScanPath.FORCED_CENTER

        debug["path"] = path.value

        matcher = SubjectMatcher(self.config, cfg.thresholds, locale=options.locale)
        matched = matcher.match(best.subjects)
        debug["match_rationale"] = [
            {
                "original_name": m.original_name,
                "match_confidence": m.match_confidence.value,
                "matched_subject_id": m.matched_subject_id,
                **m.rationale,
            }
            for m in matched
        ]

        kept: List[MatchedSubjectRow] = []
        dropped: List[str] = []
        for m in matched:
            if is_noise_row(m, cfg.thresholds):
                dropped.append(m.original_name)
            else:
                kept.append(m)
        debug["dropped_noise"] = dropped

        metadata = full_parse.metadata
        country = detect_country(metadata, full.text, self.config.school_type_keywords)

        logger.info(
            f"Scan finished via {path.value}: {len(kept)} subjects "
            f"({len(debug['dropped_noise'])} dropped as noise), country={country}"
        )

        return ScanResult(
            subjects=kept,
            metadata=metadata,
            overall_confidence=best.overall_confidence,
            suggested_country_code=country,
            debug_info=debug,
        )
