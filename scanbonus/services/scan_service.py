"""
Scan Service
Applies the per-caller quota and runs the scan pipeline
"""
import logging
from typing import Optional

from scanbonus.config import settings
from scanbonus.core import BadRequestException, FileLimits, Messages, RateLimitedException
from scanbonus.scanner import (
    PipelineConfig,
    ScanConfig,
    ScanPipeline,
    ScanResult,
    TesseractRecognizer,
    TextRecognizer,
    load_scan_config,
)
from scanbonus.utils import decode_base64_image, format_file_size
from .rate_limiter import InMemoryRateLimiter, RateLimiter

logger = logging.getLogger(__name__)


class ScanService:
    """Service for report card scanning"""

    def __init__(
        self,
        recognizer: Optional[TextRecognizer] = None,
        config: Optional[ScanConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
        pipeline_config: Optional[PipelineConfig] = None
    ):
        self._recognizer = recognizer
        self._config = config
        self.rate_limiter = rate_limiter or InMemoryRateLimiter(
            settings.MAX_SCANS_PER_HOUR,
            settings.RATE_LIMIT_WINDOW_SECONDS
        )
        self.pipeline_config = pipeline_config or PipelineConfig(
            max_image_size=FileLimits.MAX_IMAGE_SIZE
        )

    @property
    def config(self) -> ScanConfig:
        if self._config is None:
            self._config = load_scan_config(settings.SCAN_CONFIG_FILE)
        return self._config

    @property
    def recognizer(self) -> TextRecognizer:
        if self._recognizer is None:
            self._recognizer = TesseractRecognizer(settings.TESSERACT_CMD)
        return self._recognizer

    def check_quota(self, caller_id: str) -> None:
        """Raise RateLimitedException when the caller is over quota"""
        decision = self.rate_limiter.try_consume(caller_id)
        if not decision.allowed:
            raise RateLimitedException(decision.retry_after)

    async def scan_base64(
        self,
        caller_id: str,
        image: str,
        locale: Optional[str] = None,
        country_hint: Optional[str] = None
    ) -> ScanResult:
        """Scan a base64 image (data-URL prefix allowed)"""
        self.check_quota(caller_id)

        if not image:
            raise BadRequestException(Messages.NO_IMAGE)
        image_bytes = decode_base64_image(image)
        logger.info(f"Scan request from {caller_id}: {format_file_size(len(image_bytes))}")

        return await self.scan_bytes(image_bytes, locale, country_hint)

    async def scan_bytes(
        self,
        image_bytes: bytes,
        locale: Optional[str] = None,
        country_hint: Optional[str] = None
    ) -> ScanResult:
        pipeline = ScanPipeline(self.recognizer, self.config, self.pipeline_config)
        return await pipeline.scan(
            image_bytes,
            locale=self.resolve_locale(locale),
            country_hint=country_hint.upper() if country_hint else None
        )

    def resolve_locale(self, locale: Optional[str]) -> str:
        """'de-AT' -> 'de'; unsupported locales fall back to the default"""
        primary = (locale or "").replace("_", "-").split("-")[0].lower()
        if primary in self.config.supported_locales:
            return primary
        return settings.OCR_DEFAULT_LOCALE


# Singleton instance
scan_service = ScanService()
