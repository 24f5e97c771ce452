# Core package
from .constants import (
    MatchConfidence,
    QualityTier,
    FactorType,
    FactorKeys,
    TermType,
    ScanPath,
    ScaleType,
    Messages,
    FileLimits,
)
from .exceptions import (
    BaseAPIException,
    NotFoundException,
    UnauthorizedException,
    BadRequestException,
    InvalidImageException,
    ImageTooLargeException,
    RateLimitedException,
    RecognitionUnavailableException,
    MissingFactorError,
)
from .logger import logger, setup_logger, scan_logger, calculator_logger

__all__ = [
    # Constants
    "MatchConfidence",
    "QualityTier",
    "FactorType",
    "FactorKeys",
    "TermType",
    "ScanPath",
    "ScaleType",
    "Messages",
    "FileLimits",
    # Exceptions
    "BaseAPIException",
    "NotFoundException",
    "UnauthorizedException",
    "BadRequestException",
    "InvalidImageException",
    "ImageTooLargeException",
    "RateLimitedException",
    "RecognitionUnavailableException",
    "MissingFactorError",
    # Logging
    "logger",
    "setup_logger",
    "scan_logger",
    "calculator_logger",
]
