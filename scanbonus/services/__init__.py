# Services package
from .rate_limiter import RateLimiter, RateLimitDecision, InMemoryRateLimiter
from .scan_service import scan_service, ScanService
from .bonus_service import bonus_service, BonusService, load_grading_systems, load_bonus_factors

__all__ = [
    "RateLimiter",
    "RateLimitDecision",
    "InMemoryRateLimiter",
    "scan_service",
    "ScanService",
    "bonus_service",
    "BonusService",
    "load_grading_systems",
    "load_bonus_factors",
]
