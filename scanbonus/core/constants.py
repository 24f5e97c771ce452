"""
Application constants
"""
from enum import Enum


class MatchConfidence(str, Enum):
    """Subject match confidence tiers"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class QualityTier(str, Enum):
    """Qualitative grade buckets used to pick a bonus multiplier"""
    BEST = "best"
    SECOND = "second"
    THIRD = "third"
    BELOW = "below"


class FactorType(str, Enum):
    """Bonus factor types"""
    BASE_AMOUNT = "base_amount"
    GRADE_TIER = "grade_tier"
    TERM_TYPE = "term_type"
    CLASS_LEVEL = "class_level"
    CORE_SUBJECT_BONUS = "core_subject_bonus"


class TermType(str, Enum):
    """Report card term types"""
    MIDTERM = "midterm"
    FINAL = "final"
    SEMESTER = "semester"
    QUARTERLY = "quarterly"


class ScanPath(str, Enum):
    """Which recognition path produced the chosen subject list"""
    FULL = "full"
    COLUMNS = "columns"
    FORCED_CENTER = "forced_center"


class ScaleType(str, Enum):
    """Grading scale types"""
    PERCENTAGE = "percentage"
    NUMERIC = "numeric"


# API Response Messages
class Messages:
    """API response messages"""

    NO_IMAGE = "No image provided"
    INVALID_IMAGE = "Image could not be decoded"
    RATE_LIMITED = "Rate limit exceeded. Try again later."
    RECOGNITION_FAILED = "Text recognition is unavailable"
    MISSING_IDENTITY = "Missing caller identity"


# File size limits (in bytes)
class FileLimits:
    """File size limits"""
    MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10MB


# Factor keys that are not derived from input values
class FactorKeys:
    """Fixed factor keys"""
    PER_SUBJECT = "per_subject"
    MULTIPLIER = "multiplier"
