"""
Bonus Calculation Engine
Turns graded subjects into a deterministic reward score.
Pure functions: no I/O, no shared state.
"""
import math
import logging
from typing import Optional

from ..core.constants import FactorKeys, FactorType, QualityTier, ScaleType
from .factors import FactorResolver
from .models import (
    TIERS,
    CalculatorInput,
    CalculatorInputSubject,
    CalculatorResult,
    CalculatorSubjectResult,
    GradingSystem,
    SingleGradeInput,
)

logger = logging.getLogger(__name__)


def _parse_number(value: str) -> Optional[float]:
    text = (value or "").strip().rstrip("%").strip().replace(",", ".")
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def normalize_grade(system: GradingSystem, grade: str) -> float:
    """
    Rescale a raw grade onto 0..100.

    1. An explicit grade definition wins.
    2. Percentage scales are clamped to 0..100.
    3. Numeric scales are clamped to [min, max] and rescaled, inverted
       when lower grades are better.

    Non-numeric input or a zero-width scale yields 0.
    """
    if not grade or not grade.strip():
        return 0.0

    definition = system.find_definition(grade)
    if definition is not None and definition.normalized_100 is not None:
        return float(definition.normalized_100)

    value = _parse_number(grade)
    if value is None:
        return 0.0

    if system.scale_type == ScaleType.PERCENTAGE.value:
        return min(max(value, 0.0), 100.0)

    lo = float(system.min_value if system.min_value is not None else 0)
    hi = float(system.max_value if system.max_value is not None else 100)
    if hi == lo:
        return 0.0

    clamped = min(max(value, min(lo, hi)), max(lo, hi))
    normalized = (clamped - lo) / (hi - lo) * 100
    return normalized if system.best_is_highest else 100 - normalized


def derive_tier(system: GradingSystem, grade: str) -> str:
    """Quality tier of the matching grade definition, 'below' otherwise"""
    definition = system.find_definition(grade)
    if definition is not None and definition.quality_tier in TIERS:
        return definition.quality_tier
    return QualityTier.BELOW.value


def tier_for_normalized(normalized: float) -> str:
    """Score-band tier for a normalized grade, independent of definitions"""
    if normalized >= 75:
        return QualityTier.BEST.value
    if normalized >= 50:
        return QualityTier.SECOND.value
    if normalized >= 25:
        return QualityTier.THIRD.value
    return QualityTier.BELOW.value


def convert_normalized_to_scale(system: Optional[GradingSystem], normalized: float) -> float:
    """Map a 0..100 value back onto the system's own scale"""
    if system is None:
        return normalized
    lo = float(system.min_value if system.min_value is not None else 0)
    hi = float(system.max_value if system.max_value is not None else 100)
    if hi == lo:
        return normalized
    if not system.best_is_highest:
        return hi - (normalized / 100) * (hi - lo)
    return lo + (normalized / 100) * (hi - lo)


def _subject_bonus(
    system: GradingSystem,
    resolver: FactorResolver,
    subject: CalculatorInputSubject,
    base_amount: float,
    class_level: int,
    term_type: Optional[str]
) -> CalculatorSubjectResult:
    normalized = normalize_grade(system, subject.grade)
    tier = derive_tier(system, subject.grade)

    grade_mult = resolver.require(FactorType.GRADE_TIER.value, tier)
    class_mult = resolver.resolve(FactorType.CLASS_LEVEL.value, f"class_{class_level}", 1.0)
    term_mult = 1.0
    if term_type is not None:
        term_mult = resolver.resolve(FactorType.TERM_TYPE.value, term_type, 1.0)
    core_mult = 1.0
    if subject.is_core_subject:
        core_mult = resolver.resolve(
            FactorType.CORE_SUBJECT_BONUS.value, FactorKeys.MULTIPLIER, 1.0
        )
    weight = 1.0 if subject.weight is None else float(subject.weight)

    bonus = base_amount * grade_mult * class_mult * term_mult * core_mult * weight

    return CalculatorSubjectResult(
        subject_id=subject.subject_id,
        subject_name=subject.subject_name or "Subject",
        raw_grade=subject.grade,
        normalized=round(normalized, 2),
        tier=tier,
        weight=weight,
        bonus=round(max(0.0, bonus), 2),
        score_band=tier_for_normalized(normalized),
        scale_value=round(convert_normalized_to_scale(system, normalized), 2),
    )


def calculate_bonus(calc_input: CalculatorInput) -> CalculatorResult:
    """
    Calculate the bonus for a full report card.

    Each subject's bonus is floored at 0 before summing, so a negative
    factor cannot eat into another subject's bonus.

    Raises:
        MissingFactorError: base amount or a grade-tier factor is not configured
    """
    resolver = FactorResolver(calc_input.factors)
    base_amount = resolver.require(FactorType.BASE_AMOUNT.value, FactorKeys.PER_SUBJECT)

    breakdown = [
        _subject_bonus(
            calc_input.grading_system,
            resolver,
            subject,
            base_amount,
            calc_input.class_level,
            calc_input.term_type,
        )
        for subject in calc_input.subjects
    ]

    total = round(max(0.0, sum(item.bonus for item in breakdown)), 2)
    logger.debug(f"Calculated bonus {total} for {len(breakdown)} subjects")

    return CalculatorResult(total=total, breakdown=breakdown)


def calculate_single_grade_bonus(calc_input: SingleGradeInput) -> CalculatorSubjectResult:
    """
    Calculate the bonus for one quick-entry grade (no term factor).

    Raises:
        MissingFactorError: base amount or the grade-tier factor is not configured
    """
    resolver = FactorResolver(calc_input.factors)
    base_amount = resolver.require(FactorType.BASE_AMOUNT.value, FactorKeys.PER_SUBJECT)

    return _subject_bonus(
        calc_input.grading_system,
        resolver,
        calc_input.subject,
        base_amount,
        calc_input.class_level,
        term_type=None,
    )
