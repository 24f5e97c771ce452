"""
Calculator Module
Deterministic bonus calculation over graded subjects

Usage:
    from scanbonus.calculator import calculate_bonus, CalculatorInput

    result = calculate_bonus(CalculatorInput(
        grading_system=system,
        factors=FactorTable(defaults=defaults, overrides=overrides),
        class_level=5,
        term_type="final",
        subjects=[CalculatorInputSubject(subject_id="math", grade="A")]
    ))
    result.total
"""

from .models import (
    GradeDefinition,
    GradingSystem,
    BonusFactor,
    FactorTable,
    CalculatorInputSubject,
    CalculatorInput,
    SingleGradeInput,
    CalculatorSubjectResult,
    CalculatorResult,
)

from .factors import (
    FactorResolver,
    DEFAULT_PRECEDENCE,
    first_match,
)

from .engine import (
    normalize_grade,
    derive_tier,
    tier_for_normalized,
    convert_normalized_to_scale,
    calculate_bonus,
    calculate_single_grade_bonus,
)

__all__ = [
    # Models
    "GradeDefinition",
    "GradingSystem",
    "BonusFactor",
    "FactorTable",
    "CalculatorInputSubject",
    "CalculatorInput",
    "SingleGradeInput",
    "CalculatorSubjectResult",
    "CalculatorResult",
    # Factors
    "FactorResolver",
    "DEFAULT_PRECEDENCE",
    "first_match",
    # Engine
    "normalize_grade",
    "derive_tier",
    "tier_for_normalized",
    "convert_normalized_to_scale",
    "calculate_bonus",
    "calculate_single_grade_bonus",
]
