"""
Calculator data types
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from ..core.constants import QualityTier, ScaleType


@dataclass(frozen=True)
class GradeDefinition:
    """Explicit grade entry of a grading system"""
    grade: str
    normalized_100: Optional[float] = None
    quality_tier: Optional[str] = None


@dataclass(frozen=True)
class GradingSystem:
    """Grading system definition"""
    id: str = ""
    name: str = ""
    country_code: Optional[str] = None
    scale_type: str = ScaleType.NUMERIC.value
    min_value: Optional[float] = 0
    max_value: Optional[float] = 100
    best_is_highest: bool = True
    grade_definitions: List[GradeDefinition] = field(default_factory=list)

    def find_definition(self, grade: str) -> Optional[GradeDefinition]:
        """Grade entry matching case-insensitively, if any"""
        wanted = (grade or "").strip().lower()
        for definition in self.grade_definitions:
            if definition.grade is not None and definition.grade.strip().lower() == wanted:
                return definition
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GradingSystem":
        best = data.get("best_is_highest")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            country_code=data.get("country_code"),
            scale_type=data.get("scale_type", ScaleType.NUMERIC.value),
            min_value=data.get("min_value", 0),
            max_value=data.get("max_value", 100),
            best_is_highest=True if best is None else bool(best),
            grade_definitions=[
                GradeDefinition(
                    grade=str(d.get("grade", "")),
                    normalized_100=d.get("normalized_100"),
                    quality_tier=d.get("quality_tier"),
                )
                for d in data.get("grade_definitions") or []
            ],
        )


@dataclass(frozen=True)
class BonusFactor:
    """
    One factor row.

    Rows without user_id are system defaults; override rows carry the
    user_id and, when child-specific, a child_id.
    """
    factor_type: str
    factor_key: str
    factor_value: float
    user_id: Optional[str] = None
    child_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BonusFactor":
        return cls(
            factor_type=data["factor_type"],
            factor_key=data["factor_key"],
            factor_value=data["factor_value"],
            user_id=data.get("user_id"),
            child_id=data.get("child_id"),
        )


@dataclass
class FactorTable:
    """System defaults plus optional user/child overrides"""
    defaults: List[BonusFactor] = field(default_factory=list)
    overrides: List[BonusFactor] = field(default_factory=list)


@dataclass
class CalculatorInputSubject:
    subject_id: str
    grade: str
    subject_name: Optional[str] = None
    weight: Optional[float] = None
    is_core_subject: bool = False


@dataclass
class CalculatorInput:
    grading_system: GradingSystem
    factors: FactorTable
    class_level: int
    term_type: str
    subjects: List[CalculatorInputSubject]


@dataclass
class SingleGradeInput:
    """Quick entry: one subject, no term factor"""
    grading_system: GradingSystem
    factors: FactorTable
    class_level: int
    subject: CalculatorInputSubject


@dataclass
class CalculatorSubjectResult:
    subject_id: str
    subject_name: str
    raw_grade: str
    normalized: float
    tier: str
    weight: float
    bonus: float
    # Band of the normalized score and its value on the system's own scale
    score_band: str = "below"
    scale_value: float = 0.0

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class CalculatorResult:
    total: float
    breakdown: List[CalculatorSubjectResult]

    def to_dict(self) -> Dict:
        return {
            "total": self.total,
            "breakdown": [b.to_dict() for b in self.breakdown],
        }


TIERS = tuple(t.value for t in QualityTier)
