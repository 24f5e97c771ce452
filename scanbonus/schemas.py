"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Dict, Optional, Any


class CamelModel(BaseModel):
    """Wire format is camelCase; snake_case is accepted too"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ===== Scan Schemas =====
class ScanRequest(CamelModel):
    image: str = Field(..., description="Base64 image, data-URL prefix allowed")
    locale: Optional[str] = Field(default=None, description="UI locale, e.g. 'de'")
    grading_system_country: Optional[str] = Field(
        default=None, description="Country hint for recognition languages and grade patterns"
    )


class ScannedSubject(CamelModel):
    original_name: str
    grade: str
    confidence: float = 0.0
    matched_subject_id: Optional[str] = None
    matched_subject_name: Optional[str] = None
    match_confidence: str = "none"
    is_core_subject: bool = False
    category_id: Optional[str] = None


class ScanMetadata(CamelModel):
    school_name: Optional[str] = None
    student_name: Optional[str] = None
    school_year: Optional[str] = None
    class_level: Optional[int] = None
    term_type: Optional[str] = None


class ScanResponse(CamelModel):
    success: bool = True
    subjects: List[ScannedSubject] = []
    metadata: ScanMetadata = ScanMetadata()
    overall_confidence: float = 0.0
    suggested_country_code: Optional[str] = None
    subject_count: int = 0
    matched_count: int = 0
    debug_info: Dict[str, Any] = {}


# ===== Calculator Schemas =====
class SubjectGrade(CamelModel):
    subject_id: str = Field(..., min_length=1)
    grade: str
    subject_name: Optional[str] = None
    weight: Optional[float] = Field(default=None, ge=0)
    is_core_subject: Optional[bool] = None

    @field_validator("grade", mode="before")
    @classmethod
    def grade_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class CalculateRequest(CamelModel):
    grading_system_id: str
    class_level: int = Field(..., ge=1, le=20)
    term_type: str
    subjects: List[SubjectGrade] = []
    child_id: Optional[str] = None


class QuickGradeRequest(CamelModel):
    grading_system_id: str
    class_level: int = Field(..., ge=1, le=20)
    subject: SubjectGrade
    child_id: Optional[str] = None


class SubjectBonus(CamelModel):
    subject_id: str
    subject_name: str
    raw_grade: str
    normalized: float
    tier: str
    weight: float
    bonus: float
    score_band: str
    scale_value: float


class CalculateResponse(CamelModel):
    success: bool = True
    total: float
    breakdown: List[SubjectBonus] = []


class QuickGradeResponse(CamelModel):
    success: bool = True
    result: SubjectBonus
