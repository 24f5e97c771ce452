"""
Data types shared by the scanner stages
"""
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any

from ..core.constants import MatchConfidence


@dataclass
class DocumentMetadata:
    """Best-effort document header fields"""
    school_name: Optional[str] = None
    student_name: Optional[str] = None
    school_year: Optional[str] = None
    class_level: Optional[int] = None
    term_type: Optional[str] = None

    def to_dict(self) -> Dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class CandidateSubjectRow:
    """One parsed subject/grade line before matching"""
    original_name: str
    grade: str
    confidence: float = 0.0


@dataclass
class MatchedSubjectRow:
    """Candidate row with its catalog match"""
    original_name: str
    grade: str
    confidence: float = 0.0
    matched_subject_id: Optional[str] = None
    matched_subject_name: Optional[str] = None
    match_confidence: MatchConfidence = MatchConfidence.NONE
    is_core_subject: bool = False
    category_id: Optional[str] = None
    rationale: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        result = asdict(self)
        result["match_confidence"] = self.match_confidence.value
        result.pop("rationale")
        return {k: v for k, v in result.items() if v is not None}


@dataclass
class ParseResult:
    """Output of the text parser"""
    subjects: List[CandidateSubjectRow]
    metadata: DocumentMetadata
    overall_confidence: float
    lines: List[str] = field(default_factory=list)
