"""
Bonus Service
Loads grading systems and factor tables and runs the calculator
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from scanbonus.config import settings
from scanbonus.core import NotFoundException
from scanbonus.calculator import (
    BonusFactor,
    CalculatorInput,
    CalculatorInputSubject,
    CalculatorResult,
    CalculatorSubjectResult,
    FactorTable,
    GradingSystem,
    SingleGradeInput,
    calculate_bonus,
    calculate_single_grade_bonus,
)
from scanbonus.scanner import ScanConfig, load_scan_config

logger = logging.getLogger(__name__)


def load_grading_systems(path: Path) -> Dict[str, GradingSystem]:
    """Load grading systems from JSON, indexed by id"""
    if not path.exists():
        logger.warning(f"Grading systems file not found: {path}")
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    systems = [GradingSystem.from_dict(item) for item in data if item.get("is_active", True)]
    return {s.id: s for s in systems}


def load_bonus_factors(path: Path) -> Dict[str, List[BonusFactor]]:
    """Load bonus factor defaults and overrides from JSON"""
    if not path.exists():
        logger.warning(f"Bonus factors file not found: {path}")
        return {"defaults": [], "overrides": []}
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return {
        "defaults": [
            BonusFactor.from_dict(item)
            for item in data.get("defaults", [])
            if item.get("is_active", True)
        ],
        "overrides": [BonusFactor.from_dict(item) for item in data.get("overrides", [])],
    }


class BonusService:
    """Service for bonus calculation"""

    def __init__(
        self,
        grading_systems: Optional[Dict[str, GradingSystem]] = None,
        factors: Optional[Dict[str, List[BonusFactor]]] = None,
        scan_config: Optional[ScanConfig] = None
    ):
        self.grading_systems = (
            grading_systems if grading_systems is not None
            else load_grading_systems(settings.GRADING_SYSTEMS_FILE)
        )
        self.factors = factors if factors is not None else load_bonus_factors(settings.BONUS_FACTORS_FILE)
        self.scan_config = scan_config

    def get_grading_system(self, system_id: str) -> GradingSystem:
        system = self.grading_systems.get(system_id)
        if system is None:
            raise NotFoundException("Grading system", system_id)
        return system

    def get_factor_table(self, user_id: Optional[str], child_id: Optional[str] = None) -> FactorTable:
        """
        Defaults plus the overrides that apply to this user / child.

        With a child id, both that child's rows and the user's general rows
        apply; without one, only the user's general rows.
        """
        overrides = [
            f for f in self.factors.get("overrides", [])
            if user_id is not None and f.user_id == user_id
            and (f.child_id is None or (child_id is not None and f.child_id == child_id))
        ]
        return FactorTable(defaults=list(self.factors.get("defaults", [])), overrides=overrides)

    def _subject(self, item: Dict[str, Any]) -> CalculatorInputSubject:
        """Fill name and core flag from the catalog when not given"""
        subject_id = item["subject_id"]
        catalog = self.scan_config.get_subject(subject_id) if self.scan_config else None
        is_core = item.get("is_core_subject")
        if is_core is None:
            is_core = catalog.is_core_subject if catalog else False
        return CalculatorInputSubject(
            subject_id=subject_id,
            grade=item["grade"],
            subject_name=item.get("subject_name") or (catalog.display_name() if catalog else None),
            weight=item.get("weight"),
            is_core_subject=bool(is_core),
        )

    def calculate(
        self,
        grading_system_id: str,
        class_level: int,
        term_type: str,
        subjects: List[Dict[str, Any]],
        user_id: Optional[str] = None,
        child_id: Optional[str] = None
    ) -> CalculatorResult:
        result = calculate_bonus(CalculatorInput(
            grading_system=self.get_grading_system(grading_system_id),
            factors=self.get_factor_table(user_id, child_id),
            class_level=class_level,
            term_type=term_type,
            subjects=[self._subject(s) for s in subjects],
        ))
        logger.info(f"Bonus for {len(subjects)} subjects ({grading_system_id}): {result.total}")
        return result

    def calculate_quick(
        self,
        grading_system_id: str,
        class_level: int,
        subject: Dict[str, Any],
        user_id: Optional[str] = None,
        child_id: Optional[str] = None
    ) -> CalculatorSubjectResult:
        return calculate_single_grade_bonus(SingleGradeInput(
            grading_system=self.get_grading_system(grading_system_id),
            factors=self.get_factor_table(user_id, child_id),
            class_level=class_level,
            subject=self._subject(subject),
        ))


# Singleton instance
bonus_service = BonusService(scan_config=load_scan_config(settings.SCAN_CONFIG_FILE))
