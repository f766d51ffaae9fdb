"""
Data Models and Schemas Module
==============================
Defines structured data representations for the scoring engine.

This module provides:
- Dataclasses for catalog skills and recorded skill scores
- A tagged score source (manual vs. automated) with one effective-score rule
- Aggregate records for categories and whole evaluations
- Serialization helpers

These models form the contract between the catalog, the normalizer, the
category aggregator and whatever persists their output. The aggregate
records serialize to the camelCase shape stored under
``results.categories_summary``.

Usage:
    from speech_eval.models.schemas import SkillScore, ManualScore

    score = SkillScore(skill_id=7, source=ManualScore(8))
    score.effective_score   # 8.0
"""

from dataclasses import dataclass, field, asdict, replace
from typing import Optional, List, Dict, Any, Union
from enum import Enum
import json


# =============================================================================
# ENUMS
# =============================================================================

class SkillCategory(str, Enum):
    """Parent categories of the rubric."""
    NERVOUSNESS = "Nervousness"
    VOICE = "Voice"
    BODY_LANGUAGE = "Body Language"
    EXPRESSIONS = "Expressions"
    LANGUAGE = "Language"
    ULTIMATE_LEVEL = "Ultimate Level"
    UNKNOWN = "Unknown"


# The six real categories, in rubric order. UNKNOWN only appears on demand.
RUBRIC_CATEGORIES = (
    SkillCategory.NERVOUSNESS,
    SkillCategory.VOICE,
    SkillCategory.BODY_LANGUAGE,
    SkillCategory.EXPRESSIONS,
    SkillCategory.LANGUAGE,
    SkillCategory.ULTIMATE_LEVEL,
)


# =============================================================================
# BASE CLASSES
# =============================================================================

class BaseModel:
    """Mixin for all data models with common serialization methods."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary, handling nested objects."""
        def convert(obj):
            if isinstance(obj, BaseModel):
                return obj.to_dict()
            elif isinstance(obj, Enum):
                return obj.value
            elif isinstance(obj, (list, tuple)):
                return [convert(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            return obj

        return {k: convert(v) for k, v in asdict(self).items()}

    def to_json(self, indent: int = 2) -> str:
        """Convert model to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseModel":
        """Create model from dictionary. Override in subclasses for nested objects."""
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "BaseModel":
        """Create model from JSON string."""
        return cls.from_dict(json.loads(json_str))


# =============================================================================
# SKILLS
# =============================================================================

@dataclass(frozen=True)
class Skill(BaseModel):
    """
    A catalog entry: one scored dimension of a speech.

    Attributes:
        id: Stable skill identifier; its range determines the category
        name: Display name
        category: Parent category
        is_good_skill: False when a high raw score signals a problem
        max_score: Maximum raw score (10 for every catalog skill)
        weight: Default weight (coaches may override per evaluation)
    """
    id: int
    name: str
    category: SkillCategory
    is_good_skill: bool = True
    max_score: float = 10.0
    weight: float = 1.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Skill":
        return cls(
            id=int(data['id']),
            name=data['name'],
            category=SkillCategory(data['category']),
            is_good_skill=bool(data.get('is_good_skill', True)),
            max_score=float(data.get('max_score', 10.0)),
            weight=float(data.get('weight', 1.0)),
        )


# =============================================================================
# SCORE SOURCES
# =============================================================================

@dataclass(frozen=True)
class ManualScore:
    """A coach-entered score."""
    score: Optional[float] = None

    @property
    def is_automated(self) -> bool:
        return False

    def effective(self) -> float:
        return self.score if self.score is not None else 0.0


@dataclass(frozen=True)
class AutomatedScore:
    """An AI-derived score, optionally overridden by the coach."""
    ai_score: Optional[float] = None
    override: Optional[float] = None

    @property
    def is_automated(self) -> bool:
        return True

    @property
    def is_overridden(self) -> bool:
        return self.override is not None

    def effective(self) -> float:
        if self.override is not None:
            return self.override
        if self.ai_score is not None:
            return self.ai_score
        return 0.0


ScoreSource = Union[ManualScore, AutomatedScore]


def effective_score(source: ScoreSource) -> float:
    """Score that counts toward totals: override, then AI score, then manual score, else 0."""
    return source.effective()


def _first_present(record: Dict[str, Any], *keys: str) -> Any:
    """Value of the first key present with a non-None value."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass
class SkillScore(BaseModel):
    """
    One evaluation's recorded result for one skill.

    Attributes:
        skill_id: Catalog skill identifier
        source: ManualScore or AutomatedScore
        weight: Weight used for this evaluation
        max_score: Maximum raw score used for this evaluation
    """
    skill_id: int
    source: ScoreSource = field(default_factory=ManualScore)
    weight: float = 1.0
    max_score: float = 10.0

    @classmethod
    def manual(
        cls,
        skill_id: int,
        score: Optional[float],
        weight: float = 1.0,
        max_score: float = 10.0
    ) -> "SkillScore":
        return cls(skill_id=skill_id, source=ManualScore(score), weight=weight, max_score=max_score)

    @classmethod
    def automated(
        cls,
        skill_id: int,
        ai_score: Optional[float],
        adjusted_score: Optional[float] = None,
        weight: float = 1.0,
        max_score: float = 10.0
    ) -> "SkillScore":
        return cls(
            skill_id=skill_id,
            source=AutomatedScore(ai_score, adjusted_score),
            weight=weight,
            max_score=max_score,
        )

    @property
    def is_automated(self) -> bool:
        return self.source.is_automated

    @property
    def effective_score(self) -> float:
        return effective_score(self.source)

    @property
    def weighted_points(self) -> float:
        return self.effective_score * self.weight

    @property
    def max_points(self) -> float:
        return self.max_score * self.weight

    @classmethod
    def from_record(
        cls,
        record: Dict[str, Any],
        default_weight: float = 1.0,
        default_max_score: float = 10.0
    ) -> "SkillScore":
        """
        Build a SkillScore from a persisted row or an API payload.

        Accepts snake_case (skill_id, is_automated, actual_score,
        actual_score_ai, adjusted_score, max_score) and camelCase
        (skillId, isAutomated, actualScore, actualScoreAI, adjustedScore,
        maxScore) keys. A missing weight or max score falls back to the
        given defaults.

        Raises:
            ValueError: if the record is not a mapping or has no usable skill id
        """
        if not isinstance(record, dict):
            raise ValueError(f"Skill score record must be an object, got {type(record).__name__}")

        raw_id = _first_present(record, 'skill_id', 'skillId', 'id')
        try:
            skill_id = int(raw_id)
        except (TypeError, ValueError):
            raise ValueError(f"Skill score record has no valid skill id: {raw_id!r}")

        weight = _first_present(record, 'weight')
        max_score = _first_present(record, 'max_score', 'maxScore')
        is_automated = bool(_first_present(record, 'is_automated', 'isAutomated'))

        if is_automated:
            source = AutomatedScore(
                ai_score=_optional_float(_first_present(record, 'actual_score_ai', 'actualScoreAI')),
                override=_optional_float(_first_present(record, 'adjusted_score', 'adjustedScore')),
            )
        else:
            source = ManualScore(_optional_float(_first_present(record, 'actual_score', 'actualScore')))

        return cls(
            skill_id=skill_id,
            source=source,
            weight=float(weight) if weight is not None else default_weight,
            max_score=float(max_score) if max_score is not None else default_max_score,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the score source into the persisted row shape."""
        source = self.source
        return {
            'skill_id': self.skill_id,
            'is_automated': source.is_automated,
            'actual_score': None if source.is_automated else source.score,
            'actual_score_ai': source.ai_score if source.is_automated else None,
            'adjusted_score': source.override if source.is_automated else None,
            'weight': self.weight,
            'max_score': self.max_score,
            'effective_score': self.effective_score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SkillScore":
        return cls.from_record(data)


# =============================================================================
# AGGREGATES
# =============================================================================

@dataclass
class CategoryScore(BaseModel):
    """
    Per-category rollup of skill scores.

    Attributes:
        name: Category label
        count: Number of skill scores in the category
        raw_points: Sum of effective score * weight (may be negative)
        max_possible: Sum of max_score * weight
        score: round(raw_points / max_possible * 100), 0 when max_possible is 0
    """
    name: str
    count: int = 0
    raw_points: float = 0.0
    max_possible: float = 0.0
    score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'count': self.count,
            'rawPoints': self.raw_points,
            'maxPossible': self.max_possible,
        }


@dataclass
class ParentClassScore(BaseModel):
    """Totals for one parent class, without the percentage."""
    name: str
    total_points: float = 0.0
    max_points: float = 0.0
    skill_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'totalPoints': self.total_points,
            'maxPoints': self.max_points,
            'skillCount': self.skill_count,
        }


@dataclass
class EvaluationScore(BaseModel):
    """Evaluation-level totals and the normalized final score."""
    total_points: float
    max_total_points: float
    divider: float
    final_score: float

    def as_triple(self) -> tuple:
        """(total_points, max_total_points, final_score)"""
        return (self.total_points, self.max_total_points, self.final_score)


@dataclass
class ScoreDescription(BaseModel):
    """Display band for a final score."""
    label: str
    color: str
    level: int


@dataclass
class EvaluationResult(BaseModel):
    """
    Everything the engine computes for one evaluation.

    Attributes:
        score: Totals, divider and final score
        categories: Category name -> CategoryScore, all six categories present
        description: Display band for the final score
        skill_count: Number of skill scores considered
        evaluation_id: Caller's identifier, if any
        adjusted_analysis: Mapped AI analysis view, if attached
    """
    score: EvaluationScore
    categories: Dict[str, CategoryScore]
    description: ScoreDescription
    skill_count: int = 0
    evaluation_id: Optional[str] = None
    adjusted_analysis: Optional[Dict[str, Any]] = None

    @property
    def final_score(self) -> float:
        return self.score.final_score

    def categories_summary(self) -> Dict[str, Dict[str, Any]]:
        return {name: category.to_dict() for name, category in self.categories.items()}

    def with_adjusted_analysis(self, mapped_analysis: Optional[Dict[str, Any]]) -> "EvaluationResult":
        """Return a copy carrying the mapped AI analysis view."""
        return replace(self, adjusted_analysis=mapped_analysis)

    def to_persistence_payload(self) -> Dict[str, Any]:
        """
        Values for the caller to store on the evaluation row.

        The engine never writes these itself.
        """
        results: Dict[str, Any] = {'categories_summary': self.categories_summary()}
        if self.adjusted_analysis is not None:
            results['adjusted_analysis'] = self.adjusted_analysis
        return {
            'final_score': self.score.final_score,
            'results': results,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'evaluation_id': self.evaluation_id,
            'total_points': self.score.total_points,
            'max_total_points': self.score.max_total_points,
            'divider': self.score.divider,
            'final_score': self.score.final_score,
            'skill_count': self.skill_count,
            'description': self.description.to_dict(),
            'categories_summary': self.categories_summary(),
            'adjusted_analysis': self.adjusted_analysis,
        }


def category_names(include_unknown: bool = False) -> List[str]:
    """Category labels in rubric order."""
    names = [category.value for category in RUBRIC_CATEGORIES]
    if include_unknown:
        names.append(SkillCategory.UNKNOWN.value)
    return names
