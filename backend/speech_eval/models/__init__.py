"""
Data Models Package
===================
Exports all data model classes for the scoring engine.

Usage:
    from speech_eval.models import Skill, SkillScore, ManualScore, AutomatedScore
    from speech_eval.models import CategoryScore, EvaluationResult
"""

from .schemas import (
    # Enums
    SkillCategory,
    RUBRIC_CATEGORIES,

    # Base
    BaseModel,

    # Skills
    Skill,

    # Score sources
    ManualScore,
    AutomatedScore,
    ScoreSource,
    SkillScore,
    effective_score,

    # Aggregates
    CategoryScore,
    ParentClassScore,
    EvaluationScore,
    ScoreDescription,
    EvaluationResult,

    # Utilities
    category_names,
)

__all__ = [
    # Enums
    'SkillCategory',
    'RUBRIC_CATEGORIES',

    # Base
    'BaseModel',

    # Skills
    'Skill',

    # Score sources
    'ManualScore',
    'AutomatedScore',
    'ScoreSource',
    'SkillScore',
    'effective_score',

    # Aggregates
    'CategoryScore',
    'ParentClassScore',
    'EvaluationScore',
    'ScoreDescription',
    'EvaluationResult',

    # Utilities
    'category_names',
]
