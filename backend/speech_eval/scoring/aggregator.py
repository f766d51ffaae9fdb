"""
Category Aggregation Module
===========================
Folds a flat list of skill scores into the rubric's parent categories.

Per category:
- count:        number of skill scores in the category
- raw_points:   Σ effective_score * weight
- max_possible: Σ max_score * weight
- score:        round(raw_points / max_possible * 100), left at 0 when
                max_possible is 0

All six categories are always present so a partially scored evaluation
still renders a complete rubric. Scores whose id falls outside every range
go to an extra "Unknown" entry, which only appears when it is non-empty.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Union

from ..catalog import resolve_category
from ..models import (
    CategoryScore,
    ParentClassScore,
    SkillCategory,
    SkillScore,
    category_names,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round .5 toward +infinity (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def _empty_summary() -> Dict[str, CategoryScore]:
    return {name: CategoryScore(name=name) for name in category_names()}


def calculate_category_summary(
    scores: Iterable[SkillScore],
    percent_scale: int = 100
) -> Dict[str, CategoryScore]:
    """
    Aggregate skill scores per parent category.

    Args:
        scores: Skill scores of one evaluation
        percent_scale: Multiplier for the category percentage

    Returns:
        Category name -> CategoryScore, in rubric order
    """
    summary = _empty_summary()
    unknown_ids = []

    for score in scores:
        category = resolve_category(score.skill_id)
        if category == SkillCategory.UNKNOWN:
            unknown_ids.append(score.skill_id)

        entry = summary.get(category.value)
        if entry is None:
            entry = summary[category.value] = CategoryScore(name=category.value)

        entry.count += 1
        entry.raw_points += score.weighted_points
        entry.max_possible += score.max_points

    for entry in summary.values():
        if entry.max_possible > 0:
            entry.score = round_half_up(entry.raw_points / entry.max_possible * percent_scale)

    if unknown_ids:
        logger.warning(f"Skill ids outside every category range: {sorted(set(unknown_ids))}")

    return summary


def calculate_parent_class_scores(scores: Iterable[SkillScore]) -> List[ParentClassScore]:
    """Per-category totals without the percentage, in rubric order."""
    return [
        ParentClassScore(
            name=entry.name,
            total_points=entry.raw_points,
            max_points=entry.max_possible,
            skill_count=entry.count,
        )
        for entry in calculate_category_summary(scores).values()
    ]


def extract_skills_by_category(
    scores: Iterable[SkillScore],
    category: Union[SkillCategory, str]
) -> List[SkillScore]:
    """Skill scores whose id resolves to the given category."""
    category = SkillCategory(category)
    return [score for score in scores if resolve_category(score.skill_id) == category]


def process_category_scores(category_data: Any) -> Dict[str, Union[int, float]]:
    """
    Read back one stored category entry.

    Accepts the stored dict (camelCase or snake_case keys) or a bare number
    taken as the percentage. Anything else yields zeros.

    Returns:
        {'score', 'count', 'rawPoints', 'maxPossible'}
    """
    result = {'score': 0, 'count': 0, 'rawPoints': 0, 'maxPossible': 0}

    if not category_data:
        return result

    if isinstance(category_data, dict):
        if category_data.get('score') is not None:
            result['score'] = round_half_up(category_data.get('score') or 0)
        result['count'] = category_data.get('count') or 0
        result['rawPoints'] = category_data.get('rawPoints') or category_data.get('raw_points') or 0
        result['maxPossible'] = category_data.get('maxPossible') or category_data.get('max_possible') or 0
    elif isinstance(category_data, (int, float)) and not isinstance(category_data, bool):
        result['score'] = round_half_up(category_data)

    return result
