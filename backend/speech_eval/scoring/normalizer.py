"""
Score Normalization Module
==========================
Turns per-skill scores into evaluation totals and a fixed-ceiling final score.

    total_points     = Σ effective_score_i * weight_i
    max_total_points = Σ max_score_i * weight_i
    divider          = max_total_points / 110      (1 when max_total_points <= 0)
    final_score      = total_points / divider      (divider 1.0 when invalid)

The ceiling is a rubric convention that holds however many skills a given
evaluation scores, so the divider is derived from the maximum actually in
play rather than from a skill count.

Degenerate inputs never raise: empty lists give 0, a non-positive maximum
gives divider 1, and an invalid divider is replaced by 1.0.

All functions are pure and deterministic.
"""

import logging
import math
from typing import Iterable, Optional

from ..models import SkillScore, ScoreDescription

logger = logging.getLogger(__name__)

SCORE_CEILING = 110.0
FALLBACK_DIVIDER = 1.0


def calculate_total_points(scores: Iterable[SkillScore]) -> float:
    """
    Sum of effective score * weight.

    Automated skills use the coach override when present, otherwise the AI
    score; manual skills use the coach score. Missing scores count as 0.

    Args:
        scores: Skill scores of one evaluation, any order

    Returns:
        Total weighted points (0 for an empty list, may be negative)
    """
    scores = list(scores)
    total = sum((score.weighted_points for score in scores), 0.0)
    logger.debug(f"Total points calculated: {total:.2f} from {len(scores)} skills")
    return total


def calculate_max_points(scores: Iterable[SkillScore]) -> float:
    """
    Sum of max_score * weight over the skills present in the evaluation.

    Args:
        scores: Skill scores of one evaluation

    Returns:
        Maximum achievable points (0 for an empty list)
    """
    scores = list(scores)
    total = sum((score.max_points for score in scores), 0.0)
    logger.debug(f"Max points calculated: {total:.2f} from {len(scores)} skills")
    return total


def calculate_divider(max_total_points: float, ceiling: float = SCORE_CEILING) -> float:
    """
    Divider that rescales max_total_points onto the ceiling.

    Returns exactly 1 when max_total_points <= 0.
    """
    if max_total_points <= 0:
        return 1.0
    divider = max_total_points / ceiling
    logger.debug(f"Divider calculated: {divider:.4f} (max points: {max_total_points:.2f} / {ceiling:g})")
    return divider


def is_valid_divider(divider: Optional[float]) -> bool:
    if not divider:
        return False
    if isinstance(divider, float) and math.isnan(divider):
        return False
    return divider > 0


def calculate_final_score(
    total_points: float,
    divider: Optional[float],
    fallback: float = FALLBACK_DIVIDER
) -> float:
    """
    total_points / divider.

    A missing, zero, negative or NaN divider is replaced by the fallback
    (1.0) instead of raising.
    """
    if not is_valid_divider(divider):
        logger.warning(f"Invalid divider provided ({divider!r}), using {fallback}")
        divider = fallback

    score = total_points / divider
    logger.debug(f"Final score calculated: {score:.2f} ({total_points:.2f} / {divider:.4f})")
    return score


# =============================================================================
# SCORE BANDS
# =============================================================================

# (minimum score, label, color, level), highest first
SCORE_BANDS = (
    (90, 'Outstanding', 'green', 6),
    (80, 'Excellent', 'green', 5),
    (70, 'Very Good', 'blue', 4),
    (60, 'Good', 'blue', 3),
    (50, 'Satisfactory', 'yellow', 2),
    (40, 'Needs Improvement', 'yellow', 1),
)


def describe_score(score: float) -> ScoreDescription:
    """Label, color and level for a final score on the 0-110 scale."""
    for minimum, label, color, level in SCORE_BANDS:
        if score >= minimum:
            return ScoreDescription(label=label, color=color, level=level)
    return ScoreDescription(label='Work Required', color='red', level=0)
