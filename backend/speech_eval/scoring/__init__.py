"""
Evaluation Scoring Module
=========================
Scores an evaluation's skill results against the rubric.

This module implements:
- Weighted point totals and the fixed-ceiling (110) final score
- Category rollups with percentages
- Score bands for display
- An EvaluationScorer facade that runs everything and logs it

Usage:
    from speech_eval.scoring import EvaluationScorer

    scorer = EvaluationScorer()
    result = scorer.score(skill_scores)

    result.final_score
    result.categories_summary()
"""

from .normalizer import (
    calculate_total_points,
    calculate_max_points,
    calculate_divider,
    calculate_final_score,
    describe_score,
    SCORE_CEILING,
)
from .aggregator import (
    calculate_category_summary,
    calculate_parent_class_scores,
    extract_skills_by_category,
    process_category_scores,
)
from .scorer import EvaluationScorer, score_evaluation

__all__ = [
    'calculate_total_points',
    'calculate_max_points',
    'calculate_divider',
    'calculate_final_score',
    'describe_score',
    'SCORE_CEILING',
    'calculate_category_summary',
    'calculate_parent_class_scores',
    'extract_skills_by_category',
    'process_category_scores',
    'EvaluationScorer',
    'score_evaluation',
]
