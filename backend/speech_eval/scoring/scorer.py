"""
Evaluation Scorer Module
========================
Main interface for scoring one evaluation.

Combines the normalizer and the category aggregator into a single call
and logs the outcome. Inputs may be SkillScore objects or raw records
(persisted rows or API payloads).
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from .normalizer import (
    calculate_total_points,
    calculate_max_points,
    calculate_divider,
    calculate_final_score,
    describe_score,
    is_valid_divider,
)
from .aggregator import calculate_category_summary
from ..models import (
    CategoryScore,
    EvaluationResult,
    EvaluationScore,
    SkillCategory,
    SkillScore,
)
from ..config import ScoringConfig, get_config
from ..logging_config import get_engine_logger, log_evaluation_score, log_engine_decision

logger = get_engine_logger("scoring")

ScoreInput = Union[SkillScore, Dict[str, Any]]


class EvaluationScorer:
    """
    Scores evaluations against the rubric.

    Usage:
        scorer = EvaluationScorer()
        result = scorer.score(skill_scores, evaluation_id="eval-42")

        result.final_score
        result.to_persistence_payload()
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        """
        Initialize the scorer.

        Args:
            config: Scoring configuration (global config when omitted)
        """
        self.config = config or get_config().scoring

    def coerce_scores(self, scores: Iterable[ScoreInput]) -> List[SkillScore]:
        """
        Accept SkillScore objects or records.

        Raises:
            ValueError: if a record is not an object or has no usable skill id
        """
        coerced = []
        for score in scores:
            if isinstance(score, SkillScore):
                coerced.append(score)
            else:
                coerced.append(SkillScore.from_record(
                    score,
                    default_weight=self.config.default_weight,
                    default_max_score=self.config.default_max_score,
                ))
        return coerced

    def score_totals(
        self,
        scores: Iterable[ScoreInput],
        evaluation_id: Optional[str] = None
    ) -> EvaluationScore:
        """Totals, divider and final score."""
        scores = self.coerce_scores(scores)

        total_points = calculate_total_points(scores)
        max_total_points = calculate_max_points(scores)
        divider = calculate_divider(max_total_points, ceiling=self.config.score_ceiling)

        if max_total_points <= 0:
            log_engine_decision(
                "divider_fallback",
                {'max_total_points': max_total_points, 'divider': divider, 'skill_count': len(scores)},
                evaluation_id=evaluation_id,
            )

        final_score = calculate_final_score(total_points, divider, fallback=self.config.fallback_divider)

        log_evaluation_score(
            evaluation_id=evaluation_id,
            total_points=total_points,
            max_total_points=max_total_points,
            divider=divider,
            final_score=final_score,
            skill_count=len(scores),
        )

        return EvaluationScore(
            total_points=total_points,
            max_total_points=max_total_points,
            divider=divider,
            final_score=final_score,
        )

    def rescore_with_divider(
        self,
        total_points: float,
        divider: Optional[float],
        evaluation_id: Optional[str] = None
    ) -> float:
        """Final score for a coach-supplied divider."""
        if not is_valid_divider(divider):
            log_engine_decision(
                "invalid_divider",
                {'divider': divider, 'fallback': self.config.fallback_divider},
                evaluation_id=evaluation_id,
            )
        return calculate_final_score(total_points, divider, fallback=self.config.fallback_divider)

    def summarize_categories(
        self,
        scores: Iterable[ScoreInput],
        evaluation_id: Optional[str] = None
    ) -> Dict[str, CategoryScore]:
        """Category name -> CategoryScore for all six categories."""
        summary = calculate_category_summary(
            self.coerce_scores(scores),
            percent_scale=self.config.category_percent_scale,
        )

        unknown = summary.get(SkillCategory.UNKNOWN.value)
        if unknown is not None:
            log_engine_decision(
                "unknown_category",
                {'count': unknown.count, 'raw_points': unknown.raw_points},
                evaluation_id=evaluation_id,
            )

        return summary

    def score(
        self,
        scores: Iterable[ScoreInput],
        evaluation_id: Optional[str] = None,
        adjusted_analysis: Optional[Dict[str, Any]] = None
    ) -> EvaluationResult:
        """
        Score an evaluation.

        Args:
            scores: Skill scores (objects or records), any order
            evaluation_id: Caller's identifier, used for logging only
            adjusted_analysis: Mapped AI analysis to carry along for storage

        Returns:
            EvaluationResult with totals, categories and score band
        """
        scores = self.coerce_scores(scores)

        totals = self.score_totals(scores, evaluation_id=evaluation_id)
        categories = self.summarize_categories(scores, evaluation_id=evaluation_id)

        return EvaluationResult(
            score=totals,
            categories=categories,
            description=describe_score(totals.final_score),
            skill_count=len(scores),
            evaluation_id=evaluation_id,
            adjusted_analysis=adjusted_analysis,
        )


def score_evaluation(
    scores: Iterable[ScoreInput],
    evaluation_id: Optional[str] = None,
    config: Optional[ScoringConfig] = None
) -> EvaluationResult:
    """
    Factory-style shortcut for a one-off scoring call.

    Args:
        scores: Skill scores (objects or records)
        evaluation_id: Optional identifier for logging
        config: Optional scoring configuration

    Returns:
        EvaluationResult
    """
    return EvaluationScorer(config=config).score(scores, evaluation_id=evaluation_id)
