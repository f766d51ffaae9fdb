"""
Score Normalizer Tests
======================
Tests for weighted totals, the divider and the final score.
"""

import math
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from speech_eval.scoring.normalizer import (
    SCORE_CEILING,
    calculate_total_points,
    calculate_max_points,
    calculate_divider,
    calculate_final_score,
    is_valid_divider,
    describe_score,
)
from speech_eval.models import SkillScore, ManualScore, AutomatedScore, effective_score


# =============================================================================
# EFFECTIVE SCORE TESTS
# =============================================================================

def test_effective_score_manual():
    """Manual skills use the coach score, 0 when missing."""
    assert effective_score(ManualScore(8)) == 8
    assert effective_score(ManualScore(None)) == 0.0
    assert effective_score(ManualScore()) == 0.0

    print("[PASS] Manual effective score test passed")


def test_effective_score_automated():
    """Override wins over the AI score, which wins over 0."""
    assert effective_score(AutomatedScore(ai_score=3, override=7)) == 7
    assert effective_score(AutomatedScore(ai_score=3)) == 3
    assert effective_score(AutomatedScore()) == 0.0

    # An override of 0 is still an override
    assert effective_score(AutomatedScore(ai_score=5, override=0)) == 0

    print("[PASS] Automated effective score test passed")


def test_automated_ignores_manual_value():
    """Records flagged automated never read actual_score."""
    score = SkillScore.from_record({
        'skill_id': 90,
        'is_automated': True,
        'actual_score': 9,
        'actual_score_ai': -4,
    })
    assert score.effective_score == -4.0

    print("[PASS] Automated ignores manual value test passed")


# =============================================================================
# TOTALS TESTS
# =============================================================================

def test_single_manual_skill():
    """One manual skill scored 8/10 lands at 88 on the 110 scale."""
    scores = [SkillScore.manual(1, 8, weight=1, max_score=10)]

    total = calculate_total_points(scores)
    maximum = calculate_max_points(scores)
    divider = calculate_divider(maximum)
    final = calculate_final_score(total, divider)

    assert total == 8
    assert maximum == 10
    assert math.isclose(divider, 10 / 110)
    assert math.isclose(final, 88.0)

    print("[PASS] Single manual skill test passed")


def test_empty_scores():
    """No skills gives zeros and divider 1."""
    total = calculate_total_points([])
    maximum = calculate_max_points([])
    divider = calculate_divider(maximum)

    assert total == 0
    assert maximum == 0
    assert divider == 1
    assert calculate_final_score(total, divider) == 0

    print("[PASS] Empty scores test passed")


def test_weighted_totals():
    """Weights scale both the points and the maximum."""
    scores = [
        SkillScore.manual(7, 6, weight=2, max_score=10),
        SkillScore.automated(97, ai_score=5, adjusted_score=8, weight=0.5, max_score=10),
        SkillScore.manual(90, -3, weight=1, max_score=10),
    ]

    assert calculate_total_points(scores) == 12 + 4 - 3
    assert calculate_max_points(scores) == 20 + 5 + 10

    print("[PASS] Weighted totals test passed")


def test_order_independence():
    """Totals do not depend on the order of the scores."""
    scores = [
        SkillScore.manual(7, 6, weight=2),
        SkillScore.manual(33, 4),
        SkillScore.automated(95, ai_score=9),
    ]
    reordered = list(reversed(scores))

    assert calculate_total_points(scores) == calculate_total_points(reordered)
    assert calculate_max_points(scores) == calculate_max_points(reordered)

    print("[PASS] Order independence test passed")


def test_normalizer_idempotence():
    """Repeated calls with identical inputs give identical results."""
    scores = [
        SkillScore.manual(7, 6, weight=2),
        SkillScore.automated(97, ai_score=5, adjusted_score=8, weight=0.5),
        SkillScore.manual(1, -3),
    ]

    assert calculate_total_points(scores) == calculate_total_points(scores)
    assert calculate_max_points(scores) == calculate_max_points(scores)

    for maximum in (35.0, 0.0, -5.0):
        assert calculate_divider(maximum) == calculate_divider(maximum)

    for divider in (0.5, 35.0 / 110, None, 0, float('nan')):
        first = calculate_final_score(12.5, divider)
        second = calculate_final_score(12.5, divider)
        assert first == second
        assert not math.isnan(first)

    print("[PASS] Normalizer idempotence test passed")


def test_full_marks_hit_ceiling():
    """Every skill at max score gives exactly the ceiling."""
    scores = [SkillScore.manual(skill_id, 10) for skill_id in range(1, 21)]

    total = calculate_total_points(scores)
    divider = calculate_divider(calculate_max_points(scores))

    assert math.isclose(calculate_final_score(total, divider), SCORE_CEILING)

    print("[PASS] Full marks ceiling test passed")


def test_negative_total_allowed():
    """Bad skills can drive the total below zero."""
    scores = [SkillScore.manual(1, -6), SkillScore.manual(2, -2)]

    total = calculate_total_points(scores)
    final = calculate_final_score(total, calculate_divider(calculate_max_points(scores)))

    assert total == -8
    assert final < 0

    print("[PASS] Negative total test passed")


# =============================================================================
# DIVIDER TESTS
# =============================================================================

def test_divider_non_positive_max():
    """A non-positive maximum gives divider exactly 1."""
    assert calculate_divider(0) == 1
    assert calculate_divider(-20) == 1

    print("[PASS] Non-positive divider test passed")


def test_divider_custom_ceiling():
    """The ceiling is configurable."""
    assert calculate_divider(200, ceiling=100) == 2

    print("[PASS] Custom ceiling divider test passed")


def test_invalid_divider_fallback():
    """Missing, zero, negative and NaN dividers fall back to 1.0."""
    for divider in (None, 0, 0.0, -2, float('nan')):
        assert not is_valid_divider(divider)
        assert calculate_final_score(50, divider) == 50

    assert is_valid_divider(0.5)
    assert calculate_final_score(50, 0.5) == 100
    assert calculate_final_score(50, 0, fallback=2.0) == 25

    print("[PASS] Invalid divider fallback test passed")


# =============================================================================
# SCORE BAND TESTS
# =============================================================================

def test_describe_score_bands():
    """Band thresholds are inclusive lower bounds."""
    assert describe_score(95).label == 'Outstanding'
    assert describe_score(90).level == 6
    assert describe_score(89.99).label == 'Excellent'
    assert describe_score(70).color == 'blue'
    assert describe_score(55).label == 'Satisfactory'
    assert describe_score(40).label == 'Needs Improvement'

    low = describe_score(10)
    assert low.label == 'Work Required'
    assert low.color == 'red'
    assert low.level == 0

    print("[PASS] Score bands test passed")


def run_all_tests():
    """Run all normalizer tests."""
    print("\n" + "="*60)
    print("SCORE NORMALIZER TESTS")
    print("="*60 + "\n")

    test_effective_score_manual()
    test_effective_score_automated()
    test_automated_ignores_manual_value()
    test_single_manual_skill()
    test_empty_scores()
    test_weighted_totals()
    test_order_independence()
    test_normalizer_idempotence()
    test_full_marks_hit_ceiling()
    test_negative_total_allowed()
    test_divider_non_positive_max()
    test_divider_custom_ceiling()
    test_invalid_divider_fallback()
    test_describe_score_bands()

    print("\n" + "="*60)
    print("ALL NORMALIZER TESTS PASSED")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_all_tests()
