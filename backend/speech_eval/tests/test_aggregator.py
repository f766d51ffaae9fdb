"""
Category Aggregator Tests
=========================
Tests for category rollups, percentages and stored-summary readback.
"""

import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from speech_eval.scoring.aggregator import (
    round_half_up,
    calculate_category_summary,
    calculate_parent_class_scores,
    extract_skills_by_category,
    process_category_scores,
)
from speech_eval.scoring.normalizer import calculate_total_points, calculate_max_points
from speech_eval.models import SkillScore, SkillCategory, category_names


# =============================================================================
# SUMMARY TESTS
# =============================================================================

def test_two_voice_skills():
    """Two Voice skills at 6/10 and 4/10 give 50%."""
    summary = calculate_category_summary([
        SkillScore.manual(7, 6),
        SkillScore.manual(8, 4),
    ])

    voice = summary["Voice"]
    assert voice.count == 2
    assert voice.raw_points == 10
    assert voice.max_possible == 20
    assert voice.score == 50
    assert voice.to_dict() == {'score': 50, 'count': 2, 'rawPoints': 10, 'maxPossible': 20}

    print("[PASS] Two Voice skills test passed")


def test_all_categories_present():
    """All six categories appear, in rubric order, even when empty."""
    summary = calculate_category_summary([SkillScore.manual(97, 7)])

    assert list(summary.keys()) == category_names()
    assert summary["Nervousness"].count == 0
    assert summary["Nervousness"].score == 0
    assert summary["Language"].score == 70
    assert "Unknown" not in summary

    print("[PASS] All categories present test passed")


def test_empty_summary():
    """An empty list gives six zeroed categories."""
    summary = calculate_category_summary([])

    assert len(summary) == 6
    for entry in summary.values():
        assert entry.to_dict() == {'score': 0, 'count': 0, 'rawPoints': 0, 'maxPossible': 0}

    print("[PASS] Empty summary test passed")


def test_unknown_category():
    """Ids outside every range are collected under Unknown."""
    summary = calculate_category_summary([
        SkillScore.manual(7, 5),
        SkillScore.manual(150, 3),
        SkillScore.manual(0, 2),
    ])

    unknown = summary["Unknown"]
    assert unknown.count == 2
    assert unknown.raw_points == 5
    assert unknown.max_possible == 20
    assert list(summary.keys())[-1] == "Unknown"

    print("[PASS] Unknown category test passed")


def test_partition_law():
    """Category totals add up to the evaluation totals."""
    scores = [
        SkillScore.manual(1, -4),
        SkillScore.manual(7, 6, weight=2),
        SkillScore.manual(40, None),
        SkillScore.automated(90, ai_score=-3),
        SkillScore.automated(97, ai_score=5, adjusted_score=9, weight=0.5),
        SkillScore.manual(105, 10),
        SkillScore.manual(300, 1),
    ]
    summary = calculate_category_summary(scores)

    assert sum(entry.count for entry in summary.values()) == len(scores)
    assert sum(entry.raw_points for entry in summary.values()) == calculate_total_points(scores)
    assert sum(entry.max_possible for entry in summary.values()) == calculate_max_points(scores)

    print("[PASS] Partition law test passed")


def test_negative_category_score():
    """Negative raw points give a negative percentage."""
    summary = calculate_category_summary([SkillScore.manual(1, -8), SkillScore.manual(2, -2)])

    assert summary["Nervousness"].score == -50

    print("[PASS] Negative category score test passed")


def test_zero_max_possible():
    """A category with max_possible 0 keeps score 0."""
    summary = calculate_category_summary([SkillScore.manual(7, 5, max_score=0)])

    assert summary["Voice"].count == 1
    assert summary["Voice"].max_possible == 0
    assert summary["Voice"].score == 0

    print("[PASS] Zero max possible test passed")


def test_percentage_rounding():
    """Percentages round half up like the frontend."""
    assert round_half_up(12.5) == 13
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(66.66) == 67

    # 1/8 = 12.5%
    summary = calculate_category_summary([SkillScore.manual(7, 1, max_score=8)])
    assert summary["Voice"].score == 13

    print("[PASS] Percentage rounding test passed")


# =============================================================================
# HELPER TESTS
# =============================================================================

def test_parent_class_scores():
    """Per-category totals without the percentage."""
    parents = calculate_parent_class_scores([SkillScore.manual(7, 6), SkillScore.manual(33, 4)])

    by_name = {parent.name: parent for parent in parents}
    assert by_name["Voice"].total_points == 6
    assert by_name["Body Language"].skill_count == 1
    assert by_name["Language"].max_points == 0
    assert by_name["Voice"].to_dict()['totalPoints'] == 6

    print("[PASS] Parent class scores test passed")


def test_extract_skills_by_category():
    """Filter scores by category enum or label."""
    scores = [SkillScore.manual(7, 6), SkillScore.manual(97, 4), SkillScore.manual(8, 1)]

    voice = extract_skills_by_category(scores, SkillCategory.VOICE)
    assert [score.skill_id for score in voice] == [7, 8]

    language = extract_skills_by_category(scores, "Language")
    assert [score.skill_id for score in language] == [97]

    print("[PASS] Extract skills by category test passed")


def test_process_category_scores():
    """Stored entries read back as dicts or bare percentages."""
    assert process_category_scores({'score': 49.5, 'count': 2, 'rawPoints': 9.9, 'maxPossible': 20}) == {
        'score': 50, 'count': 2, 'rawPoints': 9.9, 'maxPossible': 20,
    }
    assert process_category_scores({'score': 40, 'raw_points': 4, 'max_possible': 10})['rawPoints'] == 4
    assert process_category_scores(72.4)['score'] == 72
    assert process_category_scores(None) == {'score': 0, 'count': 0, 'rawPoints': 0, 'maxPossible': 0}
    assert process_category_scores("bad")['score'] == 0

    print("[PASS] Process category scores test passed")


def run_all_tests():
    """Run all aggregator tests."""
    print("\n" + "="*60)
    print("CATEGORY AGGREGATOR TESTS")
    print("="*60 + "\n")

    test_two_voice_skills()
    test_all_categories_present()
    test_empty_summary()
    test_unknown_category()
    test_partition_law()
    test_negative_category_score()
    test_zero_max_possible()
    test_percentage_rounding()
    test_parent_class_scores()
    test_extract_skills_by_category()
    test_process_category_scores()

    print("\n" + "="*60)
    print("ALL AGGREGATOR TESTS PASSED")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_all_tests()
