#!/usr/bin/env python3
"""
Score Evaluation Script
=======================
Command-line interface for scoring one evaluation from JSON files.

Usage:
    python scripts/score_evaluation.py --scores scores.json
    python scripts/score_evaluation.py --scores scores.json --analysis analysis.json
    python scripts/score_evaluation.py --scores scores.json --output result.json
    python scripts/score_evaluation.py --list-skills --category Language

The scores file holds a list of skill score records (or {"scores": [...]}).
The analysis file holds a parsed AI analysis ({"analysis": {...}}); its
mapped patterns are added as automated skill scores.
"""

import argparse
import sys
import json
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from speech_eval.analysis import map_ai_results_to_language_skills, to_automated_skill_scores
from speech_eval.analysis.mapper import get_mapped_view
from speech_eval.catalog import get_default_catalog
from speech_eval.scoring import EvaluationScorer
from speech_eval.logging_config import get_engine_logger

logger = get_engine_logger("cli", log_to_file=False)


def load_json(path: str):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_score_records(path: str) -> list:
    data = load_json(path)
    if isinstance(data, dict):
        data = data.get('scores', [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of skill score records")
    return data


def print_result(result) -> None:
    print(f"\n{'=' * 60}")
    print(f"EVALUATION {result.evaluation_id or ''}".rstrip())
    print(f"{'=' * 60}")
    print(f"Skills scored:    {result.skill_count}")
    print(f"Total points:     {result.score.total_points:.2f}")
    print(f"Max total points: {result.score.max_total_points:.2f}")
    print(f"Divider:          {result.score.divider:.4f}")
    print(f"Final score:      {result.final_score:.2f} ({result.description.label})")

    print("\nCategories:")
    for name, category in result.categories.items():
        print(f"  {name:<16} {category.score:>4}%  "
              f"({category.count} skills, {category.raw_points:.1f}/{category.max_possible:.1f})")


def main():
    parser = argparse.ArgumentParser(
        description="Score a speech evaluation against the rubric",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Score manual and automated skill records
    python scripts/score_evaluation.py --scores scores.json

    # Add automated Language scores from a parsed AI analysis
    python scripts/score_evaluation.py --scores scores.json --analysis analysis.json

    # Write the persistence payload to a file
    python scripts/score_evaluation.py --scores scores.json --output result.json

    # List the Language skills of the rubric
    python scripts/score_evaluation.py --list-skills --category Language
        """
    )

    parser.add_argument(
        '--scores', '-s',
        type=str,
        help='JSON file with skill score records'
    )

    parser.add_argument(
        '--analysis', '-a',
        type=str,
        default=None,
        help='JSON file with a parsed AI language analysis'
    )

    parser.add_argument(
        '--evaluation-id', '-e',
        type=str,
        default=None,
        help='Evaluation identifier used in logs'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        metavar='FILE',
        help='Write the result (with persistence payload) to a JSON file'
    )

    parser.add_argument(
        '--list-skills',
        action='store_true',
        help='List the rubric skills'
    )

    parser.add_argument(
        '--category',
        type=str,
        default=None,
        help='Category filter for --list-skills'
    )

    args = parser.parse_args()

    if args.list_skills:
        catalog = get_default_catalog()
        try:
            skills = catalog.skills_in_category(args.category) if args.category else list(catalog)
        except ValueError:
            print(f"Error: Unknown category: {args.category}")
            return 1
        for skill in skills:
            polarity = '+' if skill.is_good_skill else '-'
            print(f"{skill.id:>4} {polarity} {skill.name:<40} {skill.category.value}")
        return 0

    if not args.scores and not args.analysis:
        parser.print_help()
        return 1

    try:
        records = load_score_records(args.scores) if args.scores else []
    except (OSError, ValueError) as e:
        print(f"Error: Could not read scores: {e}")
        return 1

    adjusted_analysis = None
    if args.analysis:
        try:
            mapped = map_ai_results_to_language_skills(load_json(args.analysis))
        except (OSError, ValueError) as e:
            print(f"Error: Could not read analysis: {e}")
            return 1

        automated = to_automated_skill_scores(mapped)
        manual_ids = {record.get('skill_id', record.get('skillId')) for record in records}
        records = records + [score for score in automated if score.skill_id not in manual_ids]
        adjusted_analysis = get_mapped_view(mapped)
        logger.info(f"Added {len(automated)} automated skill scores from {args.analysis}")

    try:
        result = EvaluationScorer().score(
            records,
            evaluation_id=args.evaluation_id,
            adjusted_analysis=adjusted_analysis,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print_result(result)

    if args.output:
        output = result.to_dict()
        output['persistence'] = result.to_persistence_payload()
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(output, f, indent=2)
        print(f"\nResult saved to: {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
