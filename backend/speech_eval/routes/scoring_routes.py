"""
Scoring Routes Module
=====================
REST API endpoints over the scoring engine.

Endpoints:
- GET  /api/scoring/skills        - The rubric skill catalog
- POST /api/scoring/score         - Totals, final score and category summary
- POST /api/scoring/categories    - Category summary only
- POST /api/scoring/final-score   - Final score for a given total and divider

The engine stores nothing; callers persist the returned payload.
"""

import traceback

from flask import Blueprint, request, jsonify

from ..catalog import get_default_catalog
from ..scoring import EvaluationScorer
from ..logging_config import get_engine_logger

logger = get_engine_logger("routes.scoring")

scoring_bp = Blueprint('scoring', __name__)


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError('Request body must be a JSON object')
    return data


def _scores_from_request(data):
    scores = data.get('scores')
    if scores is None:
        raise ValueError('No scores provided')
    if not isinstance(scores, list):
        raise ValueError('"scores" must be a list of skill score records')
    return scores


@scoring_bp.route('/skills', methods=['GET'])
def list_skills():
    """
    Return the skill catalog.

    Query params:
        category: Optional category name filter

    Response JSON:
        {"skills": [{"id": 1, "name": "Swaying", "category": "Nervousness", ...}]}
    """
    catalog = get_default_catalog()
    category = request.args.get('category')
    try:
        skills = catalog.skills_in_category(category) if category else list(catalog)
    except ValueError:
        return jsonify({'error': f'Unknown category: {category}'}), 400
    return jsonify({'skills': [skill.to_dict() for skill in skills]}), 200


@scoring_bp.route('/score', methods=['POST'])
def score_evaluation():
    """
    Score an evaluation.

    Request JSON:
        {
            "scores": [{"skill_id": 1, "is_automated": false, "actual_score": 8,
                        "weight": 1, "max_score": 10}, ...],
            "evaluation_id": "abc",          # Optional, for logging
            "adjusted_analysis": {...}       # Optional, echoed into results
        }

    Response JSON:
        {
            "success": true,
            "total_points": 8.0,
            "max_total_points": 10.0,
            "divider": 0.0909,
            "final_score": 88.0,
            "categories_summary": {...},
            "persistence": {"final_score": 88.0, "results": {...}}
        }
    """
    try:
        data = _json_body()
        scores = _scores_from_request(data)

        scorer = EvaluationScorer()
        result = scorer.score(
            scores,
            evaluation_id=data.get('evaluation_id'),
            adjusted_analysis=data.get('adjusted_analysis'),
        )

        response = {'success': True}
        response.update(result.to_dict())
        response['persistence'] = result.to_persistence_payload()
        return jsonify(response), 200

    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Scoring error: {str(e)}")
        logger.error(traceback.format_exc())
        return jsonify({'error': f'Scoring error: {str(e)}'}), 500


@scoring_bp.route('/categories', methods=['POST'])
def summarize_categories():
    """
    Summarize skill scores by category.

    Request JSON:
        {"scores": [...]}

    Response JSON:
        {"success": true, "categories_summary": {"Voice": {"score": 50, ...}, ...}}
    """
    try:
        data = _json_body()
        scores = _scores_from_request(data)

        summary = EvaluationScorer().summarize_categories(scores, evaluation_id=data.get('evaluation_id'))
        return jsonify({
            'success': True,
            'categories_summary': {name: entry.to_dict() for name, entry in summary.items()},
        }), 200

    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Category summary error: {str(e)}")
        logger.error(traceback.format_exc())
        return jsonify({'error': f'Category summary error: {str(e)}'}), 500


@scoring_bp.route('/final-score', methods=['POST'])
def final_score():
    """
    Recompute the final score with a coach-supplied divider.

    Request JSON:
        {"total_points": 80, "divider": 0.9}

    Response JSON:
        {"success": true, "final_score": 88.89}
    """
    try:
        data = _json_body()
        if data.get('total_points') is None:
            raise ValueError('No total_points provided')

        total_points = float(data['total_points'])
        divider = data.get('divider')
        divider = float(divider) if divider is not None else None

        score = EvaluationScorer().rescore_with_divider(
            total_points, divider, evaluation_id=data.get('evaluation_id')
        )
        return jsonify({'success': True, 'final_score': score}), 200

    except (TypeError, ValueError) as e:
        return jsonify({'error': str(e)}), 400
