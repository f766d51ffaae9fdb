"""
Analysis Routes Module
======================
REST API endpoints for AI language analysis.

Endpoints:
- POST /api/analysis/map      - Map an already-parsed analysis onto the rubric
- POST /api/analysis/parse    - Parse a raw model reply, then map it
- POST /api/analysis/analyze  - Run Gemini on a transcript, then map it

Analysis failures only block the automated-score path; manual scoring
endpoints are unaffected.
"""

import traceback

from flask import Blueprint, request, jsonify, current_app

from ..analysis import (
    AIResponseParseError,
    map_ai_results_to_language_skills,
    parse_ai_response,
    to_automated_skill_scores,
)
from ..services.analysis_service import SpeechAnalysisService, AnalysisServiceError
from ..logging_config import get_engine_logger

logger = get_engine_logger("routes.analysis")

analysis_bp = Blueprint('analysis', __name__)


def _get_analysis_service() -> SpeechAnalysisService:
    """Service attached to the app, created on first use."""
    service = getattr(current_app, 'analysis_service', None)
    if service is None:
        service = SpeechAnalysisService()
        current_app.analysis_service = service
    return service


def _mapped_response(mapped):
    return {
        'success': True,
        'analysis': mapped.get('analysis', {}),
        'mappedAnalysis': mapped.get('mappedAnalysis', {'analysis': {}}),
        'automated_scores': [score.to_dict() for score in to_automated_skill_scores(mapped)],
    }


@analysis_bp.route('/map', methods=['POST'])
def map_analysis():
    """
    Map a parsed analysis payload.

    Request JSON:
        {"analysis": {"filler_sounds": {"words": ["um"], "frequency": {"um": 4},
                                        "score": 4, "explanation": "..."}}}

    Response JSON:
        {"success": true, "analysis": {...}, "mappedAnalysis": {"analysis": {...}},
         "automated_scores": [...]}
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('analysis'), dict):
        return jsonify({'error': 'Request must contain an "analysis" object'}), 400

    return jsonify(_mapped_response(map_ai_results_to_language_skills(data))), 200


@analysis_bp.route('/parse', methods=['POST'])
def parse_analysis():
    """
    Parse a raw model reply and map it.

    Request JSON:
        {"response_text": "```json\\n{\\"analysis\\": {...}}\\n```",
         "error_text": "Optional client error message quoting the reply"}
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    text = data.get('response_text')
    error_text = data.get('error_text')
    if not text and not error_text:
        return jsonify({'error': 'No response_text provided'}), 400

    try:
        payload = parse_ai_response(text or '', error_text=error_text)
    except AIResponseParseError as e:
        return jsonify({'error': f'Failed to parse AI response: {str(e)}'}), 502

    return jsonify(_mapped_response(map_ai_results_to_language_skills(payload))), 200


@analysis_bp.route('/analyze', methods=['POST'])
def analyze_transcript():
    """
    Analyze a transcript with Gemini.

    Request JSON:
        {"transcript": "...", "audience": "Optional audience description"}
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    transcript = data.get('transcript')
    if not transcript:
        return jsonify({'error': 'No transcript provided'}), 400

    try:
        mapped = _get_analysis_service().analyze_transcript(transcript, data.get('audience'))
        return jsonify(_mapped_response(mapped)), 200

    except AIResponseParseError as e:
        return jsonify({'error': f'Failed to parse AI response: {str(e)}'}), 502
    except AnalysisServiceError as e:
        return jsonify({'error': str(e)}), 503
    except Exception as e:
        logger.error(f"Analysis error: {str(e)}")
        logger.error(traceback.format_exc())
        return jsonify({'error': f'Analysis error: {str(e)}'}), 500
