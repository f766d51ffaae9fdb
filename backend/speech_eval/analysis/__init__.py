"""
Language Analysis Module
========================
Bridges free-form AI language analysis and the rubric.

This module implements:
- Prompt construction for the 19 language patterns
- Recovery and validation of the model's JSON reply
- Mapping of pattern entries onto Language skill ids with sign correction

Usage:
    from speech_eval.analysis import parse_ai_response, map_ai_results_to_language_skills

    payload = parse_ai_response(reply_text)
    mapped = map_ai_results_to_language_skills(payload)
    mapped["mappedAnalysis"]["analysis"]["filler_sounds"]["skill_id"]   # 103
"""

from .mapper import (
    PATTERN_SKILL_MAP,
    LANGUAGE_EXTENSIONS,
    MAPPED_VIEW_KEY,
    build_language_registry,
    get_default_language_registry,
    map_ai_results_to_language_skills,
    get_mapped_view,
    to_automated_skill_scores,
)
from .response_parser import AIResponseParseError, parse_ai_response
from .prompts import PATTERN_KEYS, create_analysis_prompt

__all__ = [
    'PATTERN_SKILL_MAP',
    'LANGUAGE_EXTENSIONS',
    'MAPPED_VIEW_KEY',
    'build_language_registry',
    'get_default_language_registry',
    'map_ai_results_to_language_skills',
    'get_mapped_view',
    'to_automated_skill_scores',
    'AIResponseParseError',
    'parse_ai_response',
    'PATTERN_KEYS',
    'create_analysis_prompt',
]
