"""
AI Result Mapping Module
========================
Maps a language-pattern analysis onto the rubric's skill ids.

Input is the already-parsed analysis payload:

    {"analysis": {"<pattern_key>": {"words": [...], "frequency": {...},
                                    "score": -10..10, "explanation": "..."}}}

Each entry whose key is in PATTERN_SKILL_MAP and whose target skill is in
the language registry gets skill_id and skill_name attached. For skills
whose polarity is bad, a positive score is negated: frequent use of a bad
pattern always counts against the speaker, whatever sign the analyzer
chose. Scores already <= 0 are left alone.

Unknown pattern keys are left out of the mapped view. The original
payload is returned untouched next to the mapped view.
"""

import copy
import logging
from functools import lru_cache
from numbers import Real
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from ..catalog import SkillCatalog, get_default_catalog, resolve_category
from ..models import Skill, SkillCategory, SkillScore

logger = logging.getLogger(__name__)

MAPPED_VIEW_KEY = 'mappedAnalysis'

# Pattern key -> Language skill id (85-102), plus filler_sounds -> 103.
#
# 103 sits inside the Ultimate Level range, not Language. It is kept as an
# explicit exception; category resolution by range will still file a stored
# score for 103 under Ultimate Level.
#
# Targets are the same-named Language skills. The older table sent several
# keys to ids outside 85-102 (epiphora -> 88, alliteration -> 90, ...), which
# gave good patterns bad-skill polarity; see the pattern to skill id entry
# under "Open-question decisions" in DESIGN.md before changing any id here.
PATTERN_SKILL_MAP: Mapping[str, int] = MappingProxyType({
    'adapted_language': 85,
    'flow': 86,
    'strong_rhetoric': 87,
    'filler_language': 88,
    'negations': 89,
    'repetitive_words': 90,
    'absolute_words': 91,
    'strategic_language': 92,
    'valued_language': 93,
    'hexacolon': 94,
    'tricolon': 95,
    'repetition': 96,
    'anaphora': 97,
    'epiphora': 98,
    'alliteration': 99,
    'correctio': 100,
    'climax': 101,
    'anadiplosis': 102,
    'filler_sounds': 103,
})

FILLER_SOUNDS_SKILL = Skill(
    id=103,
    name="Filler sounds",
    category=SkillCategory.LANGUAGE,
    is_good_skill=False,
)

# Language skills that live outside the 85-102 range
LANGUAGE_EXTENSIONS = (FILLER_SOUNDS_SKILL,)

AI_SCORE_MIN = -10.0
AI_SCORE_MAX = 10.0


# =============================================================================
# REGISTRY
# =============================================================================

def build_language_registry(catalog: Optional[SkillCatalog] = None) -> Mapping[int, Skill]:
    """
    Skill id -> Skill for every target the mapper may resolve.

    The catalog's Language skills plus LANGUAGE_EXTENSIONS.
    """
    catalog = catalog if catalog is not None else get_default_catalog()
    registry = {skill.id: skill for skill in catalog.skills_in_category(SkillCategory.LANGUAGE)}
    for skill in LANGUAGE_EXTENSIONS:
        registry[skill.id] = skill
    return MappingProxyType(registry)


@lru_cache(maxsize=1)
def get_default_language_registry() -> Mapping[int, Skill]:
    return build_language_registry(get_default_catalog())


# =============================================================================
# MAPPING
# =============================================================================

def correct_sign(score: Any, skill: Skill) -> Any:
    """Negate a positive score for a bad skill; everything else passes through."""
    if not skill.is_good_skill and isinstance(score, Real) and not isinstance(score, bool) and score > 0:
        return -score
    return score


def map_ai_results_to_language_skills(
    analysis_data: Any,
    registry: Optional[Mapping[int, Skill]] = None,
    pattern_map: Mapping[str, int] = PATTERN_SKILL_MAP
) -> Any:
    """
    Attach skill ids and names to analysis entries and fix bad-skill signs.

    Args:
        analysis_data: Parsed payload with a top-level "analysis" object
        registry: Skill id -> Skill for mapping targets
            (default: catalog Language skills + extensions)
        pattern_map: Pattern key -> skill id

    Returns:
        A copy of the payload with an added "mappedAnalysis": {"analysis": {...}}
        view, or the payload itself when it has no "analysis" object.
    """
    if not isinstance(analysis_data, dict) or not isinstance(analysis_data.get('analysis'), dict):
        return analysis_data

    registry = registry if registry is not None else get_default_language_registry()

    mapped: Dict[str, Dict[str, Any]] = {}
    dropped: List[str] = []

    for key, value in analysis_data['analysis'].items():
        skill_id = pattern_map.get(key)
        skill = registry.get(skill_id) if skill_id is not None else None
        if skill is None or not isinstance(value, dict):
            dropped.append(key)
            continue

        entry = copy.deepcopy(value)
        if 'score' in entry:
            entry['score'] = correct_sign(entry['score'], skill)
        entry['skill_id'] = skill.id
        entry['skill_name'] = skill.name
        mapped[key] = entry

        if resolve_category(skill.id) != skill.category:
            logger.debug(
                f"Pattern '{key}' mapped to skill {skill.id} ({skill.name}), "
                f"whose id range is {resolve_category(skill.id).value}"
            )

    if dropped:
        logger.debug(f"Unmapped analysis patterns: {dropped}")

    result = copy.deepcopy(analysis_data)
    result[MAPPED_VIEW_KEY] = {'analysis': mapped}
    return result


def get_mapped_view(mapped_payload: Any) -> Dict[str, Dict[str, Any]]:
    """The mapped entries of a mapper result, {} when absent."""
    if not isinstance(mapped_payload, dict):
        return {}
    view = mapped_payload.get(MAPPED_VIEW_KEY) or {}
    return view.get('analysis') or {}


# =============================================================================
# AUTOMATED SKILL SCORES
# =============================================================================

def clamp_ai_score(score: float, skill: Skill) -> float:
    """
    Bound a mapped score to the skill's polarity and to [-10, 10].

    Good skills never go below 0 and bad skills never above 0.
    """
    if skill.is_good_skill and score < 0:
        score = 0.0
    elif not skill.is_good_skill and score > 0:
        score = 0.0
    return max(AI_SCORE_MIN, min(AI_SCORE_MAX, float(score)))


def to_automated_skill_scores(
    mapped_payload: Any,
    registry: Optional[Mapping[int, Skill]] = None,
    adjustments: Optional[Mapping[int, float]] = None
) -> List[SkillScore]:
    """
    Turn the mapped view into automated SkillScores for the normalizer.

    Args:
        mapped_payload: Output of map_ai_results_to_language_skills
        registry: Registry used for weight, max score and polarity
        adjustments: Coach overrides keyed by skill id

    Returns:
        One SkillScore per mapped entry with a numeric score
    """
    registry = registry if registry is not None else get_default_language_registry()
    adjustments = adjustments or {}

    scores = []
    for key, entry in get_mapped_view(mapped_payload).items():
        raw = entry.get('score')
        skill = registry.get(entry.get('skill_id'))
        if skill is None or not isinstance(raw, Real) or isinstance(raw, bool):
            logger.debug(f"Skipping mapped pattern '{key}' without a numeric score")
            continue

        ai_score = clamp_ai_score(raw, skill)
        scores.append(SkillScore.automated(
            skill_id=skill.id,
            ai_score=ai_score,
            adjusted_score=adjustments.get(skill.id),
            weight=skill.weight,
            max_score=skill.max_score,
        ))
    return scores
