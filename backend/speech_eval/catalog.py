"""
Skill Catalog Module
====================
Static definition of every rubric skill and the id-range category table.

The catalog is pure data. Categories are resolved from an ordered table of
(min_id, max_id, category) ranges through a single function, with an
explicit Unknown fallback for ids outside every range.

The catalog is built once per process (get_default_catalog) and passed
explicitly to the engine functions that need it.

Usage:
    from speech_eval.catalog import get_default_catalog, resolve_category

    catalog = get_default_catalog()
    skill = catalog.get(97)          # Skill(id=97, name="Anaphora", ...)
    resolve_category(97)             # SkillCategory.LANGUAGE
"""

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union, Any

from .models import Skill, SkillCategory

logger = logging.getLogger(__name__)


# =============================================================================
# CATEGORY RESOLUTION
# =============================================================================

# Inclusive id ranges, consulted in order.
CATEGORY_RANGES: Tuple[Tuple[int, int, SkillCategory], ...] = (
    (1, 6, SkillCategory.NERVOUSNESS),
    (7, 32, SkillCategory.VOICE),
    (33, 75, SkillCategory.BODY_LANGUAGE),
    (76, 84, SkillCategory.EXPRESSIONS),
    (85, 102, SkillCategory.LANGUAGE),
    (103, 110, SkillCategory.ULTIMATE_LEVEL),
)


def resolve_category(skill_id: int) -> SkillCategory:
    """Parent category for a skill id, SkillCategory.UNKNOWN when out of range."""
    for min_id, max_id, category in CATEGORY_RANGES:
        if min_id <= skill_id <= max_id:
            return category
    return SkillCategory.UNKNOWN


def category_range(category: SkillCategory) -> Optional[Tuple[int, int]]:
    """(min_id, max_id) for a category, None for UNKNOWN."""
    for min_id, max_id, candidate in CATEGORY_RANGES:
        if candidate == category:
            return (min_id, max_id)
    return None


# =============================================================================
# SKILL DEFAULTS AND POLARITY
# =============================================================================

DEFAULT_MAX_SCORE = 10.0
DEFAULT_WEIGHT = 1.0

# Skills where a higher raw score indicates a problem.
BAD_SKILL_IDS = frozenset((
    # Nervousness
    1, 2, 3, 4, 5, 6,
    # Voice
    19, 23, 25,
    # Body Language
    36, 42, 62,
    # Language
    88, 89, 90, 91,
))


def is_good_skill(skill_id: int) -> bool:
    return skill_id not in BAD_SKILL_IDS


def default_max_score(good_skill: bool = True) -> float:
    """Every skill is scored out of 10 regardless of polarity."""
    return DEFAULT_MAX_SCORE


def default_weight(good_skill: bool = True) -> float:
    """Every skill starts at weight 1.0; coaches adjust per evaluation."""
    return DEFAULT_WEIGHT


# =============================================================================
# SKILL DEFINITIONS
# =============================================================================

NERVOUSNESS_SKILLS = (
    (1, "Swaying"),
    (2, "Squirming"),
    (3, "Irrational movement"),
    (4, "Stroke / Fidget"),
    (5, "Flight / Freeze"),
    (6, "Unbalanced feet"),
)

VOICE_SKILLS = (
    (7, "Register / Pitch"),
    (8, "Slow pace"),
    (9, "Fast pace"),
    (10, "Base pace"),
    (11, "Timbre"),
    (12, "Emphasis"),
    (13, "Playful emphasis"),
    (14, "Base volume"),
    (15, "Varied volume"),
    (16, "Up-Down talk"),
    (17, "Volume increase"),
    (18, "Volume decrease"),
    (19, "Unfunctional pauses"),
    (20, "Relaxation pause"),
    (21, "Strategic pause"),
    (22, "Effect pause"),
    (23, "Vocal Fry"),
    (24, "Elongated vowels"),
    (26, "Prosody"),
    (27, "Melody"),
    (28, "Articulation"),
    (29, "Voice climax"),
    (30, "Dramatising"),
    (31, "Language change"),
    (32, "Sound effects"),
)

BODY_LANGUAGE_SKILLS = (
    (33, "Confident posture"),
    (34, "Neutral Posture"),
    (35, "Amplifying Posture"),
    (36, "Ticks"),
    (37, "Feet"),
    (38, "Hips"),
    (39, "Angle"),
    (40, "Relaxed"),
    (41, "Dramatising"),
    (42, "Shrugging shoulders"),
    (43, "Intensity variation"),
    (44, "Functional"),
    (45, "Smooth"),
    (46, "Distinct"),
    (47, "Adapted size"),
    (48, "Standard pace"),
    (49, "Adapted pace"),
    (50, "Full out"),
    (51, "Pointing"),
    (52, "Volume/Size"),
    (53, "Regulators"),
    (54, "Rhythm of speech"),
    (55, "Signs"),
    (56, "Imaginary props"),
    (57, "Drawings"),
    (58, "Affect display"),
    (59, "Sounds"),
    (60, "Progression"),
    (61, "Empowering head angle"),
    (62, "Unfunctional head angle"),
    (63, "Standard head angle"),
    (64, "Amplifying head movement"),
    (65, "Stage Presence"),
    (66, "Anchoring"),
    (67, "Vertical movement"),
    (68, "Power areas"),
    (69, "Horizontal movement"),
    (70, "Bent knees"),
    (71, "Amplification"),
    (72, "General eye contact"),
    (73, "Sweeping"),
    (74, "Focus"),
    (75, "Attire"),
)

EXPRESSIONS_SKILLS = (
    (76, "Neutral"),
    (77, "Matching"),
    (78, "Dramatising"),
    (79, "Mouth"),
    (80, "Eyebrows"),
    (81, "Forehead"),
    (82, "Eyes"),
    (83, "Self laugh"),
    (84, "Straight face"),
)

# Filler sounds keeps its historical id 25, so its range-derived category is Voice.
LANGUAGE_SKILLS = (
    (85, "Adapted"),
    (86, "Flow"),
    (87, "Strong rhetorics"),
    (88, "Filler words"),
    (89, "Negations"),
    (90, "Repetitive words"),
    (91, "Absolute words"),
    (92, "Strategic"),
    (93, "Valued"),
    (94, "Hexacolon"),
    (95, "Tricolon"),
    (96, "Repetition"),
    (97, "Anaphora"),
    (98, "Epiphora"),
    (99, "Alliteration"),
    (100, "Correctio"),
    (101, "Climax"),
    (102, "Anadiplosis"),
    (25, "Filler sounds"),
)

ULTIMATE_LEVEL_SKILLS = (
    (103, "Loves presenting"),
    (104, "Role playing"),
    (105, "Total intensity transition"),
    (106, "Acts out the obvious"),
    (107, "Present and authentic"),
    (108, "Synchronisity"),
    (109, "Contrast"),
    (110, "Visualisation"),
)

SKILL_GROUPS = (
    NERVOUSNESS_SKILLS,
    VOICE_SKILLS,
    BODY_LANGUAGE_SKILLS,
    EXPRESSIONS_SKILLS,
    LANGUAGE_SKILLS,
    ULTIMATE_LEVEL_SKILLS,
)


def make_skill(skill_id: int, name: str) -> Skill:
    """Catalog entry with range-derived category and default polarity/limits."""
    good = is_good_skill(skill_id)
    return Skill(
        id=skill_id,
        name=name,
        category=resolve_category(skill_id),
        is_good_skill=good,
        max_score=default_max_score(good),
        weight=default_weight(good),
    )


# =============================================================================
# CATALOG
# =============================================================================

class SkillCatalog:
    """
    Immutable, ordered collection of skills with id lookup.

    The catalog trusts its input: duplicate ids are not rejected, the first
    occurrence wins for lookups.

    Usage:
        catalog = SkillCatalog(skills)
        catalog.get(7)
        catalog.skills_in_category(SkillCategory.VOICE)
        7 in catalog
    """

    def __init__(self, skills: Iterable[Skill]):
        self._skills: Tuple[Skill, ...] = tuple(skills)
        by_id: Dict[int, Skill] = {}
        for skill in self._skills:
            by_id.setdefault(skill.id, skill)
        self._by_id = MappingProxyType(by_id)

    def __iter__(self) -> Iterator[Skill]:
        return iter(self._skills)

    def __len__(self) -> int:
        return len(self._skills)

    def __contains__(self, skill_id: object) -> bool:
        return skill_id in self._by_id

    def __repr__(self) -> str:
        return f"SkillCatalog({len(self._skills)} skills)"

    @property
    def by_id(self):
        """Read-only id -> Skill mapping."""
        return self._by_id

    def get(self, skill_id: Union[int, str]) -> Optional[Skill]:
        """
        Look up a skill by id.

        String ids are parsed; anything that isn't an integer returns None.
        """
        if isinstance(skill_id, str):
            try:
                skill_id = int(skill_id.strip(), 10)
            except ValueError:
                return None
        return self._by_id.get(skill_id)

    def skills_in_category(self, category: Union[SkillCategory, str]) -> List[Skill]:
        category = SkillCategory(category)
        return [skill for skill in self._skills if skill.category == category]

    def ids(self) -> List[int]:
        return [skill.id for skill in self._skills]

    def to_list(self) -> List[Dict[str, Any]]:
        return [skill.to_dict() for skill in self._skills]

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "SkillCatalog":
        """
        Build a catalog from persistence-supplied skill rows.

        Each row needs an id and a name. Category, polarity, weight and max
        score are derived from the id when absent.
        """
        skills = []
        for record in records:
            skill_id = int(record['id'])
            good = record.get('is_good_skill', record.get('isGoodSkill'))
            if good is None:
                good = is_good_skill(skill_id)
            category = record.get('category')
            max_score = record.get('max_score', record.get('maxScore'))
            weight = record.get('weight')
            skills.append(Skill(
                id=skill_id,
                name=record['name'],
                category=SkillCategory(category) if category else resolve_category(skill_id),
                is_good_skill=bool(good),
                max_score=float(max_score) if max_score is not None else default_max_score(good),
                weight=float(weight) if weight is not None else default_weight(good),
            ))
        return cls(skills)


def build_default_skills() -> List[Skill]:
    """All rubric skills in catalog order."""
    return [make_skill(skill_id, name) for group in SKILL_GROUPS for skill_id, name in group]


@lru_cache(maxsize=1)
def get_default_catalog() -> SkillCatalog:
    """The process-wide rubric catalog, built on first use."""
    catalog = SkillCatalog(build_default_skills())
    logger.debug(f"Loaded skill catalog with {len(catalog)} skills")
    return catalog


def get_skill_by_id(
    skill_id: Union[int, str],
    catalog: Optional[SkillCatalog] = None
) -> Optional[Skill]:
    """Look up a skill in the given catalog (default rubric when omitted)."""
    catalog = catalog if catalog is not None else get_default_catalog()
    return catalog.get(skill_id)
