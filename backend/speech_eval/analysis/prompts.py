"""
Analysis Prompt Module
======================
Builds the language-pattern analysis prompt sent to the language model.

The pattern keys requested here are exactly the keys of
mapper.PATTERN_SKILL_MAP, grouped the way coaches read them.
"""

from typing import Optional, Tuple

# (key, title, description)
STRUCTURAL_PATTERNS: Tuple[Tuple[str, str, str], ...] = (
    ('adapted_language', 'Adapted Language', 'Tailoring words to fit the audience and context.'),
    ('flow', 'Flow', 'Ensuring smooth and logical speech progression with transition words.'),
    ('strong_rhetoric', 'Strong Rhetoric', 'Using persuasive and impactful language.'),
    ('strategic_language', 'Strategic Language', "Choosing words that align with the speech's goal."),
    ('valued_language', 'Valued Language', 'Using words that evoke positive emotions or credibility for the intended audience.'),
)

FILLER_PATTERNS: Tuple[Tuple[str, str, str], ...] = (
    ('filler_language', 'Filler Language', 'Using unnecessary words like "you know" and "like."'),
    ('negations', 'Negations', 'Using negative phrasing that reduces clarity.'),
    ('repetitive_words', 'Repetitive Words', 'Overusing the same words in close proximity.'),
    ('absolute_words', 'Absolute Words', 'Overusing definitive terms like "always" and "never."'),
    ('filler_sounds', 'Filler Sounds', 'Using vocal fillers like "um," "hmm," and "uh" that reduce fluency.'),
)

RHETORICAL_PATTERNS: Tuple[Tuple[str, str, str], ...] = (
    ('hexacolon', 'Hexacolon', 'Structuring ideas into six parallel phrases for rhythm.'),
    ('tricolon', 'Tricolon', 'Using three parallel phrases for emphasis (e.g., "veni, vidi, vici").'),
    ('repetition', 'Repetition', 'Deliberately repeating key words or phrases for emphasis.'),
    ('anaphora', 'Anaphora', 'Repeating a word at the start of successive clauses/sentences.'),
    ('epiphora', 'Epiphora', 'Repeating a word at the end of successive clauses/sentences.'),
    ('alliteration', 'Alliteration', 'Using similar starting sounds to make speech memorable.'),
    ('correctio', 'Correctio', 'Self-correcting in speech for precision ("not X, but Y").'),
    ('climax', 'Climax', 'Gradually increasing intensity or importance to build impact.'),
    ('anadiplosis', 'Anadiplosis', 'Repeating the last word of one clause/sentence at the start of the next.'),
)

ALL_PATTERNS = STRUCTURAL_PATTERNS + FILLER_PATTERNS + RHETORICAL_PATTERNS

PATTERN_KEYS = tuple(key for key, _, _ in ALL_PATTERNS)


def _pattern_lines(patterns, start: int, audience: Optional[str]) -> str:
    lines = []
    for offset, (key, title, description) in enumerate(patterns):
        line = f"{start + offset}. {title} – {description}"
        if key == 'adapted_language' and audience:
            line += (" Given the specified audience, evaluate how effectively the speaker adapts "
                     "vocabulary, examples, and technical level to their needs.")
        lines.append(line)
    return "\n".join(lines)


def create_analysis_prompt(transcript: str, audience: Optional[str] = None) -> str:
    """
    Build the analysis prompt for a transcript.

    Args:
        transcript: Speech transcript text
        audience: Intended audience, if the student gave one

    Returns:
        Prompt asking for one {words, frequency, score, explanation} entry
        per pattern under a top-level "analysis" key
    """
    count = len(ALL_PATTERNS)
    audience_note = ""
    if audience:
        audience_note = (
            f'IMPORTANT - This speech was intended for the following audience: "{audience}". '
            "Pay special attention to how well the speaker adapts their language for this specific audience.\n"
        )

    structural = _pattern_lines(STRUCTURAL_PATTERNS, 1, audience)
    filler = _pattern_lines(FILLER_PATTERNS, 1 + len(STRUCTURAL_PATTERNS), audience)
    rhetorical = _pattern_lines(RHETORICAL_PATTERNS, 1 + len(STRUCTURAL_PATTERNS) + len(FILLER_PATTERNS), audience)

    return f"""You are a professional speech analysis AI. Analyze the following speech transcript for {count} specific rhetorical skills and language patterns.

For each skill, identify relevant words or phrases used in the transcript, count their frequency, and provide a score from -10 to +10 where:
- Positive scores (1 to 10) indicate effective use of a positive skill
- Negative scores (-1 to -10) indicate problematic use of a negative pattern
- Zero (0) indicates neutral or balanced use

Also provide a brief explanation for each score.

{audience_note}
The {count} skills to analyze are:

Structural Elements (positive skills):
{structural}

Filler Elements (negative patterns):
{filler}

Rhetorical Devices (positive skills):
{rhetorical}

Transcript to analyze:
\"\"\"
{transcript}
\"\"\"

Return your analysis in the following JSON format exactly with no additional text:

{{
  "analysis": {{
    "{PATTERN_KEYS[0]}": {{
      "words": ["example1", "example2"],
      "frequency": {{"example1": 3, "example2": 2}},
      "score": 5,
      "explanation": "Brief explanation of the score..."
    }},
    ... and so on for all {count} skills, using these keys: {", ".join(PATTERN_KEYS)}
  }}
}}

Ensure you include all {count} skills, even if you don't find examples in the text. In such cases, provide an empty words array, empty frequency object, a score of 0, and an explanation noting the absence of the skill.
Return only valid JSON with no additional text before or after. All property names should be in snake_case.
"""
