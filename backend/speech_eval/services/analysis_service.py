"""
Analysis Service Module
=======================
Runs the language-pattern analysis of a transcript through Google Gemini.

This service handles:
- Prompt construction for the transcript (and optional audience)
- The Gemini request, with the configured timeout
- Parsing the reply and mapping it onto the rubric

It is transport only: scoring happens in speech_eval.scoring on the
mapper's output.
"""

import logging
import time
from typing import Any, Dict, Optional

import google.generativeai as genai

from ..config import GeminiConfig, AnalysisConfig, get_config
from ..analysis import (
    create_analysis_prompt,
    parse_ai_response,
    map_ai_results_to_language_skills,
    AIResponseParseError,
)
from ..analysis.response_parser import salvage_from_error
from ..logging_config import log_engine_decision

logger = logging.getLogger(__name__)


class AnalysisServiceError(RuntimeError):
    """The analysis request could not be made or did not complete."""


class SpeechAnalysisService:
    """
    Service for AI-powered language analysis of speech transcripts.

    Usage:
        service = SpeechAnalysisService()
        payload = service.analyze_transcript(transcript, audience="High school students")
        payload["mappedAnalysis"]["analysis"]
    """

    def __init__(
        self,
        gemini_config: Optional[GeminiConfig] = None,
        analysis_config: Optional[AnalysisConfig] = None,
        model: Any = None
    ):
        """
        Initialize the analysis service with Gemini configuration.

        Args:
            gemini_config: Gemini settings (global config when omitted)
            analysis_config: Request limits (global config when omitted)
            model: Pre-built model object exposing generate_content(); built
                from gemini_config when omitted
        """
        config = get_config()
        self.gemini_config = gemini_config or config.gemini
        self.analysis_config = analysis_config or config.analysis

        if model is not None:
            self.model = model
        elif self.gemini_config.api_key:
            genai.configure(api_key=self.gemini_config.api_key)
            self.model = genai.GenerativeModel(
                self.gemini_config.model_name,
                generation_config={
                    'temperature': self.gemini_config.temperature,
                    'max_output_tokens': self.gemini_config.max_output_tokens,
                }
            )
        else:
            logger.warning("No Gemini API key found in configuration")
            self.model = None

        logger.info(
            f"Initialized SpeechAnalysisService with model: {self.gemini_config.model_name}, "
            f"temperature: {self.gemini_config.temperature}"
        )

    @property
    def is_configured(self) -> bool:
        return self.model is not None

    def _request(self, prompt: str) -> str:
        """Send the prompt and return the reply text."""
        start = time.time()
        try:
            response = self.model.generate_content(
                prompt,
                request_options={'timeout': self.gemini_config.timeout_seconds},
            )
            text = response.text
        except Exception as e:
            logger.error(f"Gemini API call failed: {e}")
            raise AnalysisServiceError(f"Failed to get response from Gemini: {e}") from e

        logger.info(f"Gemini response received in {time.time() - start:.2f}s ({len(text or '')} chars)")
        return text

    def analyze_transcript(
        self,
        transcript: str,
        audience: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Analyze a transcript's language patterns.

        Args:
            transcript: Speech transcript text
            audience: Intended audience, if known

        Returns:
            The parsed analysis with an added "mappedAnalysis" view

        Raises:
            AnalysisServiceError: missing API key, transcript too short, or
                transport failure
            AIResponseParseError: the reply held no valid analysis object
        """
        if not self.is_configured:
            raise AnalysisServiceError('Google Gemini API key is not configured')

        if not transcript or len(transcript.strip()) < self.analysis_config.min_transcript_length:
            raise AnalysisServiceError('Transcript is too short or empty')

        prompt = create_analysis_prompt(transcript, audience)
        logger.info(
            f"Analyzing transcript ({len(transcript)} chars, audience: {audience or 'none'})"
        )

        error_text = None
        try:
            reply = self._request(prompt)
        except AnalysisServiceError as e:
            # Some client errors quote the rejected reply; let the parser try it
            if salvage_from_error(str(e)) is None:
                raise
            reply, error_text = '', str(e)

        try:
            payload = parse_ai_response(reply, error_text=error_text)
        except AIResponseParseError:
            log_engine_decision(
                "ai_response_rejected",
                {'reply_length': len(reply or '')},
                level=logging.WARNING,
            )
            raise

        mapped = map_ai_results_to_language_skills(payload)

        analyzed = list(payload['analysis'].keys())
        mapped_keys = list(mapped['mappedAnalysis']['analysis'].keys())
        unmapped = [key for key in analyzed if key not in mapped_keys]
        logger.info(f"Analyzed {len(analyzed)} patterns, mapped {len(mapped_keys)}")
        if unmapped:
            log_engine_decision("unmapped_patterns", {'patterns': unmapped})

        return mapped
