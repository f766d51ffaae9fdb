"""
Analysis Service Tests
======================
Tests for the Gemini-backed transcript analysis service.

Note: These tests use mocked models to avoid requiring an API key or
network access.
"""

import json
import os
import sys
from unittest.mock import Mock, patch

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from speech_eval.services.analysis_service import SpeechAnalysisService, AnalysisServiceError
from speech_eval.analysis import AIResponseParseError
from speech_eval.config import GeminiConfig, AnalysisConfig


TRANSCRIPT = "Um, good evening. We will rise, we will build, we will lead. Um, thank you."


# =============================================================================
# TEST FIXTURES
# =============================================================================

def create_mock_model(reply_text):
    """Create a model whose generate_content returns reply_text."""
    model = Mock()
    model.generate_content.return_value = Mock(text=reply_text)
    return model


def create_mock_reply():
    analysis = {
        'analysis': {
            'filler_sounds': {'words': ['um'], 'frequency': {'um': 2}, 'score': 4, 'explanation': 'Two ums'},
            'tricolon': {'words': ['we will rise, we will build, we will lead'],
                         'frequency': {'we will rise, we will build, we will lead': 1},
                         'score': 7, 'explanation': 'Clear tricolon'},
            'irony': {'words': [], 'frequency': {}, 'score': 0, 'explanation': 'Not requested'},
        }
    }
    return "```json\n" + json.dumps(analysis) + "\n```"


def create_service(model):
    return SpeechAnalysisService(
        gemini_config=GeminiConfig(api_key=None, timeout_seconds=30),
        analysis_config=AnalysisConfig(min_transcript_length=10),
        model=model,
    )


# =============================================================================
# SERVICE TESTS
# =============================================================================

def test_analyze_transcript_maps_reply():
    """A fenced reply is parsed and mapped."""
    model = create_mock_model(create_mock_reply())
    service = create_service(model)

    result = service.analyze_transcript(TRANSCRIPT, audience="Graduating class")
    view = result['mappedAnalysis']['analysis']

    assert view['filler_sounds']['skill_id'] == 103
    assert view['filler_sounds']['score'] == -4
    assert view['tricolon']['skill_id'] == 95
    assert view['tricolon']['score'] == 7
    assert 'irony' not in view
    assert result['analysis']['filler_sounds']['score'] == 4

    prompt = model.generate_content.call_args[0][0]
    assert TRANSCRIPT in prompt
    assert "Graduating class" in prompt
    assert model.generate_content.call_args[1]['request_options'] == {'timeout': 30}

    print("[PASS] Analyze transcript test passed")


def test_unconfigured_service():
    """No API key and no model means no analysis."""
    service = SpeechAnalysisService(gemini_config=GeminiConfig(api_key=None))

    assert not service.is_configured
    try:
        service.analyze_transcript(TRANSCRIPT)
        assert False, "Expected AnalysisServiceError"
    except AnalysisServiceError as e:
        assert "not configured" in str(e)

    print("[PASS] Unconfigured service test passed")


def test_short_transcript_rejected():
    """Short transcripts are rejected before calling the model."""
    model = create_mock_model(create_mock_reply())
    service = create_service(model)

    for transcript in ("", "   ", "Hi there"):
        try:
            service.analyze_transcript(transcript)
            assert False, "Expected AnalysisServiceError"
        except AnalysisServiceError:
            pass

    model.generate_content.assert_not_called()

    print("[PASS] Short transcript test passed")


def test_transport_failure():
    """Model errors surface as AnalysisServiceError."""
    model = Mock()
    model.generate_content.side_effect = TimeoutError("deadline exceeded")
    service = create_service(model)

    try:
        service.analyze_transcript(TRANSCRIPT)
        assert False, "Expected AnalysisServiceError"
    except AnalysisServiceError as e:
        assert "deadline exceeded" in str(e)
        assert isinstance(e.__cause__, TimeoutError)

    print("[PASS] Transport failure test passed")


def test_reply_recovered_from_client_error():
    """A client error that quotes the reply still yields a mapped analysis."""
    reply = create_mock_reply().replace("```json\n", "Raw response: ```json\n")
    model = Mock()
    model.generate_content.side_effect = ValueError("Could not parse " + reply)
    service = create_service(model)

    result = service.analyze_transcript(TRANSCRIPT)
    view = result['mappedAnalysis']['analysis']

    assert view['filler_sounds']['score'] == -4
    assert view['tricolon']['score'] == 7

    print("[PASS] Reply recovered from client error test passed")


def test_unparseable_reply():
    """A reply without an analysis object raises AIResponseParseError."""
    service = create_service(create_mock_model("I'm sorry, I can't analyze that."))

    try:
        service.analyze_transcript(TRANSCRIPT)
        assert False, "Expected AIResponseParseError"
    except AIResponseParseError as e:
        assert e.raw_response == "I'm sorry, I can't analyze that."

    print("[PASS] Unparseable reply test passed")


@patch('speech_eval.services.analysis_service.genai')
def test_model_built_from_config(mock_genai):
    """With an API key the Gemini model is configured from GeminiConfig."""
    config = GeminiConfig(api_key="test-key", model_name="gemini-test", temperature=0.1, max_output_tokens=512)

    service = SpeechAnalysisService(gemini_config=config)

    assert service.is_configured
    mock_genai.configure.assert_called_once_with(api_key="test-key")
    mock_genai.GenerativeModel.assert_called_once_with(
        "gemini-test",
        generation_config={'temperature': 0.1, 'max_output_tokens': 512}
    )

    print("[PASS] Model built from config test passed")


def run_all_tests():
    """Run all analysis service tests."""
    print("\n" + "="*60)
    print("ANALYSIS SERVICE TESTS")
    print("="*60 + "\n")

    test_analyze_transcript_maps_reply()
    test_unconfigured_service()
    test_short_transcript_rejected()
    test_transport_failure()
    test_reply_recovered_from_client_error()
    test_unparseable_reply()
    test_model_built_from_config()

    print("\n" + "="*60)
    print("ALL ANALYSIS SERVICE TESTS PASSED")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_all_tests()
