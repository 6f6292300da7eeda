"""Tests for TTS client."""

from unittest.mock import MagicMock, patch

import pytest

from storyreel.services.tts_client import TTSClient


def test_no_provider_configured(settings, logger):
    client = TTSClient(settings, logger)

    assert client.provider == "none"
    with pytest.raises(ValueError, match="not configured"):
        client.synthesize("Hello there")


def test_empty_text_rejected(settings, logger):
    settings.elevenlabs_api_key = "el-test"
    with pytest.raises(ValueError):
        TTSClient(settings, logger).synthesize("   ")


def test_elevenlabs_preferred_over_openai(settings, logger):
    settings.elevenlabs_api_key = "el-test"
    settings.openai_api_key = "sk-test"
    assert TTSClient(settings, logger).provider == "elevenlabs"


@patch("storyreel.services.tts_client.requests.post")
def test_elevenlabs_request(mock_post, settings, logger):
    settings.elevenlabs_api_key = "el-test"
    mock_post.return_value = MagicMock(status_code=200, content=b"mp3-bytes")

    audio = TTSClient(settings, logger).synthesize("Hello there")

    assert audio == b"mp3-bytes"
    url = mock_post.call_args.args[0]
    kwargs = mock_post.call_args.kwargs
    assert url.endswith("/v1/text-to-speech/EXAVITQu4vr4xnSDxMaL")
    assert kwargs["headers"]["xi-api-key"] == "el-test"
    assert kwargs["headers"]["Accept"] == "audio/mpeg"
    assert kwargs["json"]["voice_settings"] == {"stability": 0.5, "similarity_boost": 0.5}


@patch("storyreel.services.tts_client.requests.post")
def test_elevenlabs_error_status(mock_post, settings, logger):
    settings.elevenlabs_api_key = "el-test"
    mock_post.return_value = MagicMock(status_code=401, text="invalid key")

    with pytest.raises(RuntimeError, match="401"):
        TTSClient(settings, logger).synthesize("Hello there")


@patch("storyreel.services.tts_client.requests.post")
def test_empty_payload_is_a_failure(mock_post, settings, logger):
    settings.elevenlabs_api_key = "el-test"
    mock_post.return_value = MagicMock(status_code=200, content=b"")

    with pytest.raises(RuntimeError):
        TTSClient(settings, logger).synthesize("Hello there")


@patch("storyreel.services.tts_client.OpenAI")
def test_openai_fallback_provider(mock_openai, settings, logger):
    settings.openai_api_key = "sk-test"
    mock_openai.return_value.audio.speech.create.return_value = MagicMock(content=b"openai-mp3")

    client = TTSClient(settings, logger)

    assert client.provider == "openai"
    assert client.synthesize("Hello there") == b"openai-mp3"
    kwargs = mock_openai.return_value.audio.speech.create.call_args.kwargs
    assert kwargs["model"] == "tts-1"
    assert kwargs["voice"] == "alloy"
