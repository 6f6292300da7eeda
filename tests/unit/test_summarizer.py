"""Tests for Perplexity Summarizer service."""

from unittest.mock import MagicMock, patch

import pytest

from storyreel.core.exceptions import UpstreamError
from storyreel.services.summarizer import PerplexitySummarizer


@pytest.fixture
def summarizer(settings, logger):
    settings.perplexity_api_key = "pplx-test"
    return PerplexitySummarizer(settings, logger)


def completion(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


def test_build_prompt(summarizer):
    prompt = summarizer.build_prompt("https://example.com/a")
    assert prompt == (
        "Extract and summarize the main content from this URL in exactly 100 words, "
        "no emojis: https://example.com/a"
    )


@patch("storyreel.services.summarizer.OpenAI")
def test_summarize_returns_clean_text(mock_openai, summarizer):
    client = mock_openai.return_value
    client.chat.completions.create.return_value = completion("A story [1] about\nsomething.")

    summary = summarizer.summarize("https://example.com/a")

    assert summary == "A story about something."
    mock_openai.assert_called_once_with(
        api_key="pplx-test",
        base_url="https://api.perplexity.ai",
        timeout=60.0,
        max_retries=0,
    )
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "sonar-pro"
    assert kwargs["messages"][0]["role"] == "user"


@patch("storyreel.services.summarizer.OpenAI")
def test_summarize_wraps_provider_errors(mock_openai, summarizer):
    mock_openai.return_value.chat.completions.create.side_effect = RuntimeError("503 Service Unavailable")

    with pytest.raises(UpstreamError):
        summarizer.summarize("https://example.com/a")


@patch("storyreel.services.summarizer.OpenAI")
def test_summarize_no_choices(mock_openai, summarizer):
    response = MagicMock()
    response.choices = []
    mock_openai.return_value.chat.completions.create.return_value = response

    with pytest.raises(UpstreamError):
        summarizer.summarize("https://example.com/a")


def test_summarize_without_key_raises(settings, logger):
    summarizer = PerplexitySummarizer(settings, logger)
    with pytest.raises(UpstreamError):
        summarizer.summarize("https://example.com/a")
