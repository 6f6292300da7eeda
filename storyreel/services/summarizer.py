"""Summarizer - extracts and summarizes a web page through Perplexity's OpenAI-compatible API."""

from typing import Any

from openai import OpenAI

from storyreel.core.config import Settings
from storyreel.core.exceptions import UpstreamError
from storyreel.utils.error_handler import format_error_message, get_fallback_suggestion
from storyreel.utils.text_utils import clean_summary_text


class PerplexitySummarizer:
    """Turns a source URL into a short plain-text summary."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the summarizer.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self._client = None

    def _get_client(self) -> OpenAI:
        """Get or create the OpenAI client pointed at Perplexity."""
        if self._client is None:
            if not self.settings.perplexity_api_key:
                raise UpstreamError("Perplexity API key not configured. Set PERPLEXITY_API_KEY in .env file.")
            self._client = OpenAI(
                api_key=self.settings.perplexity_api_key,
                base_url=self.settings.perplexity_base_url,
                timeout=self.settings.summarize_timeout_seconds,
                max_retries=0,
            )
        return self._client

    def build_prompt(self, url: str) -> str:
        return (
            f"Extract and summarize the main content from this URL in exactly "
            f"{self.settings.summary_word_target} words, no emojis: {url}"
        )

    def summarize(self, url: str) -> str:
        """
        Summarize the page at ``url``.

        Args:
            url: Source URL

        Returns:
            Cleaned summary text (may be empty if the provider returned nothing)

        Raises:
            UpstreamError: If the provider is unconfigured or the call fails
        """
        self.logger.info(f"Summarizing {url} with {self.settings.perplexity_model}...")
        client = self._get_client()

        try:
            response = client.chat.completions.create(
                model=self.settings.perplexity_model,
                messages=[{"role": "user", "content": self.build_prompt(url)}],
            )
        except Exception as e:
            self.logger.error(
                format_error_message(
                    "Summarizing source URL",
                    e,
                    context={"url": url},
                    suggestion=get_fallback_suggestion("Summarization", e),
                )
            )
            raise UpstreamError(f"Summarization failed: {e}") from e

        if not response.choices:
            raise UpstreamError("Summarization failed: provider returned no choices")

        content = response.choices[0].message.content or ""
        summary = clean_summary_text(content)
        self.logger.info(f"Summary created ({len(summary.split())} words): {summary[:100]}...")
        return summary
