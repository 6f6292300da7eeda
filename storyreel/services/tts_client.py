"""TTS (Text-to-Speech) client abstraction for multiple providers."""

from typing import Any

import requests
from openai import OpenAI

from storyreel.core.config import Settings


class TTSClient:
    """TTS client supporting ElevenLabs with OpenAI as a secondary provider."""

    ELEVENLABS_URL = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize TTS client.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.provider = self._detect_provider()

    def _detect_provider(self) -> str:
        """Detect which TTS provider to use based on available credentials."""
        if self.settings.elevenlabs_api_key:
            return "elevenlabs"
        elif self.settings.openai_api_key:
            return "openai"
        else:
            return "none"

    def synthesize(self, text: str) -> bytes:
        """
        Synthesize speech for ``text``.

        Args:
            text: Text to convert to speech

        Returns:
            MP3 audio bytes

        Raises:
            Exception: If no provider is configured or generation fails
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        self.logger.info(f"Generating speech using {self.provider} provider for {len(text)} characters...")

        if self.provider == "elevenlabs":
            audio = self._synthesize_elevenlabs(text)
        elif self.provider == "openai":
            audio = self._synthesize_openai(text)
        else:
            raise ValueError("TTS provider not configured. Set ELEVENLABS_API_KEY or OPENAI_API_KEY in .env file.")

        if not audio:
            raise RuntimeError(f"{self.provider} returned an empty audio payload")
        self.logger.info(f"Speech generated ({len(audio)} bytes)")
        return audio

    def _synthesize_elevenlabs(self, text: str) -> bytes:
        """Generate speech using ElevenLabs API."""
        url = self.ELEVENLABS_URL.format(voice_id=self.settings.elevenlabs_voice_id)

        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self.settings.elevenlabs_api_key,
        }

        data = {
            "text": text,
            "model_id": self.settings.elevenlabs_model_id,
            "voice_settings": {
                "stability": self.settings.elevenlabs_stability,
                "similarity_boost": self.settings.elevenlabs_similarity_boost,
            },
        }

        try:
            response = requests.post(url, json=data, headers=headers, timeout=self.settings.voice_timeout_seconds)
        except requests.exceptions.Timeout as e:
            raise TimeoutError(f"ElevenLabs request timed out after {self.settings.voice_timeout_seconds}s") from e
        except requests.exceptions.RequestException as e:
            raise ConnectionError(f"Network error calling ElevenLabs API: {e}") from e

        if response.status_code != 200:
            raise RuntimeError(f"ElevenLabs API returned status {response.status_code}: {response.text[:200]}")

        return response.content

    def _synthesize_openai(self, text: str) -> bytes:
        """Generate speech using OpenAI TTS API."""
        client = OpenAI(
            api_key=self.settings.openai_api_key,
            timeout=self.settings.voice_timeout_seconds,
            max_retries=0,
        )
        response = client.audio.speech.create(
            model=self.settings.openai_tts_model,
            voice=self.settings.openai_tts_voice,
            input=text,
            response_format="mp3",
        )
        return response.content
