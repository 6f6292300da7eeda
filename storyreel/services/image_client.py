"""Image Client - generates b-roll stills from segment text via a prompt-in-URL endpoint."""

import io
from typing import Any
from urllib.parse import quote

import requests
from PIL import Image

from storyreel.core.config import Settings


class PollinationsImageClient:
    """Client for generating images via Pollinations."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the image client.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger

    def build_prompt(self, text: str) -> str:
        """Build the image prompt from the first characters of the segment text."""
        return f"{self.settings.image_prompt_prefix}{text[: self.settings.image_prompt_max_chars]}"

    def build_url(self, prompt: str) -> str:
        return f"{self.settings.image_api_url.rstrip('/')}/{quote(prompt, safe='')}"

    def generate(self, prompt_text: str) -> bytes:
        """
        Generate an image for ``prompt_text``.

        Args:
            prompt_text: Segment text the prompt is built from

        Returns:
            Encoded image bytes

        Raises:
            Exception: If the request fails, returns non-2xx, or the body is not an image
        """
        prompt = self.build_prompt(prompt_text)
        prompt_preview = prompt[:80] + "..." if len(prompt) > 80 else prompt
        self.logger.info(f"Requesting image: {prompt_preview}")

        try:
            response = requests.get(
                self.build_url(prompt),
                params={
                    "width": self.settings.image_width,
                    "height": self.settings.image_height,
                    "nologo": "true",
                },
                timeout=self.settings.image_timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            raise TimeoutError(f"Image request timed out after {self.settings.image_timeout_seconds}s") from e
        except requests.exceptions.RequestException as e:
            raise ConnectionError(f"Network error calling image API: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RuntimeError(f"Image API returned status {response.status_code}: {response.text[:200]}")

        self._validate_image(response.content)
        self.logger.info(f"Received image ({len(response.content)} bytes)")
        return response.content

    def _validate_image(self, payload: bytes) -> None:
        """Reject bodies that do not decode as an image (e.g. HTML error pages)."""
        if not payload:
            raise ValueError("Image API returned an empty body, not an image")
        with Image.open(io.BytesIO(payload)) as image:
            image.verify()
