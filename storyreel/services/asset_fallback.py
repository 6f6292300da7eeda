"""Asset Fallback Policy - runs a per-segment generation stage and substitutes a placeholder on failure."""

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from PIL import Image

from storyreel.core.config import Settings
from storyreel.core.exceptions import AssetGenerationDegraded
from storyreel.models.schemas import AssetKind, GeneratedAsset, Segment
from storyreel.services.image_client import PollinationsImageClient
from storyreel.services.tts_client import TTSClient
from storyreel.utils.error_handler import format_error_message, get_fallback_suggestion
from storyreel.utils.io_utils import write_bytes, write_text


def placeholder_png_bytes() -> bytes:
    """A minimal valid 1x1 PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (1, 1), color=(0, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


class GenerationStage(ABC):
    """One per-segment generation step with a well-defined placeholder."""

    kind: AssetKind
    service_name: str

    @abstractmethod
    def output_path(self, job_dir: Path, segment: Segment) -> Path:
        """Where the real artifact is written."""

    @abstractmethod
    def generate(self, segment: Segment, job_dir: Path) -> Path:
        """Call the provider and write the artifact. Raises on any failure."""

    @abstractmethod
    def write_placeholder(self, job_dir: Path, segment: Segment) -> Path:
        """Write the placeholder artifact and return its path."""


class ImageStage(GenerationStage):
    """b-roll still for a segment; placeholder is a 1x1 PNG."""

    kind = AssetKind.IMAGE
    service_name = "Image Generation"

    def __init__(self, provider: PollinationsImageClient):
        self.provider = provider

    def output_path(self, job_dir: Path, segment: Segment) -> Path:
        return job_dir / f"b-roll-{segment.index}.png"

    def generate(self, segment: Segment, job_dir: Path) -> Path:
        payload = self.provider.generate(segment.text)
        # Re-encode so the file content matches its .png name whatever the provider sent.
        with Image.open(io.BytesIO(payload)) as image:
            buffer = io.BytesIO()
            image.convert("RGB").save(buffer, format="PNG")
        return write_bytes(self.output_path(job_dir, segment), buffer.getvalue())

    def write_placeholder(self, job_dir: Path, segment: Segment) -> Path:
        return write_bytes(self.output_path(job_dir, segment), placeholder_png_bytes())


class VoiceStage(GenerationStage):
    """Voiceover for a segment; placeholder is a text file holding the narration."""

    kind = AssetKind.VOICEOVER
    service_name = "Voiceover"

    def __init__(self, provider: TTSClient):
        self.provider = provider

    def output_path(self, job_dir: Path, segment: Segment) -> Path:
        return job_dir / f"voiceover-{segment.index}.mp3"

    def placeholder_path(self, job_dir: Path, segment: Segment) -> Path:
        return job_dir / f"voiceover-{segment.index}.txt"

    def generate(self, segment: Segment, job_dir: Path) -> Path:
        payload = self.provider.synthesize(segment.text)
        return write_bytes(self.output_path(job_dir, segment), payload)

    def write_placeholder(self, job_dir: Path, segment: Segment) -> Path:
        self.output_path(job_dir, segment).unlink(missing_ok=True)
        return write_text(
            self.placeholder_path(job_dir, segment),
            f"Voiceover text for part {segment.index}:\n\n{segment.text}",
        )


class AssetFallbackPolicy:
    """
    Best-effort wrapper around a generation stage.

    The first failure of any kind triggers the placeholder; there is no
    retry and the error never reaches the caller.
    """

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the fallback policy.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger

    def execute(self, stage: GenerationStage, segment: Segment, job_dir: Path) -> GeneratedAsset:
        """
        Run ``stage`` for ``segment``, returning the real asset or its placeholder.

        Args:
            stage: Image or voice stage
            segment: Segment to generate for
            job_dir: Job directory receiving the artifact

        Returns:
            GeneratedAsset, never None
        """
        try:
            path = stage.generate(segment, job_dir)
            self.logger.info(f"✅ {stage.kind.value} for segment {segment.index} saved to {path.name}")
            return GeneratedAsset.real(stage.kind, segment.index, path)
        except Exception as e:
            degraded = AssetGenerationDegraded(stage.kind.value, segment.index, e)
            self.logger.warning(
                format_error_message(
                    f"Generating {stage.kind.value}",
                    e,
                    context={"job_dir": job_dir.name, "segment": segment.index},
                    suggestion=get_fallback_suggestion(stage.service_name, e),
                )
            )
            path = stage.write_placeholder(job_dir, segment)
            self.logger.warning(f"⚠️  Using placeholder {path.name} for segment {segment.index}")
            return GeneratedAsset.placeholder(stage.kind, segment.index, path, reason=degraded.message)
