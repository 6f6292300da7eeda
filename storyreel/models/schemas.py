"""Pydantic models and schemas for the story video pipeline."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# Enums
# ============================================================================


class JobState(str, Enum):
    """Lifecycle of one story job."""

    CREATED = "created"
    SUMMARIZING = "summarizing"
    PARTITIONING_TEXT = "partitioning_text"
    GENERATING_ASSETS = "generating_assets"
    COMPOSING_TIMELINE = "composing_timeline"
    BUILDING_RENDER_PLAN = "building_render_plan"
    RENDERING = "rendering"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETE, JobState.FAILED)


class AssetKind(str, Enum):
    """Kind of per-segment generated asset."""

    IMAGE = "image"
    VOICEOVER = "voiceover"


# ============================================================================
# Segment & Asset Models
# ============================================================================


class Segment(BaseModel):
    """One of the narrative parts the summary is split into."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1, description="Ordinal position (1-indexed)")
    text: str = Field(..., description="Segment text")
    estimated_duration_seconds: int = Field(..., ge=0, description="Estimated spoken duration in seconds")

    @property
    def duration_ms(self) -> int:
        return self.estimated_duration_seconds * 1000


class GeneratedAsset(BaseModel):
    """An image or voiceover for one segment: either the real artifact or its placeholder."""

    model_config = ConfigDict(frozen=True)

    kind: AssetKind = Field(..., description="Asset kind")
    segment_index: int = Field(..., ge=1, description="Segment this asset belongs to")
    path: Path = Field(..., description="File holding the payload (or placeholder)")
    is_placeholder: bool = Field(default=False, description="True when the provider failed")
    reason: Optional[str] = Field(default=None, description="Why a placeholder was used")

    @classmethod
    def real(cls, kind: AssetKind, segment_index: int, path: Path) -> "GeneratedAsset":
        return cls(kind=kind, segment_index=segment_index, path=path)

    @classmethod
    def placeholder(cls, kind: AssetKind, segment_index: int, path: Path, reason: str) -> "GeneratedAsset":
        return cls(kind=kind, segment_index=segment_index, path=path, is_placeholder=True, reason=reason)

    @property
    def file_name(self) -> str:
        return self.path.name


# ============================================================================
# Subtitle Models
# ============================================================================


class SubtitleCue(BaseModel):
    """A single subtitle entry. Offsets are integer milliseconds."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1, description="Sequential cue number")
    start_ms: int = Field(..., ge=0, description="Start offset in milliseconds")
    end_ms: int = Field(..., ge=0, description="End offset in milliseconds")
    text: str = Field(default="", description="Cue text")

    @model_validator(mode="after")
    def _check_order(self) -> "SubtitleCue":
        if self.end_ms < self.start_ms:
            raise ValueError(f"Cue {self.index} ends ({self.end_ms}ms) before it starts ({self.start_ms}ms)")
        return self

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


# ============================================================================
# Timeline Models
# ============================================================================


class TimelineEntry(BaseModel):
    """A segment placed on the job timeline."""

    model_config = ConfigDict(frozen=True)

    segment: Segment
    start_offset_ms: int = Field(..., ge=0, description="Absolute start offset in milliseconds")

    @property
    def duration_ms(self) -> int:
        return self.segment.duration_ms

    @property
    def end_offset_ms(self) -> int:
        return self.start_offset_ms + self.duration_ms


class Timeline(BaseModel):
    """Ordered, gap-free placement of all segments."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[TimelineEntry, ...] = Field(..., description="Entries in segment order")

    @property
    def total_duration_ms(self) -> int:
        if not self.entries:
            return 0
        return self.entries[-1].end_offset_ms

    @property
    def total_duration_seconds(self) -> float:
        return self.total_duration_ms / 1000

    @property
    def start_offsets_seconds(self) -> list[float]:
        return [entry.start_offset_ms / 1000 for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


# ============================================================================
# Render Plan Models
# ============================================================================


class VisualInput(BaseModel):
    """A still image shown for a fixed duration."""

    model_config = ConfigDict(frozen=True)

    image_path: Path
    duration_ms: int = Field(..., ge=0)


class AudioInput(BaseModel):
    """An audio clip to concatenate, or silence when path is None."""

    model_config = ConfigDict(frozen=True)

    path: Optional[Path] = Field(default=None, description="Audio file, None for generated silence")
    duration_ms: int = Field(..., ge=0, description="Slot length on the timeline")

    @classmethod
    def silence(cls, duration_ms: int) -> "AudioInput":
        return cls(path=None, duration_ms=duration_ms)

    @property
    def is_silence(self) -> bool:
        return self.path is None


class SegmentAssets(BaseModel):
    """Everything produced for one segment during asset generation."""

    model_config = ConfigDict(frozen=True)

    segment: Segment
    image: GeneratedAsset
    voiceover: GeneratedAsset
    cues: tuple[SubtitleCue, ...] = Field(..., description="Cues anchored at offset 0")


class RenderPlan(BaseModel):
    """Fully resolved description of the final video assembly. Never mutated."""

    model_config = ConfigDict(frozen=True)

    visual_inputs: tuple[VisualInput, ...]
    audio_inputs: tuple[AudioInput, ...]
    subtitle_track: tuple[SubtitleCue, ...]
    output_path: Path

    @property
    def total_duration_ms(self) -> int:
        return sum(visual.duration_ms for visual in self.visual_inputs)


# ============================================================================
# Job Models
# ============================================================================


class StoryFiles(BaseModel):
    """Names of the files written for a job, grouped by kind."""

    text: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    audio: list[str] = Field(default_factory=list)
    subtitles: list[str] = Field(default_factory=list)
    video: Optional[str] = Field(default=None)


class JobRecord(BaseModel):
    """Persisted manifest of one job (job.json)."""

    job_id: str = Field(..., description="Unique job identifier")
    source_url: str = Field(..., description="URL the story was built from")
    state: JobState = Field(default=JobState.CREATED, description="Current lifecycle state")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    summary: Optional[str] = Field(default=None, description="Full summary text")
    segments: list[Segment] = Field(default_factory=list)
    assets: list[GeneratedAsset] = Field(default_factory=list)
    degradations: list[str] = Field(default_factory=list, description="One entry per placeholder asset")
    timeline: Optional[Timeline] = Field(default=None)
    render_plan: Optional[RenderPlan] = Field(default=None)
    output_path: Optional[Path] = Field(default=None)
    files: StoryFiles = Field(default_factory=StoryFiles)
    error: Optional[str] = Field(default=None, description="Failure message when state is failed")

    @property
    def degraded(self) -> bool:
        return bool(self.degradations)


class JobResult(BaseModel):
    """Outcome of a completed job."""

    job_id: str
    summary: str
    output_path: Path
    files: StoryFiles
    degradations: list[str] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.degradations)


# ============================================================================
# API Request/Response Models
# ============================================================================


class CreateStoryResponse(BaseModel):
    """Response from story video generation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Job identifier")
    message: str = Field(default="Story video generated successfully!")
    summary: str = Field(..., description="Truncated summary")
    video_url: str = Field(..., alias="videoUrl", description="Public URL of the final video")
    files: StoryFiles
    degraded: bool = Field(default=False, description="True when any asset is a placeholder")
    degradations: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body returned for failed jobs."""

    error: str
