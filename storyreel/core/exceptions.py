"""Error taxonomy for the story pipeline."""

from typing import Optional


class StoryPipelineError(Exception):
    """Base class for all pipeline errors; the message is shown to API callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamError(StoryPipelineError):
    """Summarization provider unavailable. Fatal."""


class InvalidInput(StoryPipelineError):
    """Empty or unusable input. Fatal."""


class IncompleteTimeline(StoryPipelineError):
    """Segments, assets and timeline entries disagree. Fatal, indicates a synchronization bug."""


class RenderError(StoryPipelineError):
    """Final assembly failed. Fatal, never retried."""


class AssetGenerationDegraded(StoryPipelineError):
    """
    An image or voice provider failed and a placeholder was used instead.

    Never raised out of the fallback policy; it is recorded as the
    placeholder's reason and in the job's degradation list.
    """

    def __init__(self, kind: str, segment_index: int, cause: Optional[BaseException] = None):
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown failure"
        super().__init__(f"{kind} for segment {segment_index} degraded to placeholder ({detail})")
        self.kind = kind
        self.segment_index = segment_index
        self.cause = cause
