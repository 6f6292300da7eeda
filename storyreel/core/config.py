"""Application configuration using pydantic-settings."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via environment variables or a .env file.
    Services receive an instance at construction time and never read the
    environment themselves.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # Application Settings
    # ========================================================================
    app_name: str = Field(default="StoryReel", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    # ========================================================================
    # Server Settings
    # ========================================================================
    host: str = Field(default="0.0.0.0", description="Bind host for the HTTP server")
    port: int = Field(default=8080, description="Bind port for the HTTP server")
    public_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL used to build the returned video link",
    )

    # ========================================================================
    # Storage Settings
    # ========================================================================
    stories_dir: str = Field(default="stories", description="Directory holding one sub-directory per job")

    # ========================================================================
    # Summarization (Perplexity, OpenAI-compatible API)
    # ========================================================================
    perplexity_api_key: Optional[str] = Field(default=None, description="Perplexity API key")
    perplexity_base_url: str = Field(default="https://api.perplexity.ai", description="Perplexity API base URL")
    perplexity_model: str = Field(default="sonar-pro", description="Perplexity model name")
    summary_word_target: int = Field(default=100, description="Requested summary length in words")

    # ========================================================================
    # Image Generation Settings
    # ========================================================================
    image_api_url: str = Field(
        default="https://image.pollinations.ai/prompt",
        description="Prompt-in-path image generation endpoint",
    )
    image_width: int = Field(default=1280, description="Requested image width in pixels")
    image_height: int = Field(default=720, description="Requested image height in pixels")
    image_prompt_prefix: str = Field(
        default="Cinematic, photorealistic scene: ",
        description="Prefix prepended to every image prompt",
    )
    image_prompt_max_chars: int = Field(
        default=80, description="Number of segment characters used in the image prompt"
    )

    # ========================================================================
    # TTS (Text-to-Speech) Settings
    # ========================================================================
    elevenlabs_api_key: Optional[str] = Field(default=None, description="ElevenLabs API key")
    elevenlabs_voice_id: str = Field(default="EXAVITQu4vr4xnSDxMaL", description="ElevenLabs voice ID")
    elevenlabs_model_id: str = Field(default="eleven_monolingual_v1", description="ElevenLabs model ID")
    elevenlabs_stability: float = Field(default=0.5, description="ElevenLabs voice stability")
    elevenlabs_similarity_boost: float = Field(default=0.5, description="ElevenLabs similarity boost")
    openai_api_key: Optional[str] = Field(
        default=None, description="OpenAI API key (secondary TTS provider)"
    )
    openai_tts_model: str = Field(default="tts-1", description="OpenAI TTS model")
    openai_tts_voice: str = Field(default="alloy", description="OpenAI TTS voice")

    # ========================================================================
    # Story Assembly Settings
    # ========================================================================
    words_per_minute: int = Field(default=150, description="Speaking rate used to estimate segment durations")
    segment_count: int = Field(default=3, description="Number of narrative segments per story")
    subtitle_max_words_per_cue: int = Field(
        default=0,
        description="Split each segment's subtitle into cues of at most this many words (0 = one cue per segment)",
    )
    summary_preview_chars: int = Field(default=100, description="Characters of the summary echoed in responses")

    # ========================================================================
    # Timeouts (seconds)
    # ========================================================================
    summarize_timeout_seconds: float = Field(default=60.0, description="Summarization request timeout")
    image_timeout_seconds: float = Field(default=90.0, description="Image generation request timeout")
    voice_timeout_seconds: float = Field(default=60.0, description="TTS request timeout")
    render_timeout_seconds: float = Field(default=600.0, description="ffmpeg render timeout")

    # ========================================================================
    # Parallelism Settings
    # ========================================================================
    max_parallel_api_calls: int = Field(
        default=6,
        description="Maximum number of concurrent provider calls within one job (set to 1 for sequential)",
    )

    # ========================================================================
    # Video Rendering
    # ========================================================================
    ffmpeg_binary: Optional[str] = Field(
        default=None,
        description="Path to ffmpeg; defaults to the binary shipped with imageio-ffmpeg",
    )
    video_fps: int = Field(default=25, description="Output frame rate")
    audio_sample_rate: int = Field(default=44100, description="Output audio sample rate")
    subtitle_force_style: str = Field(
        default=(
            "Fontsize=18,PrimaryColour=&HFFFFFF,OutlineColour=&H000000,"
            "Outline=2,Shadow=1,Alignment=2,MarginV=40"
        ),
        description="ASS force_style applied when burning in subtitles",
    )


# Global settings instance (entry points only)
settings = Settings()
