"""Error Handler - provides operator-friendly error messages for degraded stages."""

from typing import Optional


def format_error_message(
    operation: str,
    error: Exception,
    context: Optional[dict] = None,
    suggestion: Optional[str] = None,
) -> str:
    """
    Format an operator-friendly error message.

    Args:
        operation: What operation was being performed (e.g., "Generating image")
        error: The exception that occurred
        context: Additional context (e.g., {"job_id": "a1b2c3", "segment": 2})
        suggestion: Optional suggestion for how to fix the issue

    Returns:
        Formatted error message
    """
    error_type = type(error).__name__
    error_msg = str(error)

    context_str = ""
    if context:
        context_parts = [f"{k}={v}" for k, v in context.items()]
        context_str = f" ({', '.join(context_parts)})"

    message = f"❌ {operation} failed{context_str}\n"
    message += f"   Error: {error_type}: {error_msg}"

    if suggestion:
        message += f"\n   💡 Suggestion: {suggestion}"

    return message


def get_fallback_suggestion(service: str, error: Exception) -> Optional[str]:
    """
    Get a suggestion for how to handle a service failure.

    Args:
        service: Service name ("Voiceover", "Image Generation", "Summarization", "Render")
        error: The exception

    Returns:
        Suggestion string or None
    """
    error_msg = str(error).lower()

    if service == "Voiceover":
        if "api key" in error_msg or "not configured" in error_msg:
            return "Set ELEVENLABS_API_KEY (or OPENAI_API_KEY) in .env. Segment will be silent with text placeholder."
        elif "rate limit" in error_msg or "429" in error_msg:
            return "Rate limit exceeded. Segment will be silent; try again in a few minutes."
        elif "timeout" in error_msg or "timed out" in error_msg:
            return "TTS request timed out. Raise VOICE_TIMEOUT_SECONDS if this keeps happening."
        else:
            return "Voiceover generation failed. Segment will be silent with text placeholder."

    elif service == "Image Generation":
        if "rate limit" in error_msg or "429" in error_msg:
            return "Rate limit exceeded. Using 1x1 placeholder image."
        elif "timeout" in error_msg or "timed out" in error_msg:
            return "Image endpoint timed out. Raise IMAGE_TIMEOUT_SECONDS if this keeps happening."
        elif "cannot identify image" in error_msg or "not an image" in error_msg:
            return "Endpoint returned something other than an image. Using 1x1 placeholder image."
        else:
            return "Image generation failed. Using 1x1 placeholder image."

    elif service == "Summarization":
        if "api key" in error_msg or "not configured" in error_msg or "401" in error_msg:
            return "Check PERPLEXITY_API_KEY in .env file."
        elif "rate limit" in error_msg or "429" in error_msg:
            return "Perplexity rate limit exceeded. Wait a few minutes and try again."
        else:
            return "Summarization failed; no story can be built without a summary."

    elif service == "Render":
        if "no such file" in error_msg or "not found" in error_msg:
            return "ffmpeg binary not found. Install ffmpeg or set FFMPEG_BINARY."
        elif "timeout" in error_msg or "timed out" in error_msg:
            return "Render exceeded RENDER_TIMEOUT_SECONDS."
        else:
            return "Check the ffmpeg stderr excerpt in the log."

    return None
