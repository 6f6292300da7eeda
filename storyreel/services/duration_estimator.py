"""Duration Estimator - converts segment text into an estimated spoken duration."""

import math
from typing import Any

from storyreel.core.config import Settings
from storyreel.utils.text_utils import count_words

MIN_DURATION_SECONDS = 1


class DurationEstimator:
    """Estimates narration length from word count at a fixed speaking rate."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the duration estimator.

        Args:
            settings: Application settings (uses words_per_minute)
            logger: Logger instance
        """
        if settings.words_per_minute <= 0:
            raise ValueError("words_per_minute must be positive")
        self.settings = settings
        self.logger = logger
        self.words_per_minute = settings.words_per_minute

    def estimate(self, text: str, clamp: bool = True) -> int:
        """
        Estimate the spoken duration of text in whole seconds.

        ``ceil(words / wpm * 60)``. Empty text estimates to 0; with
        ``clamp`` (the default, used by the pipeline since every segment
        always gets an audio slot) the result is at least 1 second.

        Args:
            text: Text to estimate
            clamp: Apply the 1 second minimum

        Returns:
            Estimated duration in seconds
        """
        word_count = count_words(text)
        seconds = math.ceil(word_count * 60 / self.words_per_minute)
        if clamp:
            seconds = max(MIN_DURATION_SECONDS, seconds)
        self.logger.debug(f"Estimated {seconds}s for {word_count} words at {self.words_per_minute} wpm")
        return seconds
