"""Render Executor - assembles the final video from a RenderPlan with a single ffmpeg invocation."""

import subprocess
from pathlib import Path
from typing import Any, Optional

import imageio_ffmpeg

from storyreel.core.config import Settings
from storyreel.core.exceptions import RenderError
from storyreel.models.schemas import AudioInput, RenderPlan
from storyreel.services.subtitle_builder import SubtitleTrackBuilder
from storyreel.utils.error_handler import format_error_message, get_fallback_suggestion
from storyreel.utils.io_utils import write_text

COMBINED_SUBTITLES_NAME = "combined-subtitles.srt"


def escape_filter_value(value: str) -> str:
    """
    Escape a file name or style string for use inside a single-quoted filtergraph option.

    A quote cannot appear inside a quoted option value, so it is closed,
    emitted as an escaped literal for both the option and graph parsers,
    and reopened.
    """
    return value.replace("\\", "/").replace(":", "\\:").replace("'", "'\\\\\\''")


def _seconds(ms: int) -> str:
    return f"{ms / 1000:.3f}"


class FFmpegRenderExecutor:
    """
    Turns a RenderPlan into an MP4: images concatenated as the video track,
    voiceovers (or silence) concatenated as the audio track, and the merged
    subtitle track burned in.
    """

    def __init__(self, settings: Settings, logger: Any, subtitle_builder: Optional[SubtitleTrackBuilder] = None):
        """
        Initialize the render executor.

        Args:
            settings: Application settings
            logger: Logger instance
            subtitle_builder: Used to serialize the merged track (created if not given)
        """
        self.settings = settings
        self.logger = logger
        self.subtitle_builder = subtitle_builder or SubtitleTrackBuilder(settings, logger)

    def ffmpeg_binary(self) -> str:
        """Configured ffmpeg, or the one bundled with imageio-ffmpeg."""
        return self.settings.ffmpeg_binary or imageio_ffmpeg.get_ffmpeg_exe()

    def build_command(self, plan: RenderPlan, subtitle_name: Optional[str], output_path: Path) -> list[str]:
        """
        Build the ffmpeg argument list for ``plan``.

        Every image becomes a looped input trimmed to its slot; every
        audio slot is padded then trimmed to the same length, so the two
        tracks stay aligned segment by segment. Input and output paths are
        absolute; the subtitle file is named relative to the working
        directory ffmpeg runs in, so the job path never enters the graph.

        Args:
            plan: Render plan
            subtitle_name: SRT file name in ffmpeg's working directory, or None to skip subtitles
            output_path: File ffmpeg writes to

        Returns:
            Command as a list of arguments
        """
        self._validate(plan)

        width = self.settings.image_width
        height = self.settings.image_height
        fps = self.settings.video_fps
        sample_rate = self.settings.audio_sample_rate

        cmd = [self.ffmpeg_binary(), "-y", "-hide_banner", "-loglevel", "error"]
        for visual in plan.visual_inputs:
            cmd += [
                "-loop", "1",
                "-framerate", str(fps),
                "-t", _seconds(visual.duration_ms),
                "-i", str(Path(visual.image_path).resolve()),
            ]
        for audio in plan.audio_inputs:
            cmd += self._audio_input_args(audio)

        count = len(plan.visual_inputs)
        filters = []
        for i, visual in enumerate(plan.visual_inputs):
            filters.append(
                f"[{i}:v]scale={width}:{height}:force_original_aspect_ratio=decrease,"
                f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2,setsar=1,fps={fps},"
                f"trim=duration={_seconds(visual.duration_ms)},setpts=PTS-STARTPTS[v{i}]"
            )
        for i, audio in enumerate(plan.audio_inputs):
            duration = _seconds(audio.duration_ms)
            filters.append(
                f"[{count + i}:a]aresample={sample_rate},aformat=sample_fmts=fltp:channel_layouts=stereo,"
                f"apad=whole_dur={duration},atrim=0:{duration},asetpts=PTS-STARTPTS[a{i}]"
            )

        video_labels = "".join(f"[v{i}]" for i in range(count))
        audio_labels = "".join(f"[a{i}]" for i in range(count))
        if subtitle_name is not None:
            filters.append(f"{video_labels}concat=n={count}:v=1:a=0[vcat]")
            filters.append(
                f"[vcat]subtitles=filename='{escape_filter_value(subtitle_name)}'"
                f":force_style='{escape_filter_value(self.settings.subtitle_force_style)}'[outv]"
            )
        else:
            filters.append(f"{video_labels}concat=n={count}:v=1:a=0[outv]")
        filters.append(f"{audio_labels}concat=n={count}:v=0:a=1[outa]")

        cmd += [
            "-filter_complex", ";".join(filters),
            "-map", "[outv]",
            "-map", "[outa]",
            "-c:v", "libx264",
            "-pix_fmt", "yuv420p",
            "-r", str(fps),
            "-c:a", "aac",
            "-ar", str(sample_rate),
            "-movflags", "+faststart",
            "-t", _seconds(plan.total_duration_ms),
            str(Path(output_path).resolve()),
        ]
        return cmd

    def render(self, plan: RenderPlan) -> Path:
        """
        Render ``plan`` to ``plan.output_path``.

        The combined subtitle track is written next to the output as
        ``combined-subtitles.srt`` and ffmpeg runs inside the job directory.
        ffmpeg writes to a temporary file that
        only replaces the output once the process succeeds.

        Returns:
            Path to the final video

        Raises:
            RenderError: If the plan is unusable or ffmpeg fails
        """
        output_path = Path(plan.output_path)
        job_dir = output_path.parent
        job_dir.mkdir(parents=True, exist_ok=True)

        write_text(job_dir / COMBINED_SUBTITLES_NAME, self.subtitle_builder.to_srt(plan.subtitle_track))
        has_text = any(cue.text.strip() for cue in plan.subtitle_track)
        tmp_output = output_path.with_name(f"{output_path.stem}.tmp{output_path.suffix}")
        tmp_output.unlink(missing_ok=True)

        cmd = self.build_command(plan, COMBINED_SUBTITLES_NAME if has_text else None, tmp_output)
        self.logger.info(
            f"Rendering {len(plan.visual_inputs)} segments ({plan.total_duration_ms / 1000:.3f}s) to {output_path.name}"
        )
        self.logger.debug(f"ffmpeg command: {' '.join(cmd)}")

        try:
            subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                cwd=str(job_dir),
                timeout=self.settings.render_timeout_seconds,
            )
        except subprocess.CalledProcessError as e:
            stderr_tail = (e.stderr or "").strip()[-500:]
            self._log_failure(e, output_path)
            tmp_output.unlink(missing_ok=True)
            raise RenderError(f"ffmpeg exited with status {e.returncode}: {stderr_tail}") from e
        except subprocess.TimeoutExpired as e:
            self._log_failure(e, output_path)
            tmp_output.unlink(missing_ok=True)
            raise RenderError(f"ffmpeg timed out after {self.settings.render_timeout_seconds}s") from e
        except OSError as e:
            self._log_failure(e, output_path)
            raise RenderError(f"Could not run ffmpeg: {e}") from e

        if not tmp_output.exists() or tmp_output.stat().st_size == 0:
            raise RenderError("ffmpeg finished but produced no output")
        tmp_output.replace(output_path)

        self.logger.info(f"✅ Video rendered: {output_path}")
        return output_path

    def _validate(self, plan: RenderPlan) -> None:
        if not plan.visual_inputs:
            raise RenderError("Render plan has no visual inputs")
        if len(plan.visual_inputs) != len(plan.audio_inputs):
            raise RenderError(
                f"Render plan has {len(plan.visual_inputs)} visual inputs but {len(plan.audio_inputs)} audio inputs"
            )
        for visual, audio in zip(plan.visual_inputs, plan.audio_inputs):
            if visual.duration_ms <= 0 or visual.duration_ms != audio.duration_ms:
                raise RenderError(
                    f"Invalid slot durations: visual {visual.duration_ms}ms, audio {audio.duration_ms}ms"
                )

    def _audio_input_args(self, audio: AudioInput) -> list[str]:
        if audio.is_silence:
            return [
                "-f", "lavfi",
                "-t", _seconds(audio.duration_ms),
                "-i", f"anullsrc=r={self.settings.audio_sample_rate}:cl=stereo",
            ]
        return ["-i", str(Path(audio.path).resolve())]

    def _log_failure(self, error: Exception, output_path: Path) -> None:
        self.logger.error(
            format_error_message(
                "Rendering final video",
                error,
                context={"output": str(output_path)},
                suggestion=get_fallback_suggestion("Render", error),
            )
        )
