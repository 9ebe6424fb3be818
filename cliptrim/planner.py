"""Builds the ffmpeg argument list for a trim."""

from pathlib import Path

from cliptrim.errors import UnsupportedRatio
from cliptrim.models import FRAME_SIZES, AspectRatio, TimeRange, TranscodePlan

FASTSTART = ("-movflags", "+faststart")


def parse_ratio(value: str | AspectRatio) -> AspectRatio:
    """Validate an aspect ratio string such as ``"16:9"`` or ``"Original"``."""
    if isinstance(value, AspectRatio):
        return value
    try:
        return AspectRatio(value.strip())
    except (ValueError, AttributeError):
        raise UnsupportedRatio(f"Unsupported ratio: {value}") from None


def reformat_args(ratio: AspectRatio) -> list[str]:
    """Scale into the target frame keeping the source shape, pad the rest, re-encode fast."""
    width, height = FRAME_SIZES[ratio]
    return [
        "-vf",
        f"scale={width}:{height}:force_original_aspect_ratio=decrease,"
        f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2",
        "-c:v", "libx264",
        "-preset", "ultrafast",
        "-crf", "28",
        "-c:a", "aac",
        "-b:a", "128k",
        *FASTSTART,
    ]


def build_plan(
    input_path: Path,
    already_trimmed: bool,
    time_range: TimeRange,
    ratio: str | AspectRatio,
    output_path: Path,
) -> TranscodePlan:
    """Choose between stream copy and re-encode, trimming only when needed.

    A segment downloaded by yt-dlp is already bounded to the requested range,
    so no ``-ss``/``-to`` is added for it.
    """
    ratio = parse_ratio(ratio)

    args: list[str] = ["-y", "-i", str(input_path)]

    if not already_trimmed:
        args += [
            "-ss", time_range.start_text or str(time_range.start),
            "-to", time_range.end_text or str(time_range.end),
        ]

    if ratio is AspectRatio.ORIGINAL:
        args += ["-c", "copy"]
        if not already_trimmed:
            args += ["-avoid_negative_ts", "make_zero"]
        args += FASTSTART
    else:
        args += reformat_args(ratio)

    args.append(str(output_path))
    return TranscodePlan(args=tuple(args), input_path=input_path, output_path=output_path)
