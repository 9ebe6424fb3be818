"""Time-range downloads from streaming platforms via yt-dlp.

Only the requested interval is fetched, so download time and disk usage
scale with the clip length rather than the length of the source video.
"""

import subprocess
from pathlib import Path

from cliptrim.errors import ExternalToolFailed, ExternalToolMissing, OutputMissing
from cliptrim.logging_utils import get_logger
from cliptrim.timecode import format_seconds

log = get_logger(__name__)

SEGMENT_FILENAME = "video.mp4"


def section_expression(start: float, end: float) -> str:
    """Build a yt-dlp ``--download-sections`` time range, e.g. ``*5-10``."""
    return f"*{format_seconds(start)}-{format_seconds(end)}"


def build_ytdlp_command(
    url: str,
    output_path: Path,
    start: float,
    end: float,
    ytdlp_bin: str = "yt-dlp",
    format_selector: str = "best[ext=mp4]/best",
    concurrent_fragments: int = 4,
) -> list[str]:
    return [
        ytdlp_bin,
        "-f", format_selector,
        "--download-sections", section_expression(start, end),
        "--force-keyframes-at-cuts",
        "--concurrent-fragments", str(concurrent_fragments),
        "--no-mtime",
        "-o", str(output_path),
        url,
    ]


def download_segment(
    url: str,
    output_dir: Path,
    start: float,
    end: float,
    ytdlp_bin: str = "yt-dlp",
    format_selector: str = "best[ext=mp4]/best",
    concurrent_fragments: int = 4,
) -> Path:
    """Fetch only ``[start, end)`` of *url* into *output_dir* and return the file."""
    output_path = output_dir / SEGMENT_FILENAME
    sections = section_expression(start, end)
    cmd = build_ytdlp_command(
        url,
        output_path,
        start,
        end,
        ytdlp_bin=ytdlp_bin,
        format_selector=format_selector,
        concurrent_fragments=concurrent_fragments,
    )
    log.info("Downloading segment %s of %s", sections, url)
    log.debug("Running: %s", " ".join(cmd))

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        raise ExternalToolMissing(
            f"{ytdlp_bin} command not found. Please install yt-dlp and ensure "
            "it is in your system's PATH."
        ) from None
    except OSError as e:
        raise ExternalToolFailed(f"Failed to execute {ytdlp_bin}: {e}") from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        detail = f": {stderr[-500:]}" if stderr else ""
        raise ExternalToolFailed(
            f"yt-dlp failed to download the video segment (exit code "
            f"{result.returncode}). The URL might be invalid, private, or "
            f"require a login{detail}"
        )

    if not output_path.exists():
        raise OutputMissing("yt-dlp ran, but the expected output file was not found.")
    return output_path
