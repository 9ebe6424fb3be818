"""FFmpeg subprocess helpers: spawning, event parsing and run classification."""

import re
import subprocess
from pathlib import Path
from typing import Callable, Iterator

from cliptrim.errors import EngineFailed, EngineIncomplete, EngineSpawnFailed
from cliptrim.logging_utils import get_logger
from cliptrim.models import Done, EngineEvent, Error, Other, Progress, TranscodePlan

log = get_logger(__name__)

# Prepended to every invocation. ``level+`` tags each log line with its
# severity so errors can be told apart from informational output.
BASE_ARGS = ["-hide_banner", "-nostdin", "-loglevel", "level+info"]

# A 0.1s generated source rendered to the null muxer; needs no media on disk.
PROBE_ARGS = ["-f", "lavfi", "-i", "nullsrc=d=0.1", "-t", "0.1", "-f", "null", "-"]

_LEVEL_RE = re.compile(r"\[(panic|fatal|error|warning|info|verbose|debug|trace)\]\s*")
_ERROR_LEVELS = {"panic", "fatal", "error"}
_TIME_RE = re.compile(r"time=\s*(\d+):(\d+):([\d.]+)")


def parse_event_line(line: str) -> EngineEvent | None:
    """Classify one line of ffmpeg stderr. Blank lines give None."""
    line = line.strip()
    if not line:
        return None

    m = _LEVEL_RE.search(line)
    if m and m.group(1) in _ERROR_LEVELS:
        message = (line[:m.start()] + line[m.end():]).strip()
        return Error(message=message)

    if "time=" in line and "speed=" in line:
        tm = _TIME_RE.search(line)
        if tm:
            h, mnt, s = tm.groups()
            return Progress(time=int(h) * 3600 + int(mnt) * 60 + float(s), line=line)
        # time=N/A before the first frame is written
        return Progress(time=0.0, line=line)

    return Other(line=line)


def spawn(args: list[str], ffmpeg_bin: str = "ffmpeg") -> subprocess.Popen:
    """Start ffmpeg with *args*, stderr piped as text."""
    cmd = [ffmpeg_bin, *BASE_ARGS, *args]
    log.debug("Running: %s", " ".join(cmd))
    try:
        return subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise EngineSpawnFailed(
            f"FFmpeg is not installed or failed to spawn: {e}. "
            "Please ensure it's in your PATH."
        ) from e


def iter_events(proc: subprocess.Popen) -> Iterator[EngineEvent]:
    """Yield events from a running ffmpeg process until it exits.

    Progress lines end in ``\\r``; text mode splits on those too. ``Done`` is
    yielded last, and only when the exit status is zero.
    """
    try:
        for line in proc.stderr:
            event = parse_event_line(line)
            if event is not None:
                yield event
        returncode = proc.wait()
        log.debug("ffmpeg exited with status %s", returncode)
        if returncode == 0:
            yield Done()
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        if proc.stderr:
            proc.stderr.close()


def run_plan(
    plan: TranscodePlan,
    ffmpeg_bin: str = "ffmpeg",
    on_progress: Callable[[float], None] | None = None,
) -> Path:
    """Execute *plan* and return the output path.

    Error events are collected rather than treated as fatal; the run counts
    as successful when ffmpeg finished and the output file exists.
    """
    proc = spawn(list(plan.args), ffmpeg_bin=ffmpeg_bin)

    done = False
    errors: list[str] = []
    for event in iter_events(proc):
        if isinstance(event, Done):
            done = True
            break
        if isinstance(event, Error):
            log.warning("ffmpeg: %s", event.message)
            errors.append(event.message)
        elif isinstance(event, Progress) and on_progress:
            on_progress(event.time)

    # The output name is reserved as an empty file, so require content.
    if done and plan.output_path.exists() and plan.output_path.stat().st_size > 0:
        return plan.output_path
    if errors:
        raise EngineFailed(errors)
    raise EngineIncomplete(
        "FFmpeg failed to create the output file or did not finish successfully."
    )


def check_ffmpeg(ffmpeg_bin: str = "ffmpeg") -> bool:
    """Run ffmpeg against a synthetic source; True when it completes cleanly.

    Raises EngineSpawnFailed when the binary cannot be started at all.
    """
    proc = spawn(PROBE_ARGS, ffmpeg_bin=ffmpeg_bin)
    return any(isinstance(event, Done) for event in iter_events(proc))
