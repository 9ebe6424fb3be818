"""Runtime settings: tool locations, output directory and download tuning."""

import json
import os
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path


@dataclass
class Settings:
    """Configuration for one trim invocation."""

    output_dir: Path | None = None
    ffmpeg_bin: str = "ffmpeg"
    ytdlp_bin: str = "yt-dlp"
    ytdlp_format: str = "best[ext=mp4]/best"
    concurrent_fragments: int = 4
    chunk_size: int = 64 * 1024
    log_level: str = "INFO"


_ENV_OVERRIDES = {
    "CLIPTRIM_OUTPUT_DIR": "output_dir",
    "CLIPTRIM_FFMPEG": "ffmpeg_bin",
    "CLIPTRIM_YTDLP": "ytdlp_bin",
    "LOG_LEVEL": "log_level",
}


def default_downloads_dir() -> Path:
    """Return the user's Downloads folder, or the current directory if unknown."""
    var = "USERPROFILE" if sys.platform == "win32" else "HOME"
    home = os.environ.get(var)
    if not home:
        return Path(".")
    return Path(home) / "Downloads"


def resolve_output_dir(settings: Settings) -> Path:
    """Return the directory outputs go to, creating it if needed."""
    output_dir = settings.output_dir or default_downloads_dir()
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def apply_env(settings: Settings, environ: dict[str, str] | None = None) -> Settings:
    """Return a copy of *settings* with ``CLIPTRIM_*`` environment overrides applied."""
    environ = os.environ if environ is None else environ
    changes: dict = {}
    for var, name in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            changes[name] = Path(value).expanduser() if name == "output_dir" else value
    return replace(settings, **changes)


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON file. Missing keys keep their defaults."""
    path = Path(path)
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError("Settings file must contain a JSON object")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")

    if data.get("output_dir") is not None:
        data["output_dir"] = Path(data["output_dir"]).expanduser()
    for key in ("concurrent_fragments", "chunk_size"):
        if key in data:
            data[key] = int(data[key])
            if data[key] < 1:
                raise ValueError(f"{key} must be a positive integer")
    return Settings(**data)
