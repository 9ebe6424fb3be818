#!/usr/bin/env python3
"""Generate a synthetic clip for trying ClipTrim end to end.

Produces a 20-second 640x360 video: SMPTE bars with a burned-in running
timestamp and a 440 Hz tone, so trimmed output can be checked by eye.

    python scripts/generate_test_video.py /tmp/sample.mp4
    cliptrim trim /tmp/sample.mp4 00:00:05 00:00:10 --ratio 9:16
"""

import subprocess
import sys
from pathlib import Path


def generate_test_video(output: Path, duration: int = 20) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        "ffmpeg", "-y",
        "-f", "lavfi", "-i", f"smptebars=s=640x360:r=30:d={duration}",
        "-f", "lavfi", "-i", f"sine=f=440:d={duration}",
        "-vf", "drawtext=text='%{pts\\:hms}':fontsize=48:fontcolor=white:x=20:y=20",
        "-c:v", "libx264",
        "-c:a", "aac",
        "-shortest",
        str(output),
    ]
    subprocess.run(cmd, check=True)
    print(f"Generated: {output}")


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("sample.mp4")
    generate_test_video(out)
