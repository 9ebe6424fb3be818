"""Thin CLI entry point: parses arguments and calls the engine."""

import argparse
import sys
from pathlib import Path

from cliptrim.engine import ensure_ready, trim
from cliptrim.errors import ClipTrimError
from cliptrim.logging_utils import setup_logging
from cliptrim.settings import Settings, apply_env, load_settings


def _load(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config) if args.config else Settings()
    settings = apply_env(settings)
    if getattr(args, "output_dir", None):
        settings.output_dir = args.output_dir
    return settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="cliptrim",
        description="ClipTrim: trim local, linked or YouTube videos and save the clip locally.",
    )
    parser.add_argument("--config", "-c", type=Path, help="Path to a JSON settings file")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("check", help="Check that FFmpeg is installed and working")

    tr = sub.add_parser("trim", help="Trim a video")
    tr.add_argument("source", help="Local file, direct video URL, or YouTube URL")
    tr.add_argument("start", help="Start time (HH:MM:SS)")
    tr.add_argument("end", help="End time (HH:MM:SS)")
    tr.add_argument(
        "--ratio", "-r",
        choices=["Original", "16:9", "9:16", "1:1"],
        default="Original",
        help="Output aspect ratio",
    )
    tr.add_argument("--output-dir", "-o", type=Path, help="Directory for the trimmed file")

    serve = sub.add_parser("serve", help="Launch the web UI")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        settings = _load(args)
    except (OSError, ValueError) as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        sys.exit(1)
    setup_logging(settings.log_level)

    if args.command == "serve":
        from cliptrim.web import create_app
        app = create_app(settings=settings)
        print(f"ClipTrim web UI: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    if args.command == "check":
        try:
            ensure_ready(settings, on_status=print)
        except ClipTrimError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    def on_progress(stage: str, frac: float) -> None:
        print(f"  [{frac:3.0%}] {stage}")

    try:
        result = trim(
            args.source, args.start, args.end, args.ratio,
            settings=settings, on_progress=on_progress,
        )
    except ClipTrimError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print()
    print(result.message)
