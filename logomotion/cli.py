"""Command-line entry points: run the studio server, or design a logo from the terminal."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import uvicorn

from logomotion.config import (
    BILLING_DOCS_URL,
    GEMINI_API_KEY,
    KEY_NOT_CONNECTED_MESSAGE,
    SERVER_HOST,
    SERVER_PORT,
)
from logomotion.errors import LogoMotionError
from logomotion.key_gate import ApiKeyGate, TerminalKeyHost
from logomotion.models import ImageSize, VideoAspectRatio
from logomotion.workspace import LogoWorkspace


def serve(host: str, port: int) -> None:
    print()
    print("  LogoMotion Studio - Logo Generator and Animator")
    print("  ===============================================")
    if not GEMINI_API_KEY:
        print("  No GEMINI_API_KEY set: connect a key from the page.")
        print(f"  Billing help: {BILLING_DOCS_URL}")
    print()
    print(f"  Open http://localhost:{port} in your browser")
    print()

    uvicorn.run("logomotion.app:app", host=host, port=port)


async def create(args, host=None) -> int:
    """Generate (and optionally animate) one logo, saving the results to ``args.out``."""
    gate = ApiKeyGate(host if host is not None else TerminalKeyHost())
    if not await gate.verify() and not await gate.connect():
        print(f"❌ {KEY_NOT_CONNECTED_MESSAGE}")
        return 1

    workspace = LogoWorkspace.from_api_key(gate.selected_api_key)
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    print(f"🎨 Generating logo ({args.size.value})...")
    image = await workspace.generate_logo(args.prompt, args.size)
    if image is None:
        print(f"❌ {workspace.image_error or 'Describe the logo first.'}")
        return 1

    logo_path = out_dir / image.filename
    logo_path.write_bytes(image.data)
    print(f"✅ Logo saved: {logo_path}")

    if not args.animate:
        return 0

    print(f"🎬 Animating logo ({args.aspect_ratio.label}), this can take a few minutes...")
    video = await workspace.animate_logo(args.motion, args.aspect_ratio)
    if video is None:
        print(f"❌ {workspace.video_error}")
        return 1

    try:
        content = await workspace.animator.download_video(video.uri)
    except LogoMotionError as e:
        print(f"❌ Could not download the animation: {e}")
        return 1

    video_path = out_dir / video.filename
    video_path.write_bytes(content)
    print(f"✅ Animation saved: {video_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logomotion",
        description="LogoMotion Studio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  python -m logomotion serve                              # Start the studio page
  python -m logomotion create "minimalist fox head"       # Logo only
  python -m logomotion create "fox head" --animate --aspect-ratio 9:16
""",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve_parser = commands.add_parser("serve", help="Run the studio web server")
    serve_parser.add_argument("--host", default=SERVER_HOST)
    serve_parser.add_argument("--port", type=int, default=SERVER_PORT)

    create_parser = commands.add_parser("create", help="Generate a logo from the terminal")
    create_parser.add_argument("prompt", help="Logo description")
    create_parser.add_argument(
        "--size",
        type=ImageSize.parse,
        default=ImageSize.LOW,
        help="Resolution: low, medium, high (or 1K, 2K, 4K)",
    )
    create_parser.add_argument("--animate", action="store_true", help="Also animate the logo")
    create_parser.add_argument("--motion", default="", help="Motion style for the animation")
    create_parser.add_argument(
        "--aspect-ratio",
        type=VideoAspectRatio.parse,
        default=VideoAspectRatio.LANDSCAPE,
        help="16:9 or 9:16",
    )
    create_parser.add_argument("--out", default=".", help="Output directory")
    return parser


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        serve(args.host, args.port)
        return 0
    return asyncio.run(create(args))


if __name__ == "__main__":
    sys.exit(main())
