#!/usr/bin/env python3
"""
Gemini token calculator - command line entry point.

Estimates the input tokens a set of files would consume for a Gemini model
generation and prints a per-file table with the categorized breakdown.

Usage:
    gemini-token-calculator notes.md diagram.png clip.mp4
    gemini-token-calculator --model gemini-2.5 --json report.pdf
    gemini-token-calculator --resolution high --fps 2 *.png demo.mov
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from calculator.configuration import CalculatorConfiguration
from calculator.session import TokenCalculatorSession
from calculator.shared import BreakdownBucket, ModelVersion, RawInput, ResolutionTier
from utils.gemini_validators import GeminiValidationError

logger = logging.getLogger("gemini_token_calculator")

EXIT_OK = 0
EXIT_USAGE = 2

_BUCKET_LABELS = {
    BreakdownBucket.TEXT: "Text & Code",
    BreakdownBucket.IMAGES: "Images & PDF",
    BreakdownBucket.VIDEO: "Video",
    BreakdownBucket.AUDIO: "Audio",
    BreakdownBucket.OVERHEAD: "Overhead",
}


# =============================================================================
# Argument Parsing
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gemini-token-calculator",
        description="Estimate Gemini input tokens for text, code, images, video, audio and PDF files.",
    )
    parser.add_argument("paths", nargs="+", metavar="PATH", help="Files to estimate")
    parser.add_argument(
        "--model",
        help=f"Model generation ({', '.join(v.value for v in ModelVersion)}); default from GEMINI_MODEL_VERSION",
    )
    parser.add_argument(
        "--resolution",
        help=(
            f"Default image/PDF resolution tier for Gemini 3.0 ({', '.join(t.value for t in ResolutionTier)}); "
            "default from GEMINI_MEDIA_RESOLUTION"
        ),
    )
    parser.add_argument("--fps", help="Video frame sampling rate for Gemini 3.0; default from GEMINI_VIDEO_FPS")
    parser.add_argument("--context-window", type=int, help="Context window size for the usage percentage")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR; default from TOKEN_CALCULATOR_LOG_LEVEL")
    return parser


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(level)
    for logger_name in ["calculator", "utils"]:
        logging.getLogger(logger_name).setLevel(level)


def resolve_configuration(args: argparse.Namespace) -> CalculatorConfiguration:
    """Environment defaults overridden by whichever flags were given."""
    configuration = CalculatorConfiguration.from_env()
    changes = {}
    if args.model is not None:
        changes["model_version"] = args.model
    if args.resolution is not None:
        changes["default_resolution_tier"] = args.resolution
    if args.fps is not None:
        changes["video_fps"] = args.fps
    return configuration.with_changes(**changes) if changes else configuration


# =============================================================================
# Rendering
# =============================================================================


def build_report(session: TokenCalculatorSession, context_window: int) -> dict:
    breakdown = session.breakdown
    return {
        "configuration": session.configuration.to_dict(),
        "items": [
            {
                "name": item.name,
                "category": item.category.value,
                "size": item.size,
                "state": item.state.value,
                "tokens": session.item_tokens(item.id),
                **({"error": item.error} if item.error else {}),
            }
            for item in session.items
        ],
        **breakdown.to_dict(),
        "context_window": context_window,
        "context_usage_percent": round(breakdown.context_usage_percent(context_window), 2),
    }


def format_context_window(tokens: int) -> str:
    """128000 -> "128k"; sizes that are not whole thousands keep every digit."""
    if tokens >= 1000 and tokens % 1000 == 0:
        return f"{tokens // 1000}k"
    return f"{tokens:,}"


def render_table(report: dict) -> str:
    configuration = report["configuration"]
    lines = [
        f"Model: {configuration['model_version']}  "
        f"Resolution: {configuration['default_resolution_tier']}  "
        f"Video FPS: {configuration['video_fps']:g}",
        "",
    ]

    name_width = max([len("File")] + [len(item["name"]) for item in report["items"]])
    lines.append(f"{'File':<{name_width}}  {'Category':<8}  {'State':<7}  {'Tokens':>10}")
    for item in report["items"]:
        lines.append(
            f"{item['name']:<{name_width}}  {item['category']:<8}  {item['state']:<7}  {item['tokens']:>10,}"
        )
        if "error" in item:
            lines.append(f"    ! {item['error']}")

    lines.append("")
    for bucket, label in _BUCKET_LABELS.items():
        value = report["breakdown"][bucket.value]
        # Empty buckets are hidden, like the breakdown panel
        if value:
            lines.append(f"{label:<14}{value:>12,}")

    lines.append(f"{'Total':<14}{report['total']:>12,}")
    lines.append(
        f"≈ {report['context_usage_percent']:.2f}% of {format_context_window(report['context_window'])} context"
    )
    return "\n".join(lines)


# =============================================================================
# Entry Point
# =============================================================================


async def run(paths: list[str], configuration: CalculatorConfiguration) -> TokenCalculatorSession:
    session = TokenCalculatorSession(configuration=configuration)
    await session.add_files(RawInput.from_path(path) for path in paths)
    return session


def main(argv: Optional[list[str]] = None) -> int:
    from config import CONTEXT_WINDOW_TOKENS, LOG_LEVEL

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level or LOG_LEVEL)

    try:
        configuration = resolve_configuration(args)
    except GeminiValidationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    context_window = args.context_window if args.context_window is not None else CONTEXT_WINDOW_TOKENS
    if context_window <= 0:
        print(f"error: context window must be positive, got {context_window}", file=sys.stderr)
        return EXIT_USAGE

    session = asyncio.run(run(args.paths, configuration))
    report = build_report(session, context_window)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(render_table(report))

    failed = [item["name"] for item in report["items"] if item["state"] == "failed"]
    if failed:
        logger.info(f"{len(failed)} file(s) could not be read: {', '.join(failed)}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
