"""CLI entrypoint for hacksubmit."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv
from openai import OpenAIError
from playwright.sync_api import Error as PlaywrightError

from .config import load_config
from .logging import configure_logging, get_logger
from .pipeline import SubmissionPipeline


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hacksubmit",
        description=(
            "Summarize a GitHub repository with an LLM and fill in its hackathon "
            "project submission form."
        ),
    )
    parser.add_argument("base_url", help="Base URL of the hackathon site, e.g. https://ethglobal.com")
    parser.add_argument("repo_url", help="GitHub repository to submit.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .hacksubmit.yml or the directory containing it (defaults to current directory).",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file.")
    parser.add_argument(
        "--headless",
        action="store_true",
        default=None,
        help="Run the browser without a window (disables inspection pauses).",
    )
    parser.add_argument(
        "--images",
        action="store_true",
        default=None,
        help="Generate images with the image API instead of using staged files.",
    )
    parser.add_argument(
        "--no-pause",
        dest="pause",
        action="store_false",
        default=None,
        help="Do not stop for manual inspection between form phases.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for hacksubmit."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    try:
        config = load_config(Path(args.config))
    except RuntimeError as exc:
        parser.exit(1, f"{exc}\n")

    if args.headless is not None:
        config.form.headless = args.headless
    if args.images is not None:
        config.images.enabled = args.images
    if args.pause is not None:
        config.form.pause = args.pause

    try:
        pipeline = SubmissionPipeline.from_config(config)
        result = pipeline.run(args.base_url, args.repo_url)
    except (RuntimeError, OpenAIError, PlaywrightError, requests.RequestException, OSError) as exc:
        logger.debug("Run failed", exc_info=True)
        parser.exit(1, f"hacksubmit failed: {exc}\nRun with --verbose for more details.\n")

    print(f"Submitted {result.content.project_name}")


if __name__ == "__main__":
    main(sys.argv[1:])
