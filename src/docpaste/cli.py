"""Command-line interface for docpaste.

Provides the main entry point for serving the overlay endpoint, running
a one-off rewrite against a saved screenshot, or exercising individual
components (OCR, intent classification, sanitization) for testing.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="docpaste",
        description="Rewrite the visible document and paste the result back",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/docpaste.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    edit_parser = subparsers.add_parser("edit", help="Rewrite a document from a saved screenshot")
    edit_parser.add_argument("--image", type=Path, required=True, help="PNG screenshot of the document")
    edit_parser.add_argument("--instruction", type=str, required=True, help="Edit instruction")
    edit_parser.add_argument(
        "--category", choices=["grammar", "synthesis", "polish"], default=None,
        help="Skip classification and force an edit category",
    )

    ocr_parser = subparsers.add_parser("ocr", help="Print the filtered OCR transcript of a screenshot")
    ocr_parser.add_argument("--image", type=Path, required=True, help="Screenshot to read")
    ocr_parser.add_argument("--raw", action="store_true", help="Print unfiltered OCR text")

    classify_parser = subparsers.add_parser("classify", help="Classify an instruction")
    classify_parser.add_argument("text", type=str, help="Instruction text")

    sanitize_parser = subparsers.add_parser("sanitize", help="Sanitize text for pasting")
    sanitize_parser.add_argument(
        "file", type=Path, nargs="?", default=None,
        help="File to sanitize (default: stdin)",
    )

    subparsers.add_parser("serve", help="Start the HTTP endpoint for the overlay UI")

    return parser.parse_args(argv)


def _load_frame(path: Path):
    from docpaste.domain.models import CaptureFrame

    return CaptureFrame(image_bytes=path.read_bytes(), source_id=str(path))


async def _run_edit(settings, args) -> int:
    """Run the full pipeline against a screenshot file."""
    from docpaste.domain.models import EditCategory
    from docpaste.endpoint.server import result_message
    from docpaste.pipeline.builder import build_orchestrator

    orchestrator = build_orchestrator(settings)
    category = EditCategory(args.category.capitalize()) if args.category else None
    result = await orchestrator.run(_load_frame(args.image), args.instruction, category=category)

    print(json.dumps(result.to_payload(), indent=2))
    print(result_message(result))
    return 0 if result.success else 1


def _run_ocr(settings, args) -> int:
    from docpaste.pipeline.builder import build_extractor

    transcript = build_extractor(settings).extract(_load_frame(args.image))
    print(transcript.full_text if args.raw else transcript.filtered_text)
    return 0


def _run_classify(args) -> int:
    from docpaste.intent.classifier import IntentClassifier

    category = IntentClassifier().classify(args.text)
    print(category.value if category else "not an edit request")
    return 0 if category else 1


def _run_sanitize(args) -> int:
    from docpaste.text.sanitizer import sanitize

    text = args.file.read_text(encoding="utf-8") if args.file else sys.stdin.read()
    print(sanitize(text))
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the docpaste CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    # Offline commands need no configuration
    if args.command == "classify":
        sys.exit(_run_classify(args))
    if args.command == "sanitize":
        sys.exit(_run_sanitize(args))

    from docpaste.config.settings import load_settings
    from docpaste.ocr.base import ExtractionError
    from docpaste.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "edit":
        logger.info("Running document rewrite: %s", args.instruction)
        sys.exit(asyncio.run(_run_edit(settings, args)))

    elif args.command == "ocr":
        try:
            sys.exit(_run_ocr(settings, args))
        except ExtractionError as e:
            print(f"OCR failed: {e}", file=sys.stderr)
            sys.exit(1)

    elif args.command == "serve":
        logger.info("Starting endpoint server")
        from docpaste.endpoint.server import create_app
        import uvicorn
        ep = settings.endpoint
        uvicorn.run(create_app(settings=settings), host=ep.host, port=ep.port)


if __name__ == "__main__":
    main()
