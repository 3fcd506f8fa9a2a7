"""Command-line front end: generate one document and print or save it."""
from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from techdocs_generator.client.gemini import GeminiClient
from techdocs_generator.common.config import load_settings
from techdocs_generator.common.errors import ConfigError
from techdocs_generator.common.logging_setup import setup_logging
from techdocs_generator.common.schema import DOWNLOAD_FILENAME, SessionStatus, TemplateId, Tone
from techdocs_generator.common.templates import list_templates
from techdocs_generator.session.controller import SessionController

LOGGER = logging.getLogger("techdocs.cli")

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Generate technical documentation with Gemini")
    ap.add_argument("--config", default=None, help="YAML config path")
    ap.add_argument("--list-templates", action="store_true", help="List templates and exit")
    ap.add_argument("--template", choices=[t.value for t in TemplateId], help="Template id")
    ap.add_argument("--tone", choices=[t.value for t in Tone])
    ap.add_argument("--language", help="Programming language context")
    ap.add_argument("--max-length", type=int, help="Approximate length in words")
    src = ap.add_mutually_exclusive_group()
    src.add_argument("--text", help="Input text")
    src.add_argument("--file", help="Read input from file ('-' for stdin)")
    ap.add_argument(
        "--output",
        nargs="?",
        const=DOWNLOAD_FILENAME,
        help=f"Write Markdown to this file (default name: {DOWNLOAD_FILENAME})",
    )
    return ap

def _read_input(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.file == "-":
        return sys.stdin.read()
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    return ""

def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.list_templates:
        for t in list_templates():
            print(f"{t.id.value:<24} {t.name} - {t.description}")
        return 0

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        ap.error(str(e))
    setup_logging(settings.log_level)

    controller = SessionController(
        GeminiClient(settings),
        template_id=args.template or settings.default_template,
        params=settings.default_params(),
    )
    try:
        controller.update_params(tone=args.tone, language=args.language, max_length=args.max_length)
    except ValueError as e:
        ap.error(str(e))
    controller.set_input(_read_input(args))

    state = asyncio.run(controller.generate())
    if state.status is SessionStatus.FAILED:
        print(state.error, file=sys.stderr)
        return 1

    LOGGER.info("%s", state.metrics.describe())
    if args.output:
        Path(args.output).write_text(state.output, encoding="utf-8")
        LOGGER.info("Wrote %s", args.output)
    else:
        print(state.output)
    return 0

if __name__ == "__main__":
    sys.exit(main())
