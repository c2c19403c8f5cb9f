#!/usr/bin/env python3
"""
Command-line interface for the IT ticket assistant.

This CLI provides two operations:
- extract: Turn free-text problem notes into a structured ticket
- serve: Run the HTTP API
"""

import argparse
import asyncio
import json
import logging
import os
import sys

from ticket_assistant import models
from ticket_assistant.config import Settings
from ticket_assistant.errors import ConfigurationError
from ticket_assistant.utils import logging_helper

logger = logging_helper.get_logger(__name__)


def create_main_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="ticket-cli",
        description="IT ticket assistant: structured tickets and completeness check",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extract with the hosted model configured in .env
  %(prog)s extract -t "Drucker im 2. OG druckt seit heute morgen nicht mehr"

  # Read notes from stdin and print JSON
  cat notes.txt | %(prog)s extract --json

  # Use a local GGUF model
  TICKET_MODEL_PATH=./models/model.gguf %(prog)s extract --backend llama -t "..."

  # Run the HTTP API
  %(prog)s serve --port 8000
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser(
        "extract", help="Create a ticket from problem notes"
    )
    _add_extract_args(extract_parser)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    _add_serve_args(serve_parser)

    return parser


def _add_extract_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments for the extract subcommand."""
    parser.add_argument(
        "--text",
        "-t",
        type=str,
        help="Problem description (read from stdin if omitted)",
        metavar="TEXT",
    )
    parser.add_argument(
        "--backend",
        choices=["openai", "llama"],
        help="Generator backend (overrides TICKET_BACKEND)",
    )
    parser.add_argument(
        "--model",
        type=str,
        help="Model identifier (overrides TICKET_MODEL)",
        metavar="NAME",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the ticket as JSON instead of a labelled block",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable detailed logging and debug output",
    )


def _add_serve_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments for the serve subcommand."""
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")


def format_ticket(ticket: models.Ticket) -> str:
    """Labelled ticket block followed by the open follow-up questions."""
    lines = [ticket.to_clipboard_text()]
    if ticket.has_missing_info:
        lines.append("")
        lines.append("Fehlende Informationen / Rückfragen:")
        lines.extend(f"  - {question}" for question in ticket.missing_info_questions)
    return "\n".join(lines)


async def handle_extract_command(args) -> int:
    """Handle the extract subcommand. Returns the process exit code."""
    input_text = args.text if args.text is not None else sys.stdin.read()
    if not input_text.strip():
        print("No problem description given (use --text or stdin).", file=sys.stderr)
        return 1

    try:
        settings = Settings.from_env()
        if args.backend:
            settings.backend = args.backend
        if args.model:
            settings.model = args.model

        from ticket_assistant.core import build_extractor

        extractor = build_extractor(settings)
    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if args.verbose:
        logger.info(f"Extracting ticket with {settings.backend} backend, model {settings.model}")

    outcome = await extractor.extract(input_text)

    if isinstance(outcome, models.ExtractionSuccess):
        if args.json:
            print(json.dumps(outcome.ticket.to_wire(), indent=2, ensure_ascii=False))
        else:
            print(format_ticket(outcome.ticket))
        return 0

    if isinstance(outcome, models.ExtractionFailure):
        print(outcome.message, file=sys.stderr)
    return 1


def handle_serve_command(args) -> int:
    """Handle the serve subcommand - runs the FastAPI app under uvicorn."""
    import uvicorn

    uvicorn.run("ticket_assistant.api.main:app", host=args.host, port=args.port)
    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = create_main_parser()
    args = parser.parse_args()

    if getattr(args, "verbose", False):
        # Loggers created later (lazily imported backends) read TICKET_LOG_LEVEL
        os.environ["TICKET_LOG_LEVEL"] = "DEBUG"
        logging_helper.set_level(logging.DEBUG, ("ticket_assistant", __name__))

    if args.command == "extract":
        return asyncio.run(handle_extract_command(args))
    if args.command == "serve":
        # uvicorn manages its own event loop
        return handle_serve_command(args)

    parser.print_help()
    return 1


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
