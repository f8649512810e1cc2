"""Command line entry point: replay recorded attempts against a dictionary."""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from strokecoach.app import StrokeCoach
from strokecoach.config import ensure_directories
from strokecoach.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="strokecoach",
        description="Grade recorded handwriting attempts stroke by stroke.",
    )
    parser.add_argument("dictionary", type=Path, help="JSON list of characters with strokes and medians")
    parser.add_argument("attempts", type=Path, help='JSON list of {"word", "events"} attempts')
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser.parse_args(argv)


async def main(dictionary_path: Path, attempts_path: Path) -> int:
    """Import the dictionary and replay every attempt."""
    records = json.loads(dictionary_path.read_text(encoding="utf-8"))
    attempts = json.loads(attempts_path.read_text(encoding="utf-8"))

    coach = StrokeCoach()
    try:
        coach.start(words=[attempt["word"] for attempt in attempts])
        imported = coach.import_dictionary(records)
        logger.info(f"Dictionary ready with {imported} characters")

        results = await coach.replay(attempts)
    finally:
        coach.stop()

    for word, grade in results:
        print(f"{word}\t{grade if grade is not None else '-'}")
    return 0 if all(grade is not None for _, grade in results) else 1


def run(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    ensure_directories()
    setup_logging("Starting strokecoach ...", args.log_level)

    try:
        return asyncio.run(main(args.dictionary, args.attempts))
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
        return 130


if __name__ == "__main__":
    sys.exit(run())
