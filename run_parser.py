"""
Parse a pasted chat export from a text file.

Reads:
  - the text file given as first argument (default: paste_io/input.txt)

Produces:
  - the JSON file given as second argument (default: paste_io/parse_result.json)
"""
import json
import logging
import sys
from pathlib import Path

from slackpaste.config.settings import LOG_LEVEL

# ---------------------------------------------------------------------------
# Setup logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("run_parser")

from slackpaste.parsing.output_builder import build_parse_output  # noqa: E402
from slackpaste.parsing.pipeline import MessageParser  # noqa: E402
from slackpaste.parsing.validation import validate_parse_output  # noqa: E402

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
ROOT = Path(__file__).parent
IO_DIR = ROOT / "paste_io"

INPUT_FILE = Path(sys.argv[1]) if len(sys.argv) > 1 else IO_DIR / "input.txt"
OUTPUT_FILE = Path(sys.argv[2]) if len(sys.argv) > 2 else IO_DIR / "parse_result.json"


def main() -> int:
    logger.info("Reading input: %s", INPUT_FILE)
    text = INPUT_FILE.read_text(encoding="utf-8")

    parser = MessageParser()
    result = parser.parse_with_statistics(text)
    output = build_parse_output(result)

    validation = validate_parse_output(output)
    for warning in validation.warnings:
        logger.warning("Output warning: %s", warning)
    if not validation.valid:
        logger.error("Output failed validation: %s", validation.errors)
        return 1

    OUTPUT_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(OUTPUT_FILE, "w", encoding="utf-8") as f:
        json.dump(output, f, ensure_ascii=False, indent=2)
    logger.info("Output saved to: %s", OUTPUT_FILE)

    # -----------------------------------------------------------------------
    # Summary
    # -----------------------------------------------------------------------
    stats = output["statistics"]
    print("\n" + "=" * 70)
    print("PARSE RESULT — SUMMARY")
    print("=" * 70)
    print(f"lines       : {stats['total_lines']} ({stats['non_empty_lines']} non-empty)")
    print(f"candidates  : {stats['candidate_count']}")
    print(f"boundaries  : {stats['boundary_count']}")
    print(f"format      : {stats['format']} (conf={stats['confidence']:.2f})")
    print(f"\nMessages ({stats['message_count']}):")
    for msg in output["messages"]:
        first_line = msg["body_lines"][0] if msg["body_lines"] else ""
        print(f"  [{msg['timestamp'] or '--':>10s}] {msg['author']:20s} {first_line[:40]}")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
