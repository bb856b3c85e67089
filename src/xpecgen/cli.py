"""xpecgen command line.

Usage examples:
- Generate with a functional spec:
  xpecgen --spec spec.md "write a hello world function"

- Add a review pass and choose the output file:
  xpecgen -s spec.md -r review.md -o greet.ts write a hello world function

- Use a YAML config (see config.py for keys):
  xpecgen --config xpecgen.yaml -s spec.md "..."

Exit status: 0 on success (or when only usage is printed), 1 on any failure.
Nothing is written when the pipeline fails.
"""
from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .config import clean_api_key, load_settings
from .errors import XpecGenError
from .logging_util import get_logger, log_step, set_level
from .pipeline import Pipeline

logger = get_logger("xpecgen.cli")

USAGE = "xpecgen --spec <file> [--review <rules>] [--out <file>] <prompt>"

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="xpecgen", usage=USAGE)
    ap.add_argument("prompt", nargs="*", help="Free-form request (words are joined with spaces)")
    ap.add_argument("-s", "--spec", help="Functional specification file (required)")
    ap.add_argument("-r", "--review", help="Code review rules file (optional, enables the reviewer stage)")
    ap.add_argument("-o", "--out", default="output.ts", help="Output file (default: output.ts)")
    ap.add_argument("--config", help="YAML config file")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap

def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")

def _ask_api_key() -> str:
    if not sys.stdin.isatty():
        return ""
    return clean_api_key(getpass.getpass("OPENROUTER_API_KEY: "))

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        set_level("DEBUG")

    user_prompt = " ".join(args.prompt).strip()
    if not user_prompt or not args.spec:
        print("xpecgen - spec driven generation pipeline")
        print(f"Usage: {USAGE}")
        return 0

    # existing environment wins over .env
    load_dotenv(find_dotenv(usecwd=True), override=False)
    if not args.verbose:
        # XPECGEN_LOG_LEVEL may have just arrived from .env
        set_level(None)

    try:
        settings = load_settings(args.config)
        if not settings.api_key:
            settings.api_key = _ask_api_key() or None
        if not settings.api_key:
            logger.error("OPENROUTER_API_KEY is not set")
            return 1

        spec_text = _read_text(args.spec)
        logger.info("Spec loaded: %s", args.spec)

        review_text = ""
        if args.review:
            review_text = _read_text(args.review)
            logger.info("Review rules loaded: %s", args.review)

        pipeline = Pipeline.from_settings(settings, review_rules=review_text)
        log_step(logger, "0", f"pipeline stages: {' -> '.join(pipeline.stages)}")
        code = pipeline.run(user_prompt, spec_text)

        out_path = Path(args.out)
        out_path.write_text(code, encoding="utf-8")
        logger.info("Pipeline finished, wrote %s (%s)", out_path, pipeline.timings_ms)
        return 0

    except (XpecGenError, OSError, ValueError) as e:
        logger.error("Error: %s", e)
        return 1

if __name__ == "__main__":
    raise SystemExit(main())
