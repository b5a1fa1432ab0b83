"""
Score a file of applicants offline and write the batch results as JSON.

How to run:
    From project root:

        python -m backend_altscore.tools.score_applicants applicants.json --output scores.json

    Input is either JSON (a list of applicant objects, or {"applicants": [...]})
    or CSV with one column per feature. Inputs larger than the configured
    batch limit are scored in consecutive chunks; indexes stay global.

Optional:
    --seed N    enable the bounded ensemble jitter with a fixed seed
    ALTSCORE_* / LOG_LEVEL / LOG_FORMAT as used by backend_altscore.config

Logs always go to stderr so stdout holds only the JSON report.
"""

from __future__ import annotations

import argparse
import csv
import dataclasses
import json
import sys
from pathlib import Path
from typing import Any

from backend_altscore.altscore_logging import configure_structlog, get_logger
from backend_altscore.analytics.assessment_pipeline import score_batch
from backend_altscore.config import Settings, get_settings
from backend_altscore.core.exceptions import AltScoreError

logger = get_logger(__name__)


def _coerce(value: str) -> Any:
    # Leave non-numeric cells as-is so validation reports them per field
    text = value.strip()
    try:
        return float(text)
    except ValueError:
        return text


def load_applicants(path: Path) -> list[Any]:
    """Read applicants from a .json or .csv file."""
    if path.suffix.lower() == ".csv":
        with path.open(newline="", encoding="utf-8") as fh:
            return [{k: _coerce(v or "") for k, v in row.items() if k} for row in csv.DictReader(fh)]
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("applicants")
    if not isinstance(data, list):
        raise ValueError("JSON input must be a list or an object with an 'applicants' list")
    return data


def score_all(applicants: list[Any], settings: Settings) -> dict[str, Any]:
    """Score every applicant in max_batch_size chunks; merge into one batch result."""
    results: list[dict[str, Any]] = []
    timestamp = ""
    for start in range(0, len(applicants), settings.max_batch_size):
        chunk = score_batch(applicants[start:start + settings.max_batch_size], settings, start_index=start)
        results.extend(chunk["results"])
        timestamp = chunk["timestamp"]
    failed = sum(1 for r in results if r.get("error"))
    return {"results": results, "processed": len(results), "failed": failed, "timestamp": timestamp}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Score applicants from a JSON or CSV file with the AltScore model.",
    )
    parser.add_argument("input", type=Path, help="Applicants file (.json or .csv)")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Write JSON here (default: stdout)")
    parser.add_argument("--seed", type=int, default=None, help="Enable ensemble jitter with this seed")
    args = parser.parse_args(argv)

    # stdout carries the JSON report
    configure_structlog(stream="stderr")

    settings = get_settings()
    if args.seed is not None:
        settings = dataclasses.replace(settings, score_jitter=True, jitter_seed=args.seed)

    try:
        applicants = load_applicants(args.input)
    except (OSError, ValueError) as e:
        logger.error("score_applicants_load_failed", path=str(args.input), error=str(e))
        print(f"Error: could not read {args.input}: {e}", file=sys.stderr)
        return 1
    if not applicants:
        print("Error: no applicants in input", file=sys.stderr)
        return 1

    try:
        report = score_all(applicants, settings)
    except AltScoreError as e:
        logger.error("score_applicants_failed", code=e.code, message=e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    payload = json.dumps(report, indent=2)
    if args.output is None:
        print(payload)
    else:
        args.output.write_text(payload + "\n", encoding="utf-8")
    logger.info(
        "score_applicants_done",
        processed=report["processed"],
        failed=report["failed"],
        output=str(args.output) if args.output else "stdout",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
