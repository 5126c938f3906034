#!/usr/bin/env python3
"""
Run a single funding evaluation from the command line, without the HTTP server.

The form file holds the same object the API expects under ``formData``
(camelCase keys such as siteAddress, utilityProvider, numChargers).

Usage (run from repo root with venv activated and .env populated):

    python scripts/evaluate_site.py --form site.json
    python scripts/evaluate_site.py --form site.json --no-search --template detailed
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from evfunding.config import get_settings
from evfunding.models import ProjectForm
from evfunding.pipeline import EvaluationPipeline


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate EV charging funding eligibility for one site.")
    parser.add_argument("--form", required=True, type=Path, help="JSON file with the site form fields")
    parser.add_argument("--no-search", action="store_true", help="Skip web search and scraping")
    parser.add_argument("--template", help="Prompt template to use (summary, detailed)")
    parser.add_argument("--strategy", help="Search query strategy (address, state)")
    parser.add_argument("--stats", action="store_true", help="Print pipeline stats as JSON to stderr")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(levelname)s] %(message)s")

    overrides = {}
    if args.no_search:
        overrides["enable_search"] = False
    if args.template:
        overrides["prompt_template"] = args.template
    if args.strategy:
        overrides["search_strategy"] = args.strategy
    settings = settings.model_copy(update=overrides)

    payload = json.loads(args.form.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and "formData" in payload:
        payload = payload["formData"]
    form = ProjectForm.model_validate(payload or {})

    pipeline = EvaluationPipeline(settings)
    try:
        outcome = asyncio.run(pipeline.run(form))
    except Exception as exc:
        logging.error("Evaluation failed: %s", exc)
        return 1

    print(outcome.result)
    if args.stats:
        print(json.dumps(outcome.stats(), indent=2), file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
