#!/usr/bin/env python3
"""
Analyze chronograph readings against the 20 J/cm² lethality threshold.

Usage:
    python scripts/analyze_shots.py --sample
    python scripts/analyze_shots.py 125.4 126.1 124.8 --diameter 6 --weight 0.25
    python scripts/analyze_shots.py --file shots.csv --format markdown --report
"""

import argparse
import csv
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import List

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from airgun_lethality.ballistics import (
    DEFAULT_PROJECTILE,
    SAMPLE_VELOCITIES,
    ProjectileParams,
    ShotInput,
    shots_from_velocities,
)
from airgun_lethality.analysis import run_analysis
from airgun_lethality.errors import InvalidInputError
from airgun_lethality.llm.config import ReportConfig
from airgun_lethality.report import AnalysisReport


def load_shots_file(path: Path, params: ProjectileParams) -> List[ShotInput]:
    """
    Load shots from a CSV or JSON file.

    CSV rows are ``velocity[,diameter_mm,weight_grams]``; a header row
    is skipped. JSON is a list of velocities or of objects with
    ``velocity`` and optional ``diameter_mm`` / ``weight_grams``.
    Missing projectile fields fall back to params.
    """
    if path.suffix.lower() == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        shots = []
        for item in data:
            if isinstance(item, dict):
                shots.append(ShotInput(
                    velocity=float(item["velocity"]),
                    diameter_mm=float(item.get("diameter_mm", params.diameter_mm)),
                    weight_grams=float(item.get("weight_grams", params.weight_grams)),
                ))
            else:
                shots.append(ShotInput(float(item), params.diameter_mm, params.weight_grams))
        return shots

    shots = []
    with path.open(newline="", encoding="utf-8") as f:
        for row in csv.reader(f):
            cells = [c.strip() for c in row if c.strip()]
            if not cells:
                continue
            try:
                velocity = float(cells[0])
            except ValueError:
                continue  # header
            diameter = float(cells[1]) if len(cells) > 1 else params.diameter_mm
            weight = float(cells[2]) if len(cells) > 2 else params.weight_grams
            shots.append(ShotInput(velocity, diameter, weight))
    return shots


def main():
    parser = argparse.ArgumentParser(
        description="Determine air gun lethality from chronograph velocities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/analyze_shots.py --sample
    python scripts/analyze_shots.py 125.4 126.1 124.8 --diameter 6 --weight 0.25
    python scripts/analyze_shots.py --file shots.csv --format json
    python scripts/analyze_shots.py --sample --report --model google/gemini-2.5-flash
        """,
    )

    parser.add_argument(
        "velocities",
        nargs="*",
        type=float,
        help="Muzzle velocities in m/s (single-ammo mode)",
    )
    parser.add_argument(
        "--file",
        type=Path,
        help="CSV or JSON file of shots (velocity[,diameter_mm,weight_grams])",
    )
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Use the built-in demonstration series",
    )

    # Projectile
    parser.add_argument(
        "--diameter",
        type=float,
        default=DEFAULT_PROJECTILE.diameter_mm,
        help=f"Projectile diameter in mm (default: {DEFAULT_PROJECTILE.diameter_mm:g})",
    )
    parser.add_argument(
        "--weight",
        type=float,
        default=DEFAULT_PROJECTILE.weight_grams,
        help=f"Projectile weight in g (default: {DEFAULT_PROJECTILE.weight_grams:g})",
    )

    # Output
    parser.add_argument(
        "--format",
        choices=["text", "markdown", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Request a written appraisal conclusion from the LLM",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="OpenRouter model for the appraisal (default: LETHALITY_REPORT_MODEL or built-in)",
    )

    args = parser.parse_args()

    params = ProjectileParams(diameter_mm=args.diameter, weight_grams=args.weight)

    if args.file:
        try:
            shots = load_shots_file(args.file, params)
        except (ValueError, KeyError, TypeError) as e:
            print(f"Invalid input: {args.file}: {e!r}", file=sys.stderr)
            return 2
    elif args.sample:
        shots = shots_from_velocities(SAMPLE_VELOCITIES, params)
    else:
        shots = shots_from_velocities(args.velocities, params)

    config = None
    if args.report:
        config = ReportConfig.from_env()
        if args.model:
            config = replace(config, model=args.model)

    try:
        result = run_analysis(
            shots,
            params=params,
            report_config=config,
            generate_report=args.report,
        )
    except InvalidInputError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2

    report = AnalysisReport(result)
    if args.format == "json":
        print(report.to_json())
    elif args.format == "markdown":
        print(report.to_markdown())
    else:
        print(report.to_text())

    return 0


if __name__ == "__main__":
    sys.exit(main())
