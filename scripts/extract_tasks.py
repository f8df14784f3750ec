"""Extract task candidates from a text file and optionally plan them day by day."""

import argparse
import json
import sys
from dataclasses import asdict
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from planner.extraction.extractor import confirm_tasks, extract_tasks_from_document
from planner.pipeline_config import ExtractionConfig, TextFormat
from planner.scheduling.allocator import generate_schedule


def run(
    path: str,
    text_format: str = "auto",
    reference_date: str | None = None,
    plan_start: str | None = None,
    plan_end: str | None = None,
) -> None:
    content = Path(path).read_text(encoding="utf-8-sig")
    config = ExtractionConfig(
        format=TextFormat(text_format),
        reference_date=date.fromisoformat(reference_date) if reference_date else None,
    )

    result = extract_tasks_from_document(content, config)
    print(f"Format: {result.format.value if result.format else 'none'}")
    print(json.dumps([asdict(t) for t in result.tasks], ensure_ascii=False, indent=2))

    if not (plan_start and plan_end):
        return

    tasks = confirm_tasks(result.tasks)
    skipped = len(result.tasks) - len(tasks)
    if skipped:
        print(f"\n{skipped} candidates skipped (no name or no usable deadline)")

    schedule = generate_schedule(tasks, date.fromisoformat(plan_start), date.fromisoformat(plan_end))
    print("\nDaily plan:")
    for daily in schedule:
        items = ", ".join(f"{s.name} {s.planned_amount:g}{s.unit}" for s in daily.tasks) or "-"
        print(f"  {daily.date.isoformat()}  {items}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("path")
    parser.add_argument("--format", default="auto", choices=[f.value for f in TextFormat])
    parser.add_argument("--reference-date", default=None)
    parser.add_argument("--plan-start", default=None)
    parser.add_argument("--plan-end", default=None)
    args = parser.parse_args()
    run(args.path, args.format, args.reference_date, args.plan_start, args.plan_end)
