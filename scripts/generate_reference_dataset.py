from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path

from crm_dedupe.datasets import CRM_COLUMNS, ReferenceDatasetGenerator


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate synthetic CRM records and noisy candidates")
    parser.add_argument("--size", type=int, default=5000)
    parser.add_argument("--candidates", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--duplicate-rate", type=float, default=0.3)
    parser.add_argument("--output", type=Path, default=Path("data/reference_crm_records.csv"))
    parser.add_argument("--candidates-output", type=Path, default=Path("data/reference_crm_candidates.json"))
    args = parser.parse_args()

    generator = ReferenceDatasetGenerator(seed=args.seed)
    records = generator.generate_records(args.size)
    candidates = generator.generate_candidates(records, count=args.candidates, duplicate_rate=args.duplicate_rate)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=["RECORD_ID", *CRM_COLUMNS])
        writer.writeheader()
        for record in records:
            row = {k: ";".join(v) if isinstance(v, list) else v for k, v in record.attributes.items()}
            writer.writerow({"RECORD_ID": record.record_id, **row})

    args.candidates_output.parent.mkdir(parents=True, exist_ok=True)
    with args.candidates_output.open("w", encoding="utf-8") as handle:
        json.dump([{"source_id": c.source_id, **c.attributes} for c in candidates], handle, indent=2)


if __name__ == "__main__":
    main()
