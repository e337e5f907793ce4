from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Any

from crm_dedupe.config import AssessmentPolicy, MatchOptions
from crm_dedupe.datasets import CRM_COLUMNS, CRM_FIELDS, LabeledCandidate, ReferenceDatasetGenerator
from crm_dedupe.interfaces import DedupePipeline
from crm_dedupe.models import DuplicateAssessment, ExistingRecord
from crm_dedupe.runners import LocalDedupePipeline
from crm_dedupe.steps import FuzzyFieldMatcher, WeightedConfidenceAggregator

logger = logging.getLogger(__name__)

_LIST_COLUMNS = {"tags", "categories", "labels"}
_LIST_SEP = ";"


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run-test":
        run_test(
            size=args.size,
            candidates=args.candidates,
            duplicate_rate=args.duplicate_rate,
            seed=args.seed,
            output_dir=args.output_dir,
            input_csv=args.input_csv,
            pipeline=_build_pipeline(args),
            show_matches=args.show_matches,
        )
        return

    if args.command == "check":
        try:
            candidate = json.loads(args.candidate)
        except json.JSONDecodeError as exc:
            parser.error(f"--candidate is not valid JSON: {exc}")
        if not isinstance(candidate, dict):
            parser.error("--candidate must be a JSON object")
        if not args.records.exists():
            parser.error(f"records file not found: {args.records}")
        records = _read_records_csv(args.records)
        logger.info("loaded %d records from %s", len(records), args.records)
        check(
            candidate=candidate,
            records=records,
            pipeline=_build_pipeline(args),
            merge=args.merge,
        )
        return

    parser.print_help()


def run_test(
    *,
    size: int,
    candidates: int,
    duplicate_rate: float,
    seed: int,
    output_dir: Path,
    input_csv: Path | None,
    pipeline: DedupePipeline,
    show_matches: int,
) -> dict[str, object]:
    output_dir.mkdir(parents=True, exist_ok=True)
    generator = ReferenceDatasetGenerator(seed=seed)

    if input_csv is None:
        records = generator.generate_records(size)
        dataset_path = output_dir / "records.csv"
        _write_records_csv(dataset_path, records, CRM_COLUMNS)
    else:
        records = _read_records_csv(input_csv)
        dataset_path = input_csv

    labeled = generator.generate_candidates(records, count=candidates, duplicate_rate=duplicate_rate)
    assessments = pipeline.run_batch([c.attributes for c in labeled], records)

    assessments_path = output_dir / "assessments.json"
    summary_path = output_dir / "summary.json"

    _write_json(
        assessments_path,
        [
            {"candidate": c.attributes, "source_id": c.source_id, "assessment": a.to_dict()}
            for c, a in zip(labeled, assessments)
        ],
    )
    summary = _build_summary(
        record_count=len(records),
        labeled=labeled,
        assessments=assessments,
        dataset_path=dataset_path,
        assessments_path=assessments_path,
    )
    _write_json(summary_path, summary)

    print(f"Dataset: {dataset_path}")
    print(f"Assessments: {assessments_path}")
    print(f"Summary: {summary_path}")
    print("---")
    print(f"records={summary['record_count']}")
    print(f"candidates={summary['candidate_count']}")
    print(f"actions={summary['action_counts']}")
    print(f"precision={summary['precision']}")
    print(f"recall={summary['recall']}")
    if show_matches > 0:
        print("---")
        print("sample_duplicates=")
        print(json.dumps(_sample_payload(labeled, assessments, limit=show_matches), indent=2))
    return summary


def check(
    *,
    candidate: dict[str, Any],
    records: list[ExistingRecord],
    pipeline: DedupePipeline,
    merge: bool,
) -> None:
    if merge:
        assessment, merged = pipeline.resolve(candidate, records)
    else:
        assessment, merged = pipeline.run(candidate, records), None

    payload: dict[str, Any] = assessment.to_dict()
    payload["reasons"] = assessment.reasons()
    if merged is not None:
        payload["merged"] = {"record_id": merged.record_id, **merged.attributes}
    print(json.dumps(payload, indent=2, default=str))


def _build_pipeline(args: argparse.Namespace) -> LocalDedupePipeline:
    fields = [f.strip() for f in args.fields.split(",") if f.strip()] if args.fields else CRM_FIELDS
    options = MatchOptions(threshold=args.threshold, fields=fields, normalize=not args.no_normalize)
    policy = AssessmentPolicy(duplicate_threshold=args.duplicate_threshold)
    return LocalDedupePipeline(
        matcher=FuzzyFieldMatcher(options),
        aggregator=WeightedConfidenceAggregator(policy),
    )


def _build_summary(
    *,
    record_count: int,
    labeled: list[LabeledCandidate],
    assessments: list[DuplicateAssessment],
    dataset_path: Path,
    assessments_path: Path,
) -> dict[str, object]:
    action_counts: dict[str, int] = {}
    true_positives = false_positives = false_negatives = 0
    for candidate, assessment in zip(labeled, assessments):
        action_counts[assessment.action.value] = action_counts.get(assessment.action.value, 0) + 1
        hit = assessment.is_duplicate and assessment.record_id == candidate.source_id
        if hit:
            true_positives += 1
        elif assessment.is_duplicate:
            false_positives += 1
        if candidate.source_id is not None and not hit:
            false_negatives += 1

    flagged = true_positives + false_positives
    expected = true_positives + false_negatives
    return {
        "record_count": record_count,
        "candidate_count": len(labeled),
        "labeled_duplicate_count": sum(1 for c in labeled if c.source_id is not None),
        "action_counts": dict(sorted(action_counts.items())),
        "true_positives": true_positives,
        "false_positives": false_positives,
        "false_negatives": false_negatives,
        "precision": round(true_positives / flagged, 3) if flagged else 0.0,
        "recall": round(true_positives / expected, 3) if expected else 0.0,
        "dataset_path": str(dataset_path),
        "assessments_path": str(assessments_path),
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crm-dedupe", description="CRM duplicate detection CLI")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    subparsers = parser.add_subparsers(dest="command")

    run_test_parser = subparsers.add_parser(
        "run-test",
        help="Generate or load CRM records, assess noisy candidates, and output assessments + summary",
    )
    run_test_parser.add_argument("--size", type=int, default=500)
    run_test_parser.add_argument("--candidates", type=int, default=100)
    run_test_parser.add_argument("--duplicate-rate", type=float, default=0.3)
    run_test_parser.add_argument("--seed", type=int, default=42)
    run_test_parser.add_argument("--input-csv", type=Path, default=None)
    run_test_parser.add_argument("--output-dir", type=Path, default=Path("data/cli_output"))
    run_test_parser.add_argument("--show-matches", type=int, default=5)
    _add_matching_arguments(run_test_parser)

    check_parser = subparsers.add_parser("check", help="Assess one JSON candidate against a CSV of records")
    check_parser.add_argument("--candidate", required=True, help='JSON object, e.g. \'{"company": "Acme Inc"}\'')
    check_parser.add_argument("--records", type=Path, required=True)
    check_parser.add_argument("--merge", action="store_true", help="Merge into the matched record when duplicate")
    _add_matching_arguments(check_parser)

    return parser


def _add_matching_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--threshold", type=float, default=0.7)
    parser.add_argument("--duplicate-threshold", type=float, default=0.8)
    parser.add_argument("--fields", type=str, default=None, help="Comma separated field names")
    parser.add_argument("--no-normalize", action="store_true")


def _write_json(path: Path, payload: object) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)


def _write_records_csv(path: Path, records: list[ExistingRecord], columns: list[str]) -> None:
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=["RECORD_ID", *columns], extrasaction="ignore")
        writer.writeheader()
        for record in records:
            row = {
                column: _LIST_SEP.join(map(str, value)) if isinstance(value, list) else value
                for column, value in record.attributes.items()
            }
            writer.writerow({"RECORD_ID": record.record_id, **row})


def _read_records_csv(path: Path) -> list[ExistingRecord]:
    records: list[ExistingRecord] = []
    with path.open("r", newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            record_id = row.get("RECORD_ID")
            if not record_id:
                continue
            attrs: dict[str, Any] = {}
            for column, value in row.items():
                if column == "RECORD_ID":
                    continue
                if column in _LIST_COLUMNS:
                    attrs[column] = [item for item in (value or "").split(_LIST_SEP) if item]
                else:
                    attrs[column] = value
            records.append(ExistingRecord(record_id=record_id, attributes=attrs))
    return records


def _sample_payload(
    labeled: list[LabeledCandidate],
    assessments: list[DuplicateAssessment],
    limit: int = 5,
) -> list[dict[str, Any]]:
    ranked = sorted(
        (pair for pair in zip(labeled, assessments) if pair[1].matches),
        key=lambda pair: (-pair[1].confidence, pair[1].record_id or ""),
    )
    payload: list[dict[str, Any]] = []
    for candidate, assessment in ranked[:limit]:
        payload.append(
            {
                "record_id": assessment.record_id,
                "expected_record_id": candidate.source_id,
                "confidence": round(assessment.confidence, 4),
                "action": assessment.action.value,
                "reasons": assessment.reasons(),
            }
        )
    return payload


if __name__ == "__main__":
    main()
