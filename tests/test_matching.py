import pytest

from crm_dedupe.config import MatchOptions
from crm_dedupe.models import ExistingRecord
from crm_dedupe.schema import FieldKind, MatchField
from crm_dedupe.steps.matching import ALIAS_MATCH_SCORE, FuzzyFieldMatcher


def _records(*rows: dict) -> list[ExistingRecord]:
    return [ExistingRecord.from_mapping(row) for row in rows]


def test_legal_suffix_noise_still_matches() -> None:
    matcher = FuzzyFieldMatcher(MatchOptions(threshold=0.5))

    results = matcher.match({"company": "Acme Inc"}, _records({"id": "1", "company": "Acme Corporation"}))

    assert len(results) == 1
    assert results[0].record_id == "1"
    assert results[0].field == "company"
    assert results[0].score >= 0.5
    assert results[0].matched_value == "Acme Corporation"
    assert results[0].candidate_value == "Acme Inc"


def test_leading_article_is_dropped_by_variations() -> None:
    matcher = FuzzyFieldMatcher()

    results = matcher.match({"company": "The Acme Group"}, _records({"id": "1", "company": "Acme Group Ltd"}))

    assert [r.score for r in results] == [1.0]


def test_values_resolve_through_prefixed_keys() -> None:
    matcher = FuzzyFieldMatcher()

    results = matcher.match(
        {"client_company": "Globex LLC"},
        _records({"id": "1", "contact_company": "globex"}),
    )

    assert [(r.field, r.score) for r in results] == [("company", 1.0)]


def test_email_compares_domains() -> None:
    matcher = FuzzyFieldMatcher()

    results = matcher.match({"email": "jane@acme.com"}, _records({"id": "1", "email": "bob@ACME.com"}))

    assert [(r.field, r.score) for r in results] == [("email", 1.0)]


def test_phone_compares_digits() -> None:
    matcher = FuzzyFieldMatcher()

    results = matcher.match({"phone": "+1 (555) 123-4567"}, _records({"id": "1", "phone": "15551234567"}))

    assert [(r.field, r.score) for r in results] == [("phone", 1.0)]


def test_non_string_values_produce_no_match() -> None:
    matcher = FuzzyFieldMatcher()

    assert matcher.match({"phone": 5551234567}, _records({"id": "1", "phone": "5551234567"})) == []
    assert matcher.match({"company": "Acme"}, _records({"id": "1", "company": None})) == []


def test_known_aliases_score_as_variation_match() -> None:
    matcher = FuzzyFieldMatcher()

    results = matcher.match({"company": "MSFT"}, _records({"id": "1", "company": "Microsoft Corporation"}))

    assert [r.score for r in results] == [ALIAS_MATCH_SCORE]


def test_aliases_can_be_disabled() -> None:
    matcher = FuzzyFieldMatcher(MatchOptions(aliases={}))

    assert matcher.match({"company": "MSFT"}, _records({"id": "1", "company": "Microsoft"})) == []


def test_generic_fields_use_normalized_text() -> None:
    records = _records({"id": "1", "website": "HTTPS://WWW.ACME.COM"})
    candidate = {"website": "https://www.acme.com "}

    normalized = FuzzyFieldMatcher(MatchOptions(fields=["website"])).match(candidate, records)
    raw = FuzzyFieldMatcher(MatchOptions(fields=["website"], normalize=False, threshold=0.0)).match(
        candidate, records
    )

    assert [r.score for r in normalized] == [1.0]
    assert len(raw) == 1
    assert raw[0].score < 1.0


def test_explicit_field_kind_overrides_inference() -> None:
    records = _records({"id": "1", "primary_contact": "bob@acme.com"})
    candidate = {"primary_contact": "jane@acme.com"}

    tagged = FuzzyFieldMatcher(MatchOptions(fields=[MatchField("primary_contact", FieldKind.EMAIL)]))
    inferred = FuzzyFieldMatcher(MatchOptions(fields=["primary_contact"], threshold=0.0))

    assert [r.score for r in tagged.match(candidate, records)] == [1.0]
    assert inferred.match(candidate, records)[0].score < 1.0


def test_results_sorted_by_score_then_record_id() -> None:
    matcher = FuzzyFieldMatcher(MatchOptions(threshold=0.0))
    records = _records(
        {"id": "b", "company": "Acme"},
        {"id": "c", "company": "Acne Labs"},
        {"id": "a", "company": "Acme Inc"},
    )

    results = matcher.match({"company": "Acme"}, records)

    assert [r.record_id for r in results] == ["a", "b", "c"]
    assert results[0].score == results[1].score == 1.0
    assert results[2].score < 1.0


def test_duplicate_record_ids_keep_best_score_regardless_of_order() -> None:
    matcher = FuzzyFieldMatcher()
    rows = [{"id": "1", "company": "Acme Widgets"}, {"id": "1", "company": "Acme"}]

    forward = matcher.match({"company": "Acme"}, _records(*rows))
    backward = matcher.match({"company": "Acme"}, _records(*reversed(rows)))

    assert len(forward) == 1
    assert forward == backward
    assert forward[0].matched_value == "Acme"


def test_lower_threshold_returns_superset() -> None:
    records = _records(
        {"id": "1", "company": "Acme Corp", "email": "x@acme.com"},
        {"id": "2", "company": "Acne Labs", "phone": "555 010 0000"},
        {"id": "3", "name": "Jane Smith", "company": "Initech"},
    )
    candidate = {"company": "Acme", "name": "Jane Smyth", "phone": "555-010-0001", "email": "y@acme.co"}

    keys_by_threshold = {}
    for threshold in (0.0, 0.3, 0.7, 1.0):
        results = FuzzyFieldMatcher(MatchOptions(threshold=threshold)).match(candidate, records)
        keys_by_threshold[threshold] = {(r.record_id, r.field) for r in results}

    assert keys_by_threshold[0.0] >= keys_by_threshold[0.3] >= keys_by_threshold[0.7] >= keys_by_threshold[1.0]
    assert keys_by_threshold[1.0]


@pytest.mark.parametrize("options", [MatchOptions(), MatchOptions(fields=())])
def test_empty_inputs_return_no_matches(options: MatchOptions) -> None:
    matcher = FuzzyFieldMatcher(options)

    assert matcher.match({"company": "Acme"}, []) == []
    assert matcher.match({}, _records({"id": "1", "company": "Acme"})) == []


def test_scores_are_bounded() -> None:
    matcher = FuzzyFieldMatcher(MatchOptions(threshold=0.0))
    records = _records({"id": "1", "name": "Jon Smith", "company": "Acme", "email": "a@b.c", "phone": "1"})

    results = matcher.match({"name": "John Smith", "company": "acme co", "email": "c@b.c", "phone": "12"}, records)

    assert results
    assert all(0.0 <= r.score <= 1.0 for r in results)


def test_values_that_normalize_to_nothing_are_skipped() -> None:
    matcher = FuzzyFieldMatcher(MatchOptions(threshold=0.0))
    records = _records({"id": "1", "company": "Inc.", "phone": "555-0100"})

    assert matcher.match({"company": "LLC", "phone": "ext."}, records) == []
