import copy
from datetime import datetime, timezone

from crm_dedupe.steps.merge import PrecedenceMerger, merge_records

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_primary_wins_tags_union_and_missing_fields_filled() -> None:
    merged = merge_records(
        {"name": "Acme", "tags": ["a"]},
        {"name": "", "tags": ["b"], "email": "x@y.com"},
        now=NOW,
    )

    assert merged == {
        "name": "Acme",
        "tags": ["a", "b"],
        "email": "x@y.com",
        "updated_at": NOW.isoformat(),
    }


def test_empty_secondary_only_changes_timestamp() -> None:
    primary = {"name": "Acme", "phone": "555", "tags": ["a"], "updated_at": "2020-01-01T00:00:00"}

    merged = merge_records(primary, {}, now=NOW)

    assert {k: v for k, v in merged.items() if k != "updated_at"} == {
        k: v for k, v in primary.items() if k != "updated_at"
    }
    assert merged["updated_at"] == NOW.isoformat()


def test_secondary_overwrites_when_primary_not_preferred() -> None:
    merged = merge_records(
        {"name": "Acme", "phone": "555-0100", "email": "a@acme.com"},
        {"name": "Acme Corp", "phone": "", "email": None},
        prefer_primary=False,
        now=NOW,
    )

    assert merged["name"] == "Acme Corp"
    assert merged["phone"] == "555-0100"
    assert merged["email"] == "a@acme.com"


def test_inputs_are_not_mutated() -> None:
    primary = {"name": "", "tags": ["a"], "labels": ("x",)}
    secondary = {"name": "Acme", "tags": ["a", "b"], "labels": ["y"]}
    before = (copy.deepcopy(primary), copy.deepcopy(secondary))

    merged = merge_records(primary, secondary, now=NOW)
    merged["tags"].append("c")

    assert (primary, secondary) == before
    assert merged["labels"] == ["x", "y"]


def test_nested_mappings_on_primary_are_copied() -> None:
    primary = {"name": "Acme", "meta": {"source": "import"}}

    merged = merge_records(primary, {"email": "x@acme.com"}, now=NOW)
    merged["meta"]["source"] = "manual"

    assert primary["meta"] == {"source": "import"}


def test_set_valued_collections_union_in_stable_order() -> None:
    merged = merge_records({"categories": {"b", "a"}}, {"categories": ("c", "a")}, now=NOW)

    assert merged["categories"] == ["a", "b", "c"]


def test_non_collection_lists_are_not_unioned() -> None:
    merged = merge_records({"notes": ["one"]}, {"notes": ["two"]}, prefer_primary=False, now=NOW)

    assert merged["notes"] == ["two"]


def test_collection_replaces_missing_value() -> None:
    merged = merge_records({"tags": None}, {"tags": ["vip"]}, now=NOW)

    assert merged["tags"] == ["vip"]


def test_clock_is_injectable() -> None:
    merger = PrecedenceMerger(clock=lambda: NOW)

    assert merger.merge({"name": "Acme"}, {})["updated_at"] == NOW.isoformat()


def test_merge_all_folds_in_order() -> None:
    merger = PrecedenceMerger(clock=lambda: NOW)

    merged = merger.merge_all(
        {"name": "Acme", "tags": ["a"]},
        [{"email": "x@acme.com", "tags": ["b"]}, {"email": "y@acme.com", "phone": "555", "tags": ["a", "c"]}],
    )

    assert merged == {
        "name": "Acme",
        "tags": ["a", "b", "c"],
        "email": "x@acme.com",
        "phone": "555",
        "updated_at": NOW.isoformat(),
    }
    assert merger.merge_all({"name": "Acme"}, []) == {"name": "Acme", "updated_at": NOW.isoformat()}
