from crm_dedupe.steps.variations import alias_group, generate_variations


def test_single_long_word_adds_rotations() -> None:
    assert generate_variations("acme") == {"acme", "cmea", "eacm"}


def test_short_single_word_is_left_alone() -> None:
    assert generate_variations("ibm") == {"ibm"}


def test_multi_word_adds_acronym_and_leading_word() -> None:
    assert generate_variations("acme widgets") == {"acme widgets", "aw", "acme"}


def test_short_leading_word_is_also_dropped() -> None:
    assert generate_variations("the acme group") == {"the acme group", "tag", "the", "acme group"}


def test_empty_name_yields_itself() -> None:
    assert generate_variations("") == {""}


def test_alias_group_lookup() -> None:
    assert alias_group(("msft",)) == "microsoft"
    assert alias_group(("alphabet",)) == "google"
    assert alias_group(("acme",)) is None
    assert alias_group(("acme",), {"acme": ("acme", "acme co")}) == "acme"
