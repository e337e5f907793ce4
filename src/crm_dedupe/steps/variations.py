"""Alternate spellings of a normalized name.

Bigram similarity is weak on short tokens and on reordered or abbreviated
names, so both sides of a name comparison are expanded into a small set of
rewrites and the best pairing wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from crm_dedupe.config import KNOWN_COMPANY_ALIASES


def generate_variations(normalized_name: str) -> set[str]:
    variations = {normalized_name}
    words = normalized_name.split()

    if len(words) == 1:
        word = words[0]
        if len(word) > 3:
            variations.add(word[1:] + word[0])
            variations.add(word[-1] + word[:-1])
    elif len(words) > 1:
        acronym = "".join(word[0] for word in words)
        if len(acronym) > 1:
            variations.add(acronym)
        variations.add(words[0])
        if len(words[0]) <= 3:
            variations.add(" ".join(words[1:]))

    return variations


def alias_group(
    names: Iterable[str],
    aliases: Mapping[str, Sequence[str]] = KNOWN_COMPANY_ALIASES,
) -> str | None:
    """Return the canonical key whose spellings include any of ``names``."""
    candidates = set(names)
    for canonical in sorted(aliases):
        if candidates.intersection(aliases[canonical]):
            return canonical
    return None
