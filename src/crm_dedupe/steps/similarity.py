from __future__ import annotations

from collections import Counter
from collections.abc import Iterable


def bigrams(text: str) -> Counter[str]:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def bigram_dice(left: str, right: str) -> float:
    """Dice coefficient over the bigram multisets of ``left`` and ``right``.

    Case-sensitive; callers normalize first. Empty input scores 0.0.
    """
    if not left or not right:
        return 0.0
    if left == right:
        return 1.0

    left_grams = bigrams(left)
    right_grams = bigrams(right)
    total = sum(left_grams.values()) + sum(right_grams.values())
    if total == 0:
        return 0.0
    overlap = sum((left_grams & right_grams).values())
    return 2.0 * overlap / total


def best_variation_score(left: Iterable[str], right: Iterable[str]) -> float:
    right_variations = list(right)
    best = 0.0
    for a in left:
        for b in right_variations:
            score = bigram_dice(a, b)
            if score > best:
                best = score
                if best >= 1.0:
                    return 1.0
    return best
