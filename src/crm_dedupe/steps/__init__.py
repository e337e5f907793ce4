from crm_dedupe.steps.confidence import WeightedConfidenceAggregator
from crm_dedupe.steps.matching import FuzzyFieldMatcher
from crm_dedupe.steps.merge import PrecedenceMerger, merge_records
from crm_dedupe.steps.normalize import (
    FieldNormalizer,
    normalize_company_name,
    normalize_email,
    normalize_phone,
)
from crm_dedupe.steps.similarity import bigram_dice
from crm_dedupe.steps.variations import generate_variations

__all__ = [
    "WeightedConfidenceAggregator",
    "FuzzyFieldMatcher",
    "PrecedenceMerger",
    "merge_records",
    "FieldNormalizer",
    "normalize_company_name",
    "normalize_email",
    "normalize_phone",
    "bigram_dice",
    "generate_variations",
]
