from crm_dedupe.datasets.profiles import CRM_COLUMNS, CRM_FIELDS
from crm_dedupe.datasets.reference import LabeledCandidate, ReferenceDatasetGenerator

__all__ = ["CRM_COLUMNS", "CRM_FIELDS", "LabeledCandidate", "ReferenceDatasetGenerator"]
