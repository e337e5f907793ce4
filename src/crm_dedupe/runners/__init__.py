from crm_dedupe.runners.local import LocalDedupePipeline

__all__ = ["LocalDedupePipeline"]
