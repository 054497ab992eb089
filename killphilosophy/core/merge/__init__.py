from .merge_engine import MergeEngine, MergeResult

__all__ = ["MergeEngine", "MergeResult"]
