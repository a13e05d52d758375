"""
Catalog core: merge engine, local overrides, category projection.
"""
from .engine import ProductMergeEngine
from .merge import choose_overrides, merge
from .overrides import LocalOverrideStore
from .projector import GroupedView, project

__all__ = [
    "ProductMergeEngine", "LocalOverrideStore",
    "merge", "choose_overrides",
    "GroupedView", "project",
]
