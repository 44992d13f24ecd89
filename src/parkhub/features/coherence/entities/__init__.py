"""Coherence entities."""

from .keys import EntityKind, CACHED_KINDS, cache_key
from .plan import InvalidationPlan, MutationScope

__all__ = ["EntityKind", "CACHED_KINDS", "cache_key", "InvalidationPlan", "MutationScope"]
