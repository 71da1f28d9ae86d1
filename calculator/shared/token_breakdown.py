"""Categorized token totals produced by the aggregator."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .content_category import BreakdownBucket

__all__ = ["TokenBreakdown", "DEFAULT_CONTEXT_WINDOW_TOKENS"]

# Reference context size used for the usage percentage readout
DEFAULT_CONTEXT_WINDOW_TOKENS = 128_000


@dataclass(frozen=True)
class TokenBreakdown:
    """Snapshot of estimated input tokens.

    per_category always holds exactly the five BreakdownBucket keys (as plain
    strings) and total is their sum. per_category is a read-only view, so a
    published snapshot cannot be changed by whoever receives it; a session
    publishes a new one on every recomputation.
    """

    total: int
    per_category: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "per_category", MappingProxyType(dict(self.per_category)))

    @classmethod
    def from_buckets(cls, buckets: dict[BreakdownBucket, int]) -> "TokenBreakdown":
        per_category = {bucket.value: int(buckets.get(bucket, 0)) for bucket in BreakdownBucket}
        return cls(total=sum(per_category.values()), per_category=per_category)

    def __getitem__(self, bucket: str) -> int:
        return self.per_category[BreakdownBucket(bucket).value]

    def context_usage_percent(self, context_window: int = DEFAULT_CONTEXT_WINDOW_TOKENS) -> float:
        """Share of a context window this input would occupy, in percent."""
        if context_window <= 0:
            raise ValueError(f"Context window must be positive, got {context_window}")
        return self.total / context_window * 100

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "breakdown": dict(self.per_category)}
