"""Gemini multimodal input token calculator.

The session, aggregator and configuration live in their own submodules
(calculator.session, calculator.aggregator, calculator.configuration) and
are imported from there; this package only re-exports the shared types.
"""

from .shared import (
    BreakdownBucket,
    ContentCategory,
    ContentItem,
    ExtractionState,
    ModelVersion,
    RawInput,
    ResolutionTier,
    TokenBreakdown,
)

__all__ = [
    "BreakdownBucket",
    "ContentCategory",
    "ContentItem",
    "ExtractionState",
    "ModelVersion",
    "RawInput",
    "ResolutionTier",
    "TokenBreakdown",
]
