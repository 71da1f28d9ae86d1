"""Shared data types for the token calculator."""

from .content_category import BreakdownBucket, ContentCategory, bucket_for_category
from .content_item import (
    AudioAttributes,
    ContentItem,
    ExtractionState,
    ImageAttributes,
    ItemAttributes,
    PdfAttributes,
    RawInput,
    TextAttributes,
    VideoAttributes,
    guess_media_type,
)
from .model_version import ModelVersion, ResolutionTier
from .token_breakdown import DEFAULT_CONTEXT_WINDOW_TOKENS, TokenBreakdown

__all__ = [
    "AudioAttributes",
    "BreakdownBucket",
    "ContentCategory",
    "ContentItem",
    "DEFAULT_CONTEXT_WINDOW_TOKENS",
    "ExtractionState",
    "ImageAttributes",
    "ItemAttributes",
    "ModelVersion",
    "PdfAttributes",
    "RawInput",
    "ResolutionTier",
    "TextAttributes",
    "TokenBreakdown",
    "VideoAttributes",
    "bucket_for_category",
    "guess_media_type",
]
