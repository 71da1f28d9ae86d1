"""Fold per-item token estimates into a categorized breakdown."""

import logging
from collections.abc import Iterable
from typing import Optional

from calculator.configuration import CalculatorConfiguration
from calculator.shared import (
    BreakdownBucket,
    ContentCategory,
    ContentItem,
    ResolutionTier,
    TokenBreakdown,
    bucket_for_category,
)
from utils.gemini_token_estimator import (
    calculate_audio_tokens,
    calculate_image_tokens,
    calculate_pdf_tokens,
    calculate_text_tokens,
    calculate_video_tokens,
)

logger = logging.getLogger(__name__)

# Fixed per-request protocol overhead
PROTOCOL_OVERHEAD_TOKENS = 10


def _resolve_tier(item: ContentItem, configuration: CalculatorConfiguration) -> ResolutionTier:
    # Per-item tiers only matter under Gemini 3.0; the 2.5 formulas ignore the tier
    if configuration.model_version.uses_resolution_tiers and item.resolution_tier is not None:
        return item.resolution_tier
    return configuration.default_resolution_tier


def _resolve_fps(item: ContentItem, configuration: CalculatorConfiguration) -> float:
    # Per-item fps only matters when video is billed per sampled frame
    if configuration.model_version.samples_video_frames and item.video_fps is not None:
        return item.video_fps
    return configuration.video_fps


def estimate_item_tokens(item: ContentItem, configuration: CalculatorConfiguration) -> int:
    """Estimate one item's tokens under a configuration.

    Items whose metadata is not extracted yet (pending or failed), or whose
    required attributes are empty, contribute 0.
    """
    if not item.is_ready:
        return 0

    attributes = item.attributes
    version = configuration.model_version
    category = item.category

    if category in (ContentCategory.TEXT, ContentCategory.CODE):
        return calculate_text_tokens(attributes.content, is_code=category == ContentCategory.CODE)

    elif category == ContentCategory.IMAGE:
        if not attributes.width or not attributes.height:
            return 0
        return calculate_image_tokens(
            version, attributes.width, attributes.height, _resolve_tier(item, configuration)
        )

    elif category == ContentCategory.VIDEO:
        if not attributes.duration_seconds:
            return 0
        return calculate_video_tokens(version, attributes.duration_seconds, _resolve_fps(item, configuration))

    elif category == ContentCategory.AUDIO:
        if not attributes.duration_seconds:
            return 0
        return calculate_audio_tokens(attributes.duration_seconds)

    elif category == ContentCategory.PDF:
        if not attributes.page_count:
            return 0
        return calculate_pdf_tokens(version, attributes.page_count, _resolve_tier(item, configuration))

    raise ValueError(f"Unsupported content category: {category!r}")


def aggregate(
    items: Iterable[ContentItem],
    configuration: CalculatorConfiguration,
    per_item: Optional[dict[str, int]] = None,
) -> TokenBreakdown:
    """Sum item estimates into a breakdown and add the protocol overhead.

    Pure and order-independent: the same items and configuration always
    give an equal breakdown.

    Args:
        items: Classified items in any extraction state
        configuration: Settings to estimate under
        per_item: Optional dict filled with each item's token count, keyed by item id

    Returns:
        Breakdown whose overhead bucket is always PROTOCOL_OVERHEAD_TOKENS
    """
    buckets = {bucket: 0 for bucket in BreakdownBucket}
    item_count = 0

    for item in items:
        tokens = estimate_item_tokens(item, configuration)
        buckets[bucket_for_category(item.category)] += tokens
        if per_item is not None:
            per_item[item.id] = tokens
        item_count += 1

    buckets[BreakdownBucket.OVERHEAD] = PROTOCOL_OVERHEAD_TOKENS

    breakdown = TokenBreakdown.from_buckets(buckets)
    logger.debug(
        f"Aggregated {item_count} items under {configuration.model_version.value}: "
        f"{breakdown.total} tokens {breakdown.per_category}"
    )
    return breakdown
