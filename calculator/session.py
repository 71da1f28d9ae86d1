"""
Calculator session: configuration and item collection with a live breakdown.

A session is the single owner of mutable state. Every mutation (a setting,
an added or removed item, a finished extraction, a per-item override) ends
with a full, synchronous recomputation of the breakdown. Nothing is updated
incrementally and no per-item result is cached across recomputations.

Metadata extraction is asynchronous. Items enter the collection as soon as
they are classified, in the PENDING state, and contribute nothing until
their extraction task finishes. A failed extraction leaves the item FAILED
with zero contribution; it never affects other items.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Callable, Optional, Union

from calculator.aggregator import aggregate
from calculator.configuration import CalculatorConfiguration
from calculator.shared import (
    ContentCategory,
    ContentItem,
    ExtractionState,
    ModelVersion,
    RawInput,
    ResolutionTier,
    TokenBreakdown,
)
from utils.content_classifier import classify_content
from utils.gemini_validators import GeminiValidationError, parse_resolution_tier, validate_video_fps
from utils.media_metadata import FileMetadataExtractor, MetadataExtractor

logger = logging.getLogger(__name__)

__all__ = ["TokenCalculatorSession"]

BreakdownListener = Callable[[TokenBreakdown], None]

# Distinguishes "leave unchanged" from "clear the override" in update_item()
_UNSET = object()

_TIERED_CATEGORIES = (ContentCategory.IMAGE, ContentCategory.PDF)


class TokenCalculatorSession:
    """Holds the calculator configuration and items, and keeps the breakdown current.

    Not thread-safe: a session is driven from a single event loop thread.
    Extraction work runs in worker threads, but results are applied back on
    the loop thread.
    """

    def __init__(
        self,
        configuration: Optional[CalculatorConfiguration] = None,
        extractor: Optional[MetadataExtractor] = None,
    ):
        self._configuration = configuration if configuration is not None else CalculatorConfiguration.from_env()
        self._extractor = extractor if extractor is not None else FileMetadataExtractor()
        self._items: dict[str, ContentItem] = {}
        self._raw_inputs: dict[str, RawInput] = {}
        self._in_flight: set[str] = set()
        self._listeners: list[BreakdownListener] = []
        self._item_tokens: dict[str, int] = {}
        self._breakdown = self._recompute()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def configuration(self) -> CalculatorConfiguration:
        return self._configuration

    @configuration.setter
    def configuration(self, configuration: CalculatorConfiguration) -> None:
        if not isinstance(configuration, CalculatorConfiguration):
            raise TypeError(f"Expected CalculatorConfiguration, got {type(configuration).__name__}")
        self._configuration = configuration
        logger.info(f"Configuration changed: {configuration.to_dict()}")
        self._recompute()

    @property
    def model_version(self) -> ModelVersion:
        return self._configuration.model_version

    @model_version.setter
    def model_version(self, value: Union[ModelVersion, str]) -> None:
        self.configuration = self._configuration.with_changes(model_version=value)

    @property
    def default_resolution_tier(self) -> ResolutionTier:
        return self._configuration.default_resolution_tier

    @default_resolution_tier.setter
    def default_resolution_tier(self, value: Union[ResolutionTier, str]) -> None:
        self.configuration = self._configuration.with_changes(default_resolution_tier=value)

    @property
    def video_fps(self) -> float:
        return self._configuration.video_fps

    @video_fps.setter
    def video_fps(self, value: float) -> None:
        self.configuration = self._configuration.with_changes(video_fps=value)

    # ------------------------------------------------------------------
    # Breakdown
    # ------------------------------------------------------------------

    @property
    def breakdown(self) -> TokenBreakdown:
        """Snapshot as of the last recomputation."""
        return self._breakdown

    @property
    def is_processing(self) -> bool:
        """True while any metadata extraction is in flight."""
        return bool(self._in_flight)

    def item_tokens(self, item_id: str) -> int:
        """Tokens an item contributed to the current breakdown."""
        if item_id not in self._items:
            raise KeyError(f"Unknown item id: {item_id}")
        return self._item_tokens.get(item_id, 0)

    def add_listener(self, listener: BreakdownListener) -> None:
        """Call listener with every new breakdown snapshot."""
        self._listeners.append(listener)

    def remove_listener(self, listener: BreakdownListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _recompute(self) -> TokenBreakdown:
        item_tokens: dict[str, int] = {}
        breakdown = aggregate(self._items.values(), self._configuration, per_item=item_tokens)
        self._item_tokens = item_tokens
        self._breakdown = breakdown
        for listener in list(self._listeners):
            listener(breakdown)
        return breakdown

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    @property
    def items(self) -> tuple[ContentItem, ...]:
        """Items in submission order."""
        return tuple(self._items.values())

    def get_item(self, item_id: str) -> Optional[ContentItem]:
        return self._items.get(item_id)

    def add(self, raw_inputs: Iterable[RawInput]) -> list[ContentItem]:
        """Classify and append inputs as PENDING items.

        Metadata is not read here; call extract() (or use add_files()) to
        populate attributes.
        """
        added = []
        for raw in raw_inputs:
            category = classify_content(raw.media_type, raw.name)
            item = ContentItem(name=raw.name, size=raw.size, category=category)
            self._items[item.id] = item
            self._raw_inputs[item.id] = raw
            added.append(item)
            logger.info(f"Added {item.name} as {category.value} ({item.size} bytes)")

        if added:
            self._recompute()
        return added

    async def add_files(self, raw_inputs: Iterable[RawInput]) -> list[ContentItem]:
        """Add inputs and extract their metadata concurrently."""
        added = self.add(raw_inputs)
        await self.extract(item.id for item in added)
        return added

    async def extract(self, item_ids: Optional[Iterable[str]] = None) -> None:
        """Run metadata extraction for the given items (default: all PENDING items).

        Each item is extracted independently; the breakdown is recomputed as
        each one finishes, in whatever order they complete.
        """
        if item_ids is None:
            ids = [item.id for item in self._items.values() if item.state is ExtractionState.PENDING]
        else:
            ids = [item_id for item_id in item_ids if item_id in self._items]

        ids = [item_id for item_id in dict.fromkeys(ids) if item_id not in self._in_flight]
        if not ids:
            return

        # Claimed before any await so a concurrent extract() skips these items
        self._in_flight.update(ids)
        await asyncio.gather(*(self._extract_item(item_id) for item_id in ids))

    async def _extract_item(self, item_id: str) -> None:
        item = self._items.get(item_id)
        if item is None:
            # Removed before its task started
            self._in_flight.discard(item_id)
            return
        raw = self._raw_inputs[item_id]

        attributes = None
        error = None
        try:
            attributes = await asyncio.to_thread(self._extractor.extract, raw, item.category)
        except Exception as e:
            # One unreadable file must not abort the others
            logger.warning(f"Metadata extraction failed for {raw.name}: {e}")
            error = str(e) or type(e).__name__
        finally:
            self._in_flight.discard(item_id)

        if self._items.get(item_id) is not item:
            logger.debug(f"Discarding extraction result for removed item {raw.name}")
            return

        if error is None:
            try:
                item.mark_ready(attributes)
            except TypeError as e:
                logger.warning(f"Extractor returned mismatched attributes for {raw.name}: {e}")
                item.mark_failed(str(e))
            else:
                logger.debug(f"Extracted {item.category.value} metadata for {raw.name}: {attributes}")
        else:
            item.mark_failed(error)

        self._recompute()

    def remove(self, item_id: str) -> bool:
        """Remove an item by id. Returns False if no such item exists."""
        item = self._items.pop(item_id, None)
        if item is None:
            return False

        self._raw_inputs.pop(item_id, None)
        logger.info(f"Removed {item.name}")
        self._recompute()
        return True

    def clear(self) -> None:
        """Remove every item."""
        if not self._items:
            return
        self._items.clear()
        self._raw_inputs.clear()
        logger.info("Cleared all items")
        self._recompute()

    def update_item(
        self,
        item_id: str,
        *,
        resolution_tier: Union[ResolutionTier, str, None, object] = _UNSET,
        video_fps: Union[float, None, object] = _UNSET,
    ) -> ContentItem:
        """Set or clear per-item overrides.

        Args:
            item_id: Item to update
            resolution_tier: Tier for an image or PDF (None clears the override)
            video_fps: Sampling rate for a video (None clears the override)

        Raises:
            KeyError: If the item does not exist
            GeminiValidationError: If an override is invalid or does not apply
                to the item's category
        """
        item = self._items.get(item_id)
        if item is None:
            raise KeyError(f"Unknown item id: {item_id}")

        new_tier = item.resolution_tier
        new_fps = item.video_fps

        if resolution_tier is not _UNSET:
            if resolution_tier is not None and item.category not in _TIERED_CATEGORIES:
                raise GeminiValidationError(
                    f"Resolution tier applies to images and PDFs, not {item.category.value} item '{item.name}'"
                )
            new_tier = parse_resolution_tier(resolution_tier) if resolution_tier is not None else None

        if video_fps is not _UNSET:
            if video_fps is not None and item.category != ContentCategory.VIDEO:
                raise GeminiValidationError(
                    f"Video FPS applies to videos, not {item.category.value} item '{item.name}'"
                )
            new_fps = validate_video_fps(video_fps) if video_fps is not None else None

        item.resolution_tier = new_tier
        item.video_fps = new_fps
        logger.info(f"Updated {item.name}: resolution_tier={new_tier}, video_fps={new_fps}")
        self._recompute()
        return item
