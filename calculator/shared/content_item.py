"""Items submitted for estimation and the metadata extracted for them."""

import logging
import mimetypes
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .content_category import ContentCategory
from .model_version import ResolutionTier

logger = logging.getLogger(__name__)

__all__ = [
    "TextAttributes",
    "ImageAttributes",
    "VideoAttributes",
    "AudioAttributes",
    "PdfAttributes",
    "ItemAttributes",
    "ExtractionState",
    "RawInput",
    "ContentItem",
    "guess_media_type",
]


# =============================================================================
# Extracted attributes (one shape per category)
# =============================================================================


@dataclass(frozen=True)
class TextAttributes:
    """Full text of a prose or source-code file."""

    content: str


@dataclass(frozen=True)
class ImageAttributes:
    width: int
    height: int


@dataclass(frozen=True)
class VideoAttributes:
    duration_seconds: float


@dataclass(frozen=True)
class AudioAttributes:
    duration_seconds: float


@dataclass(frozen=True)
class PdfAttributes:
    page_count: int


ItemAttributes = Union[TextAttributes, ImageAttributes, VideoAttributes, AudioAttributes, PdfAttributes]

ATTRIBUTE_TYPES: dict[ContentCategory, type] = {
    ContentCategory.TEXT: TextAttributes,
    ContentCategory.CODE: TextAttributes,
    ContentCategory.IMAGE: ImageAttributes,
    ContentCategory.VIDEO: VideoAttributes,
    ContentCategory.AUDIO: AudioAttributes,
    ContentCategory.PDF: PdfAttributes,
}


class ExtractionState(str, Enum):
    """Where an item is in its metadata extraction lifecycle.

    Only READY items carry attributes; PENDING and FAILED items contribute
    zero tokens to a breakdown.
    """

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


# =============================================================================
# Raw input
# =============================================================================

# mimetypes maps some source extensions to media types (".ts" is MPEG-TS video)
_SOURCE_MIME_OVERRIDES = {
    ".ts": "text/x-typescript",
    ".tsx": "text/x-typescript",
    ".jsx": "text/javascript",
    ".rs": "text/x-rust",
    ".go": "text/x-go",
}


def guess_media_type(file_name: str) -> str:
    """Guess a declared media type from a file name, empty string if unknown."""
    suffix = Path(file_name).suffix.lower()
    if suffix in _SOURCE_MIME_OVERRIDES:
        return _SOURCE_MIME_OVERRIDES[suffix]
    mime_type, _ = mimetypes.guess_type(file_name)
    return mime_type or ""


@dataclass(frozen=True)
class RawInput:
    """A file handed to the calculator before classification.

    Attributes:
        name: Display name, used for code-extension classification
        media_type: Declared MIME type (may be empty)
        size: Size in bytes
        path: Location the metadata extractor reads from
    """

    name: str
    media_type: str
    size: int
    path: Optional[Path] = None

    @classmethod
    def from_path(cls, path: Union[str, Path], media_type: Optional[str] = None) -> "RawInput":
        """Describe a file on disk, guessing its media type from the name."""
        file_path = Path(path).expanduser()
        try:
            size = file_path.stat().st_size
        except OSError as e:
            # Unreadable files are still accepted; extraction will mark them failed
            logger.debug(f"Cannot stat {file_path}: {e}")
            size = 0
        if media_type is None:
            media_type = guess_media_type(file_path.name)
        return cls(name=file_path.name, media_type=media_type, size=size, path=file_path)


# =============================================================================
# Content item
# =============================================================================


@dataclass
class ContentItem:
    """One classified input unit tracked by a calculator session.

    The category is fixed at creation. Attributes arrive later, when metadata
    extraction completes, through mark_ready() or mark_failed().
    """

    name: str
    size: int
    category: ContentCategory
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: ExtractionState = ExtractionState.PENDING
    attributes: Optional[ItemAttributes] = None
    resolution_tier: Optional[ResolutionTier] = None
    video_fps: Optional[float] = None
    error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.state is ExtractionState.READY and self.attributes is not None

    def mark_ready(self, attributes: ItemAttributes) -> None:
        """Attach extracted attributes, which must match the item's category."""
        expected = ATTRIBUTE_TYPES[self.category]
        if not isinstance(attributes, expected):
            raise TypeError(
                f"Item '{self.name}' is {self.category.value} and expects {expected.__name__}, "
                f"got {type(attributes).__name__}"
            )
        self.attributes = attributes
        self.state = ExtractionState.READY
        self.error = None

    def mark_failed(self, error: str) -> None:
        self.attributes = None
        self.state = ExtractionState.FAILED
        self.error = error
