"""Content categories and the breakdown buckets they are reported under."""

from enum import Enum

__all__ = ["ContentCategory", "BreakdownBucket", "bucket_for_category"]


class ContentCategory(str, Enum):
    """Closed set of categories an input item can be classified into."""

    TEXT = "text"
    CODE = "code"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    PDF = "pdf"


class BreakdownBucket(str, Enum):
    """Keys of a token breakdown. Code shares the text bucket, PDF the image bucket."""

    TEXT = "text"
    IMAGES = "images"
    VIDEO = "video"
    AUDIO = "audio"
    OVERHEAD = "overhead"


_CATEGORY_BUCKETS: dict[ContentCategory, BreakdownBucket] = {
    ContentCategory.TEXT: BreakdownBucket.TEXT,
    ContentCategory.CODE: BreakdownBucket.TEXT,
    ContentCategory.IMAGE: BreakdownBucket.IMAGES,
    ContentCategory.PDF: BreakdownBucket.IMAGES,
    ContentCategory.VIDEO: BreakdownBucket.VIDEO,
    ContentCategory.AUDIO: BreakdownBucket.AUDIO,
}


def bucket_for_category(category: ContentCategory) -> BreakdownBucket:
    """Return the breakdown bucket a category's tokens are summed into."""
    return _CATEGORY_BUCKETS[category]
