"""Metadata extraction for files submitted to the calculator.

Reads only what the estimators need from a file:
- Text/code: full content (UTF-8, undecodable bytes replaced)
- Images: pixel dimensions via imagesize (header only, no decoding)
- PDFs: page count via pypdf
- Video/audio: duration via tinytag

Extraction is blocking file I/O. The calculator session runs it in a worker
thread per item so one slow or broken file never holds up the others.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import imagesize
import pypdf
from tinytag import TinyTag

from calculator.shared import (
    AudioAttributes,
    ContentCategory,
    ImageAttributes,
    ItemAttributes,
    PdfAttributes,
    RawInput,
    TextAttributes,
    VideoAttributes,
)
from utils.gemini_validators import (
    GeminiValidationError,
    validate_image_dimensions,
    validate_media_duration,
    validate_pdf_pages,
)

logger = logging.getLogger(__name__)


class MetadataExtractionError(ValueError):
    """Raised when a file's metadata cannot be read or parsed."""

    def __init__(self, message: str, file_name: str = ""):
        super().__init__(message)
        self.file_name = file_name


# =============================================================================
# Extractor Protocol
# =============================================================================


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for metadata extractors used by a calculator session."""

    def extract(self, raw: RawInput, category: ContentCategory) -> ItemAttributes:
        """Return the attributes for a classified input, or raise MetadataExtractionError."""
        ...


# =============================================================================
# File-based extractor
# =============================================================================


class FileMetadataExtractor:
    """Extracts metadata from files on the local filesystem."""

    def extract(self, raw: RawInput, category: ContentCategory) -> ItemAttributes:
        if raw.path is None:
            raise MetadataExtractionError(f"No file path to read for '{raw.name}'", raw.name)

        path = Path(raw.path)
        logger.debug(f"Extracting {category.value} metadata from {path}")

        if category in (ContentCategory.TEXT, ContentCategory.CODE):
            return TextAttributes(content=self.read_text(path))
        elif category == ContentCategory.IMAGE:
            width, height = self.read_image_dimensions(path)
            return ImageAttributes(width=width, height=height)
        elif category == ContentCategory.VIDEO:
            return VideoAttributes(duration_seconds=self.read_media_duration(path))
        elif category == ContentCategory.AUDIO:
            return AudioAttributes(duration_seconds=self.read_media_duration(path))
        elif category == ContentCategory.PDF:
            return PdfAttributes(page_count=self.read_pdf_page_count(path))

        raise MetadataExtractionError(f"Unsupported content category '{category}' for '{raw.name}'", raw.name)

    def read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except (FileNotFoundError, PermissionError, OSError) as e:
            raise _access_error("Text", path, e) from e

    def read_image_dimensions(self, path: Path) -> tuple[int, int]:
        """Read pixel dimensions from the image header.

        Raises:
            MetadataExtractionError: If the file is missing or not a recognized image
        """
        try:
            width, height = imagesize.get(str(path))
        except (FileNotFoundError, PermissionError, OSError) as e:
            raise _access_error("Image", path, e) from e
        except Exception as e:
            # Parsing issues in a truncated or corrupted header
            raise MetadataExtractionError(f"Cannot parse image header of {path.name}: {e}", path.name) from e

        # imagesize reports -1 for formats it does not recognize
        try:
            return validate_image_dimensions(width, height, path.name)
        except GeminiValidationError as e:
            raise MetadataExtractionError(str(e), path.name) from e

    def read_pdf_page_count(self, path: Path) -> int:
        """Count the pages of a PDF.

        Raises:
            MetadataExtractionError: If the file is missing, corrupted or empty
        """
        try:
            with open(path, "rb") as f:
                reader = pypdf.PdfReader(f)
                num_pages = len(reader.pages)
        except (FileNotFoundError, PermissionError, OSError) as e:
            raise _access_error("PDF", path, e) from e
        except Exception as e:
            # Parsing issues, encrypted or corrupted PDF
            raise MetadataExtractionError(f"Cannot read PDF {path.name}: {e}", path.name) from e

        try:
            return validate_pdf_pages(num_pages, path.name)
        except GeminiValidationError as e:
            raise MetadataExtractionError(str(e), path.name) from e

    def read_media_duration(self, path: Path) -> float:
        """Read the duration of an audio or video file in seconds.

        Raises:
            MetadataExtractionError: If the file is missing, unsupported or has no duration
        """
        try:
            tag = TinyTag.get(str(path))
        except (FileNotFoundError, PermissionError, OSError) as e:
            raise _access_error("Media", path, e) from e
        except Exception as e:
            # Unsupported container or corrupted stream
            raise MetadataExtractionError(f"Cannot read media metadata of {path.name}: {e}", path.name) from e

        try:
            return validate_media_duration(tag.duration, path.name)
        except GeminiValidationError as e:
            raise MetadataExtractionError(str(e), path.name) from e


def _access_error(kind: str, path: Path, error: OSError) -> MetadataExtractionError:
    """Build a file-access error with a specific message per failure."""
    if isinstance(error, FileNotFoundError):
        message = f"{kind} file not found: {path}"
    elif isinstance(error, PermissionError):
        message = f"Permission denied accessing {kind.lower()} file: {path}"
    else:
        message = f"Cannot access {kind.lower()} file {path}: {error}"
    return MetadataExtractionError(message, path.name)
