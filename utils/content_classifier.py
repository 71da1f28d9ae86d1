"""Classify raw inputs into content categories.

The declared media type decides first, matched exactly as given (no case
folding or synonym mapping); the file name only separates source code from
prose. Every input lands in exactly one category, with text as the
fallback.
"""

import logging

from calculator.shared import ContentCategory

logger = logging.getLogger(__name__)

# Source-code extensions billed at the denser code ratio (matched case-sensitively)
CODE_EXTENSIONS = (
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".py",
    ".html",
    ".css",
    ".json",
    ".java",
    ".cpp",
    ".c",
    ".rs",
    ".go",
)


def is_code_file(file_name: str) -> bool:
    return file_name.endswith(CODE_EXTENSIONS)


def classify_content(mime_type: str, file_name: str) -> ContentCategory:
    """Map a declared media type and file name to a content category.

    Rules, first match wins:
    1. image/* -> image
    2. video/* -> video
    3. audio/* -> audio
    4. application/pdf -> pdf
    5. known source-code extension -> code
    6. anything else -> text

    Args:
        mime_type: Declared MIME type as given, may be empty
        file_name: Display name of the file

    Returns:
        The content category; never raises
    """
    declared_mime = mime_type or ""

    if declared_mime.startswith("image/"):
        category = ContentCategory.IMAGE
    elif declared_mime.startswith("video/"):
        category = ContentCategory.VIDEO
    elif declared_mime.startswith("audio/"):
        category = ContentCategory.AUDIO
    elif declared_mime == "application/pdf":
        category = ContentCategory.PDF
    elif is_code_file(file_name or ""):
        category = ContentCategory.CODE
    else:
        category = ContentCategory.TEXT

    logger.debug("Classified %s (%s) as %s", file_name, mime_type or "no media type", category.value)
    return category
