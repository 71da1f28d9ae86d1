"""Gemini token estimation formulas.

Pure functions converting extracted item metadata plus a model version into an
input token count. The formulas are documented heuristics, not a tokenizer:

- Text: ~4 characters per token for prose, ~3.25 for source code
  (0.7 tokens per character for CJK text)
- Images (Gemini 2.5): 258 tokens up to 384x384, else 258 per 768x768 tile
- Images (Gemini 3.0): flat cost per resolution tier (280 / 560 / 1120)
- PDFs: one image per page, billed like an image under either model
- Videos (Gemini 2.5): 263 tokens per second
- Videos (Gemini 3.0): 70 tokens per sampled frame
- Audio: 32 tokens per second (also added for the audio track of a video)

Every partial token is rounded up, since a model bills any partial token.

Reference: https://ai.google.dev/gemini-api/docs/tokens
"""

import math

from calculator.shared import ModelVersion, ResolutionTier

# Gemini 2.5: fixed tiling
GEMINI_2_5_IMAGE_COST = 258
GEMINI_2_5_SMALL_IMAGE_MAX_SIDE = 384  # Both sides at or below this fit in a single tile
GEMINI_2_5_TILE_SIZE = 768
GEMINI_2_5_VIDEO_TOKENS_PER_SECOND = 263

# Gemini 3.0: resolution tiers
GEMINI_3_0_IMAGE_TIERS: dict[ResolutionTier, int] = {
    ResolutionTier.LOW: 280,
    ResolutionTier.MEDIUM: 560,
    ResolutionTier.HIGH: 1120,
}
GEMINI_3_0_VIDEO_TOKENS_PER_FRAME = 70

# Model-independent
AUDIO_TOKENS_PER_SECOND = 32

# Text heuristics
CHARS_PER_TOKEN_TEXT = 4.0
CHARS_PER_TOKEN_CODE = 3.25
TOKENS_PER_CHAR_CJK = 0.7


def tier_tokens(tier: ResolutionTier) -> int:
    """Return the flat Gemini 3.0 cost of one image at the given tier."""
    return GEMINI_3_0_IMAGE_TIERS[ResolutionTier(tier)]


def calculate_text_tokens(content: str, is_code: bool = False, is_cjk: bool = False) -> int:
    """Estimate tokens for a text or source-code string.

    Args:
        content: Full text content
        is_code: Use the denser source-code ratio (3.25 characters per token)
        is_cjk: Use the CJK multiplier (0.7 tokens per character); takes
            precedence over is_code

    Returns:
        Token count, 0 for empty content
    """
    length = len(content)
    if not length:
        return 0

    if is_cjk:
        return math.ceil(length * TOKENS_PER_CHAR_CJK)
    if is_code:
        return math.ceil(length / CHARS_PER_TOKEN_CODE)
    return math.ceil(length / CHARS_PER_TOKEN_TEXT)


def calculate_image_tokens(
    version: ModelVersion,
    width: int,
    height: int,
    tier: ResolutionTier = ResolutionTier.MEDIUM,
) -> int:
    """Estimate image tokens.

    Formula:
    - Gemini 2.5, width AND height <= 384px: 258 tokens
    - Gemini 2.5, otherwise: 768x768 tiles, tiles = ceil(w/768) * ceil(h/768), tokens = 258 * tiles
    - Gemini 3.0: the tier's flat cost; pixel dimensions are not consulted

    Callers pass positive dimensions; they are not validated here.
    """
    if version == ModelVersion.GEMINI_2_5:
        if width <= GEMINI_2_5_SMALL_IMAGE_MAX_SIDE and height <= GEMINI_2_5_SMALL_IMAGE_MAX_SIDE:
            return GEMINI_2_5_IMAGE_COST

        tiles_x = math.ceil(width / GEMINI_2_5_TILE_SIZE)
        tiles_y = math.ceil(height / GEMINI_2_5_TILE_SIZE)
        return tiles_x * tiles_y * GEMINI_2_5_IMAGE_COST

    return tier_tokens(tier)


def calculate_video_tokens(
    version: ModelVersion,
    duration_seconds: float,
    fps: float = 1.0,
    include_audio: bool = True,
) -> int:
    """Estimate video tokens, including the audio track by default.

    Formula:
    - Gemini 2.5: ceil(duration * 263)
    - Gemini 3.0: ceil(duration * fps) frames * 70
    - Audio track (both models): ceil(duration * 32)

    Args:
        version: Model generation
        duration_seconds: Video length in seconds
        fps: Frame sampling rate, only used by Gemini 3.0; must be > 0
        include_audio: Add the implicit audio-track cost

    Returns:
        Video tokens plus audio tokens
    """
    if version == ModelVersion.GEMINI_2_5:
        video_tokens = math.ceil(duration_seconds * GEMINI_2_5_VIDEO_TOKENS_PER_SECOND)
    else:
        total_frames = math.ceil(duration_seconds * fps)
        video_tokens = total_frames * GEMINI_3_0_VIDEO_TOKENS_PER_FRAME

    audio_tokens = calculate_audio_tokens(duration_seconds) if include_audio else 0

    return video_tokens + audio_tokens


def calculate_audio_tokens(duration_seconds: float) -> int:
    """Estimate audio tokens: 32 per second under every model version."""
    return math.ceil(duration_seconds * AUDIO_TOKENS_PER_SECOND)


def calculate_pdf_tokens(
    version: ModelVersion,
    page_count: int,
    tier: ResolutionTier = ResolutionTier.MEDIUM,
) -> int:
    """Estimate PDF tokens, billing each page as one image.

    Reference: https://ai.google.dev/gemini-api/docs/document-processing

    Formula:
    - Gemini 2.5: 258 tokens per page
    - Gemini 3.0: tier cost per page
    """
    if version == ModelVersion.GEMINI_2_5:
        return page_count * GEMINI_2_5_IMAGE_COST
    return page_count * tier_tokens(tier)
