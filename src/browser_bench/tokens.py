"""Token and cost estimation."""

from __future__ import annotations

from browser_bench.config import Pricing
from browser_bench.images import (
    ImageMimeType,
    image_dimensions_from_base64,
    is_valid_mime_type,
)

# Pixels per image token. A rough approximation of vision tokenization,
# kept fixed so results stay comparable with earlier benchmark runs.
PIXELS_PER_TOKEN = 750

DEFAULT_PRICING = Pricing(input_per_million=3.0, output_per_million=15.0)

# Pricing per million tokens (USD)
PRICING: dict[str, Pricing] = {
    "claude-sonnet-4-20250514": DEFAULT_PRICING,
    "claude-sonnet-4-5": DEFAULT_PRICING,
    "claude-sonnet-4-6": DEFAULT_PRICING,
    "claude-opus-4-6": Pricing(input_per_million=5.0, output_per_million=25.0),
    "claude-haiku-4-5": Pricing(input_per_million=1.0, output_per_million=5.0),
}

validate_mime_type = is_valid_mime_type


def estimate_image_tokens(width: int, height: int) -> int:
    """ceil(width * height / 750), never rounded down."""
    return -(-(width * height) // PIXELS_PER_TOKEN)


def estimate_cost_usd(
    input_tokens: int,
    output_tokens: int,
    pricing: Pricing = DEFAULT_PRICING,
) -> float:
    return (
        input_tokens / 1_000_000 * pricing.input_per_million
        + output_tokens / 1_000_000 * pricing.output_per_million
    )


def image_tokens_from_base64(data: str, mime_type: ImageMimeType | str) -> int | None:
    """Estimated tokens for a base64 image, or None when it can't be measured."""
    if not validate_mime_type(mime_type):
        return None
    dimensions = image_dimensions_from_base64(data, mime_type)
    if dimensions is None:
        return None
    return estimate_image_tokens(dimensions.width, dimensions.height)


def pricing_for_model(model: str) -> Pricing:
    """Published rate for ``model``, or the Sonnet rate for unknown models."""
    return PRICING.get(model, DEFAULT_PRICING).model_copy()
