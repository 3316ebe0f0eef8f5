"""
Usage translation.

Turns raw backend usage into the client usage record: scales the prompt
total, then splits it between fresh and cached input in the raw proportion.
"""

from typing import Optional, Tuple

from .scaling import ScalingObserver, log_scaling, scale
from .token_counter import RawUsage, TranslatedUsage


def redistribute(
    scaled_total: int,
    raw_prompt_tokens: int,
    raw_cached_tokens: int
) -> Tuple[int, Optional[int]]:
    """Split a scaled total into fresh input and cache-read tokens.

    Args:
        scaled_total: Scaled prompt total
        raw_prompt_tokens: Raw prompt tokens from the backend
        raw_cached_tokens: Raw cached tokens from the backend

    Returns:
        (input_tokens, cache_read_tokens); cache_read_tokens is None when
        there were no raw prompt tokens. The two always sum to scaled_total.
    """
    if raw_prompt_tokens == 0:
        return scaled_total, None

    # Cached tokens are a subset of prompt tokens; larger backend counts are normalised
    cached = min(raw_cached_tokens, raw_prompt_tokens)
    cache_ratio = cached / raw_prompt_tokens
    cache_component = int(scaled_total * cache_ratio)
    input_component = max(0, scaled_total - cache_component)
    return input_component, cache_component


def translate_usage(
    raw: RawUsage,
    context_limit: int,
    scaling_enabled: bool,
    observer: Optional[ScalingObserver] = log_scaling
) -> TranslatedUsage:
    """Translate raw backend usage into client usage.

    Args:
        raw: Raw usage from the backend response
        context_limit: Context limit of the active model (see resolve_limit)
        scaling_enabled: Whether usage scaling is switched on
        observer: Diagnostic callback for applied scalings, or None

    Returns:
        TranslatedUsage ready for serialization
    """
    prompt_tokens = raw.prompt_tokens or 0
    cached_tokens = raw.cached_tokens or 0

    scaled_total = scale(prompt_tokens, context_limit, scaling_enabled, observer)
    input_tokens, cache_read_tokens = redistribute(scaled_total, prompt_tokens, cached_tokens)

    return TranslatedUsage(
        input_tokens=input_tokens,
        output_tokens=raw.output_tokens or 0,
        cache_read_tokens=cache_read_tokens,
        cache_creation_tokens=0,
        server_tool_use=None,
    )
