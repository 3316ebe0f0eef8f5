"""
Usage scaling.

Remaps raw prompt usage of a large-context backend onto the smaller window
the client believes it has. Small conversations pass through untouched;
larger ones are compressed early and released late, so the client's own
context-pressure heuristics fire near its nominal limit.

Display curve (raw ratio -> display ratio):
1. [0, 0.5]     - ratio * 0.6, aggressive compression
2. (0.5, 0.7]   - 0.3 -> 0.5, linear
3. (0.7, 0.85]  - 0.5 -> 0.7, linear
4. (0.85, inf)  - 0.7 -> 0.97, linear, clamped at 0.97
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

SCALING_THRESHOLD = 30_000  # Raw tokens at or below this are never scaled
TARGET_MAX = 195_000  # Just under the client's 200k window
MAX_DISPLAY_RATIO = 0.97


@dataclass(frozen=True)
class ScalingObservation:
    """Diagnostic snapshot of one applied scaling."""
    raw_tokens: int
    context_limit: int
    ratio: float
    scaled_total: int
    display_ratio: float

    @property
    def compression(self) -> float:
        """How many raw tokens each displayed token stands for."""
        if self.scaled_total == 0:
            return float("inf")
        return self.raw_tokens / self.scaled_total


ScalingObserver = Callable[[ScalingObservation], None]


def log_scaling(observation: ScalingObservation) -> None:
    """Default observer: log the scaling at DEBUG level."""
    logger.debug(
        "[scaling] raw=%d (%.1f%%) display=%d (%.1f%%) compression=%.1fx",
        observation.raw_tokens,
        observation.ratio * 100,
        observation.scaled_total,
        observation.display_ratio * 100,
        observation.compression,
    )


def display_ratio(ratio: float) -> float:
    """Map a raw usage ratio to the client-visible ratio.

    The map is continuous and non-decreasing. The input ratio is not
    clamped (it may exceed 1.0); only the output is capped at 0.97.
    """
    if ratio <= 0.5:
        return ratio * 0.6
    if ratio <= 0.7:
        progress = (ratio - 0.5) / 0.2
        return 0.3 + progress * 0.2
    if ratio <= 0.85:
        progress = (ratio - 0.7) / 0.15
        return 0.5 + progress * 0.2
    progress = (ratio - 0.85) / 0.15
    return min(MAX_DISPLAY_RATIO, 0.7 + progress * 0.27)


def scale(
    raw_prompt_tokens: int,
    context_limit: int,
    scaling_enabled: bool,
    observer: Optional[ScalingObserver] = log_scaling
) -> int:
    """Compute the scaled prompt total shown to the client.

    Args:
        raw_prompt_tokens: Prompt tokens reported by the backend
        context_limit: Backend context limit for the active model
        scaling_enabled: Whether scaling is switched on
        observer: Called with a ScalingObservation when scaling is applied

    Returns:
        Scaled total, truncated toward zero. Equal to raw_prompt_tokens when
        scaling is disabled or the raw count is at or below the threshold.
    """
    if not scaling_enabled or raw_prompt_tokens <= SCALING_THRESHOLD:
        return raw_prompt_tokens

    # A missing limit counts as fully used; segment 4 clamps it
    ratio = raw_prompt_tokens / context_limit if context_limit > 0 else math.inf
    # int() truncates toward zero; downstream thresholds assume truncation
    scaled_total = int(display_ratio(ratio) * TARGET_MAX)

    if observer is not None:
        _notify(observer, ScalingObservation(
            raw_tokens=raw_prompt_tokens,
            context_limit=context_limit,
            ratio=ratio,
            scaled_total=scaled_total,
            display_ratio=scaled_total / TARGET_MAX,
        ))

    return scaled_total


def _notify(observer: ScalingObserver, observation: ScalingObservation) -> None:
    """Hand an observation to the observer without affecting the result."""
    try:
        observer(observation)
    except Exception:
        logger.exception("Scaling observer failed")
