"""
Unit tests for usage translation.

Tests cache redistribution, conservation, and record assembly.
"""

import pytest

from usage_bridge.core.scaling import scale
from usage_bridge.core.token_counter import RawUsage, TranslatedUsage
from usage_bridge.core.translator import redistribute, translate_usage

LIMIT = 1_000_000


def _translate(raw, context_limit=LIMIT, scaling_enabled=True):
    return translate_usage(raw, context_limit, scaling_enabled, observer=None)


class TestRedistribute:
    """Test splitting the scaled total into fresh and cached input."""

    def test_no_prompt_tokens(self):
        """Verify cache_read is absent when there were no prompt tokens."""
        assert redistribute(0, 0, 0) == (0, None)

    def test_no_cached_tokens(self):
        """Verify the whole total is fresh input without cache hits."""
        assert redistribute(58_500, 500_000, 0) == (58_500, 0)

    def test_all_cached(self):
        """Verify the whole total is cache reads when everything was cached."""
        assert redistribute(58_500, 500_000, 500_000) == (0, 58_500)

    def test_proportional_split(self):
        """Verify the split follows the raw cache ratio."""
        # 25% cached
        assert redistribute(100_000, 400_000, 100_000) == (75_000, 25_000)

    def test_cache_component_truncated(self):
        """Verify the cache share is truncated and the remainder is input."""
        # 1/3 of 100 = 33.33 -> 33
        assert redistribute(100, 300, 100) == (67, 33)

    def test_cached_above_prompt_is_clamped(self):
        """Verify malformed cache counts cannot break conservation."""
        input_tokens, cache_read = redistribute(1_000, 500, 800)
        assert input_tokens == 0
        assert cache_read == 1_000

    @pytest.mark.parametrize("scaled,prompt,cached", [
        (58_500, 500_000, 123_457),
        (189_150, 1_000_000, 999_999),
        (100, 100, 1),
        (7, 3, 2),
        (136_500, 850_000, 425_000),
    ])
    def test_conservation(self, scaled, prompt, cached):
        """Verify input plus cache read always equals the scaled total."""
        input_tokens, cache_read = redistribute(scaled, prompt, cached)
        assert input_tokens >= 0
        assert 0 <= cache_read <= scaled
        assert input_tokens + cache_read == scaled


class TestTranslateUsage:
    """Test full translation of raw usage."""

    def test_small_request_passthrough(self):
        """Verify small requests are reported unscaled."""
        raw = RawUsage(prompt_tokens=100, output_tokens=50, total_tokens=150)
        usage = _translate(raw)

        assert usage.input_tokens == 100
        assert usage.output_tokens == 50
        assert usage.cache_read_tokens == 0
        assert usage.cache_creation_tokens == 0
        assert usage.server_tool_use is None

    @pytest.mark.parametrize("raw_tokens,low,high", [
        (500_000, 55_000, 62_000),
        (700_000, 90_000, 105_000),
        (850_000, 130_000, 145_000),
        (1_000_000, 185_000, 190_001),
    ])
    def test_scaled_scenarios(self, raw_tokens, low, high):
        """Verify reported input at the curve's breakpoints."""
        raw = RawUsage(prompt_tokens=raw_tokens, output_tokens=10, total_tokens=raw_tokens + 10)
        usage = _translate(raw)

        assert low < usage.input_tokens < high
        assert usage.output_tokens == 10

    def test_empty_usage(self):
        """Verify missing counts default to zero."""
        usage = _translate(RawUsage())

        assert usage == TranslatedUsage(
            input_tokens=0,
            output_tokens=0,
            cache_read_tokens=None,
            cache_creation_tokens=0,
            server_tool_use=None
        )

    def test_cache_read_present_iff_prompt_tokens(self):
        """Verify cache_read presence follows raw prompt tokens."""
        assert _translate(RawUsage(prompt_tokens=0, cached_tokens=0)).cache_read_tokens is None
        assert _translate(RawUsage(prompt_tokens=1)).cache_read_tokens == 0

    def test_cached_share_scaled(self):
        """Verify cached tokens are scaled in proportion."""
        raw = RawUsage(prompt_tokens=800_000, cached_tokens=600_000, output_tokens=5)
        usage = _translate(raw)
        scaled_total = scale(800_000, LIMIT, True, observer=None)

        assert usage.total_input_tokens == scaled_total
        assert usage.cache_read_tokens == int(scaled_total * 0.75)
        assert usage.input_tokens == scaled_total - usage.cache_read_tokens

    def test_scaling_disabled_keeps_raw_counts(self):
        """Verify disabled scaling reports the raw split."""
        raw = RawUsage(prompt_tokens=800_000, cached_tokens=200_000, output_tokens=5)
        usage = _translate(raw, scaling_enabled=False)

        assert usage.input_tokens == 600_000
        assert usage.cache_read_tokens == 200_000

    def test_total_tokens_not_consumed(self):
        """Verify total_tokens has no effect on the result."""
        a = _translate(RawUsage(prompt_tokens=400_000, total_tokens=1))
        b = _translate(RawUsage(prompt_tokens=400_000, total_tokens=9_999_999))
        assert a == b

    @pytest.mark.parametrize("prompt", [0, 1, 30_000, 30_001, 250_000, 999_999, 3_000_000])
    @pytest.mark.parametrize("cached_share", [0.0, 0.1, 0.5, 1.0])
    def test_conservation(self, prompt, cached_share):
        """Verify reported input always sums to the scaled total."""
        cached = int(prompt * cached_share)
        usage = _translate(RawUsage(prompt_tokens=prompt, cached_tokens=cached))
        assert usage.total_input_tokens == scale(prompt, LIMIT, True, observer=None)

    def test_zero_limit_is_total(self):
        """Verify translation succeeds with a zero context limit."""
        usage = _translate(RawUsage(prompt_tokens=100_000, cached_tokens=50_000), context_limit=0)

        assert usage.total_input_tokens == 189_150
        assert usage.cache_read_tokens == 94_575

    def test_observer_passed_through(self):
        """Verify the observer sees scalings triggered by translation."""
        seen = []
        translate_usage(RawUsage(prompt_tokens=500_000), LIMIT, True, observer=seen.append)
        assert len(seen) == 1
