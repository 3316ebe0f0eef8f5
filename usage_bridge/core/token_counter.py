"""
Token counting and usage records.

Holds the raw backend usage counts and the translated client usage.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


# Backend usageMetadata keys -> RawUsage fields
METADATA_FIELDS = {
    "promptTokenCount": "prompt_tokens",
    "cachedContentTokenCount": "cached_tokens",
    "candidatesTokenCount": "output_tokens",
    "totalTokenCount": "total_tokens",
}


@dataclass(frozen=True)
class RawUsage:
    """Token counts as reported by the backend.

    Every count is optional; absent counts are treated as zero by the
    translator.
    """
    prompt_tokens: Optional[int] = None
    cached_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None  # informational only

    def __post_init__(self):
        """Validate token counts are non-negative."""
        for name in ("prompt_tokens", "cached_tokens", "output_tokens", "total_tokens"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be >= 0")

    @classmethod
    def from_usage_metadata(cls, data: Dict[str, Any]) -> "RawUsage":
        """Build raw usage from a backend ``usageMetadata`` object.

        Args:
            data: Decoded ``usageMetadata`` JSON object

        Returns:
            RawUsage with missing counts left as None

        Raises:
            ValueError: If data is not an object or a count is not an integer
        """
        if not isinstance(data, dict):
            raise ValueError("usageMetadata must be an object")

        counts = {}
        for key, field_name in METADATA_FIELDS.items():
            value = data.get(key)
            if value is None:
                continue
            # bool is an int subclass, reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"'{key}' must be an integer")
            counts[field_name] = value

        return cls(**counts)


@dataclass(frozen=True)
class TranslatedUsage:
    """Usage in the shape the client expects.

    ``cache_read_tokens`` is None only when the backend reported no prompt
    tokens. ``cache_creation_tokens`` is always 0 since the backend does not
    report cache writes.
    """
    input_tokens: int
    output_tokens: int
    cache_read_tokens: Optional[int] = None
    cache_creation_tokens: Optional[int] = 0
    server_tool_use: Optional[Any] = None

    @property
    def total_input_tokens(self) -> int:
        """Fresh plus cached input tokens (the scaled total)."""
        return self.input_tokens + (self.cache_read_tokens or 0)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the client ``usage`` object, omitting absent fields."""
        payload = {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "cache_read_input_tokens": self.cache_read_tokens,
            "cache_creation_input_tokens": self.cache_creation_tokens,
            "server_tool_use": self.server_tool_use,
        }
        return {key: value for key, value in payload.items() if value is not None}
