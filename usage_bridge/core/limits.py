"""
Context limit lookup.

Maps backend model identifiers to their context window size.
"""

from dataclasses import dataclass
from typing import Tuple


PRO_CONTEXT_LIMIT = 2_097_152
FLASH_CONTEXT_LIMIT = 1_048_576
DEFAULT_CONTEXT_LIMIT = 1_048_576


@dataclass(frozen=True)
class ContextLimitRule:
    """Context limit for model identifiers containing a substring."""
    substring: str
    limit: int  # Tokens


@dataclass(frozen=True)
class ContextLimitTable:
    """Fixed, ordered table of context limits.

    Rules are checked in order; the first substring match wins.
    """
    rules: Tuple[ContextLimitRule, ...]
    default: int

    def get_limit(self, model: str) -> int:
        """Get the context limit for a model identifier.

        Matching is case-sensitive. Unknown identifiers get the default,
        so every string resolves to a limit.

        Args:
            model: Model identifier

        Returns:
            Context limit in tokens
        """
        for rule in self.rules:
            if rule.substring in model:
                return rule.limit
        return self.default


# "pro" is checked first so that identifiers naming both resolve to Pro
CONTEXT_LIMIT_TABLE = ContextLimitTable(
    rules=(
        ContextLimitRule(substring="pro", limit=PRO_CONTEXT_LIMIT),
        ContextLimitRule(substring="flash", limit=FLASH_CONTEXT_LIMIT),
    ),
    default=DEFAULT_CONTEXT_LIMIT,
)


def resolve_limit(model: str) -> int:
    """Resolve the context limit for the active model."""
    return CONTEXT_LIMIT_TABLE.get_limit(model)
