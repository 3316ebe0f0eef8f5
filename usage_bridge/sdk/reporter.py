"""
Usage reporter.

Binds the translator to one backend model so each response's usage can be
translated with a single call.
"""

from typing import Any, Dict, Optional

from ..config.loader import BridgeConfig
from ..core.limits import resolve_limit
from ..core.scaling import ScalingObserver, log_scaling
from ..core.token_counter import RawUsage, TranslatedUsage
from ..core.translator import translate_usage


class UsageReporter:
    """Translates backend usage for a fixed model.

    The context limit is resolved once at construction. Reporting holds no
    state between calls, so one reporter may be shared across threads.
    """

    def __init__(
        self,
        model: str,
        scaling_enabled: bool = True,
        observer: Optional[ScalingObserver] = log_scaling
    ):
        """Initialize the reporter.

        Args:
            model: Backend model identifier (required)
            scaling_enabled: Whether usage scaling is switched on
            observer: Diagnostic callback for applied scalings, or None

        Raises:
            ValueError: If model is missing/empty
        """
        if not model or not model.strip():
            raise ValueError("model is required and cannot be empty")

        self.model = model
        self.scaling_enabled = scaling_enabled
        self.observer = observer
        self.context_limit = resolve_limit(model)

    @classmethod
    def from_config(
        cls,
        config: BridgeConfig,
        observer: Optional[ScalingObserver] = log_scaling
    ) -> "UsageReporter":
        """Create a reporter from loaded configuration."""
        return cls(
            model=config.model,
            scaling_enabled=config.scaling_enabled,
            observer=observer
        )

    def report(self, raw: RawUsage) -> TranslatedUsage:
        """Translate raw usage from one backend response."""
        return translate_usage(
            raw,
            context_limit=self.context_limit,
            scaling_enabled=self.scaling_enabled,
            observer=self.observer
        )

    def report_metadata(self, usage_metadata: Dict[str, Any]) -> Dict[str, Any]:
        """Translate a ``usageMetadata`` object into a client ``usage`` object.

        Raises:
            ValueError: If usage_metadata is malformed
        """
        raw = RawUsage.from_usage_metadata(usage_metadata)
        return self.report(raw).to_dict()
