"""
Configuration management and loading.

Handles the model and scaling settings used when translating usage.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import yaml

from usage_bridge.core.limits import resolve_limit


@dataclass(frozen=True)
class BridgeConfig:
    """Translation settings for one backend model."""
    model: str
    scaling_enabled: bool = True

    def __post_init__(self):
        """Validate the model identifier is present."""
        if not self.model or not self.model.strip():
            raise ValueError("model is required and cannot be empty")

    @property
    def context_limit(self) -> int:
        """Context limit of the configured model."""
        return resolve_limit(self.model)


def load_bridge_config(path: str) -> BridgeConfig:
    """Load and validate bridge configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated BridgeConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Bridge config file not found: {path}")

    # Load YAML content
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    # Validate top-level structure
    allowed_top_keys = {'model', 'scaling'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    # Parse and validate model
    if 'model' not in raw_config:
        raise ValueError("Missing required 'model' setting")

    model = raw_config['model']
    if not isinstance(model, str) or not model.strip():
        raise ValueError("'model' must be a non-empty string")

    # Parse and validate scaling
    scaling_data = raw_config.get('scaling') or {}
    if not isinstance(scaling_data, dict):
        raise ValueError("'scaling' must be a dictionary")

    return BridgeConfig(
        model=model.strip(),
        scaling_enabled=_parse_scaling_enabled(scaling_data)
    )


def _parse_scaling_enabled(data: Dict) -> bool:
    """Parse and validate the scaling section.

    Args:
        data: Scaling configuration data

    Returns:
        Whether scaling is enabled (default True)

    Raises:
        ValueError: If configuration is invalid
    """
    allowed_keys = {'enabled'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in scaling: {unknown_keys}")

    enabled = data.get('enabled', True)
    if not isinstance(enabled, bool):
        raise ValueError("'enabled' in scaling must be true or false")

    return enabled
