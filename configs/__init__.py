"""
Backtest configuration management.

Loads the JSON configuration files shipped in this directory.
"""

import json
import logging
from typing import Dict, Any, Optional
from pathlib import Path
import jsonschema

logger = logging.getLogger(__name__)

CONFIG_FILES = {
    'backtest': 'backtest.json',
}

SCHEMA_FILES = {
    'backtest': 'backtest.schema.json',
}


class ConfigLoader:
    """Loads and manages backtest configurations."""

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Directory containing configuration files
                (defaults to this package's directory)
        """
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).resolve().parent
        self.configs = {}
        self._load_all_configs()

    def _load_all_configs(self) -> None:
        """Load all configuration files."""
        for config_name in CONFIG_FILES:
            self.configs[config_name] = self._load(config_name)

    def _load(self, config_name: str) -> Dict[str, Any]:
        config_path = self.config_dir / CONFIG_FILES[config_name]
        if not config_path.exists():
            # Silent default; rely on validation when used
            return {}
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
            schema_path = self.config_dir / SCHEMA_FILES.get(config_name, '')
            if config_name in SCHEMA_FILES and schema_path.exists():
                with open(schema_path, 'r') as sf:
                    schema = json.load(sf)
                jsonschema.validate(instance=config, schema=schema)
            return config
        except (OSError, ValueError, jsonschema.ValidationError) as e:
            # Store empty to force fail-fast at usage sites
            logger.warning("Config load error", extra={
                "config": config_name,
                "path": str(config_path),
                "error": str(e),
            })
            return {}

    def get_config(self, config_name: str) -> Dict[str, Any]:
        """
        Get configuration by name.

        Args:
            config_name: Name of configuration

        Returns:
            Configuration dictionary
        """
        return self.configs.get(config_name, {})

    def get_all_configs(self) -> Dict[str, Dict[str, Any]]:
        return self.configs.copy()

    def reload_config(self, config_name: str) -> None:
        """
        Reload specific configuration.

        Args:
            config_name: Name of configuration to reload
        """
        if config_name in CONFIG_FILES:
            self.configs[config_name] = self._load(config_name)


# Global configuration loader instance
config_loader = ConfigLoader()
