"""
Data Context Loader

Loads and caches data interpretation rules from configuration files.

This module enables configuration-driven grouping without hardcoding field
names, month names or table presets in the codebase. Update
config/data_dictionary.yaml to change them; environment variables from
config.settings override the file.
"""
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional

import yaml

from config.settings import AppConfig, get_config
from src.core.error_taxonomy import ConfigurationError

logger = logging.getLogger(__name__)

# Find config directory
def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file
    src_core = Path(__file__).parent
    project_root = src_core.parent.parent
    config_dir = project_root / "config"

    if config_dir.exists():
        return config_dir

    # Try current working directory
    return Path.cwd() / "config"


class DataContext:
    """
    Loads and provides access to data interpretation rules.

    Usage:
        context = DataContext()
        date_field = context.get_date_field()
        names = context.get_month_names("de-DE")
        presets = context.get_aggregate_presets()
    """

    def __init__(self, config_dir: Path = None, app_config: AppConfig = None):
        """
        Initialize the data context.

        Args:
            config_dir: Path to config directory (auto-detected if None)
            app_config: Environment-driven settings (loaded if None)
        """
        self.app_config = app_config or get_config()
        if config_dir is None and self.app_config.config_dir:
            config_dir = Path(self.app_config.config_dir)
        self.config_dir = Path(config_dir) if config_dir else _get_config_dir()
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self):
        """Load configuration from YAML file."""
        yaml_path = self.config_dir / "data_dictionary.yaml"

        if yaml_path.exists():
            try:
                with open(yaml_path, 'r', encoding='utf-8') as f:
                    loaded = yaml.safe_load(f) or {}
                logger.info(f"Loaded data dictionary from {yaml_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Failed to load data dictionary: {e}")
                self._config = self._get_fallback_config()
                return
            self._validate_config(loaded, yaml_path)
            self._config = self._merge_fallback(loaded)
        else:
            logger.warning(f"Data dictionary not found at {yaml_path}. Using fallback.")
            self._config = self._get_fallback_config()

    def _merge_fallback(self, loaded: Dict[str, Any]) -> Dict[str, Any]:
        """Fill sections the file leaves out from the fallback config."""
        fallback = self._get_fallback_config()
        merged = dict(loaded)
        for section, default in fallback.items():
            if merged.get(section) is None:
                logger.debug(f"Data dictionary has no '{section}' section, using built-in default")
                merged[section] = default
        # Configured tables extend the built-in English one
        locale_config = dict(merged["locale"])
        tables = dict(fallback["locale"]["month_names"])
        tables.update(locale_config.get("month_names") or {})
        locale_config["month_names"] = tables
        merged["locale"] = locale_config
        return merged

    @staticmethod
    def _validate_config(config: Any, source: Path):
        """
        Check the shape of a loaded data dictionary.

        Raises:
            ConfigurationError: if a section has the wrong structure
        """
        def invalid(message: str):
            return ConfigurationError(f"{source}: {message}", context={"path": str(source)})

        if not isinstance(config, dict):
            raise invalid(f"expected a mapping at the top level, got {type(config).__name__}")

        fields = config.get("fields")
        if fields is not None and not isinstance(fields, dict):
            raise invalid("'fields' must be a mapping of logical name to field name")

        locale_config = config.get("locale")
        if locale_config is not None:
            if not isinstance(locale_config, dict):
                raise invalid("'locale' must be a mapping")
            tables = locale_config.get("month_names")
            if tables is not None:
                if not isinstance(tables, dict):
                    raise invalid("'locale.month_names' must map locale tags to lists")
                for tag, names in tables.items():
                    if not isinstance(names, list):
                        raise invalid(f"month names for '{tag}' must be a list")

        aggregates = config.get("aggregates")
        if aggregates is not None:
            if not isinstance(aggregates, list):
                raise invalid("'aggregates' must be a list of {title, keys} entries")
            for preset in aggregates:
                if not isinstance(preset, dict) or not isinstance(preset.get("keys", []), list):
                    raise invalid(f"aggregate preset {preset!r} needs a title and a list of keys")

    def _get_fallback_config(self) -> Dict[str, Any]:
        """Return fallback configuration if YAML can't be loaded."""
        return {
            "fields": {
                "date": "date",
                "amount": "price",
                "label": "name",
            },
            "locale": {
                "default": "en-US",
                "month_names": {
                    "en": [
                        "January", "February", "March", "April", "May", "June",
                        "July", "August", "September", "October", "November", "December",
                    ],
                },
            },
            "aggregates": [],
        }

    # =========================================================================
    # FIELDS
    # =========================================================================

    def _field(self, name: str, default: str) -> str:
        return (self._config.get("fields") or {}).get(name) or default

    def get_date_field(self) -> str:
        """Field holding the record date used by year/month/quarter keys."""
        return self.app_config.grouping.date_field or self._field("date", "date")

    def get_amount_field(self) -> str:
        """Numeric field summed into every group."""
        return self.app_config.grouping.amount_field or self._field("amount", "price")

    def get_label_field(self) -> str:
        """Field used to order ungrouped records."""
        return self._field("label", "name")

    # =========================================================================
    # LOCALE
    # =========================================================================

    def get_default_locale(self) -> str:
        locale_config = self._config.get("locale") or {}
        return self.app_config.grouping.default_locale or locale_config.get("default") or "en-US"

    def get_month_name_tables(self) -> Dict[str, List[str]]:
        """All configured month-name tables keyed by lowercase locale tag."""
        locale_config = self._config.get("locale") or {}
        tables = locale_config.get("month_names") or {}
        return {str(tag).lower(): [str(n) for n in names] for tag, names in tables.items()}

    def get_month_names(self, locale_tag: str) -> Optional[List[str]]:
        """
        Get the twelve long month names for a locale tag.

        "de-DE" falls back to "de" when no region-specific table exists.

        Returns:
            List of 12 names, or None if the locale is not configured
        """
        tables = self.get_month_name_tables()
        tag = locale_tag.replace("_", "-").lower()
        candidates = [tag, tag.split("-")[0]]
        for candidate in candidates:
            names = tables.get(candidate)
            if names:
                return names
        return None

    # =========================================================================
    # PRESETS
    # =========================================================================

    def get_aggregate_presets(self) -> List[Dict[str, Any]]:
        """Raw aggregate presets ({title, keys}) from the data dictionary."""
        return list(self._config.get("aggregates") or [])

    def get_field_mappings(self) -> Dict[str, str]:
        """
        Get a dictionary of logical field names to actual field names.

        Returns:
            Dict mapping logical names to actual record field names
        """
        return {
            "date": self.get_date_field(),
            "amount": self.get_amount_field(),
            "label": self.get_label_field(),
        }


# Singleton instance
_data_context: Optional[DataContext] = None

def get_data_context() -> DataContext:
    """Get the configured data context instance."""
    global _data_context
    if _data_context is None:
        _data_context = DataContext()
    return _data_context

def reset_data_context():
    """Reset the data context (useful for testing or reloading config)."""
    global _data_context
    _data_context = None
