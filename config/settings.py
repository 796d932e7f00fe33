"""
Configuration settings for the Grouped Totals pipeline.

Key Design Principle: field names and locale come from environment variables
or the data dictionary, never hardcoded in the grouping code.
"""
import os
from dataclasses import dataclass, field
from typing import Optional

@dataclass
class GroupingConfig:
    """Record field names and locale used by the grouping pipeline."""
    # Empty string means "use the data dictionary value"
    date_field: str = field(default_factory=lambda: os.getenv("GROUPING_DATE_FIELD", ""))
    amount_field: str = field(default_factory=lambda: os.getenv("GROUPING_AMOUNT_FIELD", ""))
    default_locale: str = field(default_factory=lambda: os.getenv("GROUPING_LOCALE", ""))

@dataclass
class AppConfig:
    """Main application configuration."""
    grouping: GroupingConfig = field(default_factory=GroupingConfig)

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Optional path to an alternative data dictionary directory
    config_dir: Optional[str] = field(default_factory=lambda: os.getenv("GROUPING_CONFIG_DIR") or None)

def get_config() -> AppConfig:
    """Factory function to get application configuration."""
    return AppConfig()
