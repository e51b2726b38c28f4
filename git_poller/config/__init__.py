"""Configuration package.

Configuration Precedence (highest to lowest):
1. Explicit overrides
2. Environment variables (GIT_POLLER_*)
3. Config file (JSON object or CruiseControl-style <git> block)
4. Defaults
"""

from .config_loader import ConfigLoader, load_config
from .legacy import load_xml_block
from .models import GitSourceConfig

__all__ = [
    "ConfigLoader",
    "GitSourceConfig",
    "load_config",
    "load_xml_block",
]
