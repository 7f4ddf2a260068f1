"""
Snippet tooling configuration.

Settings are loaded from several sources with a clear priority order:

    1. Environment variables (highest priority) - for containerized deployments
    2. Config file (config/snippets.ini) - for static deployments
    3. Built-in defaults (lowest priority) - sensible fallbacks

Configuration is loaded once at module import time and cached. The
SnippetsConfig dataclass provides typed access to all settings.

Usage:
    from text_snippets.config import config

    print(config.content.root)
    print(config.logging.level)

Environment Variable Mapping:
    SNIPPETS_ROOT        -> content.root
    SNIPPETS_EXTENSIONS  -> content.extensions
    SNIPPETS_LOG_LEVEL   -> logging.level
"""

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Project root directory (contains src/, config/, data/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_FILE = CONFIG_DIR / "snippets.ini"
CONFIG_EXAMPLE = CONFIG_DIR / "snippets.example.ini"


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================


@dataclass
class ContentSettings:
    """Where snippet content files are read from."""

    root: str = "data/snippets"
    extensions: list[str] = field(default_factory=lambda: [".json", ".yaml", ".yml"])

    @property
    def absolute_root(self) -> Path:
        """Get absolute path to the content root."""
        p = Path(self.root)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["simple", "detailed"] = "simple"


@dataclass
class SnippetsConfig:
    """
    Complete snippet tooling configuration.

    Access via the module-level `config` singleton.
    """

    content: ContentSettings = field(default_factory=ContentSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def _parse_list(value: str) -> list[str]:
    """Parse a comma-separated string to list, stripping whitespace."""
    if not value or value.strip() == "":
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _load_from_ini(parser: configparser.ConfigParser, cfg: SnippetsConfig) -> None:
    """Load configuration from parsed INI file into SnippetsConfig."""
    # Content section
    if parser.has_section("content"):
        if parser.has_option("content", "root"):
            cfg.content.root = parser.get("content", "root")
        if parser.has_option("content", "extensions"):
            cfg.content.extensions = _parse_list(parser.get("content", "extensions"))

    # Logging section
    if parser.has_section("logging"):
        if parser.has_option("logging", "level"):
            cfg.logging.level = parser.get("logging", "level").upper()
        if parser.has_option("logging", "format"):
            val = parser.get("logging", "format").lower()
            if val in ("simple", "detailed"):
                cfg.logging.format = val  # type: ignore[assignment]


def _apply_env_overrides(cfg: SnippetsConfig) -> None:
    """Apply environment variable overrides to configuration."""
    if env_root := os.getenv("SNIPPETS_ROOT"):
        cfg.content.root = env_root
    if env_ext := os.getenv("SNIPPETS_EXTENSIONS"):
        cfg.content.extensions = _parse_list(env_ext)
    if env_log := os.getenv("SNIPPETS_LOG_LEVEL"):
        cfg.logging.level = env_log.upper()


def load_config() -> SnippetsConfig:
    """
    Load configuration from all sources with proper priority.

    Priority (highest wins):
        1. Environment variables
        2. config/snippets.ini
        3. config/snippets.example.ini (fallback for development)
        4. Built-in defaults

    Returns:
        SnippetsConfig: Fully populated configuration object.
    """
    cfg = SnippetsConfig()

    config_file = None
    if CONFIG_FILE.exists():
        config_file = CONFIG_FILE
    elif CONFIG_EXAMPLE.exists():
        config_file = CONFIG_EXAMPLE

    if config_file:
        parser = configparser.ConfigParser()
        parser.read(config_file)
        _load_from_ini(parser, cfg)

    _apply_env_overrides(cfg)

    return cfg


def reload_config() -> "SnippetsConfig":
    """
    Reload configuration from disk and environment.

    This updates the module-level `config` singleton.

    Returns:
        SnippetsConfig: The newly loaded configuration.
    """
    global config
    config = load_config()
    return config


# =============================================================================
# MODULE-LEVEL SINGLETON
# =============================================================================

config = load_config()


# =============================================================================
# LOGGING
# =============================================================================

_LOG_FORMATS = {
    "simple": "%(levelname)s: %(message)s",
    "detailed": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
}


def log_format(settings: LoggingSettings) -> str:
    """Return the ``logging`` format string for the configured style."""
    return _LOG_FORMATS[settings.format]
