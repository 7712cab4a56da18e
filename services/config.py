"""
Notebook core configuration - loaded from notebook_config.json.

This module handles loading, creating, and accessing the notebook_config.json
file which controls editor mimetypes and kernel subprocess settings.

load_config() creates the file with defaults if it doesn't exist yet.
get_config() never touches the disk when nothing was loaded; it falls back
to the built-in defaults.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "notebook_config.json"

# Default configuration - used when creating new config file
DEFAULT_CONFIG = {
    "mimetypes": {
        "languages": {
            "python": "text/x-python",
            "ipython": "text/x-ipython",
            "julia": "text/x-julia",
            "r": "text/x-rsrc",
            "javascript": "text/javascript",
            "comment": "Editor mimetype per language name or codemirror_mode"
        },
        "default_code": "text/plain",
        "markdown": "text/x-ipythongfm",
        "raw": "text/plain"
    },
    "kernel": {
        "startup_timeout": 10,
        "poll_interval": 0.05,
        "comment": "Seconds to wait for the kernel subprocess to report ready, and queue poll interval"
    }
}


@dataclass
class CoreConfig:
    """Parsed notebook core configuration."""
    # Editor mimetypes
    language_mimetypes: Dict[str, str] = field(default_factory=dict)
    default_code_mimetype: str = "text/plain"
    markdown_mimetype: str = "text/x-ipythongfm"
    raw_mimetype: str = "text/plain"

    # Kernel subprocess
    kernel_startup_timeout: float = 10
    kernel_poll_interval: float = 0.05

    # Raw config for reference
    raw_config: Dict[str, Any] = field(default_factory=dict)

    def mimetype_for_language(self, language: Optional[str]) -> str:
        """Get the editor mimetype for a language name or codemirror mode.

        Args:
            language: e.g. "python"; matched case-insensitively

        Returns:
            The configured mimetype, or the default code mimetype
        """
        if not language:
            return self.default_code_mimetype
        return self.language_mimetypes.get(language.lower(), self.default_code_mimetype)


# Module-level cached config
_config: Optional[CoreConfig] = None
_config_path: Optional[Path] = None


def _parse_config(raw: Dict[str, Any]) -> CoreConfig:
    """Parse raw JSON config into CoreConfig."""
    config = CoreConfig(raw_config=raw)

    mimetypes = raw.get("mimetypes", {})
    # Skip "comment" keys
    config.language_mimetypes = {
        k.lower(): v for k, v in mimetypes.get("languages", {}).items()
        if k != "comment"
    }
    config.default_code_mimetype = mimetypes.get("default_code", "text/plain")
    config.markdown_mimetype = mimetypes.get("markdown", "text/x-ipythongfm")
    config.raw_mimetype = mimetypes.get("raw", "text/plain")

    kernel = raw.get("kernel", {})
    config.kernel_startup_timeout = float(kernel.get("startup_timeout", 10))
    config.kernel_poll_interval = float(kernel.get("poll_interval", 0.05))

    return config


def _create_default_config(config_path: Path) -> Dict[str, Any]:
    """Create default config file and return the config dict."""
    logger.info(f"Creating default {CONFIG_FILENAME} at {config_path}")

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(DEFAULT_CONFIG, f, indent=2)

    return DEFAULT_CONFIG


def load_config(config_path: Optional[Path] = None, force_reload: bool = False) -> CoreConfig:
    """
    Load configuration from JSON file.

    Creates default config if file doesn't exist.

    Args:
        config_path: Path to config file. Defaults to ./notebook_config.json
        force_reload: If True, reload from disk even if cached

    Returns:
        Parsed CoreConfig
    """
    global _config, _config_path

    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
    config_path = Path(config_path)

    if _config is not None and not force_reload and _config_path == config_path:
        return _config

    _config_path = config_path

    if not config_path.exists():
        raw = _create_default_config(config_path)
    else:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            logger.info(f"Loaded {CONFIG_FILENAME} from {config_path}")
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse {config_path}: {e}, using defaults")
            raw = DEFAULT_CONFIG
        except OSError as e:
            logger.error(f"Failed to load {config_path}: {e}, using defaults")
            raw = DEFAULT_CONFIG

    _config = _parse_config(raw)
    return _config


def get_config() -> CoreConfig:
    """Get the current config, or the built-in defaults if none was loaded."""
    if _config is None:
        return _parse_config(DEFAULT_CONFIG)
    return _config


def reset_config_cache() -> None:
    """Reset cached config (useful for testing)."""
    global _config, _config_path
    _config = None
    _config_path = None
