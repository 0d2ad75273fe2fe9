"""Configuration loading utilities."""

import json
from pathlib import Path

from loguru import logger

from sploitbot.agent.tools.sploitus.client import DEFAULT_BASE_URL
from sploitbot.config.schema import Config


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".sploitbot" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            data = _migrate_config(data)
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to load config from {}: {}", path, e)
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(by_alias=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _migrate_config(data: dict) -> dict:
    """Migrate old config formats to current."""
    tools = data.setdefault("tools", {})

    # Move legacy tools.web.sploitus -> tools.sploitus
    web_cfg = tools.get("web")
    if isinstance(web_cfg, dict):
        legacy_sploitus = web_cfg.pop("sploitus", None)
        if legacy_sploitus and "sploitus" not in tools:
            tools["sploitus"] = legacy_sploitus
        if not web_cfg:
            tools.pop("web")

    # Rename legacy tools.sploitus.proxy -> tools.sploitus.proxyUrl
    sploitus_cfg = tools.setdefault("sploitus", {})
    legacy_proxy = sploitus_cfg.pop("proxy", None)
    if legacy_proxy and not sploitus_cfg.get("proxyUrl"):
        sploitus_cfg["proxyUrl"] = legacy_proxy

    # Fill default base URL when missing/empty
    if not sploitus_cfg.get("baseUrl") and not sploitus_cfg.get("base_url"):
        sploitus_cfg["baseUrl"] = DEFAULT_BASE_URL

    return data
