"""Configuration module for sploitbot."""

from sploitbot.config.loader import get_config_path, load_config
from sploitbot.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
