"""Configuration management for memofix."""

from memofix.config.settings import MemofixConfig, load_config

__all__ = ["MemofixConfig", "load_config"]
