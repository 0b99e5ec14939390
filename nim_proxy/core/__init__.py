"""Core functionality"""
from .config import load_config, get_config, clear_config_cache

__all__ = ["load_config", "get_config", "clear_config_cache"]
