"""Configuration management

Configuration comes from a YAML file when one is present, with ``${VAR}``
placeholders expanded from the environment. Without a file the service is
configured from environment variables alone.
"""
import os
import re
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from nim_proxy.models.config import AppConfig

load_dotenv()


def expand_env_vars(value: str) -> str:
    """Expand environment variables in string. Supports ${VAR}, ${VAR:-default}, ${VAR:default}"""
    if not isinstance(value, str):
        return value

    pattern = r'\$\{([^}:]+)(?::-?([^}]*))?\}'
    return re.sub(pattern, lambda m: os.environ.get(m.group(1), m.group(2) or ''), value)


def expand_config_env_vars(config: Any) -> Any:
    """Recursively expand environment variables in config"""
    if isinstance(config, dict):
        return {k: expand_config_env_vars(v) for k, v in config.items()}
    elif isinstance(config, list):
        return [expand_config_env_vars(item) for item in config]
    elif isinstance(config, str):
        return expand_env_vars(config)
    return config


def str_to_bool(value: Any) -> bool:
    """Convert string representation of boolean to actual boolean"""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def config_from_env() -> dict:
    """Build a raw config dict from environment variables"""
    raw: dict = {
        'server': {
            'host': os.environ.get('HOST', '0.0.0.0'),
            'port': int(os.environ.get('PORT', '3000')),
        },
        'upstream': {
            'api_base': os.environ.get('NIM_API_BASE', 'https://integrate.api.nvidia.com/v1'),
            'api_key': os.environ.get('NIM_API_KEY'),
            'request_timeout_secs': int(os.environ.get('REQUEST_TIMEOUT_SECS', '300')),
            'verify_ssl': str_to_bool(os.environ.get('VERIFY_SSL', 'true')),
        },
        'logging': {
            'level': os.environ.get('LOG_LEVEL', 'INFO'),
            'file': os.environ.get('LOG_FILE') or None,
        },
    }
    return raw


def load_config(config_path: Optional[str] = 'config.yaml') -> AppConfig:
    """Load configuration from a YAML file, falling back to the environment"""
    if not config_path or not os.path.exists(config_path):
        return AppConfig(**config_from_env())

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f) or {}

    expanded_config = expand_config_env_vars(raw_config)
    upstream = expanded_config.get('upstream')
    if isinstance(upstream, dict):
        upstream['verify_ssl'] = str_to_bool(upstream.get('verify_ssl', True))
        # An unset ${NIM_API_KEY} expands to an empty string
        upstream['api_key'] = upstream.get('api_key') or None
    features = expanded_config.get('features')
    if isinstance(features, dict):
        expanded_config['features'] = {k: str_to_bool(v) for k, v in features.items()}

    return AppConfig(**expanded_config)


_cached_config: Optional[AppConfig] = None


def set_config(config: AppConfig) -> None:
    """Set the runtime configuration"""
    global _cached_config
    _cached_config = config


def clear_config_cache() -> None:
    """Clear the configuration cache"""
    global _cached_config
    _cached_config = None


def get_config() -> AppConfig:
    """Get cached configuration instance"""
    global _cached_config
    if _cached_config is None:
        config_path = os.environ.get('CONFIG_PATH', 'config.yaml')
        _cached_config = load_config(config_path)
    return _cached_config
