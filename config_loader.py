"""Configuration loader with YAML, .env and environment variable support."""

import copy
import os
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml
from dotenv import load_dotenv


class ConfigurationMissing(ValueError):
    """Raised when a required configuration value is absent."""
    pass


DEFAULT_CONFIG: Dict[str, Any] = {
    'notion': {
        'api_key': None,
        'database_id': None,
        'base_url': 'https://api.notion.com/v1',
        'api_version': '2022-06-28',
    },
    'sync': {
        'published_only': False,
        'throttle_ms': 334,
        'default_doc_locale': 'en',
        'show_progress': True,
    },
    'export': {
        'content_root': 'src/content',
        'images_directory': 'public/images',
    },
    'converters': {
        'image_alt_fallback': 'CDV Group Valve Image is loading',
    },
    'advanced': {
        'request_timeout': 30,
        'max_retries': 3,
        'retry_backoff_factor': 2.0,
        'rate_limit': 0.0,
    },
    'logging': {},
}

# Environment variables consulted when the config file leaves a value unset
ENV_FALLBACKS = {
    'notion.api_key': 'NOTION_KEY',
    'notion.database_id': 'DATABASE_ID',
}


class ConfigLoader:
    """Handles loading and validation of configuration."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')
    DEFAULT_CONFIG_PATH = 'config.yaml'

    @classmethod
    def load(cls, config_path: Optional[str] = None, env_file: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from defaults, an optional YAML file and the environment.

        The .env file is loaded first so that ``${VAR}`` references in the YAML
        file and the environment fallbacks can see its values.

        Args:
            config_path: Path to YAML configuration file. When omitted, the
                default path is used only if it exists.
            env_file: Optional path to a .env file (default: search for .env)

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If an explicitly given config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if env_file:
            load_dotenv(env_file, override=False)
        else:
            load_dotenv(override=False)

        config_data: Dict[str, Any] = {}
        if config_path:
            if not os.path.exists(config_path):
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            config_data = cls._read_yaml(config_path)
        elif os.path.exists(cls.DEFAULT_CONFIG_PATH):
            config_data = cls._read_yaml(cls.DEFAULT_CONFIG_PATH)

        merged = _deep_merge(DEFAULT_CONFIG, config_data)
        merged = cls._substitute_env_vars_recursive(merged)

        for path, env_name in ENV_FALLBACKS.items():
            if not get_nested(merged, path):
                env_value = os.getenv(env_name)
                if env_value:
                    set_nested(merged, path, env_value)

        return merged

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ConfigurationMissing: If the API key or database id is absent
            ValueError: If any other value is invalid
        """
        cls._validate_required_field(config, 'notion.api_key', ENV_FALLBACKS['notion.api_key'])
        cls._validate_required_field(config, 'notion.database_id', ENV_FALLBACKS['notion.database_id'])

        base_url = get_nested(config, 'notion.base_url')
        if base_url:
            cls._validate_url(base_url, 'notion.base_url')

        throttle_ms = get_nested(config, 'sync.throttle_ms', 334)
        if not isinstance(throttle_ms, (int, float)) or throttle_ms < 0:
            raise ValueError("sync.throttle_ms must be a non-negative number")

        timeout = get_nested(config, 'advanced.request_timeout', 30)
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError("advanced.request_timeout must be a positive number")

        max_retries = get_nested(config, 'advanced.max_retries', 3)
        if not isinstance(max_retries, int) or max_retries < 0:
            raise ValueError("advanced.max_retries must be a non-negative integer")

        rate_limit = get_nested(config, 'advanced.rate_limit', 0.0)
        if not isinstance(rate_limit, (int, float)) or rate_limit < 0:
            raise ValueError("advanced.rate_limit must be a non-negative number")

        if not get_nested(config, 'export.content_root'):
            raise ValueError("export.content_root must not be empty")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = copy.deepcopy(config)

        for section in ('sync', 'export', 'logging'):
            if section not in merged:
                merged[section] = {}

        if getattr(args, 'published', False):
            merged['sync']['published_only'] = True

        if getattr(args, 'output_dir', None):
            merged['export']['content_root'] = args.output_dir

        if getattr(args, 'log_file', None):
            merged['logging']['file'] = args.log_file

        verbose = getattr(args, 'verbose', 0)
        if verbose >= 2:
            merged['logging']['level'] = 'DEBUG'
        elif verbose == 1:
            merged['logging']['level'] = 'INFO'

        return merged

    @staticmethod
    def _read_yaml(config_path: str) -> Dict[str, Any]:
        """Read a YAML file that must contain a mapping."""
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            return {}
        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")
        return config_data

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            var_name = match.group(1)
            env_value = os.getenv(var_name)
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_required_field(config: dict, field: str, env_name: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config, field)
        if value is None or value == '':
            raise ConfigurationMissing(
                f"Missing required configuration: {field} (set {env_name} in the environment or .env)"
            )

        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ConfigurationMissing(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )

    @staticmethod
    def _validate_url(url: str, field_name: str) -> None:
        """Validate URL format."""
        parsed = urlparse(url)
        if not parsed.scheme or parsed.scheme not in ['http', 'https']:
            raise ValueError(f"{field_name} must use http or https scheme: {url}")
        if not parsed.netloc:
            raise ValueError(f"{field_name} missing hostname: {url}")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "notion.api_key")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def set_nested(config: dict, path: str, value: Any) -> None:
    """Set a nested configuration value using dot notation, creating sections."""
    keys = path.split('.')
    target = config
    for key in keys[:-1]:
        target = target.setdefault(key, {})
    target[keys[-1]] = value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``base`` with ``override`` merged in recursively."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


__all__ = ['ConfigLoader', 'ConfigurationMissing', 'DEFAULT_CONFIG', 'get_nested', 'set_nested']
