#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration management for tagfill.
Loads a YAML config with environment variable support.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..errors import ConfigError

DEFAULT_CONFIG_PATH = "tagfill.yaml"


def _default_config() -> Dict[str, Any]:
    """Return default configuration"""
    return {
        'library': {
            'root': './music',
            'extensions': ['.mp3']
        },
        'sources': {
            'primary': 'musicbrainz',
            'fallback': ['itunes']
        },
        'covers': {
            'sources': ['itunes', 'musicbrainz'],
            'cache_dir': '.cover-cache',
            'size': 1000
        },
        'api': {
            'musicbrainz': {
                'user_agent': 'tagfill/1.0 ( https://example.invalid )',
                'rate_limit': 1.0,
                'timeout': 30
            },
            'itunes': {
                'country': 'us',
                'rate_limit': 0.05,
                'timeout': 30
            }
        },
        'reconcile': {
            'check_image_first': False,
            'dry_run': False
        },
        'runner': {
            'cooldown_seconds': 300,
            'backoff_factor': 2.0,
            'max_cooldown_seconds': 3600,
            'max_restarts': 10
        },
        'state': {
            'journal_path': None
        },
        'logging': {
            'level': 'INFO',
            'file': None
        }
    }


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay override onto base"""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


class ConfigManager:
    """
    Configuration manager that loads settings from a YAML file.
    Values in the file are overlaid on built-in defaults, so a partial
    file (or no file at all) is valid.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """
        Load configuration file.

        Raises:
            ConfigError: file exists but is not valid YAML mapping
        """
        self._config = _default_config()

        if not self.config_path.exists():
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {self.config_path}: {e}")

        if not isinstance(loaded, dict):
            raise ConfigError(f"Config {self.config_path} must be a mapping")

        _merge(self._config, loaded)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get config value with dot notation.

        Examples:
            config.get('api.musicbrainz.rate_limit')
            config.get('library.root')

        Environment variables are expanded if value is like ${VAR_NAME}
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
            if value is None:
                return default

        # Expand environment variables
        if isinstance(value, str) and value.startswith('${') and value.endswith('}'):
            env_var = value[2:-1]
            return os.environ.get(env_var, default)

        return value

    def set(self, key: str, value: Any) -> None:
        """Override a value (used for CLI flags)"""
        keys = key.split('.')
        target = self._config
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value

    def get_api_settings(self, source: str) -> Dict[str, Any]:
        """Get API settings for a specific source, with ${VAR} values expanded"""
        settings = self.get(f'api.{source}', {}) or {}
        expanded = {}
        for key in settings:
            value = self.get(f'api.{source}.{key}')
            if value is not None:
                expanded[key] = value
        return expanded

    @property
    def library_root(self) -> str:
        return self.get('library.root', './music')

    @property
    def extensions(self) -> List[str]:
        return self.get('library.extensions', ['.mp3'])

    @property
    def primary_source(self) -> str:
        return self.get('sources.primary', 'musicbrainz')

    @property
    def fallback_sources(self) -> List[str]:
        fallback = self.get('sources.fallback', ['itunes'])
        return [fallback] if isinstance(fallback, str) else list(fallback)

    @property
    def metadata_sources(self) -> List[str]:
        """Primary followed by fallbacks, without duplicates"""
        names = [self.primary_source] + self.fallback_sources
        return list(dict.fromkeys(names))

    @property
    def cover_sources(self) -> List[str]:
        return list(self.get('covers.sources', ['itunes', 'musicbrainz']))

    @property
    def cover_cache_dir(self) -> str:
        return self.get('covers.cache_dir', '.cover-cache')

    @property
    def cover_size(self) -> int:
        return int(self.get('covers.size', 1000))

    @property
    def check_image_first(self) -> bool:
        return bool(self.get('reconcile.check_image_first', False))

    @property
    def dry_run(self) -> bool:
        return bool(self.get('reconcile.dry_run', False))

    @property
    def cooldown_seconds(self) -> float:
        return float(self.get('runner.cooldown_seconds', 300))

    @property
    def backoff_factor(self) -> float:
        return float(self.get('runner.backoff_factor', 2.0))

    @property
    def max_cooldown_seconds(self) -> float:
        return float(self.get('runner.max_cooldown_seconds', 3600))

    @property
    def max_restarts(self) -> Optional[int]:
        """None means restart forever"""
        value = self.get('runner.max_restarts')
        return None if value is None else int(value)

    @property
    def journal_path(self) -> Optional[str]:
        return self.get('state.journal_path')

    @property
    def log_level(self) -> str:
        return self.get('logging.level', 'INFO')

    @property
    def log_file(self) -> Optional[str]:
        return self.get('logging.file')

    def __repr__(self) -> str:
        return f"ConfigManager(config={self.config_path})"
