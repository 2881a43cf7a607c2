"""
Configuration loading.

The configuration file is a JSON object with ``fedora``, ``migration`` and
``logging`` sections. FedoraConfig (in fedora_client) reads ``fedora``;
MigrationSettings reads ``migration``.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from constants import LoggingConfig, MigrationDefaults
from .errors import ConfigError

logger = logging.getLogger(__name__)


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from file."""
    if not config_path:
        raise ConfigError("config_path cannot be empty")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except FileNotFoundError:
        raise ConfigError(
            f"Configuration file not found: {config_path}\n"
            f"Please create a config.json file or specify one with --config"
        )
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in configuration file {config_path} at line {e.lineno}, column {e.colno}: {e.msg}"
        )
    except UnicodeDecodeError as e:
        raise ConfigError(f"File encoding error in {config_path}: {e}")
    except PermissionError:
        raise ConfigError(f"Permission denied reading {config_path}")

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file must contain a JSON object, got {type(config).__name__}")

    return config


def _as_bool(section: Dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"migration.{key} must be true or false, got {value!r}")
    return value


@dataclass
class MigrationSettings:
    """
    Settings of a migration run.

    Attributes:
        source_dir: Directory of object manifests.
        root_path: Target repository path under which objects are created.
        import_external: Store E datastreams as content instead of redirects.
        import_redirect: Store R datastreams as content instead of redirects.
        limit: Maximum number of objects to migrate; negative for no limit.
    """
    source_dir: Optional[str] = None
    root_path: str = ""
    import_external: bool = False
    import_redirect: bool = False
    limit: int = MigrationDefaults.NO_LIMIT

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'MigrationSettings':
        """Create MigrationSettings from the ``migration`` section of a config dict."""
        section = config_dict.get('migration', {})
        if not isinstance(section, dict):
            raise ConfigError(f"'migration' section must be an object, got {type(section).__name__}")

        limit = section.get('limit', MigrationDefaults.NO_LIMIT)
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ConfigError(f"migration.limit must be an integer, got {limit!r}")

        root_path = section.get('root_path', "") or ""
        if not isinstance(root_path, str):
            raise ConfigError(f"migration.root_path must be a string, got {root_path!r}")

        return cls(
            source_dir=section.get('source_dir'),
            root_path=root_path,
            import_external=_as_bool(section, 'import_external', False),
            import_redirect=_as_bool(section, 'import_redirect', False),
            limit=limit,
        )


def logging_settings(config_dict: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """Level and file of the ``logging`` section, with defaults."""
    section = config_dict.get('logging', {}) or {}
    return {
        'level': section.get('level', LoggingConfig.DEFAULT_LOG_LEVEL),
        'file': section.get('file'),
    }
