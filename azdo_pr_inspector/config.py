"""Configuration management for Azure DevOps PR Inspector."""

import os
import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Dict, Any, Sequence

try:
    import tomllib  # type: ignore[import-not-found]  # Python 3.11+
except ImportError:  # pragma: no cover - fallback for <3.11
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None

try:
    import tomli_w  # type: ignore[import-not-found]  # for writing TOML files
except ImportError:  # pragma: no cover
    tomli_w = None

logger = logging.getLogger(__name__)

DAY_RANGES = (7, 14, 21, 31)
DEFAULT_DAY_RANGE = 7
DEFAULT_CONFIG_DIR = Path("~/.azdo-pr-inspector")
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

REQUIRED_FIELDS = ("organization", "project", "repository")

# field name -> environment variable
ENV_VARS = {
    "organization": "AZDO_ORGANIZATION",
    "project": "AZDO_PROJECT",
    "repository": "AZDO_REPOSITORY",
    "day_range": "AZDO_DAY_RANGE",
    "cache_enabled": "AZDO_CACHE_ENABLED",
    "cache_ttl": "AZDO_CACHE_TTL",
    "viewed_ttl_days": "AZDO_VIEWED_TTL_DAYS",
    "az_path": "AZDO_AZ_PATH",
    "timeout": "AZDO_TIMEOUT",
    "store_path": "AZDO_STORE_PATH",
}

INT_FIELDS = ("day_range", "cache_ttl", "viewed_ttl_days", "timeout")


@dataclass
class Config:
    """Configuration class for Azure DevOps PR Inspector."""

    organization: str
    project: str
    repository: str
    day_range: int = DEFAULT_DAY_RANGE
    cache_enabled: bool = True
    cache_ttl: int = 7200  # 2 hours
    viewed_ttl_days: int = 30
    az_path: Optional[str] = None
    timeout: int = 60
    store_path: str = str(DEFAULT_CONFIG_DIR / "storage.json")

    def __post_init__(self) -> None:
        if self.day_range not in DAY_RANGES:
            raise ValueError(
                f"day_range must be one of {', '.join(map(str, DAY_RANGES))}, "
                f"got {self.day_range}"
            )

    @staticmethod
    def _missing_message(missing: list) -> str:
        env_names = ", ".join(ENV_VARS[name] for name in missing)
        return (
            f"Missing required setting(s): {', '.join(missing)}. "
            f"Set {env_names}, pass them as options, or add them to a configuration file."
        )

    @staticmethod
    def _env_values() -> Dict[str, Any]:
        """Read every recognised environment variable that is set."""
        values: Dict[str, Any] = {}
        for name, env_var in ENV_VARS.items():
            raw = os.getenv(env_var)
            if raw is None:
                continue
            if name == "cache_enabled":
                values[name] = raw.lower() == "true"
            elif name in INT_FIELDS:
                values[name] = int(raw or "0")
            else:
                values[name] = raw
        return values

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables.

        Returns:
            Config: Configuration instance loaded from environment variables.

        Raises:
            ValueError: If organization, project or repository is not set.
        """
        values = cls._env_values()
        missing = [name for name in REQUIRED_FIELDS if not values.get(name)]
        if missing:
            raise ValueError(cls._missing_message(missing))
        return cls(**values)

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        if path.suffix.lower() == '.json':
            with open(path, 'r') as f:
                data = json.load(f)
        elif path.suffix.lower() in ['.toml', '.tml']:
            if tomllib is None:
                raise ValueError("TOML support not available. Install 'tomli' package for Python < 3.11")
            with open(path, 'rb') as f:
                data = tomllib.load(f)
        else:
            raise ValueError(f"Unsupported configuration file format: {path.suffix}")

        known = {f.name for f in fields(Config)}
        return {k: v for k, v in data.items() if k in known}

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load configuration from file.

        Supports JSON and TOML formats based on file extension.

        Args:
            path: Path to configuration file.

        Returns:
            Config: Configuration instance loaded from file.

        Raises:
            FileNotFoundError: If configuration file doesn't exist.
            ValueError: If a required setting is missing or the format is unsupported.
            json.JSONDecodeError: If JSON file is malformed.
        """
        data = cls._read_file(path)
        missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
        if missing:
            raise ValueError(cls._missing_message(missing))
        return cls(**data)

    @classmethod
    def from_sources(
        cls,
        config_file: Optional[Path] = None,
        required: Sequence[str] = REQUIRED_FIELDS,
        **overrides: Any,
    ) -> 'Config':
        """Load configuration from multiple sources with precedence.

        Precedence order (highest to lowest):
        1. Explicit overrides (command-line options) that are not None
        2. Configuration file (if provided and present)
        3. Environment variables
        4. Default values

        Args:
            config_file: Optional path to configuration file.
            required: Settings that must be provided. Commands that never
                touch a repository pass an empty tuple; the repository
                settings then default to empty strings.
            **overrides: Field values taking precedence over every source.

        Returns:
            Config: Configuration instance loaded from available sources.

        Raises:
            ValueError: If a required setting is missing from every source.
        """
        config_data: Dict[str, Any] = cls._env_values()

        if config_file:
            config_file = Path(config_file).expanduser()
        if config_file and config_file.exists():
            try:
                config_data.update(cls._read_file(config_file))
            except (OSError, ValueError) as e:
                # If file config fails, continue with env/defaults
                logger.warning("Ignoring configuration file %s: %s", config_file, e)

        config_data.update({k: v for k, v in overrides.items() if v is not None})

        missing = [name for name in required if not config_data.get(name)]
        if missing:
            raise ValueError(cls._missing_message(missing))
        for name in REQUIRED_FIELDS:
            config_data.setdefault(name, "")

        return cls(**config_data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dict[str, Any]: Configuration as dictionary.
        """
        return {
            'organization': self.organization,
            'project': self.project,
            'repository': self.repository,
            'day_range': self.day_range,
            'cache_enabled': self.cache_enabled,
            'cache_ttl': self.cache_ttl,
            'viewed_ttl_days': self.viewed_ttl_days,
            'az_path': self.az_path,
            'timeout': self.timeout,
            'store_path': self.store_path,
        }

    def to_file(self, path: Path) -> None:
        """Save configuration to file.

        Args:
            path: Path where to save configuration file.

        Raises:
            ValueError: If file format is unsupported.
        """
        # TOML has no null; unset optional values are simply left out
        data = {k: v for k, v in self.to_dict().items() if v is not None}

        path.parent.mkdir(parents=True, exist_ok=True)

        if path.suffix.lower() == '.json':
            with open(path, 'w') as f:
                json.dump(data, f, indent=2)
        elif path.suffix.lower() in ['.toml', '.tml']:
            if tomli_w is None:
                raise ValueError("TOML writing support not available. Install 'tomli-w' package")
            with open(path, 'wb') as f:
                tomli_w.dump(data, f)
        else:
            raise ValueError(f"Unsupported configuration file format: {path.suffix}")
