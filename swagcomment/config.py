"""
Generator configuration.

Settings are resolved from, lowest to highest precedence:
1. Built-in defaults (``GeneratorConfig()``)
2. A ``.swagcomment.yaml`` file found by walking up from the working directory
3. ``SWAGCOMMENT_*`` environment variables
4. Command line flags (applied by the CLI through ``with_overrides``)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from swagcomment.exceptions import ConfigurationError

CONFIG_FILE = ".swagcomment.yaml"

DEFAULT_HANDLER_DIR = "./internal/api/http/web/handler"
DEFAULT_ROUTER_FILE = "./internal/api/http/web/router.go"
DEFAULT_TYPES_PATHS = ("./internal/api/http/web/types/*.go", "./pkg/types/*.go")


def default_concurrency() -> int:
    """Worker count used when none is configured: CPU count, at least 2."""
    return max(2, os.cpu_count() or 1)


@dataclass(frozen=True)
class GeneratorConfig:
    """Configuration for a swagger comment generation run.

    Attributes:
        handler_dir: Directory searched recursively for handler files.
        router_file: Router source scanned for route registrations.
        types_paths: Glob patterns locating request-type sources.
        handler_pattern: Shell pattern matched against handler file basenames.
        security_scheme: Name emitted on ``@Security`` lines.
        api_prefix: Prefix prepended to every ``@Router`` path lacking it.
        concurrency: Number of files processed in parallel.
        verbose: Emit per-file progress.
        authorized_group: Router group identifier for authenticated routes.
        public_group: Router group identifier for anonymous routes.
        dry_run: Synthesize comments without rewriting any file.
    """

    handler_dir: str = DEFAULT_HANDLER_DIR
    router_file: str = DEFAULT_ROUTER_FILE
    types_paths: tuple[str, ...] = DEFAULT_TYPES_PATHS
    handler_pattern: str = "*_handler.go"
    security_scheme: str = "BearerAuth"
    api_prefix: str = ""
    concurrency: int = 0
    verbose: bool = True
    authorized_group: str = "authorized"
    public_group: str = "api"
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Normalize and validate configuration values."""
        if isinstance(self.types_paths, str):
            object.__setattr__(self, "types_paths", _split_list(self.types_paths))
        elif isinstance(self.types_paths, (list, tuple)):
            object.__setattr__(self, "types_paths", tuple(self.types_paths))
        else:
            raise ConfigurationError("types_paths must be a string or a list of strings")
        self._check_types()
        if self.concurrency == 0:
            object.__setattr__(self, "concurrency", default_concurrency())

        if self.concurrency < 1:
            raise ConfigurationError("concurrency must be at least 1")
        if not self.security_scheme:
            raise ConfigurationError("security_scheme must not be empty")
        if not self.handler_pattern:
            raise ConfigurationError("handler_pattern must not be empty")
        if not self.authorized_group or not self.public_group:
            raise ConfigurationError("router group identifiers must not be empty")
        if self.authorized_group == self.public_group:
            raise ConfigurationError(
                "authorized_group and public_group must differ",
                {"group": self.public_group},
            )

    def _check_types(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "types_paths":
                ok = all(isinstance(p, str) for p in value)
            elif f.name == "concurrency":
                ok = isinstance(value, int) and not isinstance(value, bool)
            elif f.name in ("verbose", "dry_run"):
                ok = isinstance(value, bool)
            else:
                ok = isinstance(value, str)
            if not ok:
                raise ConfigurationError(
                    f"{f.name} has invalid type {type(value).__name__}",
                    {"field": f.name, "value": value},
                )

    def with_overrides(self, **overrides: Any) -> GeneratorConfig:
        """Create a new config with every non-None override applied.

        Raises:
            ConfigurationError: If an override names an unknown field
        """
        unknown = set(overrides) - _field_names()
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _field_names() -> set[str]:
    return {f.name for f in fields(GeneratorConfig)}


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


# Environment variable -> config field
ENV_KEYS: dict[str, str] = {
    "SWAGCOMMENT_HANDLER_DIR": "handler_dir",
    "SWAGCOMMENT_ROUTER_FILE": "router_file",
    "SWAGCOMMENT_TYPES_PATHS": "types_paths",
    "SWAGCOMMENT_HANDLER_PATTERN": "handler_pattern",
    "SWAGCOMMENT_SECURITY_SCHEME": "security_scheme",
    "SWAGCOMMENT_API_PREFIX": "api_prefix",
    "SWAGCOMMENT_CONCURRENCY": "concurrency",
    "SWAGCOMMENT_VERBOSE": "verbose",
    "SWAGCOMMENT_AUTHORIZED_GROUP": "authorized_group",
    "SWAGCOMMENT_PUBLIC_GROUP": "public_group",
}


def env_overrides(environ: Optional[dict[str, str]] = None) -> dict[str, Any]:
    """Collect configuration overrides from ``SWAGCOMMENT_*`` variables."""
    env = os.environ if environ is None else environ
    result: dict[str, Any] = {}
    for env_name, field_name in ENV_KEYS.items():
        raw = env.get(env_name)
        if raw is None:
            continue
        if field_name == "concurrency":
            try:
                result[field_name] = int(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"{env_name} must be an integer, got {raw!r}"
                ) from e
        elif field_name == "verbose":
            result[field_name] = _parse_bool(env_name, raw)
        elif field_name == "types_paths":
            result[field_name] = _split_list(raw)
        else:
            result[field_name] = raw
    return result


def find_config(start: Optional[Path] = None) -> Optional[Path]:
    """Find ``.swagcomment.yaml`` in the working directory or any parent.

    Returns:
        Path to the config file, or None if not found
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file into a mapping of config field overrides.

    Raises:
        ConfigurationError: If the file cannot be read or is not a YAML mapping
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def resolve_config(
    config_path: Optional[Path] = None,
    environ: Optional[dict[str, str]] = None,
    **overrides: Any,
) -> GeneratorConfig:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit config file; when None, ``find_config`` is used
        environ: Environment mapping (defaults to ``os.environ``)
        **overrides: Highest-precedence values, None entries are ignored

    Returns:
        The merged GeneratorConfig
    """
    config = GeneratorConfig()

    path = config_path if config_path is not None else find_config()
    if path is not None:
        config = config.with_overrides(**load_config(path))

    config = config.with_overrides(**env_overrides(environ))
    return config.with_overrides(**overrides)
