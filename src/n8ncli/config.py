"""Connection config resolution: CLI flag > env var > config file."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Tuple

from n8ncli.auth.store import ConfigStore

HOST_ENV_VAR = "N8N_HOST"
API_KEY_ENV_VAR = "N8N_API_KEY"


class ConfigSource(str, Enum):
    cli = "cli"
    env = "env"
    file = "file"
    missing = "missing"


class ConfigError(Exception):
    """Raised when a required connection setting is not resolvable."""

    def __init__(self, message: str, field: str):
        self.field = field
        super().__init__(message)


@dataclass(frozen=True)
class ResolvedConfig:
    host: str
    api_key: str
    host_source: ConfigSource
    api_key_source: ConfigSource


@dataclass(frozen=True)
class N8nConfig:
    host: str
    api_key: str


def _resolve(
    cli_value: Optional[str],
    env_value: Optional[str],
    file_value: Optional[str],
) -> Tuple[str, ConfigSource]:
    # Empty strings fall through, same as unset
    if cli_value:
        return cli_value, ConfigSource.cli
    if env_value:
        return env_value, ConfigSource.env
    if file_value:
        return file_value, ConfigSource.file
    return "", ConfigSource.missing


def load_config_with_sources(
    host: Optional[str] = None,
    api_key: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    store: Optional[ConfigStore] = None,
) -> ResolvedConfig:
    """Resolve host and API key independently, tracking where each came from.

    Precedence per field: CLI value > environment variable > config file.
    Never raises; unresolved fields are empty with source ``missing``.
    """
    env = os.environ if environ is None else environ
    persisted = (store or ConfigStore()).load_persisted_config()

    resolved_host, host_source = _resolve(
        host, env.get(HOST_ENV_VAR), persisted.get("host")
    )
    resolved_key, key_source = _resolve(
        api_key, env.get(API_KEY_ENV_VAR), persisted.get("apiKey")
    )

    return ResolvedConfig(
        host=resolved_host,
        api_key=resolved_key,
        host_source=host_source,
        api_key_source=key_source,
    )


def load_config(
    host: Optional[str] = None,
    api_key: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    store: Optional[ConfigStore] = None,
) -> N8nConfig:
    """Resolve config and require both host and API key. Raises ConfigError."""
    resolved = load_config_with_sources(host, api_key, environ=environ, store=store)

    if not resolved.host:
        raise ConfigError(f"{HOST_ENV_VAR} is required", field="host")
    if not resolved.api_key:
        raise ConfigError(f"{API_KEY_ENV_VAR} is required", field="apiKey")

    return N8nConfig(host=resolved.host, api_key=resolved.api_key)
