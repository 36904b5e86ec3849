"""Persisted connection config (~/.n8ncli.json) and value helpers."""

import json
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import NamedTuple, Optional, TypedDict
from urllib.parse import urlsplit

import typer

CONFIG_FILENAME = ".n8ncli.json"

# Owner read/write only
SECURE_MODE = 0o600

# Schemes that require a host component to form a valid URL
SPECIAL_SCHEMES = {"http", "https", "ws", "wss", "ftp"}

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


class PersistedConfig(TypedDict, total=False):
    host: str
    apiKey: str


class PermissionCheck(NamedTuple):
    secure: bool
    mode: Optional[int] = None


class ValidationResult(NamedTuple):
    valid: bool
    error: str = ""


class KeyResult(NamedTuple):
    valid: bool
    key: Optional[str] = None
    error: str = ""


class ConfigStoreError(Exception):
    """Raised when the config file cannot be written or removed."""
    pass


class ConfigStore:
    """Reads and writes the persisted host / API key file.

    The file lives directly in the user's home directory. ``home`` may be
    injected; otherwise the home directory is looked up on every call.
    """

    def __init__(self, home: Optional[Path] = None):
        self._home = home

    def get_config_path(self) -> Path:
        """Path to the config file, e.g. ~/.n8ncli.json."""
        home = self._home if self._home is not None else Path.home()
        return Path(home) / CONFIG_FILENAME

    def check_permissions(self) -> PermissionCheck:
        """Report whether group or other have any access to the config file."""
        try:
            mode = stat.S_IMODE(self.get_config_path().stat().st_mode)
        except OSError:
            # Nothing on disk to protect
            return PermissionCheck(secure=True)
        return PermissionCheck(secure=(mode & 0o077) == 0, mode=mode)

    def load_persisted_config(self) -> PersistedConfig:
        """Load the persisted config.

        Missing, unreadable or malformed files all yield an empty config;
        the latter two print a warning to stderr. Non-string values are
        dropped.
        """
        config_path = self.get_config_path()
        if not config_path.exists():
            return {}

        perm = self.check_permissions()
        if not perm.secure and perm.mode is not None:
            _warn_insecure(config_path, perm.mode)

        try:
            raw = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            typer.echo(
                f"Warning: Config file {config_path} contains invalid JSON",
                err=True,
            )
            return {}
        except (OSError, UnicodeDecodeError) as e:
            typer.echo(
                f"Warning: Could not read config file {config_path}: {e}",
                err=True,
            )
            return {}

        if not isinstance(raw, dict):
            return {}

        config: PersistedConfig = {}
        if isinstance(raw.get("host"), str):
            config["host"] = raw["host"]
        if isinstance(raw.get("apiKey"), str):
            config["apiKey"] = raw["apiKey"]
        return config

    def save_persisted_config(self, config: PersistedConfig) -> Path:
        """Write config atomically with 0600 permissions. Returns the path."""
        config_path = self.get_config_path()
        # A symlinked config file is written through, the link stays
        target = config_path.resolve()
        content = json.dumps(dict(config), indent=2) + "\n"

        try:
            # mkstemp creates the file with mode 0600
            fd, tmp_name = tempfile.mkstemp(
                dir=str(target.parent),
                prefix=f"{CONFIG_FILENAME}.",
                suffix=".tmp",
            )
        except OSError as e:
            raise ConfigStoreError(f"Failed to save configuration: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, target)
            target.chmod(SECURE_MODE)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ConfigStoreError(f"Failed to save configuration: {e}") from e

        return config_path

    def set_config_value(self, key: str, value: str) -> Path:
        """Read-modify-write a single field. No locking: last writer wins."""
        current = self.load_persisted_config()
        current[key] = value  # type: ignore[literal-required]
        return self.save_persisted_config(current)

    def clear_config(self) -> bool:
        """Delete the config file. Returns False if there was nothing to delete."""
        config_path = self.get_config_path()
        if not config_path.exists():
            return False
        try:
            config_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise ConfigStoreError(f"Failed to remove configuration: {e}") from e
        return True


def _warn_insecure(config_path: Path, mode: int) -> None:
    typer.echo(
        f"Warning: Config file {config_path} has permissions {mode:03o}, "
        "which are too open.",
        err=True,
    )
    typer.echo(
        "It is recommended that your config file is NOT accessible by others.",
        err=True,
    )
    typer.echo(f"Run: chmod 600 {config_path}", err=True)


def mask_api_key(api_key: str) -> str:
    """Mask an API key for display, showing only the first 8 and last 4 chars."""
    if len(api_key) <= 12:
        return "***"
    return f"{api_key[:8]}...{api_key[-4:]}"


def validate_host(host: str) -> ValidationResult:
    """Check that host parses as an absolute URL."""
    invalid = ValidationResult(valid=False, error="Invalid URL format")
    if not host or host != host.strip():
        return invalid

    try:
        parts = urlsplit(host)
        scheme = parts.scheme.lower()
        if not scheme or not _SCHEME_RE.match(parts.scheme):
            return invalid
        if scheme in SPECIAL_SCHEMES:
            if not parts.hostname:
                return invalid
            parts.port  # raises ValueError when out of range or non-numeric
    except ValueError:
        return invalid

    return ValidationResult(valid=True)


def validate_api_key(api_key: str) -> ValidationResult:
    if not api_key or not api_key.strip():
        return ValidationResult(valid=False, error="API key cannot be empty")
    return ValidationResult(valid=True)


def normalize_key(key: str) -> KeyResult:
    """Map a user-supplied key name (or alias) to its persisted field name."""
    normalized = key.lower()

    if normalized in ("host", "n8nhost"):
        return KeyResult(valid=True, key="host")

    if normalized in ("apikey", "n8nkey"):
        return KeyResult(valid=True, key="apiKey")

    return KeyResult(
        valid=False,
        error=f"Unknown config key: {key}. Valid keys: host, apikey",
    )
