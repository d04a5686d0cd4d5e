"""Configuration file management for CLI."""

import logging
import os
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

import yaml

from src.client import RpcSession

logger = logging.getLogger(__name__)

_RECOGNISED_BOOL_VALUES = frozenset(("1", "true", "yes", "0", "false", "no"))
SENSITIVE_FIELDS = frozenset({"api_key", "authorization", "cookie"})


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for one XML-RPC endpoint."""

    host: str
    api_key: Optional[str] = None
    domain: Optional[str] = None
    persist: Optional[bool] = None
    timeout: float = 30.0
    expand_auth: bool = False
    headers: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


class ConfigError(Exception):
    """Configuration file error."""

    pass


def parse_bool(value: str, default: Optional[bool]) -> Optional[bool]:
    """Parse a boolean environment variable with explicit default.

    Recognises ``true/1/yes`` and ``false/0/no`` (case-insensitive).
    Returns *default* when the value is empty, and logs a warning and
    returns *default* for anything else.
    """
    if not value:
        return default
    normalised = value.strip().lower()
    if normalised not in _RECOGNISED_BOOL_VALUES:
        logger.warning(
            "Unrecognised boolean value %r, using default %s. "
            "Expected one of: true/1/yes or false/0/no.",
            value,
            default,
        )
        return default
    return normalised in ("1", "true", "yes")


def sanitize_dict(data: dict) -> dict:
    """Mask sensitive fields in a dictionary for display."""
    result = {}
    for key, value in data.items():
        if key.lower() in SENSITIVE_FIELDS and value:
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value)
        else:
            result[key] = value
    return result


def apply_env_overrides(
    config: Optional[ClientConfig], environ: Optional[Mapping[str, str]] = None
) -> Optional[ClientConfig]:
    """Overlay XMLRPC_* environment variables on a (possibly missing) config."""
    env = os.environ if environ is None else environ
    host = env.get("XMLRPC_HOST", "")
    if config is None:
        if not host:
            return None
        config = ClientConfig(host=host)
    elif host:
        config = replace(config, host=host)

    if api_key := env.get("XMLRPC_API_KEY"):
        config = replace(config, api_key=api_key)
    if domain := env.get("XMLRPC_DOMAIN"):
        config = replace(config, domain=domain)
    config = replace(config, persist=parse_bool(env.get("XMLRPC_PERSIST", ""), config.persist))
    if timeout := env.get("XMLRPC_TIMEOUT"):
        try:
            config = replace(config, timeout=float(timeout))
        except ValueError as e:
            raise ConfigError(f"Invalid XMLRPC_TIMEOUT: {timeout!r}") from e
    return config


def open_session(config: ClientConfig) -> RpcSession:
    """Create an RpcSession from configuration."""
    return RpcSession(
        config.host,
        config.api_key,
        domain=config.domain,
        persist=config.persist,
        headers=config.headers,
        timeout=config.timeout,
        expand_auth=config.expand_auth,
    )


class ConfigManager:
    """Manages client configuration in ~/.xmlrpc/config.yaml."""

    DEFAULT_DIR = Path.home() / ".xmlrpc"
    CONFIG_FILE = "config.yaml"

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self._config_dir = config_dir or self.DEFAULT_DIR
        self._config_path = self._config_dir / self.CONFIG_FILE

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def config_path(self) -> Path:
        return self._config_path

    def exists(self) -> bool:
        """Check if configuration exists."""
        return self._config_path.exists()

    def load(self) -> ClientConfig:
        """Load configuration from file. Raises ConfigError if not found."""
        if not self._config_path.exists():
            raise ConfigError(
                f"Config not found at {self._config_path}. Run 'xmlrpc init' first."
            )

        with open(self._config_path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid config file: {e}") from e

        if not isinstance(data, dict) or not data.get("host"):
            raise ConfigError("Invalid config: missing host")

        headers = data.get("headers") or {}
        if not isinstance(headers, dict):
            raise ConfigError("Invalid config: headers must be a mapping")

        try:
            timeout = float(data.get("timeout", 30.0))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config: bad timeout: {e}") from e

        return ClientConfig(
            host=data["host"],
            api_key=data.get("api_key"),
            domain=data.get("domain"),
            persist=data.get("persist"),
            timeout=timeout,
            expand_auth=bool(data.get("expand_auth", False)),
            headers={str(k): str(v) for k, v in headers.items()},
        )

    def load_effective(self, environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
        """Load the config file if present and apply environment overrides."""
        config = self.load() if self.exists() else None
        config = apply_env_overrides(config, environ)
        if config is None:
            raise ConfigError(
                "No host configured. Run 'xmlrpc init' or set XMLRPC_HOST."
            )
        return config

    def save(self, config: ClientConfig) -> None:
        """Save configuration to file. The file may hold an API key, so it is chmod 600."""
        self._config_dir.mkdir(parents=True, exist_ok=True)

        data = {k: v for k, v in config.to_dict().items() if v not in (None, {})}

        with open(self._config_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False)

        self._config_path.chmod(0o600)


def resolve_config(
    host: Optional[str] = None,
    api_key: Optional[str] = None,
    persist: Optional[bool] = None,
    manager: Optional[ConfigManager] = None,
) -> ClientConfig:
    """Effective config: file, then XMLRPC_* environment, then command-line flags."""
    manager = manager or ConfigManager()
    config = apply_env_overrides(manager.load() if manager.exists() else None)
    if config is None:
        if not host:
            raise ConfigError(
                "No host configured. Run 'xmlrpc init', set XMLRPC_HOST or pass --host."
            )
        config = ClientConfig(host=host)
    if host:
        config = replace(config, host=host)
    if api_key:
        config = replace(config, api_key=api_key)
    if persist is not None:
        config = replace(config, persist=persist)
    return config
