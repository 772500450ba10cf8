"""
Runtime settings for gitprovision.

Settings are plain values with defaults; `Settings.from_env()` reads
overrides from GITPROVISION_* environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from gitprovision.exceptions import ConfigurationError
from gitprovision.types.auth import KIND_GITHUB, SUPPORTED_KINDS

DEFAULT_CONFIG_PATH = Path.home() / ".gitprovision" / "gitAuth.yaml"
DEFAULT_TIMEOUT = 30.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid {name}: {value!r}. Must be true or false")


@dataclass
class Settings:
    """
    Settings shared by the credential store, providers and resolver.

    Attributes:
        config_path: YAML file holding servers and credentials
        default_kind: Hosting kind assumed when a server URL gives no hint
        timeout: HTTP timeout in seconds for hosting provider requests
        persist_incomplete_credentials: Whether a credential edit that still
            leaves the credential invalid is written to the store anyway
        batch_mode: Default for commands that do not pass --batch explicitly
    """

    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG_PATH)
    default_kind: str = KIND_GITHUB
    timeout: float = DEFAULT_TIMEOUT
    persist_incomplete_credentials: bool = True
    batch_mode: bool = False

    def __post_init__(self) -> None:
        if self.default_kind not in SUPPORTED_KINDS:
            raise ConfigurationError(
                f"Invalid default kind: {self.default_kind}. "
                f"Must be one of {', '.join(SUPPORTED_KINDS)}"
            )
        if self.timeout <= 0:
            raise ConfigurationError(f"Invalid timeout: {self.timeout}. Must be positive")

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Create settings from environment variables.

        Environment variables:
            GITPROVISION_CONFIG: Path to the credential store file
                (optional, default: ~/.gitprovision/gitAuth.yaml)
            GITPROVISION_DEFAULT_KIND: "github", "gitlab" or "gitea" (optional, default: github)
            GITPROVISION_TIMEOUT: HTTP timeout in seconds (optional, default: 30)
            GITPROVISION_PERSIST_INCOMPLETE: Persist edited credentials that are
                still invalid (optional, default: true)
            GITPROVISION_BATCH_MODE: Never prompt (optional, default: false)

        Raises:
            ConfigurationError: If a variable holds a malformed value
        """
        config_path = os.environ.get("GITPROVISION_CONFIG")
        default_kind = os.environ.get("GITPROVISION_DEFAULT_KIND", KIND_GITHUB).lower()
        timeout_str = os.environ.get("GITPROVISION_TIMEOUT")
        persist_str = os.environ.get("GITPROVISION_PERSIST_INCOMPLETE", "true")
        batch_str = os.environ.get("GITPROVISION_BATCH_MODE", "false")

        timeout = DEFAULT_TIMEOUT
        if timeout_str:
            try:
                timeout = float(timeout_str)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid GITPROVISION_TIMEOUT: {timeout_str!r}. Must be a number"
                ) from None

        return cls(
            config_path=Path(config_path).expanduser() if config_path else DEFAULT_CONFIG_PATH,
            default_kind=default_kind,
            timeout=timeout,
            persist_incomplete_credentials=_parse_bool(
                "GITPROVISION_PERSIST_INCOMPLETE", persist_str
            ),
            batch_mode=_parse_bool("GITPROVISION_BATCH_MODE", batch_str),
        )
