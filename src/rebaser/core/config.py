"""Configuration data structures and loading.

Provides immutable configuration loaded from ~/.rebaser/config.toml:

    remote = "origin"          # primary remote when several are configured
    max_passes = 10            # convergence loop iteration cap
    fetch = true               # fetch all remotes before syncing

    [hosts."github.example.com"]
    token = "ghp_..."          # optional; otherwise gh's own login is used
"""

import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_MAX_PASSES = 10


@dataclass(frozen=True)
class RebaserConfig:
    """Immutable configuration.

    Loaded once at CLI entry point and stored in RebaserContext.
    """

    remote: str | None = None
    max_passes: int = DEFAULT_MAX_PASSES
    fetch: bool = True
    tokens: dict[str, str] = field(default_factory=dict)


def parse_config(data: dict[str, Any], source: Path) -> RebaserConfig:
    """Validate raw TOML data and build a RebaserConfig.

    Raises:
        ValueError: If a key has the wrong type or value
    """
    remote = data.get("remote")
    if remote is not None and (not isinstance(remote, str) or not remote):
        raise ValueError(f"'remote' must be a non-empty string in {source}")

    max_passes = data.get("max_passes", DEFAULT_MAX_PASSES)
    if isinstance(max_passes, bool) or not isinstance(max_passes, int) or max_passes < 1:
        raise ValueError(f"'max_passes' must be a positive integer in {source}")

    fetch = data.get("fetch", True)
    if not isinstance(fetch, bool):
        raise ValueError(f"'fetch' must be true or false in {source}")

    tokens: dict[str, str] = {}
    hosts = data.get("hosts", {})
    if not isinstance(hosts, dict):
        raise ValueError(f"'hosts' must be a table in {source}")
    for host, table in hosts.items():
        if not isinstance(table, dict):
            raise ValueError(f"'hosts.\"{host}\"' must be a table in {source}")
        token = table.get("token")
        if token is None:
            continue
        if not isinstance(token, str) or not token:
            raise ValueError(f"'hosts.\"{host}\".token' must be a non-empty string in {source}")
        tokens[host] = token

    return RebaserConfig(remote=remote, max_passes=max_passes, fetch=fetch, tokens=tokens)


class ConfigStore(ABC):
    """Abstract interface for configuration access.

    Enables in-memory implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def load(self) -> RebaserConfig:
        """Load configuration, falling back to defaults when none exists.

        Raises:
            ValueError: If the configuration is malformed
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the config file (for error messages and debugging)."""
        ...


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads ~/.rebaser/config.toml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._path = config_path

    def load(self) -> RebaserConfig:
        """Load configuration from disk.

        A missing file yields the defaults.

        Raises:
            ValueError: If the file is not valid TOML or has invalid values
        """
        config_path = self.path()
        if not config_path.exists():
            return RebaserConfig()

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e
        return parse_config(data, config_path)

    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return Path.home() / ".rebaser" / "config.toml"


class InMemoryConfigStore(ConfigStore):
    """Test implementation that holds configuration in memory."""

    def __init__(self, config: RebaserConfig | None = None) -> None:
        self._config = config or RebaserConfig()

    def load(self) -> RebaserConfig:
        return self._config

    def path(self) -> Path:
        return Path("/fake/rebaser/config.toml")
