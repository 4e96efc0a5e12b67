"""Tool configuration data structures and loading.

Provides the immutable defaults used when a project does not pin its own
distribution or version, loaded from ~/.runstep/config.toml.
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from packaging.version import InvalidVersion, Version

from runstep.core.distribution import Distribution

DEFAULT_DISTRIBUTION = Distribution.TERRAFORM
DEFAULT_VERSION = Version("1.5.7")
CONFIG_PATH_ENV_VAR = "RUNSTEP_CONFIG"


def default_config_dir() -> Path:
    return Path.home() / ".runstep"


@dataclass(frozen=True)
class ToolConfig:
    """Process-wide tool defaults.

    Passed explicitly to the runner so independent runners (for example in
    tests) never share state.

    Attributes:
        default_distribution: Distribution used when a project does not set one
        default_version: Version used when a project does not set one
        bin_dir: Directory holding installed tool binaries; prepended to PATH
    """

    default_distribution: Distribution
    default_version: Version
    bin_dir: Path

    @staticmethod
    def defaults() -> "ToolConfig":
        return ToolConfig(
            default_distribution=DEFAULT_DISTRIBUTION,
            default_version=DEFAULT_VERSION,
            bin_dir=default_config_dir() / "bin",
        )


class ConfigStore(ABC):
    """Abstract interface for tool config access.

    Enables in-memory implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def load(self) -> ToolConfig:
        """Load tool config.

        Returns:
            ToolConfig with values from the store, built-in defaults for
            anything not set

        Raises:
            ValueError: If a configured value is malformed
        """
        ...


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads ~/.runstep/config.toml.

    The location can be overridden with the RUNSTEP_CONFIG environment variable.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()
        return default_config_dir() / "config.toml"

    def load(self) -> ToolConfig:
        """Load config from disk, falling back to defaults when the file is absent."""
        config_path = self.path()
        if not config_path.exists():
            return ToolConfig.defaults()

        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        return parse_tool_config(data, source=config_path)


def parse_tool_config(data: dict[str, object], *, source: Path) -> ToolConfig:
    """Build a ToolConfig from a parsed TOML document.

    Recognized keys: default_distribution, default_version, bin_dir.

    Raises:
        ValueError: If a key has the wrong type or an unparseable version
    """
    defaults = ToolConfig.defaults()

    distribution = defaults.default_distribution
    raw_distribution = data.get("default_distribution")
    if raw_distribution is not None:
        if not isinstance(raw_distribution, str):
            raise ValueError(f"'default_distribution' must be a string in {source}")
        distribution = Distribution.from_name(raw_distribution)

    version = defaults.default_version
    raw_version = data.get("default_version")
    if raw_version is not None:
        if not isinstance(raw_version, str):
            raise ValueError(f"'default_version' must be a string in {source}")
        try:
            version = Version(raw_version)
        except InvalidVersion as e:
            raise ValueError(f"Invalid 'default_version' {raw_version!r} in {source}") from e

    bin_dir = defaults.bin_dir
    raw_bin_dir = data.get("bin_dir")
    if raw_bin_dir is not None:
        if not isinstance(raw_bin_dir, str):
            raise ValueError(f"'bin_dir' must be a string in {source}")
        bin_dir = Path(raw_bin_dir).expanduser()

    return ToolConfig(
        default_distribution=distribution,
        default_version=version,
        bin_dir=bin_dir,
    )
