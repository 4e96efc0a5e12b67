"""Filesystem-backed Terraform client.

Installed binaries live in a single bin directory, one file per version,
named "{bin_name}{version}" (for example terraform1.5.7 or tofu1.6.2).
"""

import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from packaging.version import Version

from runstep.core.distribution import Distribution
from runstep.core.terraform.abc import EnsureVersionError, TerraformClient


class Downloader(ABC):
    """Fetches a distribution binary into a target path."""

    @abstractmethod
    def install(self, distribution: Distribution, version: Version, dest: Path) -> None:
        """Install the binary at dest.

        Raises:
            EnsureVersionError: If the binary could not be installed
        """
        ...


class UnconfiguredDownloader(Downloader):
    """Default downloader for clients with no artifact source; always fails."""

    def install(self, distribution: Distribution, version: Version, dest: Path) -> None:
        raise EnsureVersionError(
            distribution, version, f"not installed at {dest} and no downloader configured"
        )


class RealTerraformClient(TerraformClient):
    """Ensures versions against the bin directory, downloading when missing.

    Results are cached per (distribution, version) so repeated calls from
    concurrent run steps only touch the filesystem once.
    """

    def __init__(self, bin_dir: Path, downloader: Downloader | None = None) -> None:
        self._bin_dir = bin_dir
        self._downloader = downloader if downloader is not None else UnconfiguredDownloader()
        self._ensured: set[tuple[Distribution, Version]] = set()
        self._lock = threading.Lock()

    def binary_path(self, distribution: Distribution, version: Version) -> Path:
        return self._bin_dir / f"{distribution.bin_name}{version}"

    def ensure_version(
        self, log: logging.Logger, distribution: Distribution, version: Version
    ) -> None:
        key = (distribution, version)
        with self._lock:
            if key in self._ensured:
                return

            dest = self.binary_path(distribution, version)
            if dest.exists():
                log.debug("%s %s already installed at %s", distribution.bin_name, version, dest)
            else:
                log.info("installing %s %s to %s", distribution.bin_name, version, dest)
                self._downloader.install(distribution, version, dest)
            self._ensured.add(key)
