"""Terraform client interface.

The run-step runner only needs one capability from the Terraform client:
making sure a given distribution and version is installed before a command
that may invoke it runs.
"""

import logging
from abc import ABC, abstractmethod

from packaging.version import Version

from runstep.core.distribution import Distribution


class EnsureVersionError(Exception):
    """Raised when a tool distribution/version cannot be made available."""

    def __init__(self, distribution: Distribution, version: Version, reason: str) -> None:
        self.distribution = distribution
        self.version = version
        self.reason = reason
        super().__init__(f"{distribution.bin_name} {version}: {reason}")


class TerraformClient(ABC):
    """Abstract interface for Terraform/OpenTofu installation management.

    Real implementations look at (and may populate) the tool bin directory.
    Fake implementations record calls for verification in tests.
    """

    @abstractmethod
    def ensure_version(
        self, log: logging.Logger, distribution: Distribution, version: Version
    ) -> None:
        """Make sure the given distribution/version is installed.

        Must be idempotent: calling it again for an installed version is a
        cheap no-op.

        Args:
            log: Logger of the project the version is needed for
            distribution: Distribution to install
            version: Version to install

        Raises:
            EnsureVersionError: If the version cannot be made available
        """
        ...
