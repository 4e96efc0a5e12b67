"""Infrastructure-as-code tool distributions.

The set of distributions is closed: every project resolves to exactly one of
these, and each one knows the binary name it installs under.
"""

from enum import Enum


class Distribution(Enum):
    """Supported Terraform-compatible tool distributions."""

    TERRAFORM = "terraform"
    OPENTOFU = "opentofu"

    @property
    def bin_name(self) -> str:
        """Name of the executable this distribution installs."""
        if self is Distribution.OPENTOFU:
            return "tofu"
        return "terraform"

    @classmethod
    def from_name(cls, name: str) -> "Distribution":
        """Map a configured distribution name to a Distribution.

        Unknown names fall back to TERRAFORM, matching how project configs
        that predate OpenTofu support are interpreted.

        Examples:
            >>> Distribution.from_name("opentofu").bin_name
            'tofu'
            >>> Distribution.from_name("terraform") is Distribution.TERRAFORM
            True
        """
        normalized = name.strip().lower()
        if normalized in ("opentofu", "tofu"):
            return cls.OPENTOFU
        return cls.TERRAFORM
