"""Tests for Distribution name mapping."""

import pytest

from runstep.core.distribution import Distribution


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("terraform", Distribution.TERRAFORM),
        ("opentofu", Distribution.OPENTOFU),
        ("tofu", Distribution.OPENTOFU),
        ("OpenTofu", Distribution.OPENTOFU),
        ("something-else", Distribution.TERRAFORM),
    ],
)
def test_from_name(name: str, expected: Distribution) -> None:
    assert Distribution.from_name(name) is expected


def test_bin_names() -> None:
    assert Distribution.TERRAFORM.bin_name == "terraform"
    assert Distribution.OPENTOFU.bin_name == "tofu"
