"""Effective distribution and version resolution for a run step."""

from dataclasses import dataclass

from packaging.version import Version

from runstep.core.config import ToolConfig
from runstep.core.distribution import Distribution
from runstep.core.project import ExecutionContext


@dataclass(frozen=True)
class ResolvedTool:
    """Distribution and version a run step executes with."""

    distribution: Distribution
    version: Version


def resolve_tool(ctx: ExecutionContext, config: ToolConfig) -> ResolvedTool:
    """Pick the project's distribution/version, falling back to the configured defaults.

    Each half is resolved independently: a project may pin only its version
    and still get the default distribution, or the other way around.
    """
    distribution = config.default_distribution
    if ctx.terraform_distribution:
        distribution = Distribution.from_name(ctx.terraform_distribution)

    version = config.default_version
    if ctx.terraform_version is not None:
        version = ctx.terraform_version

    return ResolvedTool(distribution=distribution, version=version)
