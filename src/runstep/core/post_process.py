"""Post-processing applied to a run step's output before it is returned."""

from enum import Enum

from packaging.version import Version

REFRESHING_MARKER = "Refreshing state..."

# Versions that print one "Refreshing state..." line per resource before the plan.
STRIP_REFRESHING_MIN_VERSION = Version("0.14.0")


class PostProcessMode(Enum):
    """How a run step's successful output is handed back to the caller.

    Output is streamed to the live handler in every mode.
    """

    SHOW = "show"
    HIDE = "hide"
    STRIP_REFRESHING = "strip_refreshing"


def strip_refreshing_from_plan_output(output: str, version: Version) -> str:
    """Drop the refresh preamble from plan output.

    Everything up to and including the last line containing
    "Refreshing state..." is removed. Output of versions before 0.14.0, and
    output without any such line, is returned unchanged.
    """
    if version < STRIP_REFRESHING_MIN_VERSION:
        return output

    lines = output.split("\n")
    final_index: int | None = None
    for i, line in enumerate(lines):
        if REFRESHING_MARKER in line:
            final_index = i
    if final_index is None:
        return output
    return "\n".join(lines[final_index + 1 :])


def apply_post_process(mode: PostProcessMode, output: str, version: Version) -> str:
    if mode is PostProcessMode.HIDE:
        return ""
    if mode is PostProcessMode.STRIP_REFRESHING:
        return strip_refreshing_from_plan_output(output, version)
    return output
