"""Error taxonomy for the batch pipeline.

Fatal errors (`ToolUnavailable`, `NoInputFound`) abort the run before any job
starts. Per-job errors (`PathMappingError`, `TranscodeError`) are caught at the
job boundary by the runner and recorded as failed results.
"""

from pathlib import Path
from typing import List, Sequence


class VbtError(Exception):
    """Base class for all pipeline errors."""


class ToolUnavailable(VbtError):
    """ffmpeg cannot be executed."""

    def __init__(self, tool: str, detail: str = ""):
        self.tool = tool
        message = f"{tool} not found. Install it or add it to PATH."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class NoInputFound(VbtError):
    """No matching video files under the input root."""

    def __init__(self, root: Path, reason: str = "No video files found"):
        self.root = root
        super().__init__(f"{reason}: {root}")


class PathMappingError(VbtError):
    """Input path cannot be mapped under the output root."""


class TranscodeError(VbtError):
    """ffmpeg exited with a nonzero status."""

    def __init__(self, exit_code: int, tail: Sequence[str] = ()):
        self.exit_code = exit_code
        self.tail: List[str] = list(tail)
        message = f"ffmpeg failed with exit code {exit_code}"
        if self.tail:
            message += "\nLast lines of output:\n" + "\n".join(self.tail)
        super().__init__(message)
