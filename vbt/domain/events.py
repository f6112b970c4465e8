"""Domain events for the batch pipeline.

Events flow through the EventBus, decoupling the batch runner from the
progress display and the summary reporter.

See `infrastructure/event_bus.py` for the pub/sub mechanism.
"""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel
from .models import Job, JobResult, RunSummary


class Event(BaseModel):
    """Base class for all domain events."""

    pass


class DiscoveryFinished(Event):
    """Emitted after the input tree has been scanned."""

    input_dir: Path
    files_found: int


class JobStarted(Event):
    """Emitted right before ffmpeg is launched for a job."""

    job: Job


class JobFinished(Event):
    """Emitted once per discovered file, carrying run progress after it.

    `eta_seconds` is None until an estimate is available.
    """

    result: JobResult
    completed: int
    total: int
    elapsed_seconds: float
    eta_seconds: Optional[float] = None


class ProcessingFinished(Event):
    """Emitted when every job has a result."""

    summary: RunSummary
