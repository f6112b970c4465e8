from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from pydantic import BaseModel, ConfigDict
from vbt.config.models import AppConfig, WatermarkConfig

class JobStatus(str, Enum):
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"  # Output already exists and overwrite is off
    FAILED = "FAILED"

class Job(BaseModel):
    """One file's transcode task with the settings needed to build its command."""
    model_config = ConfigDict(frozen=True)

    input_path: Path
    output_path: Path
    resolution: Optional[str] = None
    frame_rate: int
    overwrite: bool = False
    watermark: Optional[WatermarkConfig] = None  # None when watermarking is off

    @classmethod
    def from_config(cls, input_path: Path, output_path: Path, config: AppConfig) -> "Job":
        general = config.general
        return cls(
            input_path=input_path,
            output_path=output_path,
            resolution=general.resolution,
            frame_rate=general.frame_rate,
            overwrite=general.overwrite,
            watermark=config.watermark if config.watermark.enabled else None,
        )

class JobResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: Path
    status: JobStatus
    error_message: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def file(self) -> str:
        return self.source.name

    @property
    def success(self) -> bool:
        return self.status != JobStatus.FAILED

class RunSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    failures: List[Tuple[str, str]] = []

    @classmethod
    def from_results(cls, results: Sequence[JobResult]) -> "RunSummary":
        failures = [(r.file, r.error_message or "Unknown error") for r in results if not r.success]
        return cls(
            total=len(results),
            succeeded=len(results) - len(failures),
            failed=len(failures),
            skipped=sum(1 for r in results if r.status == JobStatus.SKIPPED),
            failures=failures,
        )
