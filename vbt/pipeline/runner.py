"""Batch runner for the video transform job lifecycle.

Coordinates discovery, per-file job execution and progress tracking. Every
discovered file yields exactly one JobResult; a failing job is recorded and
the batch moves on. Uses the EventBus to report progress so the pipeline
never talks to the UI layer directly.

Key responsibilities:
- Verify ffmpeg is available and discover input files (fatal when either fails)
- Map each file to its mirrored output path and skip outputs that already exist
- Run ffmpeg sequentially, or on a bounded thread pool when threads > 1
- Convert per-job errors into failed results at the job boundary
- Publish JobStarted/JobFinished/ProcessingFinished events with ETA
"""

import concurrent.futures
import logging
import threading
import time
from pathlib import Path
from typing import Dict, List
from vbt.config.models import AppConfig
from vbt.domain.errors import TranscodeError, VbtError
from vbt.domain.events import DiscoveryFinished, JobFinished, JobStarted, ProcessingFinished
from vbt.domain.models import Job, JobResult, JobStatus, RunSummary
from vbt.infrastructure.event_bus import EventBus
from vbt.infrastructure.ffmpeg import FFmpegAdapter
from vbt.infrastructure.file_scanner import FileScanner
from vbt.infrastructure.path_mapper import PathMapper
from vbt.pipeline.progress import ProgressTracker


class BatchRunner:
    """Runs one job per discovered video and aggregates the results.

    Args:
        config: AppConfig with input/output, encoding and watermark settings.
        event_bus: EventBus for publishing discovery, job and completion events.
        file_scanner: FileScanner for discovering video files.
        path_mapper: PathMapper mirroring input paths under the output root.
        ffmpeg_adapter: FFmpegAdapter executing one transcode per job.
    """

    def __init__(
        self,
        config: AppConfig,
        event_bus: EventBus,
        file_scanner: FileScanner,
        path_mapper: PathMapper,
        ffmpeg_adapter: FFmpegAdapter,
    ):
        self.config = config
        self.event_bus = event_bus
        self.file_scanner = file_scanner
        self.path_mapper = path_mapper
        self.ffmpeg_adapter = ffmpeg_adapter
        self.logger = logging.getLogger(__name__)

        # Serializes result recording and progress publishing across workers
        self._record_lock = threading.Lock()

    def run(self) -> RunSummary:
        """Processes every video under the input directory.

        Raises ToolUnavailable or NoInputFound before any job starts.
        """
        self.ffmpeg_adapter.check_available()

        input_dir = Path(self.config.general.input_dir)
        files = self.file_scanner.scan(input_dir)
        total = len(files)
        self.logger.info(f"Discovery finished: found={total} in {input_dir}")
        self.event_bus.publish(DiscoveryFinished(input_dir=input_dir, files_found=total))

        tracker = ProgressTracker(total)
        results: Dict[int, JobResult] = {}
        threads = self.config.general.threads

        if threads == 1:
            for index, path in enumerate(files):
                self._record(results, index, self._process_file(path), tracker)
        else:
            with concurrent.futures.ThreadPoolExecutor(max_workers=threads) as executor:
                futures = {executor.submit(self._process_file, path): index for index, path in enumerate(files)}
                try:
                    for future in concurrent.futures.as_completed(futures):
                        self._record(results, futures[future], future.result(), tracker)
                except KeyboardInterrupt:
                    self.logger.info("Ctrl+C detected - cancelling queued jobs...")
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise

        ordered = [results[index] for index in range(total)]
        summary = RunSummary.from_results(ordered)
        self.logger.info(
            f"Processing finished: total={summary.total}, succeeded={summary.succeeded}, "
            f"failed={summary.failed}, skipped={summary.skipped}, elapsed={tracker.elapsed:.1f}s"
        )
        self.event_bus.publish(ProcessingFinished(summary=summary))
        return summary

    def _record(self, results: Dict[int, JobResult], index: int, result: JobResult, tracker: ProgressTracker):
        with self._record_lock:
            results[index] = result
            completed, elapsed, eta = tracker.advance()
            self.event_bus.publish(JobFinished(
                result=result,
                completed=completed,
                total=tracker.total,
                elapsed_seconds=elapsed,
                eta_seconds=eta,
            ))

    def _process_file(self, input_path: Path) -> JobResult:
        """Runs one job. Never raises except on KeyboardInterrupt."""
        filename = input_path.name
        start_time = time.monotonic()

        def result(status: JobStatus, error_message=None) -> JobResult:
            return JobResult(
                source=input_path,
                status=status,
                error_message=error_message,
                duration_seconds=time.monotonic() - start_time,
            )

        try:
            output_path = self.path_mapper.map(input_path)

            if output_path.exists() and not self.config.general.overwrite:
                self.logger.info(f"SKIP_EXISTING: {filename} -> {output_path}")
                return result(JobStatus.SKIPPED)

            job = Job.from_config(input_path, output_path, self.config)
            existed_before = output_path.exists()
            self.event_bus.publish(JobStarted(job=job))
            try:
                self.ffmpeg_adapter.transcode(job)
            except TranscodeError:
                if output_path.exists() and not existed_before:
                    self._discard_partial(job)
                raise

            self.logger.info(f"✔ Done: {filename} -> {output_path}")
            return result(JobStatus.COMPLETED)

        except VbtError as e:
            self.logger.error(f"✘ Error: {filename} : {e}")
            return result(JobStatus.FAILED, str(e))
        except Exception as e:
            # Unexpected errors (e.g. ffmpeg vanished mid-run) still only fail this job
            self.logger.error(f"✘ Error: {filename} : Exception: {e}")
            return result(JobStatus.FAILED, f"Exception: {e}")

    def _discard_partial(self, job: Job):
        """Handles an output file that appeared during a failed job.

        With -y (overwrite) ffmpeg is the only writer, so the file is its partial
        output and is removed. With -n ffmpeg refuses a file created by someone
        else after the skip check, so the file is left in place.
        """
        output_path = job.output_path
        if not job.overwrite:
            self.logger.warning(f"Output appeared during failed job, left in place: {output_path}")
            return
        try:
            output_path.unlink()
            self.logger.info(f"Removed partial output: {output_path}")
        except OSError as e:
            self.logger.warning(f"Failed to remove partial output {output_path}: {e}")
