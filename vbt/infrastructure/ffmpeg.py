import logging
import os
import shlex
import subprocess
import tempfile
import time
from typing import List, Optional, Sequence
from vbt.config.models import WatermarkConfig
from vbt.domain.errors import ToolUnavailable, TranscodeError
from vbt.domain.models import Job

# Output encoding policy (not user-tunable)
VIDEO_CODEC = "libx264"
VIDEO_CRF = 20
AUDIO_CODEC = "aac"

# Lines of ffmpeg stderr kept in a TranscodeError
ERROR_TAIL_LINES = 20

SOURCE_VIDEO = "[0:v]"
WATERMARK_INPUT = "[1:v]"
SCALED_LABEL = "[scaled]"
WATERMARK_LABEL = "[wm]"


class FilterGraph:
    """Chain of -filter_complex clauses linked by stream labels.

    `video_stream` always names the last produced video stream, so each
    clause builds on the previous one.
    """

    SEPARATOR = ";"

    def __init__(self):
        self.clauses: List[str] = []
        self.video_stream = SOURCE_VIDEO

    def scale(self, resolution: str) -> "FilterGraph":
        self.clauses.append(f"{self.video_stream}scale={resolution}{SCALED_LABEL}")
        self.video_stream = SCALED_LABEL
        return self

    def overlay(self, watermark: WatermarkConfig) -> "FilterGraph":
        factor = watermark.scale
        self.clauses.append(
            f"{WATERMARK_INPUT}scale=iw*{factor}:ih*{factor}:flags=lanczos{WATERMARK_LABEL}"
        )
        self.clauses.append(f"{self.video_stream}{WATERMARK_LABEL}overlay={watermark.position}")
        return self

    def __bool__(self) -> bool:
        return bool(self.clauses)

    def __str__(self) -> str:
        return self.SEPARATOR.join(self.clauses)


def build_filter_graph(job: Job) -> FilterGraph:
    graph = FilterGraph()
    if job.resolution:
        graph.scale(job.resolution)
    if job.watermark is not None:
        graph.overlay(job.watermark)
    return graph


def build_command(job: Job, ffmpeg_path: str = "ffmpeg") -> List[str]:
    """Constructs the ffmpeg command line arguments.

    Arguments are passed to the process as a list (no shell), so paths and
    the filter graph are not quoted here.
    """
    cmd = [
        ffmpeg_path,
        "-y" if job.overwrite else "-n",
        "-i", str(job.input_path),
    ]
    if job.watermark is not None:
        cmd.extend(["-i", str(job.watermark.image)])

    graph = build_filter_graph(job)
    if graph:
        cmd.extend(["-filter_complex", str(graph)])

    cmd.extend([
        "-r", str(job.frame_rate),
        "-c:v", VIDEO_CODEC,
        "-crf", str(VIDEO_CRF),
        "-c:a", AUDIO_CODEC,
        str(job.output_path),
    ])
    return cmd


def format_command(cmd: Sequence[str]) -> str:
    """Renders cmd as a line that can be pasted into the host platform's shell."""
    if os.name == "nt":
        return subprocess.list2cmdline(list(cmd))
    return shlex.join(cmd)


class FFmpegAdapter:
    """Runs ffmpeg, one process per job."""

    def __init__(self, ffmpeg_path: str = "ffmpeg"):
        self.ffmpeg_path = ffmpeg_path
        self.logger = logging.getLogger(__name__)

    def check_available(self) -> None:
        """Raises ToolUnavailable unless `ffmpeg -version` runs cleanly."""
        try:
            res = subprocess.run(
                [self.ffmpeg_path, "-version"],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=30,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise ToolUnavailable(self.ffmpeg_path, str(e))
        if res.returncode != 0:
            raise ToolUnavailable(self.ffmpeg_path, f"-version exited with code {res.returncode}")
        version_line = res.stdout.splitlines()[0] if res.stdout else self.ffmpeg_path
        self.logger.info(f"FFMPEG_FOUND: {version_line}")

    def transcode(self, job: Job) -> None:
        """Runs ffmpeg for job; raises TranscodeError on a nonzero exit."""
        filename = job.input_path.name
        cmd = build_command(job, self.ffmpeg_path)
        self.logger.debug(f"FFMPEG_CMD: {format_command(cmd)}")
        start_time = time.monotonic()

        # stderr goes to a private scratch file, never to our own console
        with tempfile.TemporaryFile(suffix=".log") as err_file:
            process = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=err_file,
            )
            try:
                returncode = process.wait()
            except KeyboardInterrupt:
                self.logger.info(f"FFMPEG_INTERRUPTED: {filename} (KeyboardInterrupt)")
                process.terminate()
                try:
                    process.wait(timeout=3)
                except subprocess.TimeoutExpired:
                    process.kill()
                    process.wait()
                raise

            elapsed = time.monotonic() - start_time
            if returncode != 0:
                err_file.seek(0)
                tail = self._read_tail(err_file.read())
                self.logger.debug(f"FFMPEG_END: {filename} status=failed code={returncode} elapsed={elapsed:.2f}s")
                raise TranscodeError(returncode, tail)

        self.logger.debug(f"FFMPEG_END: {filename} status=completed elapsed={elapsed:.2f}s")

    @staticmethod
    def _read_tail(data: Optional[bytes], limit: int = ERROR_TAIL_LINES) -> List[str]:
        if not data:
            return []
        # ffmpeg redraws its status line with \r; keep only the final state of each line
        text = data.decode("utf-8", errors="replace").replace("\r\n", "\n")
        lines = [line.rstrip("\r").rsplit("\r", 1)[-1] for line in text.split("\n")]
        lines = [line for line in lines if line.strip()]
        return lines[-limit:]
