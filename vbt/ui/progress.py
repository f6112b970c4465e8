from typing import Optional
from rich.console import Console
from rich.live import Live
from rich.text import Text
from vbt.domain.events import JobFinished, ProcessingFinished
from vbt.domain.models import JobStatus
from vbt.infrastructure.event_bus import EventBus
from vbt.pipeline.progress import format_eta

STATUS_GLYPHS = {
    JobStatus.COMPLETED: ("✓", "green"),
    JobStatus.SKIPPED: ("↷", "yellow"),
    JobStatus.FAILED: ("✗", "bold red"),
}


class ProgressDisplay:
    """Single in-place progress line, redrawn after every finished job."""

    def __init__(self, bus: EventBus, console: Optional[Console] = None, bar_width: int = 50):
        self.console = console or Console()
        self.bar_width = bar_width
        self._live: Optional[Live] = None
        self.last_line: Optional[Text] = None
        bus.subscribe(JobFinished, self.on_job_finished)
        bus.subscribe(ProcessingFinished, self.on_processing_finished)

    def render(self, event: JobFinished) -> Text:
        total = max(event.total, 1)
        pct = round(100 * event.completed / total)
        filled = min(self.bar_width, round(self.bar_width * event.completed / total))
        glyph, style = STATUS_GLYPHS[event.result.status]

        line = Text()
        line.append("[")
        line.append("=" * filled, style="cyan")
        line.append(" " * (self.bar_width - filled))
        line.append(f"] {pct}% ({event.completed}/{event.total}) ETA: {format_eta(event.eta_seconds)} ")
        line.append(glyph, style=style)
        line.append(f" {event.result.file}")
        return line

    def on_job_finished(self, event: JobFinished):
        self.last_line = self.render(event)
        if self._live:
            self._live.update(self.last_line, refresh=True)

    def on_processing_finished(self, event: ProcessingFinished):
        # Leave the final line in place before the summary is printed below it
        self.stop()

    def start(self):
        self._live = Live(Text(""), console=self.console, auto_refresh=False, transient=False)
        self._live.start()
        return self

    def stop(self):
        if self._live:
            self._live.stop()
            self._live = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
