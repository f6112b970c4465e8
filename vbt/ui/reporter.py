import logging
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.markup import escape
from vbt.domain.events import DiscoveryFinished, ProcessingFinished
from vbt.domain.models import RunSummary
from vbt.infrastructure.event_bus import EventBus


class SummaryReporter:
    """Writes run milestones to the log file and mirrors them on the console."""

    def __init__(self, bus: EventBus, log_path: Path, console: Optional[Console] = None):
        self.console = console or Console()
        self.log_path = Path(log_path)
        self.logger = logging.getLogger(__name__)
        bus.subscribe(DiscoveryFinished, self.on_discovery_finished)
        bus.subscribe(ProcessingFinished, self.on_processing_finished)

    def on_discovery_finished(self, event: DiscoveryFinished):
        message = f"Found {event.files_found} videos"
        self.logger.info(message)
        self.console.print(message)
        self.console.print(f"\nProcessing {event.files_found} videos...\n")

    def on_processing_finished(self, event: ProcessingFinished):
        self.report(event.summary)

    def report(self, summary: RunSummary):
        self.logger.info("=== Processing complete ===")
        self.logger.info(f"Successful: {summary.succeeded} (skipped existing: {summary.skipped})")
        self.logger.info(f"Failed: {summary.failed}")

        self.console.print("\n[bold]=== Processing complete ===[/bold]")
        self.console.print(f"[green]Successful:[/green] {summary.succeeded} (skipped existing: {summary.skipped})")
        self.console.print(f"[red]Failed:[/red] {summary.failed}" if summary.failed else "Failed: 0")

        if summary.failures:
            self.logger.info("Failed files:")
            self.console.print("\nFailed files:")
            for filename, error in summary.failures:
                self.logger.info(f"  - {filename} : {error}")
                # Full diagnostics stay in the log; the console gets the first line
                first_line = error.splitlines()[0] if error else ""
                self.console.print(f"  - {escape(filename)} : {escape(first_line)}")

        self.console.print(f"\nCheck {escape(str(self.log_path))} for detailed logs.")
