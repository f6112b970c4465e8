import threading
import time
from typing import Optional, Tuple


def estimate_remaining(elapsed: float, completed: int, total: int) -> Optional[float]:
    """Seconds left at the average pace so far, or None while no estimate exists."""
    if completed <= 0 or elapsed <= 0:
        return None
    remaining = max(0, total - completed)
    return elapsed / completed * remaining


def format_eta(seconds: Optional[float]) -> str:
    """Format ETA as HH:MM:SS."""
    if seconds is None:
        return "calculating..."
    seconds = int(seconds)
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


class ProgressTracker:
    """Completed-job counter and wall clock for one run."""

    def __init__(self, total: int):
        self.total = total
        self.completed = 0
        self._start = time.monotonic()
        self._lock = threading.Lock()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._start

    def advance(self) -> Tuple[int, float, Optional[float]]:
        """Counts one finished job; returns (completed, elapsed, eta)."""
        with self._lock:
            self.completed += 1
            elapsed = self.elapsed
            return self.completed, elapsed, estimate_remaining(elapsed, self.completed, self.total)
