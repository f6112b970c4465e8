import os
from pathlib import Path
from typing import Iterable, List, Optional
from vbt.domain.errors import NoInputFound

VIDEO_EXTENSIONS = (".mp4", ".avi", ".mov", ".mkv")

class FileScanner:
    """Recursively scans for video files in a directory."""

    def __init__(self, extensions: Iterable[str] = VIDEO_EXTENSIONS, exclude_dir: Optional[Path] = None):
        self.extensions = [(ext if ext.startswith(".") else f".{ext}").lower() for ext in extensions]
        # Output root nested inside the input root must not be re-ingested
        self.exclude_dir = Path(os.path.abspath(exclude_dir)) if exclude_dir else None

    def scan(self, root_dir: Path) -> List[Path]:
        """Returns matching video paths sorted by their path relative to root_dir.

        Raises NoInputFound if root_dir is missing or holds no video files.
        """
        root_dir = Path(root_dir)
        if not root_dir.is_dir():
            raise NoInputFound(root_dir, reason="Input directory does not exist")

        found: List[Path] = []
        for root, dirs, files in os.walk(str(root_dir)):
            root_path = Path(root)

            if self.exclude_dir is not None and Path(os.path.abspath(root)) == self.exclude_dir:
                dirs[:] = []  # stop recursion into this branch
                continue

            # Deterministic traversal
            dirs.sort()
            files.sort()

            for file_name in files:
                file_path = root_path / file_name
                if file_path.suffix.lower() in self.extensions:
                    found.append(file_path)

        if not found:
            raise NoInputFound(root_dir)
        # Lexicographic by relative path: "a/9.mp4" sorts before "c.mp4"
        return sorted(found, key=lambda p: p.relative_to(root_dir).as_posix())
