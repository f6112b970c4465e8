import os
from pathlib import Path
from vbt.domain.errors import PathMappingError

class PathMapper:
    """Mirrors input paths under the output root."""

    def __init__(self, input_root: Path, output_root: Path):
        self.input_root = Path(input_root)
        self.output_root = Path(output_root)

    def relative_path(self, input_path: Path) -> Path:
        """Returns input_path relative to the input root.

        Raises PathMappingError when the result would not stay under the output root.
        """
        input_path = Path(input_path)
        # Normalized absolute paths so "./in", "in" and "a/../in" compare equal
        try:
            rel_path = Path(os.path.abspath(input_path)).relative_to(os.path.abspath(self.input_root))
        except ValueError:
            raise PathMappingError(f"{input_path} is not inside input directory {self.input_root}")
        if not rel_path.parts or ".." in rel_path.parts:
            raise PathMappingError(f"{input_path} does not name a file inside {self.input_root}")
        return rel_path

    def map(self, input_path: Path) -> Path:
        """Returns the output path for input_path and creates its parent directory."""
        output_path = self.output_root / self.relative_path(input_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PathMappingError(f"Cannot create output directory {output_path.parent}: {e}")
        return output_path
