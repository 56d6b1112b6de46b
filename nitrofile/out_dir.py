"""Output directory that is created on first use."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Union


class OutDirExistsError(FileExistsError):
    """Raised when the output directory already exists."""


class OutDir:
    """A fresh directory for output files, created when the first file is."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.created = False

    @classmethod
    def make_ready(cls, path: Union[str, Path]) -> OutDir:
        """Check that ``path`` does not exist yet, so nothing is overwritten."""
        path = Path(path)
        if path.exists():
            raise OutDirExistsError(
                f"the output directory should be fresh; {path} already exists"
            )
        return cls(path)

    def create_file(self, filename: str) -> BinaryIO:
        """Create (or truncate) a file in the directory, opened for binary writing."""
        if not self.created:
            self.path.mkdir()
            self.created = True
        return open(self.path / filename, "wb")