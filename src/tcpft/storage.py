from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .constants import DEFAULT_OUTPUT_DIR, FILE_EXTENSION, FILE_NUMBER_WIDTH, FILE_PREFIX
from .errors import StorageError


@dataclass(frozen=True, slots=True)
class OutputStore:
    """Where received files go and what they are called."""

    directory: Path = Path(DEFAULT_OUTPUT_DIR)
    prefix: str = FILE_PREFIX
    extension: str = FILE_EXTENSION

    def ensure_directory(self) -> None:
        if self.directory.is_dir():
            return
        try:
            self.directory.mkdir(parents=True)
        except OSError as e:
            raise StorageError(f"cannot create {self.directory}: {e}") from e
        logging.info("created output directory %s", self.directory)

    def path_for(self, number: int) -> Path:
        if number < 1:
            raise ValueError(f"file numbers start at 1, got {number}")
        return self.directory / f"{self.prefix}{number:0{FILE_NUMBER_WIDTH}d}{self.extension}"
