import logging
from pathlib import Path
from datetime import datetime
from typing import Optional, Set

from .. import config
from ..metadata.extract import MetadataExtractor
from ..models import CaptureTimeResult, StagedEntry


def format_relative(timestamp: datetime, pattern: str, ext: str) -> Path:
    """
    Relative destination for a capture time, before any collision suffix.
    e.g. 2021-06-15 10:20:30 with "%Y/%m/%d-%H%M%S" and ".JPG" -> 2021/06/15-102030.jpg
    """
    return Path(timestamp.strftime(pattern) + ext.lower())


class DestinationResolver:
    def __init__(self,
                 dest_root: Path,
                 pattern: str = config.DEFAULT_PATTERN,
                 extractor: Optional[MetadataExtractor] = None):
        self.dest_root = Path(dest_root)
        self.pattern = pattern
        self.extractor = extractor or MetadataExtractor()
        # Paths claimed in this run without being written (dry-run)
        self.reserved: Set[Path] = set()
        self.last_failure: Optional[CaptureTimeResult] = None

    def resolve(self, image: StagedEntry) -> Optional[Path]:
        """
        Computes a non-colliding destination for the image, or None when no
        capture timestamp can be extracted (missing and corrupt metadata alike).
        """
        capture = self.extractor.read_capture_time(image.path)
        if not capture.ok:
            self.last_failure = capture
            return None

        self.last_failure = None
        candidate = self.dest_root / format_relative(capture.timestamp, self.pattern, image.ext)
        return self._resolve_collision(candidate)

    def reserve(self, path: Path):
        self.reserved.add(path)

    def _resolve_collision(self, candidate: Path) -> Path:
        """Appends _001, _002, ... before the extension until the path is free."""
        # Not atomic against other writers; runs are single-threaded
        stem = candidate.stem
        ext = candidate.suffix
        folder = candidate.parent
        counter = 1

        while self._is_taken(candidate):
            candidate = folder / f"{stem}_{counter:0{config.SUFFIX_WIDTH}d}{ext}"
            counter += 1

        if counter > 1:
            logging.debug(f"Destination collision resolved to {candidate}")
        return candidate

    def _is_taken(self, path: Path) -> bool:
        return path in self.reserved or path.is_file()
