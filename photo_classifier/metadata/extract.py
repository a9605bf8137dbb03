import logging
from pathlib import Path
from datetime import datetime
from typing import Any, Mapping, Optional

import exifread

from .. import config
from ..exceptions import MetadataExtractionError
from ..models import CaptureTimeResult


class MetadataExtractor:
    """
    Reads the capture timestamp embedded in an image.

    Uses 'exifread' (fast, Python-native). Only the date tags listed in
    config.DATE_TAGS are consulted; original capture wins over the generic
    modification stamp.
    """

    def read_capture_time(self, path: Path) -> CaptureTimeResult:
        """
        Never raises for bad input: a corrupt or truncated file comes back as
        UNREADABLE, a readable file without a usable date as NO_TIMESTAMP.
        """
        try:
            tags = self._read_tags(path)
        except MetadataExtractionError as e:
            logging.debug(str(e))
            return CaptureTimeResult.unreadable(str(e))

        dt = self._parse_exif_date(tags)
        if dt is None:
            return CaptureTimeResult.missing()
        return CaptureTimeResult.found(dt)

    def _read_tags(self, path: Path) -> Mapping[str, Any]:
        try:
            with path.open('rb') as f:
                # details=False skips makernotes and thumbnails
                return exifread.process_file(f, details=False)
        except Exception as e:
            # exifread surfaces truncated data as assorted low-level errors
            raise MetadataExtractionError(f"ExifRead failed for {path}: {e}") from e

    def _parse_exif_date(self, tags: Mapping[str, Any]) -> Optional[datetime]:
        """Helper to parse standard EXIF date strings from exifread."""
        for tag in config.DATE_TAGS:
            if tag in tags:
                parsed = parse_exif_datetime(str(tags[tag]))
                if parsed:
                    return parsed
        return None


def parse_exif_datetime(dt_str: str) -> Optional[datetime]:
    # EXIF format is "YYYY:MM:DD HH:MM:SS", sometimes NUL padded
    clean = dt_str.replace("\x00", "").strip()
    if not clean:
        return None
    try:
        return datetime.strptime(clean.replace(':', '-', 2), "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None
