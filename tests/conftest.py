import pytest
from datetime import datetime
from pathlib import Path
from PIL import Image

from photo_classifier.metadata.extract import MetadataExtractor
from photo_classifier.models import CaptureTimeResult


def write_jpeg(path: Path, dt: datetime = None, color=(200, 30, 30)) -> Path:
    """Writes a tiny real JPEG, with an EXIF DateTime when dt is given."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with Image.new("RGB", (8, 8), color=color) as im:
        if dt is None:
            im.save(path, "JPEG")
        else:
            exif = Image.Exif()
            exif[306] = dt.strftime("%Y:%m:%d %H:%M:%S")  # Image DateTime
            im.save(path, "JPEG", exif=exif)
    return path


@pytest.fixture
def make_jpeg():
    return write_jpeg


@pytest.fixture
def capture_times(monkeypatch):
    """
    Replaces EXIF reading with a lookup by file name.
    Names missing from the returned dict behave like images without a timestamp.
    """
    times = {}

    def fake_read(self, path):
        dt = times.get(Path(path).name)
        if dt is None:
            return CaptureTimeResult.missing()
        return CaptureTimeResult.found(dt)

    monkeypatch.setattr(MetadataExtractor, "read_capture_time", fake_read)
    return times
