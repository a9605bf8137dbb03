import os
import pytest
from pathlib import Path

from photo_classifier import config
from photo_classifier.models import RefusalReason, StagedEntry
from photo_classifier.scanning.filesystem import PathStager
from photo_classifier.scanning.hasher import FileHasher
from photo_classifier.exceptions import FileHashError


def test_compute_file_hash(tmp_path):
    a = tmp_path / "a.bin"
    b = tmp_path / "b.bin"
    c = tmp_path / "c.bin"
    data = b"hello world" * 10000
    a.write_bytes(data)
    b.write_bytes(data)
    c.write_bytes(data + b"!")

    hasher = FileHasher()
    assert hasher.compute_hash(a) == hasher.compute_hash(b)
    assert hasher.compute_hash(a) != hasher.compute_hash(c)
    assert len(hasher.compute_hash(a)) == 64


def test_compute_file_hash_missing_file(tmp_path):
    with pytest.raises(FileHashError):
        FileHasher().compute_hash(tmp_path / "gone.jpg")


def test_stager_partitions_entries(tmp_path):
    root = tmp_path / "src"
    sub = root / "a"
    deeper = sub / "b"
    deeper.mkdir(parents=True)
    (root / "top.jpg").write_bytes(b"1")
    (root / "notes.txt").write_text("n")
    (sub / "UPPER.JPG").write_bytes(b"2")
    (deeper / "deep.jpeg").write_bytes(b"3")

    result = PathStager().stage([root])

    assert [e.path for e in result.images] == [
        sub / "UPPER.JPG",
        deeper / "deep.jpeg",
        root / "top.jpg",
    ]
    # Only directories reached by recursion are recorded
    assert result.directories == [sub, deeper]
    assert [(r.path, r.reason) for r in result.refused] == [
        (root / "notes.txt", RefusalReason.FILTER),
    ]


def test_stager_accepts_top_level_files_and_refuses_missing(tmp_path):
    img = tmp_path / "photo.jpg"
    img.write_bytes(b"x")
    txt = tmp_path / "readme.md"
    txt.write_text("x")
    missing = tmp_path / "missing.jpg"

    result = PathStager().stage([img, txt, missing])

    assert result.images == [StagedEntry(img)]
    assert result.directories == []
    reasons = {r.path: r.reason for r in result.refused}
    assert reasons[txt] is RefusalReason.FILTER
    assert reasons[missing] is RefusalReason.UNREADABLE


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="permission bits not enforced")
def test_stager_refuses_unreadable_file(tmp_path):
    img = tmp_path / "locked.jpg"
    img.write_bytes(b"x")
    img.chmod(0)
    try:
        result = PathStager().stage([tmp_path])
    finally:
        img.chmod(0o644)

    assert result.images == []
    assert result.refused[0].reason is RefusalReason.UNREADABLE


def test_stager_order_is_stable(tmp_path):
    for name in ["c.jpg", "a.jpg", "b.jpg"]:
        (tmp_path / name).write_bytes(name.encode())
    (tmp_path / "z").mkdir()
    (tmp_path / "z" / "0.jpg").write_bytes(b"0")

    first = PathStager().stage([tmp_path])
    second = PathStager().stage([tmp_path])

    assert first == second
    assert [e.path.name for e in first.images] == ["a.jpg", "b.jpg", "c.jpg", "0.jpg"]


def test_stager_custom_extensions(tmp_path):
    (tmp_path / "a.png").write_bytes(b"1")
    (tmp_path / "b.jpg").write_bytes(b"2")

    result = PathStager(extensions={"PNG"}).stage([tmp_path])

    assert [e.path.name for e in result.images] == ["a.png"]


def test_stager_skips_destination_inside_source(tmp_path):
    src = tmp_path / "src"
    dest = src / "library"
    (dest / "2021").mkdir(parents=True)
    (dest / "2021" / "old.jpg").write_bytes(b"old")
    (src / "new.jpg").write_bytes(b"new")

    result = PathStager(skip_dirs={dest}).stage([src])

    assert [e.path.name for e in result.images] == ["new.jpg"]
    assert dest not in result.directories


def test_stager_handles_deep_trees(tmp_path):
    current = tmp_path
    for i in range(60):
        current = current / f"d{i}"
    current.mkdir(parents=True)
    (current / "deep.jpg").write_bytes(b"x")

    result = PathStager().stage([tmp_path])

    assert len(result.images) == 1
    assert len(result.directories) == 60


def test_normalize_extensions():
    assert config.normalize_extensions(["JPG", ".Jpeg", " tif ", ""]) == {".jpg", ".jpeg", ".tif"}
