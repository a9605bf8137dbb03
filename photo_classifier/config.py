"""
Configuration constants for the photo classifier.
"""

# --- File Type Definitions ---
DEFAULT_EXTENSIONS = {'.jpg', '.jpeg'}

# --- Metadata Parsing ---
# Priority order: original capture first, generic "modified" stamp last.
DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'EXIF DateTimeDigitized',
    'Image DateTime',
]

# --- Hashing ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Organization ---
# Applied with datetime.strftime, relative to the destination root.
DEFAULT_PATTERN = "%Y/%m/%Y%m%d-%H%M%S"

# Collision suffix: _001, _002, ...
SUFFIX_WIDTH = 3


def normalize_extensions(exts) -> set[str]:
    """Lower-cases and dot-prefixes user supplied extensions ('JPG' -> '.jpg')."""
    normalized = set()
    for ext in exts:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith('.'):
            ext = '.' + ext
        normalized.add(ext)
    return normalized
