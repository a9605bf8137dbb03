import hashlib
from pathlib import Path

from .. import config
from ..exceptions import FileHashError


class FileHasher:
    def compute_hash(self, path: Path) -> str:
        """
        Full-content SHA-256 of the file, hex encoded.

        Two files with equal digests are treated as identical content regardless
        of name, location or timestamp.
        """
        h = hashlib.sha256()
        try:
            with open(path, 'rb') as f:
                while chunk := f.read(config.HASH_CHUNK_SIZE):
                    h.update(chunk)
        except (OSError, ValueError) as e:
            raise FileHashError(f"Cannot hash {path}: {e}") from e
        return h.hexdigest()
