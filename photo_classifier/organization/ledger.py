from typing import Set


class DedupLedger:
    """
    Content digests already placed during the current run.

    Grows monotonically and is never persisted, so duplicates are only
    detected within a single run.
    """

    def __init__(self):
        self._digests: Set[str] = set()

    def contains(self, digest: str) -> bool:
        return digest in self._digests

    def add(self, digest: str):
        self._digests.add(digest)

    def __contains__(self, digest: str) -> bool:
        return self.contains(digest)

    def __len__(self) -> int:
        return len(self._digests)
