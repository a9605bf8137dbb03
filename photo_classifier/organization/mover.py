import filecmp
import shutil
import logging
from pathlib import Path
from typing import Optional

from ..exceptions import FileHashError, FileOperationError
from ..models import CaptureStatus, ClassificationRecord, Outcome, StagedEntry
from ..scanning.hasher import FileHasher
from .ledger import DedupLedger
from .rules import DestinationResolver


class Classifier:
    def __init__(self,
                 resolver: DestinationResolver,
                 ledger: Optional[DedupLedger] = None,
                 hasher: Optional[FileHasher] = None,
                 dry_run: bool = False):
        self.resolver = resolver
        # None disables deduplication entirely
        self.ledger = ledger
        self.hasher = hasher or FileHasher()
        self.dry_run = dry_run

    def classify(self, image: StagedEntry) -> ClassificationRecord:
        """
        Resolve -> dedup -> copy -> verify for a single staged image.

        Every failure is recorded on the returned record; nothing propagates.
        """
        src = image.path

        # 1. Destination
        try:
            dest = self.resolver.resolve(image)
        except (OSError, ValueError) as e:
            logging.debug(f"Cannot compute destination for {src}: {e}")
            return ClassificationRecord(src, Outcome.FAILED_PROCESSING, note=str(e))
        if dest is None:
            note = self._resolution_note()
            logging.debug(f"No capture timestamp for {src}: {note}")
            return ClassificationRecord(src, Outcome.FAILED_PROCESSING, note=note)

        # 2. Deduplication
        digest = None
        if self.ledger is not None:
            try:
                digest = self.hasher.compute_hash(src)
            except FileHashError as e:
                logging.debug(str(e))
                return ClassificationRecord(src, Outcome.FAILED_PROCESSING, dest, note=str(e))

            if self.ledger.contains(digest):
                logging.debug(f"Duplicate content, not copied: {src}")
                return ClassificationRecord(src, Outcome.SUCCEEDED_COPY, duplicate=True, note="duplicate")

        if self.dry_run:
            self.resolver.reserve(dest)
            self._remember(digest)
            logging.info(f"[DRY RUN] Copy {src} -> {dest}")
            return ClassificationRecord(src, Outcome.SUCCEEDED_COPY, dest, note="dry-run")

        # 3-5. Place and verify
        try:
            self._copy(src, dest)
            self._verify(src, dest)
        except FileOperationError as e:
            logging.debug(str(e))
            return ClassificationRecord(src, Outcome.FAILED_COPY, dest, note=str(e))

        # Ledger only holds digests of content that was placed
        self._remember(digest)
        logging.debug(f"Copied {src} -> {dest}")
        return ClassificationRecord(src, Outcome.SUCCEEDED_COPY, dest)

    def _remember(self, digest: Optional[str]):
        if self.ledger is not None and digest is not None:
            self.ledger.add(digest)

    def _copy(self, src: Path, dest: Path):
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            # Exclusive create: never merge into a file that appeared after resolution
            with open(src, 'rb') as fsrc, open(dest, 'xb') as fdst:
                shutil.copyfileobj(fsrc, fdst)
            shutil.copystat(src, dest)
        except (OSError, ValueError) as e:
            raise FileOperationError(f"Failed to copy {src} -> {dest}: {e}") from e

    def _verify(self, src: Path, dest: Path):
        try:
            same = filecmp.cmp(src, dest, shallow=False)
        except (OSError, ValueError) as e:
            raise FileOperationError(f"Failed to verify {dest}: {e}") from e
        if not same:
            raise FileOperationError(f"Verification mismatch: {src} != {dest}")

    def _resolution_note(self) -> str:
        failure = self.resolver.last_failure
        if failure is None or failure.status is CaptureStatus.NO_TIMESTAMP:
            return "no_exif"
        return f"no_exif (unreadable: {failure.error})"
