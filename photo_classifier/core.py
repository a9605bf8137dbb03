import logging
from pathlib import Path
from typing import Iterable, List, Optional

from tqdm import tqdm

from .exceptions import ConfigurationError
from .models import ClassificationRecord, Outcome, RunOptions, RunSummary, StagingResult
from .organization.ledger import DedupLedger
from .organization.mover import Classifier
from .organization.rules import DestinationResolver


def prepare_destination(dest_root: Path, create: bool = True) -> Path:
    """Creates the destination root; raises ConfigurationError if it cannot be a directory."""
    dest_root = Path(dest_root)
    if not create:
        if dest_root.exists() and not dest_root.is_dir():
            raise ConfigurationError(f"Destination is not a directory: {dest_root}")
        return dest_root
    try:
        dest_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(f"Cannot create destination directory {dest_root}: {e}") from e
    if not dest_root.is_dir():
        raise ConfigurationError(f"Destination is not a directory: {dest_root}")
    return dest_root


class RunCoordinator:
    def __init__(self,
                 dest_root: Path,
                 options: Optional[RunOptions] = None,
                 classifier: Optional[Classifier] = None):
        self.dest_root = Path(dest_root)
        self.options = options or RunOptions()
        self.classifier = classifier or self._build_classifier()

    def _build_classifier(self) -> Classifier:
        resolver = DestinationResolver(self.dest_root, self.options.pattern)
        ledger = DedupLedger() if self.options.deduplicate else None
        return Classifier(resolver, ledger=ledger, dry_run=self.options.dry_run)

    def process(self, staging: StagingResult) -> RunSummary:
        """
        Executes the run:
        1. Classify every staged image, in staging order
        2. Delete originals that were placed (if requested)
        3. Prune directories left empty by step 2

        Deletion strictly follows classification since eligibility depends on
        the final outcome of every image.
        """
        summary = RunSummary(refused=list(staging.refused))
        images = staging.images
        total = len(images)

        logging.info(f"Classifying {total} images (Dedup={self.options.deduplicate}, "
                     f"Delete={self.options.delete}, DryRun={self.options.dry_run})...")

        iterator = tqdm(images, desc="Classifying", disable=not self.options.progress)
        for index, image in enumerate(iterator, start=1):
            if self.options.verbose:
                logging.info(f"[{index}/{total}] {image.path}")
            record = self.classifier.classify(image)
            summary.records.append(record)

        if self.options.delete:
            summary.deleted = self._delete_originals(summary.records)
            summary.pruned = self._prune_directories(staging.directories)

        return summary

    def _delete_originals(self, records: Iterable[ClassificationRecord]) -> List[Path]:
        """Best-effort removal of every successfully placed source, duplicates included."""
        deleted = []
        for record in records:
            if record.outcome is not Outcome.SUCCEEDED_COPY:
                continue
            if self.options.dry_run:
                logging.info(f"[DRY RUN] Delete {record.source}")
                continue
            try:
                record.source.unlink()
                deleted.append(record.source)
            except OSError as e:
                logging.debug(f"Could not delete {record.source}: {e}")
        return deleted

    def _prune_directories(self, directories: Iterable[Path]) -> List[Path]:
        """
        Removes staged directories that are now empty.

        Reverse lexicographic order visits children before their parents.
        A non-empty directory simply stays.
        """
        pruned = []
        for directory in sorted(set(directories), key=str, reverse=True):
            if self.options.dry_run:
                logging.info(f"[DRY RUN] Prune {directory}")
                continue
            try:
                directory.rmdir()
                pruned.append(directory)
            except OSError:
                continue
        return pruned
