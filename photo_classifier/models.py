from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set

from . import config


class RefusalReason(str, Enum):
    FILTER = "filter"
    UNREADABLE = "unreadable"


class CaptureStatus(str, Enum):
    OK = "ok"
    NO_TIMESTAMP = "no_timestamp"
    UNREADABLE = "unreadable"


class Outcome(str, Enum):
    SUCCEEDED_COPY = "succeeded_copy"
    FAILED_COPY = "failed_copy"
    FAILED_PROCESSING = "failed_processing"


@dataclass(frozen=True)
class StagedEntry:
    """
    A regular, readable file with an accepted extension.
    """
    path: Path

    @property
    def ext(self) -> str:
        return self.path.suffix.lower()


@dataclass(frozen=True)
class RefusedEntry:
    path: Path
    reason: RefusalReason


@dataclass
class StagingResult:
    images: List[StagedEntry] = field(default_factory=list)
    # Directories reached by recursion only; candidates for pruning
    directories: List[Path] = field(default_factory=list)
    refused: List[RefusedEntry] = field(default_factory=list)


@dataclass(frozen=True)
class CaptureTimeResult:
    """
    Explicit outcome of reading the capture timestamp from a file.
    """
    status: CaptureStatus
    timestamp: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is CaptureStatus.OK

    @classmethod
    def found(cls, timestamp: datetime) -> "CaptureTimeResult":
        return cls(CaptureStatus.OK, timestamp=timestamp)

    @classmethod
    def missing(cls) -> "CaptureTimeResult":
        return cls(CaptureStatus.NO_TIMESTAMP)

    @classmethod
    def unreadable(cls, error: str) -> "CaptureTimeResult":
        return cls(CaptureStatus.UNREADABLE, error=error)


@dataclass
class ClassificationRecord:
    source: Path
    outcome: Outcome
    destination: Optional[Path] = None
    duplicate: bool = False
    note: str = ""


@dataclass
class RunOptions:
    pattern: str = config.DEFAULT_PATTERN
    deduplicate: bool = True
    delete: bool = False
    dry_run: bool = False
    verbose: bool = False
    progress: bool = False
    extensions: Set[str] = field(default_factory=lambda: set(config.DEFAULT_EXTENSIONS))


@dataclass
class RunSummary:
    """
    Result of one run. Records are kept in staging order.
    """
    records: List[ClassificationRecord] = field(default_factory=list)
    refused: List[RefusedEntry] = field(default_factory=list)

    # Populated by the cleanup phase
    deleted: List[Path] = field(default_factory=list)
    pruned: List[Path] = field(default_factory=list)

    def _count(self, outcome: Outcome) -> int:
        return sum(1 for r in self.records if r.outcome is outcome)

    @property
    def staged(self) -> int:
        return len(self.records)

    @property
    def succeeded(self) -> int:
        return self._count(Outcome.SUCCEEDED_COPY)

    @property
    def failed_copy(self) -> int:
        return self._count(Outcome.FAILED_COPY)

    @property
    def failed_processing(self) -> int:
        return self._count(Outcome.FAILED_PROCESSING)

    @property
    def failed(self) -> int:
        return self.failed_copy + self.failed_processing

    @property
    def duplicates(self) -> int:
        return sum(1 for r in self.records if r.duplicate)

    @property
    def succeeded_paths(self) -> List[Path]:
        return [r.source for r in self.records if r.outcome is Outcome.SUCCEEDED_COPY]
