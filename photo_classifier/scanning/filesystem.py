import os
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from .. import config
from ..models import RefusalReason, RefusedEntry, StagedEntry, StagingResult


class PathStager:
    def __init__(self,
                 extensions: Optional[Set[str]] = None,
                 skip_dirs: Optional[Iterable[Path]] = None):
        self.extensions = config.normalize_extensions(
            extensions if extensions is not None else config.DEFAULT_EXTENSIONS
        )
        # Resolved once so comparisons survive relative/absolute mixes
        self.skip_dirs = {Path(d).resolve() for d in (skip_dirs or ())}

    def stage(self, paths: Iterable[Path]) -> StagingResult:
        """
        Partitions input paths into staged images, recursed directories and refusals.

        Top-level arguments are handled in the order given. Directories are walked
        depth-first with an explicit stack, children sorted by name so repeated
        runs over an unchanged tree stage files in the same order.
        Only read-only filesystem queries are made.
        """
        result = StagingResult()

        for top in paths:
            # (path, reached_by_recursion)
            stack: List[Tuple[Path, bool]] = [(Path(top), False)]
            while stack:
                current, nested = stack.pop()

                if current.is_dir() and not (nested and current.is_symlink()):
                    if self._is_skipped(current):
                        logging.debug(f"Skipping directory {current}")
                        continue

                    try:
                        children = self._list_children(current)
                    except OSError as e:
                        logging.debug(f"Cannot list {current}: {e}")
                        self._refuse(result, current, RefusalReason.UNREADABLE)
                        continue

                    if nested:
                        result.directories.append(current)

                    # Push reversed so we process A before Z
                    for child in reversed(children):
                        stack.append((child, True))
                    continue

                self._stage_file(result, current)

        logging.debug(
            f"Staging complete: {len(result.images)} images, "
            f"{len(result.directories)} directories, {len(result.refused)} refused"
        )
        return result

    def _stage_file(self, result: StagingResult, path: Path):
        if not self._is_readable_file(path):
            self._refuse(result, path, RefusalReason.UNREADABLE)
            return

        if path.suffix.lower() not in self.extensions:
            self._refuse(result, path, RefusalReason.FILTER)
            return

        result.images.append(StagedEntry(path))

    def _refuse(self, result: StagingResult, path: Path, reason: RefusalReason):
        logging.debug(f"Refused ({reason.value}): {path}")
        result.refused.append(RefusedEntry(path, reason))

    def _list_children(self, directory: Path) -> List[Path]:
        with os.scandir(directory) as it:
            entries = list(it)
        entries.sort(key=lambda e: e.name)
        return [Path(e.path) for e in entries]

    def _is_readable_file(self, path: Path) -> bool:
        try:
            return path.is_file() and os.access(path, os.R_OK)
        except OSError:
            return False

    def _is_skipped(self, directory: Path) -> bool:
        if not self.skip_dirs:
            return False
        resolved = directory.resolve()
        return any(sd == resolved or sd in resolved.parents for sd in self.skip_dirs)
