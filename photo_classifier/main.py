import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .core import RunCoordinator, prepare_destination
from .exceptions import ConfigurationError
from .models import RunOptions
from .reporting import ReportGenerator, format_summary
from .scanning.filesystem import PathStager


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="photo-classifier",
        description="Photo Classifier: file images into DEST by EXIF capture time",
    )

    p.add_argument("sources", type=Path, nargs="+", metavar="SOURCE", help="Image files or directories to classify")
    p.add_argument("dest", type=Path, metavar="DEST", help="Destination root")

    p.add_argument("-p", "--pattern", default=config.DEFAULT_PATTERN,
                   help=f"strftime pattern for the destination path (default: {config.DEFAULT_PATTERN.replace('%', '%%')})")
    p.add_argument("--no-dedup", dest="deduplicate", action="store_false", help="Copy byte-identical images again")
    p.add_argument("--delete", action="store_true", help="Delete originals after a verified copy and prune empty folders")
    p.add_argument("--dry-run", action="store_true", help="Simulate actions without modifying disk")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("-e", "--ext", dest="extensions", action="append", default=None,
                   help="Accepted extension, repeatable (default: .jpg .jpeg)")

    p.add_argument("--progress", action="store_true", help="Show a progress bar")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a per-image status report CSV")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    options = RunOptions(
        pattern=args.pattern,
        deduplicate=args.deduplicate,
        delete=args.delete,
        dry_run=args.dry_run,
        verbose=args.verbose,
        progress=args.progress,
        extensions=config.normalize_extensions(args.extensions or config.DEFAULT_EXTENSIONS),
    )

    # 1. Setup
    try:
        dest_root = prepare_destination(args.dest, create=not options.dry_run)
    except ConfigurationError as e:
        parser.print_usage(sys.stderr)
        logging.error(str(e))
        return 1

    logging.info("=== Photo Classifier Started ===")
    logging.info(f"Sources: {', '.join(str(s) for s in args.sources)}")
    logging.info(f"Dest:    {dest_root}")

    # 2. Staging (destination is never re-staged if nested in a source)
    stager = PathStager(options.extensions, skip_dirs={dest_root})
    staging = stager.stage(args.sources)

    # 3. Execution
    try:
        summary = RunCoordinator(dest_root, options).process(staging)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1

    if args.report_csv:
        ReportGenerator(summary).write_csv(args.report_csv)

    print(format_summary(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
