import csv
import logging
from pathlib import Path

from .models import RunSummary

STATUS_LABELS = {
    "succeeded_copy": "Copied",
    "failed_copy": "Copy Failed",
    "failed_processing": "Processing Failed",
}


def format_summary(summary: RunSummary) -> str:
    """The end-of-run report printed by the CLI."""
    return "\n".join([
        f"Staged:    {summary.staged}",
        f"Failed:    {summary.failed}",
        f"Succeeded: {summary.succeeded}",
    ])


class ReportGenerator:
    def __init__(self, summary: RunSummary):
        self.summary = summary

    def write_csv(self, output_csv: Path):
        """
        Writes one row per staged image, followed by one row per refused path.
        """
        headers = [
            "Source Path",
            "Status",
            "Destination Path",
            "Duplicate",
            "Notes",
        ]

        output_csv = Path(output_csv)
        output_csv.parent.mkdir(parents=True, exist_ok=True)

        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(headers)

            for record in self.summary.records:
                writer.writerow([
                    str(record.source),
                    STATUS_LABELS[record.outcome.value],
                    str(record.destination) if record.destination else "",
                    "yes" if record.duplicate else "",
                    record.note,
                ])

            for refused in self.summary.refused:
                writer.writerow([
                    str(refused.path),
                    f"Refused ({refused.reason.value})",
                    "",
                    "",
                    "",
                ])

        logging.info(f"Report written to {output_csv}")
