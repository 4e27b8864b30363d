"""Local persistence of evaluated display records."""

import json
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class EvaluatedRecordWriter:
    """
    Writes evaluated records to a JSON file.

    Fire-and-forget: a failed write is logged and the run carries on.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.logger = logger.bind(component="evaluated_record_writer", path=str(self.path))

    def write(self, records: list[dict[str, str]]) -> bool:
        """Returns True when the file was written."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(records), encoding="utf-8")
        except (OSError, TypeError) as e:
            self.logger.error("evaluated_records_write_failed", error=str(e))
            return False

        self.logger.info("evaluated_records_written", count=len(records))
        return True
