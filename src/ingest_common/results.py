# src/ingest_common/results.py
import logging
from dataclasses import dataclass

from ingest_common.errors import IngestError, LookupMiss

logger = logging.getLogger(__name__)


@dataclass
class StageResult:
    stage: str
    applied: int = 0
    skipped: int = 0

    def as_dict(self):
        return {"applied": self.applied, "skipped": self.skipped}


def apply_rows(stage, rows, reduce_row, store, source=""):
    """Fold each row into the store, logging and skipping rows that fail."""
    result = StageResult(stage)
    for n, row in enumerate(rows, start=1):
        try:
            reduce_row(store, row)
        except LookupMiss as exc:
            result.skipped += 1
            logger.warning("%s %s row %d dropped: %s", stage, source, n, exc)
        except IngestError as exc:
            result.skipped += 1
            logger.error("%s %s row %d skipped: %s", stage, source, n, exc)
        else:
            result.applied += 1
    logger.info("%s %s: %d applied, %d skipped", stage, source, result.applied, result.skipped)
    return result
