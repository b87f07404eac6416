"""
app/services/csv_ingestion_service.py

Loads the transaction CSV into typed :class:`TransactionRecord` objects.

This is the only place malformed input is handled.  Rows whose sales,
quantity or profit do not parse are dropped and reported in the
:class:`IngestionSummary`; the aggregation layer only ever receives
well-formed records.  Blank lines are skipped without being counted.
"""

from __future__ import annotations

import csv
import io
import logging
import time
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import IO

from app.config import get_csv_ingestion_settings
from app.domain.ingestion import IngestionSummary, RowValidationError
from app.domain.transaction import TransactionRecord
from app.logging_utils import log_event
from app.validators.transaction_validator import REQUIRED_COLUMNS, TransactionRowValidator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVHeaderValidationError(ValueError):
    """
    Raised when CSV shape/header validation fails.
    """


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IngestionResult:
    """
    Parsed records plus the summary of what was dropped.
    """

    records: list[TransactionRecord] = field(default_factory=list)
    summary: IngestionSummary = field(
        default_factory=lambda: IngestionSummary(rows_processed=0, rows_failed=0)
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CSVIngestionService:
    """
    Coordinates CSV parsing and row validation.
    """

    def __init__(
        self,
        *,
        max_validation_errors: int,
        log_validation_errors: bool,
        validator: TransactionRowValidator | None = None,
    ) -> None:
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors
        self._validator = validator or TransactionRowValidator()

    def load_path(self, path: str | Path) -> IngestionResult:
        """
        Read and parse the CSV file at *path* (UTF-8, optional BOM).
        """
        with Path(path).open("r", encoding="utf-8-sig", newline="") as handle:
            return self.load(handle, source=str(path))

    def load_text(self, text: str) -> IngestionResult:
        """
        Parse CSV content held in memory.
        """
        return self.load(io.StringIO(text, newline=""), source="<text>")

    def load(self, stream: IO[str], *, source: str = "<stream>") -> IngestionResult:
        """
        Parse every row of *stream*, keeping well-formed records in order.

        Raises:
            CSVHeaderValidationError: The header row is missing, lacks a
                required column, or the content is not valid CSV.
        """
        started = time.monotonic()
        records: list[TransactionRecord] = []
        rows_failed = 0
        captured_errors: list[RowValidationError] = []

        try:
            reader = csv.DictReader(stream)
            headers = [header.strip() for header in (reader.fieldnames or [])]
            if not headers:
                raise CSVHeaderValidationError("CSV header row is missing.")
            missing = [column for column in REQUIRED_COLUMNS if column not in headers]
            if missing:
                raise CSVHeaderValidationError(
                    f"CSV is missing required columns: {', '.join(missing)}."
                )

            for row_number, raw_row in enumerate(reader, start=2):
                row = {
                    (key.strip() if isinstance(key, str) else key): value
                    for key, value in raw_row.items()
                }
                if self._validator.is_completely_empty_row(row):
                    continue

                record, row_errors = self._validator.validate_row(row=row, row_number=row_number)
                if row_errors or record is None:
                    rows_failed += 1
                    for error in row_errors:
                        self._record_error(captured_errors, error)
                    continue
                records.append(record)
        except csv.Error as exc:
            raise CSVHeaderValidationError(f"Invalid CSV format: {exc}") from exc

        summary = IngestionSummary(
            rows_processed=len(records),
            rows_failed=rows_failed,
            validation_errors=captured_errors,
        )
        log_event(
            logger,
            logging.INFO,
            "csv_ingestion_completed",
            source=source,
            rows_processed=summary.rows_processed,
            rows_failed=summary.rows_failed,
            elapsed_ms=round((time.monotonic() - started) * 1000, 2),
        )
        return IngestionResult(records=records, summary=summary)

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "CSV validation error row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)


@lru_cache(maxsize=1)
def get_csv_ingestion_service() -> CSVIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_csv_ingestion_settings()
    return CSVIngestionService(
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
    )


def load_transactions(path: str | Path) -> list[TransactionRecord]:
    """Load well-formed records from *path*, dropping malformed rows."""
    return get_csv_ingestion_service().load_path(path).records
