"""
Transaction Record Store

Holds the user's transaction records as one JSON array in the key-value
store.

DESIGN DECISION: Every operation is whole-collection. Reads decode the full
array; writes re-serialize and re-persist all records. At the scale of one
person's expenses this is simpler than any index and keeps the stored
document trivially exportable.

If this ever has to handle large datasets, replace it with a store keyed by
record id that supports point reads and writes.
"""

import json
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from expense_tracker.log import get_logger
from expense_tracker.models.transaction import (
    Transaction,
    TransactionCreate,
    utcnow,
)
from expense_tracker.services.dates import month_bounds
from expense_tracker.services.storage import CorruptDataError, KeyValueStore


logger = get_logger(__name__)

_RECORDS_ADAPTER = TypeAdapter(list[Transaction])

# Fields an update may never overwrite
_IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})


class RecordStore:
    """
    CRUD, export and import for transaction records.

    All methods are synchronous and operate on the entire record set.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = "expense-tracker-data",
    ):
        self._store = store
        self._key = key
        self._initialize_storage()

    def _initialize_storage(self) -> None:
        if self._store.get(self._key) is None:
            self._save([])

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_all(self) -> list[Transaction]:
        """
        Return every stored record.

        Raises:
            CorruptDataError: If the stored document is not a valid record array
        """
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            return _RECORDS_ADAPTER.validate_json(raw)
        except ValidationError as e:
            logger.error("records_decode_failed", key=self._key, errors=e.error_count())
            raise CorruptDataError(self._key, str(e)) from e

    def get(self, record_id: str) -> Optional[Transaction]:
        """Return one record by id, or None."""
        for record in self.get_all():
            if record.id == record_id:
                return record
        return None

    def get_by_date_range(self, start: date, end: date) -> list[Transaction]:
        """Records whose occurrence date lies within [start, end]."""
        return [r for r in self.get_all() if start <= r.date <= end]

    def get_current_month(self, today: Optional[date] = None) -> list[Transaction]:
        """Records in the calendar month containing today."""
        today = today or date.today()
        start, end = month_bounds(today.year, today.month)
        return self.get_by_date_range(start, end)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def add(self, data: Union[TransactionCreate, dict[str, Any]]) -> Transaction:
        """
        Create a record: assign id and timestamps, append, persist.

        Raises:
            pydantic.ValidationError: If the data is not a valid transaction
        """
        if isinstance(data, BaseModel):
            data = data.model_dump()
        fields = TransactionCreate.model_validate(data).model_dump()

        now = utcnow()
        record = Transaction(**fields, created_at=now, updated_at=now)

        records = self.get_all()
        records.append(record)
        self._save(records)

        logger.info(
            "record_added",
            record_id=record.id,
            kind=record.kind.value,
            category=record.category.value,
        )
        return record

    def update(self, record_id: str, changes: dict[str, Any]) -> Optional[Transaction]:
        """
        Merge changes into a record and refresh its update timestamp.

        Returns:
            The updated record, or None if no record has this id

        Raises:
            pydantic.ValidationError: If the merged record is invalid
        """
        records = self.get_all()
        for index, record in enumerate(records):
            if record.id != record_id:
                continue

            merged = record.model_dump()
            merged.update(
                {k: v for k, v in changes.items() if k not in _IMMUTABLE_FIELDS}
            )
            merged["updated_at"] = utcnow()
            updated = Transaction.model_validate(merged)

            records[index] = updated
            self._save(records)
            logger.info("record_updated", record_id=record_id, fields=sorted(changes))
            return updated

        logger.info("record_update_missed", record_id=record_id)
        return None

    def delete(self, record_id: str) -> bool:
        """
        Remove a record by id.

        Returns:
            True if a record was removed. On a miss nothing is written.
        """
        records = self.get_all()
        remaining = [r for r in records if r.id != record_id]

        if len(remaining) == len(records):
            return False

        self._save(remaining)
        logger.info("record_deleted", record_id=record_id)
        return True

    def clear_all(self) -> None:
        """Drop every record and start again with an empty list."""
        self._store.delete(self._key)
        self._initialize_storage()
        logger.info("records_cleared")

    # -------------------------------------------------------------------------
    # Export / import
    # -------------------------------------------------------------------------

    def export_all(self) -> str:
        """Pretty-printed JSON array of every record, amounts as numbers."""
        rows = []
        for record in self.get_all():
            row = record.model_dump(mode="json")
            row["amount"] = float(record.amount)
            rows.append(row)
        return json.dumps(rows, indent=2, ensure_ascii=False)

    @staticmethod
    def export_filename(today: Optional[date] = None) -> str:
        """Download file name, e.g. 'expense-data-2026-10-19.json'."""
        today = today or date.today()
        return f"expense-data-{today.isoformat()}.json"

    def import_all(self, json_data: str) -> bool:
        """
        Replace the whole record set with the records in json_data.

        The input must be a JSON array of valid records. Anything else is
        rejected and the current records are left untouched.

        Returns:
            True if the records were replaced
        """
        try:
            parsed = json.loads(json_data, parse_float=Decimal)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning("records_import_rejected", reason="invalid_json", error=str(e))
            return False

        if not isinstance(parsed, list):
            logger.warning("records_import_rejected", reason="not_an_array")
            return False

        try:
            records = _RECORDS_ADAPTER.validate_python(parsed)
        except ValidationError as e:
            logger.warning(
                "records_import_rejected",
                reason="invalid_records",
                errors=e.error_count(),
            )
            return False

        self._save(records)
        logger.info("records_imported", count=len(records))
        return True

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _save(self, records: list[Transaction]) -> None:
        self._store.set(self._key, _RECORDS_ADAPTER.dump_json(records).decode("utf-8"))


def sum_amounts(records: list[Transaction]) -> Decimal:
    """Sum of record amounts, exact."""
    return sum((r.amount for r in records), Decimal("0"))
