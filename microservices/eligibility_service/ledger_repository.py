"""
Ledger Repository

Data access layer for the subscription ledger - in-memory mapping keyed by
email, persisted as one pretty-printed JSON object after every mutation.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from .models import MemberRecord
from .protocols import LedgerPersistenceError, LedgerStorageProtocol

logger = logging.getLogger(__name__)

_MISSING = object()


class FileLedgerStorage:
    """Ledger bytes on local disk, replaced atomically on write"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read_all(self) -> Optional[bytes]:
        if not self.path.exists():
            return None
        return self.path.read_bytes()

    def write_all(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class LedgerRepository:
    """Subscription ledger - single writer, email is the key"""

    def __init__(self, storage: LedgerStorageProtocol):
        self.storage = storage
        self._records: Dict[str, MemberRecord] = {}

    # ====================
    # Persistence
    # ====================

    def load(self) -> Dict[str, MemberRecord]:
        """Read durable storage; corrupt or missing data starts an empty ledger"""
        self._records = {}
        try:
            raw = self.storage.read_all()
        except OSError as e:
            logger.warning(f"Could not read ledger storage, starting empty: {e}")
            return dict(self._records)

        if not raw:
            logger.info("No stored ledger found, starting empty")
            return dict(self._records)

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ledger storage is corrupt, starting empty: {e}")
            return dict(self._records)

        if not isinstance(payload, dict):
            logger.warning("Ledger storage is not a JSON object, starting empty")
            return dict(self._records)

        for email, fields in payload.items():
            try:
                record = MemberRecord.model_validate(fields)
            except ValidationError as e:
                logger.warning(f"Dropping unreadable ledger entry for {email}: {e.error_count()} errors")
                continue
            self._records[record.email] = record

        logger.info(f"Loaded {len(self._records)} subscription records")
        return dict(self._records)

    def _serialize(self) -> bytes:
        payload = {email: record.to_storage() for email, record in self._records.items()}
        return json.dumps(payload, indent=2).encode("utf-8")

    def flush(self) -> None:
        """Write the whole ledger; one immediate retry before giving up"""
        data = self._serialize()
        try:
            self.storage.write_all(data)
        except OSError as first_error:
            logger.warning(f"Ledger write failed, retrying once: {first_error}")
            try:
                self.storage.write_all(data)
            except OSError as e:
                raise LedgerPersistenceError(f"Failed to persist ledger: {e}") from e

    def _commit(self, email: str, previous) -> None:
        """Persist, restoring the prior in-memory entry if the write fails"""
        try:
            self.flush()
        except LedgerPersistenceError:
            if previous is _MISSING:
                self._records.pop(email, None)
            else:
                self._records[email] = previous
            logger.error(f"Ledger mutation for {email} rolled back, storage unavailable")
            raise

    # ====================
    # Mutations
    # ====================

    def upsert(self, record: MemberRecord) -> Optional[MemberRecord]:
        """Replace any record under the same email (last write wins)"""
        previous = self._records.get(record.email, _MISSING)
        self._records[record.email] = record
        self._commit(record.email, previous)
        logger.info(f"Updated subscription record for {record.email}")
        return None if previous is _MISSING else previous

    def remove(self, email: str) -> Optional[MemberRecord]:
        """Delete the record; absent email is a no-op"""
        if email not in self._records:
            logger.info(f"No subscription record for {email}, nothing to remove")
            return None
        previous = self._records.pop(email)
        try:
            self.flush()
        except LedgerPersistenceError:
            self._records[email] = previous
            logger.error(f"Ledger removal for {email} rolled back, storage unavailable")
            raise
        logger.info(f"Removed subscription record for {email}")
        return previous

    # ====================
    # Queries
    # ====================

    def get(self, email: str) -> Optional[MemberRecord]:
        return self._records.get(email)

    def all(self) -> List[MemberRecord]:
        return list(self._records.values())

    def count(self) -> int:
        return len(self._records)

    def __contains__(self, email: str) -> bool:
        return email in self._records


__all__ = ["LedgerRepository", "FileLedgerStorage"]
