"""
Eligibility Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

# Import only models (no I/O dependencies)
from .models import MemberRecord


# Custom exceptions - defined here to avoid importing repository
class EligibilityServiceError(Exception):
    """Base exception for eligibility service errors"""
    pass


class InvalidEventError(EligibilityServiceError):
    """Webhook body is missing required fields"""
    pass


class OrderLookupError(EligibilityServiceError):
    """Order could not be fetched from the commerce platform"""

    def __init__(self, message: str, order_id: Optional[str] = None, not_found: bool = False):
        super().__init__(message)
        self.order_id = order_id
        self.not_found = not_found


class LedgerPersistenceError(EligibilityServiceError):
    """Ledger write to durable storage failed"""
    pass


@runtime_checkable
class LedgerStorageProtocol(Protocol):
    """Durable storage for the serialized ledger"""

    def read_all(self) -> Optional[bytes]:
        """Return stored bytes, None when nothing has been written yet"""
        ...

    def write_all(self, data: bytes) -> None:
        """Replace stored bytes"""
        ...


@runtime_checkable
class LedgerRepositoryProtocol(Protocol):
    """
    Interface for the subscription ledger.

    Implementations must provide these methods.
    Used for dependency injection to enable testing.
    """

    def load(self) -> Dict[str, MemberRecord]:
        """Read durable storage into memory"""
        ...

    def upsert(self, record: MemberRecord) -> Optional[MemberRecord]:
        """Replace the record under record.email; returns the previous one"""
        ...

    def remove(self, email: str) -> Optional[MemberRecord]:
        """Delete the record under email; returns it, None if absent"""
        ...

    def get(self, email: str) -> Optional[MemberRecord]:
        """Get record by email"""
        ...

    def all(self) -> List[MemberRecord]:
        """Snapshot of all records in insertion order"""
        ...

    def count(self) -> int:
        ...

    def flush(self) -> None:
        """Persist current state"""
        ...


@runtime_checkable
class OrderLookupProtocol(Protocol):
    """Commerce platform order lookups"""

    async def fetch_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        """Full order document, None if not found"""
        ...

    async def fetch_any_order(self) -> Optional[Dict[str, Any]]:
        """Any existing order (diagnostic path), None if there are none"""
        ...


@runtime_checkable
class TransportProtocol(Protocol):
    """Hands generated extract files to the partner"""

    async def deliver(self, local_path: Path, remote_name: str) -> bool:
        """Deliver a file; False on failure"""
        ...
