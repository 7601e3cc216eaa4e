"""
Unit Test Fixtures for Eligibility Service

Provides in-memory collaborators for unit testing.
"""

import pytest
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.eligibility_service.eligibility_service import EligibilityService
from microservices.eligibility_service.events import OrderEventRouter
from microservices.eligibility_service.extract_encoder import ExtractEncoder
from microservices.eligibility_service.ledger_repository import LedgerRepository
from microservices.eligibility_service.record_normalizer import RecordNormalizer


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# ====================
# Mock Collaborators
# ====================


class InMemoryLedgerStorage:
    """Ledger storage held in a bytes attribute"""

    def __init__(self, data: Optional[bytes] = None):
        self.data = data
        self.writes = 0
        self.fail_writes = 0

    def read_all(self) -> Optional[bytes]:
        return self.data

    def write_all(self, data: bytes) -> None:
        if self.fail_writes > 0:
            self.fail_writes -= 1
            raise OSError("disk full")
        self.data = data
        self.writes += 1


class MockOrderLookup:
    """Order lookups served from a dict"""

    def __init__(self, orders: Optional[Dict[str, Dict[str, Any]]] = None):
        self.orders: Dict[str, Dict[str, Any]] = orders or {}
        self.fetched: List[str] = []
        self.error: Optional[Exception] = None

    def add(self, order: Dict[str, Any]) -> Dict[str, Any]:
        self.orders[order["id"]] = order
        return order

    async def fetch_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        self.fetched.append(order_id)
        if self.error:
            raise self.error
        return self.orders.get(order_id)

    async def fetch_any_order(self) -> Optional[Dict[str, Any]]:
        if self.error:
            raise self.error
        return next(iter(self.orders.values()), None)


class MockTransport:
    """Records deliveries instead of uploading"""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.delivered: List[Tuple[Path, str, str]] = []

    async def deliver(self, local_path: Path, remote_name: str) -> bool:
        if self.succeed:
            self.delivered.append((local_path, remote_name, Path(local_path).read_text()))
        return self.succeed


# ====================
# Fixtures
# ====================


@pytest.fixture
def storage():
    return InMemoryLedgerStorage()


@pytest.fixture
def ledger(storage):
    repository = LedgerRepository(storage)
    repository.load()
    return repository


@pytest.fixture
def normalizer():
    return RecordNormalizer(group_code="GRP001", coverage_code="MO")


@pytest.fixture
def encoder(tmp_path):
    return ExtractEncoder(tmp_path / "extracts")


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def order_lookup():
    return MockOrderLookup()


@pytest.fixture
def eligibility_service(ledger, normalizer, encoder, transport):
    return EligibilityService(
        ledger=ledger,
        normalizer=normalizer,
        encoder=encoder,
        transport=transport,
        parent_group_code="PARENT01",
        sdf_group_code="SHAREING",
    )


@pytest.fixture
def router(eligibility_service, order_lookup):
    return OrderEventRouter(
        eligibility_service=eligibility_service,
        order_lookup=order_lookup,
        test_order_sentinel="test-order-id",
        test_orders_enabled=False,
    )
