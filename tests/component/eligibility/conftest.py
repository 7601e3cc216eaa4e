"""
Component Test Fixtures for Eligibility Service

Provides fixtures for component testing with FastAPI TestClient.
"""

import dataclasses
import pytest
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import patch
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))


class MockLedgerStorage:
    """Ledger bytes kept in memory"""

    def __init__(self):
        self.data: Optional[bytes] = None
        self.fail_writes = 0

    def read_all(self) -> Optional[bytes]:
        return self.data

    def write_all(self, data: bytes) -> None:
        if self.fail_writes > 0:
            self.fail_writes -= 1
            raise OSError("read-only file system")
        self.data = data


class MockCommerceClient:
    """Commerce orders API backed by a dict"""

    def __init__(self):
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.error: Optional[Exception] = None
        self.closed = False

    def add(self, order: Dict[str, Any]) -> Dict[str, Any]:
        self.orders[order["id"]] = order
        return order

    async def fetch_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        if self.error:
            raise self.error
        return self.orders.get(order_id)

    async def fetch_any_order(self) -> Optional[Dict[str, Any]]:
        return next(iter(self.orders.values()), None)

    async def close(self):
        self.closed = True


class MockPartnerDrop:
    """Collects delivered file names and contents"""

    def __init__(self):
        self.files: Dict[str, str] = {}

    async def deliver(self, local_path: Path, remote_name: str) -> bool:
        self.files[remote_name] = Path(local_path).read_text()
        return True


@pytest.fixture
def ledger_storage():
    return MockLedgerStorage()


@pytest.fixture
def commerce_client():
    return MockCommerceClient()


@pytest.fixture
def partner_drop():
    return MockPartnerDrop()


@pytest.fixture
def client(tmp_path, ledger_storage, commerce_client, partner_drop):
    """Create FastAPI test client with in-memory collaborators"""
    from fastapi.testclient import TestClient
    from microservices.eligibility_service.eligibility_service import EligibilityService
    from microservices.eligibility_service.events import OrderEventRouter
    from microservices.eligibility_service.extract_encoder import ExtractEncoder
    from microservices.eligibility_service.ledger_repository import LedgerRepository
    from microservices.eligibility_service.record_normalizer import RecordNormalizer
    from microservices.eligibility_service import main

    service = EligibilityService(
        ledger=LedgerRepository(ledger_storage),
        normalizer=RecordNormalizer(group_code="GRP001", coverage_code="MO"),
        encoder=ExtractEncoder(tmp_path / "extracts"),
        transport=partner_drop,
        parent_group_code="PARENT01",
        sdf_group_code="SHAREING",
    )
    router = OrderEventRouter(
        eligibility_service=service,
        order_lookup=commerce_client,
        test_order_sentinel="test-order-id",
        test_orders_enabled=False,
    )
    test_config = dataclasses.replace(main.config, sdf_schedule_enabled=False)

    def factory(config=None):
        return service, router

    # Patch the factory and config used by the lifespan
    with patch("microservices.eligibility_service.main.create_eligibility_service", factory), \
         patch("microservices.eligibility_service.main.config", test_config):

        with TestClient(main.app, raise_server_exceptions=False) as test_client:
            yield test_client


@pytest.fixture
def service(client):
    """The running service instance (after the client fixture started the app)"""
    from microservices.eligibility_service import main
    return main.eligibility_service
