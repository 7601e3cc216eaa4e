"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (FastAPI app, mocked collaborators)
    - unit/       : Unit tests (pure functions, in-memory ledger)
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.fixtures import (
    make_order_id,
    make_line_item,
    make_order,
    make_webhook_event,
    make_member_record,
)


@pytest.fixture
def order_factory():
    """Order document factory"""
    return make_order


@pytest.fixture
def member_factory():
    """MemberRecord factory"""
    return make_member_record
