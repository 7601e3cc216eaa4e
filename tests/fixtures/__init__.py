"""
Shared test fixtures
"""
from .order_fixtures import (
    make_order_id,
    make_line_item,
    make_order,
    make_webhook_event,
    make_member_record,
)

__all__ = [
    "make_order_id",
    "make_line_item",
    "make_order",
    "make_webhook_event",
    "make_member_record",
]
