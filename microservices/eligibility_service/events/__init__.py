"""
Eligibility Service Events

Inbound commerce order notifications and their routing.
"""

from .handlers import OrderEventRouter, InvalidEventError, classify_event
from .models import OrderTopic, OrderUpdateStatus

__all__ = [
    "OrderEventRouter",
    "InvalidEventError",
    "classify_event",
    "OrderTopic",
    "OrderUpdateStatus",
]
