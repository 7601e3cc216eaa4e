"""
Order Event Models

Topics and update statuses of commerce order notifications.
"""

from enum import Enum


class OrderTopic(str, Enum):
    """Commerce webhook topics"""
    ORDER_CREATE = "order.create"
    ORDER_UPDATE = "order.update"


class OrderUpdateStatus(str, Enum):
    """`data.update` values carried by order.update notifications"""
    FULFILLED = "FULFILLED"
    CANCELED = "CANCELED"
