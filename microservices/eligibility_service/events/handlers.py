"""
Order Event Router

Classifies inbound order notifications and drives the eligibility service:

    order.create                      -> created   (normalize + upsert + extract)
    order.update, update=FULFILLED    -> fulfilled (normalize + upsert + extract)
    order.update, update=CANCELED     -> canceled  (remove + extract)
    anything else                     -> ignored
"""

import logging
from typing import Awaitable, Callable, Dict, Optional

from ..eligibility_service import EligibilityService
from ..models import EventAction, EventOutcome, OrderWebhookEvent
from ..protocols import InvalidEventError, OrderLookupError, OrderLookupProtocol
from .models import OrderTopic, OrderUpdateStatus

logger = logging.getLogger(__name__)


def classify_event(topic: Optional[str], update: Optional[str] = None) -> EventAction:
    """Map topic + update status to the action taken on the ledger"""
    if topic == OrderTopic.ORDER_CREATE.value:
        return EventAction.CREATED
    if topic == OrderTopic.ORDER_UPDATE.value:
        if update == OrderUpdateStatus.FULFILLED.value:
            return EventAction.FULFILLED
        if update == OrderUpdateStatus.CANCELED.value:
            return EventAction.CANCELED
    return EventAction.IGNORED


class OrderEventRouter:
    """Routes order notifications to ledger operations"""

    def __init__(
        self,
        eligibility_service: EligibilityService,
        order_lookup: OrderLookupProtocol,
        test_order_sentinel: str = "test-order-id",
        test_orders_enabled: bool = False,
    ):
        self.eligibility_service = eligibility_service
        self.order_lookup = order_lookup
        self.test_order_sentinel = test_order_sentinel
        self.test_orders_enabled = test_orders_enabled

    def get_event_handler_map(
        self,
    ) -> Dict[EventAction, Callable[..., Awaitable[EventOutcome]]]:
        """Get mapping of routed actions to service operations"""
        return {
            EventAction.CREATED: self.eligibility_service.record_order,
            EventAction.FULFILLED: self.eligibility_service.record_order,
            EventAction.CANCELED: self.eligibility_service.cancel_order,
        }

    async def route(self, event: OrderWebhookEvent) -> EventOutcome:
        """
        Handle one notification to completion.

        Raises:
            InvalidEventError: no data.orderId in the body
            OrderLookupError: order could not be fetched; ledger untouched
            LedgerPersistenceError: ledger write failed
        """
        if event.data is None or not event.data.order_id:
            raise InvalidEventError("Invalid webhook: data.orderId is required")

        order_id = event.data.order_id
        action = classify_event(event.topic, event.data.update)
        if action == EventAction.IGNORED:
            logger.info(
                f"No action for event topic={event.topic} update={event.data.update} order={order_id}"
            )
            return EventOutcome(
                action=action, order_id=order_id, message="No action for this event"
            )

        diagnostic = order_id == self.test_order_sentinel
        if diagnostic:
            if not self.test_orders_enabled:
                logger.info(f"Test order '{order_id}' received but test orders are disabled")
                return EventOutcome(
                    action=EventAction.IGNORED,
                    order_id=order_id,
                    message="Test orders are disabled",
                )
            order_id = await self._resolve_test_order()

        order = await self.order_lookup.fetch_order(order_id)
        if not order:
            raise OrderLookupError(f"Order {order_id} not found", order_id=order_id, not_found=True)

        handler = self.get_event_handler_map()[action]
        return await handler(order, action=action, diagnostic=diagnostic)

    async def _resolve_test_order(self) -> str:
        order = await self.order_lookup.fetch_any_order()
        if not order or not order.get("id"):
            raise OrderLookupError("No orders available for test event", not_found=True)
        logger.info(f"Test event resolved to order {order['id']}")
        return str(order["id"])


__all__ = ["OrderEventRouter", "InvalidEventError", "classify_event"]
