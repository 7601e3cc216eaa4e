"""
Record Normalizer

Maps a commerce order document to a ledger MemberRecord.
"""

import logging
from datetime import date
from typing import Any, Dict, Mapping, Optional

from .date_rules import effective_date, next_due_date, parse_birth_date, parse_order_timestamp
from .models import MemberRecord, SubscriptionPlan

logger = logging.getLogger(__name__)

SUBSCRIPTION_LINE_ITEM_TYPE = "PAYWALL_PRODUCT"
BIRTH_DATE_LABEL = "date of birth"

# Exact-match table of recognized unit prices
PLAN_PRICES: Dict[str, SubscriptionPlan] = {
    "19.99": SubscriptionPlan.MONTHLY,
    "159.00": SubscriptionPlan.ANNUAL,
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class RecordNormalizer:
    """Turns raw order payloads into MemberRecords"""

    def __init__(
        self,
        plan_prices: Optional[Mapping[str, Any]] = None,
        group_code: str = "",
        coverage_code: str = "MO",
    ):
        prices = plan_prices if plan_prices is not None else PLAN_PRICES
        self.plan_prices: Dict[str, SubscriptionPlan] = {
            amount: SubscriptionPlan(plan) for amount, plan in prices.items()
        }
        self.group_code = group_code
        self.coverage_code = coverage_code

    def normalize(self, order: Dict[str, Any]) -> Optional[MemberRecord]:
        """
        Build a MemberRecord from an order.

        Returns None (and logs why) when the order has no subscription line
        item, carries an unrecognized price, or lacks an email or payment date.
        """
        order_id = _text(order.get("id"))

        item = self.find_subscription_item(order)
        if item is None:
            logger.info(f"Order {order_id}: no subscription line item, skipping")
            return None

        amount = self.unit_price(item)
        plan = self.plan_prices.get(amount)
        if plan is None:
            logger.warning(f"Order {order_id}: unrecognized subscription amount '{amount}', skipping")
            return None

        email = _text(order.get("customerEmail")).strip()
        if not email:
            logger.info(f"Order {order_id}: no customer email, skipping")
            return None

        payment_date = self.payment_date(order)
        if payment_date is None:
            logger.info(f"Order {order_id}: no usable fulfillment or creation timestamp, skipping")
            return None

        billing = order.get("billingAddress") or {}

        return MemberRecord(
            email=email,
            order_id=order_id,
            first_name=_text(billing.get("firstName")),
            last_name=_text(billing.get("lastName")),
            address1=_text(billing.get("address1")),
            address2=_text(billing.get("address2")),
            city=_text(billing.get("city")),
            state=_text(billing.get("state")),
            zip=_text(billing.get("postalCode")),
            home_phone=_text(billing.get("phone")),
            subscription_plan=plan,
            payment_amount=amount,
            last_payment_date=payment_date,
            next_due_date=next_due_date(payment_date, plan),
            product_name=_text(item.get("productName")),
            coverage=self.coverage_code,
            group_code=self.group_code,
            effective_date=effective_date(payment_date),
            date_of_birth=self.birth_date(item, order_id),
        )

    @staticmethod
    def find_subscription_item(order: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for item in order.get("lineItems") or []:
            if item.get("lineItemType") == SUBSCRIPTION_LINE_ITEM_TYPE:
                return item
        return None

    @staticmethod
    def unit_price(item: Dict[str, Any]) -> str:
        price = item.get("unitPricePaid")
        if isinstance(price, dict):
            price = price.get("value")
        return _text(price).strip()

    @staticmethod
    def payment_date(order: Dict[str, Any]) -> Optional[date]:
        """Fulfillment date when present, otherwise creation date"""
        return parse_order_timestamp(order.get("fulfilledOn")) or parse_order_timestamp(
            order.get("createdOn")
        )

    @staticmethod
    def birth_date(item: Dict[str, Any], order_id: str = "") -> Optional[date]:
        for customization in item.get("customizations") or []:
            label = _text(customization.get("label")).lower()
            if BIRTH_DATE_LABEL not in label:
                continue
            value = _text(customization.get("value"))
            if not value:
                return None
            parsed = parse_birth_date(value)
            if parsed is None:
                logger.warning(f"Order {order_id}: unparseable date of birth '{value}', leaving empty")
            return parsed
        return None


__all__ = ["RecordNormalizer", "PLAN_PRICES", "SUBSCRIPTION_LINE_ITEM_TYPE"]
