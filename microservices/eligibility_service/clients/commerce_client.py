"""
Commerce Platform Client for Eligibility Service

HTTP client for the commerce platform's orders API
"""

import httpx
import logging
import random
from typing import Optional, Dict, Any

from ..protocols import OrderLookupError

logger = logging.getLogger(__name__)


class CommerceOrderClient:
    """Client for the commerce orders API"""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        user_agent: str = "eligibility-service",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize commerce client

        Args:
            base_url: API base URL, e.g. https://api.squarespace.com/1.0
            api_key: Bearer API key
            user_agent: User-Agent header required by the platform
            timeout: Request timeout in seconds
            transport: httpx transport override (tests pass httpx.MockTransport)
        """
        self.base_url = base_url.rstrip('/')
        headers = {"User-Agent": user_agent}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self.client = httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport)
        logger.info(f"CommerceOrderClient initialized with base_url: {self.base_url}")

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def fetch_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        """
        Get full order document

        Args:
            order_id: Commerce order ID

        Returns:
            Order data, None if the platform reports it missing

        Raises:
            OrderLookupError: platform unreachable or erroring
        """
        url = f"{self.base_url}/commerce/orders/{order_id}"
        logger.info(f"GET {url}")
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            data = response.json()
            return data or None

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.warning(f"Order {order_id} not found")
                return None
            logger.error(f"Failed to get order {order_id}: {e.response.status_code}")
            raise OrderLookupError(
                f"Commerce API returned {e.response.status_code} for order {order_id}",
                order_id=order_id,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error retrieving order {order_id}: {e}")
            raise OrderLookupError(f"Commerce API unreachable: {e}", order_id=order_id) from e

    async def fetch_any_order(self) -> Optional[Dict[str, Any]]:
        """
        Pick a random order from the orders listing (diagnostic path)

        Returns:
            Order data, None if the store has no orders
        """
        url = f"{self.base_url}/commerce/orders"
        logger.info(f"Fetching orders for random selection from: {url}")
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            orders = response.json().get("result") or []

        except httpx.HTTPStatusError as e:
            logger.error(f"Failed to list orders: {e.response.status_code}")
            raise OrderLookupError(f"Commerce API returned {e.response.status_code} listing orders") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error listing orders: {e}")
            raise OrderLookupError(f"Commerce API unreachable: {e}") from e

        if not orders:
            logger.error("No orders found for random selection")
            return None
        order = random.choice(orders)
        logger.info(f"Random order selected: {order.get('id')}")
        return order


__all__ = ["CommerceOrderClient"]
