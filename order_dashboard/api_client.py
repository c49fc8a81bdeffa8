"""HTTP client for the order backend script service."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from order_dashboard.config import API_ENDPOINT, REQUEST_TIMEOUT_SECONDS
from order_dashboard.data import order_from_dict
from order_dashboard.models import ApiResponse, Order, OrderStatus

logger = logging.getLogger(__name__)

# text/plain keeps the script host from demanding a CORS preflight.
_HEADERS = {"Content-Type": "text/plain;charset=utf-8"}


class OrderApiClient:
    """Talks to the backend and always answers with an ApiResponse envelope.

    Connection errors, timeouts, non-2xx replies, malformed JSON and
    ``success: false`` replies all come back as failure envelopes, so callers
    never see a raw transport exception.
    """

    def __init__(
        self,
        endpoint: str = API_ENDPOINT,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, payload: dict[str, Any]) -> ApiResponse[Any]:
        action = payload.get("action")
        try:
            response = self.session.post(
                self.endpoint,
                data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                headers=_HEADERS,
                timeout=self.timeout,
                allow_redirects=True,
            )
        except requests.Timeout:
            logger.warning("Backend %s timed out after %ss", action, self.timeout)
            return ApiResponse.failure(f"Request timed out after {self.timeout:g}s")
        except requests.RequestException as exc:
            logger.warning("Backend %s failed: %s", action, exc)
            return ApiResponse.failure(f"Network error: {exc}")

        if not response.ok:
            logger.warning("Backend %s returned HTTP %s", action, response.status_code)
            return ApiResponse.failure(f"HTTP error! status: {response.status_code}. Response: {response.text[:200]}")

        try:
            body = response.json()
        except ValueError:
            logger.warning("Backend %s returned malformed JSON", action)
            return ApiResponse.failure("Backend returned malformed JSON")

        if not isinstance(body, dict):
            return ApiResponse.failure("Backend returned an unexpected response")

        if not body.get("success"):
            message = str(body.get("message") or "Backend returned an error.")
            logger.info("Backend %s rejected: %s", action, message)
            return ApiResponse.failure(message, data=body.get("data"))

        return ApiResponse(success=True, data=body.get("data"), message=str(body.get("message") or ""))

    def get_orders(self) -> ApiResponse[list[Order]]:
        result = self._post({"action": "getOrders"})
        if not result.success:
            return ApiResponse.failure(result.message, data=[])

        raw_orders = result.data
        if not isinstance(raw_orders, list):
            return ApiResponse.failure("Backend returned orders in an unexpected format", data=[])

        orders: list[Order] = []
        for raw in raw_orders:
            if not isinstance(raw, dict):
                logger.warning("Skipping malformed order record %r", raw)
                continue
            try:
                orders.append(order_from_dict(raw))
            except ValueError as exc:
                logger.warning("Skipping order record: %s", exc)
        logger.debug("Fetched %d orders", len(orders))
        return ApiResponse(success=True, data=orders, message=result.message)

    def update_order_status(self, order_id: str, status: OrderStatus) -> ApiResponse[dict[str, Any]]:
        result = self._post({"action": "updateOrderStatus", "orderId": order_id, "status": status.value})
        echo = {"orderId": order_id, "status": status.value}
        if not result.success:
            return ApiResponse.failure(result.message, data=echo)
        return ApiResponse(success=True, data=result.data or echo, message=result.message)

    def confirm_order(self, order_id: str, admin_notes: str) -> ApiResponse[dict[str, Any]]:
        result = self._post({"action": "confirmOrder", "orderId": order_id, "adminNotes": admin_notes})
        if not result.success:
            return ApiResponse.failure(result.message, data={"orderId": order_id})
        return ApiResponse(success=True, data=result.data or {"message": result.message}, message=result.message)
