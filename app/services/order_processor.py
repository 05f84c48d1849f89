import json
import logging
from enum import Enum
from typing import Sequence
import httpx
from app.clients.product_client import ProductServiceClient
from app.core.exceptions import (
    ExternalCallError,
    InsufficientStockError,
    OrderProcessingError,
    UnexpectedOrderError,
)
from app.schemas.order_schema import OrderItem, OrderRequest, OrderResponse
from app.schemas.product_schema import StockCheckRequest, StockUpdateRequest
from app.utils.id_generator import generate_order_id

logger = logging.getLogger(__name__)

CHECK_STOCK = "check-stock"
UPDATE_STOCK = "update-stock"
SUCCESS_MESSAGE = "Order created successfully"


class OrderState(str, Enum):
    START = "START"
    CHECKING = "CHECKING"
    CHECK_FAILED = "CHECK_FAILED"
    UPDATING = "UPDATING"
    UPDATE_FAILED = "UPDATE_FAILED"
    SUCCEEDED = "SUCCEEDED"


def extract_error_message(body: str) -> str:
    """
    Pull the human readable message out of a failed Product Service call.
    Expected body: {"error": "<text>"}. Anything else is returned verbatim
    inside a fallback message so no diagnostic text is lost.
    """
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error:
            return error
    return f"Could not parse error response: {body}"


def _describe(exc: Exception) -> str:
    # httpx timeouts are sometimes raised without a message
    return str(exc) or exc.__class__.__name__


class OrderProcessor:
    """
    Orchestrates one order: stock check, stock decrement, order id.
    Holds no state between requests.
    """

    def __init__(self, product_client: ProductServiceClient) -> None:
        self._products = product_client

    async def process_order(self, order: OrderRequest) -> OrderResponse:
        """
        Steps:
        1. Check stock for all items in one batched call.
        2. Decrement stock for all items in one batched call.
        3. Generate order_id and return a SUCCESS response.
        Raises:
            OrderProcessingError: on any failure, with `state` set to the
            terminal state (CHECK_FAILED or UPDATE_FAILED).
        """
        state = OrderState.START
        try:
            state = self._transition(state, OrderState.CHECKING, order)
            await self._check_stock_availability(order.items)

            state = self._transition(state, OrderState.UPDATING, order)
            await self._update_stock_quantities(order.items)
        except OrderProcessingError as exc:
            exc.state = self._failed_state(state)
            self._transition(state, exc.state, order)
            raise
        except Exception as exc:  # noqa: BLE001
            failed = self._failed_state(state)
            self._transition(state, failed, order)
            error = UnexpectedOrderError(_describe(exc))
            error.state = failed
            raise error from exc

        order_id = generate_order_id()
        self._transition(state, OrderState.SUCCEEDED, order)
        logger.info(
            "Order created successfully - order_id=%s customer_id=%s items=%s",
            order_id,
            order.customer_id,
            order.items,
        )
        return OrderResponse(
            order_id=order_id,
            customer_id=order.customer_id,
            status="SUCCESS",
            message=SUCCESS_MESSAGE,
        )

    async def _check_stock_availability(self, items: Sequence[OrderItem]) -> None:
        requests = [
            StockCheckRequest(product_id=item.product_id, quantity=item.quantity)
            for item in items
        ]
        try:
            verdicts = await self._products.check_stock(requests)
        except httpx.HTTPStatusError as exc:
            logger.error("Error while checking stock with Product Service: %s", exc)
            raise ExternalCallError(
                CHECK_STOCK,
                extract_error_message(exc.response.text),
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Error while checking stock with Product Service: %r", exc)
            raise ExternalCallError(CHECK_STOCK, f"Error checking stock: {_describe(exc)}") from exc
        except ValueError as exc:
            logger.error("Unreadable stock check response from Product Service: %s", exc)
            raise UnexpectedOrderError(f"Error checking stock: {exc}") from exc

        requested = {request.product_id for request in requests}
        # first insufficient product in the order the Product Service listed them
        for verdict in verdicts:
            if verdict.product_id not in requested:
                logger.error("Stock verdict returned for unrequested product: %s", verdict.product_id)
                raise ExternalCallError(
                    CHECK_STOCK,
                    f"Stock verdict returned for unrequested product: {verdict.product_id}",
                )
            if not verdict.sufficient_stock:
                logger.warning("Insufficient stock for product: %s", verdict.product_id)
                raise InsufficientStockError(verdict.product_id)

        answered = {verdict.product_id for verdict in verdicts}
        for request in requests:
            if request.product_id not in answered:
                logger.error("No stock verdict returned for product: %s", request.product_id)
                raise ExternalCallError(
                    CHECK_STOCK,
                    f"No stock verdict returned for product: {request.product_id}",
                )

    async def _update_stock_quantities(self, items: Sequence[OrderItem]) -> None:
        requests = [
            StockUpdateRequest(product_id=item.product_id, quantity_delta=-item.quantity)
            for item in items
        ]
        try:
            await self._products.update_stock(requests)
        except httpx.HTTPStatusError as exc:
            logger.error("Error while updating stock with Product Service: %s", exc)
            raise ExternalCallError(
                UPDATE_STOCK,
                extract_error_message(exc.response.text),
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Error while updating stock with Product Service: %r", exc)
            raise ExternalCallError(UPDATE_STOCK, f"Error updating stock: {_describe(exc)}") from exc

    @staticmethod
    def _failed_state(state: OrderState) -> OrderState:
        if state == OrderState.UPDATING:
            return OrderState.UPDATE_FAILED
        return OrderState.CHECK_FAILED

    @staticmethod
    def _transition(current: OrderState, target: OrderState, order: OrderRequest) -> OrderState:
        logger.info(
            "Order state %s -> %s: customer_id=%s",
            current.value,
            target.value,
            order.customer_id,
        )
        return target
