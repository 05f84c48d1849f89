from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from app.services.order_processor import OrderState


class OrderFailureKind(str, Enum):
    VALIDATION = "validation"
    INSUFFICIENT_STOCK = "insufficient_stock"
    EXTERNAL_CALL = "external_call"
    UNEXPECTED = "unexpected"


class OrderProcessingError(Exception):
    """
    Base class for every failure raised while processing an order.
    The request handler maps all of them to the same FAILED response,
    `kind` tells them apart without looking at the message text.
    """

    kind: OrderFailureKind = OrderFailureKind.UNEXPECTED

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        # terminal OrderState, filled in by the order processor
        self.state: Optional["OrderState"] = None


class InsufficientStockError(OrderProcessingError):
    """
    Raised when the Product Service reports that a requested product
    cannot be satisfied from its current stock.
    """

    kind = OrderFailureKind.INSUFFICIENT_STOCK

    def __init__(self, product_id: str) -> None:
        super().__init__(
            f"Insufficient stock for product: {product_id}",
            details={"product_id": product_id},
        )
        self.product_id = product_id


class ExternalCallError(OrderProcessingError):
    """
    Raised when a call to the Product Service failed at the HTTP or
    transport level (non-2xx status, connection error, timeout).
    """

    kind = OrderFailureKind.EXTERNAL_CALL

    def __init__(self, operation: str, message: str, status_code: int | None = None) -> None:
        super().__init__(
            message,
            details={"operation": operation, "status_code": status_code},
        )
        self.operation = operation
        self.status_code = status_code


class UnexpectedOrderError(OrderProcessingError):
    kind = OrderFailureKind.UNEXPECTED
