import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.schemas.order_schema import OrderItem, OrderRequest, OrderResponse
from app.schemas.product_schema import StockUpdateRequest


def test_order_request_reads_camel_case():
    order = OrderRequest.model_validate(
        {"customerId": "c1", "items": [{"productId": "P1", "quantity": 3}]}
    )
    assert order.customer_id == "c1"
    assert order.items == [OrderItem(product_id="P1", quantity=3)]


def test_order_item_is_immutable():
    item = OrderItem(product_id="P1", quantity=1)
    with pytest.raises(ValidationError):
        item.quantity = 5


def test_stock_update_request_dumps_camel_case():
    assert StockUpdateRequest(product_id="P1", quantity_delta=-2).model_dump(by_alias=True) == {
        "productId": "P1",
        "quantityDelta": -2,
    }


def test_success_response_requires_order_id():
    with pytest.raises(ValidationError):
        OrderResponse(customer_id="c1", status="SUCCESS", message="ok")


@pytest.mark.parametrize(
    "order_id,message",
    [("ORD-12345678", "boom"), (None, "")],
)
def test_failed_response_rejects_id_or_empty_message(order_id, message):
    with pytest.raises(ValidationError):
        OrderResponse(order_id=order_id, customer_id="c1", status="FAILED", message=message)


def test_failed_response_shape():
    failed = OrderResponse.failed("c1", "Insufficient stock for product: P1")
    assert failed.model_dump(by_alias=True) == {
        "orderId": None,
        "customerId": "c1",
        "status": "FAILED",
        "message": "Insufficient stock for product: P1",
    }


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("PRODUCT_SERVICE_URL", "http://product-service:8080")
    monkeypatch.setenv("PRODUCT_SERVICE_TIMEOUT_S", "1.5")
    config = Settings()
    assert config.product_service_url == "http://product-service:8080"
    assert config.product_service_timeout_s == 1.5
