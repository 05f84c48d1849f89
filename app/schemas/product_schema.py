"""
Request/response shapes of the Product Service stock endpoints.
These only live for the duration of one outbound call.
"""
from app.schemas.order_schema import CamelModel


class StockCheckRequest(CamelModel):
    product_id: str
    quantity: int


class StockCheckResponse(CamelModel):
    product_id: str
    sufficient_stock: bool


class StockUpdateRequest(CamelModel):
    product_id: str
    # negative value decrements the stock
    quantity_delta: int
