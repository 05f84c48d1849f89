from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

# its like enum form
# means anyone value
OrderStatus = Literal[
    "SUCCESS",  # stock checked, decremented and order id generated
    "FAILED",   # any failure while processing the order
]


class CamelModel(BaseModel):
    """
    Base model for the wire shapes: snake_case attributes in Python,
    camelCase keys in JSON. Both spellings are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItem(CamelModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int


class OrderRequest(CamelModel):
    customer_id: str
    items: list[OrderItem]


# this class is defined for outputing the order response
class OrderResponse(CamelModel):
    """
    What we return to API consumers, on success and on failure.
    """

    order_id: Optional[str] = None
    customer_id: Optional[str] = None
    status: OrderStatus
    message: str

    @model_validator(mode="after")
    def check_status_consistency(self) -> "OrderResponse":
        if self.status == "SUCCESS" and not self.order_id:
            raise ValueError("A successful order must carry an order id")
        if self.status == "FAILED":
            if self.order_id is not None:
                raise ValueError("A failed order must not carry an order id")
            if not self.message:
                raise ValueError("A failed order must carry a message")
        return self

    @classmethod
    def failed(cls, customer_id: Optional[str], message: str) -> "OrderResponse":
        return cls(order_id=None, customer_id=customer_id, status="FAILED", message=message)
