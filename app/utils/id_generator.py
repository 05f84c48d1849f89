import uuid

ORDER_ID_PREFIX = "ORD-"


def generate_order_id() -> str:
    """
    Generate an order ID that is:
    - globally unique (random uuid4)
    - short and prefixed for easier log scanning
    Example: ORD-3F9A1C07
    """
    return f"{ORDER_ID_PREFIX}{uuid.uuid4().hex[:8].upper()}"
