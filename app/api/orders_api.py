import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from app.clients.product_client import ProductServiceClient
from app.core.exceptions import OrderProcessingError
from app.schemas.order_schema import OrderRequest, OrderResponse
from app.services.order_processor import OrderProcessor


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


async def order_processor_from_app(request: Request) -> OrderProcessor:
    # http-client is created once in the lifespan and shared by every request
    return OrderProcessor(ProductServiceClient(request.app.state.product_http))


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_400_BAD_REQUEST: {"model": OrderResponse}},
    summary="Create a new order",
)
async def create_order(
    order: OrderRequest,
    processor: OrderProcessor = Depends(order_processor_from_app),
):
    """
    Create a new order.
    Steps:
    1. Check stock for all items with the Product Service.
    2. Decrement stock for all items.
    3. Return the generated order_id.
    Any failure is answered with 400 and status FAILED.
    """
    logger.info("Received order request: %s", order)
    try:
        response = await processor.process_order(order)
    except OrderProcessingError as exc:
        logger.error(
            "Error processing order: kind=%s state=%s customer_id=%s message=%s",
            exc.kind.value,
            exc.state.value if exc.state is not None else None,
            order.customer_id,
            exc.message,
        )
        failed = OrderResponse.failed(order.customer_id, exc.message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=failed.model_dump(by_alias=True),
        )

    logger.info("Order processed successfully: %s", response)
    return response
