from contextlib import asynccontextmanager
import logging
from typing import Any, Dict
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app.api.orders_api import router as orders_router
from app.core.config import settings
from app.core.exceptions import OrderFailureKind
from app.core.logging import configure_logging
from app.clients.product_client import (
    create_product_http_client,
    close_product_http_client,
)
from app.schemas.order_schema import OrderResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context for FastAPI.
    - On startup: configure logging, create Product Service http-client, attach to app.state
    - On shutdown: close the http-client
    """
    configure_logging()
    logger.info("Starting %s...", settings.app_name)
    product_http = await create_product_http_client(settings)
    # http-client object is attached in app:state for reuse in overall project
    app.state.product_http = product_http
    try:
        # returning controller to main process
        yield
    finally:
        logger.info("Shutting down %s...", settings.app_name)
        await close_product_http_client()


# overall app object
app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(orders_router)


@app.exception_handler(RequestValidationError)
async def invalid_order_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Malformed bodies are answered with the same FAILED shape as
    processing failures, echoing customerId when it could be read.
    """
    body = exc.body if isinstance(exc.body, dict) else {}
    customer_id = body.get("customerId", body.get("customer_id"))
    if not isinstance(customer_id, str):
        customer_id = None
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        detail = "malformed request body"
    logger.warning(
        "Rejected order request: kind=%s customer_id=%s detail=%s",
        OrderFailureKind.VALIDATION.value,
        customer_id,
        detail,
    )
    failed = OrderResponse.failed(customer_id, f"Invalid order request: {detail}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=failed.model_dump(by_alias=True),
    )


@app.get("/system-health")
async def system_health() -> JSONResponse:
    """
    Health-check endpoint.
    - Reports the configured Product Service collaborator
    - Does not call the Product Service itself
    """
    components: Dict[str, Any] = {
        "product_service": {
            "base_url": settings.product_service_url,
            "timeout_s": settings.product_service_timeout_s,
        }
    }
    return JSONResponse(
        {
            "app": settings.app_name,
            "environment": settings.environment,
            "status": "up",
            "components": components,
        }
    )


@app.get("/")
async def root() -> Dict[str, str]:
    """
    Simple landing endpoint to verify app is running.
    """
    return {
        "message": f"Welcome to {settings.app_name}",
        "docs": "/docs",
        "health": "/system-health",
    }
