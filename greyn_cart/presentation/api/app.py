"""
FastAPI application exposing the marketplace catalog and the investor cart
"""

import time
import uuid
from dataclasses import asdict
from decimal import Decimal
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Header, Query, Request, status
from fastapi.responses import JSONResponse

from greyn_cart import __version__
from greyn_cart.application.dtos.cart_dtos import (
    AddToCartRequest,
    CartOperationResponse,
    UpdateQuantityRequest,
)
from greyn_cart.application.dtos.catalog_dtos import ProjectCatalogRequest
from greyn_cart.infrastructure.container.dependency_injection import DependencyContainer
from greyn_cart.infrastructure.logging.logging_config import get_structured_logger
from greyn_cart.infrastructure.repositories.json_file_cart_repository import (
    validate_storage_key,
)
from greyn_cart.infrastructure.utilities.constants import ErrorCodes
from greyn_cart.infrastructure.utilities.exceptions import GreynEcoError

from .schemas import (
    AddItemBody,
    CartOperationModel,
    CartSummaryModel,
    CheckoutReviewModel,
    PortfolioStatsModel,
    ProjectListModel,
    ProjectModel,
    UpdateQuantityBody,
)

logger = get_structured_logger(__name__)

_STATUS_BY_ERROR_CODE = {
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.CONFIRMATION_REQUIRED: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.PROJECT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.CART_ITEM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.PROJECT_UNAVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCodes.CART_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCodes.STORAGE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCodes.DATABASE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for_error_code(error_code: Optional[str]) -> int:
    return _STATUS_BY_ERROR_CODE.get(error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(error_code: Optional[str], detail: Optional[str]) -> JSONResponse:
    code = error_code or ErrorCodes.GENERAL_ERROR
    return JSONResponse(
        status_code=status_for_error_code(code),
        content={"error_code": code, "detail": detail or ErrorCodes.GENERIC_ERROR_MESSAGE},
    )


def _cart_operation_payload(response: CartOperationResponse):
    if not response.success:
        return error_response(response.error_code, response.error_message)
    return CartOperationModel(
        cart=CartSummaryModel.model_validate(asdict(response.cart_summary)),
        added=response.added,
    )


def create_app(container: DependencyContainer) -> FastAPI:
    """Build the API around an already configured container"""
    config = container.config
    app = FastAPI(title="Greyn Eco Cart", version=__version__)

    def cart_key(x_cart_key: Optional[str] = Header(default=None, alias="X-Cart-Key")) -> str:
        return validate_storage_key(x_cart_key or config.cart_storage_key)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "http_request",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(GreynEcoError)
    async def greyn_error_handler(request: Request, exc: GreynEcoError):
        logger.warning(
            "request_failed", path=request.url.path, error_code=exc.error_code, error=str(exc)
        )
        return error_response(exc.error_code, exc.user_message)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        database = container.db_manager.health_check()
        healthy = database.get("status") == "healthy"
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ok" if healthy else "degraded",
                "version": __version__,
                "environment": config.environment,
                "cart_storage_backend": config.cart_storage_backend,
                "database": database,
            },
        )

    @app.get("/api/projects")
    async def list_projects(
        country: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[Decimal] = Query(default=None, ge=0),
        max_price: Optional[Decimal] = Query(default=None, ge=0),
    ):
        result = await container.get_project_catalog_use_case().list_projects(
            ProjectCatalogRequest(
                country=country, category=category, min_price=min_price, max_price=max_price
            )
        )
        if not result.success:
            return error_response(result.error_code, result.error_message)
        return ProjectListModel(
            projects=[ProjectModel.model_validate(asdict(p)) for p in result.projects],
            countries=result.countries,
            categories=result.categories,
        )

    @app.get("/api/projects/{project_id}")
    async def get_project(project_id: str):
        result = await container.get_project_catalog_use_case().get_project(project_id)
        if not result.success:
            return error_response(result.error_code, result.error_message)
        return ProjectModel.model_validate(asdict(result.project))

    @app.get("/api/cart")
    async def get_cart(storage_key: str = Depends(cart_key)):
        response = await container.get_cart_management_use_case().get_cart(storage_key)
        return _cart_operation_payload(response)

    @app.post("/api/cart/items")
    async def add_item(body: AddItemBody, storage_key: str = Depends(cart_key)):
        response = await container.get_cart_management_use_case().add_to_cart(
            AddToCartRequest(project_id=body.project_id, storage_key=storage_key)
        )
        return _cart_operation_payload(response)

    @app.patch("/api/cart/items/{project_id}")
    async def update_quantity(
        project_id: str, body: UpdateQuantityBody, storage_key: str = Depends(cart_key)
    ):
        response = await container.get_cart_management_use_case().update_quantity(
            UpdateQuantityRequest(
                project_id=project_id, quantity=body.quantity, storage_key=storage_key
            )
        )
        return _cart_operation_payload(response)

    @app.delete("/api/cart/items/{project_id}")
    async def remove_item(project_id: str, storage_key: str = Depends(cart_key)):
        response = await container.get_cart_management_use_case().remove_item(
            project_id, storage_key
        )
        return _cart_operation_payload(response)

    @app.delete("/api/cart")
    async def clear_cart(confirm: bool = False, storage_key: str = Depends(cart_key)):
        if not confirm:
            return error_response(
                ErrorCodes.CONFIRMATION_REQUIRED,
                "Clearing the cart removes every project. Repeat with confirm=true.",
            )
        response = await container.get_cart_management_use_case().clear_cart(storage_key)
        return _cart_operation_payload(response)

    @app.get("/api/cart/stats")
    async def portfolio_stats(storage_key: str = Depends(cart_key)):
        stats = await container.get_cart_management_use_case().get_portfolio_stats(storage_key)
        return PortfolioStatsModel.model_validate(asdict(stats))

    @app.get("/api/cart/checkout-review")
    async def checkout_review(storage_key: str = Depends(cart_key)):
        review = await container.get_checkout_review_use_case().review(storage_key)
        return CheckoutReviewModel(
            ready=review.ready,
            cart=CartSummaryModel.model_validate(asdict(review.cart_summary)),
            issues=[asdict(issue) for issue in review.issues],
        )

    return app
