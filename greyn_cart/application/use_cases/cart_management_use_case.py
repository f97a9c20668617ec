"""
Cart management use case

Handles shopping cart operations for marketplace investors.
"""

import logging
from typing import Optional

from greyn_cart.application.dtos.cart_dtos import (
    AddToCartRequest,
    CartOperationResponse,
    CartSummary,
    PortfolioStats,
    UpdateQuantityRequest,
)
from greyn_cart.domain.entities.cart_entity import Cart, DuplicateAddPolicy
from greyn_cart.domain.entities.project_entity import Project
from greyn_cart.domain.repositories.cart_repository import CartRepository
from greyn_cart.domain.repositories.project_repository import ProjectRepository
from greyn_cart.domain.value_objects.project_id import ProjectId
from greyn_cart.infrastructure.utilities.constants import CartSettings, ErrorCodes
from greyn_cart.infrastructure.utilities.exceptions import (
    CartStorageError,
    GreynEcoError,
    ProjectNotFoundError,
    ProjectUnavailableError,
)


class CartManagementUseCase:
    """
    Use case for cart management operations

    Handles:
    1. Adding projects to the cart
    2. Updating line quantities
    3. Removing lines
    4. Clearing the cart
    5. Cart summary and dashboard stats

    Every mutation writes the whole cart back at the version it was read at,
    so a concurrent edit from another tab or process surfaces as a conflict.
    """

    def __init__(
        self,
        cart_repository: CartRepository,
        project_repository: ProjectRepository,
        duplicate_policy: DuplicateAddPolicy = DuplicateAddPolicy.IGNORE,
        currency: str = CartSettings.DEFAULT_CURRENCY,
    ):
        self._cart_repository = cart_repository
        self._project_repository = project_repository
        self._duplicate_policy = duplicate_policy
        self._currency = currency
        self._logger = logging.getLogger(self.__class__.__name__)

    async def add_to_cart(self, request: AddToCartRequest) -> CartOperationResponse:
        """Add a catalog project to the cart with quantity 1"""
        self._logger.info(
            "CART USE CASE: Adding to cart - Cart: %s, Project: %s",
            request.storage_key,
            request.project_id,
        )

        try:
            project = await self._get_available_project(request.project_id)
            cart = await self._load_cart(request.storage_key)
            before = cart.items

            added = cart.add_item(project)
            if cart.items != before:
                await self._persist(request.storage_key, cart)
            else:
                self._logger.info(
                    "Project %s already in cart %s, nothing to do",
                    project.id,
                    request.storage_key,
                )

            return CartOperationResponse(
                success=True, cart_summary=CartSummary.from_cart(cart), added=added
            )
        except GreynEcoError as e:
            return self._error_response("add_to_cart", e)
        except ValueError as e:
            return self._validation_response("add_to_cart", e)

    async def update_quantity(self, request: UpdateQuantityRequest) -> CartOperationResponse:
        """Set a line quantity; below 1 removes the line, above the cap clamps"""
        self._logger.info(
            "UPDATE QUANTITY USE CASE: Cart %s, Project %s, Qty %s",
            request.storage_key,
            request.project_id,
            request.quantity,
        )

        try:
            cart = await self._load_cart(request.storage_key)
            before = cart.items
            cart.update_quantity(request.project_id, request.quantity)
            if cart.items != before:
                await self._persist(request.storage_key, cart)
            return CartOperationResponse(success=True, cart_summary=CartSummary.from_cart(cart))
        except GreynEcoError as e:
            return self._error_response("update_quantity", e)
        except ValueError as e:
            return self._validation_response("update_quantity", e)

    async def remove_item(
        self, project_id: str, storage_key: str = CartSettings.DEFAULT_STORAGE_KEY
    ) -> CartOperationResponse:
        """Remove a line; removing an absent project is a no-op"""
        self._logger.info("REMOVE ITEM USE CASE: Cart %s, Project %s", storage_key, project_id)

        try:
            cart = await self._load_cart(storage_key)
            if cart.remove_item(project_id):
                await self._persist(storage_key, cart)
            return CartOperationResponse(success=True, cart_summary=CartSummary.from_cart(cart))
        except GreynEcoError as e:
            return self._error_response("remove_item", e)

    async def clear_cart(
        self, storage_key: str = CartSettings.DEFAULT_STORAGE_KEY
    ) -> CartOperationResponse:
        """Empty the cart. Callers are expected to have asked the user first."""
        self._logger.info("CLEAR CART USE CASE: Cart %s", storage_key)

        try:
            cart = await self._load_cart(storage_key)
            cart.clear()
            await self._persist(storage_key, cart)
            self._logger.info("CART CLEARED: %s", storage_key)
            return CartOperationResponse(success=True, cart_summary=CartSummary.from_cart(cart))
        except GreynEcoError as e:
            return self._error_response("clear_cart", e)

    async def get_cart(
        self, storage_key: str = CartSettings.DEFAULT_STORAGE_KEY
    ) -> CartOperationResponse:
        """Get the cart summary"""
        try:
            cart = await self._load_cart(storage_key)
            summary = CartSummary.from_cart(cart)
            self._logger.debug(
                "GET CART SUCCESS: %d items, total: %s", len(summary.items), summary.total
            )
            return CartOperationResponse(success=True, cart_summary=summary)
        except GreynEcoError as e:
            return self._error_response("get_cart", e)

    async def get_portfolio_stats(
        self, storage_key: str = CartSettings.DEFAULT_STORAGE_KEY
    ) -> PortfolioStats:
        """Dashboard figures computed from the cart contents"""
        cart = await self._load_cart(storage_key)
        totals = cart.totals()
        return PortfolioStats(
            total_credits=totals.total_credits,
            active_credits=totals.total_credits,
            retired_credits=0,
            portfolio_value=totals.subtotal.amount,
            currency=totals.subtotal.currency,
        )

    async def _get_available_project(self, project_id: str) -> Project:
        project = await self._project_repository.find_by_id(ProjectId(project_id))
        if project is None:
            raise ProjectNotFoundError(project_id)
        if not project.is_active:
            raise ProjectUnavailableError(project_id)
        return project

    async def _load_cart(self, storage_key: str) -> Cart:
        snapshot = await self._cart_repository.read(storage_key)
        return Cart(
            snapshot.items,
            version=snapshot.version,
            duplicate_policy=self._duplicate_policy,
            currency=self._currency,
        )

    async def _persist(self, storage_key: str, cart: Cart) -> None:
        snapshot = await self._cart_repository.save(
            cart.items, storage_key, expected_version=cart.version
        )
        cart.version = snapshot.version

    def _error_response(self, operation: str, error: GreynEcoError) -> CartOperationResponse:
        if isinstance(error, CartStorageError):
            self._logger.error("STORAGE ERROR in %s: %s", operation, error)
        else:
            self._logger.warning("Business error in %s: %s", operation, error)
        return CartOperationResponse(
            success=False, error_code=error.error_code, error_message=error.user_message
        )

    def _validation_response(
        self, operation: str, error: ValueError, message: Optional[str] = None
    ) -> CartOperationResponse:
        self._logger.warning("VALIDATION ERROR in %s: %s", operation, error)
        return CartOperationResponse(
            success=False,
            error_code=ErrorCodes.VALIDATION_ERROR,
            error_message=message or str(error),
        )
