"""
Checkout review use case

Compares the stored cart with the live catalog before checkout. Nothing is
written: the investor decides what to do about stale lines.
"""

import logging
from typing import List

from greyn_cart.application.dtos.cart_dtos import CartSummary, CheckoutIssue, CheckoutReview
from greyn_cart.domain.entities.cart_entity import Cart
from greyn_cart.domain.entities.cart_line_item import CartLineItem
from greyn_cart.domain.repositories.cart_repository import CartRepository
from greyn_cart.domain.repositories.project_repository import ProjectRepository
from greyn_cart.domain.value_objects.project_id import ProjectId
from greyn_cart.infrastructure.utilities.constants import CartSettings, CheckoutIssueCodes


class CheckoutReviewUseCase:
    """Flags cart lines that are unavailable, repriced or above current supply"""

    def __init__(
        self,
        cart_repository: CartRepository,
        project_repository: ProjectRepository,
        currency: str = CartSettings.DEFAULT_CURRENCY,
    ):
        self._cart_repository = cart_repository
        self._project_repository = project_repository
        self._currency = currency
        self._logger = logging.getLogger(self.__class__.__name__)

    async def review(self, storage_key: str = CartSettings.DEFAULT_STORAGE_KEY) -> CheckoutReview:
        snapshot = await self._cart_repository.read(storage_key)
        cart = Cart(snapshot.items, version=snapshot.version, currency=self._currency)
        summary = CartSummary.from_cart(cart)

        if cart.is_empty:
            return CheckoutReview(
                ready=False,
                cart_summary=summary,
                issues=[
                    CheckoutIssue(
                        project_id=None,
                        code=CheckoutIssueCodes.EMPTY_CART,
                        message="Your cart is empty.",
                    )
                ],
            )

        issues: List[CheckoutIssue] = []
        for item in cart:
            issues.extend(await self._check_item(item))

        if issues:
            self._logger.info(
                "Checkout review for %s found %d issue(s): %s",
                storage_key,
                len(issues),
                ", ".join(f"{i.project_id}:{i.code}" for i in issues),
            )
        return CheckoutReview(ready=not issues, cart_summary=summary, issues=issues)

    async def _check_item(self, item: CartLineItem) -> List[CheckoutIssue]:
        project = await self._project_repository.find_by_id(ProjectId(item.id))
        if project is None or not project.is_active:
            return [
                CheckoutIssue(
                    project_id=item.id,
                    code=CheckoutIssueCodes.UNAVAILABLE,
                    message=f"{item.name} is no longer available.",
                )
            ]

        issues = []
        if project.price_per_unit.amount != item.unit_price.amount:
            issues.append(
                CheckoutIssue(
                    project_id=item.id,
                    code=CheckoutIssueCodes.PRICE_CHANGED,
                    message=(
                        f"The price of {item.name} changed from "
                        f"{item.unit_price.format_display()} to "
                        f"{project.price_per_unit.format_display()}."
                    ),
                    cart_price=item.unit_price.amount,
                    catalog_price=project.price_per_unit.amount,
                )
            )
        if project.available_credits is not None and item.quantity > project.available_credits:
            issues.append(
                CheckoutIssue(
                    project_id=item.id,
                    code=CheckoutIssueCodes.EXCEEDS_SUPPLY,
                    message=(
                        f"Only {project.available_credits} credits of {item.name} "
                        f"are left, you have {item.quantity}."
                    ),
                    available_credits=project.available_credits,
                )
            )
        return issues
