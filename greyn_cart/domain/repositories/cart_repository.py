"""
Cart repository interface

Defines the contract for persisting carts. A cart is stored as one blob
under a string storage key; every successful write bumps its version.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from greyn_cart.domain.entities.cart_line_item import CartLineItem
from greyn_cart.infrastructure.utilities.constants import CartSettings


@dataclass(frozen=True)
class CartSnapshot:
    """Items of a stored cart and the version they were read at"""

    items: List[CartLineItem] = field(default_factory=list)
    version: int = 0


class CartRepository(ABC):
    """Repository interface for cart persistence"""

    @abstractmethod
    async def read(self, storage_key: str) -> CartSnapshot:
        """Read the stored cart. Missing or unreadable blobs give an empty snapshot."""

    @abstractmethod
    async def write(
        self,
        storage_key: str,
        items: List[CartLineItem],
        expected_version: Optional[int] = None,
    ) -> CartSnapshot:
        """
        Overwrite the stored cart with ``items``.

        When ``expected_version`` is given and the stored version differs,
        raise CartConflictError instead of writing.
        """

    @abstractmethod
    async def delete(self, storage_key: str) -> None:
        """Forget the cart entirely"""

    async def load(
        self, storage_key: str = CartSettings.DEFAULT_STORAGE_KEY
    ) -> List[CartLineItem]:
        """Stored line items, or an empty list"""
        snapshot = await self.read(storage_key)
        return snapshot.items

    async def save(
        self,
        items: List[CartLineItem],
        storage_key: str = CartSettings.DEFAULT_STORAGE_KEY,
        expected_version: Optional[int] = None,
    ) -> CartSnapshot:
        """Persist the full list (last writer wins unless a version is expected)"""
        return await self.write(storage_key, list(items), expected_version)
