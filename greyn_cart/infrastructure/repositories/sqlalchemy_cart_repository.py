"""
SQLAlchemy Cart Repository

Concrete implementation of CartRepository using SQLAlchemy ORM. One row per
storage key; the ``version`` column backs the optimistic concurrency check.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from greyn_cart.domain.entities.cart_line_item import CartLineItem
from greyn_cart.domain.repositories.cart_repository import CartRepository, CartSnapshot
from greyn_cart.infrastructure.database.models import Cart as SQLCart
from greyn_cart.infrastructure.database.operations import DatabaseManager, get_db_manager
from greyn_cart.infrastructure.logging.logging_config import PerformanceLogger
from greyn_cart.infrastructure.repositories.cart_serializer import decode_items, item_to_dict
from greyn_cart.infrastructure.repositories.json_file_cart_repository import validate_storage_key
from greyn_cart.infrastructure.repositories.session_handler import managed_session
from greyn_cart.infrastructure.utilities.constants import CartSettings
from greyn_cart.infrastructure.utilities.exceptions import CartConflictError, CartStorageError


class SQLAlchemyCartRepository(CartRepository):
    """SQLAlchemy implementation of cart repository"""

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        currency: str = CartSettings.DEFAULT_CURRENCY,
    ):
        self._db_manager = db_manager or get_db_manager()
        self._currency = currency
        self._logger = logging.getLogger(self.__class__.__name__)

    async def read(self, storage_key: str) -> CartSnapshot:
        """Get the stored cart for a key"""
        validate_storage_key(storage_key)
        try:
            with managed_session(self._db_manager) as session:
                cart = session.execute(
                    select(SQLCart).where(SQLCart.storage_key == storage_key)
                ).scalar_one_or_none()

                if cart is None:
                    self._logger.debug("NO CART: %s has no stored cart", storage_key)
                    return CartSnapshot(items=[], version=0)

                raw_items, schema_version, version = cart.items, cart.schema_version, cart.version
        except SQLAlchemyError as e:
            self._logger.warning("Could not read cart %s, using empty cart: %s", storage_key, e)
            return CartSnapshot(items=[], version=0)

        if schema_version not in (CartSettings.SCHEMA_VERSION, CartSettings.LEGACY_SCHEMA_VERSION):
            self._logger.warning(
                "Unsupported cart schema version %r for %s, using empty cart",
                schema_version,
                storage_key,
            )
            return CartSnapshot(items=[], version=version)

        items = decode_items(raw_items, schema_version, self._currency)
        self._logger.debug("CART FOUND: %s has %d items, version %d", storage_key, len(items), version)
        return CartSnapshot(items=items, version=version)

    async def write(
        self,
        storage_key: str,
        items: List[CartLineItem],
        expected_version: Optional[int] = None,
    ) -> CartSnapshot:
        """Replace the stored items, optionally only at an expected version"""
        validate_storage_key(storage_key)
        payload = [item_to_dict(item) for item in items]

        try:
            with PerformanceLogger("cart_write", self._logger, {"storage_key": storage_key}):
                with managed_session(self._db_manager) as session:
                    new_version = self._write_in_session(
                        session, storage_key, payload, expected_version
                    )
        except CartConflictError:
            raise
        except SQLAlchemyError as e:
            raise CartStorageError(
                f"Failed to write cart {storage_key}: {e}", storage_key
            ) from e

        self._logger.info(
            "CART SAVED: %s with %d items, version %d", storage_key, len(items), new_version
        )
        return CartSnapshot(items=list(items), version=new_version)

    def _write_in_session(self, session, storage_key, payload, expected_version) -> int:
        current_version = session.execute(
            select(SQLCart.version).where(SQLCart.storage_key == storage_key)
        ).scalar_one_or_none()

        if current_version is None:
            if expected_version not in (None, 0):
                raise CartConflictError(storage_key, expected_version, None)
            session.add(
                SQLCart(
                    storage_key=storage_key,
                    items=payload,
                    schema_version=CartSettings.SCHEMA_VERSION,
                    version=1,
                )
            )
            try:
                session.flush()
            except IntegrityError as e:
                # Another writer created the row first
                raise CartConflictError(storage_key, expected_version or 0, None) from e
            return 1

        guard_version = current_version if expected_version is None else expected_version
        result = session.execute(
            update(SQLCart)
            .where(SQLCart.storage_key == storage_key, SQLCart.version == guard_version)
            .values(
                items=payload,
                schema_version=CartSettings.SCHEMA_VERSION,
                version=SQLCart.version + 1,
            )
        )
        if result.rowcount == 0:
            self._logger.warning(
                "Cart %s conflict: expected version %s, stored %s",
                storage_key,
                guard_version,
                current_version,
            )
            raise CartConflictError(storage_key, guard_version, current_version)
        return guard_version + 1

    async def delete(self, storage_key: str) -> None:
        """Delete the stored cart row"""
        validate_storage_key(storage_key)
        try:
            with managed_session(self._db_manager) as session:
                session.execute(delete(SQLCart).where(SQLCart.storage_key == storage_key))
        except SQLAlchemyError as e:
            raise CartStorageError(
                f"Failed to delete cart {storage_key}: {e}", storage_key
            ) from e
        self._logger.info("CART DELETED: %s", storage_key)
