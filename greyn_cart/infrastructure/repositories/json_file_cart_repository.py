"""
JSON file Cart Repository

Stores every cart as ``<storage_key>.json`` under a base directory, the
server-side counterpart of the browser's localStorage entry.
"""

import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import List, Optional, Union

from greyn_cart.domain.entities.cart_line_item import CartLineItem
from greyn_cart.domain.repositories.cart_repository import CartRepository, CartSnapshot
from greyn_cart.infrastructure.repositories.cart_serializer import dumps_cart, loads_cart
from greyn_cart.infrastructure.utilities.constants import CartSettings
from greyn_cart.infrastructure.utilities.exceptions import (
    CartConflictError,
    CartStorageError,
    ValidationError,
    validate_and_raise,
)

STORAGE_KEY_RE = re.compile(CartSettings.STORAGE_KEY_PATTERN)


def validate_storage_key(storage_key: str) -> str:
    validate_and_raise(
        isinstance(storage_key, str)
        and bool(STORAGE_KEY_RE.match(storage_key))
        and storage_key not in (".", ".."),
        ValidationError,
        "Invalid cart key",
        field="storage_key",
    )
    return storage_key


class JsonFileCartRepository(CartRepository):
    """File-backed implementation of cart repository"""

    def __init__(
        self,
        base_dir: Union[str, Path],
        currency: str = CartSettings.DEFAULT_CURRENCY,
    ):
        self._base_dir = Path(base_dir)
        self._currency = currency
        # Serializes read-compare-write within this process
        self._lock = threading.RLock()
        self._logger = logging.getLogger(self.__class__.__name__)

    def _path_for(self, storage_key: str) -> Path:
        return self._base_dir / f"{validate_storage_key(storage_key)}.json"

    def _read_unlocked(self, storage_key: str) -> CartSnapshot:
        path = self._path_for(storage_key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return CartSnapshot(items=[], version=0)
        except (OSError, UnicodeDecodeError) as e:
            self._logger.warning("Could not read cart %s, using empty cart: %s", storage_key, e)
            return CartSnapshot(items=[], version=0)

        items, version = loads_cart(raw, self._currency)
        return CartSnapshot(items=items, version=version)

    async def read(self, storage_key: str) -> CartSnapshot:
        """Read the stored cart"""
        with self._lock:
            snapshot = self._read_unlocked(storage_key)
        self._logger.debug(
            "Loaded cart %s: %d items, version %d",
            storage_key,
            len(snapshot.items),
            snapshot.version,
        )
        return snapshot

    async def write(
        self,
        storage_key: str,
        items: List[CartLineItem],
        expected_version: Optional[int] = None,
    ) -> CartSnapshot:
        """Atomically replace the stored cart"""
        path = self._path_for(storage_key)
        with self._lock:
            current_version = self._read_unlocked(storage_key).version
            if expected_version is not None and expected_version != current_version:
                self._logger.warning(
                    "Cart %s conflict: expected version %d, stored %d",
                    storage_key,
                    expected_version,
                    current_version,
                )
                raise CartConflictError(storage_key, expected_version, current_version)

            new_version = current_version + 1
            payload = dumps_cart(items, new_version)
            tmp_name = None
            try:
                self._base_dir.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{storage_key}.", suffix=".tmp", dir=self._base_dir
                )
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, path)
            except OSError as e:
                if tmp_name and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                self._logger.error("Failed to write cart %s: %s", storage_key, e)
                raise CartStorageError(
                    f"Failed to write cart {storage_key}: {e}", storage_key
                ) from e

        self._logger.info(
            "Saved cart %s: %d items, version %d", storage_key, len(items), new_version
        )
        return CartSnapshot(items=list(items), version=new_version)

    async def delete(self, storage_key: str) -> None:
        """Remove the cart file"""
        path = self._path_for(storage_key)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                return
            except OSError as e:
                raise CartStorageError(
                    f"Failed to delete cart {storage_key}: {e}", storage_key
                ) from e
        self._logger.info("Deleted cart %s", storage_key)
