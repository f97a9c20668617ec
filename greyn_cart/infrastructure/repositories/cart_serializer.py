"""
Cart blob serialization

Schema v2 is a JSON envelope ``{"schema_version", "version", "items"}`` with
snake_case items. Schema v1 is the bare camelCase array the web frontend
kept in localStorage; it is migrated on read. Decoding fails open: an
unreadable blob gives an empty cart, an unreadable item (including one
priced in a currency other than the cart's) is skipped.
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

from greyn_cart.domain.entities.cart_line_item import CartLineItem
from greyn_cart.domain.entities.project_entity import ProjectSnapshot
from greyn_cart.domain.value_objects.money import Money
from greyn_cart.infrastructure.utilities.constants import CartSettings

logger = logging.getLogger(__name__)

# v1 carts stored the price under different names depending on the page that wrote them
LEGACY_PRICE_KEYS = ("unitPrice", "pricePerTonne", "minInvestment")


def item_to_dict(item: CartLineItem) -> Dict[str, Any]:
    """Schema v2 representation of a line item"""
    snapshot = item.snapshot
    return {
        "id": item.id,
        "quantity": item.quantity,
        "unit_price": str(item.unit_price.amount),
        "currency": item.unit_price.currency,
        "available_supply": item.available_supply,
        "name": snapshot.name,
        "ngo_name": snapshot.ngo_name,
        "location": snapshot.location,
        "category": snapshot.category,
        "carbon_impact": snapshot.carbon_impact,
        "impact_type": snapshot.impact_type,
        "funding_goal": snapshot.funding_goal,
        "featured": snapshot.featured,
        "is_verified": snapshot.is_verified,
    }


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, int):
        return value
    raise ValueError(f"{field} must be an integer, got {value!r}")


def _optional_int(value: Any, field: str) -> Optional[int]:
    return None if value is None else _as_int(value, field)


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid price {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid price {value!r}") from e


def item_from_dict(data: Dict[str, Any], default_currency: str = CartSettings.DEFAULT_CURRENCY) -> CartLineItem:
    """Decode a schema v2 item. Raises ValueError/KeyError/TypeError when malformed."""
    currency = data.get("currency") or default_currency
    if currency != default_currency:
        raise ValueError(f"Item priced in {currency}, cart uses {default_currency}")
    snapshot = ProjectSnapshot(
        name=str(data.get("name") or ""),
        ngo_name=_optional_str(data.get("ngo_name")),
        location=_optional_str(data.get("location")),
        category=_optional_str(data.get("category")),
        carbon_impact=_optional_str(data.get("carbon_impact")),
        impact_type=_optional_str(data.get("impact_type")),
        funding_goal=_optional_int(data.get("funding_goal"), "funding_goal"),
        featured=bool(data.get("featured", False)),
        is_verified=bool(data.get("is_verified", False)),
    )
    return CartLineItem(
        id=str(data["id"]),
        quantity=_as_int(data["quantity"], "quantity"),
        unit_price=Money(_as_decimal(data["unit_price"]), currency),
        snapshot=snapshot,
        available_supply=_optional_int(data.get("available_supply"), "available_supply"),
    )


def legacy_item_from_dict(data: Dict[str, Any], default_currency: str = CartSettings.DEFAULT_CURRENCY) -> CartLineItem:
    """Decode a schema v1 (camelCase) item"""
    price = next((data[key] for key in LEGACY_PRICE_KEYS if data.get(key) is not None), None)
    if price is None:
        raise ValueError("Legacy cart item has no price")

    snapshot = ProjectSnapshot(
        name=str(data.get("projectName") or data.get("name") or ""),
        ngo_name=_optional_str(data.get("ngoName")),
        location=_optional_str(data.get("location")),
        category=_optional_str(data.get("category") or data.get("impactType")),
        carbon_impact=_optional_str(data.get("carbonImpact")),
        impact_type=_optional_str(data.get("impactType")),
        funding_goal=_optional_int(data.get("fundingGoal"), "fundingGoal"),
        featured=bool(data.get("featured", False)),
        is_verified=bool(data.get("isVerified", False)),
    )
    return CartLineItem(
        id=str(data["id"]),
        quantity=_as_int(data.get("quantity", 1), "quantity"),
        unit_price=Money(_as_decimal(price), default_currency),
        snapshot=snapshot,
        available_supply=_optional_int(data.get("availableCredits"), "availableCredits"),
    )


def decode_items(
    raw_items: Any,
    schema_version: int = CartSettings.SCHEMA_VERSION,
    default_currency: str = CartSettings.DEFAULT_CURRENCY,
) -> List[CartLineItem]:
    """Decode a list of stored items, skipping the ones that cannot be read"""
    if not isinstance(raw_items, list):
        logger.warning("Stored cart items are not a list, ignoring them")
        return []

    decoder = legacy_item_from_dict if schema_version == CartSettings.LEGACY_SCHEMA_VERSION else item_from_dict
    items = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            logger.warning("Skipping cart item %d: not an object", index)
            continue
        try:
            items.append(decoder(raw, default_currency))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping unreadable cart item %d: %s", index, e)
    return items


def dumps_cart(items: List[CartLineItem], version: int) -> str:
    """Serialize a cart as a schema v2 envelope"""
    return json.dumps(
        {
            "schema_version": CartSettings.SCHEMA_VERSION,
            "version": version,
            "items": [item_to_dict(item) for item in items],
        },
        ensure_ascii=False,
    )


def loads_cart(
    raw: Optional[str], default_currency: str = CartSettings.DEFAULT_CURRENCY
) -> Tuple[List[CartLineItem], int]:
    """
    Parse a stored blob into ``(items, version)``.

    Absent, corrupt or future-schema blobs decode to ``([], 0)``.
    """
    if raw is None or not raw.strip():
        return [], 0

    try:
        payload = json.loads(raw)
    except ValueError as e:
        logger.warning("Error loading cart, resetting to empty: %s", e)
        return [], 0

    if isinstance(payload, list):
        logger.info("Migrating legacy cart blob with %d items", len(payload))
        return decode_items(payload, CartSettings.LEGACY_SCHEMA_VERSION, default_currency), 0

    if not isinstance(payload, dict):
        logger.warning("Unexpected cart blob type %s, resetting to empty", type(payload).__name__)
        return [], 0

    schema_version = payload.get("schema_version")
    if schema_version != CartSettings.SCHEMA_VERSION:
        logger.warning("Unsupported cart schema version %r, resetting to empty", schema_version)
        return [], 0

    try:
        version = _as_int(payload.get("version", 0), "version")
    except ValueError:
        logger.warning("Invalid cart version %r, treating as 0", payload.get("version"))
        version = 0

    return decode_items(payload.get("items"), schema_version, default_currency), version
