"""
Cart blob serialization tests
"""

import json
from decimal import Decimal

from conftest import make_item
from greyn_cart.infrastructure.repositories.cart_serializer import (
    decode_items,
    dumps_cart,
    item_to_dict,
    loads_cart,
)


class TestCartSerializer:
    """Test the stored cart format"""

    def test_envelope_format(self, sample_items):
        """Stored carts carry a schema version and a write version"""
        payload = json.loads(dumps_cart(sample_items, 4))

        assert payload["schema_version"] == 2
        assert payload["version"] == 4
        assert [item["id"] for item in payload["items"]] == ["a", "b"]
        assert payload["items"][0]["unit_price"] == "10.00"
        assert payload["items"][0]["currency"] == "USD"

    def test_round_trip(self, sample_items):
        """Loading a dumped cart gives the same items"""
        items, version = loads_cart(dumps_cart(sample_items, 7))
        assert items == sample_items
        assert version == 7

    def test_empty_and_corrupt_blobs(self):
        """Unreadable blobs decode to an empty cart"""
        for raw in [None, "", "   ", "{not json", "42", '"text"', "null"]:
            assert loads_cart(raw) == ([], 0)

    def test_unsupported_schema_version(self):
        """Future schemas are not guessed at"""
        raw = json.dumps({"schema_version": 99, "version": 3, "items": []})
        assert loads_cart(raw) == ([], 0)

    def test_bad_items_are_skipped(self, sample_items):
        """One unreadable item does not lose the rest"""
        good = item_to_dict(sample_items[0])
        raw = json.dumps(
            {
                "schema_version": 2,
                "version": 1,
                "items": [good, "junk", {"id": "x"}, {**good, "id": "c", "unit_price": "abc"}],
            }
        )
        items, version = loads_cart(raw)

        assert [item.id for item in items] == ["a"]
        assert version == 1

    def test_legacy_array_is_migrated(self):
        """The old camelCase array is read as schema 1"""
        legacy = [
            {
                "id": "1",
                "projectName": "Amazon Rainforest Conservation",
                "ngoName": "Rainforest Alliance",
                "location": "Amazon Basin, Brazil",
                "pricePerTonne": 15.5,
                "availableCredits": 125000,
                "quantity": 3,
                "impactType": "Forest Conservation",
                "isVerified": True,
            },
            {"id": "2", "name": "Solar Energy Farm Initiative", "minInvestment": 22},
        ]
        items, version = loads_cart(json.dumps(legacy))

        assert version == 0
        assert [item.id for item in items] == ["1", "2"]
        assert items[0].unit_price.amount == Decimal("15.50")
        assert items[0].quantity == 3
        assert items[0].available_supply == 125000
        assert items[0].snapshot.category == "Forest Conservation"
        assert items[0].snapshot.is_verified is True
        assert items[1].quantity == 1
        assert items[1].name == "Solar Energy Farm Initiative"

    def test_decode_items_requires_list(self):
        """Non-list item payloads are ignored"""
        assert decode_items({"id": "a"}) == []

    def test_integral_float_quantity_accepted(self):
        """JSON numbers like 2.0 are read as integers"""
        data = item_to_dict(make_item("a", quantity=2))
        data["quantity"] = 2.0
        items = decode_items([data])
        assert items[0].quantity == 2

    def test_display_fields_are_read_as_text(self):
        """Non-string display fields are coerced so the cart stays servable"""
        raw = json.dumps(
            {
                "schema_version": 2,
                "version": 1,
                "items": [
                    {
                        "id": "1",
                        "quantity": 1,
                        "unit_price": "15.50",
                        "name": "A",
                        "location": 42,
                        "ngo_name": None,
                    }
                ],
            }
        )
        items, _ = loads_cart(raw)

        assert items[0].snapshot.location == "42"
        assert items[0].snapshot.ngo_name is None

        legacy = [{"id": "2", "projectName": "B", "pricePerTonne": 5, "carbonImpact": 1200}]
        items, _ = loads_cart(json.dumps(legacy))
        assert items[0].snapshot.carbon_impact == "1200"

    def test_invalid_ids_are_skipped(self):
        """Blank or overlong ids cannot be looked up in the catalog"""
        legacy = [
            {"id": "x" * 70, "projectName": "A", "pricePerTonne": 5, "quantity": 1},
            {"id": "   ", "projectName": "B", "pricePerTonne": 5, "quantity": 1},
            {"id": "3", "projectName": "C", "pricePerTonne": 5, "quantity": 1},
        ]
        items, _ = loads_cart(json.dumps(legacy))
        assert [item.id for item in items] == ["3"]

    def test_foreign_currency_items_are_skipped(self, sample_items):
        """Items priced in another currency do not mix into the totals"""
        good = item_to_dict(sample_items[0])
        raw = json.dumps(
            {
                "schema_version": 2,
                "version": 2,
                "items": [good, {**good, "id": "eur", "currency": "EUR"}],
            }
        )

        assert [item.id for item in loads_cart(raw)[0]] == ["a"]
        assert [item.id for item in loads_cart(raw, "EUR")[0]] == ["eur"]
