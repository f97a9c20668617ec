"""
Domain Layer Tests - Value Objects and Entities
"""

from decimal import Decimal

import pytest

from conftest import make_item, make_project
from greyn_cart.domain.entities.cart_entity import Cart, DuplicateAddPolicy
from greyn_cart.domain.entities.cart_line_item import CartLineItem
from greyn_cart.domain.value_objects.cart_totals import CartTotals, calculate_totals
from greyn_cart.domain.value_objects.money import Money
from greyn_cart.domain.value_objects.project_id import ProjectId
from greyn_cart.infrastructure.utilities.exceptions import CartItemNotFoundError


class TestValueObjects:
    """Test domain value objects validation and behavior"""

    def test_money_rounds_to_cents(self):
        """Test half-up rounding to two decimals"""
        assert Money(Decimal("1.005")).amount == Decimal("1.01")
        assert Money("2.5").amount == Decimal("2.50")
        assert Money.from_float(0.1).amount == Decimal("0.10")

    def test_money_invalid(self):
        """Test invalid Money values"""
        invalid_amounts = [-1, "abc", True, float("nan"), Decimal("Infinity")]
        for amount in invalid_amounts:
            with pytest.raises(ValueError):
                Money(amount)

        with pytest.raises(ValueError):
            Money(1, "DOLLARS")

    def test_money_arithmetic(self):
        """Test Money operators"""
        ten = Money(10)
        assert ten + Money(5) == Money(15)
        assert ten - Money(4) == Money(6)
        assert ten * 3 == Money(30)
        assert 2 * ten == Money(20)
        assert Money(5) < ten
        assert str(ten) == "10.00 USD"

        with pytest.raises(ValueError):
            Money(1) - Money(2)
        with pytest.raises(ValueError):
            ten + Money(1, "EUR")

    def test_project_id(self):
        """Test ProjectId validation"""
        assert ProjectId(" 42 ").value == "42"
        for value in ["", "   ", None, "x" * 65]:
            with pytest.raises(ValueError):
                ProjectId(value)


class TestCartTotals:
    """Test derived cart figures"""

    def test_reference_totals(self, sample_items):
        """Two lines of 10x2 and 5x3"""
        totals = calculate_totals(sample_items)

        assert totals.subtotal.amount == Decimal("35.00")
        assert totals.tax.amount == Decimal("1.75")
        assert totals.total.amount == Decimal("36.75")
        assert totals.total_units == 5
        assert totals.total_credits == 5
        assert totals.line_count == 2

    def test_empty_totals(self):
        """Empty carts total to zero"""
        totals = calculate_totals([])
        assert totals == CartTotals.empty()
        assert totals.total.is_zero()

    def test_totals_ignore_order(self, sample_items):
        """Totals do not depend on line order"""
        assert calculate_totals(sample_items) == calculate_totals(list(reversed(sample_items)))

    def test_total_is_subtotal_plus_tax(self):
        """Tax is rounded before being added"""
        items = [make_item("a", price="0.33", quantity=3)]
        totals = calculate_totals(items)

        assert totals.subtotal.amount == Decimal("0.99")
        assert totals.tax.amount == Decimal("0.05")
        assert totals.total.amount == totals.subtotal.amount + totals.tax.amount


class TestCartLineItem:
    """Test cart line item entity"""

    def test_from_project_captures_price_and_snapshot(self, sample_project):
        """Line keeps the add-time price and display fields"""
        item = CartLineItem.from_project(sample_project)

        assert item.id == "1"
        assert item.quantity == 1
        assert item.unit_price == Money(Decimal("15.50"))
        assert item.name == "Amazon Rainforest Conservation"
        assert item.snapshot.location == "Amazon Basin, Brazil"
        assert item.available_supply == 125000

    def test_invalid_quantity_type(self, sample_project):
        """Quantities must be integers"""
        item = CartLineItem.from_project(sample_project)
        for quantity in [1.5, "2", True]:
            with pytest.raises(ValueError):
                item.with_quantity(quantity)

    def test_invalid_ids(self, sample_project):
        """Line ids follow the project id rules"""
        item = CartLineItem.from_project(sample_project)
        for bad_id in ["", "   ", "x" * 65]:
            with pytest.raises(ValueError):
                CartLineItem(bad_id, 1, item.unit_price, item.snapshot)

    def test_line_total(self):
        """Line total is price times quantity"""
        assert make_item(price="12.50", quantity=4).line_total() == Money(50)


class TestCart:
    """Test cart aggregate rules"""

    def test_add_item_new(self, sample_project):
        """Adding a new project creates a line of quantity 1"""
        cart = Cart()
        assert cart.add_item(sample_project) is True
        assert cart.item_ids() == ["1"]
        assert cart.get_item("1").quantity == 1

    def test_duplicate_add_is_ignored(self, sample_project):
        """Adding a present project keeps its quantity"""
        cart = Cart()
        cart.add_item(sample_project)
        assert cart.add_item(sample_project) is False

        assert len(cart) == 1
        assert cart.get_item("1").quantity == 1

    def test_duplicate_add_increment_policy(self, sample_project):
        """INCREMENT adds one unit to the existing line"""
        cart = Cart(duplicate_policy=DuplicateAddPolicy.INCREMENT)
        cart.add_item(sample_project)
        assert cart.add_item(sample_project) is False

        assert len(cart) == 1
        assert cart.get_item("1").quantity == 2

    def test_add_mixed_sequence_keeps_one_line_per_project(self):
        """Repeated adds never grow the cart past the distinct ids"""
        cart = Cart()
        for project_id in ["1", "2", "1", "3", "2"]:
            cart.add_item(make_project(project_id))

        assert len(cart) == 3
        assert cart.item_ids() == ["1", "2", "3"]
        assert all(item.quantity == 1 for item in cart)

    def test_add_foreign_currency_project(self):
        """Projects priced in another currency are rejected"""
        cart = Cart()
        with pytest.raises(ValueError):
            cart.add_item(make_project(currency="EUR"))
        assert cart.is_empty

    def test_add_sold_out_project(self):
        """Projects without remaining credits are not added"""
        cart = Cart()
        assert cart.add_item(make_project(available_credits=0)) is False
        assert cart.is_empty

    def test_update_quantity_clamps_to_global_cap(self):
        """Quantities above 10000 are clamped"""
        cart = Cart([make_item("a")])
        updated = cart.update_quantity("a", 99999)

        assert updated.quantity == 10000
        assert cart.get_item("a").quantity == 10000

    def test_update_quantity_clamps_to_supply(self):
        """Known supply lowers the cap"""
        cart = Cart([make_item("a", available_supply=50)])
        cart.update_quantity("a", 75)
        assert cart.get_item("a").quantity == 50
        assert cart.cap_for(cart.get_item("a")) == 50

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_update_quantity_below_one_removes(self, quantity):
        """Delete-on-zero"""
        cart = Cart([make_item("a"), make_item("b")])
        assert cart.update_quantity("a", quantity) is None
        assert cart.item_ids() == ["b"]

    def test_update_quantity_unknown_item(self):
        """Unknown ids are reported"""
        cart = Cart([make_item("a")])
        with pytest.raises(CartItemNotFoundError):
            cart.update_quantity("missing", 2)

    def test_update_quantity_to_zero_unknown_item_is_noop(self):
        """Delete-on-zero for an absent id changes nothing"""
        cart = Cart([make_item("a")])
        assert cart.update_quantity("missing", 0) is None
        assert cart.item_ids() == ["a"]

    def test_update_quantity_rejects_non_integer(self):
        """Non-integer quantities are rejected"""
        cart = Cart([make_item("a")])
        with pytest.raises(ValueError):
            cart.update_quantity("a", 2.5)

    def test_remove_and_clear(self):
        """Remove is a no-op for unknown ids, clear empties the cart"""
        cart = Cart([make_item("a"), make_item("b")])

        assert cart.remove_item("a") is True
        assert cart.remove_item("a") is False
        assert "a" not in cart
        assert "b" in cart

        cart.clear()
        assert cart.is_empty
        assert cart.items == []

    def test_normalizes_stored_items(self):
        """Duplicates, zero quantities and oversized quantities are repaired"""
        cart = Cart(
            [
                make_item("a", quantity=3),
                make_item("a", quantity=7),
                make_item("b", quantity=0),
                make_item("c", quantity=20000),
                make_item("d", quantity=5, available_supply=2),
            ]
        )

        assert cart.item_ids() == ["a", "c", "d"]
        assert cart.get_item("a").quantity == 3
        assert cart.get_item("c").quantity == 10000
        assert cart.get_item("d").quantity == 2

    def test_drops_stored_items_in_other_currency(self):
        """Lines priced in another currency are not mixed into the totals"""
        eur = CartLineItem.from_project(make_project("e", price="9", currency="EUR"))
        cart = Cart([make_item("a", price="10"), eur])

        assert cart.item_ids() == ["a"]
        assert cart.totals().subtotal.amount == Decimal("10.00")

    def test_items_returns_copy(self):
        """Mutating the returned list does not touch the cart"""
        cart = Cart([make_item("a")])
        cart.items.clear()
        assert len(cart) == 1

    def test_cart_totals(self, sample_items):
        """Cart totals match the reference figures"""
        totals = Cart(sample_items).totals()
        assert totals.total.amount == Decimal("36.75")


class TestProject:
    """Test catalog project entity"""

    def test_invalid_project(self):
        """Names and categories are required, credits cannot be negative"""
        with pytest.raises(ValueError):
            make_project(name=" ")
        with pytest.raises(ValueError):
            make_project(category="")
        with pytest.raises(ValueError):
            make_project(available_credits=-1)

    def test_snapshot(self, sample_project):
        """Snapshots copy the display fields"""
        snapshot = sample_project.snapshot()
        assert snapshot.name == sample_project.name
        assert snapshot.is_verified is True

    def test_deactivate_and_reprice(self, sample_project):
        """Lifecycle changes stamp updated_at"""
        sample_project.update_price(Money(Decimal("17.25")))
        assert sample_project.price_per_unit.amount == Decimal("17.25")

        sample_project.deactivate()
        assert sample_project.is_active is False
        assert sample_project.updated_at is not None

        with pytest.raises(ValueError):
            sample_project.update_price(Money.zero())

    def test_cart_keeps_add_time_price(self, sample_project):
        """Repricing the catalog does not touch lines already in a cart"""
        cart = Cart()
        cart.add_item(sample_project)
        sample_project.update_price(Money(Decimal("99.00")))

        assert cart.get_item("1").unit_price.amount == Decimal("15.50")
