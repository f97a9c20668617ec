"""
Money value object

Represents monetary amounts with currency handling.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Money value object that handles currency amounts properly
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self):
        """Validate money object on creation"""
        if not isinstance(self.amount, Decimal):
            if isinstance(self.amount, bool):
                raise ValueError("Money amount must be numeric")
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except InvalidOperation as e:
                raise ValueError(f"Invalid money amount: {self.amount!r}") from e

        if not self.amount.is_finite():
            raise ValueError("Money amount must be finite")

        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

        if not self.currency or len(self.currency) != 3:
            raise ValueError("Currency must be a 3-letter code")

        # Round to 2 decimal places for currency
        rounded_amount = self.amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        object.__setattr__(self, "amount", rounded_amount)
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def from_float(cls, amount: float, currency: str = "USD") -> "Money":
        """Create Money from float amount"""
        return cls(Decimal(str(amount)), currency)

    @classmethod
    def zero(cls, currency: str = "USD") -> "Money":
        """Create zero money amount"""
        return cls(Decimal("0"), currency)

    def add(self, other: "Money") -> "Money":
        """Add two money amounts"""
        self._check_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        """Subtract two money amounts"""
        self._check_currency(other, "subtract")
        result_amount = self.amount - other.amount
        if result_amount < 0:
            raise ValueError("Cannot have negative money amount")
        return Money(result_amount, self.currency)

    def multiply(self, factor: Union[int, float, Decimal]) -> "Money":
        """Multiply money by a factor"""
        if not isinstance(factor, Decimal):
            factor = Decimal(str(factor))
        if factor < 0:
            raise ValueError("Cannot multiply money by negative factor")
        return Money(self.amount * factor, self.currency)

    def is_zero(self) -> bool:
        """Check if amount is zero"""
        return self.amount == Decimal("0")

    def format_display(self) -> str:
        """Format for display to users"""
        return f"{self.amount:.2f} {self.currency}"

    def _check_currency(self, other: "Money", operation: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {operation} different currencies: {self.currency} and {other.currency}"
            )

    def __str__(self) -> str:
        return self.format_display()

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._check_currency(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._check_currency(other, "compare")
        return self.amount >= other.amount

    def __add__(self, other: "Money") -> "Money":
        """Add two money amounts using + operator"""
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        """Subtract two money amounts using - operator"""
        return self.subtract(other)

    def __mul__(self, factor: Union[int, float, Decimal]) -> "Money":
        """Multiply money by a factor using * operator"""
        return self.multiply(factor)

    def __rmul__(self, factor: Union[int, float, Decimal]) -> "Money":
        """Reverse multiply for factor * money"""
        return self.multiply(factor)
