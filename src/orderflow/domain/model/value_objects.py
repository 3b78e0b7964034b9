"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from orderflow.domain.exceptions import (
    InvalidExternalOrderId,
    InvalidMoney,
    InvalidProductId,
    ValidationError,
)

DEFAULT_CURRENCY = "BRL"

_CENTS = Decimal("0.01")
_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.  The amount is always kept at
    exactly two decimal places (half-up), so ``Money.of("10")`` and
    ``Money.of("10.004")`` are both ``10.00``.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise InvalidMoney(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise InvalidMoney(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise InvalidMoney(f"Money amount cannot be negative, got {self.amount}")
        if not isinstance(self.currency, str) or not _CURRENCY_PATTERN.match(self.currency):
            raise InvalidMoney(f"Invalid currency code: {self.currency!r}")
        amount = self.amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
        if amount.is_zero():
            amount = amount.copy_abs()
        object.__setattr__(self, "amount", amount)

    # --- Arithmetic helpers ---------------------------------------------------

    def add(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise InvalidMoney("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def multiply(self, factor: int | Decimal) -> Money:
        """Multiply by an integer quantity or a decimal factor."""
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError(
                f"Can only multiply Money by int or Decimal, got {type(factor).__name__}"
            )
        if isinstance(factor, Decimal) and not factor.is_finite():
            raise InvalidMoney(f"Multiplication factor must be finite, got {factor}")
        if factor < 0:
            raise InvalidMoney(f"Multiplication factor cannot be negative, got {factor}")
        return Money(self.amount * factor, self.currency)

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply

    # --- Comparison -----------------------------------------------------------

    def is_greater_than(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def is_less_than(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __lt__(self, other: Money) -> bool:
        return self.is_less_than(other)

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        return self.is_greater_than(other)

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def is_zero(self) -> bool:
        return self.amount == Decimal("0")

    def is_positive(self) -> bool:
        return self.amount > Decimal("0")

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise InvalidMoney(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(
        amount: str | float | int | Decimal | None,
        currency: str = DEFAULT_CURRENCY,
    ) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        if amount is None:
            raise InvalidMoney("Money amount is required")
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidMoney(f"Invalid money amount: {amount!r}") from exc
        return Money(value, currency)

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0"), currency)


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------
IDENTIFIER_MAX_LENGTH = 100
_IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def _clean_identifier(
    value: object, label: str, error: type[ValidationError]
) -> str:
    if not isinstance(value, str) or not value.strip():
        raise error(f"{label} cannot be null or blank")
    trimmed = value.strip()
    if len(trimmed) > IDENTIFIER_MAX_LENGTH:
        raise error(
            f"{label} cannot exceed {IDENTIFIER_MAX_LENGTH} characters, got {len(trimmed)}"
        )
    if not _IDENTIFIER_PATTERN.match(trimmed):
        raise error(
            f"{label} may only contain letters, digits, '-' and '_': {trimmed!r}"
        )
    return trimmed


@dataclass(frozen=True)
class ProductId:
    """Reference to a product in the upstream catalog."""

    value: str

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "value", _clean_identifier(self.value, "ProductId", InvalidProductId)
        )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExternalOrderId:
    """The order id assigned by the upstream system.

    Unique across the system; the orchestration layer and the repository
    enforce that, not this value object.
    """

    value: str

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "value",
            _clean_identifier(self.value, "ExternalOrderId", InvalidExternalOrderId),
        )

    def __str__(self) -> str:
        return self.value
