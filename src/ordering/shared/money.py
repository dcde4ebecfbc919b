"""Money value object for monetary amounts with currency."""

from decimal import ROUND_HALF_UP, Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String

from ordering.domain import ordering

DEFAULT_CURRENCY = "USD"

_CENT = Decimal("0.01")


def _to_decimal(value) -> Decimal:
    return Decimal(str(value))


def _round_to_cents(value) -> float:
    return float(_to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


@ordering.value_object
class Money:
    """A non-negative monetary amount, rounded to cents, in a single currency.

    Use ``Money.create()`` rather than the constructor: it rounds the amount
    and normalizes the currency code before the value object is frozen.
    Arithmetic never mixes currencies and never produces a negative amount.
    """

    amount: Float(required=True, min_value=0.0)
    currency: String(required=True, max_length=3, default=DEFAULT_CURRENCY)

    @invariant.post
    def currency_must_be_three_letter_code(self):
        if not (self.currency and len(self.currency) == 3 and self.currency.isalpha() and self.currency.isupper()):
            raise ValidationError({"currency": [f"Currency must be a 3-letter code, got {self.currency!r}"]})

    @classmethod
    def create(cls, amount, currency=DEFAULT_CURRENCY):
        if amount is None or _to_decimal(amount) < 0:
            raise ValidationError({"amount": ["Amount cannot be negative"]})

        code = (currency or "").strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValidationError({"currency": [f"Currency must be a 3-letter code, got {currency!r}"]})

        return cls(amount=_round_to_cents(amount), currency=code)

    @classmethod
    def zero(cls, currency=DEFAULT_CURRENCY):
        return cls.create(0, currency)

    @property
    def value(self) -> float:
        return self.amount

    def is_zero(self) -> bool:
        return self.amount == 0

    def _assert_same_currency(self, other, operation):
        if self.currency != other.currency:
            raise ValidationError({"currency": [f"Cannot {operation} different currencies ({self.currency}, {other.currency})"]})

    def add(self, other):
        self._assert_same_currency(other, "add")
        return type(self).create(_to_decimal(self.amount) + _to_decimal(other.amount), self.currency)

    def subtract(self, other):
        self._assert_same_currency(other, "subtract")
        result = _to_decimal(self.amount) - _to_decimal(other.amount)
        if result < 0:
            raise ValidationError({"amount": ["Subtraction would result in a negative amount"]})
        return type(self).create(result, self.currency)

    def multiply(self, factor):
        if factor is None or _to_decimal(factor) < 0:
            raise ValidationError({"factor": ["Cannot multiply money by a negative factor"]})
        return type(self).create(_to_decimal(self.amount) * _to_decimal(factor), self.currency)

    def to_minor_units(self) -> int:
        """Amount in the smallest currency unit (cents), as payment providers expect."""
        return int((_to_decimal(self.amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"
