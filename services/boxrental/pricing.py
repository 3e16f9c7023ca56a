"""
Rental pricing: totals, guarantee and Chilean peso formatting.

Amounts are CLP. Prices per day are entered manually by the admin, so the
functions here only combine them; they never look prices up.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Tuple, Union

Number = Union[int, float, Decimal]

_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Guarantee charged per rented box (CLP)
GUARANTEE_PER_BOX = 2000

# Quick-pick values offered by the new rental form
BOX_QUANTITY_SHORTCUTS: Tuple[int, ...] = (2, 5, 10, 15)
RENTAL_DAYS_SHORTCUTS: Tuple[int, ...] = (7, 14, 30)


@dataclass(frozen=True)
class AdditionalProduct:
    """Catalog entry for an add-on offered alongside the boxes."""

    name: str
    price: int


@dataclass(frozen=True)
class RentalLine:
    """An add-on as it appears on a rental: product, quantity and unit price."""

    name: str
    quantity: int
    price: Number


ADDITIONAL_PRODUCTS: Tuple[AdditionalProduct, ...] = (
    AdditionalProduct("Carrito plegable", 15000),
    AdditionalProduct("Base móvil", 9000),
    AdditionalProduct("Kit 2 bases móviles", 15000),
    AdditionalProduct("Correa Ratchet", 6000),
)


def format_currency(amount: Union[Number, str, None]) -> str:
    """
    Format an amount as Chilean pesos.

    Args:
        amount: Number or numeric string (trailing non-numeric text is ignored)

    Returns:
        "$" followed by the amount rounded to whole pesos, with dots as
        thousands separators; "$0" if the amount is not a finite number

    Examples:
        >>> format_currency(2000)
        '$2.000'
        >>> format_currency("15000.5")
        '$15.001'
        >>> format_currency("12abc")
        '$12'
        >>> format_currency("abc")
        '$0'
    """
    if amount is None or isinstance(amount, bool):
        return "$0"

    if isinstance(amount, str):
        # Leading numeric prefix only, so "12abc" reads as 12
        match = _NUMERIC_PREFIX.match(amount.strip())
        if not match:
            return "$0"
        raw = match.group(0)
    else:
        raw = str(amount)

    try:
        value = Decimal(raw)
    except InvalidOperation:
        return "$0"

    if not value.is_finite():
        return "$0"

    pesos = int(value.to_integral_value(rounding=ROUND_HALF_UP))
    return "$" + f"{pesos:,}".replace(",", ".")


def calculate_guarantee(box_quantity: int, per_box: int = GUARANTEE_PER_BOX) -> int:
    """Guarantee owed for a rental of ``box_quantity`` boxes."""
    _require_non_negative(box_quantity=box_quantity)
    return box_quantity * per_box


def calculate_return_date(start_date: Union[str, date], rental_days: int) -> str:
    """
    Compute the return date of a rental.

    Args:
        start_date: Delivery date as ``date`` or YYYY-MM-DD string
        rental_days: Length of the rental in days

    Returns:
        Return date in YYYY-MM-DD format

    Raises:
        ValueError: If the date is malformed or rental_days is negative
    """
    _require_non_negative(rental_days=rental_days)

    if isinstance(start_date, datetime):
        start = start_date.date()
    elif isinstance(start_date, date):
        start = start_date
    else:
        try:
            start = datetime.strptime(start_date, "%Y-%m-%d").date()
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid date format '{start_date}'. Expected YYYY-MM-DD") from e

    return (start + timedelta(days=rental_days)).isoformat()


def calculate_total_amount(
    box_quantity: int,
    rental_days: int,
    price_per_day: Number,
    additional_products: Iterable[RentalLine] = (),
    guarantee_per_box: int = GUARANTEE_PER_BOX,
) -> Number:
    """
    Total charged for a rental, guarantee included.

    total = boxes * days * price_per_day
          + sum(quantity * price * days for each add-on)
          + guarantee

    Examples:
        >>> calculate_total_amount(10, 7, 500)
        55000
        >>> calculate_total_amount(2, 7, 1000, [RentalLine("Correa Ratchet", 1, 6000)])
        60000
    """
    _require_non_negative(box_quantity=box_quantity, rental_days=rental_days)

    base_amount = box_quantity * rental_days * price_per_day
    additional_amount = sum(
        line.quantity * line.price * rental_days for line in additional_products
    )
    guarantee = calculate_guarantee(box_quantity, guarantee_per_box)

    return base_amount + additional_amount + guarantee


def find_additional_product(name: str) -> AdditionalProduct:
    """
    Look up a catalog add-on by name (case-insensitive).

    Raises:
        KeyError: If the product is not in the catalog
    """
    wanted = name.strip().casefold()
    for product in ADDITIONAL_PRODUCTS:
        if product.name.casefold() == wanted:
            return product
    raise KeyError(name)


def _require_non_negative(**values: int) -> None:
    for field, value in values.items():
        if value < 0:
            raise ValueError(f"{field} must be zero or positive, got {value}")
