"""
Tests for rental pricing utilities.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest
from services.boxrental.pricing import (
    ADDITIONAL_PRODUCTS,
    BOX_QUANTITY_SHORTCUTS,
    GUARANTEE_PER_BOX,
    RENTAL_DAYS_SHORTCUTS,
    RentalLine,
    calculate_guarantee,
    calculate_return_date,
    calculate_total_amount,
    find_additional_product,
    format_currency,
)


class TestFormatCurrency:
    """Tests for Chilean peso formatting."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "$0"),
            (500, "$500"),
            (2000, "$2.000"),
            (15000, "$15.000"),
            (1234567, "$1.234.567"),
            (1999.5, "$2.000"),
            (1999.4, "$1.999"),
            (Decimal("4500.00"), "$4.500"),
            ("15000", "$15.000"),
            (" 2500.5 ", "$2.501"),
            ("abc", "$0"),
            ("", "$0"),
            (None, "$0"),
            (float("nan"), "$0"),
            (-3000, "$-3.000"),
            (1e30, "$1.000.000.000.000.000.000.000.000.000.000"),
            ("123456789012345678901234567890", "$123.456.789.012.345.678.901.234.567.890"),
            ("12abc", "$12"),
            ("1.5e3 pesos", "$1.500"),
            (".5", "$1"),
            ("-", "$0"),
        ],
        ids=[
            "zero",
            "hundreds",
            "thousands",
            "tens_of_thousands",
            "millions",
            "rounds_half_up",
            "rounds_down",
            "decimal",
            "numeric_string",
            "padded_string",
            "non_numeric",
            "empty_string",
            "none",
            "nan",
            "negative",
            "beyond_decimal_precision_float",
            "beyond_decimal_precision_string",
            "trailing_text",
            "exponent_with_trailing_text",
            "leading_dot",
            "sign_only",
        ],
    )
    def test_format_currency(self, amount, expected):
        assert format_currency(amount) == expected


class TestGuarantee:
    """Tests for the per-box guarantee."""

    def test_default_rate(self):
        assert GUARANTEE_PER_BOX == 2000
        assert calculate_guarantee(10) == 20000
        assert calculate_guarantee(0) == 0

    def test_custom_rate(self):
        assert calculate_guarantee(3, per_box=2500) == 7500

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValueError, match="box_quantity"):
            calculate_guarantee(-1)


class TestReturnDate:
    """Tests for return date calculation."""

    def test_from_string(self):
        assert calculate_return_date("2025-01-01", 7) == "2025-01-08"

    def test_crosses_month_and_year(self):
        assert calculate_return_date("2024-12-20", 14) == "2025-01-03"
        assert calculate_return_date("2024-02-25", 7) == "2024-03-03"

    def test_from_date_objects(self):
        assert calculate_return_date(date(2025, 3, 1), 30) == "2025-03-31"
        assert calculate_return_date(datetime(2025, 3, 1, 18, 30), 1) == "2025-03-02"

    def test_zero_days(self):
        assert calculate_return_date("2025-06-15", 0) == "2025-06-15"

    def test_invalid_date(self):
        with pytest.raises(ValueError, match="Invalid date format"):
            calculate_return_date("01/03/2025", 7)

    def test_negative_days(self):
        with pytest.raises(ValueError, match="rental_days"):
            calculate_return_date("2025-01-01", -1)


class TestTotalAmount:
    """Tests for rental totals."""

    def test_boxes_only(self):
        # 10 boxes * 7 days * 500 + 10 * 2000 guarantee
        assert calculate_total_amount(10, 7, 500) == 55000

    def test_with_additional_products(self):
        lines = [
            RentalLine("Correa Ratchet", 2, 6000),
            RentalLine("Base móvil", 1, 9000),
        ]
        # base 5*14*400 = 28000; add-ons (12000 + 9000) * 14 = 294000; guarantee 10000
        assert calculate_total_amount(5, 14, 400, lines) == 332000

    def test_custom_guarantee(self):
        assert calculate_total_amount(2, 1, 1000, guarantee_per_box=0) == 2000

    def test_decimal_price(self):
        assert calculate_total_amount(2, 3, Decimal("1500.50")) == Decimal("13003.00")

    def test_zero_boxes_still_charges_add_ons(self):
        lines = [RentalLine("Carrito plegable", 1, 15000)]
        assert calculate_total_amount(0, 2, 1000, lines) == 30000

    @pytest.mark.parametrize(
        "boxes,days",
        [(-1, 7), (5, -2)],
        ids=["negative_boxes", "negative_days"],
    )
    def test_negative_inputs_rejected(self, boxes, days):
        with pytest.raises(ValueError):
            calculate_total_amount(boxes, days, 1000)


class TestCatalog:
    """Tests for shortcuts and the add-on catalog."""

    def test_shortcuts(self):
        assert BOX_QUANTITY_SHORTCUTS == (2, 5, 10, 15)
        assert RENTAL_DAYS_SHORTCUTS == (7, 14, 30)

    def test_catalog_prices(self):
        prices = {product.name: product.price for product in ADDITIONAL_PRODUCTS}
        assert prices == {
            "Carrito plegable": 15000,
            "Base móvil": 9000,
            "Kit 2 bases móviles": 15000,
            "Correa Ratchet": 6000,
        }

    def test_find_additional_product(self):
        assert find_additional_product("  correa ratchet ").price == 6000

    def test_find_unknown_product(self):
        with pytest.raises(KeyError):
            find_additional_product("Caja grande")
