"""Unit tests for formatting helpers and route guards."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from hotel_portal.navigation import Redirect, Route, guard
from hotel_portal.utils import calculate_nights, format_date, format_price, to_date


class TestFormatPrice:
    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "₹0"),
            (999, "₹999"),
            (1000, "₹1,000"),
            (123456.5, "₹1,23,457"),
            (12500, "₹12,500"),
            (10000000, "₹1,00,00,000"),
            (Decimal("4200.49"), "₹4,200"),
        ],
    )
    def test_indian_grouping(self, amount, expected):
        assert format_price(amount) == expected


class TestDates:
    def test_to_date_truncates_timestamps(self):
        assert to_date("2026-11-01T00:00:00.000Z") == date(2026, 11, 1)
        assert to_date(datetime(2026, 11, 1, 23, 59)) == date(2026, 11, 1)
        assert to_date(None) is None

    def test_to_date_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_date("next tuesday")

    def test_format_date(self):
        assert format_date(date(2026, 1, 5)) == "2026-01-05"
        assert format_date(None) is None

    def test_calculate_nights(self):
        assert calculate_nights("2026-11-01", "2026-11-04") == 3
        assert calculate_nights(date(2026, 11, 1), None) == 0


class TestGuard:
    def test_protected_route_redirects_anonymous_user(self):
        assert guard(Route.BOOKINGS, is_authenticated=False) == Redirect(Route.AUTH)
        assert guard(Route.BOOKINGS, is_authenticated=True) is None

    def test_auth_route_is_public(self):
        assert guard(Route.AUTH, is_authenticated=False) is None

    def test_home_redirects_by_session(self):
        assert guard(Route.HOME, is_authenticated=True).route is Route.HOTELS
        assert guard(Route.HOME, is_authenticated=False).route is Route.AUTH

    def test_redirect_path(self):
        assert Redirect(Route.BOOK, params={"hotel_id": 4}).path == "/book/4"
