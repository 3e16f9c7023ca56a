"""
Tests for box availability checks.
"""

from datetime import date
from unittest.mock import patch

import httpx
import pytest
from structlog.testing import capture_logs

from services.boxrental.client import ApiClient
from services.boxrental.inventory import (
    CHECK_FAILED,
    INVENTORY_CHECK_PATH,
    InventoryCheck,
    Severity,
    check_inventory_availability,
    evaluate_availability,
)


def make_client(handler, max_retries: int = 0) -> ApiClient:
    return ApiClient(
        "http://backend.test",
        max_retries=max_retries,
        transport=httpx.MockTransport(handler),
    )


class TestEvaluateAvailability:
    """Tests for the local availability decision."""

    def test_enough_boxes(self):
        check = evaluate_availability(10, total_boxes=50, reserved=15)
        assert check == InventoryCheck(
            available=True,
            available_quantity=35,
            message="✅ Disponibles: 35 cajas para las fechas seleccionadas",
            severity=Severity.SUCCESS,
        )

    def test_exact_match_is_available(self):
        check = evaluate_availability(35, total_boxes=50, reserved=15)
        assert check.available is True

    def test_partial_stock(self):
        check = evaluate_availability(20, total_boxes=50, reserved=45)
        assert check.available is False
        assert check.available_quantity == 5
        assert check.severity is Severity.WARNING
        assert check.message == "⚠️ Solo 5 cajas disponibles (solicitas 20)"

    def test_no_stock(self):
        check = evaluate_availability(1, total_boxes=50, reserved=50)
        assert check.available is False
        assert check.available_quantity == 0
        assert check.severity is Severity.ERROR
        assert check.message == "❌ Sin cajas disponibles para las fechas seleccionadas"

    def test_over_reserved_never_negative(self):
        check = evaluate_availability(1, total_boxes=10, reserved=12)
        assert check.available_quantity == 0

    def test_non_positive_request_rejected(self):
        with pytest.raises(ValueError):
            evaluate_availability(0, total_boxes=10, reserved=0)


class TestInventoryCheckModel:
    """Tests for the InventoryCheck payload shape."""

    def test_parses_camel_case(self):
        check = InventoryCheck.model_validate({
            "available": True,
            "availableQuantity": 12,
            "message": "ok",
            "severity": "success",
            "extra": "ignored",
        })
        assert check.available_quantity == 12
        assert check.severity is Severity.SUCCESS

    def test_dumps_camel_case(self):
        dumped = CHECK_FAILED.model_dump(mode="json", by_alias=True)
        assert dumped == {
            "available": False,
            "availableQuantity": 0,
            "message": "Error al verificar disponibilidad",
            "severity": "error",
        }


class TestCheckInventoryAvailability:
    """Tests for the backend availability call."""

    def test_sends_query_and_parses_response(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={
                "available": True,
                "availableQuantity": 40,
                "message": "✅ Disponibles: 40 cajas para las fechas seleccionadas",
                "severity": "success",
            })

        with make_client(handler) as client:
            check = check_inventory_availability(10, date(2025, 3, 1), "2025-03-15", client=client)

        assert seen["path"] == INVENTORY_CHECK_PATH
        assert seen["params"] == {"quantity": "10", "delivery": "2025-03-01", "pickup": "2025-03-15"}
        assert check.available is True
        assert check.available_quantity == 40

    def test_backend_error_degrades(self):
        def handler(request):
            return httpx.Response(400, json={"error": "Fechas inválidas"})

        with capture_logs() as logs:
            with make_client(handler) as client:
                check = check_inventory_availability(10, "2025-03-15", "2025-03-01", client=client)

        assert check == CHECK_FAILED
        assert any(
            entry["event"] == "Inventory check rejected" and entry["error"] == "Fechas inválidas"
            for entry in logs
        )

    @patch("time.sleep")
    def test_server_failure_degrades(self, mock_sleep):
        def handler(request):
            return httpx.Response(503)

        with make_client(handler, max_retries=2) as client:
            check = check_inventory_availability(5, "2025-03-01", "2025-03-15", client=client)

        assert check == CHECK_FAILED
        assert mock_sleep.call_count == 2

    def test_connection_error_degrades(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            check = check_inventory_availability(5, "2025-03-01", "2025-03-15", client=client)

        assert check == CHECK_FAILED

    def test_malformed_payload_degrades(self):
        def handler(request):
            return httpx.Response(200, json={"available": "maybe"})

        with make_client(handler) as client:
            check = check_inventory_availability(5, "2025-03-01", "2025-03-15", client=client)

        assert check == CHECK_FAILED

    def test_non_json_body_degrades(self):
        def handler(request):
            return httpx.Response(200, text="<html>oops</html>")

        with make_client(handler) as client:
            check = check_inventory_availability(5, "2025-03-01", "2025-03-15", client=client)

        assert check == CHECK_FAILED

    def test_builds_client_from_settings_when_missing(self):
        def handler(request):
            return httpx.Response(200, json={
                "available": False,
                "availableQuantity": 0,
                "message": "❌ Sin cajas disponibles para las fechas seleccionadas",
                "severity": "error",
            })

        client = make_client(handler)
        with patch("services.boxrental.inventory.ApiClient.from_settings", return_value=client) as factory:
            check = check_inventory_availability(5, "2025-03-01", "2025-03-15")

        factory.assert_called_once_with()
        assert check.severity is Severity.ERROR
        assert client._client.is_closed
