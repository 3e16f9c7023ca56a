"""
Box availability checks for a requested delivery/pickup window.

The backend answers ``GET /api/inventory/check``; when it cannot be
reached the check degrades to an error result so the rental form can keep
rendering.
"""

from datetime import date
from enum import Enum
from typing import Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .client import ApiClient, ApiRetryError
from .log_config import get_logger

logger = get_logger(__name__)

INVENTORY_CHECK_PATH = "/api/inventory/check"


class Severity(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class InventoryCheck(BaseModel):
    """Availability verdict as returned by the backend."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    available: bool
    available_quantity: int = Field(alias="availableQuantity", ge=0)
    message: str
    severity: Severity


CHECK_FAILED = InventoryCheck(
    available=False,
    available_quantity=0,
    message="Error al verificar disponibilidad",
    severity=Severity.ERROR,
)


def evaluate_availability(requested: int, total_boxes: int, reserved: int) -> InventoryCheck:
    """
    Decide availability from fleet size and boxes already reserved.

    Examples:
        >>> evaluate_availability(10, 50, 5).severity
        <Severity.SUCCESS: 'success'>
        >>> evaluate_availability(10, 50, 45).message
        '⚠️ Solo 5 cajas disponibles (solicitas 10)'
    """
    if requested < 1:
        raise ValueError(f"requested must be positive, got {requested}")

    available_quantity = max(total_boxes - reserved, 0)

    if requested <= available_quantity:
        return InventoryCheck(
            available=True,
            available_quantity=available_quantity,
            message=f"✅ Disponibles: {available_quantity} cajas para las fechas seleccionadas",
            severity=Severity.SUCCESS,
        )

    if available_quantity > 0:
        return InventoryCheck(
            available=False,
            available_quantity=available_quantity,
            message=f"⚠️ Solo {available_quantity} cajas disponibles (solicitas {requested})",
            severity=Severity.WARNING,
        )

    return InventoryCheck(
        available=False,
        available_quantity=0,
        message="❌ Sin cajas disponibles para las fechas seleccionadas",
        severity=Severity.ERROR,
    )


def check_inventory_availability(
    requested_quantity: int,
    delivery_date: Union[str, date],
    pickup_date: Union[str, date],
    client: Optional[ApiClient] = None,
) -> InventoryCheck:
    """
    Ask the backend whether enough boxes are free for the given window.

    Args:
        requested_quantity: Number of boxes wanted
        delivery_date: Delivery date (YYYY-MM-DD or date)
        pickup_date: Pickup date (YYYY-MM-DD or date)
        client: Backend client; one is built from settings when omitted

    Returns:
        The backend's verdict, or ``CHECK_FAILED`` if it could not be obtained
    """
    params = {
        "quantity": requested_quantity,
        "delivery": _as_iso(delivery_date),
        "pickup": _as_iso(pickup_date),
    }

    owns_client = client is None
    api = client or ApiClient.from_settings()

    try:
        data = api.get_json(INVENTORY_CHECK_PATH, params=params)
        return InventoryCheck.model_validate(data)
    except httpx.HTTPStatusError as e:
        error = _backend_error_message(e.response)
        logger.error(
            "Inventory check rejected",
            status_code=e.response.status_code,
            error=error,
            **params
        )
        return CHECK_FAILED
    except (ApiRetryError, httpx.HTTPError, ValueError, ValidationError) as e:
        logger.error(
            "Error checking inventory",
            error=str(e),
            error_type=type(e).__name__,
            **params
        )
        return CHECK_FAILED
    finally:
        if owns_client:
            api.close()


def _as_iso(value: Union[str, date]) -> str:
    return value.isoformat() if isinstance(value, date) else value


def _backend_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return "Error al verificar inventario"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return "Error al verificar inventario"
