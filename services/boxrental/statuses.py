"""
Status vocabularies for rentals, boxes, inventory items and delivery tasks.

Each vocabulary is a ``str`` enum whose values match what the backend
stores. Badge lookups dispatch with ``match`` and end in ``assert_never``,
so adding a member without a badge fails type checking instead of falling
back to a default label.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Type, TypeVar, Union, assert_never


class RentalStatus(str, Enum):
    PENDIENTE = "pendiente"
    PROGRAMADA = "programada"
    EN_RUTA = "en_ruta"
    ENTREGADA = "entregada"
    RETIRO_PROGRAMADO = "retiro_programado"
    RETIRADA = "retirada"
    FINALIZADA = "finalizada"
    CANCELADA = "cancelada"


class BoxStatus(str, Enum):
    DISPONIBLE = "disponible"
    RESERVADA = "reservada"
    EN_TERRENO = "en_terreno"
    EN_REVISION = "en_revision"


class InventoryItemStatus(str, Enum):
    DISPONIBLE = "disponible"
    ALQUILADA = "alquilada"
    MANTENIMIENTO = "mantenimiento"
    DANADA = "dañada"


class DeliveryTaskStatus(str, Enum):
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


AnyStatus = Union[RentalStatus, BoxStatus, InventoryItemStatus, DeliveryTaskStatus]
StatusT = TypeVar("StatusT", RentalStatus, BoxStatus, InventoryItemStatus, DeliveryTaskStatus)


@dataclass(frozen=True)
class Badge:
    """Display attributes for a status badge."""

    label: str
    css_class: str
    variant: str = "secondary"


_GRAY = "bg-gray-100 text-gray-800"
_YELLOW = "bg-yellow-100 text-yellow-800"
_BLUE = "bg-blue-100 text-blue-800"
_GREEN = "bg-green-100 text-green-800"
_PURPLE = "bg-purple-100 text-purple-800"
_ORANGE = "bg-orange-100 text-orange-800"
_RED = "bg-red-100 text-red-800"


def rental_badge(status: RentalStatus) -> Badge:
    match status:
        case RentalStatus.PENDIENTE:
            return Badge("Pendiente", _YELLOW)
        case RentalStatus.PROGRAMADA:
            return Badge("Programada", _BLUE)
        case RentalStatus.EN_RUTA:
            return Badge("En Ruta", _ORANGE)
        case RentalStatus.ENTREGADA:
            return Badge("Entregada", _GREEN)
        case RentalStatus.RETIRO_PROGRAMADO:
            return Badge("Retiro Programado", _BLUE)
        case RentalStatus.RETIRADA:
            return Badge("Retirada", _PURPLE)
        case RentalStatus.FINALIZADA:
            return Badge("Finalizada", _GRAY)
        case RentalStatus.CANCELADA:
            return Badge("Cancelada", _RED, variant="destructive")
        case _:
            assert_never(status)


def box_badge(status: BoxStatus) -> Badge:
    match status:
        case BoxStatus.DISPONIBLE:
            return Badge("Disponible", _GREEN)
        case BoxStatus.RESERVADA:
            return Badge("Reservada", _YELLOW)
        case BoxStatus.EN_TERRENO:
            return Badge("En Terreno", _BLUE)
        case BoxStatus.EN_REVISION:
            return Badge("En Revisión", _PURPLE)
        case _:
            assert_never(status)


def inventory_badge(status: InventoryItemStatus) -> Badge:
    match status:
        case InventoryItemStatus.DISPONIBLE:
            return Badge("Disponible", _GREEN)
        case InventoryItemStatus.ALQUILADA:
            return Badge("Alquilada", _BLUE)
        case InventoryItemStatus.MANTENIMIENTO:
            return Badge("Mantenimiento", _YELLOW)
        case InventoryItemStatus.DANADA:
            return Badge("Dañada", _RED)
        case _:
            assert_never(status)


def delivery_task_badge(status: DeliveryTaskStatus) -> Badge:
    match status:
        case DeliveryTaskStatus.ASSIGNED:
            return Badge("Asignada", _BLUE)
        case DeliveryTaskStatus.IN_PROGRESS:
            return Badge("En Progreso", _YELLOW)
        case DeliveryTaskStatus.COMPLETED:
            return Badge("Completada", _GREEN)
        case DeliveryTaskStatus.FAILED:
            return Badge("Fallida", _RED)
        case _:
            assert_never(status)


def status_badge(status: AnyStatus) -> Badge:
    """Badge for a status of any vocabulary."""
    match status:
        case RentalStatus():
            return rental_badge(status)
        case BoxStatus():
            return box_badge(status)
        case InventoryItemStatus():
            return inventory_badge(status)
        case DeliveryTaskStatus():
            return delivery_task_badge(status)
        case _:
            assert_never(status)


def parse_status(enum_cls: Type[StatusT], raw: str) -> StatusT:
    """
    Convert a raw backend value into a status member.

    Raises:
        ValueError: If the value is not part of the vocabulary
    """
    value = raw.strip().lower() if isinstance(raw, str) else raw
    try:
        return enum_cls(value)
    except ValueError:
        accepted = ", ".join(member.value for member in enum_cls)
        raise ValueError(
            f"Unknown {enum_cls.__name__} '{raw}'. Expected one of: {accepted}"
        ) from None
