"""
Route guarding for the admin, driver and customer dashboards.

Decides, from the current session user and the requested path, whether a
page renders, redirects to a login page, or shows an access-denied screen.
Session transport itself (cookies) is the backend's business; this module
only reads the ``/api/auth/current`` response.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .client import ApiClient
from .log_config import get_logger

logger = get_logger(__name__)

CURRENT_SESSION_PATH = "/api/auth/current"


class UserRole(str, Enum):
    ADMIN = "admin"
    DRIVER = "driver"
    CUSTOMER = "customer"


class Outcome(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    DENY = "deny"


class SessionUser(BaseModel):
    """User attached to the current session."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.email or self.id


@dataclass(frozen=True)
class AccessDecision:
    outcome: Outcome
    redirect_to: Optional[str] = None
    message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome is Outcome.ALLOW


ALLOW = AccessDecision(Outcome.ALLOW)


def dashboard_path(role: UserRole) -> str:
    """Landing page for each role after login."""
    match role:
        case UserRole.ADMIN:
            return "/admin"
        case UserRole.DRIVER:
            return "/driver/dashboard"
        case UserRole.CUSTOMER:
            return "/customer/dashboard"
    raise ValueError(f"Unknown role: {role!r}")


def login_path(role: UserRole) -> str:
    match role:
        case UserRole.ADMIN:
            return "/admin/login"
        case UserRole.DRIVER:
            return "/auth/driver"
        case UserRole.CUSTOMER:
            return "/auth/customer"
    raise ValueError(f"Unknown role: {role!r}")


def route_role(path: str) -> Optional[UserRole]:
    """
    Role required to open ``path``, or None for public pages.

    The admin login page itself is public.
    """
    path = "/" + path.split("?", 1)[0].strip("/")
    if path == login_path(UserRole.ADMIN):
        return None

    section = path.split("/")[1]
    match section:
        case "admin":
            return UserRole.ADMIN
        case "driver":
            return UserRole.DRIVER
        case "customer":
            return UserRole.CUSTOMER
        case _:
            return None


def guard(user: Optional[SessionUser], required_role: UserRole) -> AccessDecision:
    """
    Check a session against the role a page requires.

    Anonymous sessions are sent to the role's login page; signed-in users
    with another role get an access-denied screen.
    """
    if user is None:
        return AccessDecision(Outcome.REDIRECT, redirect_to=login_path(required_role))

    if user.role is not required_role:
        logger.info(
            "Access denied",
            user_id=user.id,
            role=user.role.value,
            required_role=required_role.value
        )
        return AccessDecision(
            Outcome.DENY,
            message="No tienes permisos para acceder a esta área.",
        )

    return ALLOW


def authorize_path(user: Optional[SessionUser], path: str) -> AccessDecision:
    """Guard a path; public paths are always allowed."""
    required = route_role(path)
    if required is None:
        return ALLOW
    return guard(user, required)


def session_from_payload(payload: Any) -> Optional[SessionUser]:
    """
    Read the session user out of an ``/api/auth/current`` body.

    The body looks like ``{"user": {...}, "type": "admin"}``; the ``type``
    field carries the role. Anything unrecognisable is treated as anonymous.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("user"), dict):
        return None

    user_data = dict(payload["user"])
    user_data.setdefault("role", payload.get("type") or user_data.get("type"))

    try:
        return SessionUser.model_validate(user_data)
    except ValidationError as e:
        logger.warning("Unrecognised session payload", errors=e.error_count())
        return None


def fetch_current_user(client: ApiClient) -> Optional[SessionUser]:
    """
    Ask the backend who is signed in.

    Returns:
        The session user, or None when the backend answers 401

    Raises:
        httpx.HTTPStatusError: For other 4xx responses
        ApiRetryError: When the backend keeps failing
    """
    try:
        payload = client.get_json(CURRENT_SESSION_PATH)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 401:
            return None
        raise
    return session_from_payload(payload)
