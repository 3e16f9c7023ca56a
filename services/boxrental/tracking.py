"""
Tracking codes and public tracking links for rentals.

A tracking code is the last four digits of the customer's RUT body plus
five random characters; the token is a separate five-character secret.
Both appear in the link sent to the customer.
"""

import re
import secrets
from typing import Optional

from .settings import BoxRentalSettings, settings

TRACKING_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
RANDOM_PART_LENGTH = 5
LOCAL_BASE_URL = "http://localhost:5000"


def _random_chars(length: int = RANDOM_PART_LENGTH) -> str:
    return "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(length))


def generate_tracking_code(rut: str) -> str:
    """
    Build a tracking code from a customer's RUT.

    Args:
        rut: Customer RUT, with or without dots and hyphen

    Returns:
        Last four digits before the check digit followed by five random
        uppercase letters/digits, e.g. ``"5678X3K9Q"`` for 12.345.678-5
    """
    cleaned = re.sub(r"[.\-\s]", "", rut or "")
    body = cleaned[:-1]
    return f"{body[-4:]}{_random_chars()}"


def generate_tracking_token() -> str:
    """Random five-character token (uppercase letters and digits)."""
    return _random_chars()


def tracking_base_url(config: Optional[BoxRentalSettings] = None) -> str:
    """
    Base URL for public tracking links.

    Production uses the public domain; otherwise the configured development
    host, falling back to the local server.
    """
    config = config or settings()
    if config.is_production():
        return config.public_base_url
    if config.dev_domain:
        return f"https://{config.dev_domain}"
    return LOCAL_BASE_URL


def generate_tracking_url(
    tracking_code: str,
    tracking_token: str,
    config: Optional[BoxRentalSettings] = None,
) -> str:
    """Full tracking link: ``{base}/track/{code}/{token}``."""
    return f"{tracking_base_url(config)}/track/{tracking_code}/{tracking_token}"
