"""
RUT (Rol Único Tributario) formatting and validation for Chile.

This module provides pure functions to clean, format and validate Chilean
tax identification numbers using the official módulo 11 algorithm.

Every function is total: malformed input (empty, too short, symbols only,
None) produces a well-formed result instead of raising, so form fields can
call them on every keystroke.
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Union

# Characters that survive cleaning: digits and the K check digit
_NON_RUT_CHARS = re.compile(r"[^0-9kK]")
_NON_DIGITS = re.compile(r"[^0-9]")

# Módulo 11 multipliers, applied from the least-significant digit
MULTIPLIERS = (2, 3, 4, 5, 6, 7)


@dataclass(frozen=True)
class RutValidationResult:
    """Outcome of validating a RUT."""

    is_valid: bool
    formatted_rut: str
    clean_rut: str
    verifier_digit: str

    def to_dict(self) -> Dict[str, Union[bool, str]]:
        """Return the camelCase payload consumed by the dashboards."""
        return {
            "isValid": self.is_valid,
            "formattedRut": self.formatted_rut,
            "cleanRut": self.clean_rut,
            "verifierDigit": self.verifier_digit,
        }


def clean_rut(value: Optional[str]) -> str:
    """
    Strip a RUT down to its digits and check digit.

    Args:
        value: RUT in any format (dots, hyphens, spaces, lowercase k)

    Returns:
        Uppercase string containing only digits and ``K``; empty string if
        nothing qualifies

    Examples:
        >>> clean_rut("12.345.678-k")
        '12345678K'
        >>> clean_rut("--")
        ''
    """
    if not value or not isinstance(value, str):
        return ""
    return _NON_RUT_CHARS.sub("", value).upper()


def format_rut(value: Optional[str]) -> str:
    """
    Format a RUT for display: thousands separators and hyphen before the DV.

    Inputs that clean down to a single character are returned as-is since
    they cannot be split into body and check digit.

    Examples:
        >>> format_rut("123456789")
        '12.345.678-9'
        >>> format_rut("1")
        '1'
        >>> format_rut("12.345.678-5")
        '12.345.678-5'
    """
    cleaned = clean_rut(value)
    if len(cleaned) <= 1:
        return cleaned

    body, digit = cleaned[:-1], cleaned[-1]

    groups = []
    while body:
        groups.insert(0, body[-3:])
        body = body[:-3]

    return f"{'.'.join(groups)}-{digit}"


def calculate_verifier_digit(body: Optional[str]) -> str:
    """
    Calculate the check digit for a RUT body using módulo 11.

    The algorithm:
    1. Multiply each digit (from right to left) by 2,3,4,5,6,7,2,3,...
    2. Sum all products
    3. Calculate 11 - (sum % 11)
    4. 11 maps to "0", 10 maps to "K", anything else is the digit itself

    Args:
        body: RUT body; non-digit characters are ignored

    Returns:
        Check digit ("0"-"9" or "K"), or empty string if body has no digits

    Examples:
        >>> calculate_verifier_digit("12345678")
        '5'
        >>> calculate_verifier_digit("1000005")
        'K'
        >>> calculate_verifier_digit("")
        ''
    """
    if not body or not isinstance(body, str):
        return ""

    digits = _NON_DIGITS.sub("", body)
    if not digits:
        return ""

    total = sum(
        int(digit) * MULTIPLIERS[position % len(MULTIPLIERS)]
        for position, digit in enumerate(reversed(digits))
    )

    result = 11 - (total % 11)
    if result == 11:
        return "0"
    if result == 10:
        return "K"
    return str(result)


def validate_rut(rut: Optional[str]) -> RutValidationResult:
    """
    Validate a RUT and return its cleaned and formatted representations.

    Args:
        rut: RUT in any format

    Returns:
        RutValidationResult; ``is_valid`` is False when the input is too
        short to hold both a body and a check digit

    Examples:
        >>> validate_rut("12.345.678-5").is_valid
        True
        >>> validate_rut("12345678-K").verifier_digit
        '5'
    """
    cleaned = clean_rut(rut)

    if len(cleaned) < 2:
        return RutValidationResult(
            is_valid=False,
            formatted_rut=format_rut(rut),
            clean_rut=cleaned,
            verifier_digit="",
        )

    body, provided_digit = cleaned[:-1], cleaned[-1]
    calculated_digit = calculate_verifier_digit(body)

    return RutValidationResult(
        is_valid=provided_digit == calculated_digit,
        formatted_rut=format_rut(cleaned),
        clean_rut=cleaned,
        verifier_digit=calculated_digit,
    )


def is_valid_rut(rut: Optional[str]) -> bool:
    """Shortcut for ``validate_rut(rut).is_valid``."""
    return validate_rut(rut).is_valid
