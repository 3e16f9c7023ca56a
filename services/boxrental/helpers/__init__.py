"""
Helper utilities for RUT input handling.

Pure formatting/validation functions for Chilean identification numbers
(RUT) plus a stateful binding for live form fields.
"""

from .rut import (
    RutValidationResult,
    calculate_verifier_digit,
    clean_rut,
    format_rut,
    is_valid_rut,
    validate_rut,
)
from .rut_input import RutInput

__all__ = [
    "RutValidationResult",
    "calculate_verifier_digit",
    "clean_rut",
    "format_rut",
    "is_valid_rut",
    "validate_rut",
    "RutInput",
]
