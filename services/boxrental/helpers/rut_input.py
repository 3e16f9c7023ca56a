"""
Live binding for RUT form fields.

Owns the mutable state of a single input (current value and last
validation) and calls the pure functions in ``rut`` on each change.
"""

from typing import Optional

from .rut import RutValidationResult, format_rut, validate_rut

# Shortest formatted value worth validating ("1-9")
MIN_VALIDATION_LENGTH = 3


class RutInput:
    """
    Tracks a RUT input field as the user types.

    Example:
        >>> field = RutInput()
        >>> field.set_value("123456785")
        >>> field.value
        '12.345.678-5'
        >>> field.is_valid
        True
    """

    def __init__(self, initial_value: str = ""):
        self.value = initial_value
        self.validation: Optional[RutValidationResult] = None

    def set_value(self, new_value: str) -> None:
        """Format the new value and refresh the validation."""
        formatted = format_rut(new_value)
        self.value = formatted

        if len(formatted) >= MIN_VALIDATION_LENGTH:
            self.validation = validate_rut(formatted)
        else:
            self.validation = None

    @property
    def is_valid(self) -> Optional[bool]:
        """None until enough has been typed to validate."""
        if self.validation is None:
            return None
        return self.validation.is_valid

    @property
    def formatted_value(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"RutInput(value={self.value!r}, is_valid={self.is_valid!r})"
