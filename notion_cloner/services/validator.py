"""Validation of externally supplied identifiers."""

import re
import logging
from typing import Dict, Optional

from ..errors import ValidationError

logger = logging.getLogger(__name__)

ID_PATTERN = re.compile(r"[0-9a-f]{32}", re.IGNORECASE)


class IdValidator:
    """
    Validator for Notion object IDs.

    An ID is accepted when, after stripping hyphens, it is exactly 32
    hexadecimal characters (either case). Both the dashed UUID form and
    the compact form are therefore valid.
    """

    def is_valid(self, value: Optional[str]) -> bool:
        """Check an ID without raising."""
        if not isinstance(value, str):
            return False
        return bool(ID_PATTERN.fullmatch(value.replace("-", "")))

    def validate(self, value: Optional[str], param: str) -> str:
        """
        Validate an ID.

        Args:
            value: The identifier to check
            param: Name of the parameter it came from, used in the error

        Returns:
            The identifier with surrounding whitespace removed

        Raises:
            ValidationError: If the ID is missing or malformed
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError("Bad request", f"Missing required parameter: {param}")

        value = value.strip() if isinstance(value, str) else value
        if not self.is_valid(value):
            logger.debug(f"Rejected {param}: {value!r}")
            raise ValidationError(
                "Bad request",
                f"Invalid {param} format. {param} must be a valid Notion ID "
                f"(32 hexadecimal characters, hyphens optional)",
            )
        return value

    def validate_all(self, **ids: Optional[str]) -> Dict[str, str]:
        """Validate several IDs at once, keyed by parameter name."""
        return {param: self.validate(value, param) for param, value in ids.items()}


_default_validator = IdValidator()


def validate_id(value: Optional[str], param: str) -> str:
    """Validate a single ID with the default validator."""
    return _default_validator.validate(value, param)
