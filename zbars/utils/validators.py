"""
==============================================================================
Validation Utilities Module
==============================================================================

Validation classes for caller-supplied strings handed to the native layer.

This module implements:
- FourCCValidator: Validates pixel format labels
- DeviceNameValidator: Validates video device identifiers

Validation Rules for FourCC Labels:
----------------------------------
- Length: 1-4 characters, right-padded with spaces to 4
- Allowed: printable ASCII
- Case is preserved (fourccs are case-sensitive)

Validation Rules for Device Names:
---------------------------------
- Must not contain NUL characters
- Otherwise passed through unmodified (an empty name selects the
  platform default device)

==============================================================================
"""

from __future__ import annotations

import re
from typing import Optional, Tuple


class FourCCValidator:
    """
    Validator for four-character pixel format codes.

    Example:
        >>> validator = FourCCValidator()
        >>> is_valid, normalized, error = validator.validate("Y8")
        >>> normalized
        'Y8  '
    """

    # Printable ASCII, at most four characters
    PATTERN = re.compile(r"^[\x20-\x7e]{1,4}$")

    LENGTH = 4

    def validate(self, label: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize a fourcc label.

        Args:
            label: Raw format label

        Returns:
            Tuple of (is_valid, normalized_label, error_message)
        """
        if not label:
            return False, None, "Format label is required"

        if not self.PATTERN.match(label):
            return False, None, (
                f"Format label must be 1-{self.LENGTH} printable ASCII characters"
            )

        if not label.strip():
            return False, None, "Format label cannot be blank"

        return True, label.ljust(self.LENGTH), None

    def is_valid(self, label: str) -> bool:
        """Quick validity check."""
        is_valid, _, _ = self.validate(label)
        return is_valid


class DeviceNameValidator:
    """Validator for video device identifiers (e.g. ``/dev/video0``)."""

    def validate(self, device: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate a device identifier without altering it.

        Returns:
            Tuple of (is_valid, device, error_message)
        """
        if "\x00" in device:
            return False, None, "Video device cannot contain NUL characters"

        return True, device, None
