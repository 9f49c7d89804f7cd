"""
==============================================================================
Utilities Package
==============================================================================

Utility classes and functions for the binding.

Modules:
--------
- validators: FourCC label and video device validation
- log_utils: Logging setup for applications using the package

==============================================================================
"""

from .validators import DeviceNameValidator, FourCCValidator
from .log_utils import configure_logging

__all__ = [
    "DeviceNameValidator",
    "FourCCValidator",
    "configure_logging",
]
