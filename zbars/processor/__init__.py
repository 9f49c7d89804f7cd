"""
==============================================================================
Processor Package - Video Capture and Scanning
==============================================================================

Classes:
--------
- ZBarProcessor: video device, display window and scanning
- ZBarControlProcessor: ZBarProcessor plus named device controls
- ZBarProcessorBuilder: declarative processor configuration

==============================================================================
"""

from .builder import ZBarProcessorBuilder
from .core import ZBarControlProcessor, ZBarProcessor

__all__ = ["ZBarControlProcessor", "ZBarProcessor", "ZBarProcessorBuilder"]
