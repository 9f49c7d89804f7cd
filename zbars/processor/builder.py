"""
==============================================================================
Processor Builder Module
==============================================================================

Declarative processor construction.

Options are collected in a ProcessorOptions model and applied by
``build()`` in a fixed order, whatever order they were given in:

    size ─▶ interface version ─▶ I/O mode ─▶ forced formats ─▶ configs

The first rejected step aborts the build. Later steps are not attempted and
the partially configured processor is released exactly once before the
error propagates.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from zbars.core import ffi
from zbars.core.exceptions import ZBarError
from zbars.image.format import Format
from zbars.processor.core import ZBarControlProcessor, ZBarProcessor
from zbars.schemas.options import ConfigEntry, ProcessorOptions, VideoInterface, VideoIOMode
from zbars.symbols.types import ZBarConfig, ZBarSymbolType


# Module logger
logger = logging.getLogger(__name__)


class ZBarProcessorBuilder:
    """
    Collects processor options; ``build()`` creates and configures.

    Example:
        >>> processor = (
        ...     ZBarProcessor.builder()
        ...     .threaded(True)
        ...     .with_size((640, 480))
        ...     .with_config(ZBarSymbolType.QRCODE, ZBarConfig.ENABLE, 1)
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._options = ProcessorOptions()

    @property
    def options(self) -> ProcessorOptions:
        return self._options

    def threaded(self, threaded: bool = True) -> ZBarProcessorBuilder:
        self._options.threaded = threaded
        return self

    def with_size(self, size: Optional[Tuple[int, int]]) -> ZBarProcessorBuilder:
        self._options.size = size
        return self

    def with_interface_version(
        self,
        version: Optional[VideoInterface]
    ) -> ZBarProcessorBuilder:
        self._options.interface_version = version
        return self

    def with_iomode(self, iomode: Optional[VideoIOMode]) -> ZBarProcessorBuilder:
        self._options.iomode = iomode
        return self

    def with_format(self, formats: Optional[Tuple[Format, Format]]) -> ZBarProcessorBuilder:
        """Force (input, output) formats, or None to leave them negotiated."""
        self._options.formats = formats
        return self

    def with_config(
        self,
        symbol_type: ZBarSymbolType,
        config: ZBarConfig,
        value: int
    ) -> ZBarProcessorBuilder:
        self._options.configs.append(
            ConfigEntry(symbol_type=symbol_type, config=config, value=value)
        )
        return self

    def build(self) -> ZBarProcessor:
        """
        Create the processor and apply every collected option.

        Returns:
            ZBarControlProcessor when device controls are available,
            ZBarProcessor otherwise

        Raises:
            ConfigurationFailed: From the first rejected step
        """
        options = self._options
        cls = ZBarControlProcessor if ffi.get_library().controls_available else ZBarProcessor
        processor = cls(options.threaded)

        try:
            if options.size is not None:
                processor.request_size(*options.size)
            if options.interface_version is not None:
                processor.request_interface(options.interface_version)
            if options.iomode is not None:
                processor.request_iomode(options.iomode)
            if options.formats is not None:
                processor.force_format(*options.formats)
            for entry in options.configs:
                processor.set_config(entry.symbol_type, entry.config, entry.value)
        except ZBarError as e:
            logger.warning(f"Processor build aborted: {e.message}")
            processor.close()
            raise

        logger.debug(f"Built {processor!r}")
        return processor
