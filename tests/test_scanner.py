"""
==============================================================================
Image Scanner Tests
==============================================================================

Tests for scanner configuration, builder short-circuit and scanning.

==============================================================================
"""

from unittest.mock import call

import pytest

from zbars.core.exceptions import ConfigurationFailed, HandleClosed, ScanFailed
from zbars.image import Y800, ZBarImage
from zbars.scanner import ZBarImageScanner
from zbars.symbols import ZBarConfig, ZBarSymbolType


class TestScannerConfig:
    """Tests for scanner configuration calls."""

    def test_starts_with_everything_disabled(self, fake_lib):
        """Test a new scanner disables every symbology."""
        scanner = ZBarImageScanner()
        fake_lib.zbar_image_scanner_set_config.assert_called_once_with(
            scanner._handle, ZBarSymbolType.NONE, ZBarConfig.ENABLE, 0
        )

    def test_builder_applies_configs_in_order(self, fake_lib):
        """Test config calls are applied in call order."""
        scanner = (
            ZBarImageScanner.builder()
            .with_config(ZBarSymbolType.QRCODE, ZBarConfig.ENABLE, 1)
            .with_config(ZBarSymbolType.CODE128, ZBarConfig.ENABLE, 1)
            .with_config(ZBarSymbolType.CODE128, ZBarConfig.MIN_LEN, 4)
            .build()
        )

        assert fake_lib.zbar_image_scanner_set_config.call_args_list[1:] == [
            call(scanner._handle, 64, 0, 1),
            call(scanner._handle, 128, 0, 1),
            call(scanner._handle, 128, 0x20, 4),
        ]

    def test_rejected_config_aborts_build(self, fake_lib):
        """Test the first rejected config releases the scanner and stops."""
        fake_lib.zbar_image_scanner_set_config.side_effect = [0, 0, 1, 0]

        with pytest.raises(ConfigurationFailed) as exc_info:
            (
                ZBarImageScanner.builder()
                .with_config(ZBarSymbolType.QRCODE, ZBarConfig.ENABLE, 1)
                .with_config(ZBarSymbolType.QRCODE, ZBarConfig.X_DENSITY, -5)
                .with_config(ZBarSymbolType.CODE128, ZBarConfig.ENABLE, 1)
                .with_cache(True)
                .build()
            )

        assert exc_info.value.status == 1
        assert exc_info.value.details["step"] == "set_config"
        assert fake_lib.zbar_image_scanner_set_config.call_count == 3
        fake_lib.zbar_image_scanner_destroy.assert_called_once()
        fake_lib.zbar_image_scanner_enable_cache.assert_not_called()

    def test_cache(self, fake_lib):
        """Test the builder enables the result cache."""
        scanner = ZBarImageScanner.builder().with_cache(True).build()
        fake_lib.zbar_image_scanner_enable_cache.assert_called_once_with(scanner._handle, 1)

    def test_set_config_after_build(self, fake_lib):
        """Test config can change on a built scanner."""
        scanner = ZBarImageScanner.builder().build()
        fake_lib.zbar_image_scanner_set_config.return_value = 1

        with pytest.raises(ConfigurationFailed):
            scanner.set_config(ZBarSymbolType.EAN13, ZBarConfig.ADD_CHECK, 1)


class TestScanImage:
    """Tests for scanning images."""

    def test_scan_returns_attached_set(self, fake_lib):
        """Test the returned set is the image's attached result."""
        fake_lib.zbar_image_get_symbols.return_value = 0x5000
        fake_lib.zbar_scan_image.return_value = 1

        image = ZBarImage(4, 4, Y800, bytes(16))
        scanner = ZBarImageScanner()
        symbols = scanner.scan_image(image)

        fake_lib.zbar_scan_image.assert_called_once_with(scanner._handle, image._handle)
        assert symbols._handle == 0x5000
        assert symbols._parent is image

    def test_scan_failure(self, fake_lib):
        """Test negative scan statuses raise ScanFailed."""
        fake_lib.zbar_scan_image.return_value = -1
        image = ZBarImage(4, 4, Y800, bytes(16))

        with pytest.raises(ScanFailed) as exc_info:
            ZBarImageScanner().scan_image(image)
        assert exc_info.value.status == -1

    def test_scan_closed_image(self, fake_lib):
        """Test scanning a closed image raises HandleClosed."""
        image = ZBarImage(4, 4, Y800, bytes(16))
        image.close()

        with pytest.raises(HandleClosed):
            ZBarImageScanner().scan_image(image)
        fake_lib.zbar_scan_image.assert_not_called()


class TestScannerRelease:
    """Tests for scanner handle release."""

    def test_close_is_idempotent(self, fake_lib):
        """Test the native scanner is destroyed once."""
        with ZBarImageScanner() as scanner:
            pass
        scanner.close()

        fake_lib.zbar_image_scanner_destroy.assert_called_once_with(scanner._handle)

    def test_closed_scanner_rejects_calls(self, fake_lib):
        """Test methods raise HandleClosed after close."""
        scanner = ZBarImageScanner()
        scanner.close()

        with pytest.raises(HandleClosed):
            scanner.enable_cache(True)
