"""
==============================================================================
Processor Tests
==============================================================================

Tests for processor building, status mapping, results and device controls.

==============================================================================
"""

import pytest

from zbars.core.exceptions import (
    CapabilityUnavailable,
    ConfigurationFailed,
    HandleClosed,
    ResultInvalidated,
    ScanFailed,
    VideoInitFailed,
    WaitFailed,
    ZBarError,
)
from zbars.image import Format, PixelFormat, Y800, ZBarImage
from zbars.processor import ZBarControlProcessor, ZBarProcessor
from zbars.schemas import VideoInterface, VideoIOMode
from zbars.symbols import ZBarConfig, ZBarSymbolType


RESULTS = 0x7000

_BUILD_STEPS = {
    "zbar_processor_request_size",
    "zbar_processor_request_interface",
    "zbar_processor_request_iomode",
    "zbar_processor_force_format",
    "zbar_processor_set_config",
}


def _build_steps(fake_lib):
    return [name for name, _, _ in fake_lib.mock_calls if name in _BUILD_STEPS]


class TestBuilder:
    """Tests for ZBarProcessorBuilder."""

    def test_threaded(self, fake_lib):
        """Test the threaded flag reaches the native constructor."""
        processor = ZBarProcessor.builder().threaded(True).build()
        fake_lib.zbar_processor_create.assert_called_once_with(1)
        assert processor.threaded

    def test_fixed_step_order(self, fake_lib):
        """Test options apply in fixed order whatever order they were given."""
        (
            ZBarProcessor.builder()
            .with_config(ZBarSymbolType.QRCODE, ZBarConfig.ENABLE, 1)
            .with_format((Y800, Format(PixelFormat.YUYV)))
            .with_iomode(VideoIOMode.MMAP)
            .with_interface_version(VideoInterface.V4L2)
            .with_size((640, 480))
            .build()
        )

        assert _build_steps(fake_lib) == [
            "zbar_processor_set_config",
            "zbar_processor_request_size",
            "zbar_processor_request_interface",
            "zbar_processor_request_iomode",
            "zbar_processor_force_format",
            "zbar_processor_set_config",
        ]

    def test_unset_options_are_skipped(self, fake_lib):
        """Test only requested steps are applied."""
        ZBarProcessor.builder().with_size(None).build()
        fake_lib.zbar_processor_request_size.assert_not_called()

    def test_failing_step_short_circuits(self, fake_lib):
        """Test the first failing step aborts and destroys the processor once."""
        fake_lib.zbar_processor_request_interface.return_value = -1

        with pytest.raises(ConfigurationFailed) as exc_info:
            (
                ZBarProcessor.builder()
                .with_size((640, 480))
                .with_interface_version(VideoInterface.V4L1)
                .with_iomode(VideoIOMode.READ)
                .with_format((Y800, Y800))
                .with_config(ZBarSymbolType.QRCODE, ZBarConfig.ENABLE, 1)
                .build()
            )

        assert exc_info.value.status == -1
        assert exc_info.value.details["step"] == "request_interface"
        fake_lib.zbar_processor_request_iomode.assert_not_called()
        fake_lib.zbar_processor_force_format.assert_not_called()
        assert fake_lib.zbar_processor_set_config.call_count == 1
        fake_lib.zbar_processor_destroy.assert_called_once()

    def test_size_must_be_positive(self, fake_lib):
        """Test the options model rejects empty sizes."""
        with pytest.raises(ValueError):
            ZBarProcessor.builder().with_size((0, 480))

    def test_force_format_values(self, fake_lib):
        """Test forced formats pass their packed values."""
        processor = ZBarProcessor.builder().with_format((Y800, Format("YUYV"))).build()
        fake_lib.zbar_processor_force_format.assert_called_once_with(
            processor._handle, Y800.value, Format("YUYV").value
        )


class TestInit:
    """Tests for device initialization."""

    def test_init(self, fake_lib):
        """Test the device name is passed through unmodified."""
        processor = ZBarProcessor()
        processor.init("/dev/video0", enable_display=True)
        fake_lib.zbar_processor_init.assert_called_once_with(
            processor._handle, b"/dev/video0", 1
        )

    def test_no_video_device(self, fake_lib):
        """Test None opens no video device and passes NULL."""
        processor = ZBarProcessor()
        processor.init()
        fake_lib.zbar_processor_init.assert_called_once_with(processor._handle, None, 0)

    def test_empty_device_selects_default(self, fake_lib):
        """Test an empty name reaches the native call unmodified."""
        processor = ZBarProcessor()
        processor.init("", enable_display=False)
        fake_lib.zbar_processor_init.assert_called_once_with(processor._handle, b"", 0)

    def test_nul_in_device_name(self, fake_lib):
        """Test NUL characters raise VideoInitFailed before any native call."""
        with pytest.raises(VideoInitFailed) as exc_info:
            ZBarProcessor().init("/dev/vid\x00eo0")

        assert isinstance(exc_info.value, ZBarError)
        assert exc_info.value.status is None
        fake_lib.zbar_processor_init.assert_not_called()

    def test_init_failure(self, fake_lib):
        """Test a failing open raises VideoInitFailed with native details."""
        fake_lib.zbar_processor_init.return_value = -1
        fake_lib.error_details.return_value = {"native_error": "SYSTEM"}

        with pytest.raises(VideoInitFailed) as exc_info:
            ZBarProcessor().init("nothing")

        assert exc_info.value.status == -1
        assert exc_info.value.details["device"] == "nothing"
        assert exc_info.value.details["native_error"] == "SYSTEM"


class TestFlagsAndWaiting:
    """Tests for visibility, activity and waiting."""

    def test_flags(self, fake_lib):
        """Test ternary statuses map to booleans."""
        fake_lib.zbar_processor_is_visible.return_value = 1
        processor = ZBarProcessor()

        assert processor.is_visible() is True
        assert processor.set_visible(False) is False
        assert processor.set_active(True) is False

    def test_flag_failure(self, fake_lib):
        """Test negative flag statuses raise WaitFailed."""
        fake_lib.zbar_processor_set_active.return_value = -1
        with pytest.raises(WaitFailed) as exc_info:
            ZBarProcessor().set_active()
        assert exc_info.value.status == -1

    def test_user_wait(self, fake_lib):
        """Test the key code is returned."""
        fake_lib.zbar_processor_user_wait.return_value = 113
        processor = ZBarProcessor()
        assert processor.user_wait(100) == 113
        fake_lib.zbar_processor_user_wait.assert_called_once_with(processor._handle, 100)

    def test_user_wait_default_timeout(self, fake_lib, monkeypatch):
        """Test a None timeout uses the configured default."""
        monkeypatch.setenv("ZBARS_DEFAULT_TIMEOUT_MS", "250")
        processor = ZBarProcessor()
        processor.user_wait()
        fake_lib.zbar_processor_user_wait.assert_called_once_with(processor._handle, 250)

    def test_user_wait_failure(self, fake_lib):
        """Test negative wait statuses raise WaitFailed."""
        fake_lib.zbar_processor_user_wait.return_value = -1
        with pytest.raises(WaitFailed):
            ZBarProcessor().user_wait(10)


class TestResults:
    """Tests for processing and result ownership."""

    def test_process_one_timeout(self, fake_lib):
        """Test nothing decoded within the timeout returns None."""
        assert ZBarProcessor().process_one(50) is None
        fake_lib.zbar_processor_get_results.assert_not_called()

    def test_process_one_failure(self, fake_lib):
        """Test negative statuses raise ScanFailed."""
        fake_lib.zbar_process_one.return_value = -1
        with pytest.raises(ScanFailed):
            ZBarProcessor().process_one(50)

    def test_process_one_results(self, fake_lib):
        """Test decoded frames return the processor's result set."""
        fake_lib.zbar_process_one.return_value = 1
        fake_lib.zbar_processor_get_results.return_value = RESULTS
        fake_lib.zbar_symbol_set_get_size.return_value = 1

        symbols = ZBarProcessor().process_one(50)
        assert len(symbols) == 1

    def test_results_release_reference_on_rescan(self, fake_lib):
        """Test the owned native reference is dropped exactly once."""
        fake_lib.zbar_process_one.return_value = 1
        fake_lib.zbar_processor_get_results.return_value = RESULTS
        processor = ZBarProcessor()

        symbols = processor.process_one(50)
        fake_lib.zbar_symbol_set_ref.assert_not_called()

        latest = processor.process_one(50)
        fake_lib.zbar_symbol_set_ref.assert_called_once_with(RESULTS, -1)
        assert latest.valid
        with pytest.raises(ResultInvalidated):
            len(symbols)

        processor.close()
        assert fake_lib.zbar_symbol_set_ref.call_count == 2

    def test_get_results_none(self, fake_lib):
        """Test no results before any processing."""
        assert ZBarProcessor().get_results() is None

    def test_process_image(self, fake_lib):
        """Test images are scanned and keep their own result."""
        fake_lib.zbar_image_get_symbols.return_value = 0x5000
        image = ZBarImage(4, 4, Y800, bytes(16))
        processor = ZBarProcessor()

        symbols = processor.process_image(image)
        fake_lib.zbar_process_image.assert_called_once_with(processor._handle, image._handle)
        assert symbols._parent is image

        processor.process_image(image)
        assert not symbols.valid


class TestProcessorRelease:
    """Tests for processor handle release."""

    def test_close_is_idempotent(self, fake_lib):
        """Test the native processor is destroyed once."""
        with ZBarProcessor() as processor:
            pass
        processor.close()
        fake_lib.zbar_processor_destroy.assert_called_once_with(processor._handle)

    def test_closed_processor_rejects_calls(self, fake_lib):
        """Test methods raise HandleClosed after close."""
        processor = ZBarProcessor()
        processor.close()
        with pytest.raises(HandleClosed):
            processor.get_results()


class TestDeviceControls:
    """Tests for the device-control capability."""

    def test_unavailable(self, fake_lib):
        """Test controls cannot be constructed without the capability."""
        with pytest.raises(CapabilityUnavailable):
            ZBarControlProcessor()
        fake_lib.zbar_processor_create.assert_not_called()

    def test_builder_picks_plain_processor(self, fake_lib):
        """Test the builder returns a plain processor without controls."""
        processor = ZBarProcessor.builder().build()
        assert type(processor) is ZBarProcessor
        assert not hasattr(processor, "set_control")

    def test_builder_picks_control_processor(self, fake_lib):
        """Test the builder returns a control processor when available."""
        fake_lib.controls_available = True
        assert isinstance(ZBarProcessor.builder().build(), ZBarControlProcessor)

    def test_get_and_set_control(self, fake_lib):
        """Test controls are written and read through the native API."""
        fake_lib.controls_available = True

        def fake_get_control(handle, name, value_ref):
            value_ref._obj.value = 75
            return 0

        fake_lib.zbar_processor_get_control.side_effect = fake_get_control
        processor = ZBarControlProcessor(threaded=True)

        processor.set_control("brightness", 75)
        fake_lib.zbar_processor_set_control.assert_called_once_with(
            processor._handle, b"brightness", 75
        )
        assert processor.control("brightness") == 75

    def test_control_failure(self, fake_lib):
        """Test rejected controls raise ConfigurationFailed."""
        fake_lib.controls_available = True
        fake_lib.zbar_processor_set_control.return_value = -1

        with pytest.raises(ConfigurationFailed) as exc_info:
            ZBarControlProcessor().set_control("focus", 1)
        assert exc_info.value.details["control"] == "focus"
