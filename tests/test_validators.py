"""
==============================================================================
Validator Tests
==============================================================================

Tests for fourcc label and video device validation.

==============================================================================
"""

from zbars.utils import DeviceNameValidator, FourCCValidator


class TestFourCCValidator:
    """Tests for FourCCValidator."""

    def test_valid_label(self):
        """Test a full label is accepted unchanged."""
        assert FourCCValidator().validate("Y800") == (True, "Y800", None)

    def test_short_label_padded(self):
        """Test short labels are padded to four characters."""
        is_valid, normalized, error = FourCCValidator().validate("Y8")
        assert is_valid
        assert normalized == "Y8  "
        assert error is None

    def test_case_preserved(self):
        """Test case is significant."""
        _, normalized, _ = FourCCValidator().validate("yuyv")
        assert normalized == "yuyv"

    def test_invalid_labels(self):
        """Test empty, long, blank and non-ASCII labels."""
        validator = FourCCValidator()
        for label in ["", "Y8000", "   ", "Y8é0"]:
            is_valid, normalized, error = validator.validate(label)
            assert not is_valid
            assert normalized is None
            assert error

    def test_is_valid(self):
        """Test quick validity check."""
        assert FourCCValidator().is_valid("NV12")
        assert not FourCCValidator().is_valid("NV121")


class TestDeviceNameValidator:
    """Tests for DeviceNameValidator."""

    def test_device_passed_through(self):
        """Test device names are returned unmodified."""
        assert DeviceNameValidator().validate("/dev/video0") == (True, "/dev/video0", None)

    def test_empty_device(self):
        """Test empty names are accepted unmodified."""
        assert DeviceNameValidator().validate("") == (True, "", None)

    def test_nul_in_device(self):
        """Test names with NUL characters are rejected."""
        is_valid, _, _ = DeviceNameValidator().validate("/dev/vid\x00eo0")
        assert not is_valid
