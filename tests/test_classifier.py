"""
Tests for the descriptor classifier.
"""

from update_mirror.repository.classifier import (
    CATEGORY_BIOS,
    CATEGORY_EC,
    CATEGORY_FIRMWARE,
    CATEGORY_OTHER,
    INSTALL_FORCED_REBOOT,
    INSTALL_SILENT,
    classify,
)

from conftest import BIOS_DESCRIPTOR, DRIVER_DESCRIPTOR, FIRMWARE_DESCRIPTOR


class TestBiosOrEcDetection:
    """Marker matching is exact and case-sensitive."""

    def test_bios_update_utility(self):
        result = classify(BIOS_DESCRIPTOR)
        assert result.is_bios_or_ec is True
        assert result.category == CATEGORY_BIOS

    def test_plain_bios_update_marker(self):
        assert classify("<Desc>BIOS Update for X1</Desc>").is_bios_or_ec is True

    def test_ec_update_marker(self):
        result = classify("<Desc>EC Update</Desc>")
        assert result.is_bios_or_ec is True
        assert result.category == CATEGORY_EC

    def test_lowercase_marker_is_not_bios(self):
        result = classify("<Desc>bios update utility</Desc>")
        assert result.is_bios_or_ec is False
        assert result.category == CATEGORY_OTHER

    def test_firmware_is_not_bios_or_ec(self):
        result = classify(FIRMWARE_DESCRIPTOR)
        assert result.is_bios_or_ec is False
        assert result.category == CATEGORY_FIRMWARE

    def test_driver_is_other(self):
        assert classify(DRIVER_DESCRIPTOR).category == CATEGORY_OTHER


class TestRebootToken:
    """Reboot type extraction."""

    def test_extracts_token(self):
        assert classify(BIOS_DESCRIPTOR).reboot_token == "5"
        assert classify(FIRMWARE_DESCRIPTOR).reboot_token == "1"
        assert classify(DRIVER_DESCRIPTOR).reboot_token == "3"

    def test_absent_token(self):
        assert classify("<Package />").reboot_token is None

    def test_first_occurrence_reported(self):
        text = '<Reboot type="1" /><Reboot type="5" />'
        assert classify(text).reboot_token == "1"

    def test_forces_immediate_reboot(self):
        assert classify(BIOS_DESCRIPTOR).forces_immediate_reboot is True
        assert classify(DRIVER_DESCRIPTOR).forces_immediate_reboot is False


class TestInstallMode:

    def test_forced(self):
        assert classify(BIOS_DESCRIPTOR).install_mode == INSTALL_FORCED_REBOOT

    def test_silent(self):
        assert classify("<Cmdline>winuptp.exe -s</Cmdline>").install_mode == INSTALL_SILENT

    def test_unknown(self):
        assert classify(DRIVER_DESCRIPTOR).install_mode is None
