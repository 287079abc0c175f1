"""
Tests for the descriptor rewriter — substitution rules and idempotence.
"""

import pytest

from update_mirror.repository.classifier import classify
from update_mirror.repository.rewriter import rewrite

from conftest import (
    BIOS_DESCRIPTOR,
    BIOS_DESCRIPTOR_NORMALIZED,
    DRIVER_DESCRIPTOR,
    FIRMWARE_DESCRIPTOR,
)

SAMPLES = [
    BIOS_DESCRIPTOR,
    BIOS_DESCRIPTOR_NORMALIZED,
    FIRMWARE_DESCRIPTOR,
    DRIVER_DESCRIPTOR,
    "",
    "not xml at all <<< Reboot type=\"5\" & winuptp.exe -r",
    'EC Update <Reboot type="1"/><Reboot type="5"/><Reboot type="1"/> winuptp.exe -r winuptp.exe -r',
]


class TestBiosRules:

    def test_bios_descriptor_fully_normalized(self):
        new_text, changed = rewrite(BIOS_DESCRIPTOR, classify(BIOS_DESCRIPTOR))
        assert changed is True
        assert new_text == BIOS_DESCRIPTOR_NORMALIZED

    def test_ec_flag_rewritten(self):
        text = "EC Update\n<Cmdline>winuptp.exe -r</Cmdline>"
        new_text, changed = rewrite(text)
        assert changed is True
        assert "winuptp.exe -s" in new_text
        assert "winuptp.exe -r" not in new_text

    def test_flag_untouched_without_marker(self):
        """Only BIOS/EC packages get the silent flag."""
        text = "<Cmdline>winuptp.exe -r</Cmdline>"
        new_text, changed = rewrite(text)
        assert changed is False
        assert new_text == text


class TestRebootRules:

    def test_type_1_deferred_without_marker(self):
        new_text, changed = rewrite(FIRMWARE_DESCRIPTOR)
        assert changed is True
        assert new_text == FIRMWARE_DESCRIPTOR.replace('Reboot type="1"', 'Reboot type="3"')

    def test_all_occurrences_replaced(self):
        text = '<a><Reboot type="1"/></a><b><Reboot type="5"/></b><c><Reboot type="1"/></c>'
        new_text, changed = rewrite(text)
        assert changed is True
        assert 'Reboot type="1"' not in new_text
        assert 'Reboot type="5"' not in new_text
        assert new_text == '<a><Reboot type="3"/></a><b><Reboot type="3"/></b><c><Reboot type="3"/></c>'

    def test_already_deferred_unchanged(self):
        new_text, changed = rewrite(DRIVER_DESCRIPTOR)
        assert changed is False
        assert new_text == DRIVER_DESCRIPTOR

    def test_other_reboot_values_untouched(self):
        text = '<Reboot type="10"/><Reboot type="15"/><Reboot type="4"/>'
        new_text, changed = rewrite(text)
        assert changed is False
        assert new_text == text

    def test_no_tokens_unchanged(self):
        text = "<Package name=\"Dock Utility\"><Cmdline>dock.exe</Cmdline></Package>"
        new_text, changed = rewrite(text)
        assert changed is False
        assert new_text == text

    def test_malformed_text_processed(self):
        text = '<<Package Reboot type="5" unclosed'
        new_text, changed = rewrite(text)
        assert changed is True
        assert new_text == '<<Package Reboot type="3" unclosed'


class TestIdempotence:

    @pytest.mark.parametrize("text", SAMPLES)
    def test_rewrite_twice_equals_once(self, text):
        once, _ = rewrite(text)
        twice, changed_again = rewrite(once)
        assert twice == once
        assert changed_again is False

    def test_classification_computed_when_omitted(self):
        assert rewrite(BIOS_DESCRIPTOR) == rewrite(BIOS_DESCRIPTOR, classify(BIOS_DESCRIPTOR))
