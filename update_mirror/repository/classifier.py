"""
Descriptor Classifier — Inspect one package descriptor's text.

Classification is literal substring matching on purpose. Real-world
descriptors are not always well-formed XML, and the markers below are the
exact tokens downstream tooling looks for.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# Case-sensitive, exact. "BIOS Update Utility" is covered by "BIOS Update"
# but is listed to keep the recognised marker set explicit.
BIOS_MARKERS = ("BIOS Update", "BIOS Update Utility")
EC_MARKERS = ("EC Update",)
FIRMWARE_MARKERS = ("Firmware Update",)

FORCED_INSTALL_TOKEN = "winuptp.exe -r"
SILENT_INSTALL_TOKEN = "winuptp.exe -s"

REBOOT_TAG_PATTERN = re.compile(r'Reboot type="(\d+)"')

# Categories
CATEGORY_BIOS = "BIOSUpdate"
CATEGORY_EC = "ECUpdate"
CATEGORY_FIRMWARE = "FirmwareUpdate"
CATEGORY_OTHER = "Other"

# Install modes
INSTALL_SILENT = "silent"
INSTALL_FORCED_REBOOT = "forced-reboot"


@dataclass(frozen=True)
class Classification:
    """What the rewriter needs to know about a descriptor."""

    is_bios_or_ec: bool
    reboot_token: Optional[str] = None  # "1", "3", "5", ... or None when absent
    category: str = CATEGORY_OTHER
    install_mode: Optional[str] = None

    @property
    def forces_immediate_reboot(self) -> bool:
        return self.reboot_token in ("1", "5")


def _category(text: str) -> str:
    if any(marker in text for marker in BIOS_MARKERS):
        return CATEGORY_BIOS
    if any(marker in text for marker in EC_MARKERS):
        return CATEGORY_EC
    if any(marker in text for marker in FIRMWARE_MARKERS):
        return CATEGORY_FIRMWARE
    return CATEGORY_OTHER


def _install_mode(text: str) -> Optional[str]:
    if FORCED_INSTALL_TOKEN in text:
        return INSTALL_FORCED_REBOOT
    if SILENT_INSTALL_TOKEN in text:
        return INSTALL_SILENT
    return None


def classify(text: str) -> Classification:
    """
    Classify a descriptor.

    Only the first ``Reboot type`` tag is reported; the rewriter handles
    every occurrence.
    """
    category = _category(text)
    match = REBOOT_TAG_PATTERN.search(text)

    return Classification(
        is_bios_or_ec=category in (CATEGORY_BIOS, CATEGORY_EC),
        reboot_token=match.group(1) if match else None,
        category=category,
        install_mode=_install_mode(text),
    )
