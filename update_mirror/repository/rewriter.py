"""
Descriptor Rewriter — Normalize install mode and reboot behaviour.

Rules:
1. BIOS/EC packages: ``winuptp.exe -r`` becomes ``winuptp.exe -s`` so the
   flash runs silently.
2. Every package: ``Reboot type="1"`` and ``Reboot type="5"`` become
   ``Reboot type="3"`` (deferred reboot).

Both target tokens are fixed points, so the rewrite is idempotent.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .classifier import (
    FORCED_INSTALL_TOKEN,
    SILENT_INSTALL_TOKEN,
    Classification,
    classify,
)

DEFERRED_REBOOT = 'Reboot type="3"'
IMMEDIATE_REBOOTS = ('Reboot type="1"', 'Reboot type="5"')


def rewrite(
    text: str,
    classification: Optional[Classification] = None,
) -> Tuple[str, bool]:
    """
    Apply the normalization rules to a descriptor.

    Args:
        text: Descriptor content
        classification: Result of ``classify(text)``; computed when omitted

    Returns:
        (new_text, changed). ``changed`` compares the final text with the
        input, so a substitution that leaves content as it was never
        reports a change.
    """
    if classification is None:
        classification = classify(text)

    result = text

    if classification.is_bios_or_ec:
        result = result.replace(FORCED_INSTALL_TOKEN, SILENT_INSTALL_TOKEN)

    for token in IMMEDIATE_REBOOTS:
        result = result.replace(token, DEFERRED_REBOOT)

    return result, result != text
