"""
Shared fixtures for repository and sync tests.

Builds small vendor update repositories under tmp_path: a manifest at
the root and package descriptors in per-package folders.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

LOCAL_MANIFEST = '<?xml version="1.0" encoding="UTF-8"?>\n<Database version="301">\n</Database>\n'
CLOUD_MANIFEST = '<?xml version="1.0" encoding="UTF-8"?>\n<Database cloud="True" version="301">\n</Database>\n'

BIOS_DESCRIPTOR = """<?xml version="1.0" encoding="UTF-8"?>
<Package id="r1uj51w" name="BIOS Update Utility" version="1.42">
  <Title default="EN"><Desc id="EN">BIOS Update Utility (ThinkPad T14 Gen 3)</Desc></Title>
  <Reboot type="5" />
  <Install rc="0,1" type="cmd" default="EN">
    <Cmdline lang="EN">winuptp.exe -r</Cmdline>
  </Install>
</Package>
"""

BIOS_DESCRIPTOR_NORMALIZED = """<?xml version="1.0" encoding="UTF-8"?>
<Package id="r1uj51w" name="BIOS Update Utility" version="1.42">
  <Title default="EN"><Desc id="EN">BIOS Update Utility (ThinkPad T14 Gen 3)</Desc></Title>
  <Reboot type="3" />
  <Install rc="0,1" type="cmd" default="EN">
    <Cmdline lang="EN">winuptp.exe -s</Cmdline>
  </Install>
</Package>
"""

FIRMWARE_DESCRIPTOR = """<?xml version="1.0" encoding="UTF-8"?>
<Package id="n3ff02a" name="Thunderbolt Firmware Update" version="29">
  <Reboot type="1" />
  <Install type="cmd"><Cmdline>tbtfwu.exe /quiet</Cmdline></Install>
</Package>
"""

DRIVER_DESCRIPTOR = """<?xml version="1.0" encoding="UTF-8"?>
<Package id="n2aud07w" name="Realtek Audio Driver" version="6.0.9">
  <Reboot type="3" />
  <Install type="cmd"><Cmdline>setup.exe /s</Cmdline></Install>
</Package>
"""

FUTURE_SAS = "sv=2022-11-02&se=2099-01-01T00%3A00%3A00Z&sr=c&sp=racwdl&sig=c2VjcmV0LXNpZw%3D%3D"


def make_repository(root: Path, manifest: str = LOCAL_MANIFEST) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "database.xml").write_text(manifest, encoding="utf-8")
    return root


def write_descriptor(root: Path, package_id: str, content: str) -> Path:
    folder = root / package_id
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f"{package_id}_2_.xml"
    path.write_bytes(content.encode("utf-8"))
    return path


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Empty local-managed repository."""
    return make_repository(tmp_path / "repository")


@pytest.fixture
def cloud_repo(tmp_path: Path) -> Path:
    """Empty cloud-managed repository."""
    return make_repository(tmp_path / "cloud-repository", CLOUD_MANIFEST)


@pytest.fixture
def add_descriptor(repo: Path) -> Callable[[str, str], Path]:
    """Write a descriptor into the local repository."""

    def _add(package_id: str, content: str) -> Path:
        return write_descriptor(repo, package_id, content)

    return _add


@pytest.fixture(autouse=True)
def _restore_logging():
    """CLI tests call setup_logging(); keep root logger changes local to a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
