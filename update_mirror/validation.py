"""
Validation — Input validation for CLI arguments and configuration.

## Usage

    from update_mirror.validation import validate_repository_path

    try:
        root = validate_repository_path(path)
        url = validate_destination_url(destination)
    except ValidationError as e:
        print(f"Validation failed: {e}")
"""

from __future__ import annotations

import urllib.parse
from pathlib import Path
from typing import Dict, Optional

ALLOWED_DESTINATION_SCHEMES = ("https", "http")


class ValidationError(Exception):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        self.message = message
        self.field = field
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""
    pass


def validate_repository_path(path: Path | str) -> Path:
    """
    Validate the repository root.

    Local paths and UNC shares (``\\\\server\\share\\repo``) are both plain
    paths here; they only have to exist and be a directory.
    """
    root = Path(path)
    if not root.exists():
        raise ValidationError(f"does not exist: {root}", field="repository")
    if not root.is_dir():
        raise ValidationError(f"is not a directory: {root}", field="repository")
    return root


def validate_destination_url(url: str) -> str:
    """Validate that the destination looks like a storage container URL."""
    if not url or not url.strip():
        raise ValidationError("is required", field="destination")

    parsed = urllib.parse.urlparse(url.strip())

    if parsed.scheme not in ALLOWED_DESTINATION_SCHEMES:
        raise ValidationError(
            f"must be an http(s) URL, got scheme '{parsed.scheme or '(none)'}'",
            field="destination",
        )
    if not parsed.netloc:
        raise ValidationError("has no host", field="destination")
    if not parsed.path or parsed.path == "/":
        raise ValidationError(
            "must include a container path",
            field="destination",
            details={"url": redact_url(url)},
        )
    if parsed.query:
        raise ValidationError(
            "must not carry a query string; the credential is appended at sync time",
            field="destination",
        )

    return url.strip()


def redact_url(url: str) -> str:
    """Drop the query string so a SAS token never reaches a log line."""
    parsed = urllib.parse.urlparse(url)
    if not parsed.query:
        return url
    return urllib.parse.urlunparse(parsed._replace(query="REDACTED"))
