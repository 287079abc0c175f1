"""
Tests for validation module.
"""

from pathlib import Path

import pytest

from update_mirror.validation import (
    ValidationError,
    redact_url,
    validate_destination_url,
    validate_repository_path,
)


class TestValidationError:

    def test_basic_message(self):
        err = ValidationError("Something went wrong")
        assert str(err) == "Something went wrong"

    def test_message_with_field(self):
        err = ValidationError("is required", field="destination")
        assert str(err) == "destination: is required"


class TestRepositoryPath:

    def test_existing_directory(self, tmp_path):
        assert validate_repository_path(str(tmp_path)) == tmp_path

    def test_missing(self):
        with pytest.raises(ValidationError, match="does not exist"):
            validate_repository_path(Path("/nonexistent/repo/abc123"))

    def test_file(self, tmp_path):
        f = tmp_path / "database.xml"
        f.write_text("x")
        with pytest.raises(ValidationError, match="not a directory"):
            validate_repository_path(f)


class TestDestinationUrl:

    def test_valid(self):
        url = "https://acct.blob.core.windows.net/repository"
        assert validate_destination_url(f"  {url} ") == url

    @pytest.mark.parametrize("url,message", [
        ("", "required"),
        ("acct.blob.core.windows.net/repo", "scheme"),
        ("ftp://acct/repo", "scheme"),
        ("https:///repo", "no host"),
        ("https://acct.blob.core.windows.net/", "container"),
        ("https://acct.blob.core.windows.net/repo?sig=abc", "query string"),
    ])
    def test_invalid(self, url, message):
        with pytest.raises(ValidationError, match=message):
            validate_destination_url(url)


class TestRedactUrl:

    def test_query_removed(self):
        assert redact_url("https://a/b?sig=secret") == "https://a/b?REDACTED"

    def test_no_query_unchanged(self):
        assert redact_url("https://a/b") == "https://a/b"
