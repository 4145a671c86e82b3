import pytest

from quishguard.core.validator import URLValidator
from quishguard.exceptions import ValidationError


def test_sanitize_adds_https_to_bare_hosts():
    assert URLValidator.sanitize("  example.com/path ") == "https://example.com/path"
    assert URLValidator.sanitize("http://example.com") == "http://example.com"
    assert URLValidator.sanitize("") == ""


@pytest.mark.parametrize("url", [
    "https://example.com",
    "http://sub.example.co.uk/path?q=1",
    "http://192.168.1.1/login",
    "https://example.com:8443/",
])
def test_valid_urls(url):
    assert URLValidator.validate(url) == (True, "")


@pytest.mark.parametrize("url, message", [
    ("", "URL cannot be empty"),
    ("https://example.com/" + "a" * 2000, "URL too long"),
    ("https://example.com/<script>", "invalid characters"),
    ("ftp://example.com", "Invalid URL scheme"),
    ("https://", "missing domain"),
    ("https://localhost", "Invalid domain format"),
    ("https://example.com:port", "URL validation error"),
])
def test_invalid_urls(url, message):
    is_valid, error = URLValidator.validate(url)
    assert not is_valid
    assert message in error


def test_process_raises_validation_error():
    with pytest.raises(ValidationError):
        URLValidator.process("javascript:alert(1)")
    assert URLValidator.process("example.com") == "https://example.com"
