"""URL validation and normalization of scanned payloads."""
import re
from urllib.parse import urlparse
from typing import Tuple

from quishguard.exceptions import ValidationError
from quishguard.config import config
from quishguard.utils.domains import is_ip_address

DOMAIN_PATTERN = re.compile(r'^[a-z0-9-]+(\.[a-z0-9-]+)*\.[a-z]{2,}$')
SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')


class URLValidator:
    """URL validation and sanitization."""

    @staticmethod
    def sanitize(url: str) -> str:
        """Trim the payload and default bare hosts to https."""
        url = (url or "").strip()

        if url and not SCHEME_PATTERN.match(url):
            url = 'https://' + url

        return url

    @staticmethod
    def validate(url: str) -> Tuple[bool, str]:
        """
        Validate URL.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not url:
            return False, "URL cannot be empty"

        if len(url) > config.max_url_length:
            return False, f"URL too long (max {config.max_url_length} characters)"

        if re.search(r'[<>"\'\s]', url):
            return False, "URL contains invalid characters"

        try:
            result = urlparse(url)
            hostname = result.hostname
            result.port  # raises ValueError on a malformed port
        except ValueError as e:
            return False, f"URL validation error: {str(e)}"

        if result.scheme not in ['http', 'https']:
            return False, "Invalid URL scheme (must be http or https)"

        if not hostname:
            return False, "Invalid URL format (missing domain)"

        if is_ip_address(hostname):
            return True, ""

        if not DOMAIN_PATTERN.match(hostname):
            return False, "Invalid domain format"

        return True, ""

    @staticmethod
    def process(url: str) -> str:
        """
        Process URL: sanitize and validate.

        Raises:
            ValidationError: If URL is invalid
        """
        sanitized = URLValidator.sanitize(url)
        is_valid, error = URLValidator.validate(sanitized)

        if not is_valid:
            raise ValidationError(error)

        return sanitized
