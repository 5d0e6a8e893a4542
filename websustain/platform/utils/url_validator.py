import re
from typing import Tuple
from urllib.parse import urlparse

_HOSTNAME_RE = re.compile(r"^(?=.{1,253}$)([a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)(\.[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)*$")
_IPV4_RE = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")


def normalize_url(url: str) -> Tuple[str, bool]:
    url = url.strip()

    parsed = urlparse(url)

    # "example.com:8080" parses with scheme "example.com"
    if not parsed.scheme or "://" not in url:
        normalized = f"https://{url}"
        return normalized, True

    return url, False


def validate_url(url: str) -> Tuple[bool, str, str]:
    if not url or not url.strip():
        return False, "", "URL cannot be empty"

    if any(ch.isspace() for ch in url.strip()):
        return False, url.strip(), "Invalid URL format: contains whitespace"

    normalized_url, was_modified = normalize_url(url)

    try:
        parsed = urlparse(normalized_url)

        if parsed.scheme not in ["http", "https"]:
            return False, normalized_url, f"Invalid URL scheme: {parsed.scheme} (must be http or https)"

        if not parsed.netloc:
            return False, normalized_url, "Invalid URL format: missing domain"

        hostname = parsed.hostname or ""
        if not (_HOSTNAME_RE.match(hostname) or _IPV4_RE.match(hostname)):
            return False, normalized_url, f"Invalid URL format: bad hostname '{hostname}'"

        # Reading .port raises for out-of-range values
        parsed.port

        return True, normalized_url, ""

    except ValueError as e:
        return False, normalized_url, f"URL parsing error: {str(e)}"
