from typing import Iterable, Mapping, Optional
from urllib.parse import urlparse

COMPRESSION_ENCODINGS = {"gzip", "br", "deflate"}

CDN_HEADERS = [
    "cf-cache-status",  # Cloudflare
    "x-cache",          # Various CDNs
    "x-amz-cf-id",      # Amazon CloudFront
    "x-fastly",         # Fastly
    "x-served-by",      # Fastly
    "x-vercel-cache",   # Vercel
]


def is_green_host(url: str, green_hosts: Iterable[str]) -> bool:
    """Hostname (minus a leading www.) equals, or is a subdomain of, an allow-listed host."""
    try:
        hostname: Optional[str] = urlparse(url).hostname
    except ValueError:
        return False
    if not hostname:
        return False

    if hostname.startswith("www."):
        hostname = hostname[4:]

    for host in green_hosts:
        host = host.lower().strip()
        if host.startswith("www."):
            host = host[4:]
        if hostname == host or hostname.endswith("." + host):
            return True
    return False


def has_compression(headers: Mapping[str, str]) -> bool:
    encoding = (headers.get("content-encoding") or "").strip().lower()
    return encoding in COMPRESSION_ENCODINGS


def has_cdn(headers: Mapping[str, str]) -> bool:
    return any(header in headers for header in CDN_HEADERS)
