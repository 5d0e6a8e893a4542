"""
Deterministic stand-in for randomness.

Simulated analyses must give the same numbers every time a URL is analyzed,
across restarts, so every "random" value is derived from a hash of the URL
and a per-field index.
"""
import math
import re

_SCHEME_WWW_RE = re.compile(r"^https?://(www\.)?")


def normalize_seed_url(url: str) -> str:
    return _SCHEME_WWW_RE.sub("", url.lower(), count=1)


def seed_from_url(url: str) -> int:
    """32-bit string hash (h = h * 31 + c) over UTF-16 code units, made non-negative."""
    normalized = normalize_seed_url(url)
    data = normalized.encode("utf-16-le", "surrogatepass")

    h = 0
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + code_unit) & 0xFFFFFFFF

    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def seeded_random(seed: int, index: int) -> float:
    """Value in [0, 1) for a (seed, index) pair."""
    x = math.sin(seed + index * 1000) * 10000
    fraction = x - math.floor(x)
    # tiny negative x can round up to exactly 1.0
    return fraction if fraction < 1.0 else 0.0


def url_random(url: str, index: int) -> float:
    return seeded_random(seed_from_url(url), index)


def seeded_int(seed: int, index: int, low: int, span: int) -> int:
    """low + floor(r * span), i.e. an int in [low, low + span)."""
    return low + math.floor(seeded_random(seed, index) * span)
