"""
Built-in parse functions for the default registry.
Each takes a non-empty string and returns the typed value or raises ValueError.
"""

import math
import re
import uuid
from datetime import datetime, timedelta, timezone
from urllib.parse import SplitResult, urlsplit

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_UUID_RE = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))",
    re.ASCII,
)

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_HOST_RE = re.compile(r"[A-Za-z0-9.\-_~!$&'()*+,;=%]*|\[[0-9A-Fa-f:.]+(?:%25[^\]]*)?\]")

ZERO_URL: SplitResult = urlsplit("")
ZERO_UUID = uuid.UUID(int=0)
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def parse_string(s: str) -> str:
    return s


def parse_bool(s: str) -> bool:
    """Strict boolean: no yes/no/on/off coercion."""
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"invalid boolean syntax: {s!r}")


def parse_int(s: str) -> int:
    """Base-10 signed 64-bit integer."""
    if not _INT_RE.fullmatch(s):
        raise ValueError(f"invalid integer syntax: {s!r}")
    value = int(s)
    if value < _INT_MIN or value > _INT_MAX:
        raise ValueError(f"integer out of range: {s!r}")
    return value


def parse_float(s: str) -> float:
    """IEEE double. Rejects non-ASCII digits, padding, digit separators and overflow to infinity."""
    if not s.isascii() or s != s.strip() or "_" in s:
        raise ValueError(f"invalid float syntax: {s!r}")
    try:
        value = float(s)
    except ValueError:
        raise ValueError(f"invalid float syntax: {s!r}") from None
    if math.isinf(value) and "inf" not in s.lower():
        raise ValueError(f"float out of range: {s!r}")
    return value


def parse_url(s: str) -> SplitResult:
    """
    Generic URI parsing. Relative references without a scheme are accepted;
    only inputs the URI grammar cannot represent are rejected.
    """
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in s):
        raise ValueError("invalid control character in URL")
    if s.startswith(":"):
        raise ValueError("missing protocol scheme")
    if _BAD_ESCAPE_RE.search(s):
        raise ValueError("invalid URL escape")
    result = urlsplit(s)
    if result.netloc:
        host = result.netloc.rpartition("@")[2]
        if not host.startswith("["):
            host = host.partition(":")[0]
        else:
            host = host[: host.find("]") + 1]
        if not _HOST_RE.fullmatch(host):
            raise ValueError(f"invalid character in host name {host!r}")
        # non-numeric or out-of-range ports raise ValueError here
        _ = result.port
    return result


def parse_uuid(s: str) -> uuid.UUID:
    """Canonical hyphenated 36-character form."""
    if not _UUID_RE.fullmatch(s):
        raise ValueError(f"invalid UUID format: {s!r}")
    return uuid.UUID(s)


def parse_time(s: str) -> datetime:
    """RFC 3339 timestamps only. Fractional seconds beyond microseconds are truncated."""
    m = _RFC3339_RE.fullmatch(s)
    if not m:
        raise ValueError(f"timestamp is not RFC 3339: {s!r}")
    year, month, day, hour, minute, second, frac, zulu, sign, off_h, off_m = m.groups()
    if zulu:
        tz = timezone.utc
    else:
        if int(off_h) > 23 or int(off_m) > 59:
            raise ValueError(f"timezone offset out of range: {s!r}")
        offset = timedelta(hours=int(off_h), minutes=int(off_m))
        tz = timezone(-offset if sign == "-" else offset)
    micro = int((frac or "0")[:6].ljust(6, "0"))
    return datetime(int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz)
