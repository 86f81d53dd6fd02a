"""Parsing and formatting of ``virsh dominfo`` output."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

U64_MAX = 2**64 - 1

_UNITS = ("B", "KiB", "MiB", "GiB", "TiB")
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)


@dataclass
class DomInfo:
    """Values extracted from ``virsh dominfo``.

    The memory fields keep their historical ``_mb`` names, but libvirt
    usually reports these numbers in KiB.
    """

    max_memory_mb: Optional[int] = None
    used_memory_mb: Optional[int] = None
    cpu_time: Optional[str] = None


def _parse_u64(text: str) -> Optional[int]:
    if not _UNSIGNED_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value <= U64_MAX else None


def _parse_f64(text: str) -> Optional[float]:
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def _f64_to_u64(value: float) -> int:
    """Convert like a saturating float-to-unsigned cast."""
    if math.isnan(value) or value <= 0:
        return 0
    if value >= 2.0**64:
        return U64_MAX
    return int(value)


def _first_u64_after_colon(line: str) -> Optional[int]:
    tokens = line.split(":", 1)[1].split()
    return _parse_u64(tokens[0] if tokens else "")


def parse_dominfo(s: str) -> DomInfo:
    """Extract max memory, used memory and CPU time from dominfo text."""
    info = DomInfo()
    for raw_line in s.splitlines():
        line = raw_line.strip()
        if line.startswith("Max memory:"):
            value = _first_u64_after_colon(line)
            if value is not None:
                info.max_memory_mb = value
        elif line.startswith("Used memory:"):
            value = _first_u64_after_colon(line)
            if value is not None:
                info.used_memory_mb = value
        elif line.startswith("CPU time:"):
            info.cpu_time = line.split(":", 1)[1].strip()
    return info


def _token_seconds(token: str) -> Optional[int]:
    if token.endswith("h"):
        value = _parse_u64(token[:-1])
        return None if value is None else value * 3600
    if token.endswith("m"):
        value = _parse_u64(token[:-1])
        return None if value is None else value * 60
    number = token[:-1] if token.endswith("s") else token
    parsed = _parse_f64(number)
    return None if parsed is None else _f64_to_u64(parsed)


def parse_cpu_time_to_seconds(s: str) -> Optional[int]:
    """Parse strings such as ``"613h 33m 33s"`` or ``"154359.4s"`` into whole seconds."""
    s = s.strip()
    if not s:
        return None

    if " " in s or "h" in s or "m" in s:
        total = 0
        for token in s.split():
            seconds = _token_seconds(token)
            if seconds is None:
                return None
            total = min(total + seconds, U64_MAX)
        return total

    token = s[:-1] if s.endswith("s") else s
    parsed = _parse_f64(token)
    return None if parsed is None else _f64_to_u64(parsed)


def format_memory_kib(kib: Optional[int]) -> str:
    """Render a KiB amount with binary units, one decimal from MiB upwards."""
    if kib is None:
        return "(unknown)"
    size = min(kib * 1024, U64_MAX)
    unit = 0
    while size >= 1024 and unit < len(_UNITS) - 1:
        size //= 1024
        unit += 1
    if unit >= 2:
        value = (kib * 1024.0) / float(1024**unit)
        return f"{value:.1f} {_UNITS[unit]}"
    return f"{size} {_UNITS[unit]}"


def format_seconds_dhms(secs: int) -> str:
    """Render seconds as ``"1d 2h 3m 4s"``, leaving out zero units."""
    if secs == 0:
        return "0s"
    days, rest = divmod(secs, 86_400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    parts = [
        f"{amount}{suffix}"
        for amount, suffix in ((days, "d"), (hours, "h"), (minutes, "m"), (seconds, "s"))
        if amount > 0
    ]
    return " ".join(parts)