"""
Data models for the Pi-hole toggle proxy
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional


def parse_blocking_state(value) -> bool:
    """Map the Pi-hole blocking string to a boolean.

    The API reports "enabled", "disabled", "failed" or "unknown"; only
    "enabled" means ad-blocking is active.
    """
    return value == "enabled"


def parse_timer(value) -> int:
    """Coerce a timer value to whole seconds, 0 when absent or unparseable"""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    return parse_int_prefix(str(value)) or 0


def parse_int_prefix(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of a string ("12abc" -> 12), None if there is none"""
    if value is None:
        return None
    text = value.strip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for char in text:
        if not char.isdecimal():
            break
        digits += char
    if not digits:
        return None
    return sign * int(digits)


@dataclass
class DomainRule:
    """Represents a Pi-hole regex deny-list entry

    Note that ``enabled`` is True when the rule is switched on in Pi-hole,
    which the web client shows as "disabled" (red).
    """
    id: int
    domain: str
    comment: Optional[str] = None
    enabled: bool = True

    @property
    def key(self) -> str:
        return str(self.id)

    @classmethod
    def from_dict(cls, data: Dict) -> "DomainRule":
        return cls(
            id=data.get("id"),
            domain=data.get("domain", ""),
            comment=data.get("comment"),
            enabled=bool(data.get("enabled", False))
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "domain": self.domain,
            "comment": self.comment,
            "enabled": self.enabled
        }


@dataclass(frozen=True)
class BlockingStatus:
    """Global ad-blocking state and its timer in seconds"""
    blocking: bool = False
    timer: int = 0

    def to_dict(self) -> Dict:
        return {
            "blocking": self.blocking,
            "timer": self.timer
        }
