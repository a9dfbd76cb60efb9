"""Record identity and default-logo derivation.

``generate_id`` is the only function here that depends on time. The logo
helpers are pure: the same name always yields the same color and initials,
matching the values produced by the browser admin for the same name.
"""

from __future__ import annotations

import re
from datetime import datetime

from agentnav.models.record import Logo
from agentnav.utils.timestamps import epoch_millis

_WHITESPACE = re.compile(r"\s+")
_NOT_SLUG = re.compile(r"[^a-z0-9-]")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    if value < 0:
        return "-" + to_base36(-value)
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def slugify(name: str) -> str:
    """Lower-case, hyphenate whitespace runs, drop anything not [a-z0-9-]."""
    return _NOT_SLUG.sub("", _WHITESPACE.sub("-", name.lower()))


def generate_id(name: str, now: datetime) -> str:
    """Build a record id from its name and a base-36 millisecond suffix."""
    return f"{slugify(name)}-{to_base36(epoch_millis(now))}"


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def string_hash(text: str) -> int:
    """djb2-style ``hash * 31 + code`` over UTF-16 code units, 32-bit shifts."""
    units = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(units), 2):
        code = units[i] | (units[i + 1] << 8)
        h = code + (_int32(_int32(h) << 5) - h)
    return _int32(h)


def string_to_color(text: str) -> str:
    """Map a string to a ``#rrggbb`` color using the low three hash bytes."""
    h = string_hash(text)
    return "#" + "".join(f"{(h >> (i * 8)) & 0xFF:02x}" for i in range(3))


def get_initials(name: str) -> str:
    return "".join(word[:1] for word in name.split(" ")).upper()[:2]


def generate_default_logo(name: str) -> Logo:
    return Logo(background_color=string_to_color(name), initials=get_initials(name))
