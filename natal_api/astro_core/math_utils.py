from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Sequence

from .constants import SIGNS


def norm360(x: float) -> float:
    x = x % 360.0
    # tiny negative inputs round up to exactly 360.0
    return 0.0 if x >= 360.0 else x


def sign_index(lon: float) -> int:
    return int(norm360(lon) // 30)


def deg_in_sign(lon: float) -> float:
    return norm360(lon) % 30.0


def angular_separation(a: float, b: float) -> float:
    d = abs(norm360(a) - norm360(b))
    return 360.0 - d if d > 180.0 else d


@dataclass(frozen=True)
class ZodiacPosition:
    longitude: float
    sign: str
    sign_index: int
    degree: int
    minutes: int

    @property
    def formatted(self) -> str:
        return f"{self.degree}°{self.minutes:02d}' {self.sign}"

    def to_longitude(self) -> float:
        return self.sign_index * 30 + self.degree + self.minutes / 60.0

    def to_json(self) -> Dict[str, Any]:
        d = asdict(self)
        d["formatted"] = self.formatted
        return d


def zodiac_position(lon: float) -> ZodiacPosition:
    lon = norm360(lon)
    sidx = sign_index(lon)
    deg = deg_in_sign(lon)
    deg_i = int(math.floor(deg))
    minutes = int((deg - deg_i) * 60)  # truncate, don't round
    return ZodiacPosition(
        longitude=lon,
        sign=SIGNS[sidx],
        sign_index=sidx,
        degree=deg_i,
        minutes=minutes,
    )


def house_for_longitude(lon: float, cusps: Sequence[float]) -> int:
    """
    Return the 1-based house whose cusp interval contains lon.

    cusps holds the twelve cusp longitudes in house order. The interval that
    crosses 0° (end < start) is tested as a wrap-around.
    """
    lon = norm360(lon)
    n = len(cusps)
    for i in range(n):
        start = cusps[i]
        end = cusps[(i + 1) % n]
        if end < start:
            if lon >= start or lon < end:
                return i + 1
        elif start <= lon < end:
            return i + 1
    return 1


def body_display_name(name: str) -> str:
    return name[:1].upper() + name[1:].replace("_", " ")
