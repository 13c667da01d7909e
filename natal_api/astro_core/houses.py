"""
House System Calculator: equal houses from the Ascendant

GMST -> LST (add east longitude) -> Ascendant / Midheaven via the standard
spherical formulas, cusps every 30° from the Ascendant.

tan(latitude) diverges at the poles: latitudes beyond the configured band are
clamped to it, or rejected with DegenerateLatitudeError in strict mode.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .constants import HOUSES, J2000
from .ephemeris import centuries_since_j2000
from .errors import DegenerateLatitudeError
from .math_utils import ZodiacPosition, house_for_longitude, norm360, zodiac_position
from .settings import Settings, load_settings

logger = logging.getLogger(__name__)

DEG = math.pi / 180.0


@dataclass(frozen=True)
class HouseCusp:
    number: int
    longitude: float
    zodiac: ZodiacPosition

    @property
    def theme(self) -> str:
        return HOUSES[self.number]

    def to_json(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "longitude": self.longitude,
            "theme": self.theme,
            "zodiac": self.zodiac.to_json(),
        }


@dataclass(frozen=True)
class HouseFrame:
    cusps: Tuple[HouseCusp, ...]
    ascendant: ZodiacPosition
    midheaven: ZodiacPosition
    armc: float
    latitude_used: float

    def cusp_longitudes(self) -> Tuple[float, ...]:
        return tuple(c.longitude for c in self.cusps)

    def cusp(self, number: int) -> HouseCusp:
        return self.cusps[number - 1]

    def house_of(self, lon: float) -> int:
        return house_for_longitude(lon, self.cusp_longitudes())

    def to_json(self) -> Dict[str, Any]:
        return {
            "ascendant": self.ascendant.to_json(),
            "midheaven": self.midheaven.to_json(),
            "armc": self.armc,
            "latitude_used": self.latitude_used,
            "cusps": [c.to_json() for c in self.cusps],
        }


def greenwich_sidereal_time(jd: float) -> float:
    t = centuries_since_j2000(jd)
    gmst = (
        280.46061837
        + 360.98564736629 * (jd - J2000)
        + 0.000387933 * t * t
        - t * t * t / 38710000.0
    )
    return norm360(gmst)


def obliquity(jd: float) -> float:
    return 23.439 - 0.00013 * centuries_since_j2000(jd)


def ascendant_from_lst(lst: float, latitude: float, obl: float) -> float:
    lst_r = lst * DEG
    obl_r = obl * DEG
    asc = math.atan2(
        math.cos(lst_r),
        -(math.sin(lst_r) * math.cos(obl_r) + math.tan(latitude * DEG) * math.sin(obl_r)),
    )
    return norm360(asc / DEG)


def midheaven_from_lst(lst: float, obl: float) -> float:
    lst_r = lst * DEG
    mc = math.atan2(math.sin(lst_r), math.cos(lst_r) * math.cos(obl * DEG))
    return norm360(mc / DEG)


def safe_latitude(latitude: float, limit: float, strict: bool = False) -> float:
    if abs(latitude) <= limit:
        return latitude
    if strict:
        raise DegenerateLatitudeError(latitude, limit)
    clamped = math.copysign(limit, latitude)
    logger.warning("Latitude %s clamped to %s for house calculation", latitude, clamped)
    return clamped


def compute_houses(
    jd: float,
    latitude: float,
    longitude: float,
    *,
    settings: Optional[Settings] = None,
) -> HouseFrame:
    settings = settings or load_settings()
    lat = safe_latitude(latitude, settings.pole_latitude_limit, settings.strict_poles)

    lst = norm360(greenwich_sidereal_time(jd) + longitude)
    obl = obliquity(jd)

    asc = ascendant_from_lst(lst, lat, obl)
    mc = midheaven_from_lst(lst, obl)

    cusps = []
    for number in range(1, 13):
        cusp_lon = norm360(asc + (number - 1) * 30.0)
        cusps.append(HouseCusp(number=number, longitude=cusp_lon, zodiac=zodiac_position(cusp_lon)))

    return HouseFrame(
        cusps=tuple(cusps),
        ascendant=zodiac_position(asc),
        midheaven=zodiac_position(mc),
        armc=lst,
        latitude_used=lat,
    )
