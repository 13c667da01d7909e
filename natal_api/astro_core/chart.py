"""
Chart Assembler

Local birth time -> UTC (with day rollover) -> Julian Day -> houses,
positions, house occupancy and all pairwise aspects (bodies + Ascendant +
Midheaven).

A body that cannot be computed is left out of `positions` and listed in
`omitted`; the rest of the chart is still built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .aspects import Aspect, all_pairwise_aspects
from .constants import ASCENDANT, MIDHEAVEN, SIGN_RULERS, TRACKED_BODIES, Body
from .ephemeris import BodyFailure, CelestialPosition, try_calc_position
from .houses import HouseFrame, compute_houses
from .math_utils import ZodiacPosition
from .settings import Settings
from .timeconv import UtcMoment, local_to_utc

logger = logging.getLogger(__name__)


# =============================================================================
# Data models
# =============================================================================

@dataclass(frozen=True)
class GeoCoordinate:
    latitude: float
    longitude: float
    label: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BirthData:
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    tz_offset: float = 0.0

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NatalChart:
    birth: BirthData
    utc: UtcMoment
    location: GeoCoordinate
    positions: Tuple[CelestialPosition, ...]
    houses: HouseFrame
    aspects: Tuple[Aspect, ...]
    omitted: Tuple[BodyFailure, ...] = ()

    @property
    def jd(self) -> float:
        return self.utc.jd

    @property
    def ascendant(self) -> ZodiacPosition:
        return self.houses.ascendant

    @property
    def midheaven(self) -> ZodiacPosition:
        return self.houses.midheaven

    def position(self, body: Union[Body, str]) -> Optional[CelestialPosition]:
        name = body.value if isinstance(body, Body) else str(body).lower()
        for p in self.positions:
            if p.body == name:
                return p
        return None

    def points(self) -> List[Tuple[str, float]]:
        """(name, longitude) for every body plus the two angles."""
        return chart_points(self.positions, self.houses)

    def to_json(self) -> Dict[str, Any]:
        return {
            "birth": self.birth.to_json(),
            "utc": self.utc.to_json(),
            "jd": self.jd,
            "location": self.location.to_json(),
            "planets": {p.body: p.to_json() for p in self.positions},
            "houses": self.houses.to_json(),
            "ascendant": self.ascendant.to_json(),
            "midheaven": self.midheaven.to_json(),
            "aspects": [a.to_json() for a in self.aspects],
            "omitted": [f.to_json() for f in self.omitted],
        }


@dataclass(frozen=True)
class HouseRuler:
    house: int
    cusp_sign: str
    ruler: str
    ruler_position: Optional[CelestialPosition]


# =============================================================================
# Assembly
# =============================================================================

def chart_points(
    positions: Iterable[CelestialPosition],
    houses: HouseFrame,
) -> List[Tuple[str, float]]:
    out = [(p.body, p.longitude) for p in positions]
    out.append((ASCENDANT, houses.ascendant.longitude))
    out.append((MIDHEAVEN, houses.midheaven.longitude))
    return out


def collect_positions(
    jd: float,
    bodies: Iterable[Union[Body, str]] = TRACKED_BODIES,
) -> Tuple[List[CelestialPosition], List[BodyFailure]]:
    positions: List[CelestialPosition] = []
    failures: List[BodyFailure] = []
    for body in bodies:
        result = try_calc_position(jd, body)
        if isinstance(result, BodyFailure):
            logger.warning("Could not calculate position for %s: %s", result.body, result.reason)
            failures.append(result)
        else:
            positions.append(result)
    return positions, failures


def build_natal_chart(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    tz_offset: float = 0.0,
    *,
    location: GeoCoordinate,
    bodies: Sequence[Union[Body, str]] = TRACKED_BODIES,
    settings: Optional[Settings] = None,
) -> NatalChart:
    birth = BirthData(year=year, month=month, day=day, hour=hour, minute=minute, tz_offset=tz_offset)
    utc = local_to_utc(year, month, day, hour, minute, tz_offset)
    jd = utc.jd

    houses = compute_houses(jd, location.latitude, location.longitude, settings=settings)

    computed, failures = collect_positions(jd, bodies)
    positions = tuple(p.with_house(houses.house_of(p.longitude)) for p in computed)

    aspects = tuple(all_pairwise_aspects(chart_points(positions, houses)))

    logger.debug(
        "Natal chart jd=%.5f bodies=%d aspects=%d omitted=%d",
        jd, len(positions), len(aspects), len(failures),
    )
    return NatalChart(
        birth=birth,
        utc=utc,
        location=location,
        positions=positions,
        houses=houses,
        aspects=aspects,
        omitted=tuple(failures),
    )


# =============================================================================
# Queries
# =============================================================================

def planets_in_house(chart: NatalChart, house: int) -> List[CelestialPosition]:
    return [p for p in chart.positions if p.house == house]


def aspects_to_body(chart: NatalChart, name: Union[Body, str]) -> List[Aspect]:
    point = name.value if isinstance(name, Body) else str(name).lower()
    return [a for a in chart.aspects if a.involves(point)]


def house_ruler(chart: NatalChart, house: int) -> HouseRuler:
    cusp = chart.houses.cusp(house)
    ruler = SIGN_RULERS[cusp.zodiac.sign]
    return HouseRuler(
        house=house,
        cusp_sign=cusp.zodiac.sign,
        ruler=ruler.value,
        ruler_position=chart.position(ruler),
    )
