"""
Position Calculator: truncated analytical series

- Sun: mean longitude/anomaly polynomials + three-term equation of center
- Moon: mean arguments + six longitude / four latitude periodic terms
- Planets and Chiron: J2000 Keplerian elements propagated linearly per century,
  three-term equation of center in eccentricity
- True node: mean node with a fixed daily regression

Accuracy is degree-level by construction. Planet longitudes are heliocentric.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .constants import Body, DAYS_PER_CENTURY, ELONGATION_RETROGRADE, J2000
from .errors import InvalidBodyError
from .math_utils import ZodiacPosition, norm360, zodiac_position

DEG = math.pi / 180.0

SUN_SPEED = 360.0 / 365.25
MOON_SPEED = 360.0 / 27.32
MOON_DISTANCE_KM = 385000.0

NODE_EPOCH_LONGITUDE = 125.08
NODE_DAILY_MOTION = -0.053


# =============================================================================
# Data models
# =============================================================================

@dataclass(frozen=True)
class CelestialPosition:
    body: str
    longitude: float
    latitude: float
    distance: float  # AU, km for the Moon
    speed: float  # deg/day
    retrograde: bool
    zodiac: ZodiacPosition
    house: Optional[int] = None

    def with_house(self, house: int) -> "CelestialPosition":
        return replace(self, house=house)

    def to_json(self) -> Dict[str, Any]:
        d = asdict(self)
        d["zodiac"] = self.zodiac.to_json()
        return d


@dataclass(frozen=True)
class BodyFailure:
    body: str
    reason: str

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)


BodyResult = Union[CelestialPosition, BodyFailure]


@dataclass(frozen=True)
class OrbitalElements:
    a: float  # semi-major axis, AU
    e: float  # eccentricity
    i: float  # inclination, deg
    L: float  # mean longitude, deg
    w: float  # longitude of perihelion, deg
    node: float  # longitude of ascending node, deg
    # rates per Julian century
    a_rate: float = 0.0
    e_rate: float = 0.0
    i_rate: float = 0.0
    L_rate: float = 0.0
    w_rate: float = 0.0
    node_rate: float = 0.0

    def at(self, t: float) -> "OrbitalElements":
        """Elements propagated t Julian centuries from J2000."""
        return OrbitalElements(
            a=self.a + self.a_rate * t,
            e=self.e + self.e_rate * t,
            i=self.i + self.i_rate * t,
            L=norm360(self.L + self.L_rate * t),
            w=norm360(self.w + self.w_rate * t),
            node=norm360(self.node + self.node_rate * t),
        )


ELEMENTS: Mapping[Body, OrbitalElements] = MappingProxyType({
    Body.MERCURY: OrbitalElements(
        a=0.387, e=0.2056, i=7.00, L=252.25, w=77.46, node=48.33,
        e_rate=0.00002, i_rate=-0.003, L_rate=149472.67, w_rate=0.16, node_rate=-0.13,
    ),
    Body.VENUS: OrbitalElements(
        a=0.723, e=0.0068, i=3.39, L=181.98, w=131.53, node=76.68,
        e_rate=-0.00005, i_rate=-0.008, L_rate=58517.82, w_rate=0.004, node_rate=-0.28,
    ),
    Body.MARS: OrbitalElements(
        a=1.524, e=0.0934, i=1.85, L=355.43, w=336.04, node=49.56,
        e_rate=0.00009, i_rate=-0.006, L_rate=19140.30, w_rate=0.45, node_rate=-0.29,
    ),
    Body.JUPITER: OrbitalElements(
        a=5.203, e=0.0484, i=1.31, L=34.33, w=14.33, node=100.46,
        e_rate=0.00016, i_rate=-0.019, L_rate=3034.90, w_rate=0.22, node_rate=0.18,
    ),
    Body.SATURN: OrbitalElements(
        a=9.537, e=0.0542, i=2.49, L=50.08, w=93.06, node=113.64,
        e_rate=-0.00004, i_rate=0.004, L_rate=1222.11, w_rate=0.54, node_rate=-0.25,
    ),
    Body.URANUS: OrbitalElements(
        a=19.19, e=0.0472, i=0.77, L=314.20, w=173.00, node=74.01,
        e_rate=-0.00003, i_rate=-0.001, L_rate=428.49, w_rate=0.09, node_rate=0.05,
    ),
    Body.NEPTUNE: OrbitalElements(
        a=30.07, e=0.0086, i=1.77, L=304.22, w=48.12, node=131.79,
        e_rate=0.00001, i_rate=0.003, L_rate=218.46, w_rate=0.01, node_rate=-0.01,
    ),
    Body.PLUTO: OrbitalElements(
        a=39.48, e=0.2488, i=17.14, L=238.96, w=224.09, node=110.30,
        e_rate=0.00006, i_rate=0.004, L_rate=145.18, w_rate=-0.01, node_rate=-0.03,
    ),
    Body.CHIRON: OrbitalElements(
        a=13.65, e=0.379, i=6.93, L=216.2, w=188.52, node=209.26,
        L_rate=713.9,
    ),
})


# =============================================================================
# Helpers
# =============================================================================

def centuries_since_j2000(jd: float) -> float:
    return (jd - J2000) / DAYS_PER_CENTURY


def resolve_body(body: Union[Body, str]) -> Body:
    if isinstance(body, Body):
        return body
    try:
        return Body(str(body).strip().lower())
    except ValueError:
        raise InvalidBodyError(body) from None


def _position(
    body: Body,
    lon: float,
    lat: float,
    distance: float,
    speed: float,
    retrograde: bool,
) -> CelestialPosition:
    lon = norm360(lon)
    return CelestialPosition(
        body=body.value,
        longitude=lon,
        latitude=lat,
        distance=distance,
        speed=speed,
        retrograde=retrograde,
        zodiac=zodiac_position(lon),
    )


# =============================================================================
# Sun / Moon
# =============================================================================

def sun_longitude(jd: float) -> float:
    return sun_position(jd).longitude


def sun_position(jd: float) -> CelestialPosition:
    t = centuries_since_j2000(jd)

    l0 = norm360(280.46646 + 36000.76983 * t + 0.0003032 * t * t)
    m = norm360(357.5291092 + 35999.0502909 * t - 0.0001536 * t * t) * DEG

    center = (
        (1.9146 - 0.004817 * t - 0.000014 * t * t) * math.sin(m)
        + (0.019993 - 0.000101 * t) * math.sin(2 * m)
        + 0.00029 * math.sin(3 * m)
    )
    distance = 1.00014 - 0.01671 * math.cos(m) - 0.00014 * math.cos(2 * m)

    return _position(Body.SUN, l0 + center, 0.0, distance, SUN_SPEED, False)


def moon_position(jd: float) -> CelestialPosition:
    t = centuries_since_j2000(jd)

    lm = norm360(218.3164591 + 481267.88134236 * t - 0.0015786 * t * t)
    d = norm360(297.8502042 + 445267.1115168 * t - 0.0016300 * t * t) * DEG
    m = norm360(357.5291092 + 35999.0502909 * t) * DEG
    mm = norm360(134.9634114 + 477198.8676313 * t + 0.0089970 * t * t) * DEG
    f = norm360(93.2720993 + 483202.0175273 * t - 0.0034029 * t * t) * DEG

    lon = (
        lm
        + 6.29 * math.sin(mm)
        - 1.27 * math.sin(mm - 2 * d)
        + 0.66 * math.sin(2 * d)
        + 0.21 * math.sin(2 * mm)
        - 0.19 * math.sin(m)
        - 0.11 * math.sin(2 * f)
    )
    lat = (
        5.13 * math.sin(f)
        + 0.28 * math.sin(mm + f)
        - 0.28 * math.sin(f - mm)
        - 0.17 * math.sin(f - 2 * d)
    )

    return _position(Body.MOON, lon, lat, MOON_DISTANCE_KM, MOON_SPEED, False)


# =============================================================================
# Keplerian bodies + node
# =============================================================================

def equation_of_center(e: float, mean_anomaly_rad: float) -> float:
    """Three-term expansion in e; returns radians."""
    m = mean_anomaly_rad
    return (
        (2 * e - e ** 3 / 4) * math.sin(m)
        + (5.0 / 4.0 * e * e) * math.sin(2 * m)
        + (13.0 / 12.0 * e ** 3) * math.sin(3 * m)
    )


def is_retrograde_by_elongation(lon: float, sun_lon: float) -> bool:
    elongation = norm360(lon - sun_lon)
    return 120.0 < elongation < 240.0


def keplerian_position(jd: float, body: Body) -> CelestialPosition:
    try:
        base = ELEMENTS[body]
    except KeyError:
        raise InvalidBodyError(body) from None

    el = base.at(centuries_since_j2000(jd))

    m_deg = norm360(el.L - el.w)
    m = m_deg * DEG
    true_anomaly = m_deg + equation_of_center(el.e, m) / DEG
    lon = norm360(true_anomaly + el.w)

    lat = el.i * math.sin((lon - el.node) * DEG)
    distance = el.a * (1 - el.e * math.cos(m))
    daily_motion = 360.0 / (el.a ** 1.5 * 365.25)

    retrograde = False
    if body in ELONGATION_RETROGRADE:
        retrograde = is_retrograde_by_elongation(lon, sun_longitude(jd))

    speed = -daily_motion if retrograde else daily_motion
    return _position(body, lon, lat, distance, speed, retrograde)


def node_position(jd: float) -> CelestialPosition:
    lon = NODE_EPOCH_LONGITUDE + NODE_DAILY_MOTION * (jd - J2000)
    return _position(Body.TRUE_NODE, lon, 0.0, 1.0, NODE_DAILY_MOTION, True)


# =============================================================================
# Public API
# =============================================================================

def calc_position(jd: float, body: Union[Body, str]) -> CelestialPosition:
    body = resolve_body(body)
    if body is Body.SUN:
        return sun_position(jd)
    if body is Body.MOON:
        return moon_position(jd)
    if body is Body.TRUE_NODE:
        return node_position(jd)
    return keplerian_position(jd, body)


def try_calc_position(jd: float, body: Union[Body, str]) -> BodyResult:
    """
    calc_position as a value: a CelestialPosition, or a BodyFailure naming
    the body and the reason it could not be computed.
    """
    try:
        return calc_position(jd, body)
    except (ValueError, ArithmeticError) as e:
        name = body.value if isinstance(body, Body) else str(body)
        return BodyFailure(body=name, reason=str(e))
