"""
Transit Sampler

- Two samples per month (1st and 15th, noon UTC) for twelve months
- Mid-month sample is matched against the natal chart: every transiting body
  against every natal body, the Ascendant and the Midheaven
- Transit bodies are placed in the natal houses
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .aspects import Aspect, aspect_between
from .chart import NatalChart, collect_positions
from .constants import (
    ASCENDANT,
    HOUSES,
    MIDHEAVEN,
    MONTH_NAMES,
    PERSONAL_POINTS,
    SIGNIFICANT_TRANSIT_BODIES,
    TRACKED_BODIES,
    Body,
)
from .ephemeris import BodyFailure, CelestialPosition
from .math_utils import body_display_name
from .settings import Settings, load_settings
from .timeconv import julian_day

logger = logging.getLogger(__name__)

TRANSIT_HOUR = 12.0
SAMPLE_DAYS = (1, 15)
KEY_TRANSIT_ORB = 2.0


# =============================================================================
# Data models
# =============================================================================

@dataclass(frozen=True)
class TransitSample:
    year: int
    month: int
    day: int
    jd: float
    positions: Tuple[CelestialPosition, ...]
    omitted: Tuple[BodyFailure, ...] = ()

    def to_json(self) -> Dict[str, Any]:
        return {
            "date": {"year": self.year, "month": self.month, "day": self.day},
            "jd": self.jd,
            "planets": {p.body: p.to_json() for p in self.positions},
            "omitted": [f.to_json() for f in self.omitted],
        }


@dataclass(frozen=True)
class TransitAspect(Aspect):
    """Aspect from a transiting body (first) to a natal point (second)."""

    @property
    def description(self) -> str:
        target = body_display_name(self.second)
        if self.second not in (ASCENDANT, MIDHEAVEN):
            target = f"Natal {target}"
        return f"Transiting {body_display_name(self.first)} {self.symbol} {target}"


@dataclass(frozen=True)
class HousePlacement:
    body: str
    house: int
    position: CelestialPosition

    @property
    def theme(self) -> str:
        return HOUSES[self.house]

    def to_json(self) -> Dict[str, Any]:
        return {
            "body": self.body,
            "house": self.house,
            "theme": self.theme,
            "position": self.position.to_json(),
        }


@dataclass(frozen=True)
class MonthlyTransit:
    month_index: int
    year: int
    month: int
    start: TransitSample
    mid: TransitSample
    aspects: Tuple[TransitAspect, ...]
    house_placements: Tuple[HousePlacement, ...]

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month]

    def placements_by_body(self) -> Dict[str, HousePlacement]:
        return {hp.body: hp for hp in self.house_placements}

    def to_json(self) -> Dict[str, Any]:
        return {
            "month_index": self.month_index,
            "year": self.year,
            "month": self.month,
            "month_name": self.month_name,
            "transits_start": self.start.to_json(),
            "transits_mid": self.mid.to_json(),
            "aspects": [a.to_json() for a in self.aspects],
            "house_placements": {hp.body: hp.to_json() for hp in self.house_placements},
        }


# =============================================================================
# Sampling
# =============================================================================

def next_month(year: int, month: int) -> Tuple[int, int]:
    month += 1
    if month > 12:
        return year + 1, 1
    return year, month


def calculate_transits(
    year: int,
    month: int,
    day: int,
    bodies: Iterable[Union[Body, str]] = TRACKED_BODIES,
) -> TransitSample:
    jd = julian_day(year, month, day, TRANSIT_HOUR)
    positions, failures = collect_positions(jd, bodies)
    return TransitSample(
        year=year,
        month=month,
        day=day,
        jd=jd,
        positions=tuple(positions),
        omitted=tuple(failures),
    )


def analyze_transits_to_natal(natal: NatalChart, sample: TransitSample) -> List[TransitAspect]:
    natal_points = natal.points()
    hits: List[TransitAspect] = []
    for t_pos in sample.positions:
        for n_name, n_lon in natal_points:
            aspect = aspect_between(t_pos.body, t_pos.longitude, n_name, n_lon)
            if aspect is not None:
                hits.append(TransitAspect(**asdict(aspect)))
    return hits


def transit_house_placements(natal: NatalChart, sample: TransitSample) -> Dict[str, HousePlacement]:
    return {
        p.body: HousePlacement(body=p.body, house=natal.houses.house_of(p.longitude), position=p)
        for p in sample.positions
    }


def calculate_12_month_transits(
    start_year: int,
    start_month: int,
    natal: NatalChart,
    *,
    months: Optional[int] = None,
    bodies: Sequence[Union[Body, str]] = TRACKED_BODIES,
    settings: Optional[Settings] = None,
) -> List[MonthlyTransit]:
    if months is None:
        months = (settings or load_settings()).transit_months

    out: List[MonthlyTransit] = []
    year, month = start_year, start_month
    for i in range(months):
        start, mid = (calculate_transits(year, month, d, bodies) for d in SAMPLE_DAYS)
        out.append(
            MonthlyTransit(
                month_index=i,
                year=year,
                month=month,
                start=start,
                mid=mid,
                aspects=tuple(analyze_transits_to_natal(natal, mid)),
                house_placements=tuple(transit_house_placements(natal, mid).values()),
            )
        )
        year, month = next_month(year, month)

    logger.debug("Transit matrix %d-%02d, %d months", start_year, start_month, len(out))
    return out


# =============================================================================
# Filters
# =============================================================================

def significant_transits(aspects: Iterable[Aspect]) -> List[Aspect]:
    """Slow planets (Jupiter..Pluto) onto personal planets and angles."""
    return [
        a for a in aspects
        if a.first in SIGNIFICANT_TRANSIT_BODIES and a.second in PERSONAL_POINTS
    ]


def key_transits(aspects: Iterable[Aspect], limit: int = 5) -> List[Aspect]:
    return [a for a in aspects if a.exact or a.orb < KEY_TRANSIT_ORB][:limit]
