"""
Aspect Detector

- Separation folded to [0, 180]
- Fixed ordered table (constants.ASPECTS); the first entry within its orb wins
- exact when the deviation from the nominal angle is below EXACT_ORB
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import ASPECTS, EXACT_ORB, AspectDefinition
from .math_utils import angular_separation, body_display_name


@dataclass(frozen=True)
class AspectMatch:
    """Result of comparing two longitudes; no entity names attached."""
    name: str
    angle: float
    separation: float
    orb: float
    symbol: str
    nature: str
    exact: bool


@dataclass(frozen=True)
class Aspect:
    first: str
    second: str
    name: str
    angle: float
    separation: float
    orb: float
    symbol: str
    nature: str
    exact: bool

    def involves(self, point: str) -> bool:
        return point in (self.first, self.second)

    @property
    def description(self) -> str:
        return f"{body_display_name(self.first)} {self.symbol} {body_display_name(self.second)}"

    def to_json(self) -> Dict[str, Any]:
        d = asdict(self)
        d["description"] = self.description
        return d


def match_aspect(
    separation: float,
    table: Sequence[AspectDefinition] = ASPECTS,
) -> Optional[AspectDefinition]:
    for definition in table:
        if abs(separation - definition.angle) <= definition.orb:
            return definition
    return None


def calculate_aspect(lon1: float, lon2: float) -> Optional[AspectMatch]:
    sep = angular_separation(lon1, lon2)
    definition = match_aspect(sep)
    if definition is None:
        return None

    orb = abs(sep - definition.angle)
    return AspectMatch(
        name=definition.name,
        angle=definition.angle,
        separation=sep,
        orb=orb,
        symbol=definition.symbol,
        nature=definition.nature.value,
        exact=orb < EXACT_ORB,
    )


def aspect_between(first: str, lon1: float, second: str, lon2: float) -> Optional[Aspect]:
    match = calculate_aspect(lon1, lon2)
    if match is None:
        return None
    return Aspect(first=first, second=second, **asdict(match))


def all_pairwise_aspects(points: Iterable[Tuple[str, float]]) -> List[Aspect]:
    """Aspects for every unordered pair, in input order (i < j)."""
    items = list(points)
    out: List[Aspect] = []
    for i in range(len(items)):
        name1, lon1 = items[i]
        for j in range(i + 1, len(items)):
            name2, lon2 = items[j]
            aspect = aspect_between(name1, lon1, name2, lon2)
            if aspect is not None:
                out.append(aspect)
    return out
