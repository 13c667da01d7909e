from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0

SIGNS: Tuple[str, ...] = (
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
)

MONTH_NAMES: Tuple[str, ...] = (
    "", "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

HOUSES: Mapping[int, str] = MappingProxyType({
    1: "Identity & Self",
    2: "Finances & Values",
    3: "Communication & Learning",
    4: "Home & Family",
    5: "Creativity & Romance",
    6: "Health & Daily Work",
    7: "Partnerships & Relationships",
    8: "Transformation & Shared Resources",
    9: "Higher Learning & Travel",
    10: "Career & Public Image",
    11: "Friends & Goals",
    12: "Spirituality & Subconscious",
})


class Body(str, Enum):
    SUN = "sun"
    MOON = "moon"
    MERCURY = "mercury"
    VENUS = "venus"
    MARS = "mars"
    JUPITER = "jupiter"
    SATURN = "saturn"
    URANUS = "uranus"
    NEPTUNE = "neptune"
    PLUTO = "pluto"
    TRUE_NODE = "true_node"
    CHIRON = "chiron"


# Chart order; also the order bodies are computed and aspected in.
TRACKED_BODIES: Tuple[Body, ...] = tuple(Body)

# Bodies whose retrograde flag comes from the solar elongation heuristic.
ELONGATION_RETROGRADE = frozenset({
    Body.JUPITER, Body.SATURN, Body.URANUS, Body.NEPTUNE, Body.PLUTO, Body.CHIRON,
})

ASCENDANT = "ascendant"
MIDHEAVEN = "midheaven"


class Nature(str, Enum):
    HARMONIOUS = "harmonious"
    CHALLENGING = "challenging"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class AspectDefinition:
    name: str
    angle: float
    orb: float
    symbol: str
    nature: Nature


# Order is the tie-break: the first matching entry wins.
ASPECTS: Tuple[AspectDefinition, ...] = (
    AspectDefinition("conjunction", 0.0, 8.0, "☌", Nature.NEUTRAL),
    AspectDefinition("sextile", 60.0, 6.0, "⚹", Nature.HARMONIOUS),
    AspectDefinition("square", 90.0, 8.0, "□", Nature.CHALLENGING),
    AspectDefinition("trine", 120.0, 8.0, "△", Nature.HARMONIOUS),
    AspectDefinition("opposition", 180.0, 8.0, "☍", Nature.CHALLENGING),
)

EXACT_ORB = 1.0

SIGN_RULERS: Mapping[str, Body] = MappingProxyType({
    "Aries": Body.MARS,
    "Taurus": Body.VENUS,
    "Gemini": Body.MERCURY,
    "Cancer": Body.MOON,
    "Leo": Body.SUN,
    "Virgo": Body.MERCURY,
    "Libra": Body.VENUS,
    "Scorpio": Body.PLUTO,
    "Sagittarius": Body.JUPITER,
    "Capricorn": Body.SATURN,
    "Aquarius": Body.URANUS,
    "Pisces": Body.NEPTUNE,
})

SIGNIFICANT_TRANSIT_BODIES = frozenset({
    Body.JUPITER.value, Body.SATURN.value, Body.URANUS.value, Body.NEPTUNE.value, Body.PLUTO.value,
})
PERSONAL_POINTS = frozenset({
    Body.SUN.value, Body.MOON.value, Body.MERCURY.value, Body.VENUS.value, Body.MARS.value,
    ASCENDANT, MIDHEAVEN,
})
