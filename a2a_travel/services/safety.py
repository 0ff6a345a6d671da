"""Travel safety advisories.

In-memory advisory table with country and region lookups, sanctions
flags and safer-alternative suggestions. Lookups are case-insensitive
and deterministic.
"""

from enum import Enum

from pydantic import BaseModel, Field


class SafetyLevel(str, Enum):
    """Advisory level, ordered from least to most severe."""

    SAFE = "safe"
    CAUTION = "caution"
    RECONSIDER = "reconsider"
    DO_NOT_TRAVEL = "do_not_travel"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def is_safe(self) -> bool:
        """Levels at which travel is considered acceptable."""
        return self in (SafetyLevel.SAFE, SafetyLevel.CAUTION)


_SEVERITY: dict[SafetyLevel, int] = {
    SafetyLevel.SAFE: 0,
    SafetyLevel.CAUTION: 1,
    SafetyLevel.RECONSIDER: 2,
    SafetyLevel.DO_NOT_TRAVEL: 3,
}


class RegionAdvisory(BaseModel):
    """Advisory for a region inside a country."""

    name: str = Field(..., description="Region name")
    level: SafetyLevel = Field(..., description="Region advisory level")
    reason: list[str] = Field(default_factory=list, description="Reasons")

    model_config = {"extra": "forbid"}


class SafetyAdvisory(BaseModel):
    """Advisory for a country (or a region resolved to its country)."""

    country: str = Field(..., description="Country name")
    level: SafetyLevel = Field(..., description="Advisory level")
    last_updated: str = Field(..., description="ISO date of the last update")
    reason: list[str] = Field(default_factory=list, description="Reasons")
    details: str = Field(default="", description="Human-readable summary")
    regions: list[RegionAdvisory] | None = Field(
        default=None, description="Region-level advisories"
    )
    sanctions: bool = Field(default=False, description="International sanctions")

    model_config = {"extra": "forbid"}


class SafetyCheck(BaseModel):
    """Result of a destination safety check."""

    safe: bool = Field(..., description="Whether travel is considered acceptable")
    advisory: SafetyAdvisory | None = Field(
        default=None, description="Matching advisory, if any"
    )

    model_config = {"extra": "forbid"}


ADVISORIES: list[SafetyAdvisory] = [
    SafetyAdvisory(
        country="Ukraine",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-05-01",
        reason=["war", "armed conflict"],
        details=(
            "Do not travel to Ukraine due to ongoing Russian invasion and armed conflict."
        ),
        regions=[
            RegionAdvisory(
                name="Eastern Ukraine",
                level=SafetyLevel.DO_NOT_TRAVEL,
                reason=["active combat", "shelling"],
            )
        ],
    ),
    SafetyAdvisory(
        country="Russia",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-04-20",
        reason=["sanctions", "detention risk", "invasion of Ukraine"],
        details=(
            "Do not travel to Russia due to international sanctions, the risk of "
            "wrongful detention, and the invasion of Ukraine."
        ),
        sanctions=True,
    ),
    SafetyAdvisory(
        country="Yemen",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-04-10",
        reason=["civil war", "terrorism", "kidnapping"],
        details=(
            "Do not travel to Yemen due to ongoing civil war, terrorism, civil "
            "unrest, health risks, kidnapping, and armed conflict."
        ),
    ),
    SafetyAdvisory(
        country="Syria",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-03-15",
        reason=["civil war", "terrorism", "kidnapping"],
        details=(
            "Do not travel to Syria due to terrorism, civil unrest, kidnapping, "
            "armed conflict, and risk of unjust detention."
        ),
    ),
    SafetyAdvisory(
        country="North Korea",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-03-01",
        reason=["detention risk", "sanctions"],
        details=(
            "Do not travel to North Korea due to the serious risk of arrest and "
            "long-term detention of U.S. nationals and international sanctions."
        ),
        sanctions=True,
    ),
    SafetyAdvisory(
        country="Iran",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-04-05",
        reason=["detention risk", "kidnapping risk", "arbitrary enforcement of laws"],
        details=(
            "Do not travel to Iran due to the risk of kidnapping, arrest, and "
            "detention of U.S. and Western citizens."
        ),
        sanctions=True,
    ),
    SafetyAdvisory(
        country="Afghanistan",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-04-12",
        reason=["civil unrest", "terrorism", "kidnapping", "armed conflict"],
        details=(
            "Do not travel to Afghanistan due to armed conflict, civil unrest, "
            "crime, terrorism, and kidnapping."
        ),
    ),
    SafetyAdvisory(
        country="Belarus",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-03-22",
        reason=["sanctions", "arbitrary enforcement of laws", "detention risk"],
        details=(
            "Do not travel to Belarus due to international sanctions, the arbitrary "
            "enforcement of laws, and the risk of detention."
        ),
        sanctions=True,
    ),
    SafetyAdvisory(
        country="Venezuela",
        level=SafetyLevel.RECONSIDER,
        last_updated="2025-04-02",
        reason=["crime", "civil unrest", "kidnapping", "detention risk"],
        details=(
            "Reconsider travel to Venezuela due to crime, civil unrest, poor health "
            "infrastructure, kidnapping, and arbitrary arrest and detention of "
            "U.S. citizens."
        ),
        sanctions=True,
    ),
    SafetyAdvisory(
        country="Haiti",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-04-18",
        reason=["kidnapping", "crime", "civil unrest"],
        details=(
            "Do not travel to Haiti due to kidnapping, crime, civil unrest, and "
            "poor healthcare infrastructure."
        ),
    ),
    SafetyAdvisory(
        country="South Sudan",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-03-30",
        reason=["crime", "kidnapping", "armed conflict"],
        details="Do not travel to South Sudan due to crime, kidnapping, and armed conflict.",
    ),
    SafetyAdvisory(
        country="Mali",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-04-08",
        reason=["crime", "terrorism", "kidnapping"],
        details="Do not travel to Mali due to crime, terrorism, and kidnapping.",
    ),
    SafetyAdvisory(
        country="Somalia",
        level=SafetyLevel.DO_NOT_TRAVEL,
        last_updated="2025-03-05",
        reason=["crime", "terrorism", "civil unrest", "kidnapping", "piracy"],
        details=(
            "Do not travel to Somalia due to crime, terrorism, civil unrest, "
            "health issues, kidnapping, and piracy."
        ),
    ),
    SafetyAdvisory(
        country="Myanmar",
        level=SafetyLevel.RECONSIDER,
        last_updated="2025-04-25",
        reason=["civil unrest", "armed conflict", "detention risk"],
        details=(
            "Reconsider travel to Myanmar (Burma) due to civil unrest, armed "
            "conflict, and areas with landmines and unexploded ordnance."
        ),
        regions=[
            RegionAdvisory(
                name="Rakhine State",
                level=SafetyLevel.DO_NOT_TRAVEL,
                reason=["armed conflict", "civil unrest"],
            )
        ],
    ),
]

REGION_ALTERNATIVES: dict[str, list[str]] = {
    "eastern_europe": ["Poland", "Hungary", "Czech Republic", "Slovakia"],
    "middle_east": ["Jordan", "Oman", "United Arab Emirates", "Qatar"],
    "southeast_asia": ["Singapore", "Malaysia", "Thailand", "Vietnam"],
    "africa": ["Morocco", "Botswana", "Ghana", "Namibia"],
    "south_america": ["Uruguay", "Chile", "Costa Rica", "Panama"],
}

DEFAULT_ALTERNATIVES: list[str] = [
    "Portugal",
    "Japan",
    "New Zealand",
    "Canada",
    "Switzerland",
]


def _find_country(name: str) -> SafetyAdvisory | None:
    key = name.strip().lower()
    for advisory in ADVISORIES:
        if advisory.country.lower() == key:
            return advisory
    return None


def get_safety_info(location: str) -> SafetyAdvisory | None:
    """Look up the advisory for a country or a listed region.

    A region match returns a copy of its country's advisory with the
    region's level and reasons.

    Args:
        location: Country or region name.

    Returns:
        The matching advisory, or None if the location is not listed.
    """
    country = _find_country(location)
    if country is not None:
        return country.model_copy(deep=True)

    key = location.strip().lower()
    for advisory in ADVISORIES:
        for region in advisory.regions or []:
            if region.name.lower() == key:
                return advisory.model_copy(
                    update={
                        "level": region.level,
                        "reason": list(region.reason),
                        "details": (
                            f"{region.name} in {advisory.country}: "
                            f"{', '.join(region.reason)}"
                        ),
                    },
                    deep=True,
                )
    return None


def has_sanctions(country: str) -> bool:
    """Whether a country is under international sanctions."""
    advisory = _find_country(country)
    return advisory is not None and advisory.sanctions


def get_countries_by_level(level: SafetyLevel) -> list[str]:
    """Countries whose advisory is at ``level`` or more severe, in table order."""
    return [a.country for a in ADVISORIES if a.level.severity >= level.severity]


def get_high_risk_destinations() -> list[str]:
    """Countries with a do-not-travel advisory."""
    return get_countries_by_level(SafetyLevel.DO_NOT_TRAVEL)


def check_destination_safety(destination: str) -> SafetyCheck:
    """Check a destination against the advisory table.

    Unlisted destinations are considered safe. Listed ones are safe only
    at the ``safe`` or ``caution`` level.
    """
    advisory = get_safety_info(destination)
    if advisory is None:
        return SafetyCheck(safe=True)
    return SafetyCheck(safe=advisory.level.is_safe, advisory=advisory)


def suggest_safe_alternatives(region: str | None = None) -> list[str]:
    """Safer destinations for a broad region, or a general default list."""
    if region and region in REGION_ALTERNATIVES:
        return list(REGION_ALTERNATIVES[region])
    return list(DEFAULT_ALTERNATIVES)
