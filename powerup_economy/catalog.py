"""
Powerup Catalog - immutable pricing and display data for every powerup kind
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import List

from powerup_economy.schemas import PowerupKind


@dataclass(frozen=True)
class PowerupDefinition:
    kind: PowerupKind
    display_name: str
    price: int
    effect_description: str
    emoji: str

    def __post_init__(self):
        if self.price < 0:
            raise ValueError("Powerup price must be non-negative")


_DEFINITIONS = (
    PowerupDefinition(
        kind=PowerupKind.BOMB,
        display_name="Bomb",
        price=50,
        effect_description="Randomly removes one pair of unmatched cards",
        emoji="💣",
    ),
    PowerupDefinition(
        kind=PowerupKind.GLIMPSE,
        display_name="Glimpse",
        price=100,
        effect_description="Reveals all cards for 5 seconds then flips them back",
        emoji="👀",
    ),
    PowerupDefinition(
        kind=PowerupKind.SKIP,
        display_name="Skip",
        price=600,
        effect_description="Instantly completes the current level",
        emoji="⏭️",
    ),
)

CATALOG = MappingProxyType({d.kind: d for d in _DEFINITIONS})


def lookup(kind: PowerupKind) -> PowerupDefinition:
    """Get the definition for a powerup kind"""
    return CATALOG[PowerupKind(kind)]


def all_definitions() -> List[PowerupDefinition]:
    """All definitions in powerup bar order"""
    return list(_DEFINITIONS)
