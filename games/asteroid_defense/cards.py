"""Collectible asteroid cards and their rarity."""

from dataclasses import dataclass
from typing import Dict, List

FAMOUS_NAMES = ("Apophis", "Bennu", "Ryugu", "Itokawa", "Ceres", "Vesta")
CATALOG_YEARS = ("2023", "2024", "2025")

# (minimum total score, rarity)
RARITY_THRESHOLDS = (
    (13, "Legendary"),
    (10, "Epic"),
    (7, "Rare"),
    (5, "Uncommon"),
)
RARITY_ORDER = ("Common", "Uncommon", "Rare", "Epic", "Legendary")


def _band(value, limits):
    for score, limit in enumerate(limits, start=1):
        if value < limit:
            return score
    return len(limits) + 1


def rarity_score(diameter, velocity, name) -> int:
    size_score = _band(diameter, (50, 150, 400, 800))
    speed_score = _band(velocity, (20000, 35000, 50000, 70000))
    name = name or ""
    if any(famous in name for famous in FAMOUS_NAMES):
        name_score = 5
    elif len(name) < 8 and not any(year in name for year in CATALOG_YEARS):
        name_score = 3
    elif len(name) > 15:
        name_score = 2
    else:
        name_score = 1
    return size_score + speed_score + name_score


def calculate_rarity(diameter, velocity, name) -> str:
    total = rarity_score(diameter, velocity, name)
    for minimum, rarity in RARITY_THRESHOLDS:
        if total >= minimum:
            return rarity
    return "Common"


@dataclass(frozen=True)
class AsteroidCard:
    name: str
    diameter: float
    velocity: float
    rarity: str
    fact: str = ""
    hazardous: bool = False


class CardCollection:
    """Cards won by deflecting asteroids, one per distinct asteroid name."""

    def __init__(self):
        self.cards: Dict[str, AsteroidCard] = {}

    def __len__(self):
        return len(self.cards)

    def __contains__(self, name):
        return name in self.cards

    def collect(self, asteroid) -> bool:
        """Add a card for the asteroid. Returns True if the card is new."""
        if asteroid.name in self.cards:
            return False
        self.cards[asteroid.name] = AsteroidCard(
            name=asteroid.name,
            diameter=asteroid.diameter,
            velocity=asteroid.velocity,
            rarity=calculate_rarity(asteroid.diameter, asteroid.velocity, asteroid.name),
            fact=asteroid.fact,
            hazardous=asteroid.is_potentially_hazardous,
        )
        return True

    def by_rarity(self) -> Dict[str, List[AsteroidCard]]:
        out = {r: [] for r in RARITY_ORDER}
        for card in self.cards.values():
            out[card.rarity].append(card)
        return out
