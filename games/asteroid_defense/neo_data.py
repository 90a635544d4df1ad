"""
neo_data.py
Offline near-Earth-object flavour data: mock NEO records, fun facts and
kid-friendly size/speed comparisons. Gives spawned asteroids their names,
velocities and the fact shown with the question.
"""

import random
from dataclasses import dataclass

MOCK_NAMES = (
    "2024 XR",
    "Bennu Jr",
    "Ryugu Twin",
    "Apollo-2",
    "Aten-5",
    "Amor-12",
    "Itokawa-B",
    "Eros-3",
    "Vesta Fragment",
    "Pallas Chip",
    "Ceres Moon",
    "Juno Rock",
    "Hygiea Shard",
    "Psyche Piece",
)

MOCK_DIAMETERS = (10, 25, 50, 75, 120, 200, 350, 500, 750, 1200)
MOCK_VELOCITIES = (15000, 22000, 28000, 35000, 42000, 55000, 68000, 85000)

ASTEROID_FACTS = (
    "Most asteroids are found in the asteroid belt between Mars and Jupiter!",
    "Some asteroids have their own tiny moons called moonlets.",
    "The largest asteroid, Ceres, is so big it's classified as a dwarf planet.",
    "Asteroids are leftover building blocks from when our solar system formed 4.6 billion years ago.",
    "Some asteroids contain precious metals like platinum and gold!",
    "The dinosaurs went extinct when a large asteroid hit Earth 66 million years ago.",
    "NASA tracks over 28,000 near-Earth asteroids to protect our planet.",
    "Some asteroids spin so fast they complete a rotation in just a few minutes!",
    "Water has been detected on several asteroids, which could help future space missions.",
    "The smallest asteroids are just a few meters across - smaller than a car!",
)

SIZE_COMPARISONS = (
    (5, "as big as a car"),
    (20, "as big as a house"),
    (50, "as big as a football field"),
    (100, "as big as a city block"),
    (500, "as big as a small mountain"),
    (1000, "as big as a large mountain"),
)

SPEED_COMPARISONS = (
    (10000, "faster than a jet plane"),
    (25000, "faster than a rocket"),
    (50000, "faster than a spacecraft"),
)


@dataclass(frozen=True)
class NeoRecord:
    name: str
    diameter: float
    velocity: float
    fact: str = ""


def size_comparison(diameter) -> str:
    for limit, text in SIZE_COMPARISONS:
        if diameter < limit:
            return text
    return "as big as a huge mountain"


def speed_comparison(velocity) -> str:
    for limit, text in SPEED_COMPARISONS:
        if velocity < limit:
            return text
    return "incredibly fast - hypersonic!"


def mock_neo(rng=None) -> NeoRecord:
    rng = rng or random.Random()
    return NeoRecord(
        name=rng.choice(MOCK_NAMES),
        diameter=rng.choice(MOCK_DIAMETERS),
        velocity=rng.choice(MOCK_VELOCITIES),
        fact=rng.choice(ASTEROID_FACTS),
    )

