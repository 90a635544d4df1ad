"""
progression.py
Wave and boss progression tables for Asteroid Defense.

Everything here is static data or a pure function of the wave number, so the
difficulty curve is reproducible: the same wave always yields the same config.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

# asteroid kinds
NORMAL = "normal"
FAST = "fast"
HEAVY = "heavy"
SPLITTER = "splitter"
SHIELD = "shield"
BOSS = "boss"

# boss special abilities
MULTI_HIT = "MULTI_HIT"
SPEED_BURST = "SPEED_BURST"
SPAWN_MINIONS = "SPAWN_MINIONS"
DUPLICATE = "DUPLICATE"

# special event tags
METEOR_SHOWER = "METEOR_SHOWER"
SOLAR_FLARE = "SOLAR_FLARE"
ASTEROID_STORM = "ASTEROID_STORM"
BONUS_ROUND = "BONUS_ROUND"

# game phases reported by the engine
WAVE_ACTIVE = "wave_active"
BOSS_FIGHT = "boss_fight"
WAVE_COMPLETE = "wave_complete"

# (threshold wave, kind added, special event added)
KIND_THRESHOLDS = (
    (3, FAST, None),
    (5, HEAVY, METEOR_SHOWER),
    (7, SPLITTER, SOLAR_FLARE),
    (10, SHIELD, ASTEROID_STORM),
)

BOSS_WAVE_INTERVAL = 5


@dataclass(frozen=True)
class BossDescriptor:
    name: str
    size: int
    health: int
    special: str
    description: str


BOSS_CATALOG = (
    BossDescriptor(
        "Ceres Fragment",
        200,
        3,
        MULTI_HIT,
        "A massive chunk of the dwarf planet Ceres. Requires multiple correct answers to destroy!",
    ),
    BossDescriptor(
        "Vesta Core",
        180,
        2,
        SPEED_BURST,
        "Core material from asteroid Vesta. Periodically accelerates toward Earth!",
    ),
    BossDescriptor(
        "Apophis Shard",
        220,
        4,
        SPAWN_MINIONS,
        "Dangerous fragment of asteroid Apophis. Spawns smaller asteroids when damaged!",
    ),
    BossDescriptor(
        "Bennu Cluster",
        160,
        2,
        DUPLICATE,
        "Sample from asteroid Bennu. Splits into two when first answered correctly!",
    ),
)


@dataclass(frozen=True)
class EventEffect:
    """Multipliers applied while a special event runs. 1.0 means no change."""

    spawn_rate: float = 1.0
    fall_speed: float = 1.0
    time_limit: float = 1.0
    points: float = 1.0

    def combine(self, other):
        return EventEffect(
            spawn_rate=self.spawn_rate * other.spawn_rate,
            fall_speed=self.fall_speed * other.fall_speed,
            time_limit=self.time_limit * other.time_limit,
            points=self.points * other.points,
        )


NO_EFFECT = EventEffect()


@dataclass(frozen=True)
class SpecialEvent:
    name: str
    description: str
    duration_ms: int
    effect: EventEffect


SPECIAL_EVENTS = {
    METEOR_SHOWER: SpecialEvent(
        "Meteor Shower",
        "Rapid asteroid spawning for 10 seconds!",
        10000,
        EventEffect(spawn_rate=0.3),
    ),
    SOLAR_FLARE: SpecialEvent(
        "Solar Flare",
        "All asteroids move 2x faster for 15 seconds!",
        15000,
        EventEffect(fall_speed=2.0, time_limit=0.8),
    ),
    ASTEROID_STORM: SpecialEvent(
        "Asteroid Storm",
        "Double asteroid spawning with reduced visibility!",
        20000,
        EventEffect(spawn_rate=0.5),
    ),
    BONUS_ROUND: SpecialEvent(
        "Bonus Knowledge Round",
        "All correct answers worth 3x points for 30 seconds!",
        30000,
        EventEffect(points=3.0),
    ),
}


@dataclass(frozen=True)
class WaveConfig:
    wave_number: int
    asteroid_count: int
    max_simultaneous: int
    spawn_rate: int
    time_limit: int
    point_multiplier: float
    asteroid_kinds: Tuple[str, ...] = (NORMAL,)
    special_events: Tuple[str, ...] = field(default_factory=tuple)
    has_boss: bool = False
    boss: Optional[BossDescriptor] = None


def clamp_wave_number(wave_number) -> int:
    """Coerce anything wave-like to a valid wave number (minimum 1)."""
    try:
        n = int(round(float(wave_number)))
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(1, n)


def get_boss_type(boss_level: int) -> BossDescriptor:
    """Boss for the given 1-based boss level, clamped to the catalog."""
    idx = min(max(boss_level, 1) - 1, len(BOSS_CATALOG) - 1)
    return BOSS_CATALOG[idx]


def wave_config(wave_number) -> WaveConfig:
    n = clamp_wave_number(wave_number)

    kinds = [NORMAL]
    events = []
    for threshold, kind, event in KIND_THRESHOLDS:
        if n >= threshold:
            kinds.append(kind)
            if event is not None:
                events.append(event)

    has_boss = n % BOSS_WAVE_INTERVAL == 0
    boss = get_boss_type(n // BOSS_WAVE_INTERVAL) if has_boss else None

    return WaveConfig(
        wave_number=n,
        asteroid_count=min(3 + n // 2, 8),
        max_simultaneous=min(2 + n // 3, 4),
        spawn_rate=max(1000, 3000 - n * 150),
        time_limit=max(8, 15 - n),
        point_multiplier=1 + n * 0.1,
        asteroid_kinds=tuple(kinds),
        special_events=tuple(events),
        has_boss=has_boss,
        boss=boss,
    )


def active_effect(config: WaveConfig, elapsed_ms) -> EventEffect:
    """Combined effect of the wave's special events `elapsed_ms` after the wave began.

    Every listed event starts with the wave and lasts for its own duration.
    """
    effect = NO_EFFECT
    if elapsed_ms is None or elapsed_ms < 0:
        return effect
    for tag in config.special_events:
        event = SPECIAL_EVENTS.get(tag)
        if event is not None and elapsed_ms < event.duration_ms:
            effect = effect.combine(event.effect)
    return effect


def difficulty_tier(level) -> str:
    level = clamp_wave_number(level)
    if level <= 2:
        return "easy"
    if level <= 5:
        return "medium"
    return "hard"


DAILY_CHALLENGES = (
    {
        "name": "Speed Run",
        "description": "Complete 5 waves in under 10 minutes",
        "reward": {"type": "points", "value": 2000},
    },
    {
        "name": "No Power-ups",
        "description": "Complete 3 waves without using any power-ups",
        "reward": {"type": "card_pack", "value": "rare"},
    },
    {
        "name": "Perfect Knowledge",
        "description": "Answer 20 questions correctly in a row",
        "reward": {"type": "achievement_boost", "value": 1.5},
    },
)


def daily_challenge(day_of_year: int) -> dict:
    return DAILY_CHALLENGES[int(day_of_year) % len(DAILY_CHALLENGES)]


def boss_waves_until(wave_number) -> int:
    """Waves remaining until the next boss wave (0 when this wave has one)."""
    n = clamp_wave_number(wave_number)
    return (-n) % BOSS_WAVE_INTERVAL


