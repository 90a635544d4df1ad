"""Asteroid entity record and the pure helpers that inspect or transform it.

An Asteroid never changes in place. The fall tracker, the question gate and the
outcome resolver each return a modified copy, and the engine swaps the whole
active collection at once.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

from quiz_loader import Question

from .helpers import FALL_OVERSHOOT, GROUND_Y, SPAWN_Y, lerp
from .progression import NORMAL, BossDescriptor


class AsteroidState(str, Enum):
    FALLING = "falling"
    QUESTION_OPEN = "question_open"
    DEFLECTED = "deflected"
    DOWNGRADED = "downgraded"
    WRONG_ANSWER = "wrong_answer"
    COLLIDING = "colliding"


ACTIVE_STATES = frozenset({AsteroidState.FALLING, AsteroidState.QUESTION_OPEN})
TERMINAL_STATES = frozenset(set(AsteroidState) - ACTIVE_STATES)


def classify_threat(size) -> str:
    if size > 100:
        return "HIGH"
    if size >= 75:
        return "MEDIUM"
    return "LOW"


@dataclass(frozen=True)
class Asteroid:
    id: str
    name: str
    size: float
    start_x: float
    end_x: float
    question: Question
    fall_duration: float
    kind: str = NORMAL
    is_potentially_hazardous: bool = False
    diameter: float = 0.0
    velocity: float = 0.0
    threat_level: str = "MEDIUM"
    skin: str = "REGULAR"
    fact: str = ""
    # fraction of the fall covered; 1.0 is the aim point just below the ground line
    progress: float = 0.0
    # unfrozen milliseconds spent falling
    fall_elapsed: float = 0.0
    question_triggered: bool = False
    state: AsteroidState = AsteroidState.FALLING
    state_entered_at: float = 0
    hit_points: int = 1
    boss: Optional[BossDescriptor] = None
    generation: int = 0
    scatter_x: float = 0.0
    # reported when the asteroid is removed
    pending_damage: int = 0
    pending_score: int = 0

    @property
    def x(self):
        return lerp(self.start_x, self.end_x, min(max(self.progress, 0.0), 1.0))

    @property
    def y(self):
        return lerp(SPAWN_Y, GROUND_Y + FALL_OVERSHOOT, self.progress)

    @property
    def is_boss(self):
        return self.boss is not None

    @property
    def past_ground(self):
        return self.y > GROUND_Y


def is_active(a: Asteroid) -> bool:
    return a.state in ACTIVE_STATES


def is_terminal(a: Asteroid) -> bool:
    return a.state in TERMINAL_STATES


def with_question_triggered(a: Asteroid, now=None) -> Asteroid:
    """Mark the question as triggered and open it. Already-triggered asteroids come back unchanged."""
    if a.question_triggered or a.state != AsteroidState.FALLING:
        return a
    return replace(
        a,
        question_triggered=True,
        state=AsteroidState.QUESTION_OPEN,
        state_entered_at=a.state_entered_at if now is None else now,
    )


def with_state(a: Asteroid, state: AsteroidState, now, **changes) -> Asteroid:
    return replace(a, state=state, state_entered_at=now, **changes)


def find(asteroids: Iterable[Asteroid], asteroid_id) -> Optional[Asteroid]:
    for a in asteroids:
        if a.id == asteroid_id:
            return a
    return None


def replace_one(asteroids: Tuple[Asteroid, ...], updated: Asteroid) -> Tuple[Asteroid, ...]:
    return tuple(updated if a.id == updated.id else a for a in asteroids)


def active_count(asteroids: Iterable[Asteroid]) -> int:
    return sum(1 for a in asteroids if is_active(a))


def open_questions(asteroids: Iterable[Asteroid]):
    return [a for a in asteroids if a.state == AsteroidState.QUESTION_OPEN]
