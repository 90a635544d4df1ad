"""Fall & collision tracking.

Positions advance by elapsed time over each asteroid's fall duration. The
freeze flags arrive in an immutable TickContext; while either is set nothing
moves and no ground breach is reported, for every asteroid.
"""

from dataclasses import dataclass, replace
from typing import Tuple

from .asteroid import Asteroid, AsteroidState
from .helpers import SPEED_BURST_FACTOR, SPEED_BURST_MS, SPEED_BURST_PERIOD_MS
from .progression import NO_EFFECT, SPEED_BURST

PLAYING = "playing"


@dataclass(frozen=True)
class TickContext:
    now: float
    dt: float = 0
    time_freeze: bool = False
    question_freeze: bool = False
    game_state: str = PLAYING
    wave_number: int = 1

    @property
    def frozen(self):
        return self.time_freeze or self.question_freeze


def speed_factor(a: Asteroid, effect=NO_EFFECT) -> float:
    factor = effect.fall_speed
    if a.boss is not None and a.boss.special == SPEED_BURST:
        phase = a.fall_elapsed % SPEED_BURST_PERIOD_MS
        if phase >= SPEED_BURST_PERIOD_MS - SPEED_BURST_MS:
            factor *= SPEED_BURST_FACTOR
    return factor


def step(a: Asteroid, dt, effect=NO_EFFECT) -> Asteroid:
    """Advance one falling asteroid by dt milliseconds."""
    if a.state != AsteroidState.FALLING or dt <= 0 or a.fall_duration <= 0:
        return a
    delta = dt * speed_factor(a, effect) / a.fall_duration
    return replace(a, progress=a.progress + delta, fall_elapsed=a.fall_elapsed + dt)


def advance(asteroids, ctx: TickContext, effect=NO_EFFECT) -> Tuple[Asteroid, ...]:
    if ctx.frozen or ctx.dt <= 0:
        return tuple(asteroids)
    return tuple(step(a, ctx.dt, effect) for a in asteroids)


def detect_breaches(asteroids, ctx: TickContext) -> Tuple[str, ...]:
    """Ids of untriggered, still-falling asteroids that are past the ground line.

    Triggered asteroids are decided by their answer, never by ground contact.
    """
    if ctx.frozen:
        return ()
    return tuple(
        a.id
        for a in asteroids
        if a.state == AsteroidState.FALLING and not a.question_triggered and a.past_ground
    )
