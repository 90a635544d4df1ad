"""Outcome resolution and the settle-delay state machine.

Resolving an asteroid only moves it into a terminal visual state and stamps the
time. `settle` is the single driver that later walks every terminal asteroid
through its staged delays, removes it and hands back what to report:

    colliding     --1000ms-->  removed, damage reported
    deflected     --1500ms-->  removed, score reported
    downgraded    --1500ms-->  removed, score reported
    wrong_answer  --500ms-->   colliding --1000ms--> removed, damage reported

Every entry point is a no-op for asteroids that are gone or already resolved.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .asteroid import Asteroid, AsteroidState, find, replace_one, with_state
from .helpers import (
    BASE_IMPACT_DAMAGE,
    BOSS_IMPACT_DAMAGE,
    COLLISION_SETTLE_MS,
    DEFLECT_SCATTER,
    DEFLECT_SETTLE_MS,
    WRONG_ANSWER_DAMAGE,
    WRONG_ANSWER_SETTLE_MS,
)
from .progression import DUPLICATE, SPLITTER

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    DEFLECT = "deflect"
    DESTROY = "destroy"
    DOWNGRADE = "downgrade"
    BOSS_PARTIAL_HIT = "boss_partial_hit"


@dataclass(frozen=True)
class Removal:
    asteroid: Asteroid
    damage: int = 0
    score: int = 0


def correct_outcome(a: Asteroid) -> Outcome:
    if a.boss is not None:
        if a.boss.special == DUPLICATE and a.generation == 0:
            return Outcome.BOSS_PARTIAL_HIT
        if a.hit_points > 1:
            return Outcome.BOSS_PARTIAL_HIT
        return Outcome.DEFLECT
    if a.kind == SPLITTER or a.hit_points > 1:
        return Outcome.DOWNGRADE
    return Outcome.DEFLECT


def resolve_ground_impact(asteroids, asteroid_id, now) -> Tuple[Asteroid, ...]:
    """An untriggered asteroid reached the ground: destroyed by impact."""
    a = find(asteroids, asteroid_id)
    if a is None or a.state != AsteroidState.FALLING or a.question_triggered:
        return tuple(asteroids)
    damage = BOSS_IMPACT_DAMAGE if a.boss is not None else BASE_IMPACT_DAMAGE
    logger.debug("%s hit the ground (%d damage pending)", a.id, damage)
    updated = with_state(a, AsteroidState.COLLIDING, now, pending_damage=damage)
    return replace_one(tuple(asteroids), updated)


def resolve_answer(
    asteroids, asteroid_id, is_correct, now, point_multiplier=1.0, rng=None
) -> Tuple[Tuple[Asteroid, ...], Optional[Outcome]]:
    """Settle the open question of `asteroid_id`. Returns (collection, outcome or None)."""
    a = find(asteroids, asteroid_id)
    if a is None or a.state != AsteroidState.QUESTION_OPEN:
        return tuple(asteroids), None

    if is_correct:
        rng = rng or random.Random()
        outcome = correct_outcome(a)
        points = int(round(a.question.points * point_multiplier))
        state = AsteroidState.DEFLECTED if outcome == Outcome.DEFLECT else AsteroidState.DOWNGRADED
        updated = with_state(
            a,
            state,
            now,
            pending_score=points,
            scatter_x=(rng.random() - 0.5) * DEFLECT_SCATTER,
        )
    else:
        outcome = Outcome.DESTROY
        updated = with_state(a, AsteroidState.WRONG_ANSWER, now, pending_damage=WRONG_ANSWER_DAMAGE)
    logger.debug("%s resolved: %s", a.id, outcome.value)
    return replace_one(tuple(asteroids), updated), outcome


def settle(asteroids, now) -> Tuple[Tuple[Asteroid, ...], List[Removal]]:
    """Advance every staged transition whose delay has elapsed."""
    kept = []
    removed = []
    for a in asteroids:
        if a.state == AsteroidState.WRONG_ANSWER and now - a.state_entered_at >= WRONG_ANSWER_SETTLE_MS:
            a = with_state(a, AsteroidState.COLLIDING, a.state_entered_at + WRONG_ANSWER_SETTLE_MS)

        if a.state == AsteroidState.COLLIDING and now - a.state_entered_at >= COLLISION_SETTLE_MS:
            removed.append(Removal(a, damage=a.pending_damage))
        elif (
            a.state in (AsteroidState.DEFLECTED, AsteroidState.DOWNGRADED)
            and now - a.state_entered_at >= DEFLECT_SETTLE_MS
        ):
            removed.append(Removal(a, score=a.pending_score))
        else:
            kept.append(a)
    return tuple(kept), removed
