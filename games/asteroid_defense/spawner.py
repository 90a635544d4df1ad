"""Spawn scheduler: decides when new asteroids appear and builds them.

All random draws go through the injected `random.Random`, so a seeded source
makes spawns reproducible.
"""

import itertools
import logging
import random
from dataclasses import replace

import quiz_loader

from . import neo_data
from .asteroid import Asteroid, AsteroidState, active_count, classify_threat
from .helpers import (
    BOSS_FALL_FACTOR,
    DEFAULT_VELOCITY,
    FALL_DURATION_BY_TIER,
    FAST_FALL_FACTOR,
    FRAGMENT_SCALE,
    HAZARD_PROBABILITY,
    HEAVY_SIZE_RANGE,
    MIN_SPAWN_INTERVAL_MS,
    MINION_SIZE_RANGE,
    SCREEN_W,
    SIZE_RANGE,
    SKINS,
    SPAWN_JITTER,
    SPAWN_MARGIN,
)
from .progression import (
    BOSS,
    DUPLICATE,
    FAST,
    HEAVY,
    NORMAL,
    NO_EFFECT,
    SHIELD,
    SPAWN_MINIONS,
    SPLITTER,
    difficulty_tier,
)

logger = logging.getLogger(__name__)

MINIONS_PER_HIT = 2
FRAGMENTS_PER_SPLIT = 2
FRAGMENT_SPREAD = 80


class SpawnScheduler:
    """
    Builds asteroids from `rng`. For reproducible runs the question provider
    must draw from the same seeded source.
    Successors that do not fit under the simultaneous cap wait in `pending`
    and enter as slots free up.
    """

    def __init__(self, provider, rng=None, width=SCREEN_W, margin=SPAWN_MARGIN, neo_source=None):
        self.provider = provider
        self.rng = rng or random.Random()
        self.width = width
        self.margin = margin
        self.neo_source = neo_source or neo_data.mock_neo
        self.spawned_in_wave = 0
        self.next_spawn_at = None
        self.pending = []
        self._ids = itertools.count(1)

    # -- wave bookkeeping --
    def reset_wave(self):
        self.spawned_in_wave = 0
        self.next_spawn_at = None
        self.pending = []

    def wave_exhausted(self, config) -> bool:
        return self.spawned_in_wave >= config.asteroid_count

    def next_interval(self, spawn_rate) -> float:
        """Jittered delay until the next spawn attempt, never below the fairness floor."""
        lo, hi = SPAWN_JITTER
        return max(MIN_SPAWN_INTERVAL_MS, spawn_rate * self.rng.uniform(lo, hi))

    # -- spawning --
    def tick(self, active, config, now, effect=NO_EFFECT, streak=0):
        """Run the periodic spawn timer. Returns the (possibly extended) active tuple."""
        active = self.release_pending(active, config)
        forced = active_count(active) == 0 and self.spawned_in_wave == 0
        if not forced and self.next_spawn_at is not None and now < self.next_spawn_at:
            return active
        self.next_spawn_at = now + self.next_interval(config.spawn_rate * effect.spawn_rate)
        return self.try_spawn(active, config, now=now, streak=streak)

    def admit(self, active, config, successors):
        """Append as many successors as free slots allow; queue the rest."""
        self.pending.extend(successors)
        return self.release_pending(active, config)

    def release_pending(self, active, config):
        active = tuple(active)
        free = config.max_simultaneous - active_count(active)
        if free <= 0 or not self.pending:
            return active
        entering, self.pending = self.pending[:free], self.pending[free:]
        return active + tuple(entering)

    def try_spawn(self, active, config, question_provider=None, now=0, streak=0):
        """Append one new asteroid unless the screen or the wave quota is full."""
        if active_count(active) >= config.max_simultaneous:
            return tuple(active)
        if self.wave_exhausted(config):
            return tuple(active)

        provider = question_provider or self.provider
        question = quiz_loader.safe_question(provider, config.wave_number, streak, rng=self.rng)
        last_of_wave = self.spawned_in_wave == config.asteroid_count - 1
        if config.has_boss and config.boss is not None and last_of_wave:
            asteroid = self.build_boss(config, question, now)
        else:
            kind = self.rng.choice(config.asteroid_kinds)
            asteroid = self.build_asteroid(config, question, now, kind)
        self.spawned_in_wave += 1
        logger.debug(
            "Spawned %s (%s) %d/%d in wave %d",
            asteroid.id,
            asteroid.kind,
            self.spawned_in_wave,
            config.asteroid_count,
            config.wave_number,
        )
        return tuple(active) + (asteroid,)

    def _new_id(self):
        return f"asteroid_{next(self._ids)}"

    def _random_x(self):
        usable = max(0, self.width - 2 * self.margin)
        return self.margin + self.rng.random() * usable

    def _fall_duration(self, config):
        return FALL_DURATION_BY_TIER[difficulty_tier(config.wave_number)]

    def build_asteroid(self, config, question, now, kind=NORMAL):
        rng = self.rng
        lo, hi = HEAVY_SIZE_RANGE if kind == HEAVY else SIZE_RANGE
        size = rng.uniform(lo, hi)
        start_x = self._random_x()
        end_x = self._random_x()
        hazardous = rng.random() < HAZARD_PROBABILITY
        skin = rng.choice(SKINS)
        neo = self.neo_source(rng)
        fall_duration = self._fall_duration(config)
        if kind == FAST:
            fall_duration *= FAST_FALL_FACTOR
        return Asteroid(
            id=self._new_id(),
            name=neo.name,
            size=size,
            start_x=start_x,
            end_x=end_x,
            question=question,
            fall_duration=fall_duration,
            kind=kind,
            is_potentially_hazardous=hazardous,
            diameter=neo.diameter,
            velocity=neo.velocity or DEFAULT_VELOCITY,
            threat_level=classify_threat(size),
            skin=skin,
            fact=neo.fact,
            state_entered_at=now,
            hit_points=2 if kind == SHIELD else 1,
        )

    def build_boss(self, config, question, now):
        boss = config.boss
        start_x = self._random_x()
        end_x = self._random_x()
        logger.info("Boss incoming: %s (%d hp)", boss.name, boss.health)
        return Asteroid(
            id=self._new_id(),
            name=boss.name,
            size=boss.size,
            start_x=start_x,
            end_x=end_x,
            question=question,
            fall_duration=self._fall_duration(config) * BOSS_FALL_FACTOR,
            kind=BOSS,
            is_potentially_hazardous=True,
            diameter=boss.size,
            velocity=DEFAULT_VELOCITY,
            threat_level="HIGH",
            skin="REGULAR",
            fact=boss.description,
            state_entered_at=now,
            hit_points=boss.health,
            boss=boss,
        )

    # -- successors of a partially defeated asteroid --
    def _successor(self, parent, question, now, end_x=None, **changes):
        pinned_x = parent.x
        end_x = pinned_x if end_x is None else end_x
        p = min(max(parent.progress, 0.0), 1.0)
        # choose start_x so the successor continues from the parent's current x
        start_x = pinned_x if p >= 1.0 else (pinned_x - end_x * p) / (1.0 - p)
        base = dict(
            id=self._new_id(),
            question=question,
            question_triggered=False,
            state=AsteroidState.FALLING,
            state_entered_at=now,
            start_x=start_x,
            end_x=end_x,
            generation=parent.generation + 1,
            scatter_x=0.0,
            pending_damage=0,
            pending_score=0,
        )
        base.update(changes)
        return replace(parent, **base)

    def _spread(self, parent, offset):
        return min(max(parent.x + offset, self.margin), self.width - self.margin)

    def spawn_successors(self, parent, config, now, streak=0):
        """Asteroids that replace `parent` after a correct answer that did not finish it.

        Successors start untriggered at the parent's position with fresh questions.
        They do not count toward the wave quota; pass them through `admit`
        so the simultaneous cap still holds.
        """
        level = config.wave_number

        def ask():
            return quiz_loader.safe_question(self.provider, level, streak, rng=self.rng)

        out = []
        if parent.boss is not None:
            remaining = max(1, parent.hit_points - 1)
            if parent.boss.special == DUPLICATE and parent.generation == 0:
                each = max(1, -(-remaining // 2))
                for offset in (-FRAGMENT_SPREAD, FRAGMENT_SPREAD):
                    out.append(
                        self._successor(
                            parent,
                            ask(),
                            now,
                            hit_points=each,
                            end_x=self._spread(parent, offset),
                            size=parent.size * FRAGMENT_SCALE,
                            diameter=parent.diameter * FRAGMENT_SCALE,
                        )
                    )
            else:
                out.append(self._successor(parent, ask(), now, hit_points=remaining))
                if parent.boss.special == SPAWN_MINIONS:
                    out += [self.build_minion(parent, config, ask(), now) for _ in range(MINIONS_PER_HIT)]
        elif parent.kind == SPLITTER:
            for i in range(FRAGMENTS_PER_SPLIT):
                offset = FRAGMENT_SPREAD if i % 2 else -FRAGMENT_SPREAD
                size = parent.size * FRAGMENT_SCALE
                out.append(
                    self._successor(
                        parent,
                        ask(),
                        now,
                        kind=NORMAL,
                        name=f"{parent.name} fragment",
                        size=size,
                        diameter=parent.diameter * FRAGMENT_SCALE,
                        threat_level=classify_threat(size),
                        end_x=self._spread(parent, offset),
                        hit_points=1,
                    )
                )
        elif parent.hit_points > 1:
            out.append(self._successor(parent, ask(), now, kind=NORMAL, hit_points=parent.hit_points - 1))
        logger.debug("%s replaced by %d successor(s)", parent.id, len(out))
        return out

    def build_minion(self, parent, config, question, now):
        size = self.rng.uniform(*MINION_SIZE_RANGE)
        x = parent.x
        return Asteroid(
            id=self._new_id(),
            name=f"{parent.name} minion",
            size=size,
            start_x=x,
            end_x=self._random_x(),
            question=question,
            fall_duration=self._fall_duration(config),
            kind=NORMAL,
            diameter=parent.diameter * size / parent.size,
            velocity=parent.velocity,
            threat_level=classify_threat(size),
            skin=self.rng.choice(SKINS),
            state_entered_at=now,
            generation=parent.generation + 1,
        )
