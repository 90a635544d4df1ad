"""
engine.py
The asteroid lifecycle & wave progression engine.

AsteroidEngine ties the pieces together on every host tick:
  1. binding countdown for the open question (optional policy)
  2. fall tracker: advance positions, detect ground breaches
  3. resolver: ground impacts, then the settle-delay state machine
  4. spawn scheduler (skipped while a question is open)
  5. wave completion and the short break before the next wave

The active collection is a tuple that is replaced whole on every change.
"""

import logging
import random
from dataclasses import dataclass, replace

from . import resolver, tracker
from .asteroid import AsteroidState, find, is_active, open_questions
from .gate import QuestionGate
from .progression import (
    BOSS_FIGHT,
    WAVE_ACTIVE,
    WAVE_COMPLETE,
    active_effect,
    clamp_wave_number,
    wave_config,
)
from .resolver import Outcome
from .spawner import SpawnScheduler
from .tracker import PLAYING, TickContext

logger = logging.getLogger(__name__)

WAVE_BREAK_MS = 3000
DEFAULT_EARTH_HEALTH = 100


class Scoreboard:
    """Default score & health sink: keeps the running score and Earth's health.

    A spare life refills health instead of letting it reach zero, and
    `regen_per_wave` is restored after every completed wave.
    """

    def __init__(self, health=DEFAULT_EARTH_HEALTH):
        self.score = 0
        self.health = health
        self.initial_health = health
        self.damage_log = []
        self.extra_lives = 0
        self.regen_per_wave = 0

    def report_damage(self, amount, asteroid):
        self.health = max(0, self.health - amount)
        self.damage_log.append((asteroid.id, amount))
        if self.health == 0 and self.extra_lives > 0:
            self.extra_lives -= 1
            self.health = self.initial_health
            logger.info("Extra life used, %d left", self.extra_lives)

    def heal(self, amount):
        self.health = min(self.initial_health, self.health + amount)

    def wave_complete(self):
        if self.regen_per_wave and self.health > 0:
            self.heal(self.regen_per_wave)

    def report_score(self, points):
        self.score += points

    @property
    def game_over(self):
        return self.health <= 0


@dataclass(frozen=True)
class AnswerResult:
    asteroid_id: str
    correct: bool
    outcome: Outcome
    seconds: float
    points: int = 0


class AsteroidEngine:
    def __init__(
        self,
        provider,
        sink=None,
        rng=None,
        starting_wave=1,
        on_active_question_change=None,
        answer_timeout=True,
        width=None,
        achievements=None,
        cards=None,
    ):
        self.rng = rng or random.Random()
        self.provider = provider
        self.sink = sink if sink is not None else Scoreboard()
        self.on_active_question_change = on_active_question_change
        self.gate = QuestionGate(self._question_changed)
        kwargs = {} if width is None else {"width": width}
        self.scheduler = SpawnScheduler(self.next_question, rng=self.rng, **kwargs)
        self.answer_timeout = answer_timeout
        self.achievements = achievements
        self.cards = cards

        self.asteroids = ()
        self.wave_number = clamp_wave_number(starting_wave)
        self.wave = wave_config(self.wave_number)
        self.wave_started_at = None
        self.wave_completed_at = None
        self.last_now = None
        self.damage_this_wave = 0

        self.streak = 0
        self.correct_answers = 0
        self.total_answers = 0
        self.last_answer = None

    # -- derived state --
    @property
    def question_freeze(self):
        return self.gate.is_open

    @property
    def active_question(self):
        return find(self.asteroids, self.gate.active_id) if self.gate.is_open else None

    @property
    def phase(self):
        if self.wave_completed_at is not None:
            return WAVE_COMPLETE
        if any(a.boss is not None and is_active(a) for a in self.asteroids):
            return BOSS_FIGHT
        return WAVE_ACTIVE

    def current_effect(self, now):
        if self.wave_started_at is None:
            return active_effect(self.wave, 0)
        return active_effect(self.wave, now - self.wave_started_at)

    def time_limit_ms(self, now):
        return self.wave.time_limit * 1000 * self.current_effect(now).time_limit

    def question_time_left_ms(self, now):
        return self.gate.time_left_ms(now, self.time_limit_ms(now))

    def next_question(self, level, streak=0):
        """Question for a new asteroid, adapted to the player's accuracy when the provider can."""
        adaptive = getattr(self.provider, "get_adaptive_question", None)
        if adaptive is not None:
            return adaptive(self.correct_answers, self.total_answers, level, streak)
        return getattr(self.provider, "get_question", self.provider)(level, streak)

    def _question_changed(self, payload):
        if self.on_active_question_change is not None:
            self.on_active_question_change(payload)

    def _now(self, now):
        if now is not None:
            return now
        return self.last_now if self.last_now is not None else 0

    # -- host entry points --
    def tick(self, now, time_freeze=False, game_state=PLAYING):
        dt = 0 if self.last_now is None else max(0, now - self.last_now)
        self.last_now = now
        ctx = TickContext(
            now=now,
            dt=dt,
            time_freeze=bool(time_freeze),
            question_freeze=self.gate.is_open,
            game_state=game_state,
            wave_number=self.wave_number,
        )
        if game_state != PLAYING:
            return ctx

        if self.wave_completed_at is not None:
            if now - self.wave_completed_at < WAVE_BREAK_MS:
                return ctx
            self._start_next_wave(now)
        if self.wave_started_at is None:
            self.wave_started_at = now

        effect = self.current_effect(now)
        if self.answer_timeout and self.gate.is_open and self.gate.expired(now, self.time_limit_ms(now)):
            logger.debug("Question for %s timed out", self.gate.active_id)
            self.answer(self.gate.active_id, False, now)
        ctx = replace(ctx, question_freeze=self.gate.is_open)

        self.asteroids = tracker.advance(self.asteroids, ctx, effect)
        for asteroid_id in tracker.detect_breaches(self.asteroids, ctx):
            self.resolve_ground_impact(asteroid_id, now)

        self._settle(now)

        if not self.gate.is_open:
            self.asteroids = self.scheduler.tick(
                self.asteroids, self.wave, now, effect=effect, streak=self.streak
            )

        if self.scheduler.wave_exhausted(self.wave) and not self.asteroids and not self.scheduler.pending:
            self._complete_wave(now)
        return ctx

    def trigger_question(self, asteroid_id, now=None) -> bool:
        """Player clicked an asteroid: open its question if the slot is free."""
        now = self._now(now)
        before = self.gate.active_id
        self.asteroids = self.gate.open(self.asteroids, asteroid_id, now)
        return before is None and self.gate.active_id == asteroid_id

    def answer(self, asteroid_id, is_correct, now=None):
        """Resolve the open question. Calls for anything but the open asteroid are ignored."""
        now = self._now(now)
        if asteroid_id is None or self.gate.active_id != asteroid_id:
            return None
        parent = find(self.asteroids, asteroid_id)
        seconds = (self.gate.elapsed_ms(now) or 0) / 1000.0
        points_factor = self.wave.point_multiplier * self.current_effect(now).points
        self.asteroids, outcome = resolver.resolve_answer(
            self.asteroids, asteroid_id, is_correct, now, point_multiplier=points_factor, rng=self.rng
        )
        self.gate.close(asteroid_id)
        if outcome is None:
            return None

        self.total_answers += 1
        if is_correct:
            self.correct_answers += 1
            self.streak += 1
        else:
            self.streak = 0

        if outcome in (Outcome.DOWNGRADE, Outcome.BOSS_PARTIAL_HIT):
            successors = self.scheduler.spawn_successors(parent, self.wave, now, streak=self.streak)
            self.asteroids = self.scheduler.admit(self.asteroids, self.wave, successors)
        if outcome == Outcome.DEFLECT and parent.boss is not None and self.achievements is not None:
            self.achievements.record_boss_defeated()
        if is_correct and self.cards is not None and self.cards.collect(parent):
            if self.achievements is not None:
                self.achievements.record_card_count(len(self.cards))
        if self.achievements is not None:
            self.achievements.record_answer(is_correct, seconds)

        resolved = find(self.asteroids, asteroid_id)
        points = resolved.pending_score if resolved is not None else 0
        self.last_answer = AnswerResult(asteroid_id, bool(is_correct), outcome, seconds, points)
        return self.last_answer

    def resolve_ground_impact(self, asteroid_id, now=None):
        now = self._now(now)
        self.asteroids = resolver.resolve_ground_impact(self.asteroids, asteroid_id, now)

    # -- internals --
    def _settle(self, now):
        self.asteroids, removals = resolver.settle(self.asteroids, now)
        for removal in removals:
            if removal.damage:
                self.damage_this_wave += removal.damage
                self.sink.report_damage(removal.damage, removal.asteroid)
            if removal.score:
                self.sink.report_score(removal.score)
            logger.debug("Removed %s (%s)", removal.asteroid.id, removal.asteroid.state.value)

    def _complete_wave(self, now):
        logger.info(
            "Wave %d complete (%d damage taken)", self.wave_number, self.damage_this_wave
        )
        if self.achievements is not None:
            self.achievements.record_wave_complete(self.wave_number, self.damage_this_wave == 0)
        wave_complete = getattr(self.sink, "wave_complete", None)
        if wave_complete is not None:
            wave_complete()
        self.wave_completed_at = now

    def _start_next_wave(self, now):
        self.wave_number += 1
        self.wave = wave_config(self.wave_number)
        self.scheduler.reset_wave()
        self.wave_started_at = now
        self.wave_completed_at = None
        self.damage_this_wave = 0
        logger.info(
            "Wave %d: %d asteroids, %d at once%s",
            self.wave_number,
            self.wave.asteroid_count,
            self.wave.max_simultaneous,
            f", boss {self.wave.boss.name}" if self.wave.boss else "",
        )

    def open_question_count(self):
        return len(open_questions(self.asteroids))

    def falling(self):
        return [a for a in self.asteroids if a.state == AsteroidState.FALLING]
