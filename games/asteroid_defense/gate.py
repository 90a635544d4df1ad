"""Question interrupt gate: owns the single global "open question" slot."""

import logging
from dataclasses import dataclass
from typing import Optional

from quiz_loader import Question

from .asteroid import Asteroid, AsteroidState, find, replace_one, with_question_triggered

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveQuestion:
    question: Question
    asteroid: Asteroid


class QuestionGate:
    """
    FALLING -> QUESTION_OPEN on player interaction; the resolver decides the rest.
    `open` and `close` are the only ways the slot changes, so at most one
    asteroid can have an open question.
    """

    def __init__(self, on_active_question_change=None):
        self.on_active_question_change = on_active_question_change
        self._active_id: Optional[str] = None
        self.opened_at = None

    @property
    def active_id(self):
        return self._active_id

    @property
    def is_open(self):
        return self._active_id is not None

    def _notify(self, payload):
        if self.on_active_question_change is not None:
            self.on_active_question_change(payload)

    def open(self, asteroids, asteroid_id, now):
        """Open the question bound to `asteroid_id`. Returns the new collection (unchanged on refusal)."""
        if self._active_id is not None:
            return tuple(asteroids)
        a = find(asteroids, asteroid_id)
        if a is None or a.question_triggered or a.state != AsteroidState.FALLING:
            return tuple(asteroids)
        updated = with_question_triggered(a, now)
        self._active_id = updated.id
        self.opened_at = now
        logger.debug("Question opened for %s", updated.id)
        self._notify(ActiveQuestion(updated.question, updated))
        return replace_one(tuple(asteroids), updated)

    def close(self, asteroid_id=None) -> bool:
        if self._active_id is None:
            return False
        if asteroid_id is not None and asteroid_id != self._active_id:
            return False
        logger.debug("Question closed for %s", self._active_id)
        self._active_id = None
        self.opened_at = None
        self._notify(None)
        return True

    def elapsed_ms(self, now):
        if self.opened_at is None:
            return None
        return max(0, now - self.opened_at)

    def time_left_ms(self, now, time_limit_ms):
        elapsed = self.elapsed_ms(now)
        if elapsed is None:
            return None
        return max(0, time_limit_ms - elapsed)

    def expired(self, now, time_limit_ms) -> bool:
        left = self.time_left_ms(now, time_limit_ms)
        return left is not None and left <= 0
