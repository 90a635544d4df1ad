"""Achievement catalog and the tracker that unlocks them from game events."""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

FAST_ANSWER_SECONDS = 3.0
FAST_ANSWERS_NEEDED = 5
CARDS_NEEDED = 25
SURVIVOR_WAVE = 10
SHIELD_BOOST_HEALTH = 25
SHIELD_REGEN_PER_WAVE = 10


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    reward_type: str
    reward_value: object


ACHIEVEMENTS = {
    "first_wave": Achievement(
        "first_wave", "Space Cadet", "Complete your first wave", "powerup", "shield_boost"
    ),
    "perfect_wave": Achievement(
        "perfect_wave", "Flawless Defense", "Complete a wave without taking damage", "points", 500
    ),
    "speed_demon": Achievement(
        "speed_demon",
        "Lightning Fast",
        "Answer 5 questions in under 3 seconds each",
        "powerup",
        "time_freeze",
    ),
    "boss_slayer": Achievement(
        "boss_slayer", "Titan Destroyer", "Defeat your first boss asteroid", "permanent", "extra_life"
    ),
    "collector": Achievement(
        "collector", "Cosmic Curator", "Collect 25 different asteroid cards", "unlock", "card_gallery"
    ),
    "survivor": Achievement(
        "survivor", "Space Survivor", "Survive 10 waves in a single game", "permanent", "shield_regen"
    ),
}


class AchievementTracker:
    def __init__(self, on_unlock=None):
        self.on_unlock = on_unlock
        self.unlocked = []
        self.fast_answers = 0

    def is_unlocked(self, achievement_id):
        return achievement_id in self.unlocked

    def unlock(self, achievement_id):
        if achievement_id in self.unlocked or achievement_id not in ACHIEVEMENTS:
            return None
        self.unlocked.append(achievement_id)
        achievement = ACHIEVEMENTS[achievement_id]
        logger.info("Achievement unlocked: %s", achievement.name)
        if self.on_unlock is not None:
            self.on_unlock(achievement)
        return achievement

    def record_answer(self, correct, seconds):
        # consecutive fast correct answers
        if correct and seconds is not None and seconds < FAST_ANSWER_SECONDS:
            self.fast_answers += 1
        else:
            self.fast_answers = 0
        if self.fast_answers >= FAST_ANSWERS_NEEDED:
            self.unlock("speed_demon")

    def record_wave_complete(self, wave_number, perfect):
        self.unlock("first_wave")
        if perfect:
            self.unlock("perfect_wave")
        if wave_number >= SURVIVOR_WAVE:
            self.unlock("survivor")

    def record_boss_defeated(self):
        self.unlock("boss_slayer")

    def record_card_count(self, count):
        if count >= CARDS_NEEDED:
            self.unlock("collector")


def apply_reward(achievement, scoreboard) -> bool:
    """Credit an achievement's reward to the scoreboard.

    Returns False for rewards the host has to grant itself (power-up charges,
    unlocked screens).
    """
    value = achievement.reward_value
    if achievement.reward_type == "points":
        scoreboard.report_score(int(value))
    elif value == "shield_boost":
        scoreboard.heal(SHIELD_BOOST_HEALTH)
    elif value == "extra_life":
        scoreboard.extra_lives += 1
    elif value == "shield_regen":
        scoreboard.regen_per_wave += SHIELD_REGEN_PER_WAVE
    else:
        return False
    logger.debug("Reward %s applied", value)
    return True
