import random
import unittest

from quiz_loader import FALLBACK_QUESTIONS
from games.asteroid_defense.asteroid import Asteroid, AsteroidState, find, with_question_triggered
from games.asteroid_defense.progression import BOSS_CATALOG, DUPLICATE, MULTI_HIT, SHIELD, SPLITTER
from games.asteroid_defense.resolver import (
    Outcome,
    correct_outcome,
    resolve_answer,
    resolve_ground_impact,
    settle,
)


def make_asteroid(asteroid_id="a1", **changes):
    fields = dict(
        id=asteroid_id,
        name="Test Rock",
        size=80,
        start_x=100,
        end_x=200,
        question=FALLBACK_QUESTIONS[0],
        fall_duration=8000,
    )
    fields.update(changes)
    return Asteroid(**fields)


def boss(special):
    return next(b for b in BOSS_CATALOG if b.special == special)


class GroundImpactTests(unittest.TestCase):
    def test_impact_collides_then_removes_with_base_damage(self) -> None:
        group = (make_asteroid(progress=0.99),)
        group = resolve_ground_impact(group, "a1", now=1000)
        a = find(group, "a1")
        self.assertEqual(a.state, AsteroidState.COLLIDING)
        self.assertFalse(a.question_triggered)

        group, removed = settle(group, 1999)
        self.assertEqual(len(group), 1)
        self.assertEqual(removed, [])

        group, removed = settle(group, 2000)
        self.assertEqual(group, ())
        self.assertEqual(len(removed), 1)
        self.assertEqual(removed[0].damage, 20)
        self.assertEqual(removed[0].score, 0)
        self.assertFalse(removed[0].asteroid.question_triggered)

    def test_boss_impact_hits_harder(self) -> None:
        group = resolve_ground_impact((make_asteroid(boss=boss(MULTI_HIT)),), "a1", now=0)
        self.assertEqual(find(group, "a1").pending_damage, 40)

    def test_triggered_or_resolved_asteroids_are_ignored(self) -> None:
        opened = (with_question_triggered(make_asteroid(progress=0.99), now=0),)
        self.assertEqual(resolve_ground_impact(opened, "a1", now=10), opened)
        collided = resolve_ground_impact((make_asteroid(),), "a1", now=0)
        self.assertEqual(resolve_ground_impact(collided, "a1", now=500), collided)
        self.assertEqual(resolve_ground_impact(collided, "nope", now=500), collided)


class AnswerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.group = (with_question_triggered(make_asteroid(), now=0),)

    def test_wrong_answer_sequence(self) -> None:
        group, outcome = resolve_answer(self.group, "a1", False, now=0)
        self.assertEqual(outcome, Outcome.DESTROY)
        self.assertEqual(find(group, "a1").state, AsteroidState.WRONG_ANSWER)

        group, removed = settle(group, 499)
        self.assertEqual(find(group, "a1").state, AsteroidState.WRONG_ANSWER)
        group, removed = settle(group, 500)
        self.assertEqual(find(group, "a1").state, AsteroidState.COLLIDING)
        self.assertEqual(removed, [])
        group, removed = settle(group, 1499)
        self.assertEqual(len(group), 1)
        group, removed = settle(group, 1500)
        self.assertEqual(group, ())
        self.assertEqual(removed[0].damage, 30)
        self.assertGreater(removed[0].damage, 20)

    def test_late_settle_still_walks_both_stages(self) -> None:
        group, _ = resolve_answer(self.group, "a1", False, now=0)
        group, removed = settle(group, 10000)
        self.assertEqual(group, ())
        self.assertEqual(removed[0].damage, 30)

    def test_correct_answer_deflects_and_scores(self) -> None:
        group, outcome = resolve_answer(
            self.group, "a1", True, now=100, point_multiplier=2.0, rng=random.Random(1)
        )
        self.assertEqual(outcome, Outcome.DEFLECT)
        self.assertEqual(find(group, "a1").state, AsteroidState.DEFLECTED)
        group, removed = settle(group, 1599)
        self.assertEqual(removed, [])
        group, removed = settle(group, 1600)
        self.assertEqual(group, ())
        self.assertEqual(removed[0].score, 30)
        self.assertEqual(removed[0].damage, 0)

    def test_second_resolution_is_a_no_op(self) -> None:
        group, first = resolve_answer(self.group, "a1", True, now=0)
        again, second = resolve_answer(group, "a1", False, now=10)
        self.assertEqual(first, Outcome.DEFLECT)
        self.assertIsNone(second)
        self.assertEqual(again, group)

    def test_unopened_asteroid_cannot_be_answered(self) -> None:
        group = (make_asteroid(),)
        self.assertEqual(resolve_answer(group, "a1", True, now=0), (group, None))
        self.assertEqual(resolve_answer(group, "missing", True, now=0), (group, None))


class CorrectOutcomeTests(unittest.TestCase):
    def test_plain_asteroid_deflects(self) -> None:
        self.assertEqual(correct_outcome(make_asteroid()), Outcome.DEFLECT)

    def test_splitter_and_shield_downgrade(self) -> None:
        self.assertEqual(correct_outcome(make_asteroid(kind=SPLITTER)), Outcome.DOWNGRADE)
        self.assertEqual(correct_outcome(make_asteroid(kind=SHIELD, hit_points=2)), Outcome.DOWNGRADE)
        self.assertEqual(correct_outcome(make_asteroid(kind=SHIELD, hit_points=1)), Outcome.DEFLECT)

    def test_boss_needs_every_hit(self) -> None:
        ceres = boss(MULTI_HIT)
        self.assertEqual(correct_outcome(make_asteroid(boss=ceres, hit_points=3)), Outcome.BOSS_PARTIAL_HIT)
        self.assertEqual(correct_outcome(make_asteroid(boss=ceres, hit_points=1)), Outcome.DEFLECT)

    def test_duplicate_boss_splits_first(self) -> None:
        bennu = boss(DUPLICATE)
        self.assertEqual(correct_outcome(make_asteroid(boss=bennu, hit_points=1)), Outcome.BOSS_PARTIAL_HIT)
        self.assertEqual(
            correct_outcome(make_asteroid(boss=bennu, hit_points=1, generation=1)), Outcome.DEFLECT
        )

    def test_partial_outcomes_downgrade_visually(self) -> None:
        group = (with_question_triggered(make_asteroid(kind=SPLITTER), now=0),)
        group, outcome = resolve_answer(group, "a1", True, now=0)
        self.assertEqual(outcome, Outcome.DOWNGRADE)
        self.assertEqual(find(group, "a1").state, AsteroidState.DOWNGRADED)


if __name__ == "__main__":
    unittest.main()
