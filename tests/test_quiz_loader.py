import json
import random
import tempfile
import unittest
from pathlib import Path

import quiz_loader
from quiz_loader import (
    FALLBACK_QUESTIONS,
    Question,
    QuestionFormatError,
    QuestionProvider,
    answer_labels,
    coerce_question,
    load_question_bank,
    load_questions,
    make_distractors,
    question_from_dict,
    safe_question,
    validate_question,
)

CSV_TEXT = """id,question,answer,subject,difficulty,points,explanation
q1,Largest asteroid?,Ceres,astronomy,easy,,Ceres is a dwarf planet.
q2,Apophis flyby year?,2029,astronomy,medium,15,
q3,Mission that hit Dimorphos?,DART,missions,hard,25,
q4,Sample return from Bennu?,OSIRIS-REx,missions,hard,,
,Row without an answer,,astronomy,easy,,
"""

RECORD = {
    "id": "json_1",
    "question": "What does NEO stand for?",
    "answers": ["Near-Earth Object", "New Energy Orbit", "Nebula", "None"],
    "correctAnswer": 0,
    "points": 15,
    "difficulty": "medium",
    "explanation": "Objects whose orbits bring them close to Earth.",
}


def q(qid, difficulty):
    return Question(qid, f"question {qid}", ("a", "b"), 0, 10, difficulty)


class LoaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_csv_rows_become_multiple_choice(self) -> None:
        path = self.dir / "questions.csv"
        path.write_text(CSV_TEXT, encoding="utf-8")
        questions = load_questions(path, rng=random.Random(2))
        self.assertEqual([x.id for x in questions], ["q1", "q2", "q3", "q4"])
        first = questions[0]
        self.assertEqual(len(first.answers), 4)
        self.assertEqual(first.correct_text, "Ceres")
        self.assertEqual(first.points, 10)
        self.assertEqual(first.explanation, "Ceres is a dwarf planet.")
        self.assertEqual(questions[2].points, 25)
        self.assertEqual(questions[3].points, 20)
        self.assertIsNone(questions[1].explanation)
        for question in questions:
            self.assertEqual(len(set(a.lower() for a in question.answers)), 4)

    def test_missing_file_loads_nothing(self) -> None:
        self.assertEqual(load_questions(self.dir / "nope.csv"), [])
        self.assertEqual(load_question_bank(self.dir / "nope.json"), ([], []))

    def test_json_bank(self) -> None:
        bad = dict(RECORD, id="bad", correctAnswer=9)
        bonus = dict(RECORD, id="bonus_1", points=50)
        path = self.dir / "bank.json"
        path.write_text(
            json.dumps({"categories": {"space": {"questions": [RECORD, bad]}}, "streakBonusQuestions": [bonus]}),
            encoding="utf-8",
        )
        questions, bonus_questions = load_question_bank(path)
        self.assertEqual([x.id for x in questions], ["json_1"])
        self.assertEqual(questions[0].subject, "space")
        self.assertEqual([x.id for x in bonus_questions], ["bonus_1"])

    def test_corrupt_json(self) -> None:
        path = self.dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        self.assertEqual(load_question_bank(path), ([], []))

    def test_provider_from_file_by_extension(self) -> None:
        path = self.dir / "questions.csv"
        path.write_text(CSV_TEXT, encoding="utf-8")
        self.assertEqual(len(QuestionProvider.from_file(path).questions), 4)
        self.assertEqual(QuestionProvider.from_file(None).questions, [])


class RecordTests(unittest.TestCase):
    def test_valid_record(self) -> None:
        self.assertTrue(validate_question(RECORD))
        question = question_from_dict(RECORD)
        self.assertEqual(question.answers[0], "Near-Earth Object")
        self.assertTrue(question.is_correct(0))
        self.assertFalse(question.is_correct(1))

    def test_invalid_records(self) -> None:
        for bad in (
            None,
            {"id": "x"},
            dict(RECORD, answers=["one"]),
            dict(RECORD, correctAnswer=4),
            dict(RECORD, correctAnswer="first"),
        ):
            self.assertFalse(validate_question(bad))
            with self.assertRaises(QuestionFormatError):
                coerce_question(bad)

    def test_coerce_rejects_broken_question(self) -> None:
        with self.assertRaises(QuestionFormatError):
            coerce_question(Question("x", "?", ("a", "b"), 5))
        self.assertIs(coerce_question(FALLBACK_QUESTIONS[0]), FALLBACK_QUESTIONS[0])

    def test_answer_labels(self) -> None:
        self.assertEqual(answer_labels(["x", "y"]), ["A. x", "B. y"])


class ProviderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.questions = [q("e1", "easy"), q("m1", "medium"), q("h1", "hard")]
        self.provider = QuestionProvider(self.questions, rng=random.Random(4))

    def test_levels_pick_matching_difficulties(self) -> None:
        self.assertEqual(
            sorted({x.difficulty for x in self.provider.candidates_for_level(1)}), ["easy", "medium"]
        )
        self.assertEqual(
            sorted({x.difficulty for x in self.provider.candidates_for_level(4)}), ["easy", "medium"]
        )
        self.assertEqual(
            sorted({x.difficulty for x in self.provider.candidates_for_level(9)}), ["hard", "medium"]
        )
        for _ in range(50):
            self.assertNotEqual(self.provider.get_question(8).difficulty, "easy")

    def test_empty_provider_uses_fallbacks(self) -> None:
        self.assertIn(QuestionProvider().get_question(3), FALLBACK_QUESTIONS)

    def test_streak_bonus(self) -> None:
        bonus = q("bonus", "hard")
        provider = QuestionProvider(self.questions, [bonus], rng=random.Random(0))
        picks = [provider.get_question(1, streak=6) for _ in range(200)]
        self.assertIn(bonus, picks)
        self.assertNotIn(bonus, [provider.get_question(1, streak=2) for _ in range(100)])

    def test_adaptive_question(self) -> None:
        for _ in range(30):
            self.assertEqual(self.provider.get_adaptive_question(1, 10).difficulty, "easy")
            self.assertIn(self.provider.get_adaptive_question(9, 10).difficulty, ("medium", "hard"))

    def test_adaptive_question_keeps_streak_bonus(self) -> None:
        bonus = q("bonus", "hard")
        provider = QuestionProvider(self.questions, [bonus], rng=random.Random(1))
        picks = [provider.get_adaptive_question(1, 10, level=1, streak=6) for _ in range(200)]
        self.assertIn(bonus, picks)
        self.assertNotIn(bonus, [provider.get_adaptive_question(1, 10, streak=0) for _ in range(50)])

    def test_stats(self) -> None:
        stats = self.provider.stats()
        self.assertEqual(stats["total_questions"], 3)
        self.assertEqual(stats["difficulty_counts"], {"easy": 1, "medium": 1, "hard": 1})
        self.assertEqual(stats["average_points"], 10)

    def test_safe_question_swallows_provider_errors(self) -> None:
        def broken(level, streak):
            raise KeyError("boom")

        with self.assertLogs(quiz_loader.logger, level="WARNING"):
            self.assertIn(safe_question(broken), FALLBACK_QUESTIONS)
        self.assertIn(safe_question(self.provider, level=9).id, ("m1", "h1"))


class DistractorTests(unittest.TestCase):
    def test_year_answers_get_nearby_years(self) -> None:
        out = make_distractors("2029", [], rng=random.Random(1))
        self.assertEqual(len(out), 3)
        self.assertNotIn("2029", out)
        self.assertTrue(all(abs(int(x) - 2029) <= 10 for x in out))

    def test_pool_answers_are_used(self) -> None:
        pool = ["Vesta", "Pallas", "Juno", "Ceres"]
        out = make_distractors("Ceres", pool, rng=random.Random(1))
        self.assertEqual(len(out), 3)
        self.assertNotIn("Ceres", out)
        self.assertTrue(set(out) <= set(pool))

    def test_always_fills_the_requested_count(self) -> None:
        self.assertEqual(len(make_distractors("x", [], rng=random.Random(1))), 3)
        self.assertEqual(len(make_distractors("inf", [], rng=random.Random(1))), 3)


if __name__ == "__main__":
    unittest.main()
