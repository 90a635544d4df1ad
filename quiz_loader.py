"""
quiz_loader.py
Question records, CSV/JSON loading, distractor generation and the level-aware
question provider used by the asteroid games.
"""

import csv
import difflib
import json
import logging
import math
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DIFFICULTIES = ("easy", "medium", "hard")
DEFAULT_POINTS = {"easy": 10, "medium": 15, "hard": 20}
REQUIRED_FIELDS = ("id", "question", "answers", "correctAnswer", "points", "difficulty")

STREAK_BONUS_THRESHOLD = 5
STREAK_BONUS_CHANCE = 0.3


class QuestionFormatError(ValueError):
    """Raised when a question record cannot be turned into a Question."""


@dataclass(frozen=True)
class Question:
    id: str
    question: str
    answers: Tuple[str, ...]
    correct_answer: int
    points: int = 10
    difficulty: str = "easy"
    explanation: Optional[str] = None
    subject: str = ""

    @property
    def correct_text(self):
        return self.answers[self.correct_answer]

    def is_correct(self, answer_index) -> bool:
        return answer_index == self.correct_answer


FALLBACK_QUESTIONS = (
    Question(
        "space_001",
        "What is the name of NASA's mission to study near-Earth asteroids?",
        ("DART", "OSIRIS-REx", "Lucy", "NEAR Shoemaker"),
        1,
        15,
        "medium",
        "OSIRIS-REx successfully collected samples from asteroid Bennu!",
    ),
    Question(
        "space_002",
        "Which asteroid is known as potentially hazardous and will come close to Earth in 2029?",
        ("Ceres", "Apophis", "Vesta", "Eros"),
        1,
        20,
        "hard",
        "Apophis will pass very close to Earth in 2029, closer than some satellites!",
    ),
    Question(
        "space_003",
        "What causes most asteroids to be found between Mars and Jupiter?",
        ("Gravity", "Solar wind", "Magnetic fields", "Temperature"),
        0,
        10,
        "easy",
        "Jupiter's strong gravity prevented these rocks from forming into a planet!",
    ),
)


# ----------------- record parsing -----------------
def validate_question(record) -> bool:
    """Return True if a raw question dict has every field the game needs."""
    if not isinstance(record, dict):
        return False
    missing = [f for f in REQUIRED_FIELDS if f not in record]
    if missing:
        logger.warning("Question %s missing fields: %s", record.get("id"), missing)
        return False
    answers = record.get("answers")
    if not isinstance(answers, (list, tuple)) or len(answers) < 2:
        logger.warning("Question %s needs at least 2 answers", record.get("id"))
        return False
    try:
        idx = int(record["correctAnswer"])
    except (TypeError, ValueError):
        return False
    if idx < 0 or idx >= len(answers):
        logger.warning("Question %s correctAnswer index out of range", record.get("id"))
        return False
    return True


def question_from_dict(record) -> Question:
    """Build a Question from the JSON record shape. Raises QuestionFormatError."""
    if not validate_question(record):
        raise QuestionFormatError(f"invalid question record: {record!r}")
    difficulty = str(record.get("difficulty") or "easy").strip().lower()
    try:
        points = int(record.get("points"))
    except (TypeError, ValueError):
        points = DEFAULT_POINTS.get(difficulty, 10)
    return Question(
        id=str(record["id"]),
        question=str(record["question"]).strip(),
        answers=tuple(str(a) for a in record["answers"]),
        correct_answer=int(record["correctAnswer"]),
        points=points,
        difficulty=difficulty,
        explanation=record.get("explanation") or None,
        subject=str(record.get("subject") or ""),
    )


def coerce_question(value) -> Question:
    """Accept a Question or a raw dict; anything else is a format error."""
    if isinstance(value, Question):
        if len(value.answers) < 2 or not 0 <= value.correct_answer < len(value.answers):
            raise QuestionFormatError(f"invalid question: {value!r}")
        return value
    return question_from_dict(value)


# ----------------- file loading -----------------
def load_questions(csv_path, rng=None) -> List[Question]:
    """
    Read a CSV of questions. Columns: id, question, answer, subject, difficulty
    and optionally points, explanation. Multiple choice options are generated
    from the other answers in the file. Rows missing question or answer are skipped.
    """
    rng = rng or random.Random()
    rows = []
    try:
        with open(csv_path, encoding="utf-8") as f:
            for r in csv.DictReader(f):
                if r.get("question") and r.get("answer"):
                    rows.append(r)
    except FileNotFoundError:
        logger.warning("Question file not found: %s", csv_path)
        return []
    except (OSError, csv.Error) as exc:
        logger.warning("Could not read %s: %s", csv_path, exc)

    pool = [r["answer"].strip() for r in rows]
    questions = []
    for i, r in enumerate(rows):
        answer = r["answer"].strip()
        choices = make_distractors(answer, pool, rng=rng) + [answer]
        rng.shuffle(choices)
        difficulty = (r.get("difficulty") or "easy").strip().lower() or "easy"
        try:
            points = int(r.get("points") or DEFAULT_POINTS.get(difficulty, 10))
        except ValueError:
            points = DEFAULT_POINTS.get(difficulty, 10)
        questions.append(
            Question(
                id=(r.get("id") or f"csv_{i + 1}").strip(),
                question=r["question"].strip(),
                answers=tuple(choices),
                correct_answer=choices.index(answer),
                points=points,
                difficulty=difficulty,
                explanation=(r.get("explanation") or "").strip() or None,
                subject=(r.get("subject") or "").strip(),
            )
        )
    return questions


def load_question_bank(json_path):
    """
    Read the category JSON format:
      {"categories": {<id>: {"questions": [...]}}, "streakBonusQuestions": [...]}
    Returns (questions, streak_bonus_questions). Invalid records are skipped.
    """
    try:
        data = json.loads(Path(json_path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Question file not found: %s", json_path)
        return [], []
    except (OSError, ValueError) as exc:
        logger.warning("Could not parse %s: %s", json_path, exc)
        return [], []

    def parse_all(records, subject=""):
        out = []
        for rec in records or []:
            if isinstance(rec, dict) and subject and "subject" not in rec:
                rec = dict(rec, subject=subject)
            try:
                out.append(question_from_dict(rec))
            except QuestionFormatError:
                continue
        return out

    questions = []
    for cat_id, category in (data.get("categories") or {}).items():
        questions += parse_all((category or {}).get("questions"), subject=cat_id)
    bonus = parse_all(data.get("streakBonusQuestions"))
    logger.info("Loaded %d questions (%d streak bonus) from %s", len(questions), len(bonus), json_path)
    return questions, bonus


# ----------------- distractors -----------------
def is_number(s):
    """Return True if s looks like a number (int or float)."""
    if s is None:
        return False
    try:
        float(str(s).strip())
        return True
    except ValueError:
        return False


def _fmt_number(n):
    if abs(n - int(n)) < 1e-9:
        return str(int(n))
    return f"{n:.6f}".rstrip("0").rstrip(".")


def _simple_typo(word, rng):
    if len(word) <= 2:
        return word + "x"
    w = list(word)
    i = rng.randint(1, len(w) - 2)
    w[i], w[i + 1] = w[i + 1], w[i]
    swapped = "".join(w)
    if swapped.lower() != word.lower():
        return swapped
    return word + "1"


def make_distractors(correct, pool, n=3, rng=None):
    """
    Return a list of n distractor strings for the given correct answer.
    Pool is an iterable of other answers (e.g. from the same CSV).
    """
    rng = rng or random.Random()
    correct = "" if correct is None else str(correct).strip()
    pool = [str(p).strip() for p in pool if p is not None and str(p).strip()]
    pool = [p for p in pool if p.lower() != correct.lower()]

    candidates = []
    seen = set()

    def add_candidate(x):
        s = str(x).strip()
        key = s.lower()
        if not s or key == correct.lower() or key in seen:
            return
        seen.add(key)
        candidates.append(s)

    # numeric answers: nearby values (years get +/- small offsets)
    if is_number(correct) and math.isfinite(float(correct)):
        val = float(correct)
        if abs(val - int(val)) < 1e-9 and 1000 <= int(val) <= 2100:
            for d in (1, -1, 5, -5, 10, -10):
                add_candidate(str(int(val) + d))
        else:
            for nval in (val - 1, val + 1, val - 2, val + 2, val * 10):
                add_candidate(_fmt_number(nval))

    # human-written answers that look alike
    for m in difflib.get_close_matches(correct, pool, n=20, cutoff=0.55):
        if len(candidates) >= n:
            break
        add_candidate(m)

    # pool answers of similar length
    if len(candidates) < n:
        for p in sorted(pool, key=lambda p: abs(len(p) - len(correct)))[:12]:
            if len(candidates) >= n:
                break
            add_candidate(p)

    if len(candidates) < n and " " not in correct:
        add_candidate(_simple_typo(correct, rng))
        add_candidate(correct + "s" if not correct.endswith("s") else correct[:-1])

    i = 0
    while len(candidates) < n and i < 30:
        add_candidate(f"{correct}_alt{i}")
        i += 1

    rng.shuffle(candidates)
    return candidates[:n]


# ----------------- provider -----------------
class QuestionProvider:
    """
    Level-aware question source.
      - levels 1-2: easy questions weighted double, plus medium
      - levels 3-5: easy and medium, medium weighted double
      - levels 6+: medium and hard, hard weighted double
    A streak of 5+ correct answers gives a chance of a streak bonus question.
    """

    def __init__(self, questions=(), streak_bonus=(), rng=None):
        self.questions = list(questions)
        self.streak_bonus = list(streak_bonus)
        self.rng = rng or random.Random()

    @classmethod
    def from_file(cls, path, rng=None):
        """Load a .json question bank or a .csv question list (None -> fallbacks only)."""
        if not path:
            return cls(rng=rng)
        p = Path(path)
        if p.suffix.lower() == ".json":
            questions, bonus = load_question_bank(p)
            return cls(questions, bonus, rng=rng)
        return cls(load_questions(p, rng=rng), rng=rng)

    def by_difficulty(self, difficulty) -> List[Question]:
        return [q for q in self.questions if q.difficulty == difficulty]

    def candidates_for_level(self, level) -> List[Question]:
        try:
            level = max(1, int(level))
        except (TypeError, ValueError):
            level = 1
        easy = self.by_difficulty("easy")
        medium = self.by_difficulty("medium")
        hard = self.by_difficulty("hard")
        if level <= 2:
            return easy + easy + medium
        if level <= 5:
            return easy + medium + medium
        return medium + hard + hard

    def get_question(self, level=1, streak=0) -> Question:
        if streak >= STREAK_BONUS_THRESHOLD and self.streak_bonus:
            if self.rng.random() < STREAK_BONUS_CHANCE:
                return self.rng.choice(self.streak_bonus)
        pool = self.candidates_for_level(level) or self.questions
        if not pool:
            logger.debug("No questions for level %s, using fallback set", level)
            pool = list(FALLBACK_QUESTIONS)
        return self.rng.choice(pool)

    def get_adaptive_question(self, correct_answers, total_answers, level=1, streak=0) -> Question:
        """Harder questions for accurate players, easier ones for struggling players."""
        if streak >= STREAK_BONUS_THRESHOLD and self.streak_bonus:
            return self.get_question(level, streak)
        accuracy = correct_answers / total_answers if total_answers > 0 else 0.5
        if accuracy > 0.8:
            pool = self.by_difficulty("hard") + self.by_difficulty("medium")
        elif accuracy < 0.4:
            pool = self.by_difficulty("easy")
        else:
            return self.get_question(level, streak)
        if not pool:
            return self.get_question(level, streak)
        return self.rng.choice(pool)

    def stats(self) -> Dict:
        counts = {d: 0 for d in DIFFICULTIES}
        subjects = {}
        total_points = 0
        for q in self.questions:
            counts[q.difficulty] = counts.get(q.difficulty, 0) + 1
            subjects[q.subject] = subjects.get(q.subject, 0) + 1
            total_points += q.points
        n = len(self.questions)
        return {
            "total_questions": n,
            "category_counts": subjects,
            "difficulty_counts": counts,
            "average_points": round(total_points / n) if n else 0,
        }


def fallback_question(rng=None) -> Question:
    rng = rng or random.Random()
    return rng.choice(FALLBACK_QUESTIONS)


def safe_question(provider, level=1, streak=0, rng=None) -> Question:
    """Ask the provider for a question; any failure or malformed result yields a fallback."""
    get = getattr(provider, "get_question", provider)
    try:
        return coerce_question(get(level, streak))
    except Exception as exc:
        logger.warning("Question provider failed (%s); using fallback question", exc)
        return fallback_question(rng)


def answer_labels(answers: Sequence[str]) -> List[str]:
    return [f"{chr(65 + i)}. {a}" for i, a in enumerate(answers)]
