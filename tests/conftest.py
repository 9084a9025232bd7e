import os

# Point the app at an in-memory database before anything imports it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENV", "test")

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest
import redis

from app.core.exam.rows import (
    CorrectOptionRow,
    ExamDescriptionRow,
    ExamRow,
    ExamRowSet,
    OptionRow,
    QuestionRow,
    SectionRow,
)
from app.db.base import SessionLocal, engine
from app.models import Base

# (question_id, marks, [(option_id, is_correct), ...])
QuestionShape = Tuple[int, int, Sequence[Tuple[int, Optional[bool]]]]

SCENARIO_QUESTIONS: List[QuestionShape] = [
    (1000, 3, [(1, True), (2, False)]),
    (1001, 4, [(3, False), (4, True)]),
]


def make_row_set(
    questions: Iterable[QuestionShape] = SCENARIO_QUESTIONS,
    markers: Iterable[int] = (),
    passing_score: int = 5,
    duration: int = 60,
    section_title: str = "Vocabulary",
    exam_id: int = 1,
    description_id: int = 10,
    section_id: int = 100,
) -> ExamRowSet:
    """One exam, one description, one section; questions and options as given."""
    question_rows = []
    option_rows = []
    for question_id, marks, options in questions:
        question_rows.append(
            QuestionRow(id=question_id, section_id=section_id, text=f"Question {question_id}", marks=marks)
        )
        for option_id, is_correct in options:
            option_rows.append(
                OptionRow(id=option_id, question_id=question_id, text=f"Option {option_id}", is_correct=is_correct)
            )

    return ExamRowSet(
        exam=ExamRow(id=exam_id),
        descriptions=[
            ExamDescriptionRow(
                id=description_id,
                exam_id=exam_id,
                title="Vocabulary Test",
                duration=duration,
                passing_score=passing_score,
            )
        ],
        sections=[SectionRow(id=section_id, exam_description_id=description_id, title=section_title)],
        questions=question_rows,
        options=option_rows,
        correct_options=[CorrectOptionRow(option_id=option_id) for option_id in markers],
    )


@pytest.fixture
def row_factory():
    """Factory for ExamRowSet instances (defaults to the two-question scenario)."""
    return make_row_set


@pytest.fixture
def scenario_rows() -> ExamRowSet:
    """Passing score 5; questions worth 3 and 4 marks, one correct option each."""
    return make_row_set()


@pytest.fixture
def exam_payload() -> Dict:
    """JSON body for creating the two-question scenario exam."""
    return {
        "descriptions": [
            {
                "title": "Vocabulary Test",
                "description": "Two questions",
                "duration": 30,
                "passing_score": 5,
                "sections": [
                    {
                        "title": "Vocabulary",
                        "questions": [
                            {
                                "text": "Which word means 'book'?",
                                "marks": 3,
                                "options": [
                                    {"text": "kitab", "is_correct": True},
                                    {"text": "qalam", "is_correct": False},
                                ],
                            },
                            {
                                "text": "Which word means 'pen'?",
                                "marks": 4,
                                "options": [
                                    {"text": "bayt", "is_correct": False},
                                    {"text": "qalam", "marked_correct": True},
                                ],
                            },
                        ],
                    }
                ],
            }
        ]
    }


@pytest.fixture
def db_session():
    """Fresh schema per test on the shared in-memory engine."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeRedis:
    """Minimal stand-in for redis.Redis: string GET / MGET over a dict."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data = data or {}
        self.calls = 0

    def get(self, key):
        self.calls += 1
        return self.data.get(key)

    def mget(self, keys):
        self.calls += 1
        return [self.data.get(key) for key in keys]


class DownRedis:
    """Redis client whose server is unreachable."""

    def get(self, key):
        raise redis.ConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    def mget(self, keys):
        raise redis.ConnectionError("Error 111 connecting to localhost:6379. Connection refused.")


@pytest.fixture
def lexicon_data() -> Dict[str, str]:
    return {
        "word:book": '{"translation": "kitab", "root": "k-t-b"}',
        "word:pen": '{"translation": "qalam"}',
        "word:kitab": "plain text entry",
    }


@pytest.fixture
def fake_redis(lexicon_data) -> FakeRedis:
    return FakeRedis(lexicon_data)


@pytest.fixture
def down_redis() -> DownRedis:
    return DownRedis()
