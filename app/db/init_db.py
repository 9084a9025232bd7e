"""
Database initialization and seeding.
"""
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.exam import Exam
from app.schemas.exam import (
    ExamCreate,
    ExamDescriptionCreate,
    OptionCreate,
    QuestionCreate,
    SectionCreate,
)
from app.services.content_store import ContentStore

logger = logging.getLogger(__name__)

SAMPLE_EXAM = ExamCreate(
    descriptions=[
        ExamDescriptionCreate(
            title="Sample Exam",
            description="Seeded so a fresh database has one exam to load and score",
            duration=30,
            passing_score=5,
            sections=[
                SectionCreate(
                    title="Vocabulary",
                    questions=[
                        QuestionCreate(
                            text="Which word means 'book'?",
                            marks=3,
                            options=[
                                OptionCreate(text="kitab", is_correct=True),
                                OptionCreate(text="qalam", is_correct=False),
                                OptionCreate(text="bayt", is_correct=False),
                            ],
                        ),
                        QuestionCreate(
                            text="Select every word that names a person.",
                            marks=4,
                            options=[
                                OptionCreate(text="mu'allim", marked_correct=True),
                                OptionCreate(text="talib", marked_correct=True),
                                OptionCreate(text="madrasa"),
                            ],
                        ),
                    ],
                )
            ],
        )
    ]
)


def init_db(db: Session) -> None:
    """
    Initialize database with default data.

    Args:
        db: Database session
    """
    # Seed only an empty database
    if db.scalars(select(Exam.id).limit(1)).first() is None:
        exam_id = ContentStore(db).create_exam(SAMPLE_EXAM)
        logger.info(f"Sample exam created with ID {exam_id}")
