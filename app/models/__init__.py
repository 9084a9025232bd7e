"""Models module - Import all models here for Alembic."""
from app.db.base import Base
from app.models.exam import Exam, ExamDescription, Section, Question, Option, CorrectOption

__all__ = ["Base", "Exam", "ExamDescription", "Section", "Question", "Option", "CorrectOption"]
