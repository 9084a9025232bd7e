"""
Exam content models.

Ownership is strictly hierarchical: exam -> description -> section ->
question -> option -> correct-option marker. Every foreign key cascades on
delete, and the ORM relationships mirror that so deleting through the session
also removes children before parents.
"""
from sqlalchemy import Column, Integer, Text, ForeignKey, Boolean
from sqlalchemy.orm import relationship

from app.db.base import Base


class Exam(Base):
    """Exam root record."""

    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)

    # Relationships
    descriptions = relationship(
        "ExamDescription",
        back_populates="exam",
        cascade="all, delete-orphan",
        order_by="ExamDescription.id",
    )


class ExamDescription(Base):
    """Title, timing and passing threshold of an exam."""

    __tablename__ = "exam_descriptions"

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # minutes
    passing_score = Column(Integer, nullable=False)

    # Relationships
    exam = relationship("Exam", back_populates="descriptions")
    sections = relationship(
        "Section",
        back_populates="exam_description",
        cascade="all, delete-orphan",
        order_by="Section.id",
    )


class Section(Base):
    """Section grouping questions within an exam description."""

    __tablename__ = "sections"

    id = Column(Integer, primary_key=True, index=True)
    exam_description_id = Column(
        Integer, ForeignKey("exam_descriptions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(Text, nullable=False)

    # Relationships
    exam_description = relationship("ExamDescription", back_populates="sections")
    questions = relationship(
        "Question",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="Question.id",
    )


class Question(Base):
    """Question model."""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    section_id = Column(Integer, ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    marks = Column(Integer, nullable=False)

    # Relationships
    section = relationship("Section", back_populates="questions")
    options = relationship(
        "Option",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="Option.id",
    )


class Option(Base):
    """Answer option of a question."""

    __tablename__ = "options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=True)  # true / false / unset

    # Relationships
    question = relationship("Question", back_populates="options")
    correct_marker = relationship(
        "CorrectOption",
        back_populates="option",
        uselist=False,
        cascade="all, delete-orphan",
    )


class CorrectOption(Base):
    """Separate correctness marker; at most one per option."""

    __tablename__ = "correct_options"

    option_id = Column(Integer, ForeignKey("options.id", ondelete="CASCADE"), primary_key=True)

    # Relationships
    option = relationship("Option", back_populates="correct_marker")
