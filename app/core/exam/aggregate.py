"""
Immutable exam aggregate produced by the tree builder.
"""
from typing import FrozenSet, Iterator, Optional, Tuple

from pydantic import BaseModel


class OptionNode(BaseModel):
    """Answer option with its resolved correctness."""
    id: int
    text: str
    is_correct: Optional[bool] = None  # stored flag, tri-state
    correct: bool = False  # resolved from the flag and the marker table

    class Config:
        frozen = True


class QuestionNode(BaseModel):
    id: int
    section_id: int
    text: str
    description: Optional[str] = None
    marks: int
    options: Tuple[OptionNode, ...] = ()
    correct_option_ids: FrozenSet[int] = frozenset()

    class Config:
        frozen = True

    @property
    def option_ids(self) -> FrozenSet[int]:
        return frozenset(option.id for option in self.options)


class SectionNode(BaseModel):
    id: int
    title: str
    questions: Tuple[QuestionNode, ...] = ()

    class Config:
        frozen = True

    @property
    def max_score(self) -> int:
        return sum(question.marks for question in self.questions)


class DescriptionNode(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    duration: int  # minutes
    passing_score: int
    sections: Tuple[SectionNode, ...] = ()

    class Config:
        frozen = True

    def iter_questions(self) -> Iterator[QuestionNode]:
        for section in self.sections:
            yield from section.questions

    @property
    def max_score(self) -> int:
        return sum(section.max_score for section in self.sections)


class ExamAggregate(BaseModel):
    """
    Fully built and validated exam tree.

    Frozen after construction, so one instance can be scored by any number of
    concurrent requests.
    """
    id: int
    descriptions: Tuple[DescriptionNode, ...] = ()

    class Config:
        frozen = True

    def iter_questions(self) -> Iterator[QuestionNode]:
        """Yield every question in authoring order."""
        for description in self.descriptions:
            yield from description.iter_questions()

    @property
    def max_score(self) -> int:
        return sum(description.max_score for description in self.descriptions)

    @property
    def passing_score(self) -> int:
        return sum(description.passing_score for description in self.descriptions)

    @property
    def is_publishable(self) -> bool:
        """An exam without any description is incomplete."""
        return len(self.descriptions) > 0

    def without_answers(self) -> "ExamAggregate":
        """Return a copy safe to show candidates: no correctness information."""
        descriptions = tuple(
            description.model_copy(update={
                "sections": tuple(
                    section.model_copy(update={
                        "questions": tuple(
                            question.model_copy(update={
                                "options": tuple(
                                    option.model_copy(update={"is_correct": None, "correct": False})
                                    for option in question.options
                                ),
                                "correct_option_ids": frozenset(),
                            })
                            for question in section.questions
                        )
                    })
                    for section in description.sections
                )
            })
            for description in self.descriptions
        )
        return self.model_copy(update={"descriptions": descriptions})
