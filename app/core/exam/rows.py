"""
Flat row records read from the content store.

One record per table row, shaped exactly like the relational schema. The
tree builder only ever sees these, never ORM objects.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class ExamRow(BaseModel):
    id: int

    class Config:
        from_attributes = True


class ExamDescriptionRow(BaseModel):
    id: int
    exam_id: int
    title: str
    description: Optional[str] = None
    duration: int
    passing_score: int

    class Config:
        from_attributes = True


class SectionRow(BaseModel):
    id: int
    exam_description_id: int
    title: str

    class Config:
        from_attributes = True


class QuestionRow(BaseModel):
    id: int
    section_id: int
    text: str
    description: Optional[str] = None
    marks: int

    class Config:
        from_attributes = True


class OptionRow(BaseModel):
    id: int
    question_id: int
    text: str
    is_correct: Optional[bool] = None

    class Config:
        from_attributes = True


class CorrectOptionRow(BaseModel):
    option_id: int

    class Config:
        from_attributes = True


class ExamRowSet(BaseModel):
    """Every row owned by one exam, read in a single snapshot.

    Each list keeps the store's natural order, which is also the authoring
    order used for presentation and reports.
    """
    exam: ExamRow
    descriptions: List[ExamDescriptionRow] = Field(default_factory=list)
    sections: List[SectionRow] = Field(default_factory=list)
    questions: List[QuestionRow] = Field(default_factory=list)
    options: List[OptionRow] = Field(default_factory=list)
    correct_options: List[CorrectOptionRow] = Field(default_factory=list)
