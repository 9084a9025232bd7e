"""
Pydantic schemas for exam authoring, delivery and scoring.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ============= Authoring =============

class OptionCreate(BaseModel):
    """Schema for creating an answer option."""
    text: str = Field(..., description="Option text")
    is_correct: Optional[bool] = Field(None, description="Stored correctness flag (true / false / unset)")
    marked_correct: bool = Field(
        False, description="Also record the option in the correct-option marker table"
    )


class QuestionCreate(BaseModel):
    """Schema for creating a question."""
    text: str = Field(..., description="Question text")
    description: Optional[str] = Field(None, description="Optional question details")
    marks: int = Field(..., description="Marks awarded for a correct answer")
    options: List[OptionCreate] = Field(default_factory=list)


class SectionCreate(BaseModel):
    """Schema for creating a section."""
    title: str = Field(..., description="Section title")
    questions: List[QuestionCreate] = Field(default_factory=list)


class ExamDescriptionCreate(BaseModel):
    """Schema for creating an exam description."""
    title: str = Field(..., description="Exam title")
    description: Optional[str] = Field(None, description="Exam description")
    duration: int = Field(..., description="Duration in minutes")
    passing_score: int = Field(..., description="Minimum total marks to pass")
    sections: List[SectionCreate] = Field(default_factory=list)


class ExamCreate(BaseModel):
    """Schema for creating a full exam."""
    descriptions: List[ExamDescriptionCreate] = Field(
        ..., min_length=1, description="Exam descriptions with their sections"
    )


class ExamCreateResponse(BaseModel):
    """Response for exam creation."""
    exam_id: int


class DeleteIdsRequest(BaseModel):
    """Schema for deleting parts of an exam."""
    section_ids: List[int] = Field(default_factory=list)
    question_ids: List[int] = Field(default_factory=list)
    option_ids: List[int] = Field(default_factory=list)

    def is_all_empty(self) -> bool:
        return not (self.section_ids or self.question_ids or self.option_ids)


class DeletedCounts(BaseModel):
    """Number of records removed per level (children removed by cascade not counted)."""
    sections: int = 0
    questions: int = 0
    options: int = 0


# ============= Editing =============

class SectionUpdate(BaseModel):
    """New values for an existing section."""
    id: int
    title: str


class QuestionUpdate(BaseModel):
    """New values for an existing question."""
    id: int
    text: str
    description: Optional[str] = None
    marks: int


class OptionUpdate(BaseModel):
    """New values for an existing option."""
    id: int
    text: str
    is_correct: Optional[bool] = None


class ExamEdit(BaseModel):
    """
    Schema for editing an exam in one request.

    Updates are applied first, then deletions. Every id must belong to the
    exam being edited.
    """
    sections: List[SectionUpdate] = Field(default_factory=list)
    questions: List[QuestionUpdate] = Field(default_factory=list)
    options: List[OptionUpdate] = Field(default_factory=list)
    delete: DeleteIdsRequest = Field(default_factory=DeleteIdsRequest)

    def is_all_empty(self) -> bool:
        return not (self.sections or self.questions or self.options) and self.delete.is_all_empty()


class UpdatedCounts(BaseModel):
    """Number of records changed per level."""
    sections: int = 0
    questions: int = 0
    options: int = 0


class ExamEditResponse(BaseModel):
    """Response for an exam edit."""
    updated: UpdatedCounts
    deleted: DeletedCounts


# ============= Scoring =============

class SubmissionRequest(BaseModel):
    """
    Schema for submitting answers.

    ```json
    {
        "answers": {
            "12": [40],
            "13": [44, 45]
        }
    }
    ```
    Questions left out are scored as unanswered.
    """
    answers: Dict[int, List[int]] = Field(
        default_factory=dict, description="question_id -> selected option ids"
    )
