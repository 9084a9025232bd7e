"""Schemas module - Import all schemas."""
from app.schemas.exam import (
    OptionCreate,
    QuestionCreate,
    SectionCreate,
    ExamDescriptionCreate,
    ExamCreate,
    ExamCreateResponse,
    DeleteIdsRequest,
    DeletedCounts,
    SectionUpdate,
    QuestionUpdate,
    OptionUpdate,
    ExamEdit,
    UpdatedCounts,
    ExamEditResponse,
    SubmissionRequest,
)
from app.schemas.lexicon import WordGloss, QuestionGlossary
from app.schemas.common import ErrorResponse

__all__ = [
    "OptionCreate",
    "QuestionCreate",
    "SectionCreate",
    "ExamDescriptionCreate",
    "ExamCreate",
    "ExamCreateResponse",
    "DeleteIdsRequest",
    "DeletedCounts",
    "SectionUpdate",
    "QuestionUpdate",
    "OptionUpdate",
    "ExamEdit",
    "UpdatedCounts",
    "ExamEditResponse",
    "SubmissionRequest",
    "WordGloss",
    "QuestionGlossary",
    "ErrorResponse",
]
