"""
Exam endpoints: authoring, delivery and scoring.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.core.dependencies import get_exam_service, get_lexicon_cache
from app.core.exam.aggregate import ExamAggregate
from app.core.exam.scoring import ScoreResult
from app.core.exceptions import NotFound
from app.schemas.common import ErrorResponse
from app.schemas.exam import (
    DeletedCounts,
    DeleteIdsRequest,
    ExamCreate,
    ExamCreateResponse,
    ExamEdit,
    ExamEditResponse,
    SubmissionRequest,
)
from app.schemas.lexicon import QuestionGlossary
from app.services.exam_service import ExamService
from app.services.lexicon_cache import LexiconCache

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post("", response_model=ExamCreateResponse, status_code=status.HTTP_201_CREATED)
def create_exam(
    exam_data: ExamCreate,
    service: ExamService = Depends(get_exam_service),
) -> Any:
    """
    Create an exam with its descriptions, sections, questions and options.

    Content is validated when the exam is loaded, not here.
    """
    exam_id = service.create_exam(exam_data)
    return {"exam_id": exam_id}


@router.get("/{exam_id}", response_model=ExamAggregate, responses=ERROR_RESPONSES)
def get_exam(
    exam_id: int,
    include_answers: bool = False,
    service: ExamService = Depends(get_exam_service),
) -> Any:
    """
    Get the built exam.

    Args:
        exam_id: Exam ID
        include_answers: Keep correctness information (administrators)

    Returns:
        Exam aggregate; correctness is stripped unless include_answers is set
    """
    exam = service.load_exam(exam_id)
    return exam if include_answers else exam.without_answers()


@router.post("/{exam_id}/score", response_model=ScoreResult, responses=ERROR_RESPONSES)
def score_exam(
    exam_id: int,
    submission: SubmissionRequest,
    service: ExamService = Depends(get_exam_service),
) -> Any:
    """
    Score a submission. Nothing is persisted.

    Questions missing from the submission score zero; unknown question or
    option ids reject the whole submission.
    """
    return service.score_submission(exam_id, submission.answers)


@router.delete("/{exam_id}", status_code=status.HTTP_204_NO_CONTENT, responses=ERROR_RESPONSES)
def delete_exam(
    exam_id: int,
    service: ExamService = Depends(get_exam_service),
) -> Response:
    """Delete an exam and all of its content."""
    service.delete_exam(exam_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{exam_id}", response_model=ExamEditResponse, responses=ERROR_RESPONSES)
def edit_exam(
    exam_id: int,
    edit: ExamEdit,
    service: ExamService = Depends(get_exam_service),
) -> Any:
    """
    Update sections, questions and options of an exam and delete others.

    All changes are applied in one transaction; an id outside the exam
    rejects the whole edit.
    """
    if edit.is_all_empty():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nothing to edit",
        )
    return service.update_entities(exam_id, edit)


@router.post("/{exam_id}/delete", response_model=DeletedCounts, responses=ERROR_RESPONSES)
def delete_exam_entities(
    exam_id: int,
    request: DeleteIdsRequest,
    service: ExamService = Depends(get_exam_service),
) -> Any:
    """Delete selected sections, questions and options of an exam."""
    if request.is_all_empty():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No ids to delete",
        )
    return service.delete_entities(exam_id, request)


@router.get(
    "/{exam_id}/questions/{question_id}/glossary",
    response_model=QuestionGlossary,
    responses=ERROR_RESPONSES,
)
def get_question_glossary(
    exam_id: int,
    question_id: int,
    service: ExamService = Depends(get_exam_service),
    lexicon: LexiconCache = Depends(get_lexicon_cache),
) -> Any:
    """
    Question text split into words, each with its lexicon entry if cached.

    A cache outage only leaves the entries empty.
    """
    exam = service.load_exam(exam_id)
    question = next((q for q in exam.iter_questions() if q.id == question_id), None)
    if question is None:
        raise NotFound("question", question_id)

    return {
        "question_id": question.id,
        "text": question.text,
        "words": lexicon.annotate(question.text),
    }
