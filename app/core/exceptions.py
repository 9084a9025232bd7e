"""
Exam engine error taxonomy.

Every error carries the HTTP status the API layer answers with. Content
defects are authoring problems: they are never retried and never corrected
automatically.
"""
from typing import Optional

from fastapi import status


class ExamEngineError(Exception):
    """Base class for all exam engine errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ExamEngineError):
    """Requested exam (or other record) does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, kind: str, record_id: int):
        super().__init__(f"{kind.capitalize()} with ID {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class StoreUnavailable(ExamEngineError):
    """The content store could not be reached. Safe to retry with backoff."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class UnknownReference(ExamEngineError):
    """A submission or delete request names an id outside the exam."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, kind: str, reference_id: int, detail: Optional[str] = None):
        message = f"Unknown {kind} reference: {reference_id}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.kind = kind
        self.reference_id = reference_id


class ContentDefect(ExamEngineError):
    """Base class for exam content that cannot be built into an aggregate."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class InconsistentCorrectness(ContentDefect):
    """An option is marked is_correct=false but also has a correctness marker."""

    def __init__(self, question_id: int, option_id: int):
        super().__init__(
            f"Question {question_id}: option {option_id} is marked incorrect "
            f"but has a correct-option marker"
        )
        self.question_id = question_id
        self.option_id = option_id


class MalformedQuestion(ContentDefect):
    def __init__(self, question_id: int, reason: str):
        super().__init__(f"Question {question_id} is malformed: {reason}")
        self.question_id = question_id
        self.reason = reason


class MalformedSection(ContentDefect):
    def __init__(self, section_id: int, reason: str):
        super().__init__(f"Section {section_id} is malformed: {reason}")
        self.section_id = section_id
        self.reason = reason


class MalformedDescription(ContentDefect):
    def __init__(self, description_id: int, reason: str):
        super().__init__(f"Exam description {description_id} is malformed: {reason}")
        self.description_id = description_id
        self.reason = reason


class ImpossiblePassingScore(ContentDefect):
    def __init__(self, description_id: int, passing_score: int, max_score: int):
        super().__init__(
            f"Exam description {description_id}: passing score {passing_score} "
            f"is outside 0..{max_score}"
        )
        self.description_id = description_id
        self.passing_score = passing_score
        self.max_score = max_score


class OrphanedRecord(ContentDefect):
    """A row points at a parent that is not part of the same exam snapshot."""

    def __init__(self, kind: str, record_id: int, parent_id: int):
        super().__init__(f"Orphaned {kind} {record_id}: parent {parent_id} not in exam")
        self.kind = kind
        self.record_id = record_id
        self.parent_id = parent_id
