"""
Exam service: content store -> tree builder -> scoring engine.
"""
from typing import Optional

from app.core.exam.aggregate import ExamAggregate
from app.core.exam.scoring import ScoreResult, ScoringEngine, Submission
from app.core.exam.tree_builder import ExamTreeBuilder
from app.schemas.exam import DeletedCounts, DeleteIdsRequest, ExamCreate, ExamEdit, ExamEditResponse
from app.services.content_store import ContentStore


class ExamService:
    """
    Per-request orchestration.

    Aggregates are rebuilt from a fresh snapshot on every call, so a write to
    an exam is visible to the next request without any invalidation step.
    """

    def __init__(
        self,
        store: ContentStore,
        builder: Optional[ExamTreeBuilder] = None,
        scoring: Optional[ScoringEngine] = None,
    ):
        self.store = store
        self.builder = builder or ExamTreeBuilder()
        self.scoring = scoring or ScoringEngine()

    def load_exam(self, exam_id: int) -> ExamAggregate:
        rows = self.store.fetch_exam_rows(exam_id)
        return self.builder.build(rows)

    def score_submission(self, exam_id: int, submission: Submission) -> ScoreResult:
        exam = self.load_exam(exam_id)
        return self.scoring.score(exam, submission)

    def create_exam(self, payload: ExamCreate) -> int:
        return self.store.create_exam(payload)

    def delete_exam(self, exam_id: int) -> None:
        self.store.delete_exam(exam_id)

    def delete_entities(self, exam_id: int, request: DeleteIdsRequest) -> DeletedCounts:
        return self.store.delete_entities(exam_id, request)

    def update_entities(self, exam_id: int, edit: ExamEdit) -> ExamEditResponse:
        return self.store.update_entities(exam_id, edit)
