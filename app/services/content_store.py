"""
Content store adapter.
Reads exam rows from the relational store and runs the administrative writes.
"""
import logging
from typing import Dict, Iterable, List, Tuple, Type

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.core.exam.rows import (
    CorrectOptionRow,
    ExamDescriptionRow,
    ExamRow,
    ExamRowSet,
    OptionRow,
    QuestionRow,
    SectionRow,
)
from app.core.exceptions import NotFound, StoreUnavailable, UnknownReference
from app.models.exam import CorrectOption, Exam, ExamDescription, Option, Question, Section
from app.schemas.exam import (
    DeletedCounts,
    DeleteIdsRequest,
    ExamCreate,
    ExamEdit,
    ExamEditResponse,
    UpdatedCounts,
)

logger = logging.getLogger(__name__)

CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, DisconnectionError)

DeletionTargets = Tuple[List[Section], List[Question], List[Option]]


class ContentStore:
    """Maps exam tables to row records. No business rules live here."""

    def __init__(self, db: Session):
        """
        Initialize the content store.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    # ============= Reads =============

    def fetch_exam_rows(self, exam_id: int) -> ExamRowSet:
        """
        Read every row owned by an exam in one transaction.

        Args:
            exam_id: Exam ID

        Returns:
            ExamRowSet with each level in primary-key order

        Raises:
            NotFound: If the exam does not exist
            StoreUnavailable: If the database cannot be reached
        """
        try:
            self._begin_snapshot()
            rows = self._read_rows(exam_id)
            # Read-only: end the snapshot transaction
            self.db.rollback()
        except CONNECTIVITY_ERRORS as e:
            self._discard_transaction()
            logger.error(f"Content store unavailable while reading exam {exam_id}: {e}")
            raise StoreUnavailable(f"Content store unavailable: {e}") from e
        except Exception:
            self._discard_transaction()
            raise

        logger.info(
            f"Loaded exam {exam_id}: {len(rows.descriptions)} descriptions, "
            f"{len(rows.sections)} sections, {len(rows.questions)} questions, "
            f"{len(rows.options)} options"
        )
        return rows

    def _begin_snapshot(self) -> None:
        """Pin the read transaction to one snapshot where the database supports it."""
        if self.db.get_bind().dialect.name == "postgresql":
            self.db.connection(execution_options={"isolation_level": "REPEATABLE READ"})

    def _read_rows(self, exam_id: int) -> ExamRowSet:
        exam = self._get_exam(exam_id)

        descriptions = (
            self.db.query(ExamDescription)
            .filter(ExamDescription.exam_id == exam_id)
            .order_by(ExamDescription.id)
            .all()
        )
        sections = self._scoped(self.db.query(Section), Section, exam_id).order_by(Section.id).all()
        questions = self._scoped(self.db.query(Question), Question, exam_id).order_by(Question.id).all()
        options = self._scoped(self.db.query(Option), Option, exam_id).order_by(Option.id).all()
        markers = (
            self._scoped(
                self.db.query(CorrectOption).join(Option, CorrectOption.option_id == Option.id),
                Option,
                exam_id,
            )
            .order_by(CorrectOption.option_id)
            .all()
        )

        return ExamRowSet(
            exam=ExamRow.model_validate(exam),
            descriptions=[ExamDescriptionRow.model_validate(d) for d in descriptions],
            sections=[SectionRow.model_validate(s) for s in sections],
            questions=[QuestionRow.model_validate(q) for q in questions],
            options=[OptionRow.model_validate(o) for o in options],
            correct_options=[CorrectOptionRow.model_validate(m) for m in markers],
        )

    # ============= Writes =============

    def create_exam(self, payload: ExamCreate) -> int:
        """
        Insert an exam with its descriptions, sections, questions and options.

        Args:
            payload: Full exam content

        Returns:
            New exam ID
        """
        exam = Exam()
        for description_data in payload.descriptions:
            description = ExamDescription(
                title=description_data.title,
                description=description_data.description,
                duration=description_data.duration,
                passing_score=description_data.passing_score,
            )
            for section_data in description_data.sections:
                section = Section(title=section_data.title)
                for question_data in section_data.questions:
                    question = Question(
                        text=question_data.text,
                        description=question_data.description,
                        marks=question_data.marks,
                    )
                    for option_data in question_data.options:
                        option = Option(text=option_data.text, is_correct=option_data.is_correct)
                        if option_data.marked_correct:
                            option.correct_marker = CorrectOption()
                        question.options.append(option)
                    section.questions.append(question)
                description.sections.append(section)
            exam.descriptions.append(description)

        try:
            self.db.add(exam)
            self.db.commit()
        except CONNECTIVITY_ERRORS as e:
            self._discard_transaction()
            logger.error(f"Content store unavailable while creating exam: {e}")
            raise StoreUnavailable(f"Content store unavailable: {e}") from e
        except Exception as e:
            self._discard_transaction()
            logger.error(f"Failed to create exam: {e}")
            raise

        logger.info(f"Created exam {exam.id}")
        return exam.id  # type: ignore

    def delete_exam(self, exam_id: int) -> None:
        """
        Delete an exam and everything it owns.

        Raises:
            NotFound: If the exam does not exist
        """
        try:
            exam = self._get_exam(exam_id)
            self.db.delete(exam)
            self.db.commit()
        except CONNECTIVITY_ERRORS as e:
            self._discard_transaction()
            logger.error(f"Content store unavailable while deleting exam {exam_id}: {e}")
            raise StoreUnavailable(f"Content store unavailable: {e}") from e
        except Exception:
            self._discard_transaction()
            raise

        logger.info(f"Deleted exam {exam_id}")

    def delete_entities(self, exam_id: int, request: DeleteIdsRequest) -> DeletedCounts:
        """
        Delete selected sections, questions and options of one exam.

        Every id must belong to the exam; otherwise nothing is deleted.

        Raises:
            NotFound: If the exam does not exist
            UnknownReference: If an id is not owned by the exam
        """
        try:
            self._get_exam(exam_id)
            targets = self._deletion_targets(exam_id, request)
            deleted = self._apply_deletions(targets)
            self.db.commit()
        except CONNECTIVITY_ERRORS as e:
            self._discard_transaction()
            logger.error(f"Content store unavailable while editing exam {exam_id}: {e}")
            raise StoreUnavailable(f"Content store unavailable: {e}") from e
        except Exception:
            self._discard_transaction()
            raise

        logger.info(
            f"Exam {exam_id}: deleted {deleted.sections} sections, "
            f"{deleted.questions} questions, {deleted.options} options"
        )
        return deleted

    def update_entities(self, exam_id: int, edit: ExamEdit) -> ExamEditResponse:
        """
        Update sections, questions and options of one exam, then apply the
        deletions in the same transaction.

        Every id, updated or deleted, must belong to the exam; otherwise
        nothing is changed. Content is not validated here; the next load
        reports any defect the edit introduced.

        Raises:
            NotFound: If the exam does not exist
            UnknownReference: If an id is not owned by the exam
        """
        try:
            self._get_exam(exam_id)
            sections = self._owned_by_id(Section, "section", exam_id, [s.id for s in edit.sections])
            questions = self._owned_by_id(Question, "question", exam_id, [q.id for q in edit.questions])
            options = self._owned_by_id(Option, "option", exam_id, [o.id for o in edit.options])
            targets = self._deletion_targets(exam_id, edit.delete)

            for change in edit.sections:
                sections[change.id].title = change.title
            for change in edit.questions:
                question = questions[change.id]
                question.text = change.text
                question.description = change.description
                question.marks = change.marks
            for change in edit.options:
                option = options[change.id]
                option.text = change.text
                option.is_correct = change.is_correct
            self.db.flush()

            updated = UpdatedCounts(
                sections=len(sections), questions=len(questions), options=len(options)
            )
            deleted = self._apply_deletions(targets)
            self.db.commit()
        except CONNECTIVITY_ERRORS as e:
            self._discard_transaction()
            logger.error(f"Content store unavailable while editing exam {exam_id}: {e}")
            raise StoreUnavailable(f"Content store unavailable: {e}") from e
        except Exception:
            self._discard_transaction()
            raise

        logger.info(
            f"Exam {exam_id}: updated {updated.sections} sections, "
            f"{updated.questions} questions, {updated.options} options"
        )
        return ExamEditResponse(updated=updated, deleted=deleted)

    # ============= Helpers =============

    def _get_exam(self, exam_id: int) -> Exam:
        exam = self.db.query(Exam).filter(Exam.id == exam_id).first()
        if exam is None:
            raise NotFound("exam", exam_id)
        return exam

    @staticmethod
    def _scoped(query: Query, model: Type, exam_id: int) -> Query:
        """Restrict a query on sections, questions or options to one exam."""
        if model is Option:
            query = query.join(Question, Option.question_id == Question.id)
        if model in (Option, Question):
            query = query.join(Section, Question.section_id == Section.id)
        return query.join(
            ExamDescription, Section.exam_description_id == ExamDescription.id
        ).filter(ExamDescription.exam_id == exam_id)

    def _owned(self, model: Type, kind: str, exam_id: int, ids: Iterable[int]) -> List:
        ids = list(dict.fromkeys(ids))
        if not ids:
            return []

        found = (
            self._scoped(self.db.query(model), model, exam_id)
            .filter(model.id.in_(ids))
            .order_by(model.id)
            .all()
        )

        found_ids = {record.id for record in found}
        for record_id in ids:
            if record_id not in found_ids:
                raise UnknownReference(kind, record_id, f"not part of exam {exam_id}")
        return found

    def _owned_by_id(self, model: Type, kind: str, exam_id: int, ids: Iterable[int]) -> Dict[int, object]:
        return {record.id: record for record in self._owned(model, kind, exam_id, ids)}

    def _deletion_targets(self, exam_id: int, request: DeleteIdsRequest) -> DeletionTargets:
        return (
            self._owned(Section, "section", exam_id, request.section_ids),
            self._owned(Question, "question", exam_id, request.question_ids),
            self._owned(Option, "option", exam_id, request.option_ids),
        )

    def _apply_deletions(self, targets: DeletionTargets) -> DeletedCounts:
        sections, questions, options = targets

        # Parents first; a child already removed by its parent's cascade is skipped
        deleted = DeletedCounts()
        for section in sections:
            self.db.delete(section)
            deleted.sections += 1
        self.db.flush()
        for question in questions:
            if self._still_present(question):
                self.db.delete(question)
                deleted.questions += 1
        self.db.flush()
        for option in options:
            if self._still_present(option):
                self.db.delete(option)
                deleted.options += 1
        self.db.flush()
        return deleted

    def _still_present(self, record) -> bool:
        return record in self.db and record not in self.db.deleted

    def _discard_transaction(self) -> None:
        """Roll back; a failure here must not mask the error being handled."""
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            logger.warning(f"Rollback failed: {e}")
