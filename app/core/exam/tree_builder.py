"""
Exam tree builder.
Assembles a validated ExamAggregate from the flat rows of one exam snapshot.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Set, Tuple

from app.core.exam.aggregate import (
    DescriptionNode,
    ExamAggregate,
    OptionNode,
    QuestionNode,
    SectionNode,
)
from app.core.exam.rows import (
    ExamDescriptionRow,
    ExamRowSet,
    OptionRow,
    QuestionRow,
    SectionRow,
)
from app.core.exceptions import (
    ImpossiblePassingScore,
    InconsistentCorrectness,
    MalformedDescription,
    MalformedQuestion,
    MalformedSection,
    OrphanedRecord,
)

logger = logging.getLogger(__name__)

MIN_OPTIONS_PER_QUESTION = 2


class ExamTreeBuilder:
    """
    Builds the exam aggregate from an ExamRowSet.

    Building is all-or-nothing: the first structural violation raises a
    ContentDefect and no aggregate is returned. Row order is kept at every
    level; nothing is re-sorted.
    """

    def build(self, rows: ExamRowSet) -> ExamAggregate:
        """
        Build and validate the aggregate.

        Args:
            rows: Every row owned by one exam

        Returns:
            ExamAggregate

        Raises:
            ContentDefect: On the first structural violation found
        """
        sections_by_description = self._group_sections(rows)
        questions_by_section = self._group_questions(rows)
        options_by_question = self._group_options(rows)
        marked_option_ids = self._marked_option_ids(rows)

        descriptions = []
        for description_row in rows.descriptions:
            if description_row.exam_id != rows.exam.id:
                raise OrphanedRecord("exam description", description_row.id, description_row.exam_id)
            descriptions.append(
                self._build_description(
                    description_row,
                    sections_by_description,
                    questions_by_section,
                    options_by_question,
                    marked_option_ids,
                )
            )

        exam = ExamAggregate(id=rows.exam.id, descriptions=tuple(descriptions))
        if not exam.is_publishable:
            logger.warning(f"Exam {exam.id} has no description and is incomplete for publishing")
        return exam

    # ============= Grouping =============

    def _group_sections(self, rows: ExamRowSet) -> Dict[int, List[SectionRow]]:
        known = {description.id for description in rows.descriptions}
        grouped: Dict[int, List[SectionRow]] = defaultdict(list)
        for section in rows.sections:
            if section.exam_description_id not in known:
                raise OrphanedRecord("section", section.id, section.exam_description_id)
            grouped[section.exam_description_id].append(section)
        return grouped

    def _group_questions(self, rows: ExamRowSet) -> Dict[int, List[QuestionRow]]:
        known = {section.id for section in rows.sections}
        grouped: Dict[int, List[QuestionRow]] = defaultdict(list)
        for question in rows.questions:
            if question.section_id not in known:
                raise OrphanedRecord("question", question.id, question.section_id)
            grouped[question.section_id].append(question)
        return grouped

    def _group_options(self, rows: ExamRowSet) -> Dict[int, List[OptionRow]]:
        known = {question.id for question in rows.questions}
        grouped: Dict[int, List[OptionRow]] = defaultdict(list)
        for option in rows.options:
            if option.question_id not in known:
                raise OrphanedRecord("option", option.id, option.question_id)
            grouped[option.question_id].append(option)
        return grouped

    def _marked_option_ids(self, rows: ExamRowSet) -> Set[int]:
        known = {option.id for option in rows.options}
        marked = set()
        for marker in rows.correct_options:
            if marker.option_id not in known:
                raise OrphanedRecord("correct-option marker", marker.option_id, marker.option_id)
            marked.add(marker.option_id)
        return marked

    # ============= Node construction =============

    def _build_description(
        self,
        row: ExamDescriptionRow,
        sections_by_description: Dict[int, List[SectionRow]],
        questions_by_section: Dict[int, List[QuestionRow]],
        options_by_question: Dict[int, List[OptionRow]],
        marked_option_ids: Set[int],
    ) -> DescriptionNode:
        if row.duration <= 0:
            raise MalformedDescription(row.id, f"duration must be positive, got {row.duration}")

        sections = []
        for section_row in sections_by_description.get(row.id, []):
            if not section_row.title.strip():
                raise MalformedSection(section_row.id, "title is empty")
            questions = tuple(
                self._build_question(question_row, options_by_question, marked_option_ids)
                for question_row in questions_by_section.get(section_row.id, [])
            )
            sections.append(SectionNode(id=section_row.id, title=section_row.title, questions=questions))

        node = DescriptionNode(
            id=row.id,
            title=row.title,
            description=row.description,
            duration=row.duration,
            passing_score=row.passing_score,
            sections=tuple(sections),
        )
        if not 0 <= row.passing_score <= node.max_score:
            raise ImpossiblePassingScore(row.id, row.passing_score, node.max_score)
        return node

    def _build_question(
        self,
        row: QuestionRow,
        options_by_question: Dict[int, List[OptionRow]],
        marked_option_ids: Set[int],
    ) -> QuestionNode:
        # Correctness is resolved before any shape check
        option_rows = options_by_question.get(row.id, [])
        options, correct_ids = self._resolve_options(row.id, option_rows, marked_option_ids)

        if row.marks <= 0:
            raise MalformedQuestion(row.id, f"marks must be positive, got {row.marks}")
        if len(option_rows) < MIN_OPTIONS_PER_QUESTION:
            raise MalformedQuestion(
                row.id, f"needs at least {MIN_OPTIONS_PER_QUESTION} options, has {len(option_rows)}"
            )
        if not correct_ids:
            raise MalformedQuestion(row.id, "no option resolves to correct")

        return QuestionNode(
            id=row.id,
            section_id=row.section_id,
            text=row.text,
            description=row.description,
            marks=row.marks,
            options=options,
            correct_option_ids=frozenset(correct_ids),
        )

    def _resolve_options(
        self,
        question_id: int,
        option_rows: List[OptionRow],
        marked_option_ids: Set[int],
    ) -> Tuple[Tuple[OptionNode, ...], List[int]]:
        """
        Reconcile the is_correct flag with the marker table.

        An option is correct when flagged true or marked. A marker on an
        option flagged false is rejected instead of picking a winner.
        """
        options = []
        correct_ids = []
        for option_row in option_rows:
            marked = option_row.id in marked_option_ids
            if marked and option_row.is_correct is False:
                raise InconsistentCorrectness(question_id, option_row.id)

            correct = option_row.is_correct is True or marked
            if correct:
                correct_ids.append(option_row.id)
            options.append(
                OptionNode(
                    id=option_row.id,
                    text=option_row.text,
                    is_correct=option_row.is_correct,
                    correct=correct,
                )
            )
        return tuple(options), correct_ids
