"""
Scoring engine.
Scores a candidate submission against a built exam aggregate.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, FrozenSet, Iterable, List, Mapping

from pydantic import BaseModel

from app.core.exam.aggregate import ExamAggregate, QuestionNode
from app.core.exceptions import UnknownReference

logger = logging.getLogger(__name__)

PERCENTAGE_QUANTUM = Decimal("0.01")

Submission = Mapping[int, Iterable[int]]


class QuestionScore(BaseModel):
    """Outcome for one question."""
    question_id: int
    section_id: int
    awarded_marks: int
    correct: bool


class DescriptionScore(BaseModel):
    """Outcome for one exam description."""
    description_id: int
    total_score: int
    max_score: int
    passing_score: int
    passed: bool


class ScoreResult(BaseModel):
    """Scored submission."""
    exam_id: int
    total_score: int
    max_score: int
    percentage: float
    passing_score: int
    passed: bool
    per_question: List[QuestionScore]
    per_description: List[DescriptionScore]


def round_percentage(total_score: int, max_score: int) -> float:
    """Percentage of max_score, rounded half-up to two decimal places."""
    if max_score == 0:
        return 0.0
    ratio = Decimal(total_score) * 100 / Decimal(max_score)
    return float(ratio.quantize(PERCENTAGE_QUANTUM, rounding=ROUND_HALF_UP))


class ScoringEngine:
    """
    All-or-nothing scorer.

    A question earns its marks only when the selected options equal its
    resolved-correct set exactly. Unanswered questions earn nothing. Any
    reference outside the exam rejects the whole submission.
    """

    def score(self, exam: ExamAggregate, submission: Submission) -> ScoreResult:
        """
        Score a submission.

        Args:
            exam: Built exam aggregate
            submission: question_id -> selected option ids

        Returns:
            ScoreResult with per-question outcomes in authoring order

        Raises:
            UnknownReference: If a question or option id is not part of the exam
        """
        selections = self._normalize(exam, submission)

        per_question = []
        per_description = []
        for description in exam.descriptions:
            description_total = 0
            for question in description.iter_questions():
                correct = self._is_correct(question, selections.get(question.id))
                awarded = question.marks if correct else 0
                description_total += awarded
                per_question.append(
                    QuestionScore(
                        question_id=question.id,
                        section_id=question.section_id,
                        awarded_marks=awarded,
                        correct=correct,
                    )
                )
            per_description.append(
                DescriptionScore(
                    description_id=description.id,
                    total_score=description_total,
                    max_score=description.max_score,
                    passing_score=description.passing_score,
                    passed=description_total >= description.passing_score,
                )
            )

        total_score = sum(entry.awarded_marks for entry in per_question)
        max_score = exam.max_score
        passing_score = exam.passing_score
        result = ScoreResult(
            exam_id=exam.id,
            total_score=total_score,
            max_score=max_score,
            percentage=round_percentage(total_score, max_score),
            passing_score=passing_score,
            passed=total_score >= passing_score,
            per_question=per_question,
            per_description=per_description,
        )

        logger.info(
            f"Scored exam {exam.id}: {total_score}/{max_score} "
            f"({result.percentage}%), passed={result.passed}"
        )
        return result

    def _normalize(self, exam: ExamAggregate, submission: Submission) -> Dict[int, FrozenSet[int]]:
        """Validate every reference before any scoring happens."""
        questions = {question.id: question for question in exam.iter_questions()}

        selections = {}
        for question_id, option_ids in submission.items():
            question = questions.get(question_id)
            if question is None:
                logger.warning(f"Rejected submission for exam {exam.id}: unknown question {question_id}")
                raise UnknownReference("question", question_id)

            selected = frozenset(option_ids)
            unknown = selected - question.option_ids
            if unknown:
                option_id = min(unknown)
                logger.warning(
                    f"Rejected submission for exam {exam.id}: option {option_id} "
                    f"is not an option of question {question_id}"
                )
                raise UnknownReference("option", option_id, f"question {question_id}")
            selections[question_id] = selected
        return selections

    @staticmethod
    def _is_correct(question: QuestionNode, selected) -> bool:
        if selected is None:
            return False
        return selected == question.correct_option_ids
