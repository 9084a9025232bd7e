"""
Tests for core.exam.scoring

Test Coverage:
- ScoringEngine.score(): all-or-nothing marking, missing answers, totals
- Reference validation: unknown questions and options reject the submission
- round_percentage(): half-up rounding to two decimals
"""
import pytest

from app.core.exam.rows import ExamDescriptionRow, ExamRowSet, QuestionRow, SectionRow, OptionRow
from app.core.exam.scoring import ScoringEngine, round_percentage
from app.core.exam.tree_builder import ExamTreeBuilder
from app.core.exceptions import UnknownReference


@pytest.fixture
def engine():
    return ScoringEngine()


@pytest.fixture
def scenario_exam(scenario_rows):
    return ExamTreeBuilder().build(scenario_rows)


@pytest.fixture
def multi_select_exam(row_factory):
    """One 2-mark question with options 1 and 2 correct, 3 wrong."""
    rows = row_factory(questions=[(500, 2, [(1, True), (2, None), (3, False)])], markers=[2], passing_score=2)
    return ExamTreeBuilder().build(rows)


class TestScenario:
    """Passing score 5; questions worth 3 and 4."""

    def test_score_when_first_question_only_then_fails(self, engine, scenario_exam):
        result = engine.score(scenario_exam, {1000: {1}})

        assert result.total_score == 3
        assert result.max_score == 7
        assert result.percentage == 42.86
        assert result.passed is False

    def test_score_when_both_correct_then_passes(self, engine, scenario_exam):
        result = engine.score(scenario_exam, {1000: {1}, 1001: {4}})

        assert result.total_score == 7
        assert result.percentage == 100.0
        assert result.passed is True

    def test_score_when_threshold_met_exactly_then_passes(self, engine, row_factory):
        exam = ExamTreeBuilder().build(row_factory(passing_score=4))

        result = engine.score(exam, {1001: [4]})

        assert result.total_score == 4
        assert result.passed is True

    def test_score_when_full_marks_then_total_equals_max(self, engine, scenario_exam):
        submission = {q.id: q.correct_option_ids for q in scenario_exam.iter_questions()}

        result = engine.score(scenario_exam, submission)

        assert result.total_score == result.max_score
        assert result.passed is True


class TestAllOrNothing:
    """No partial credit for multi-select questions."""

    def test_score_when_exact_set_then_correct(self, engine, multi_select_exam):
        result = engine.score(multi_select_exam, {500: [2, 1]})
        assert result.per_question[0].correct is True
        assert result.total_score == 2

    @pytest.mark.parametrize("selection", [[1], [2], [1, 2, 3], [3]])
    def test_score_when_subset_or_superset_then_incorrect(self, engine, multi_select_exam, selection):
        result = engine.score(multi_select_exam, {500: selection})

        assert result.per_question[0].correct is False
        assert result.per_question[0].awarded_marks == 0
        assert result.total_score == 0

    def test_score_when_duplicate_selection_then_treated_as_set(self, engine, multi_select_exam):
        result = engine.score(multi_select_exam, {500: [1, 1, 2]})
        assert result.total_score == 2


class TestMissingAnswers:

    def test_score_when_question_missing_then_zero_marks(self, engine, scenario_exam):
        result = engine.score(scenario_exam, {1001: {4}})

        first = result.per_question[0]
        assert first.question_id == 1000
        assert first.awarded_marks == 0
        assert first.correct is False

    def test_score_when_empty_submission_then_zero(self, engine, scenario_exam):
        result = engine.score(scenario_exam, {})

        assert result.total_score == 0
        assert result.percentage == 0.0
        assert result.passed is False
        assert len(result.per_question) == 2

    def test_score_when_empty_selection_then_incorrect(self, engine, scenario_exam):
        result = engine.score(scenario_exam, {1000: []})
        assert result.per_question[0].correct is False


class TestUnknownReferences:
    """A bad reference rejects the whole submission."""

    def test_score_when_unknown_question_then_raises(self, engine, scenario_exam):
        with pytest.raises(UnknownReference) as exc_info:
            engine.score(scenario_exam, {1000: {1}, 9999: {1}})

        assert exc_info.value.kind == "question"
        assert exc_info.value.reference_id == 9999

    def test_score_when_unknown_option_then_raises(self, engine, scenario_exam):
        with pytest.raises(UnknownReference) as exc_info:
            engine.score(scenario_exam, {1000: {1, 42}})

        assert exc_info.value.kind == "option"
        assert exc_info.value.reference_id == 42

    def test_score_when_option_of_other_question_then_raises(self, engine, scenario_exam):
        """Option 4 exists but belongs to question 1001."""
        with pytest.raises(UnknownReference) as exc_info:
            engine.score(scenario_exam, {1000: {4}})

        assert exc_info.value.reference_id == 4


class TestReportShape:

    def test_per_question_when_submitted_out_of_order_then_authoring_order(self, engine, scenario_exam):
        result = engine.score(scenario_exam, {1001: {4}, 1000: {2}})

        assert [entry.question_id for entry in result.per_question] == [1000, 1001]
        assert [entry.awarded_marks for entry in result.per_question] == [0, 4]
        assert all(entry.section_id == 100 for entry in result.per_question)

    def test_per_description_when_two_descriptions_then_scored_separately(self, engine, scenario_rows):
        rows = ExamRowSet(
            exam=scenario_rows.exam,
            descriptions=scenario_rows.descriptions
            + [ExamDescriptionRow(id=11, exam_id=1, title="Part two", duration=15, passing_score=1)],
            sections=scenario_rows.sections
            + [SectionRow(id=101, exam_description_id=11, title="Grammar")],
            questions=scenario_rows.questions
            + [QuestionRow(id=1002, section_id=101, text="Question 1002", marks=1)],
            options=scenario_rows.options
            + [
                OptionRow(id=5, question_id=1002, text="Option 5", is_correct=True),
                OptionRow(id=6, question_id=1002, text="Option 6", is_correct=False),
            ],
        )
        exam = ExamTreeBuilder().build(rows)

        result = engine.score(exam, {1000: {1}, 1002: {5}})

        assert result.max_score == 8
        assert result.passing_score == 6
        assert result.total_score == 4
        assert result.passed is False
        first, second = result.per_description
        assert (first.description_id, first.total_score, first.max_score, first.passed) == (10, 3, 7, False)
        assert (second.description_id, second.total_score, second.max_score, second.passed) == (11, 1, 1, True)

    def test_score_when_called_twice_then_same_result(self, engine, scenario_exam):
        submission = {1000: {1}}
        assert engine.score(scenario_exam, submission) == engine.score(scenario_exam, submission)


class TestRoundPercentage:

    @pytest.mark.parametrize(
        "total, maximum, expected",
        [
            (3, 7, 42.86),
            (1, 3, 33.33),
            (2, 3, 66.67),
            (1, 800, 0.13),  # 0.125 rounds half-up, not to even
            (7, 7, 100.0),
            (0, 7, 0.0),
            (0, 0, 0.0),
        ],
    )
    def test_round_percentage_when_values_given_then_half_up(self, total, maximum, expected):
        assert round_percentage(total, maximum) == expected
