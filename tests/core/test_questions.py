"""
Unit Tests for Question Models

Tests for question variants, id generation and the exam definition.
"""

import pytest

from cbt_toolkit.core.models import (
    ExamConfig,
    ExamDefinition,
    MatchingQuestion,
    MatchPair,
    MultipleChoiceQuestion,
    QuestionType,
    TextAnswerQuestion,
    TrueFalseQuestion,
    generate_question_id,
    question_type_of,
)


class TestGenerateQuestionId:
    """Tests for the rolling-hash question id."""

    def test_generate_when_single_char_then_base36_of_code(self):
        """'a' hashes to 97, which is '2p' in base 36."""
        assert generate_question_id("a") == "2p"

    def test_generate_when_empty_then_zero(self):
        assert generate_question_id("") == "0"

    def test_generate_when_same_text_then_same_id(self):
        """Ids are deterministic."""
        assert generate_question_id("What is 2+2?0") == generate_question_id("What is 2+2?0")

    def test_generate_when_line_index_differs_then_ids_differ(self):
        assert generate_question_id("Same text0") != generate_question_id("Same text5")

    def test_generate_when_long_text_then_lowercase_base36(self):
        """Overflowing hashes stay within 32 bits and encode to base 36."""
        question_id = generate_question_id("A considerably longer question text" * 10)

        assert question_id
        assert set(question_id) <= set("0123456789abcdefghijklmnopqrstuvwxyz")
        assert int(question_id, 36) <= 2 ** 31


class TestQuestionType:
    """Tests for keyword mapping."""

    @pytest.mark.parametrize("keyword,expected", [
        ("mc", QuestionType.MULTIPLE_CHOICE),
        ("SATA", QuestionType.SELECT_ALL),
        ("tf", QuestionType.TRUE_FALSE),
        ("fib", QuestionType.FILL_IN_BLANK),
        ("match", QuestionType.MATCHING),
        ("sa", QuestionType.SHORT_ANSWER),
        ("la", QuestionType.LONG_ANSWER),
    ])
    def test_from_keyword_when_known_then_maps_variant(self, keyword, expected):
        assert QuestionType.from_keyword(keyword) is expected

    def test_from_keyword_when_unknown_then_none(self):
        assert QuestionType.from_keyword("essay") is None

    def test_has_options_when_choice_types_then_true(self):
        assert QuestionType.MULTIPLE_CHOICE.has_options
        assert QuestionType.SELECT_ALL.has_options
        assert not QuestionType.MATCHING.has_options


class TestQuestionVariants:
    """Tests for variant invariants."""

    def test_error_when_no_errors_then_none(self):
        question = TrueFalseQuestion(id="x", order=1, question_text="Sky is blue.", is_true=True)

        assert question.error is None
        assert question.is_valid

    def test_error_when_errors_then_first(self):
        question = MultipleChoiceQuestion(
            id="x", order=1, question_text="Q", errors=("first", "second")
        )

        assert question.error == "first"
        assert not question.is_valid
        assert not question.has_correct_option

    def test_matching_when_lengths_differ_then_raises(self):
        with pytest.raises(ValueError, match="left items"):
            MatchingQuestion(
                id="m", order=1, question_text="Match",
                left_items=("a", "b"), right_items=("1",),
            )

    def test_matching_when_pair_out_of_range_then_raises(self):
        with pytest.raises(ValueError, match="out of range"):
            MatchingQuestion(
                id="m", order=1, question_text="Match",
                left_items=("a",), right_items=("1",), pairs=(MatchPair(0, 1),),
            )

    def test_aligned_when_raw_pairs_then_identity_pairing(self):
        question = MatchingQuestion.aligned(
            "m", 1, "Match capitals", (("France", "Paris"), ("Italy", "Rome"))
        )

        assert question.left_items == ("France", "Italy")
        assert question.right_items == ("Paris", "Rome")
        assert question.pairs == (MatchPair(0, 0), MatchPair(1, 1))

    def test_question_type_of_when_long_form_then_la(self):
        question = TextAnswerQuestion(id="t", order=1, question_text="Explain", long_form=True)

        assert question_type_of(question) is QuestionType.LONG_ANSWER

    def test_question_type_of_when_short_form_then_sa(self):
        question = TextAnswerQuestion(id="t", order=1, question_text="Name it")

        assert question_type_of(question) is QuestionType.SHORT_ANSWER


class TestExamDefinition:
    """Tests for subset handling on ExamDefinition."""

    @pytest.fixture
    def definition(self) -> ExamDefinition:
        questions = tuple(
            TrueFalseQuestion(id=f"q{i}", order=i, question_text=f"Statement {i}")
            for i in range(1, 4)
        )
        return ExamDefinition(title="Quiz", source_path="quiz.md", questions=questions)

    def test_with_questions_when_subset_then_keeps_full_set(self, definition):
        subset = definition.with_questions(definition.questions[:1])

        assert [q.id for q in subset.questions] == ["q1"]
        assert [q.id for q in subset.all_questions] == ["q1", "q2", "q3"]
        assert subset.is_subset

    def test_as_full_exam_when_subset_then_restores_all(self, definition):
        full = definition.with_questions(definition.questions[1:]).as_full_exam()

        assert len(full.questions) == 3
        assert not full.is_subset

    def test_get_question_when_outside_active_subset_then_found(self, definition):
        subset = definition.with_questions(definition.questions[:1])

        assert subset.get_question("q3").order == 3
        assert subset.get_question("missing") is None

    def test_config_when_threshold_out_of_range_then_raises(self):
        with pytest.raises(ValueError):
            ExamConfig(pass_threshold=1.5)
