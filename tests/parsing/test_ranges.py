"""
Unit Tests for exam-range Expressions
"""

from cbt_toolkit.core.models import TrueFalseQuestion
from cbt_toolkit.parsing import apply_exam_range, parse_exam_range


class TestParseExamRange:

    def test_parse_when_mixed_tokens_then_sorted_unique_orders(self):
        selection = parse_exam_range("3, 1-2, 2", 5)

        assert selection.orders == (1, 2, 3)
        assert selection.is_valid

    def test_parse_when_spaces_around_dash_then_span(self):
        assert parse_exam_range("2 - 4", 5).orders == (2, 3, 4)

    def test_parse_when_end_beyond_count_then_error(self):
        selection = parse_exam_range("4-9", 5)

        assert selection.errors == ("Question 9 does not exist (the quiz has 5 questions).",)
        assert not selection.is_valid

    def test_parse_when_zero_then_error(self):
        assert parse_exam_range("0", 5).errors == ("Question numbers start at 1 (got 0).",)

    def test_parse_when_reversed_span_then_error(self):
        assert parse_exam_range("3-1", 5).errors == ("Range '3-1' starts after it ends.",)

    def test_parse_when_not_a_number_then_error(self):
        assert parse_exam_range("abc", 5).errors == ("'abc' is not a question number or range.",)

    def test_parse_when_empty_then_error(self):
        assert parse_exam_range(" , ", 5).errors == ("The exam range does not select any questions.",)

    def test_parse_when_some_tokens_bad_then_all_errors_reported(self):
        selection = parse_exam_range("1, x, 7", 3)

        assert len(selection.errors) == 2
        assert selection.orders == (1,)
        assert not selection.is_valid


class TestApplyExamRange:

    def _questions(self, count):
        return [TrueFalseQuestion(id=f"q{i}", order=i, question_text=f"S{i}") for i in range(1, count + 1)]

    def test_apply_when_valid_then_filters_by_order(self):
        selected, errors = apply_exam_range(self._questions(4), "1, 4")

        assert [q.id for q in selected] == ["q1", "q4"]
        assert errors == ()

    def test_apply_when_invalid_then_full_list_and_errors(self):
        selected, errors = apply_exam_range(self._questions(2), "5")

        assert len(selected) == 2
        assert errors
