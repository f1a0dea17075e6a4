"""
Unit Tests for the Quiz Markup Parser

Covers the line grammar, per-variant answer keys, finalization rules and
advisory errors.
"""

import pytest

from cbt_toolkit.core.models import (
    DEFAULT_TITLE,
    NO_CORRECT_INDEX,
    FillInBlankQuestion,
    MatchingQuestion,
    MatchPair,
    MultipleChoiceQuestion,
    SelectAllQuestion,
    TextAnswerQuestion,
    TrueFalseQuestion,
    generate_question_id,
)
from cbt_toolkit.parsing import parse_quiz


class TestParseQuizBasics:
    """Tests for whole-document parsing."""

    def test_parse_when_mc_and_tf_then_two_questions(self):
        """The canonical two-question document."""
        content = "@mc What is 2+2?\na) 3\nb) 4\n=b\n\n@tf Sky is blue.\n=true"

        exam = parse_quiz(content)

        assert len(exam.questions) == 2
        mc, tf = exam.questions
        assert isinstance(mc, MultipleChoiceQuestion)
        assert mc.correct_index == 1
        assert mc.options == ("3", "4")
        assert mc.option_labels == ("a)", "b)")
        assert isinstance(tf, TrueFalseQuestion)
        assert tf.is_true is True

    def test_parse_when_headers_then_orders_are_one_based(self):
        exam = parse_quiz("@tf One\n=true\n@tf Two\n=false")

        assert [q.order for q in exam.questions] == [1, 2]

    def test_parse_when_header_then_id_hashes_text_and_line_index(self):
        exam = parse_quiz("# Heading\n@sa Name the gas\n=oxygen")

        assert exam.questions[0].id == generate_question_id("Name the gas1")

    def test_parse_when_no_frontmatter_then_default_title(self):
        exam = parse_quiz("@tf A\n=true", source_path="quiz.md")

        assert exam.title == DEFAULT_TITLE
        assert exam.source_path == "quiz.md"
        assert exam.full_questions is None

    def test_parse_when_crlf_line_endings_then_same_result(self):
        exam = parse_quiz("@mc Pick\r\na) x\r\nb) y\r\n=a\r\n")

        assert exam.questions[0].options == ("x", "y")
        assert exam.questions[0].correct_index == 0

    def test_parse_when_numbered_header_then_prefix_dropped(self):
        exam = parse_quiz("@tf 3. Water is wet.\n=true\n@tf 4) Fire is cold.\n=false")

        assert exam.questions[0].question_text == "Water is wet."
        assert exam.questions[1].question_text == "Fire is cold."

    def test_parse_when_lines_before_first_header_then_ignored(self):
        exam = parse_quiz("Intro prose\nmore prose\n@tf A\n=true")

        assert len(exam.questions) == 1
        assert exam.questions[0].question_text == "A"

    def test_parse_when_empty_document_then_no_questions(self):
        assert parse_quiz("").questions == ()


class TestChoiceQuestions:
    """Tests for MC and SATA options, keys and label validation."""

    def test_parse_when_text_before_options_then_joined(self):
        exam = parse_quiz("@mc Capital of France?\nChoose one.\na) Paris\nb) Rome\n=a")

        assert exam.questions[0].question_text == "Capital of France?\nChoose one."

    def test_parse_when_text_after_options_then_dropped(self):
        exam = parse_quiz("@mc Pick\na) x\nstray line\nb) y\n=b")

        question = exam.questions[0]
        assert question.question_text == "Pick"
        assert question.options == ("x", "y")

    def test_parse_when_dot_separator_then_option(self):
        exam = parse_quiz("@mc Pick\na. x\nb. y\n=B")

        assert exam.questions[0].option_labels == ("a.", "b.")
        assert exam.questions[0].correct_index == 1

    def test_parse_when_no_answer_key_then_no_correct_index_without_error(self):
        exam = parse_quiz("@mc Pick\na) x\nb) y")

        question = exam.questions[0]
        assert question.correct_index == NO_CORRECT_INDEX
        assert question.error is None

    def test_parse_when_key_unresolvable_then_advisory_error(self):
        exam = parse_quiz("@mc Pick\na) x\nb) y\n=z")

        question = exam.questions[0]
        assert question.correct_index == NO_CORRECT_INDEX
        assert question.error == "Correct answer label 'z' does not match any existing options."

    def test_parse_when_uppercase_label_then_invalid_label_error(self):
        exam = parse_quiz("@mc Pick\nA) x\nb) y\n=b")

        question = exam.questions[0]
        assert question.error == "Invalid option label 'A'. Labels must be lowercase 'a' through 'z'."
        assert question.correct_index == 1

    def test_parse_when_duplicate_label_then_error_and_later_wins(self):
        exam = parse_quiz("@mc Pick\na) x\na) y\n=a")

        question = exam.questions[0]
        assert question.error == "Duplicate option label 'a' found. Each option must have a unique label."
        assert question.correct_index == 1

    def test_parse_when_too_many_options_then_first_error_only(self):
        letters = "abcdefghijklmnopqrstuvwxyz"
        options = "\n".join(f"{label}) option {label}" for label in list(letters) + ["aa"])

        exam = parse_quiz(f"@mc Pick\n{options}\n=a")

        question = exam.questions[0]
        assert len(question.options) == 27
        assert question.errors == (
            "Question has more than 26 options. Maximum allowed is 26 (a-z).",
        )

    def test_parse_when_sata_key_then_indices(self):
        exam = parse_quiz("@sata Primes?\na) 2\nb) 4\nc) 5\n=a, C")

        question = exam.questions[0]
        assert isinstance(question, SelectAllQuestion)
        assert question.correct_indices == (0, 2)
        assert question.error is None

    def test_parse_when_sata_key_partly_unresolvable_then_keeps_resolved(self):
        exam = parse_quiz("@sata Primes?\na) 2\nb) 4\n=a,x")

        question = exam.questions[0]
        assert question.correct_indices == (0,)
        assert question.error == "Correct answer label 'x' does not match any existing options."


class TestOtherVariants:
    """Tests for TF, FIB, MATCH, SA and LA."""

    def test_parse_when_tf_key_not_true_then_false(self):
        exam = parse_quiz("@tf Sky is green.\n=False")

        assert exam.questions[0].is_true is False

    def test_parse_when_tf_key_uppercase_true_then_true(self):
        exam = parse_quiz("@tf Sky is blue.\n= TRUE")

        assert exam.questions[0].is_true is True

    def test_parse_when_fib_then_segments_and_answers(self):
        exam = parse_quiz("@fib The `____` barks.\n=dog")

        question = exam.questions[0]
        assert isinstance(question, FillInBlankQuestion)
        assert question.segments == ("The ", " barks.")
        assert question.correct_answers == ("dog",)
        assert question.blank_count == 1

    def test_parse_when_fib_multiple_answers_then_split_on_commas(self):
        exam = parse_quiz("@fib `_` plus `___` is four.\n=two, two")

        question = exam.questions[0]
        assert question.segments == ("", " plus ", " is four.")
        assert question.correct_answers == ("two", "two")

    def test_parse_when_fib_without_key_then_segments_from_text(self):
        exam = parse_quiz("@fib A `__` b")

        question = exam.questions[0]
        assert question.segments == ("A ", " b")
        assert question.correct_answers == ()

    def test_parse_when_match_then_identity_pairs(self):
        content = "@match Match capitals\nFrance | Paris\nItaly|Rome\n=b, a"

        question = parse_quiz(content).questions[0]

        assert isinstance(question, MatchingQuestion)
        assert question.left_items == ("France", "Italy")
        assert question.right_items == ("Paris", "Rome")
        assert question.pairs == (MatchPair(0, 0), MatchPair(1, 1))

    def test_parse_when_match_has_prose_then_joined_to_text(self):
        question = parse_quiz("@match Match them\nCarefully.\na | 1").questions[0]

        assert question.question_text == "Match them\nCarefully."

    def test_parse_when_match_without_pairs_then_dropped(self):
        exam = parse_quiz("@match Nothing to match\njust prose\n@tf Next\n=true")

        assert len(exam.questions) == 1
        assert isinstance(exam.questions[0], TrueFalseQuestion)
        assert exam.questions[0].order == 1

    def test_parse_when_sa_then_reference_answer(self):
        question = parse_quiz("@sa Name the gas\nwe breathe.\n=Oxygen").questions[0]

        assert isinstance(question, TextAnswerQuestion)
        assert question.question_text == "Name the gas\nwe breathe."
        assert question.correct_answer_text == "Oxygen"
        assert not question.long_form

    def test_parse_when_la_then_long_form(self):
        question = parse_quiz("@la Explain osmosis\n=Water moves across a membrane").questions[0]

        assert question.long_form
        assert question.correct_answer_text == "Water moves across a membrane"


class TestUnknownKeywords:
    """Tests for headers with unrecognized keywords."""

    def test_parse_when_unknown_keyword_then_no_question(self):
        exam = parse_quiz("@essay Write about cells\nat length\n@tf A\n=true")

        assert len(exam.questions) == 1
        assert exam.questions[0].question_text == "A"

    def test_parse_when_unknown_keyword_then_previous_question_finalized(self):
        exam = parse_quiz("@sa Name\n=Bob\n@essay Something\nextra line")

        assert len(exam.questions) == 1
        assert exam.questions[0].question_text == "Name"
        assert exam.questions[0].correct_answer_text == "Bob"


class TestFrontmatterAndRange:
    """Tests for frontmatter settings and exam-range filtering."""

    def test_parse_when_frontmatter_then_config_populated(self):
        content = (
            "---\nquiz-title: \"Cell Biology\"\ntime-limit: 30\npass-score: 80\n"
            "shuffle: true\nshow-answer: false\n---\n@tf A\n=true"
        )

        exam = parse_quiz(content)

        assert exam.title == "Cell Biology"
        assert exam.config.time_limit_minutes == 30
        assert exam.config.pass_threshold == pytest.approx(0.8)
        assert exam.config.shuffle_questions is True
        assert exam.config.show_answer is False
        assert len(exam.questions) == 1

    def test_parse_when_valid_range_then_subset_with_full_set(self):
        content = "---\nexam-range: 2-3\n---\n" + "\n".join(
            f"@tf Statement {i}\n=true" for i in range(1, 5)
        )

        exam = parse_quiz(content)

        assert [q.order for q in exam.questions] == [2, 3]
        assert len(exam.full_questions) == 4
        assert not exam.config.has_range_errors

    def test_parse_when_invalid_range_then_full_set_with_errors(self):
        content = "---\nexam-range: 9\n---\n@tf A\n=true\n@tf B\n=false"

        exam = parse_quiz(content)

        assert len(exam.questions) == 2
        assert exam.full_questions is None
        assert exam.config.range_errors == (
            "Question 9 does not exist (the quiz has 2 questions).",
        )


class TestByteOrderMark:
    """Tests for documents saved with a leading UTF-8 byte order mark."""

    def test_parse_when_bom_before_first_header_then_question_kept(self):
        exam = parse_quiz("\ufeff@mc What is 2+2?\na) 3\nb) 4\n=b\n@tf Sky is blue.\n=true")

        assert len(exam.questions) == 2
        assert isinstance(exam.questions[0], MultipleChoiceQuestion)
        assert exam.questions[0].correct_index == 1

    def test_parse_when_bom_then_ids_match_unmarked_document(self):
        content = "@sa Name the gas\n=oxygen"

        assert parse_quiz("\ufeff" + content).questions[0].id == parse_quiz(content).questions[0].id

    def test_parse_when_bom_before_frontmatter_then_settings_read(self):
        exam = parse_quiz("\ufeff---\ntime-limit: 5\n---\n@tf A\n=true")

        assert exam.config.time_limit_minutes == 5
        assert len(exam.questions) == 1
