"""
Unit Tests for Frontmatter Parsing
"""

import pytest

from cbt_toolkit.parsing import parse_frontmatter


class TestParseFrontmatter:

    def test_parse_when_no_block_then_all_unset(self):
        frontmatter = parse_frontmatter("@tf A\n=true")

        assert frontmatter.title is None
        assert frontmatter.time_limit_minutes is None
        assert frontmatter.pass_threshold is None
        assert frontmatter.shuffle is None
        assert frontmatter.show_answer is None
        assert frontmatter.exam_range is None

    def test_parse_when_block_not_leading_then_ignored(self):
        frontmatter = parse_frontmatter("intro\n---\nquiz-title: Late\n---\n")

        assert frontmatter.title is None

    def test_parse_when_pass_score_then_fraction(self):
        frontmatter = parse_frontmatter("---\npass-score: 75\n---\n")

        assert frontmatter.pass_threshold == pytest.approx(0.75)

    def test_parse_when_pass_score_above_100_then_ignored(self):
        frontmatter = parse_frontmatter("---\npass-score: 150\n---\n")

        assert frontmatter.pass_threshold is None

    def test_parse_when_single_quoted_title_then_quotes_removed(self):
        frontmatter = parse_frontmatter("---\nquiz-title: 'Enzymes'\n---\n")

        assert frontmatter.title == "Enzymes"

    def test_parse_when_flags_then_booleans(self):
        frontmatter = parse_frontmatter("---\nshuffle: false\nshow-answer: true\n---\n")

        assert frontmatter.shuffle is False
        assert frontmatter.show_answer is True

    def test_parse_when_flag_not_boolean_then_unset(self):
        frontmatter = parse_frontmatter("---\nshuffle: maybe\n---\n")

        assert frontmatter.shuffle is None

    def test_parse_when_unknown_keys_then_ignored(self):
        frontmatter = parse_frontmatter("---\nauthor: me\ntime-limit: 15\n---\n")

        assert frontmatter.time_limit_minutes == 15

    def test_parse_when_exam_range_then_raw_expression(self):
        frontmatter = parse_frontmatter('---\nexam-range: "1-10, 15"\n---\n')

        assert frontmatter.exam_range == "1-10, 15"
