import pytest

from homefs.services.search_walker import compile_name_pattern, wrap_search_term


class TestMatchEverything:
    @pytest.mark.parametrize("pattern", ["", None, "*", "**", "***"])
    def test_matches_any_name(self, pattern):
        matches = compile_name_pattern(pattern)
        assert matches("report.txt")
        assert matches("")
        assert matches(".hidden")


class TestSubstring:
    def test_case_insensitive_substring(self):
        matches = compile_name_pattern("Report")
        assert matches("report.txt")
        assert matches("MONTHLY_REPORT")
        assert not matches("repo.txt")

    def test_regex_characters_are_literal(self):
        matches = compile_name_pattern("a+b")
        assert matches("xa+by")
        assert not matches("aab")


class TestWildcard:
    def test_anchored_at_both_ends(self):
        matches = compile_name_pattern("rep*.txt")
        assert matches("report.txt")
        assert matches("REP.TXT")
        assert not matches("report.txt.bak")
        assert not matches("my_report.txt")

    def test_wrapped_term_means_contains(self):
        matches = compile_name_pattern(wrap_search_term("port"))
        assert matches("report.txt")
        assert matches("PORT")
        assert not matches("pot")

    def test_literal_segments_are_escaped(self):
        matches = compile_name_pattern("*(1).txt")
        assert matches("a.txt (1).txt")
        assert matches("x(1).txt")
        assert not matches("x1.txt")
        assert not matches("x(1)atxt")

    def test_consecutive_stars_collapse(self):
        assert compile_name_pattern("a**b")("axyzb")
        assert compile_name_pattern("a**b")("ab")

    def test_name_with_newline_still_matches(self):
        assert compile_name_pattern("*line*")("first\nline")


def test_wrap_search_term():
    assert wrap_search_term("foo") == "*foo*"
    assert wrap_search_term("") == "**"
    assert wrap_search_term(None) == "**"
