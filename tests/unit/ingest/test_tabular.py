"""Tests for the delimited-text parser."""

from edgelog.ingest.tabular import parse_line, parse_table, split_lines


class TestParseLine:
    def test_plain_fields_are_trimmed(self):
        assert parse_line("NQ , Buy,  15000 ") == ["NQ", "Buy", "15000"]

    def test_quoted_comma_is_literal(self):
        assert parse_line('"NQ","Buy","1,000"') == ["NQ", "Buy", "1,000"]

    def test_wrapping_quotes_stripped_after_trim(self):
        assert parse_line('  "ES"  ,x') == ["ES", "x"]

    def test_unbalanced_quote_keeps_rest_of_line(self):
        assert parse_line('a,"b,c') == ["a", '"b,c']

    def test_empty_quoted_field(self):
        assert parse_line('"",x') == ["", "x"]

    def test_single_quote_char_is_kept(self):
        assert parse_line('"') == ['"']

    def test_trailing_delimiter_yields_empty_field(self):
        assert parse_line("a,b,") == ["a", "b", ""]


class TestParseTable:
    def test_empty_text(self):
        assert parse_table("") == ([], [])
        assert parse_table("   \n\n ") == ([], [])

    def test_surrounding_blank_lines_ignored(self):
        headers, rows = parse_table("\n\nA,B\n1,2\n\n")
        assert headers == ["A", "B"]
        assert rows == [["1", "2"]]

    def test_crlf_line_endings(self):
        headers, rows = parse_table("A,B\r\n1,2\r\n3,4")
        assert headers == ["A", "B"]
        assert rows == [["1", "2"], ["3", "4"]]

    def test_split_lines_strips_outer_whitespace(self):
        assert split_lines("  x\ny  ") == ["x", "y"]
