import pytest
from sheet_evaluator.errors import MalformedRangeError
from sheet_evaluator.utils import (
    cell_id,
    column_to_index,
    extract_argument,
    index_to_column,
    iter_range,
    parse_range,
    split_coordinate,
)


class TestColumnCodec:
    @pytest.mark.parametrize(
        "index,column",
        [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA")],
    )
    def test_known_columns(self, index, column):
        assert index_to_column(index) == column
        assert column_to_index(column) == index

    def test_round_trip_single_and_double_letters(self):
        for index in range(0, 702):
            assert column_to_index(index_to_column(index)) == index

    def test_round_trip_beyond_excel_limits(self):
        # XFD is the last Excel column, the codec has no such limit
        assert column_to_index("XFD") == 16383
        for index in (16383, 16384, 475253, 10**6):
            assert column_to_index(index_to_column(index)) == index

    def test_cell_id(self):
        assert cell_id(0, 0) == "A1"
        assert cell_id(2, 1) == "B3"
        assert cell_id(11, 26) == "AA12"


class TestCoordinates:
    def test_split_coordinate(self):
        assert split_coordinate("B3") == ("B", 3)
        assert split_coordinate("AA12") == ("AA", 12)

    def test_parts_are_found_independently(self):
        assert split_coordinate("1A") == ("A", 1)
        assert split_coordinate("$B$07") == ("B", 7)

    def test_row_digits_are_ascii_only(self):
        assert split_coordinate("A\u0663") is None
        assert split_coordinate("A\u06637") == ("A", 7)

    def test_missing_part(self):
        assert split_coordinate("A") is None
        assert split_coordinate("12") is None
        assert split_coordinate("") is None

    def test_extract_argument(self):
        assert extract_argument("SUM(A1:B2)") == "A1:B2"
        assert extract_argument("TRIM(A1)") == "A1"
        # Non-greedy, stops at the first closing parenthesis
        assert extract_argument("SUM(A1:A2)+SUM(B1:B2)") == "A1:A2"
        assert extract_argument("SUM(") == ""
        assert extract_argument("SUM") == ""


class TestRanges:
    def test_parse_range(self):
        assert parse_range("A1:B3") == (0, 0, 2, 1)
        assert parse_range("AA10:AB12") == (9, 26, 11, 27)

    def test_extra_parts_are_ignored(self):
        assert parse_range("A1:B2:C3") == (0, 0, 1, 1)

    @pytest.mark.parametrize("range_ref", ["A:B3", "A1:B", "A1", "", ":", "1:2"])
    def test_malformed_range(self, range_ref):
        with pytest.raises(MalformedRangeError):
            parse_range(range_ref)

    def test_malformed_range_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_range("A1")

    def test_iter_range_is_row_major(self):
        assert list(iter_range(*parse_range("A1:B2"))) == ["A1", "B1", "A2", "B2"]

    def test_iter_single_cell(self):
        assert list(iter_range(*parse_range("C4:C4"))) == ["C4"]

    def test_inverted_range_is_empty(self):
        assert list(iter_range(*parse_range("B5:A1"))) == []
        # Inverted columns only
        assert list(iter_range(*parse_range("B1:A5"))) == []
        # Inverted rows only
        assert list(iter_range(*parse_range("A5:B1"))) == []
