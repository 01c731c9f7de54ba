"""
Tests for sql.py - SET and WHERE fragment construction.
"""

import re

import pytest

from jobly.errors import BadRequestError, InvalidArgument
from jobly.sql import (
    COMPANY_COLUMNS,
    COMPANY_FILTERS,
    JOB_FILTERS,
    GeneratedFragment,
    bind_positional,
    resolve_column,
    sql_for_filter,
    sql_for_partial_update,
)


class TestResolveColumn:
    """Test field name -> column name lookup."""

    def test_mapped_field(self):
        assert resolve_column("numEmployees", {"numEmployees": "num_employees"}) == "num_employees"

    def test_unmapped_field_unchanged(self):
        assert resolve_column("unmapped", {}) == "unmapped"

    def test_no_case_conversion(self):
        """Unmapped camelCase names are not converted to snake_case."""
        assert resolve_column("firstName", {"lastName": "last_name"}) == "firstName"


class TestPartialUpdate:
    """Test SET clause generation."""

    def test_valid_output_given_correct_input(self):
        result = sql_for_partial_update(
            {"numEmployees": 333, "logoUrl": "https://x.test"},
            {"numEmployees": "num_employees", "logoUrl": "logo_url"},
        )
        assert result.sql == '"num_employees"=$1, "logo_url"=$2'
        assert result.values == [333, "https://x.test"]

    def test_unpacks_as_pair(self):
        set_cols, values = sql_for_partial_update({"name": "Acme"}, COMPANY_COLUMNS)
        assert set_cols == '"name"=$1'
        assert values == ["Acme"]

    def test_empty_data_raises(self):
        with pytest.raises(InvalidArgument):
            sql_for_partial_update({}, {"numEmployees": "num_employees", "logoUrl": "logo_url"})

    def test_empty_data_is_bad_request(self):
        """InvalidArgument surfaces as a 400 to the web layer."""
        with pytest.raises(BadRequestError) as exc_info:
            sql_for_partial_update({}, {})
        assert exc_info.value.status == 400

    def test_values_follow_key_order(self):
        data = {"description": "d", "name": "n", "numEmployees": 5, "logoUrl": None}
        result = sql_for_partial_update(data, COMPANY_COLUMNS)

        assert result.values == ["d", "n", 5, None]
        indexes = [int(i) for i in re.findall(r"\$(\d+)", result.sql)]
        assert indexes == [1, 2, 3, 4]

    def test_values_not_in_sql_text(self):
        """Values travel as parameters, never inside the fragment."""
        evil = "x'; DROP TABLE companies; --"
        result = sql_for_partial_update({"name": evil}, COMPANY_COLUMNS)

        assert evil not in result.sql
        assert result.values == [evil]

    def test_identifiers_are_quoted(self):
        result = sql_for_partial_update({"order": 1}, {})
        assert result.sql == '"order"=$1'

    def test_idempotent(self):
        data = {"numEmployees": 10, "name": "Acme"}
        assert sql_for_partial_update(data, COMPANY_COLUMNS) == sql_for_partial_update(data, COMPANY_COLUMNS)

    def test_next_placeholder_continues_numbering(self):
        result = sql_for_partial_update({"name": "a", "description": "b"}, COMPANY_COLUMNS)
        assert result.next_placeholder() == "$3"

    def test_input_not_mutated(self):
        data = {"numEmployees": 1}
        sql_for_partial_update(data, COMPANY_COLUMNS)
        assert data == {"numEmployees": 1}


class TestFilter:
    """Test WHERE clause generation."""

    def test_empty_criteria(self):
        assert sql_for_filter({}) == GeneratedFragment("", [])

    def test_none_criteria(self):
        assert sql_for_filter(None) == GeneratedFragment("", [])

    def test_min_and_name(self):
        result = sql_for_filter({"minEmployees": 50, "nameLike": "Corp"})
        assert result.sql == "WHERE num_employees >= $1 AND name ILIKE $2"
        assert result.values == [50, "%Corp%"]

    def test_follows_criteria_order(self):
        result = sql_for_filter({"nameLike": "Corp", "maxEmployees": 10})
        assert result.sql == "WHERE name ILIKE $1 AND num_employees <= $2"
        assert result.values == ["%Corp%", 10]

    def test_all_company_filters(self):
        result = sql_for_filter({"minEmployees": 1, "maxEmployees": 9, "nameLike": "c"})
        assert result.sql == "WHERE num_employees >= $1 AND num_employees <= $2 AND name ILIKE $3"
        assert result.values == [1, 9, "%c%"]

    def test_min_greater_than_max_still_emitted(self):
        result = sql_for_filter({"minEmployees": 10, "maxEmployees": 1})
        assert result.sql == "WHERE num_employees >= $1 AND num_employees <= $2"
        assert result.values == [10, 1]

    def test_numeric_strings_coerced(self):
        result = sql_for_filter({"minEmployees": "333", "maxEmployees": " 500 "})
        assert result.values == [333, 500]
        assert all(isinstance(v, int) for v in result.values)

    def test_non_numeric_string_rejected(self):
        with pytest.raises(InvalidArgument) as exc_info:
            sql_for_filter({"minEmployees": "lots"})
        assert "minEmployees" in exc_info.value.message

    def test_decimal_string_coerced_like_float(self):
        assert sql_for_filter({"minEmployees": "2.5"}).values == [2.5]
        assert sql_for_filter({"minEmployees": 2.5}).values == [2.5]

    def test_negative_string_coerced(self):
        assert sql_for_filter({"maxEmployees": "-3"}).values == [-3]

    def test_underscored_string_rejected(self):
        with pytest.raises(InvalidArgument):
            sql_for_filter({"minEmployees": "1_000"})

    def test_bool_rejected_for_numbers(self):
        with pytest.raises(InvalidArgument):
            sql_for_filter({"maxEmployees": True})

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidArgument) as exc_info:
            sql_for_filter({"bogusKey": 1})
        assert "bogusKey" in exc_info.value.message

    def test_unknown_key_after_known_rejected(self):
        """An unknown key never falls through to the name filter."""
        with pytest.raises(InvalidArgument):
            sql_for_filter({"nameLike": "Corp", "handle": "c1"})

    def test_name_value_not_in_sql_text(self):
        result = sql_for_filter({"nameLike": "' OR 1=1 --"})
        assert "OR 1=1" not in result.sql
        assert result.values == ["%' OR 1=1 --%"]

    def test_idempotent(self):
        criteria = {"minEmployees": "5", "nameLike": "net"}
        assert sql_for_filter(criteria) == sql_for_filter(criteria)


class TestJobFilter:
    """Test the jobs vocabulary."""

    def test_all_job_filters(self):
        result = sql_for_filter({"title": "eng", "minSalary": "1000", "hasEquity": True}, JOB_FILTERS)
        assert result.sql == "WHERE title ILIKE $1 AND salary >= $2 AND equity > 0"
        assert result.values == ["%eng%", 1000]

    def test_has_equity_false_adds_nothing(self):
        assert sql_for_filter({"hasEquity": False}, JOB_FILTERS) == GeneratedFragment("", [])

    def test_has_equity_string(self):
        result = sql_for_filter({"hasEquity": "TRUE", "minSalary": 5}, JOB_FILTERS)
        assert result.sql == "WHERE equity > 0 AND salary >= $1"
        assert result.values == [5]

    def test_has_equity_garbage_rejected(self):
        with pytest.raises(InvalidArgument):
            sql_for_filter({"hasEquity": "maybe"}, JOB_FILTERS)

    def test_company_key_rejected_for_jobs(self):
        with pytest.raises(InvalidArgument):
            sql_for_filter({"nameLike": "x"}, JOB_FILTERS)

    def test_vocabularies_are_read_only(self):
        with pytest.raises(TypeError):
            COMPANY_FILTERS["handle"] = COMPANY_FILTERS["nameLike"]


class TestBindPositional:
    """Test $k -> named bind rewriting."""

    def test_rewrites_placeholders(self):
        sql, params = bind_positional("UPDATE t SET a=$1, b=$2 WHERE id = $3", ["x", "y", 7])
        assert sql == "UPDATE t SET a=:p1, b=:p2 WHERE id = :p3"
        assert params == {"p1": "x", "p2": "y", "p3": 7}

    def test_composed_update(self):
        fragment = sql_for_partial_update({"numEmployees": 9}, COMPANY_COLUMNS)
        sql, params = bind_positional(
            f"UPDATE companies SET {fragment.sql} WHERE handle = {fragment.next_placeholder()}",
            [*fragment.values, "c1"],
        )
        assert sql == 'UPDATE companies SET "num_employees"=:p1 WHERE handle = :p2'
        assert params == {"p1": 9, "p2": "c1"}

    def test_double_digit_placeholders(self):
        values = list(range(1, 12))
        sql, params = bind_positional("$1 $11", values)
        assert sql == ":p1 :p11"
        assert params["p11"] == 11

    def test_missing_value_raises(self):
        with pytest.raises(ValueError):
            bind_positional("a = $2", ["only one"])

    def test_no_placeholders(self):
        assert bind_positional("SELECT 1", []) == ("SELECT 1", {})
