"""
Dynamic SQL fragment construction.

Builds the SET list of a partial UPDATE and the WHERE clause of a filtered
search. Only column names ever reach the SQL text; values always travel in the
returned values list, bound to positional placeholders ($1, $2, ...).

Placeholder $k always refers to values[k - 1]. A caller appending its own
parameters after a fragment must keep counting from len(values) + 1.
"""

import re
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from .errors import InvalidArgument


class GeneratedFragment(NamedTuple):
    """SQL fragment plus the values for its placeholders, in order."""

    sql: str
    values: List[Any]

    def next_placeholder(self) -> str:
        """Placeholder for the first parameter appended after this fragment."""
        return f"${len(self.values) + 1}"


class FilterRule(NamedTuple):
    column: str
    operator: str
    kind: str  # number, contains, flag


COMPANY_COLUMNS: Mapping[str, str] = MappingProxyType({
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
})

JOB_COLUMNS: Mapping[str, str] = MappingProxyType({
    "companyHandle": "company_handle",
})

USER_COLUMNS: Mapping[str, str] = MappingProxyType({
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
})

COMPANY_FILTERS: Mapping[str, FilterRule] = MappingProxyType({
    "minEmployees": FilterRule("num_employees", ">=", "number"),
    "maxEmployees": FilterRule("num_employees", "<=", "number"),
    "nameLike": FilterRule("name", "ILIKE", "contains"),
})

JOB_FILTERS: Mapping[str, FilterRule] = MappingProxyType({
    "title": FilterRule("title", "ILIKE", "contains"),
    "minSalary": FilterRule("salary", ">=", "number"),
    "hasEquity": FilterRule("equity", ">", "flag"),
})

_PLACEHOLDER = re.compile(r"\$(\d+)")
_INT_TEXT = re.compile(r"[+-]?\d+")
_FLOAT_TEXT = re.compile(r"[+-]?(\d+\.\d*|\.\d+)")


def resolve_column(field: str, column_map: Mapping[str, str]) -> str:
    """Column backing `field`; the field name itself when it is not mapped."""
    return column_map.get(field, field)


def sql_for_partial_update(
    data: Mapping[str, Any],
    column_map: Mapping[str, str],
) -> GeneratedFragment:
    """
    Build the SET list for updating only the fields present in `data`.

    Args:
        data: Fields to change, e.g. {"numEmployees": 333, "logoUrl": "https://x.test"}
        column_map: External field name -> column name, e.g. {"numEmployees": "num_employees"}

    Returns:
        GeneratedFragment('"num_employees"=$1, "logo_url"=$2', [333, "https://x.test"])

    Raises:
        InvalidArgument: if `data` is empty
    """
    keys = list(data.keys())
    if not keys:
        raise InvalidArgument("No data")

    # {firstName: 'Aliya', age: 32} => ['"first_name"=$1', '"age"=$2']
    cols = [
        f'"{resolve_column(key, column_map)}"=${idx + 1}'
        for idx, key in enumerate(keys)
    ]
    return GeneratedFragment(", ".join(cols), [data[key] for key in keys])


def _coerce_number(key: str, value: Any) -> Any:
    """
    Numeric bound for `key`. Numbers pass through as given; strings such as
    "50" or "2.5" (from a query string) become int or float.
    """
    # bool is an int subclass; "true" is not a head count
    if isinstance(value, bool):
        raise InvalidArgument(f"Filter '{key}' must be a number")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _INT_TEXT.fullmatch(text):
            return int(text)
        if _FLOAT_TEXT.fullmatch(text):
            return float(text)
        raise InvalidArgument(f"Filter '{key}' must be a number, got '{value}'")
    raise InvalidArgument(f"Filter '{key}' must be a number")


def _coerce_flag(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidArgument(f"Filter '{key}' must be true or false")


def sql_for_filter(
    criteria: Optional[Mapping[str, Any]],
    vocabulary: Mapping[str, FilterRule] = COMPANY_FILTERS,
) -> GeneratedFragment:
    """
    Build a WHERE clause from search criteria.

    Every key of `criteria` must be part of `vocabulary`. Clauses appear in
    the criteria's key order and are joined with AND.

    Args:
        criteria: e.g. {"minEmployees": "50", "nameLike": "Corp"}
        vocabulary: Recognized criteria keys and how each one filters

    Returns:
        GeneratedFragment("WHERE num_employees >= $1 AND name ILIKE $2", [50, "%Corp%"]),
        or GeneratedFragment("", []) when there is nothing to filter on.

    Raises:
        InvalidArgument: for an unrecognized key or a value of the wrong shape
    """
    values: List[Any] = []
    filters: List[str] = []

    for key, raw in (criteria or {}).items():
        rule = vocabulary.get(key)
        if rule is None:
            raise InvalidArgument(f"Invalid filter: {key}")

        if rule.kind == "number":
            values.append(_coerce_number(key, raw))
            filters.append(f"{rule.column} {rule.operator} ${len(values)}")
        elif rule.kind == "contains":
            values.append(f"%{raw}%")
            filters.append(f"{rule.column} {rule.operator} ${len(values)}")
        elif rule.kind == "flag":
            if _coerce_flag(key, raw):
                filters.append(f"{rule.column} {rule.operator} 0")
        else:
            raise ValueError(f"Unknown filter kind: {rule.kind}")

    where = f"WHERE {' AND '.join(filters)}" if filters else ""
    return GeneratedFragment(where, values)


def bind_positional(sql: str, values: List[Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Rewrite $k placeholders into named binds usable with sqlalchemy.text().

    Args:
        sql: Statement using $1..$n
        values: values[k - 1] binds to $k

    Returns:
        ("... = :p1", {"p1": values[0]})

    Raises:
        ValueError: if a placeholder has no matching value
    """
    def _named(match: "re.Match") -> str:
        idx = int(match.group(1))
        if idx < 1 or idx > len(values):
            raise ValueError(f"Placeholder ${idx} has no value (got {len(values)} values)")
        return f":p{idx}"

    text = _PLACEHOLDER.sub(_named, sql)
    return text, {f"p{idx + 1}": value for idx, value in enumerate(values)}
