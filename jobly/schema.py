from typing import Any, Dict, List, Mapping
from urllib.parse import urlparse

COMPANY_NEW_REQUIRED = ["handle", "name", "description"]
COMPANY_UPDATE_FIELDS = ["name", "description", "numEmployees", "logoUrl"]
JOB_NEW_REQUIRED = ["title", "companyHandle"]
JOB_UPDATE_FIELDS = ["title", "salary", "equity"]
USER_UPDATE_FIELDS = ["firstName", "lastName", "email", "isAdmin"]

COMPANY_SEARCH_FIELDS = ["minEmployees", "maxEmployees", "nameLike"]
JOB_SEARCH_FIELDS = ["title", "minSalary", "hasEquity"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def _as_int(v: Any):
    """int value of v, or None when it is not a whole number."""
    if _is_int(v):
        return v
    if isinstance(v, str):
        try:
            return int(v.strip())
        except ValueError:
            return None
    return None


def _unknown_fields(data: Mapping[str, Any], allowed: List[str]) -> List[str]:
    return [f"Field '{k}' is not allowed" for k in data if k not in allowed]


def _check_company_fields(data: Mapping[str, Any], errors: List[str]) -> None:
    for f in ("name", "description"):
        if f in data and not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")
    if "numEmployees" in data and data["numEmployees"] is not None:
        if not _is_int(data["numEmployees"]) or data["numEmployees"] < 0:
            errors.append("Field 'numEmployees' must be a non-negative integer")
    if isinstance(data.get("logoUrl"), str) and data["logoUrl"].strip():
        if not _valid_url(data["logoUrl"]):
            errors.append("Field 'logoUrl' must be a valid absolute URL (scheme + host)")
    elif "logoUrl" in data and data["logoUrl"] is not None:
        errors.append("Field 'logoUrl' must be a string")


def _check_job_fields(data: Mapping[str, Any], errors: List[str]) -> None:
    if "title" in data and not _is_non_empty_str(data["title"]):
        errors.append("Field 'title' must be a non-empty string")
    if "salary" in data and data["salary"] is not None:
        if not _is_int(data["salary"]) or data["salary"] < 0:
            errors.append("Field 'salary' must be a non-negative integer")
    if "equity" in data and data["equity"] is not None:
        equity = data["equity"]
        if isinstance(equity, bool) or not isinstance(equity, (int, float)) or not 0 <= equity <= 1:
            errors.append("Field 'equity' must be a number between 0 and 1")


def validate_company_new(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []
    for f in COMPANY_NEW_REQUIRED:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")
    if _is_non_empty_str(data.get("handle")) and len(data["handle"]) > 25:
        errors.append("Field 'handle' must be at most 25 characters")
    errors.extend(_unknown_fields(data, COMPANY_NEW_REQUIRED + ["numEmployees", "logoUrl"]))
    _check_company_fields({k: v for k, v in data.items() if k not in COMPANY_NEW_REQUIRED}, errors)
    return errors


def validate_company_update(data: Dict[str, Any]) -> List[str]:
    """Partial update payload: at least one known field, nothing else."""
    if not data:
        return ["No data"]
    errors = _unknown_fields(data, COMPANY_UPDATE_FIELDS)
    _check_company_fields(data, errors)
    return errors


def validate_job_new(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    for f in JOB_NEW_REQUIRED:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")
    errors.extend(_unknown_fields(data, JOB_NEW_REQUIRED + ["salary", "equity"]))
    _check_job_fields({k: v for k, v in data.items() if k != "title"}, errors)
    return errors


def validate_job_update(data: Dict[str, Any]) -> List[str]:
    if not data:
        return ["No data"]
    errors = _unknown_fields(data, JOB_UPDATE_FIELDS)
    _check_job_fields(data, errors)
    return errors


def validate_user_update(data: Dict[str, Any]) -> List[str]:
    if not data:
        return ["No data"]
    errors = _unknown_fields(data, USER_UPDATE_FIELDS)
    for f in ("firstName", "lastName"):
        if f in data and not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")
    if "email" in data:
        email = data["email"]
        if not isinstance(email, str) or "@" not in email[1:]:
            errors.append("Field 'email' must be an email address")
    if "isAdmin" in data and not isinstance(data["isAdmin"], bool):
        errors.append("Field 'isAdmin' must be true or false")
    return errors


def validate_company_search(query: Dict[str, Any]) -> List[str]:
    """
    Query-string criteria for the company search. Values may still be
    strings; the numeric ones must parse as non-negative integers.
    """
    errors = _unknown_fields(query, COMPANY_SEARCH_FIELDS)
    bounds = {}
    for f in ("minEmployees", "maxEmployees"):
        if f in query:
            value = _as_int(query[f])
            if value is None or value < 0:
                errors.append(f"Field '{f}' must be a non-negative integer")
            else:
                bounds[f] = value
    if len(bounds) == 2 and bounds["minEmployees"] > bounds["maxEmployees"]:
        errors.append("Min employees cannot be greater than max")
    if "nameLike" in query and not _is_non_empty_str(query["nameLike"]):
        errors.append("Field 'nameLike' must be a non-empty string")
    return errors


def validate_job_search(query: Dict[str, Any]) -> List[str]:
    errors = _unknown_fields(query, JOB_SEARCH_FIELDS)
    if "minSalary" in query:
        value = _as_int(query["minSalary"])
        if value is None or value < 0:
            errors.append("Field 'minSalary' must be a non-negative integer")
    if "hasEquity" in query:
        flag = query["hasEquity"]
        if not isinstance(flag, bool) and str(flag).strip().lower() not in ("true", "false"):
            errors.append("Field 'hasEquity' must be true or false")
    if "title" in query and not _is_non_empty_str(query["title"]):
        errors.append("Field 'title' must be a non-empty string")
    return errors
