"""
Companies Repository.

Responsibilities:
- CRUD operations for companies table.
- Filtered search over companies.

Non-Responsibilities:
- No request validation (see jobly.schema).
- No authorization.

Invariant:
Values never reach SQL text; they travel as positional parameters.
"""

from typing import Any, Dict, List, Mapping, Optional

from ..errors import BadRequestError, NotFoundError
from ..sql import COMPANY_COLUMNS, COMPANY_FILTERS, sql_for_filter, sql_for_partial_update
from .base import Repository

COMPANY_FIELDS = (
    "handle, name, description, "
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)


class CompanyRepository(Repository):
    """Related functions for companies."""

    table = "companies"

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a company.

        Args:
            data: {handle, name, description, numEmployees, logoUrl}

        Returns:
            {handle, name, description, numEmployees, logoUrl}

        Raises:
            BadRequestError: if the handle is already taken
        """
        handle = data["handle"]
        duplicate = self.fetch_one(
            "SELECT handle FROM companies WHERE handle = $1", [handle]
        )
        if duplicate:
            raise BadRequestError(f"Duplicate company: {handle}")

        return self.write(
            f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {COMPANY_FIELDS}""",
            [
                handle,
                data["name"],
                data["description"],
                data.get("numEmployees"),
                data.get("logoUrl"),
            ],
        )

    def find_all(self, criteria: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Find all companies matching `criteria`, or all companies without one.

        Args:
            criteria: Any of minEmployees, maxEmployees, nameLike

        Returns:
            [{handle, name, description, numEmployees, logoUrl}, ...] ordered by name

        Raises:
            InvalidArgument: for unknown or malformed criteria
        """
        where, values = sql_for_filter(criteria, COMPANY_FILTERS)
        return self.fetch_all(
            f"""SELECT {COMPANY_FIELDS}
            FROM companies
            {where}
            ORDER BY name""",
            values,
        )

    def get(self, handle: str) -> Dict[str, Any]:
        """
        Given a company handle, return data about the company.

        Returns:
            {handle, name, description, numEmployees, logoUrl, jobs}
            where jobs is [{id, title, salary, equity}, ...]

        Raises:
            NotFoundError: if there is no such company
        """
        company = self.fetch_one(
            f"SELECT {COMPANY_FIELDS} FROM companies WHERE handle = $1", [handle]
        )
        if not company:
            raise NotFoundError(f"No company: {handle}")

        company["jobs"] = self.fetch_all(
            """SELECT id, title, salary, equity
            FROM jobs
            WHERE company_handle = $1
            ORDER BY id""",
            [handle],
        )
        return company

    def update(self, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Partial update: only the fields present in `data` change.

        Args:
            handle: Company to update
            data: Any of name, description, numEmployees, logoUrl

        Returns:
            {handle, name, description, numEmployees, logoUrl}

        Raises:
            InvalidArgument: if `data` is empty
            NotFoundError: if there is no such company
        """
        fragment = sql_for_partial_update(data, COMPANY_COLUMNS)
        company = self.write(
            f"""UPDATE companies
            SET {fragment.sql}
            WHERE handle = {fragment.next_placeholder()}
            RETURNING {COMPANY_FIELDS}""",
            [*fragment.values, handle],
        )
        if not company:
            raise NotFoundError(f"No company: {handle}")
        return company

    def remove(self, handle: str) -> None:
        """
        Delete a company.

        Raises:
            NotFoundError: if there is no such company
        """
        deleted = self.write(
            "DELETE FROM companies WHERE handle = $1 RETURNING handle", [handle]
        )
        if not deleted:
            raise NotFoundError(f"No company: {handle}")
