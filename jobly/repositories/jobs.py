"""
Jobs Repository.

Responsibilities:
- CRUD operations for jobs table.
- Filtered search over jobs.

Non-Responsibilities:
- No request validation (see jobly.schema).
- No authorization.

Invariant:
A job never moves to another company; companyHandle is set once on create.
"""

from typing import Any, Dict, List, Mapping, Optional

from ..errors import BadRequestError, NotFoundError
from ..sql import JOB_COLUMNS, JOB_FILTERS, sql_for_filter, sql_for_partial_update
from .base import Repository

JOB_FIELDS = 'id, title, salary, equity, company_handle AS "companyHandle"'

_FIXED_FIELDS = ("id", "companyHandle")


class JobRepository(Repository):
    """Related functions for jobs."""

    table = "jobs"

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a job.

        Args:
            data: {title, salary, equity, companyHandle}

        Returns:
            {id, title, salary, equity, companyHandle}
        """
        return self.write(
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_FIELDS}""",
            [data["title"], data.get("salary"), data.get("equity"), data["companyHandle"]],
        )

    def find_all(self, criteria: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Find all jobs matching `criteria`.

        Args:
            criteria: Any of title, minSalary, hasEquity

        Returns:
            [{id, title, salary, equity, companyHandle, companyName}, ...] ordered by title
        """
        where, values = sql_for_filter(criteria, JOB_FILTERS)
        return self.fetch_all(
            f"""SELECT jobs.id,
                   jobs.title,
                   jobs.salary,
                   jobs.equity,
                   jobs.company_handle AS "companyHandle",
                   companies.name      AS "companyName"
            FROM jobs
            LEFT JOIN companies ON companies.handle = jobs.company_handle
            {where}
            ORDER BY jobs.title, jobs.id""",
            values,
        )

    def get(self, job_id: int) -> Dict[str, Any]:
        """
        Given a job id, return the job and the company posting it.

        Returns:
            {id, title, salary, equity, company}
            where company is {handle, name, description, numEmployees, logoUrl}

        Raises:
            NotFoundError: if there is no such job
        """
        job = self.fetch_one(f"SELECT {JOB_FIELDS} FROM jobs WHERE id = $1", [job_id])
        if not job:
            raise NotFoundError(f"No job: {job_id}")

        handle = job.pop("companyHandle")
        job["company"] = self.fetch_one(
            """SELECT handle,
                   name,
                   description,
                   num_employees AS "numEmployees",
                   logo_url      AS "logoUrl"
            FROM companies
            WHERE handle = $1""",
            [handle],
        )
        return job

    def update(self, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Partial update of a job's title, salary or equity.

        Raises:
            InvalidArgument: if `data` is empty
            BadRequestError: if `data` tries to change id or companyHandle
            NotFoundError: if there is no such job
        """
        fixed = [field for field in _FIXED_FIELDS if field in data]
        if fixed:
            raise BadRequestError(f"Cannot change: {', '.join(fixed)}")

        fragment = sql_for_partial_update(data, JOB_COLUMNS)
        job = self.write(
            f"""UPDATE jobs
            SET {fragment.sql}
            WHERE id = {fragment.next_placeholder()}
            RETURNING {JOB_FIELDS}""",
            [*fragment.values, job_id],
        )
        if not job:
            raise NotFoundError(f"No job: {job_id}")
        return job

    def remove(self, job_id: int) -> None:
        """Delete a job; NotFoundError if it does not exist."""
        deleted = self.write("DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id])
        if not deleted:
            raise NotFoundError(f"No job: {job_id}")
