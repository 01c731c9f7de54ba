"""
Users Repository.

Responsibilities:
- Read, update and delete rows of the users table.
- Job applications.

Non-Responsibilities:
- No registration or password checks; the auth layer owns credentials.
"""

from typing import Any, Dict, List, Mapping

from ..errors import BadRequestError, NotFoundError
from ..sql import USER_COLUMNS, sql_for_partial_update
from .base import Repository

USER_FIELDS = (
    "username, "
    'first_name AS "firstName", '
    'last_name AS "lastName", '
    "email, "
    'is_admin AS "isAdmin"'
)


class UserRepository(Repository):
    """Related functions for users."""

    table = "users"

    def find_all(self) -> List[Dict[str, Any]]:
        """Return [{username, firstName, lastName, email, isAdmin}, ...] ordered by username."""
        return self.fetch_all(f"SELECT {USER_FIELDS} FROM users ORDER BY username")

    def get(self, username: str) -> Dict[str, Any]:
        """
        Given a username, return data about the user.

        Returns:
            {username, firstName, lastName, email, isAdmin, applications}
            where applications is a list of job ids

        Raises:
            NotFoundError: if there is no such user
        """
        user = self.fetch_one(f"SELECT {USER_FIELDS} FROM users WHERE username = $1", [username])
        if not user:
            raise NotFoundError(f"No user: {username}")

        rows = self.fetch_all(
            "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
            [username],
        )
        user["applications"] = [row["job_id"] for row in rows]
        return user

    def update(self, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Partial update of firstName, lastName, email or isAdmin.

        Raises:
            InvalidArgument: if `data` is empty
            BadRequestError: if `data` carries a password
            NotFoundError: if there is no such user
        """
        if "password" in data:
            raise BadRequestError("Passwords are changed through the auth layer")

        fragment = sql_for_partial_update(data, USER_COLUMNS)
        user = self.write(
            f"""UPDATE users
            SET {fragment.sql}
            WHERE username = {fragment.next_placeholder()}
            RETURNING {USER_FIELDS}""",
            [*fragment.values, username],
        )
        if not user:
            raise NotFoundError(f"No user: {username}")
        return user

    def remove(self, username: str) -> None:
        deleted = self.write(
            "DELETE FROM users WHERE username = $1 RETURNING username", [username]
        )
        if not deleted:
            raise NotFoundError(f"No user: {username}")

    def apply_to_job(self, username: str, job_id: int) -> None:
        """
        Record that `username` applied to `job_id`.

        Raises:
            NotFoundError: if the job or the user does not exist
        """
        if not self.fetch_one("SELECT id FROM jobs WHERE id = $1", [job_id]):
            raise NotFoundError(f"No job: {job_id}")
        if not self.fetch_one("SELECT username FROM users WHERE username = $1", [username]):
            raise NotFoundError(f"No username: {username}")

        self.write(
            "INSERT INTO applications (job_id, username) VALUES ($1, $2)",
            [job_id, username],
        )
