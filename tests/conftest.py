"""
Pytest configuration and shared fixtures.
"""

import pytest
from pathlib import Path
from typing import Dict, Any

from jobly.database import Application, Company, Job, User, get_session, init_database


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Fresh SQLite database with all tables created."""
    path = tmp_path / "jobly.db"
    init_database(path)
    return path


@pytest.fixture
def db_session(db_path):
    """Session on an empty database."""
    session = get_session(db_path)
    yield session
    session.close()


@pytest.fixture
def seeded_session(db_session):
    """Session on a database holding three companies, four jobs and two users."""
    db_session.add_all([
        Company(handle="c1", name="C1", num_employees=1, description="Desc1", logo_url="http://c1.img"),
        Company(handle="c2", name="C2", num_employees=2, description="Desc2", logo_url="http://c2.img"),
        Company(handle="c3", name="C3", num_employees=3, description="Desc3", logo_url="http://c3.img"),
    ])
    db_session.flush()
    db_session.add_all([
        Job(id=1, title="Job1", salary=100, equity=0.1, company_handle="c1"),
        Job(id=2, title="Job2", salary=200, equity=0.2, company_handle="c1"),
        Job(id=3, title="Job3", salary=300, equity=0, company_handle="c1"),
        Job(id=4, title="Job4", salary=None, equity=None, company_handle="c1"),
        User(username="u1", password="hashed-1", first_name="U1F", last_name="U1L",
             email="u1@email.com", is_admin=False),
        User(username="u2", password="hashed-2", first_name="U2F", last_name="U2L",
             email="u2@email.com", is_admin=False),
    ])
    db_session.flush()
    db_session.add(Application(username="u1", job_id=1))
    db_session.commit()
    return db_session


@pytest.fixture
def new_company() -> Dict[str, Any]:
    """Valid payload for creating a company."""
    return {
        "handle": "new",
        "name": "New",
        "description": "New Description",
        "numEmployees": 1,
        "logoUrl": "http://new.img",
    }
