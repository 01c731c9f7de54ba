import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .database import get_session, init_database
from .env import get_database_url, load_env
from .errors import BadRequestError, JoblyError
from .logger import get_logger, reset_logger
from .repositories import CompanyRepository, JobRepository
from .schema import (
    validate_company_new,
    validate_company_search,
    validate_company_update,
    validate_job_search,
)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def _check(errors: List[str]) -> None:
    if errors:
        raise BadRequestError("; ".join(errors))


def parse_assignments(pairs: List[str]) -> Dict[str, Any]:
    """
    Turn ["numEmployees=40", "name=Acme"] into {"numEmployees": 40, "name": "Acme"}.

    Values that parse as JSON (numbers, true/false, null, quoted strings) are
    used as such; anything else is kept as a plain string.
    """
    data: Dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise BadRequestError(f"Expected key=value, got '{pair}'")
        key, raw = pair.split("=", 1)
        try:
            data[key.strip()] = json.loads(raw)
        except json.JSONDecodeError:
            data[key.strip()] = raw
    return data


def _criteria(**options: Optional[Any]) -> Dict[str, Any]:
    return {k: v for k, v in options.items() if v is not None}


def cmd_init_db(args: argparse.Namespace) -> None:
    init_database(args.db)
    print(f"Initialized {args.db}")


def cmd_add_company(args: argparse.Namespace) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    _check(validate_company_new(data))
    with get_session(args.db) as session:
        _print_json(CompanyRepository(session).create(data))


def cmd_companies(args: argparse.Namespace) -> None:
    criteria = _criteria(
        minEmployees=args.min_employees,
        maxEmployees=args.max_employees,
        nameLike=args.name_like,
    )
    _check(validate_company_search(criteria))
    with get_session(args.db) as session:
        companies = CompanyRepository(session).find_all(criteria)
    if not companies:
        print("No companies found.")
        return
    _print_json(companies)


def cmd_company(args: argparse.Namespace) -> None:
    with get_session(args.db) as session:
        _print_json(CompanyRepository(session).get(args.handle))


def cmd_update_company(args: argparse.Namespace) -> None:
    data = parse_assignments(args.set or [])
    _check(validate_company_update(data))
    with get_session(args.db) as session:
        _print_json(CompanyRepository(session).update(args.handle, data))


def cmd_jobs(args: argparse.Namespace) -> None:
    criteria = _criteria(
        title=args.title,
        minSalary=args.min_salary,
        hasEquity=True if args.has_equity else None,
    )
    _check(validate_job_search(criteria))
    with get_session(args.db) as session:
        jobs = JobRepository(session).find_all(criteria)
    if not jobs:
        print("No jobs found.")
        return
    _print_json(jobs)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobly", description="Jobly data layer CLI")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", default=None, help="Database URL (default: $DATABASE_URL)")

    subparsers = parser.add_subparsers(dest="command")
    ini = subparsers.add_parser("init-db", help="Create the tables")
    ini.set_defaults(func=cmd_init_db)

    add = subparsers.add_parser("add-company", help="Create a company from a JSON file")
    add.add_argument("--input", required=True, help="Path to company JSON")
    add.set_defaults(func=cmd_add_company)

    cos = subparsers.add_parser("companies", help="List companies, optionally filtered")
    cos.add_argument("--min-employees", type=int, help="At least this many employees")
    cos.add_argument("--max-employees", type=int, help="At most this many employees")
    cos.add_argument("--name-like", help="Case-insensitive substring of the name")
    cos.set_defaults(func=cmd_companies)

    co = subparsers.add_parser("company", help="Show one company and its jobs")
    co.add_argument("--handle", required=True, help="Company handle")
    co.set_defaults(func=cmd_company)

    upd = subparsers.add_parser("update-company", help="Change some fields of a company")
    upd.add_argument("--handle", required=True, help="Company handle")
    upd.add_argument("--set", action="append", metavar="KEY=VALUE", help="Field to change (repeatable)")
    upd.set_defaults(func=cmd_update_company)

    jbs = subparsers.add_parser("jobs", help="List jobs, optionally filtered")
    jbs.add_argument("--title", help="Case-insensitive substring of the title")
    jbs.add_argument("--min-salary", type=int, help="At least this salary")
    jbs.add_argument("--has-equity", action="store_true", help="Only jobs offering equity")
    jbs.set_defaults(func=cmd_jobs)

    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (DATABASE_URL, JOBLY_LOG_LEVEL, etc.)
    load_env()
    # Rebuild the logger so .env log settings apply
    reset_logger()
    logger = get_logger()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if args.db is None:
        args.db = get_database_url()

    if hasattr(args, "func"):
        try:
            args.func(args)
        except JoblyError as e:
            logger.warning(f"{args.command} failed: {e.message}", status=e.status)
            print(f"Error ({e.status}): {e.message}")
            raise SystemExit(2)
        except SQLAlchemyError as e:
            logger.error(f"{args.command} failed: {e}")
            print(f"Error (500): Database error: {e.__class__.__name__}")
            raise SystemExit(2)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
