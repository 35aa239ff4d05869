import os
from pathlib import Path
import nox

nox.options.reuse_existing_virtualenvs = True
nox.options.sessions = ["lint", "unit", "integration"]

PASSED_ENV_VARS = [
    "DATABASE_URL",
    "SECRET_KEY",
    "ADMIN_PASSWORD",
    "LOG_LEVEL",
]


def _set_env(session):
    """Propagate settings into the session and run everything in test mode."""
    session.env["PYTHONPATH"] = str(Path.cwd())
    session.env["ENVIRONMENT"] = "testing"
    session.env["WEEKLY_REPORT_JOB_ENABLED"] = "false"
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """isort, black, flake8 and mypy over the package and tests."""
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "--check-only", "wellpulse/", "tests/")
    session.run("black", "--check", "wellpulse/", "tests/")
    session.run("flake8", "wellpulse/", "tests/")
    session.run("mypy", "wellpulse/")


@nox.session(name="unit")
def unit(session):
    """
    Unit tests with coverage.
    Usage:
      nox -s unit
      nox -s unit -- tests/unit/test_services/test_severity.py
    """
    _set_env(session)
    session.install("-e", ".[test]")
    tests = session.posargs or ["tests/unit"]
    session.run(
        "pytest",
        *tests,
        "-m", "unit",
        "-vv",
        "--tb=short",
        "--cov=wellpulse",
        "--cov-report=term-missing",
        "--cov-report=html:.nox/htmlcov",
        "--cov-fail-under=80",
    )


@nox.session(name="integration")
def integration(session):
    """HTTP-level tests through FastAPI's TestClient."""
    _set_env(session)
    session.install("-e", ".[test]")
    tests = session.posargs or ["tests/integration"]
    session.run("pytest", *tests, "-m", "integration", "-vv", "--tb=short")
