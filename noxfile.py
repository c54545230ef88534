"""Nox sessions for toonify."""

import nox

PYTHON_VERSIONS = ["3.10", "3.11", "3.12", "3.13"]
LOCATIONS = ["src", "tests"]


@nox.session(python=PYTHON_VERSIONS[-1])
def lint(session: nox.Session) -> None:
    """Run linting."""
    session.install("ruff")
    session.run("ruff", "check", *LOCATIONS)


@nox.session(python=PYTHON_VERSIONS)
def unit(session: nox.Session) -> None:
    """Run unit tests."""
    session.install(".[test]")
    session.run(
        "pytest",
        "--cov=toonify",
        "--cov-report=term-missing",
        *session.posargs,
    )
