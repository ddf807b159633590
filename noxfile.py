"""Nox sessions for Ternbird development tasks."""

from __future__ import annotations

import nox

PACKAGE = "src/ternbird"
PYTHONS = ["3.10", "3.11", "3.12"]
CI_ENV = {"TERNBIRD_CI": "1"}

nox.options.error_on_missing_interpreters = False
nox.options.sessions = ["lint", "tests", "typecheck"]


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks."""
    session.install("ruff")
    session.run("ruff", "check", PACKAGE, "tests", "noxfile.py")
    session.run("ruff", "format", "--check", PACKAGE, "tests", "noxfile.py")


@nox.session(name="lint-fix")
def lint_fix(session: nox.Session) -> None:
    """Apply ruff fixes and formatting."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", PACKAGE, "tests", "noxfile.py")
    session.run("ruff", "format", PACKAGE, "tests", "noxfile.py")


@nox.session(python=PYTHONS)
def tests(session: nox.Session) -> None:
    """Run pytest without the headless Textual tests."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", *session.posargs, env=CI_ENV)


@nox.session(name="tests-tui")
def tests_tui(session: nox.Session) -> None:
    """Drive the Textual host headlessly; needs a working asyncio loop."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", "-m", "tui", *session.posargs)


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy with the settings from pyproject.toml."""
    session.install("-e", ".", "mypy")
    session.run("mypy", PACKAGE)


@nox.session
def coverage(session: nox.Session) -> None:
    """Run the whole suite under coverage, the Textual tests included."""
    session.install("-e", ".[dev]", "coverage")
    session.run("coverage", "run", "--source=ternbird", "-m", "pytest", "-q")
    session.run("coverage", "report", "--fail-under=80", "-m")


@nox.session
def build(session: nox.Session) -> None:
    """Build sdist and wheel artifacts."""
    session.install("build")
    session.run("python", "-m", "build")


@nox.session(name="local-dev", venv_backend="none")
def local_dev(session: nox.Session) -> None:
    """Fast local checks against the active environment."""
    session.run("python", "-m", "ruff", "check", PACKAGE, "tests", external=True)
    session.run("python", "-m", "mypy", PACKAGE, external=True)
    session.run("python", "-m", "pytest", "-q", external=True)
