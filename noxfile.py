"""Lint and test nidefaults on multiple python environments."""

from __future__ import annotations

import nox

_PYTHON_VERSIONS = ["3.11", "3.12"]

# Fail nox session when run a program which
# is not installed in its virtualenv
nox.options.error_on_external_run = True


@nox.session(python=_PYTHON_VERSIONS)
def lint(session: nox.Session) -> None:
    """Lint nidefaults.

    # noqa: DAR101
    """
    session.install("--upgrade", "-e", ".[dev]")
    session.run("ruff", "format", "--check", ".")
    session.run("ruff", "check", ".")
    session.run("mypy", "nidefaults")


@nox.session(python=_PYTHON_VERSIONS)
def test(session: nox.Session) -> None:
    """Test nidefaults.

    # noqa: DAR101
    """
    session.install("--upgrade", "-e", ".[test]")
    session.run("pytest", "unittests")


@nox.session(python=_PYTHON_VERSIONS)
def nidefaults_help(session: nox.Session) -> None:
    """Execute nidefaults --help.

    This helps identifying integration issues with the plugins/devices.

    # noqa: DAR101
    """
    session.install("--upgrade", ".")
    session.run("nidefaults", "--help")
