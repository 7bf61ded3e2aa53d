"""Nox configuration for EC2 Shutdown Manager development automation.

This file defines automated development tasks including linting, testing,
formatting and coverage.
"""

import nox

# Python versions to test against
PYTHON_VERSIONS = ["3.11"]

# Default sessions to run when no specific session is requested
nox.options.sessions = ["lint", "test", "coverage"]


@nox.session(python=PYTHON_VERSIONS)
def lint(session):
    """Run linting with ruff and mypy."""
    session.install("poetry")
    session.run("poetry", "install", "--all-extras")

    # Run ruff for code quality
    session.run("poetry", "run", "ruff", "check", "src", "tests")

    # Run mypy for type checking
    session.run("poetry", "run", "mypy", "src")

    session.log("✅ Linting completed successfully")


@nox.session(python=PYTHON_VERSIONS)
def format_code(session):
    """Format code with black and isort."""
    session.install("poetry")
    session.run("poetry", "install", "--all-extras")

    session.run("poetry", "run", "black", "src", "tests")
    session.run("poetry", "run", "isort", "src", "tests")
    session.run("poetry", "run", "ruff", "check", "--fix", "src", "tests")

    session.log("✅ Code formatting completed")


@nox.session(python=PYTHON_VERSIONS)
def test(session):
    """Run the test suite with pytest."""
    session.install("poetry")
    session.run("poetry", "install", "--all-extras")

    session.run(
        "poetry", "run", "pytest",
        "tests/",
        "-v",
        "--tb=short",
        "--strict-markers",
        "-m", "not slow",
    )

    session.log("✅ Unit tests completed successfully")


@nox.session(python=PYTHON_VERSIONS)
def coverage(session):
    """Run tests with coverage reporting."""
    session.install("poetry")
    session.run("poetry", "install", "--all-extras")

    session.run(
        "poetry", "run", "pytest",
        "tests/",
        "--cov=src",
        "--cov-report=term-missing",
        "--cov-report=html:htmlcov",
        "--cov-report=xml:coverage.xml",
        "--cov-fail-under=80",
        "-m", "not slow",
    )

    session.log("✅ Coverage analysis completed")
    session.log("📊 Coverage report available at htmlcov/index.html")


@nox.session(python=PYTHON_VERSIONS)
def smoke(session):
    """Check instance status against a real account (needs AWS credentials).

    Examples:
      nox -s smoke
      nox -s smoke -- --config config.json --region eu-west-1
    """
    session.install("poetry")
    session.run("poetry", "install")
    args = session.posargs or []
    session.run("poetry", "run", "ec2-shutdown", "--status", *args)
    session.log("✅ Status check completed")


@nox.session(python=PYTHON_VERSIONS)
def clean(session):
    """Clean up build artifacts and cache files."""
    import shutil
    import os

    # Directories to clean
    clean_dirs = [
        ".pytest_cache",
        "__pycache__",
        ".coverage",
        "htmlcov",
        "coverage.xml",
        "dist",
        ".ruff_cache",
        ".mypy_cache",
    ]

    for dir_name in clean_dirs:
        if os.path.exists(dir_name):
            if os.path.isdir(dir_name):
                shutil.rmtree(dir_name)
                session.log(f"🗑️  Removed directory: {dir_name}")
            else:
                os.remove(dir_name)
                session.log(f"🗑️  Removed file: {dir_name}")

    session.log("✅ Cleanup completed")
