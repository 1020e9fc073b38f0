import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# Packages with C extensions that must be rebuilt per Python version.
# Poetry's wheel cache can serve a .so compiled for the wrong interpreter.
_C_EXT_PACKAGES = ["psycopg2-binary"]

_DOMAIN_TEST_DIRS = [
    "tests/identity/domain/",
    "tests/catalogue/domain/",
    "tests/ordering/domain/",
]


def _install(session: nox.Session) -> None:
    """Install the project with every extra (test tooling included) into the nox virtualenv."""
    session.run("poetry", "install", "--all-extras", external=True)
    # Force-rebuild C-extension packages so the .so matches this Python version.
    session.run(
        "pip",
        "install",
        "--force-reinstall",
        "--no-cache-dir",
        *_C_EXT_PACKAGES,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no HTTP or persistence involved)."""
    _install(session)
    session.run("pytest", *_DOMAIN_TEST_DIRS)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_sqlite(session: nox.Session) -> None:
    """Run the suite against the file-backed SQLite configuration."""
    _install(session)
    session.run("pytest", "--env", "sqlite", *session.posargs)
