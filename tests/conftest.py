"""
Register pytest plugins, fixtures, and hooks to be used during test execution.

All fixtures are organized in the fixtures/ directory for better maintainability.

Docs: https://stackoverflow.com/questions/34466027/in-pytest-what-is-the-use-of-conftest-py-files
"""

import sys
from pathlib import Path

THIS_DIR = Path(__file__).parent
TESTS_DIR_PARENT = (THIS_DIR / "..").resolve()

# add the parent directory of tests/ to PYTHONPATH
# so that we can use "from tests.<module> import ..." in our tests and fixtures
sys.path.insert(0, str(TESTS_DIR_PARENT))
# src/ layout: make filmops_api importable without an editable install
sys.path.insert(0, str(TESTS_DIR_PARENT / "src"))

# Register all fixture modules
# Fixtures are automatically discovered from these modules
pytest_plugins = [
    # Core application fixtures (settings, app, authenticated client)
    "tests.fixtures.app_fixtures",
    # Repository patching helpers
    "tests.fixtures.repository_fixtures",
    # Sample database rows
    "tests.fixtures.row_fixtures",
    # Mocked asyncpg connections
    "tests.fixtures.db_fixtures",
]
