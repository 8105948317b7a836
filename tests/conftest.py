import os
import pytest

os.environ["FLASK_ENV"] = "testing"

from tourney import create_app
from tourney.models import Team


@pytest.fixture(scope="session")
def app():
    app = create_app("testing")
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def teams():
    """Teams A, B, C, D in that order."""
    return [Team(id=tid, name=f"Team {tid}") for tid in ("A", "B", "C", "D")]

