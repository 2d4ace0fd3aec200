"""Shared test fixtures for Claude usage stats."""

import os
import sys
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def qapp():
    """Create a QCoreApplication for tests that need Qt."""
    os.environ["QT_QPA_PLATFORM"] = "offscreen"
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv or ["test"])
    yield app


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def simple_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "simple_session.jsonl"


@pytest.fixture
def tools_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "session_with_tools.jsonl"


@pytest.fixture
def malformed_session_path(fixtures_dir) -> Path:
    return fixtures_dir / "malformed_session.jsonl"


@pytest.fixture
def tmp_home(tmp_path) -> Path:
    """A fake home directory holding a .claude tree."""
    home = tmp_path / "home" / "wiz"
    home.mkdir(parents=True)
    return home


@pytest.fixture
def tmp_session_dir(tmp_home) -> Path:
    """Create a temporary Claude projects directory structure."""
    projects_dir = tmp_home / ".claude" / "projects"
    projects_dir.mkdir(parents=True)
    return projects_dir


@pytest.fixture
def populated_projects(tmp_session_dir, simple_session_path, tools_session_path) -> Path:
    """Two projects with sessions plus one empty project directory."""
    myapp = tmp_session_dir / "-home-wiz-projects-myapp"
    myapp.mkdir()
    (myapp / "sess-simple.jsonl").write_text(simple_session_path.read_text())
    (myapp / "sess-tools.jsonl").write_text(tools_session_path.read_text())

    other = tmp_session_dir / "-home-wiz-projects-other"
    other.mkdir()
    (other / "sess-tools.jsonl").write_text(tools_session_path.read_text())

    (tmp_session_dir / "-home-wiz-empty").mkdir()
    return tmp_session_dir
