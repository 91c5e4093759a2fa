"""Shared test fixtures for the logex test suite."""

import json
import os
from unittest.mock import patch

import pytest

from logex import manager as _manager_mod
from logex.frames import CallerFrame, describe_scope
from logex.manager import LogManager
from logex.tags import TagFilter


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: slower tests (threads, subprocess)")


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------
class RecordingSink:
    """Sink that keeps every (priority, tag, message) it receives."""

    def __init__(self):
        self.records = []

    def write(self, priority, tag, message):
        self.records.append((priority, tag, message))
        return len(message)

    @property
    def last(self):
        return self.records[-1]


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def manager(sink):
    """A LogManager writing to a RecordingSink, with an empty environment."""
    return LogManager(sink=sink, tag_filter=TagFilter(environ={}))


@pytest.fixture(autouse=True)
def _reset_manager():
    """Reset the LogManager singleton between tests."""
    old = _manager_mod._manager
    yield
    _manager_mod._manager = old


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------
def make_frame(method="foo", file_name="Bar", line=10,
               module="app.models", scope=""):
    """Build a CallerFrame by hand, declaring scope taken from ``scope``."""
    return CallerFrame(
        file_name=file_name,
        line_number=line,
        method_name=method,
        module=module,
        declaring_type=describe_scope(module, scope) if module else None,
        file_path=f"/src/{file_name}",
    )


@pytest.fixture
def frame():
    return make_frame()


# ---------------------------------------------------------------------------
# Config homes
# ---------------------------------------------------------------------------
@pytest.fixture
def tmp_config_home(tmp_path):
    """Provide a temporary home directory for ~/.logex/config.json."""
    home = tmp_path / "home"
    home.mkdir()
    with patch.dict(os.environ, {"HOME": str(home), "USERPROFILE": str(home)}):
        with patch("pathlib.Path.home", return_value=home):
            yield home


@pytest.fixture
def sample_global_config(tmp_config_home):
    """Write a global config file in the tmp home."""
    config_dir = tmp_config_home / ".logex"
    config_dir.mkdir()
    config = {
        "threshold": "WARN",
        "tag_format": {"template": "global-%s",
                       "args": [{"placeholder": "METHOD_NAME"}]},
        "tags": {"Net": "DEBUG", "Db": "ERROR"},
    }
    path = config_dir / "config.json"
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path, config


@pytest.fixture
def sample_project_config(tmp_path):
    """Write a .logex.json in a temporary project directory."""
    project = tmp_path / "project"
    project.mkdir()
    config = {
        "threshold": "DEBUG",
        "message_format": {"template": "%s|%s",
                           "args": ["proj", {"placeholder": "MESSAGE"}]},
        "tags": {"Db": "VERBOSE"},
    }
    path = project / ".logex.json"
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return project, config
