from pathlib import Path
from unittest.mock import MagicMock

import pytest

from hda.gradeavg.config import Config

MOCK_DIR = Path(__file__).parent / "mock"


def pytest_addoption(parser):
    parser.addoption("--run-manual", action="store_true", default=False, help="run manual tests")


def pytest_configure(config):
    config.addinivalue_line("markers", "manual: mark test as manual to run")


def pytest_collection_modifyitems(config, items):
    skip_manual = pytest.mark.skip(reason="need --run-manual option to run")

    run_manual = config.getoption("--run-manual")

    for item in items:
        if "manual" in item.keywords and not run_manual:
            item.add_marker(skip_manual)


@pytest.fixture
def conf():
    conf = MagicMock()
    conf.base_url = "https://obs.example.de/obs/"
    conf.layout = "grades"
    conf.login_threshold = 20000
    conf.timeout = 30
    return conf


@pytest.fixture
def fresh_config():
    """Drops the Config singleton before and after the test."""
    Config._instance = None
    yield
    Config._instance = None


@pytest.fixture
def overview_html():
    return (MOCK_DIR / "noten_page.html").read_text(encoding="utf-8")


@pytest.fixture
def legacy_overview_bytes():
    return (MOCK_DIR / "noten_legacy_page.html").read_bytes()


@pytest.fixture
def legacy_overview_html(legacy_overview_bytes):
    return legacy_overview_bytes.decode("windows-1252")
