import sys
from unittest.mock import patch

from loguru import logger
import pytest

from hda.gradeavg.__main__ import main
from hda.gradeavg.error import CredentialsError
from hda.gradeavg.error import LoginError
from hda.gradeavg.error import TransportError


@pytest.fixture(autouse=True)
def env(monkeypatch, tmp_path, fresh_config):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "log"))
    monkeypatch.setenv("OBS_USERNAME", "alice")
    monkeypatch.setenv("OBS_PASSWORD", "secret")
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def mock_grade_average():
    with patch("hda.gradeavg.module.grade_average.GradeAverage") as mock_cls:
        yield mock_cls


def test_main_success(mock_grade_average, tmp_path):
    assert main([]) == 0

    conf = mock_grade_average.call_args.args[0]
    assert conf.layout == "grades"
    mock_grade_average.return_value.start.assert_called_once_with("alice", "secret")
    assert (tmp_path / "log").exists()


def test_main_flags_override_config(mock_grade_average):
    argv = [
        "--username",
        "bob",
        "--password",
        "hunter2",
        "--layout",
        "legacy",
        "--base-url",
        "https://obs.example.de/obs",
    ]

    assert main(argv) == 0

    conf = mock_grade_average.call_args.args[0]
    assert conf.layout == "legacy"
    assert conf.base_url == "https://obs.example.de/obs/"
    mock_grade_average.return_value.start.assert_called_once_with("bob", "hunter2")


@pytest.mark.parametrize("error", [LoginError("Login failed."), TransportError("GET failed")])
def test_main_fatal_errors(mock_grade_average, capsys, error):
    mock_grade_average.return_value.start.side_effect = error

    assert main([]) == 1
    assert f"Fatal error: {error}" in capsys.readouterr().out


def test_main_credentials_error(mock_grade_average, monkeypatch):
    monkeypatch.delenv("OBS_PASSWORD")

    with patch("hda.gradeavg.__main__.read_credentials", side_effect=CredentialsError("EOF")):
        assert main([]) == 1

    mock_grade_average.assert_not_called()


def test_main_invalid_config(mock_grade_average, monkeypatch):
    monkeypatch.setenv("OBS_LOGIN_THRESHOLD", "big")

    assert main([]) == 1
    mock_grade_average.assert_not_called()
