import pytest

from hda.gradeavg.config import Config
from hda.gradeavg.error import ConfigError
from hda.gradeavg.obs.path import Path

ENV_VARS = [
    "OBS_USERNAME",
    "OBS_PASSWORD",
    "OBS_URL",
    "OBS_LAYOUT",
    "OBS_LOGIN_THRESHOLD",
    "OBS_TIMEOUT",
    "LOG_DIR",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path, fresh_config):
    monkeypatch.chdir(tmp_path)  # no stray .env
    for name in ENV_VARS:
        # setenv first so teardown also undoes values loaded from .env
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_defaults(clean_env):
    conf = Config()

    assert conf.username == ""
    assert conf.password == ""
    assert conf.base_url == Path.HOSTNAME == "https://obs.fbi.h-da.de/obs/"
    assert conf.layout == "grades"
    assert conf.login_threshold == 20000
    assert conf.timeout == 30
    assert conf.log_dir == "log"


def test_environment(clean_env):
    clean_env.setenv("OBS_USERNAME", "alice")
    clean_env.setenv("OBS_PASSWORD", "secret")
    clean_env.setenv("OBS_URL", "https://obs.example.de/obs")
    clean_env.setenv("OBS_LAYOUT", "legacy")
    clean_env.setenv("OBS_LOGIN_THRESHOLD", "15000")

    conf = Config()

    assert conf.username == "alice"
    assert conf.password == "secret"
    assert conf.base_url == "https://obs.example.de/obs/"
    assert conf.layout == "legacy"
    assert conf.login_threshold == 15000


def test_dotenv_file(clean_env, tmp_path):
    (tmp_path / ".env").write_text("OBS_USERNAME=bob\nOBS_TIMEOUT=5\n")

    conf = Config()

    assert conf.username == "bob"
    assert conf.timeout == 5


def test_invalid_integer(clean_env):
    clean_env.setenv("OBS_TIMEOUT", "soon")

    with pytest.raises(ConfigError, match="OBS_TIMEOUT"):
        Config()


def test_singleton(clean_env):
    assert Config() is Config()
