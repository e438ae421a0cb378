import os
from typing import Self

from dotenv import find_dotenv
from dotenv import load_dotenv
from loguru import logger

from hda.gradeavg.error import ConfigError
from hda.gradeavg.obs.path import Path


class Config:
    """Application configuration manager.

    Handles loading and validation of environment variables and configuration settings
    for the gradeavg application, including credentials, the portal URL, the page
    layout and request settings.
    """

    _instance: Self | None = None

    def load(self):
        """Load environment variables

        The .env file is looked up from the working directory.
        Variables already set in the environment take priority over the .env file
        See .env-example for the available variables
        """
        load_dotenv(find_dotenv(usecwd=True))

        # OBS credentials. Empty values are prompted for at startup.
        self.username = os.getenv("OBS_USERNAME", "")
        self.password = os.getenv("OBS_PASSWORD", "")
        if not self.username or not self.password:
            logger.debug("OBS_USERNAME or OBS_PASSWORD not set. Will prompt for credentials.")

        # Portal
        self.base_url = os.getenv("OBS_URL", Path.HOSTNAME)
        if not self.base_url.endswith("/"):
            self.base_url += "/"
        self.layout = os.getenv("OBS_LAYOUT", "grades")
        self.login_threshold = self._get_int("OBS_LOGIN_THRESHOLD", 20000)
        self.timeout = self._get_int("OBS_TIMEOUT", 30)

        self.log_dir = os.getenv("LOG_DIR", "log")

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            instance = super(Config, cls).__new__(cls)

            instance.load()
            cls._instance = instance
        return cls._instance

    @staticmethod
    def _get_int(name: str, default: int) -> int:
        value = os.getenv(name)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError:
            raise ConfigError(f"{name} must be an integer, got {value!r}.") from None
