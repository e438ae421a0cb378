from urllib.parse import urljoin

from loguru import logger
import requests

from hda.gradeavg.config import Config
from hda.gradeavg.error import TransportError
from hda.gradeavg.module.grades.parser import parse_login_tan
from hda.gradeavg.obs.path import Path


class Obs:
    """HTTP client for the OBS portal.

    Wraps a single `requests.Session` whose cookie jar carries the
    authenticated state across every request of a run. Requests are issued
    one at a time; any transport failure raises `TransportError`.
    """

    def __init__(self, config: Config, session: requests.Session | None = None):
        self.config = config
        self.session = session if session is not None else requests.Session()

    def close(self):
        """Close the underlying HTTP session"""
        self.session.close()

    def url(self, path: str) -> str:
        """Resolve a portal path (or an absolute link) against the base URL."""
        return urljoin(self.config.base_url, path)

    def login(self, username: str, password: str) -> bool:
        """Logs in with the LoginTAN scraped from the portal root page.

        The portal gives no structured success signal. A successful login lands
        on the dashboard, which is much larger than the login failure page, so
        success is judged by the size of the response body.

        Returns:
            bool: True if the response body exceeds the configured threshold.
        """
        login_tan = parse_login_tan(self.get(""))
        if not login_tan:
            logger.warning("No LoginTAN found on the login page.")

        data = {"username": username, "password": password, "LoginTAN": login_tan}
        response = self._request("POST", Path.LOGIN, data=data)

        if not self.is_logged_in(response.content):
            logger.warning(
                f"Login response has {len(response.content)} bytes, "
                f"expected more than {self.config.login_threshold}."
            )
            return False

        logger.info("Authentication successful.")
        return True

    def is_logged_in(self, content: bytes | str) -> bool:
        """Check if a login response body looks like the dashboard."""
        return len(content) > self.config.login_threshold

    def get(self, path: str, encoding: str | None = None) -> str:
        """GET a portal page and return its decoded body.

        Args:
            path: Path relative to the base URL, or an absolute URL.
            encoding: Overrides the charset declared by the server.
        """
        response = self._request("GET", path)
        if encoding:
            response.encoding = encoding
        return response.text

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self.url(path)
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.config.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        return response
