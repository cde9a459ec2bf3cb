"""Session handling for the Growatt web API."""

from __future__ import annotations

from datetime import UTC, datetime
import hashlib
import logging
import threading
from typing import Any

import requests

from .config import GrowattConfig, normalize_url
from .const import (
    FORM_CONTENT_TYPE,
    LOGIN_PATH,
    LOGIN_RESULT_SUCCESS,
    LOGOUT_HEADERS,
    LOGOUT_PATH,
    SESSION_COOKIE,
)
from .exceptions import (
    GrowattAuthError,
    GrowattInvalidResponseError,
    GrowattJsonError,
    GrowattNotLoggedInError,
    GrowattRequestError,
)

_LOGGER = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """
    Hash a password the way the Growatt login form expects it.

    Args:
        password (str): The plaintext password.

    Returns:
        str: The MD5 digest as 32 lowercase hexadecimal characters.

    """
    return hashlib.md5(password.encode("utf-8")).hexdigest()  # noqa: S324


class SessionManager:
    """
    Own the credentials, cookie jar and login state of one Growatt session.

    Session mutations are serialized with a re-entrant lock. The state read
    accessors do not take the lock.
    """

    def __init__(
        self,
        config: GrowattConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the session manager.

        Args:
            config (GrowattConfig | None): Client settings. Credentials found
                here are stored but no login is attempted.
            session (requests.Session | None): HTTP session to use. A new one
                is created when omitted.

        """
        config = config or GrowattConfig()
        self.session = session or requests.Session()
        self._base_url = normalize_url(config.base_url)
        self.session_duration = config.session_duration
        self.timeout = config.timeout
        self._username = config.username
        self._password = config.password
        self._lock = threading.RLock()
        self._logged_in = False
        self._token: str | None = None
        self._established_at: datetime | None = None
        self._last_error: str | None = None

    @property
    def base_url(self) -> str:
        """Return the vendor endpoint requests are sent to."""
        return self._base_url

    @base_url.setter
    def base_url(self, url: str) -> None:
        """Switch the vendor endpoint. A session on the old endpoint is dropped."""
        url = normalize_url(url)
        with self._lock:
            if url == self._base_url:
                return
            _LOGGER.debug("Switching endpoint from %s to %s", self._base_url, url)
            self._base_url = url
            self._reset()
            self.session.cookies.clear()

    @property
    def established_at(self) -> datetime | None:
        """Return when the current session was established."""
        return self._established_at

    def url(self, path: str) -> str:
        """Return the absolute URL for a path on the vendor endpoint."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def is_logged_in(self) -> bool:
        """Return True while a session is established."""
        return self._logged_in

    def get_token(self) -> str | None:
        """Return the opaque session token, for diagnostics only."""
        return self._token

    def has_credentials(self) -> bool:
        """Return True when credentials are stored for automatic logins."""
        return bool(self._username) and bool(self._password)

    def set_credentials(self, username: str, password: str) -> None:
        """Store credentials for later automatic logins."""
        with self._lock:
            self._username = username
            self._password = password

    def is_session_valid(self) -> bool:
        """Return True if logged in and the session duration has not elapsed."""
        if not self._logged_in or self._established_at is None:
            return False
        return datetime.now(tz=UTC) - self._established_at < self.session_duration

    def login(self, username: str, password: str) -> bool:
        """
        Log in to the Growatt server.

        The handshake is always performed, even if a session exists.

        Args:
            username (str): Account name.
            password (str): Plaintext password. Only its digest is sent.

        Returns:
            bool: True if the server accepted the credentials, False if it
                declined them.

        Raises:
            GrowattAuthError: If username or password is empty.
            GrowattRequestError: If the HTTP request fails.
            GrowattJsonError: If the response is not JSON.
            GrowattInvalidResponseError: If the response has an unexpected shape.

        """
        if not username or not password:
            msg = "Username and password must not be empty"
            raise GrowattAuthError(msg)

        with self._lock:
            self._username = username
            self._password = password

            form = {
                "account": username,
                "password": "",
                "validateCode": "",
                "isReadPact": "1",
                "passwordCrc": hash_password(password),
            }

            _LOGGER.debug("Logging in to %s as %s", self._base_url, username)
            try:
                response = self.session.post(
                    self.url(LOGIN_PATH),
                    data=form,
                    headers={"Content-Type": FORM_CONTENT_TYPE},
                    timeout=self.timeout,
                )
                response.raise_for_status()
            except requests.exceptions.RequestException as ex:
                self._reset()
                msg = f"Network error during Growatt login: {ex}"
                raise GrowattRequestError(msg) from ex

            try:
                login_response = response.json()
            except ValueError as ex:
                self._reset()
                msg = f"Invalid JSON in login response: {ex}"
                raise GrowattJsonError(msg) from ex

            result = self._login_result(login_response)
            if result != LOGIN_RESULT_SUCCESS:
                self._last_error = str(login_response.get("msg") or "Unknown error")
                _LOGGER.info(
                    "Growatt login declined for %s: %s", username, self._last_error
                )
                self._reset()
                return False

            token = login_response.get("token") or self._session_cookie()
            if not token:
                self._reset()
                msg = "Login succeeded but no session token or cookie was returned"
                raise GrowattInvalidResponseError(msg)

            self._logged_in = True
            self._token = str(token)
            self._last_error = None
            self._established_at = datetime.now(tz=UTC)
            _LOGGER.info("Logged in to %s as %s", self._base_url, username)
            return True

    def _login_result(self, login_response: Any) -> int:
        if not isinstance(login_response, dict):
            self._reset()
            msg = "Invalid login response structure"
            raise GrowattInvalidResponseError(msg)
        try:
            return int(login_response["result"])
        except (KeyError, TypeError, ValueError) as ex:
            self._reset()
            msg = f"Missing or invalid 'result' in login response: {ex}"
            raise GrowattInvalidResponseError(msg) from ex

    def _session_cookie(self) -> str | None:
        cookies = self.session.cookies
        if cookies.get(SESSION_COOKIE):
            return cookies.get(SESSION_COOKIE)
        for cookie in cookies:
            if cookie.value:
                return cookie.value
        return None

    def logout(self) -> bool:
        """
        Log out from the Growatt server.

        Local state is always reset, even when the remote call fails.

        Returns:
            bool: True if there was no session or the server confirmed the
                logout, False otherwise.

        """
        with self._lock:
            if not self._logged_in:
                _LOGGER.debug("No active session to log out from")
                return True

            headers = {**LOGOUT_HEADERS, "Referer": self.url("index")}
            try:
                response = self.session.get(
                    self.url(LOGOUT_PATH),
                    headers=headers,
                    allow_redirects=False,
                    timeout=self.timeout,
                )
            except requests.exceptions.RequestException as ex:
                _LOGGER.error("Error during Growatt logout: %s", ex)
                return False
            finally:
                self._reset()
                self.session.cookies.clear()

            # The server answers a successful logout with a redirect
            success = response.status_code == 302 or response.ok
            if success:
                _LOGGER.info("Logged out from %s", self._base_url)
            else:
                _LOGGER.warning(
                    "Logout returned unexpected status code: %s", response.status_code
                )
            return success

    def ensure_logged_in(self) -> None:
        """
        Make sure a valid session exists, logging in again if needed.

        Raises:
            GrowattNotLoggedInError: If no credentials were ever supplied.
            GrowattAuthError: If the stored credentials are declined.

        """
        with self._lock:
            if self.is_session_valid():
                return
            if self._logged_in:
                _LOGGER.debug(
                    "Session older than %s, logging in again", self.session_duration
                )
            self.relogin()

    def relogin(self) -> None:
        """
        Log in with the stored credentials, ignoring the session age.

        Raises:
            GrowattNotLoggedInError: If no credentials were ever supplied.
            GrowattAuthError: If the stored credentials are declined.

        """
        with self._lock:
            if not self.has_credentials():
                msg = "No credentials available, call login() first"
                raise GrowattNotLoggedInError(msg)
            if not self.login(self._username, self._password):
                msg = (
                    "Stored credentials were declined by the Growatt server: "
                    f"{self._last_error}"
                )
                raise GrowattAuthError(msg, error_msg=self._last_error)

    def invalidate(self) -> None:
        """Forget the session after the server rejected it."""
        with self._lock:
            _LOGGER.debug("Invalidating session for %s", self._base_url)
            self._reset()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def _reset(self) -> None:
        self._logged_in = False
        self._token = None
        self._established_at = None
