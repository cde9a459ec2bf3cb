"""Common fixtures for the Growatt client tests."""

from unittest.mock import Mock, patch

import pytest
import requests

from growatt_client import Growatt, GrowattConfig, SessionManager

from . import LOGIN_SUCCESS, SESSION_ID, make_response


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep the developer's GROWATT_* variables and .env file out of the tests."""
    for name in (
        "GROWATT_USERNAME",
        "GROWATT_PASSWORD",
        "GROWATT_BASE_URL",
        "GROWATT_SESSION_DURATION",
    ):
        monkeypatch.delenv(name, raising=False)
    with patch("growatt_client.config.load_dotenv") as mock_load_dotenv:
        yield mock_load_dotenv


@pytest.fixture
def http_session() -> requests.Session:
    """Return a real requests session whose network methods are mocked.

    The cookie jar stays real so session cookie handling is exercised.

    - post: the login handshake. Succeeds and sets the JSESSIONID cookie.
    - get: the logout call. Answers with the vendor's 302 redirect.
    - request: every data endpoint. Answers with a small plant data envelope.
    """
    session = requests.Session()

    def _login(*args, **kwargs):
        session.cookies.set("JSESSIONID", SESSION_ID)
        return make_response(LOGIN_SUCCESS)

    session.post = Mock(side_effect=_login)
    session.get = Mock(return_value=make_response(status=302, text=""))
    session.request = Mock(
        return_value=make_response({"result": 1, "obj": {"plantId": "PID1"}})
    )
    return session


@pytest.fixture
def config() -> GrowattConfig:
    """Return a configuration with credentials for the standard server."""
    return GrowattConfig(username="test_user", password="test_password")


@pytest.fixture
def session_manager(config: GrowattConfig, http_session: requests.Session):
    """Return a session manager using the mocked HTTP session."""
    return SessionManager(config, session=http_session)


@pytest.fixture
def client(config: GrowattConfig, http_session: requests.Session) -> Growatt:
    """Return a client using the mocked HTTP session."""
    return Growatt(config, session=http_session)
