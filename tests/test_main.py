"""Tests for the command line tool."""

from unittest.mock import patch

import pytest
import requests

from growatt_client.__main__ import main

from . import LOGIN_DECLINED, make_response


@pytest.fixture
def mock_session(http_session: requests.Session):
    """Make the command line client use the mocked HTTP session."""
    with patch(
        "growatt_client.session.requests.Session", return_value=http_session
    ):
        yield http_session


def test_missing_credentials(
    mock_session: requests.Session, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test the tool refuses to run without credentials."""
    assert main([]) == 2

    assert "Missing credentials" in capsys.readouterr().err
    mock_session.post.assert_not_called()


def test_invalid_session_duration(mock_session: requests.Session) -> None:
    """Test a session duration below one minute is rejected."""
    assert (
        main(["--username", "u", "--password", "p", "--session-duration", "0"]) == 2
    )
    mock_session.post.assert_not_called()


def test_lists_plants(
    mock_session: requests.Session,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test plants and their details are printed, then the session is closed."""
    monkeypatch.setenv("GROWATT_USERNAME", "env_user")
    monkeypatch.setenv("GROWATT_PASSWORD", "env_password")
    mock_session.request.side_effect = [
        make_response([{"id": "12345", "name": "Test Plant"}]),
        make_response(
            {"result": 1, "obj": {"plantId": "12345", "todayEnergy": "23.5"}}
        ),
    ]

    assert main([]) == 0

    out = capsys.readouterr().out
    assert "Found 1 plants:" in out
    assert "Plant ID: 12345" in out
    assert "Plant Name: Test Plant" in out
    assert "Today's Energy: 23.5" in out
    assert mock_session.post.call_args.kwargs["data"]["account"] == "env_user"
    mock_session.get.assert_called_once()


def test_alternate_url(mock_session: requests.Session) -> None:
    """Test the alternate server is used when requested."""
    mock_session.request.return_value = make_response(
        [{"id": "12345", "name": "Test Plant"}]
    )

    main(["--username", "u", "--password", "p", "--alternate-url"])

    assert mock_session.post.call_args.args[0] == "https://openapi.growatt.com/login"


def test_login_declined(
    mock_session: requests.Session, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test declined credentials exit with status 1."""
    mock_session.post.side_effect = None
    mock_session.post.return_value = make_response(LOGIN_DECLINED)

    assert main(["--username", "u", "--password", "wrong"]) == 1

    assert "Login failed" in capsys.readouterr().err
    mock_session.request.assert_not_called()


def test_api_error(
    mock_session: requests.Session, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test a failing request exits with status 1."""
    mock_session.request.side_effect = requests.exceptions.ConnectionError("down")

    assert main(["--username", "u", "--password", "p"]) == 1

    assert "Error:" in capsys.readouterr().err
