"""Authenticated request dispatch with session-expiry recovery."""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import Any, TypeVar

import requests

from .const import (
    LOGIN_PAGE_MARKERS,
    LOGIN_PATH,
    NOT_LOGGED_IN_KEYS,
    NOT_LOGGED_IN_PATTERN,
)
from .exceptions import GrowattJsonError, GrowattNotLoggedInError, GrowattRequestError
from .session import SessionManager

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")


def is_login_page(response: requests.Response) -> bool:
    """Return True if the server answered with its login page instead of data."""
    if response.url and response.url.split("?", 1)[0].rstrip("/").endswith(
        f"/{LOGIN_PATH}"
    ):
        return True
    if "text/html" not in response.headers.get("Content-Type", ""):
        return False
    head = response.text.lstrip()[:100].lower()
    return head.startswith(LOGIN_PAGE_MARKERS)


def has_not_logged_in_marker(payload: Any) -> bool:
    """Return True if a decoded JSON envelope says the session is not logged in."""
    if not isinstance(payload, dict):
        return False
    for key in NOT_LOGGED_IN_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and NOT_LOGGED_IN_PATTERN.search(value):
            return True
    return False


class ApiDispatcher:
    """
    Send authenticated requests to the Growatt server.

    The server keeps answering HTTP 200 once a session has expired on its
    side, so every response is inspected for a "not logged in" marker. On the
    first such response the session is re-established and the request sent
    once more. A second marker is terminal.
    """

    def __init__(self, session_manager: SessionManager) -> None:
        """Initialize the dispatcher on top of a session manager."""
        self.session_manager = session_manager

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        decoder: Callable[[Any], _T] | None = None,
        operation: str = "API request",
    ) -> _T | Any:
        """
        Perform an authenticated request and decode the JSON response.

        Args:
            method (str): HTTP method.
            path (str): Path relative to the base URL.
            params (Mapping | None): Query string parameters.
            data (Mapping | None): Form fields.
            headers (Mapping | None): Extra request headers.
            decoder (Callable | None): Turns the decoded JSON into the
                caller's shape. It raises GrowattInvalidResponseError when the
                structure does not match.
            operation (str): Name of the operation for log and error messages.

        Returns:
            The decoded JSON, or the decoder's result.

        Raises:
            GrowattNotLoggedInError: If no session could be established, or
                the server still rejects it after one re-login.
            GrowattAuthError: If the stored credentials are declined.
            GrowattRequestError: If the HTTP request fails.
            GrowattJsonError: If the body is not valid JSON.
            GrowattInvalidResponseError: If the decoder rejects the payload.

        """
        self.session_manager.ensure_logged_in()

        expired, payload = self._send(method, path, params, data, headers, operation)
        if expired:
            _LOGGER.warning(
                "Session rejected by the server during %s, logging in again",
                operation,
            )
            self.session_manager.invalidate()
            self.session_manager.relogin()

            expired, payload = self._send(
                method, path, params, data, headers, operation
            )
            if expired:
                self.session_manager.invalidate()
                msg = (
                    f"Session still rejected after logging in again during {operation}"
                )
                raise GrowattNotLoggedInError(msg)

        if decoder is None:
            return payload
        return decoder(payload)

    def _send(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None,
        data: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
        operation: str,
    ) -> tuple[bool, Any]:
        """Send one request and return (session_expired, payload)."""
        manager = self.session_manager
        url = manager.url(path)
        _LOGGER.debug("%s %s (%s)", method, url, operation)
        try:
            response = manager.session.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=manager.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as ex:
            msg = f"Network error during {operation}: {ex}"
            raise GrowattRequestError(msg) from ex

        if is_login_page(response):
            return True, None

        try:
            payload = response.json()
        except ValueError as ex:
            msg = f"Invalid JSON response during {operation}: {ex}"
            raise GrowattJsonError(msg) from ex

        return has_not_logged_in_marker(payload), payload
