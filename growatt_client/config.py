"""Configuration for the Growatt web API client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
import logging
import os
from typing import Any

from dotenv import load_dotenv
import voluptuous as vol

from .const import (
    CONF_BASE_URL,
    CONF_PASSWORD,
    CONF_SESSION_DURATION,
    CONF_TIMEOUT,
    CONF_USERNAME,
    DEFAULT_SESSION_DURATION,
    DEFAULT_TIMEOUT,
    DEFAULT_URL,
    ENV_BASE_URL,
    ENV_PASSWORD,
    ENV_SESSION_DURATION,
    ENV_USERNAME,
    SERVER_URLS,
)
from .exceptions import GrowattParameterError

_LOGGER = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """Strip trailing slashes so paths can be joined with a single '/'."""
    return url.rstrip("/")


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_USERNAME, default=None): vol.Any(None, str),
        vol.Optional(CONF_PASSWORD, default=None): vol.Any(None, str),
        vol.Optional(CONF_BASE_URL, default=DEFAULT_URL): vol.All(
            str, vol.Url(), normalize_url
        ),
        vol.Optional(
            CONF_SESSION_DURATION,
            default=int(DEFAULT_SESSION_DURATION.total_seconds() // 60),
        ): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Optional(CONF_TIMEOUT, default=DEFAULT_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
    }
)


@dataclass(frozen=True)
class GrowattConfig:
    """Settings a client is constructed with."""

    username: str | None = None
    password: str | None = None
    base_url: str = DEFAULT_URL
    session_duration: timedelta = DEFAULT_SESSION_DURATION
    timeout: float = DEFAULT_TIMEOUT

    @property
    def has_credentials(self) -> bool:
        """Return True when both username and password are set."""
        return bool(self.username) and bool(self.password)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GrowattConfig:
        """
        Build a configuration from a mapping of raw values.

        Args:
            data (Mapping): Keys are ``username``, ``password``, ``base_url``,
                ``session_duration`` (minutes) and ``timeout`` (seconds).
                All of them are optional.

        Returns:
            GrowattConfig: The validated configuration.

        Raises:
            GrowattParameterError: If a value fails validation.

        """
        try:
            validated = CONFIG_SCHEMA(dict(data))
        except vol.Invalid as err:
            msg = f"Invalid Growatt configuration: {err}"
            raise GrowattParameterError(msg) from err

        if validated[CONF_BASE_URL] not in SERVER_URLS:
            _LOGGER.warning(
                "%s is not a known Growatt server, expected one of %s",
                validated[CONF_BASE_URL],
                ", ".join(SERVER_URLS),
            )

        return cls(
            username=validated[CONF_USERNAME],
            password=validated[CONF_PASSWORD],
            base_url=validated[CONF_BASE_URL],
            session_duration=timedelta(minutes=validated[CONF_SESSION_DURATION]),
            timeout=validated[CONF_TIMEOUT],
        )

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, *, load_env_file: bool = True
    ) -> GrowattConfig:
        """
        Build a configuration from environment variables.

        Reads GROWATT_USERNAME, GROWATT_PASSWORD, GROWATT_BASE_URL and
        GROWATT_SESSION_DURATION (minutes). When no explicit mapping is given,
        a ``.env`` file in the working directory is loaded first.

        An unparsable session duration is ignored and the default is kept.
        """
        if environ is None:
            if load_env_file:
                load_dotenv()
            environ = os.environ

        data: dict[str, Any] = {}
        if environ.get(ENV_USERNAME):
            data[CONF_USERNAME] = environ[ENV_USERNAME]
        if environ.get(ENV_PASSWORD):
            data[CONF_PASSWORD] = environ[ENV_PASSWORD]
        if environ.get(ENV_BASE_URL):
            data[CONF_BASE_URL] = environ[ENV_BASE_URL]

        duration = environ.get(ENV_SESSION_DURATION)
        if duration:
            try:
                minutes = int(duration)
            except ValueError:
                minutes = 0
            if minutes >= 1:
                data[CONF_SESSION_DURATION] = minutes
            else:
                _LOGGER.warning(
                    "Ignoring invalid %s value %r, using the default of %s",
                    ENV_SESSION_DURATION,
                    duration,
                    DEFAULT_SESSION_DURATION,
                )

        return cls.from_dict(data)
