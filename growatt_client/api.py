"""Client for the Growatt web API (server.growatt.com)."""

from __future__ import annotations

from datetime import date, datetime, timedelta
import logging
from typing import Any

import requests

from .config import GrowattConfig
from .const import (
    AJAX_HEADERS,
    ALTERNATE_URL,
    BATTERY_CHART_PATH,
    DATE_FORMAT,
    DATETIME_FORMAT,
    DEVICE_LIST_PATH,
    DEVICES_BY_PLANT_LIST_PATH,
    DEVICES_BY_PLANT_PATH,
    ENERGY_DAY_CHART_PATH,
    ENERGY_MONTH_CHART_PATH,
    ENERGY_TOTAL_CHART_PATH,
    ENERGY_YEAR_CHART_PATH,
    FAULT_LOG_PATH,
    MIX_SETTING_PATH,
    MIX_STATUS_PATH,
    MIX_TOTAL_PATH,
    PLANT_DATA_PATH,
    PLANT_LIST_PATH,
    WEATHER_PATH,
)
from .dispatcher import ApiDispatcher
from .exceptions import GrowattInvalidResponseError, GrowattParameterError
from .models import PlantData, PlantList
from .session import SessionManager

_LOGGER = logging.getLogger(__name__)

EMPTY_RESPONSE_MSG = "Empty response. Please ensure you are logged in."


def _format_date(day: str | date | None) -> str:
    """Return the day as YYYY-MM-DD, defaulting to today in local time."""
    if day is None:
        return datetime.now().astimezone().strftime(DATE_FORMAT)
    if isinstance(day, date):
        return day.strftime(DATE_FORMAT)
    return day


def _non_empty(payload: Any) -> Any:
    """Reject a null or empty-object response."""
    if payload is None or (isinstance(payload, dict) and not payload):
        raise GrowattInvalidResponseError(EMPTY_RESPONSE_MSG)
    return payload


def _obj(payload: Any) -> Any:
    """Return the non-empty ``obj`` member of a response envelope."""
    if not isinstance(payload, dict) or "obj" not in payload:
        msg = "Invalid response structure, 'obj' is missing"
        raise GrowattInvalidResponseError(msg)
    obj = payload["obj"]
    if obj is None or (isinstance(obj, dict) and not obj):
        raise GrowattInvalidResponseError(EMPTY_RESPONSE_MSG)
    return obj


def _plant_list(payload: Any) -> PlantList:
    if not isinstance(payload, list) or not payload:
        raise GrowattInvalidResponseError(EMPTY_RESPONSE_MSG)
    return PlantList.from_list(payload)


def _plant_data(payload: Any) -> PlantData:
    return PlantData.from_dict(_obj(payload))


def _mix_ids(payload: Any) -> list[Any]:
    if not isinstance(payload, dict) or not isinstance(payload.get("obj"), dict):
        msg = "Invalid response structure, 'obj' is missing"
        raise GrowattInvalidResponseError(msg)
    if "mix" not in payload["obj"]:
        msg = "Invalid response structure, 'obj.mix' is missing"
        raise GrowattInvalidResponseError(msg)
    mix = payload["obj"]["mix"]
    if not isinstance(mix, list) or not mix:
        raise GrowattInvalidResponseError(EMPTY_RESPONSE_MSG)
    return mix


class Growatt:
    """
    Growatt web API client.

    Logs in with username and password, keeps the cookie-based session alive
    and re-authenticates transparently when the server drops it.

    Example:
        with Growatt.from_env() as client:
            for plant in client.get_plants():
                print(plant.plant_name)

    """

    def __init__(
        self,
        config: GrowattConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config (GrowattConfig | None): Client settings, defaults to the
                standard server without credentials.
            session (requests.Session | None): HTTP session to use.

        """
        self.session_manager = SessionManager(config, session=session)
        self.dispatcher = ApiDispatcher(self.session_manager)

    @classmethod
    def from_env(cls, *, session: requests.Session | None = None) -> Growatt:
        """Create a client configured from GROWATT_* environment variables."""
        return cls(GrowattConfig.from_env(), session=session)

    def __enter__(self) -> Growatt:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Log out if needed and release the HTTP session."""
        try:
            self.logout()
        finally:
            self.session_manager.close()

    @property
    def base_url(self) -> str:
        """Return the server URL requests are sent to."""
        return self.session_manager.base_url

    @property
    def session_duration(self) -> timedelta:
        """Return how long a session is trusted before logging in again."""
        return self.session_manager.session_duration

    def with_alternate_url(self) -> Growatt:
        """Send subsequent requests to the alternate Growatt endpoint."""
        self.session_manager.base_url = ALTERNATE_URL
        return self

    def with_session_duration(self, minutes: int) -> Growatt:
        """Set how many minutes a session is trusted before logging in again."""
        if minutes < 1:
            msg = f"Session duration must be at least 1 minute, got {minutes}"
            raise GrowattParameterError(msg)
        self.session_manager.session_duration = timedelta(minutes=minutes)
        return self

    # Session

    def login(self, username: str, password: str) -> bool:
        """
        Log in to the Growatt server.

        Args:
            username (str): Account name.
            password (str): Plaintext password.

        Returns:
            bool: True on success, False if the server declined the credentials.

        Raises:
            GrowattAuthError: If username or password is empty.
            GrowattRequestError: If the HTTP request fails.
            GrowattJsonError: If the response is not JSON.
            GrowattInvalidResponseError: If the response has an unexpected shape.

        """
        return self.session_manager.login(username, password)

    def logout(self) -> bool:
        """Log out. Local session state is reset even if the server call fails."""
        return self.session_manager.logout()

    def is_logged_in(self) -> bool:
        """Return True while a session is established."""
        return self.session_manager.is_logged_in()

    def get_token(self) -> str | None:
        """Return the session token, for diagnostics only."""
        return self.session_manager.get_token()

    # Plants

    def get_plants(self) -> PlantList:
        """
        Get the plants of the logged in account.

        Returns:
            PlantList: The plants, in server order.

        Raises:
            GrowattInvalidResponseError: If the list is empty or malformed.

        """
        return self.dispatcher.request(
            "POST", PLANT_LIST_PATH, decoder=_plant_list, operation="getting plants"
        )

    def get_plant(self, plant_id: str) -> PlantData:
        """
        Get summary data of a plant.

        Args:
            plant_id (str): Plant ID.

        Returns:
            PlantData: Capacity, power and energy figures of the plant.

        """
        return self.dispatcher.request(
            "POST",
            PLANT_DATA_PATH,
            params={"plantId": plant_id},
            decoder=_plant_data,
            operation="getting plant data",
        )

    def get_weather(self, plant_id: str) -> dict:
        """Get the environment (weather) devices of a plant."""
        return self.dispatcher.request(
            "POST",
            WEATHER_PATH,
            data={"plantId": plant_id, "currPage": "1"},
            decoder=_non_empty,
            operation="getting weather",
        )

    # Devices

    def get_mix_ids(self, plant_id: str) -> list:
        """
        Get the MIX devices of a plant.

        Args:
            plant_id (str): Plant ID.

        Returns:
            list: The ``obj.mix`` entries of the response.

        Raises:
            GrowattInvalidResponseError: If there are no MIX devices.

        """
        return self.dispatcher.request(
            "POST",
            DEVICES_BY_PLANT_PATH,
            params={"plantId": plant_id},
            decoder=_mix_ids,
            operation="getting mix ids",
        )

    def get_device_list(self, plant_id: str) -> dict:
        """Get the MAX device list of a plant."""
        return self.dispatcher.request(
            "POST",
            DEVICE_LIST_PATH,
            data={"plantId": plant_id, "currPage": "1"},
            decoder=_non_empty,
            operation="getting device list",
        )

    def get_devices_by_plant_list(self, plant_id: str, curr_page: int = 1) -> dict:
        """
        Get one page of the devices of a plant.

        Args:
            plant_id (str): Plant ID.
            curr_page (int): Page number, starting at 1.

        """
        return self.dispatcher.request(
            "POST",
            DEVICES_BY_PLANT_LIST_PATH,
            data={"plantId": plant_id, "currPage": str(curr_page)},
            decoder=_non_empty,
            operation="getting devices by plant list",
        )

    # MIX

    def get_mix_total(self, plant_id: str, mix_sn: str) -> dict:
        """Get the lifetime totals of a MIX device."""
        return self.dispatcher.request(
            "POST",
            MIX_TOTAL_PATH,
            params={"plantId": plant_id},
            data={"mixSn": mix_sn},
            decoder=_obj,
            operation="getting mix total",
        )

    def get_mix_status(self, plant_id: str, mix_sn: str) -> dict:
        """Get the live status of a MIX device."""
        return self.dispatcher.request(
            "POST",
            MIX_STATUS_PATH,
            params={"plantId": plant_id},
            data={"mixSn": mix_sn},
            decoder=_obj,
            operation="getting mix status",
        )

    def post_mix_ac_discharge_time_period_now(
        self, plant_id: str, mix_sn: str
    ) -> dict:
        """
        Set the system time of a MIX device to the current local time.

        Args:
            plant_id (str): Plant ID. Not sent, the device is addressed by serial.
            mix_sn (str): Serial number of the MIX device.

        Returns:
            dict: The server response.

        """
        _LOGGER.debug("Setting system time of %s (plant %s)", mix_sn, plant_id)
        return self.dispatcher.request(
            "POST",
            MIX_SETTING_PATH,
            data={
                "action": "mixSet",
                "serialNum": mix_sn,
                "type": "pf_sys_year",
                "param1": datetime.now().astimezone().strftime(DATETIME_FORMAT),
            },
            decoder=_non_empty,
            operation="setting mix system time",
        )

    # Energy

    def _energy_chart(
        self, path: str, period: dict[str, str], plant_id: str, mix_sn: str
    ) -> dict:
        return self.dispatcher.request(
            "POST",
            path,
            data={**period, "plantId": plant_id, "mixSn": mix_sn},
            decoder=_non_empty,
            operation=f"getting energy chart {path.rsplit('/', 1)[-1]}",
        )

    def get_energy_stats_daily(
        self, day: str | date, plant_id: str, mix_sn: str
    ) -> dict:
        """
        Get the energy chart of one day.

        Args:
            day (str | date): The day, YYYY-MM-DD when given as a string.
            plant_id (str): Plant ID.
            mix_sn (str): Serial number of the MIX device.

        """
        return self._energy_chart(
            ENERGY_DAY_CHART_PATH, {"date": _format_date(day)}, plant_id, mix_sn
        )

    def get_energy_stats_monthly(
        self, day: str | date, plant_id: str, mix_sn: str
    ) -> dict:
        """Get the energy chart of the month containing the given date."""
        return self._energy_chart(
            ENERGY_MONTH_CHART_PATH, {"date": _format_date(day)}, plant_id, mix_sn
        )

    def get_energy_stats_yearly(
        self, year: str | int, plant_id: str, mix_sn: str
    ) -> dict:
        """Get the energy chart of a year."""
        return self._energy_chart(
            ENERGY_YEAR_CHART_PATH, {"year": str(year)}, plant_id, mix_sn
        )

    def get_energy_stats_total(
        self, year: str | int, plant_id: str, mix_sn: str
    ) -> dict:
        """Get the lifetime energy chart, per year."""
        return self._energy_chart(
            ENERGY_TOTAL_CHART_PATH, {"year": str(year)}, plant_id, mix_sn
        )

    def get_weekly_battery_stats(self, plant_id: str, mix_sn: str) -> dict:
        """Get the battery chart of the last week."""
        return self.dispatcher.request(
            "POST",
            BATTERY_CHART_PATH,
            data={"plantId": plant_id, "mixSn": mix_sn},
            decoder=_non_empty,
            operation="getting weekly battery stats",
        )

    # Fault logs

    def get_fault_logs(
        self,
        plant_id: str,
        date: str | date | None = None,  # noqa: A002
        device_sn: str = "",
        page_num: int = 1,
        device_flag: int = 0,
        fault_type: int = 0,
    ) -> dict:
        """
        Get the fault log of a plant.

        Args:
            plant_id (str): Plant ID.
            date (str | date | None): Day of the log, defaults to today.
            device_sn (str): Restrict the log to one device, empty for all.
            page_num (int): Page number, starting at 1.
            device_flag (int): Device category filter, 0 for all.
            fault_type (int): Fault type filter, 0 for all.

        Returns:
            dict: The fault log page.

        Raises:
            GrowattParameterError: If plant_id is empty.
            GrowattInvalidResponseError: If the response is empty.

        """
        if not plant_id:
            msg = "Plant ID must be provided"
            raise GrowattParameterError(msg)

        form = {
            "deviceSn": device_sn,
            "date": _format_date(date),
            "plantId": plant_id,
            "toPageNum": str(page_num),
            "type": str(fault_type),
            "deviceFlag": str(device_flag),
        }
        return self.dispatcher.request(
            "POST",
            FAULT_LOG_PATH,
            data=form,
            headers=AJAX_HEADERS,
            decoder=_non_empty,
            operation="getting fault logs",
        )

    def get_plant_fault_logs(
        self,
        plant_id: str,
        date: str | date | None = None,  # noqa: A002
        device_sn: str = "",
        page_num: int = 1,
        device_flag: int = 0,
        fault_type: int = 0,
    ) -> dict:
        """Get the fault log of a plant. Alias of get_fault_logs."""
        return self.get_fault_logs(
            plant_id, date, device_sn, page_num, device_flag, fault_type
        )
