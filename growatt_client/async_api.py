"""Asyncio facade for the Growatt web API client."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import date
import functools
import logging
from typing import Any, TypeVar

from .api import Growatt
from .config import GrowattConfig
from .models import PlantData, PlantList

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")


class AsyncGrowatt:
    """
    Run a Growatt client from asyncio code.

    Blocking HTTP work runs in the event loop's default executor, so the loop
    is never blocked. Logins and logouts started from coroutines are
    serialized with an asyncio lock; the wrapped client additionally
    serializes every session mutation with its own thread lock.
    """

    def __init__(self, client: Growatt | None = None) -> None:
        """Initialize the facade around an existing or a new client."""
        self.client = client or Growatt()
        self.login_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: GrowattConfig) -> AsyncGrowatt:
        """Create a facade around a new client built from a configuration."""
        return cls(Growatt(config))

    @classmethod
    def from_env(cls) -> AsyncGrowatt:
        """Create a facade around a client configured from the environment."""
        return cls(Growatt.from_env())

    async def __aenter__(self) -> AsyncGrowatt:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _run(self, func: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, functools.partial(func, *args, **kwargs)
        )

    async def close(self) -> None:
        """Log out if needed and release the HTTP session."""
        _LOGGER.debug("Closing Growatt client for %s", self.client.base_url)
        async with self.login_lock:
            await self._run(self.client.close)

    async def login(self, username: str, password: str) -> bool:
        """Log in to the Growatt server."""
        async with self.login_lock:
            return await self._run(self.client.login, username, password)

    async def logout(self) -> bool:
        """Log out from the Growatt server."""
        async with self.login_lock:
            return await self._run(self.client.logout)

    def is_logged_in(self) -> bool:
        """Return True while a session is established."""
        return self.client.is_logged_in()

    def get_token(self) -> str | None:
        """Return the session token, for diagnostics only."""
        return self.client.get_token()

    async def get_plants(self) -> PlantList:
        """Get the plants of the logged in account."""
        return await self._run(self.client.get_plants)

    async def get_plant(self, plant_id: str) -> PlantData:
        """Get summary data of a plant."""
        return await self._run(self.client.get_plant, plant_id)

    async def get_weather(self, plant_id: str) -> dict:
        """Get the environment (weather) devices of a plant."""
        return await self._run(self.client.get_weather, plant_id)

    async def get_mix_ids(self, plant_id: str) -> list:
        """Get the MIX devices of a plant."""
        return await self._run(self.client.get_mix_ids, plant_id)

    async def get_device_list(self, plant_id: str) -> dict:
        """Get the MAX device list of a plant."""
        return await self._run(self.client.get_device_list, plant_id)

    async def get_devices_by_plant_list(
        self, plant_id: str, curr_page: int = 1
    ) -> dict:
        """Get one page of the devices of a plant."""
        return await self._run(
            self.client.get_devices_by_plant_list, plant_id, curr_page
        )

    async def get_mix_total(self, plant_id: str, mix_sn: str) -> dict:
        """Get the lifetime totals of a MIX device."""
        return await self._run(self.client.get_mix_total, plant_id, mix_sn)

    async def get_mix_status(self, plant_id: str, mix_sn: str) -> dict:
        """Get the live status of a MIX device."""
        return await self._run(self.client.get_mix_status, plant_id, mix_sn)

    async def post_mix_ac_discharge_time_period_now(
        self, plant_id: str, mix_sn: str
    ) -> dict:
        """Set the system time of a MIX device to the current local time."""
        return await self._run(
            self.client.post_mix_ac_discharge_time_period_now, plant_id, mix_sn
        )

    async def get_energy_stats_daily(
        self, day: str | date, plant_id: str, mix_sn: str
    ) -> dict:
        """Get the energy chart of one day."""
        return await self._run(
            self.client.get_energy_stats_daily, day, plant_id, mix_sn
        )

    async def get_energy_stats_monthly(
        self, day: str | date, plant_id: str, mix_sn: str
    ) -> dict:
        """Get the energy chart of a month."""
        return await self._run(
            self.client.get_energy_stats_monthly, day, plant_id, mix_sn
        )

    async def get_energy_stats_yearly(
        self, year: str | int, plant_id: str, mix_sn: str
    ) -> dict:
        """Get the energy chart of a year."""
        return await self._run(
            self.client.get_energy_stats_yearly, year, plant_id, mix_sn
        )

    async def get_energy_stats_total(
        self, year: str | int, plant_id: str, mix_sn: str
    ) -> dict:
        """Get the lifetime energy chart."""
        return await self._run(
            self.client.get_energy_stats_total, year, plant_id, mix_sn
        )

    async def get_weekly_battery_stats(self, plant_id: str, mix_sn: str) -> dict:
        """Get the battery chart of the last week."""
        return await self._run(
            self.client.get_weekly_battery_stats, plant_id, mix_sn
        )

    async def get_fault_logs(
        self,
        plant_id: str,
        date: str | date | None = None,  # noqa: A002
        device_sn: str = "",
        page_num: int = 1,
        device_flag: int = 0,
        fault_type: int = 0,
    ) -> dict:
        """Get the fault log of a plant."""
        return await self._run(
            self.client.get_fault_logs,
            plant_id,
            date,
            device_sn,
            page_num,
            device_flag,
            fault_type,
        )

    async def get_plant_fault_logs(
        self,
        plant_id: str,
        date: str | date | None = None,  # noqa: A002
        device_sn: str = "",
        page_num: int = 1,
        device_flag: int = 0,
        fault_type: int = 0,
    ) -> dict:
        """Get the fault log of a plant. Alias of get_fault_logs."""
        return await self.get_fault_logs(
            plant_id, date, device_sn, page_num, device_flag, fault_type
        )
