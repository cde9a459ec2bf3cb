"""Client library for the Growatt solar inverter web API."""

from .api import Growatt
from .async_api import AsyncGrowatt
from .config import GrowattConfig
from .const import ALTERNATE_URL, DEFAULT_URL
from .dispatcher import ApiDispatcher
from .exceptions import (
    GrowattAuthError,
    GrowattError,
    GrowattInvalidResponseError,
    GrowattJsonError,
    GrowattNotLoggedInError,
    GrowattParameterError,
    GrowattRequestError,
)
from .models import Plant, PlantData, PlantList
from .session import SessionManager, hash_password

__all__ = [
    "ALTERNATE_URL",
    "DEFAULT_URL",
    "ApiDispatcher",
    "AsyncGrowatt",
    "Growatt",
    "GrowattAuthError",
    "GrowattConfig",
    "GrowattError",
    "GrowattInvalidResponseError",
    "GrowattJsonError",
    "GrowattNotLoggedInError",
    "GrowattParameterError",
    "GrowattRequestError",
    "Plant",
    "PlantData",
    "PlantList",
    "SessionManager",
    "hash_password",
]
