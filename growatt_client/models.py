"""Models for data returned by the Growatt web API."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import GrowattInvalidResponseError


def _optional_float(data: Mapping[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        msg = f"Field '{key}' must be numeric, got {value!r}"
        raise GrowattInvalidResponseError(msg)
    try:
        return float(value)
    except (TypeError, ValueError) as ex:
        msg = f"Field '{key}' must be numeric, got {value!r}"
        raise GrowattInvalidResponseError(msg) from ex


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        msg = f"Field '{key}' must be a string, got {value!r}"
        raise GrowattInvalidResponseError(msg)
    return str(value)


def _optional_bool(data: Mapping[str, Any], key: str) -> bool | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if value in (0, 1, "0", "1", "true", "false"):
        return value in (1, "1", "true")
    msg = f"Field '{key}' must be a boolean, got {value!r}"
    raise GrowattInvalidResponseError(msg)


def _require_mapping(data: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        msg = f"Expected an object for {name}, got {type(data).__name__}"
        raise GrowattInvalidResponseError(msg)
    return data


@dataclass
class Plant:
    """A plant as listed for the logged in account."""

    plant_id: str
    plant_name: str
    plant_address: str | None = None
    plant_watts: float | None = None
    is_share: bool | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Plant:
        """Create a plant from an entry of the plant list response."""
        data = _require_mapping(data, "plant")
        plant_id = _optional_str(data, "id")
        plant_name = _optional_str(data, "name") or _optional_str(data, "plantName")
        if plant_id is None:
            msg = "Plant entry is missing the 'id' field"
            raise GrowattInvalidResponseError(msg)
        if plant_name is None:
            msg = f"Plant {plant_id} is missing the 'name' field"
            raise GrowattInvalidResponseError(msg)
        return cls(
            plant_id=plant_id,
            plant_name=plant_name,
            plant_address=_optional_str(data, "plantAddress"),
            plant_watts=_optional_float(data, "plantPower"),
            is_share=_optional_bool(data, "isShare"),
        )


@dataclass
class PlantList:
    """The plants of an account, in the order the server returned them."""

    plants: list[Plant] = field(default_factory=list)

    @classmethod
    def from_list(cls, data: Any) -> PlantList:
        """Create a plant list from the plant list response."""
        if not isinstance(data, list):
            msg = f"Expected a list of plants, got {type(data).__name__}"
            raise GrowattInvalidResponseError(msg)
        return cls([Plant.from_dict(entry) for entry in data])

    def __len__(self) -> int:
        return len(self.plants)

    def __iter__(self) -> Iterator[Plant]:
        return iter(self.plants)

    def __getitem__(self, index: int) -> Plant:
        return self.plants[index]


@dataclass
class PlantData:
    """Summary data of a single plant."""

    plant_name: str | None = None
    plant_id: str | None = None
    capacity: float | None = None
    today_energy: float | None = None
    total_energy: float | None = None
    current_power: float | None = None

    @classmethod
    def from_dict(cls, data: Any) -> PlantData:
        """Create plant data from the ``obj`` of the plant data response."""
        data = _require_mapping(data, "plant data")
        return cls(
            plant_name=_optional_str(data, "plantName"),
            plant_id=_optional_str(data, "plantId"),
            capacity=_optional_float(data, "capacity"),
            today_energy=_optional_float(data, "todayEnergy"),
            total_energy=_optional_float(data, "totalEnergy"),
            current_power=_optional_float(data, "currentPower"),
        )
