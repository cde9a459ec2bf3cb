"""Tests for the Growatt data models."""

import pytest

from growatt_client import GrowattInvalidResponseError, Plant, PlantData, PlantList


def test_plant_from_dict() -> None:
    """Test a complete plant list entry."""
    plant = Plant.from_dict(
        {
            "id": 12345,
            "name": "Test Plant",
            "plantAddress": "123 Test St",
            "plantPower": "5000",
            "isShare": "false",
            "timezone": "1",
        }
    )

    assert plant == Plant(
        plant_id="12345",
        plant_name="Test Plant",
        plant_address="123 Test St",
        plant_watts=5000.0,
        is_share=False,
    )


def test_plant_name_alias() -> None:
    """Test plantName is accepted when name is absent."""
    plant = Plant.from_dict({"id": "1", "plantName": "Roof"})

    assert plant.plant_name == "Roof"
    assert plant.plant_address is None
    assert plant.plant_watts is None
    assert plant.is_share is None


@pytest.mark.parametrize(
    "data",
    [
        {"name": "No id"},
        {"id": "1"},
        {"id": "1", "name": "Bad power", "plantPower": "lots"},
        {"id": "1", "name": "Bad share", "isShare": "maybe"},
        ["id", "1"],
    ],
    ids=["missing_id", "missing_name", "bad_power", "bad_share", "not_an_object"],
)
def test_plant_invalid(data) -> None:
    """Test malformed plant entries raise InvalidResponse."""
    with pytest.raises(GrowattInvalidResponseError):
        Plant.from_dict(data)


def test_plant_list() -> None:
    """Test the plant list keeps the server order."""
    plants = PlantList.from_list(
        [{"id": "2", "name": "Second"}, {"id": "1", "name": "First"}]
    )

    assert len(plants) == 2
    assert [plant.plant_id for plant in plants] == ["2", "1"]
    assert plants[1].plant_name == "First"


def test_plant_list_not_a_list() -> None:
    """Test a non-list plant list raises InvalidResponse."""
    with pytest.raises(GrowattInvalidResponseError):
        PlantList.from_list({"id": "1", "name": "Single"})


def test_plant_data_from_dict() -> None:
    """Test numeric strings are converted and unknown keys ignored."""
    data = PlantData.from_dict(
        {
            "plantName": "Test Plant",
            "plantId": "12345",
            "capacity": "5000",
            "todayEnergy": 23.5,
            "totalEnergy": "",
            "eToday": "ignored",
        }
    )

    assert data == PlantData(
        plant_name="Test Plant",
        plant_id="12345",
        capacity=5000.0,
        today_energy=23.5,
        total_energy=None,
        current_power=None,
    )


@pytest.mark.parametrize(
    "data",
    [{"capacity": True}, {"currentPower": "n/a"}, {"plantName": {"en": "x"}}, None],
    ids=["bool_number", "text_number", "object_name", "null"],
)
def test_plant_data_invalid(data) -> None:
    """Test malformed plant data raises InvalidResponse."""
    with pytest.raises(GrowattInvalidResponseError):
        PlantData.from_dict(data)
