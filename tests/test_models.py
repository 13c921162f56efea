from datetime import date

import pytest
from pydantic import ValidationError

from indoornav.settings import (
    AppSettings,
    CoordinatesKeyValuePair,
    coordinate_value,
    coordinates,
    default_settings,
)


def test_default_settings_fixture() -> None:
    s = default_settings()
    assert s.item_id == "018f779883434a8daadfb51524ec3498"
    assert s.item_name == "EsriCampus.mmpk"
    assert s.mmpk_date == date(1900, 1, 1)
    assert s.home_location == "Set home location"
    assert s.is_location_services_enabled is False
    assert s.is_prefer_elevators_enabled is False
    assert s.rooms_layer_index == 1
    assert s.floorplan_lines_layer_index == 2
    assert s.zoom_level_to_display_room_layers == 500.0
    assert s.floor_column_in_rooms_table == "FLOOR"
    assert s.min_scale == 100
    assert s.max_scale == 13000
    assert s.initial_viewpoint_coordinates == [
        CoordinatesKeyValuePair(key="X", value=-13046209),
        CoordinatesKeyValuePair(key="Y", value=4036456),
        CoordinatesKeyValuePair(key="WKID", value=3857),
        CoordinatesKeyValuePair(key="ZoomLevel", value=1600),
    ]
    assert s.locator_fields == ["LONGNAME", "KNOWN_AS_N"]
    assert s.contact_card_display_fields == ["LONGNAME", "KNOWN_AS_N"]
    assert s.home_coordinates == []
    assert s.home_is_set is False


def test_default_settings_are_independent() -> None:
    a = default_settings()
    b = default_settings()
    a.locator_fields.append("EMAIL")
    assert b.locator_fields == ["LONGNAME", "KNOWN_AS_N"]


def test_duplicate_label_rejected_at_construction() -> None:
    with pytest.raises(ValidationError, match="duplicate coordinate label 'X'"):
        AppSettings(
            **default_settings().model_dump(exclude={"home_coordinates"}),
            home_coordinates=coordinates(("X", 1), ("Y", 2), ("X", 3)),
        )


def test_duplicate_label_rejected_on_assignment() -> None:
    s = default_settings()
    with pytest.raises(ValidationError):
        s.initial_viewpoint_coordinates = coordinates(("WKID", 3857), ("WKID", 4326))
    # Unchanged after a rejected assignment
    assert s.coordinate("initial_viewpoint_coordinates", "WKID") == 3857


@pytest.mark.parametrize("field", ["item_id", "item_name"])
def test_item_identity_must_be_non_empty(field: str) -> None:
    s = default_settings()
    with pytest.raises(ValidationError):
        setattr(s, field, "")


def test_scale_bounds_not_enforced() -> None:
    s = default_settings()
    s.min_scale = 20000
    assert s.min_scale > s.max_scale


def test_construct_by_alias() -> None:
    s = AppSettings.model_validate(default_settings().model_dump(by_alias=True))
    assert s == default_settings()


def test_coordinate_lookup() -> None:
    s = default_settings()
    assert s.coordinate("initial_viewpoint_coordinates", "ZoomLevel") == 1600
    assert s.coordinate("home_coordinates", "X") is None
    assert s.coordinate("home_coordinates", "X", default=0.0) == 0.0
    with pytest.raises(ValueError):
        s.coordinate("locator_fields", "X")


def test_coordinate_value_is_case_sensitive() -> None:
    pairs = coordinates(("X", 1.5))
    assert coordinate_value(pairs, "X") == 1.5
    assert coordinate_value(pairs, "x") is None


def test_pair_is_frozen() -> None:
    pair = CoordinatesKeyValuePair(key="X", value=1.0)
    with pytest.raises(ValidationError):
        pair.value = 2.0  # type: ignore[misc]


def test_home_is_set(custom_settings: AppSettings) -> None:
    assert custom_settings.home_is_set is True
