from datetime import date
from pathlib import Path

import pytest

from indoornav.settings import AppSettings, coordinates


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "AppSettings.xml"


@pytest.fixture
def custom_settings() -> AppSettings:
    return AppSettings(
        item_id="52346d5fc4c348589f976b6a2d6a4f8a",
        item_name="Redlands & Co <Campus>.mmpk",
        mmpk_date=date(2018, 6, 14),
        home_location="Building Q, Room 1123",
        is_location_services_enabled=True,
        is_prefer_elevators_enabled=True,
        rooms_layer_index=3,
        floorplan_lines_layer_index=0,
        zoom_level_to_display_room_layers=612.25,
        floor_column_in_rooms_table="LEVEL_ID",
        min_scale=250,
        max_scale=9000,
        home_coordinates=coordinates(
            ("X", -13046195.5),
            ("Y", 4036502.125),
            ("Floor", 2),
            ("WKID", 3857),
        ),
        initial_viewpoint_coordinates=coordinates(
            ("ZoomLevel", 800),
            ("WKID", 3857),
            ("Y", 4036400),
            ("X", -13046000),
        ),
        locator_fields=["KNOWN_AS_N", "LONGNAME", "KNOWN_AS_N"],
        contact_card_display_fields=["KNOWN_AS_N", "EMAIL", "EXTENSION"],
    )
