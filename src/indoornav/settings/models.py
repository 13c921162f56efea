"""Settings data model for the indoor navigation application."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ITEM_ID = "018f779883434a8daadfb51524ec3498"
DEFAULT_ITEM_NAME = "EsriCampus.mmpk"


class CoordinatesKeyValuePair(BaseModel):
    """A labeled numeric coordinate such as ``("X", -13046209.0)``.

    Labels name the quantity (X, Y, WKID, ZoomLevel, floor level...) and
    must be unique within one sequence.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Label of the quantity")
    value: float = Field(..., description="Numeric value")


def coordinates(*pairs: tuple[str, float]) -> list[CoordinatesKeyValuePair]:
    """Build an ordered coordinate sequence from ``(label, value)`` tuples."""
    return [CoordinatesKeyValuePair(key=k, value=v) for k, v in pairs]


def find_duplicate_label(pairs: Iterable[CoordinatesKeyValuePair]) -> Optional[str]:
    """Return the first label that occurs twice, or None."""
    seen: set[str] = set()
    for pair in pairs:
        if pair.key in seen:
            return pair.key
        seen.add(pair.key)
    return None


def coordinate_value(
    pairs: Sequence[CoordinatesKeyValuePair], label: str, default: Optional[float] = None
) -> Optional[float]:
    """Look up a coordinate value by label.

    Args:
        pairs: Coordinate sequence to search
        label: Label to find (case-sensitive)
        default: Value returned when the label is absent

    Returns:
        The value stored under ``label`` or ``default``
    """
    for pair in pairs:
        if pair.key == label:
            return pair.value
    return default


class AppSettings(BaseModel):
    """All persisted application state.

    Attribute names are snake_case; each field's alias is the tag it is
    stored under on disk. Values are not range-checked (``min_scale`` may
    exceed ``max_scale``); only the item identity must be non-empty and
    coordinate labels unique.

    Examples:
        settings = default_settings()
        x = settings.coordinate("initial_viewpoint_coordinates", "X")
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    # Mobile map package
    item_id: str = Field(..., alias="ItemID", min_length=1, description="Portal item ID")
    item_name: str = Field(..., alias="ItemName", min_length=1, description="Portal item name")
    mmpk_date: date = Field(
        ..., alias="MmpkDate", description="Date the mobile map package was downloaded"
    )

    # User preferences
    home_location: str = Field(..., alias="HomeLocation", description="Home location label")
    is_location_services_enabled: bool = Field(..., alias="IsLocationServicesEnabled")
    is_prefer_elevators_enabled: bool = Field(..., alias="IsPreferElevatorsEnabled")

    # Map layers
    rooms_layer_index: int = Field(..., alias="RoomsLayerIndex")
    floorplan_lines_layer_index: int = Field(..., alias="FloorplanLinesLayerIndex")
    zoom_level_to_display_room_layers: float = Field(..., alias="ZoomLevelToDisplayRoomLayers")
    floor_column_in_rooms_table: str = Field(..., alias="FloorColumnInRoomsTable")

    home_coordinates: list[CoordinatesKeyValuePair] = Field(
        default_factory=list,
        alias="HomeCoordinates",
        description="Coordinates, floor level and WKID of the home location; empty when unset",
    )
    initial_viewpoint_coordinates: list[CoordinatesKeyValuePair] = Field(
        default_factory=list, alias="InitialViewpointCoordinates"
    )

    # Attribute columns queried by the locator and shown on the contact card.
    # The first contact card field is displayed in bold.
    locator_fields: list[str] = Field(default_factory=list, alias="LocatorFields")
    contact_card_display_fields: list[str] = Field(
        default_factory=list, alias="ContactCardDisplayFields"
    )

    min_scale: int = Field(..., alias="MinScale")
    max_scale: int = Field(..., alias="MaxScale")

    # ---- validators ----
    @field_validator("home_coordinates", "initial_viewpoint_coordinates")
    @classmethod
    def validate_unique_labels(
        cls, v: list[CoordinatesKeyValuePair]
    ) -> list[CoordinatesKeyValuePair]:
        duplicate = find_duplicate_label(v)
        if duplicate is not None:
            raise ValueError(f"duplicate coordinate label {duplicate!r}")
        return v

    # ---- convenience methods ----
    @property
    def home_is_set(self) -> bool:
        """Whether the user has stored home coordinates."""
        return bool(self.home_coordinates)

    def coordinate(
        self, field: str, label: str, default: Optional[float] = None
    ) -> Optional[float]:
        """Look up a labeled value in one of the coordinate sequences.

        Args:
            field: ``home_coordinates`` or ``initial_viewpoint_coordinates``
            label: Label to find
            default: Value returned when the label is absent

        Returns:
            The stored value or ``default``
        """
        if field not in ("home_coordinates", "initial_viewpoint_coordinates"):
            raise ValueError(f"{field!r} is not a coordinate field")
        return coordinate_value(getattr(self, field), label, default)


def default_settings() -> AppSettings:
    """Settings written on first run, when no settings file exists yet."""
    return AppSettings(
        item_id=DEFAULT_ITEM_ID,
        item_name=DEFAULT_ITEM_NAME,
        mmpk_date=date(1900, 1, 1),
        home_location="Set home location",
        is_location_services_enabled=False,
        is_prefer_elevators_enabled=False,
        rooms_layer_index=1,
        floorplan_lines_layer_index=2,
        zoom_level_to_display_room_layers=500,
        floor_column_in_rooms_table="FLOOR",
        min_scale=100,
        max_scale=13000,
        initial_viewpoint_coordinates=coordinates(
            ("X", -13046209),
            ("Y", 4036456),
            ("WKID", 3857),
            ("ZoomLevel", 1600),
        ),
        locator_fields=["LONGNAME", "KNOWN_AS_N"],
        contact_card_display_fields=["LONGNAME", "KNOWN_AS_N"],
    )
