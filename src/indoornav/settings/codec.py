"""XML encoder/decoder for the settings file.

The document layout matches what .NET ``XmlSerializer`` wrote for the
mobile app's ``AppSettings`` class, so files produced by either side can
be read by the other:

    <AppSettings>
      <ItemID>...</ItemID>
      ...
      <InitialViewpointCoordinates>
        <CoordinatesKeyValuePairOfStringDouble>
          <Key>X</Key>
          <Value>-13046209</Value>
        </CoordinatesKeyValuePairOfStringDouble>
      </InitialViewpointCoordinates>
      <LocatorFields>
        <string>LONGNAME</string>
      </LocatorFields>
      ...
    </AppSettings>

Fields are driven by an explicit ordered schema rather than by model
introspection.
"""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Final, Optional

from pydantic import ValidationError

from indoornav.settings.errors import MalformedSettingsError, SettingsEncodeError
from indoornav.settings.models import (
    AppSettings,
    CoordinatesKeyValuePair,
    find_duplicate_label,
)

logger: Final = logging.getLogger(__name__)

ROOT_TAG: Final = "AppSettings"
PAIR_TAG: Final = "CoordinatesKeyValuePairOfStringDouble"
STRING_TAG: Final = "string"
XSI_NS: Final = "http://www.w3.org/2001/XMLSchema-instance"
XSD_NS: Final = "http://www.w3.org/2001/XMLSchema"

# Characters XML 1.0 cannot represent, even escaped; lone surrogates have no UTF-8 form
_ILLEGAL_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

# Lexical forms of xsd:int and xsd:double
_XSD_INT = re.compile(r"[+-]?[0-9]+")
_XSD_DOUBLE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?|-?INF|NaN")

_BOOL_VALUES: Final = {"true": True, "1": True, "false": False, "0": False}


class FieldKind(Enum):
    """Wire representation of a settings field."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    DOUBLE = "double"
    DATE = "date"
    COORDINATES = "coordinates"
    STRINGS = "strings"


@dataclass(frozen=True)
class FieldSpec:
    """One top-level element of the settings document."""

    tag: str
    attr: str
    kind: FieldKind
    # Optional elements may be omitted from the document
    optional: bool = False
    # Written as absent when empty, like a null array
    omit_empty: bool = False

    @property
    def is_sequence(self) -> bool:
        return self.kind in (FieldKind.COORDINATES, FieldKind.STRINGS)


SETTINGS_SCHEMA: Final[tuple[FieldSpec, ...]] = (
    FieldSpec("ItemID", "item_id", FieldKind.STRING),
    FieldSpec("ItemName", "item_name", FieldKind.STRING),
    FieldSpec("MmpkDate", "mmpk_date", FieldKind.DATE),
    FieldSpec("HomeLocation", "home_location", FieldKind.STRING),
    FieldSpec("IsLocationServicesEnabled", "is_location_services_enabled", FieldKind.BOOL),
    FieldSpec("IsPreferElevatorsEnabled", "is_prefer_elevators_enabled", FieldKind.BOOL),
    FieldSpec("RoomsLayerIndex", "rooms_layer_index", FieldKind.INT),
    FieldSpec("FloorplanLinesLayerIndex", "floorplan_lines_layer_index", FieldKind.INT),
    FieldSpec(
        "ZoomLevelToDisplayRoomLayers", "zoom_level_to_display_room_layers", FieldKind.DOUBLE
    ),
    FieldSpec("FloorColumnInRoomsTable", "floor_column_in_rooms_table", FieldKind.STRING),
    FieldSpec(
        "HomeCoordinates",
        "home_coordinates",
        FieldKind.COORDINATES,
        optional=True,
        omit_empty=True,
    ),
    FieldSpec(
        "InitialViewpointCoordinates",
        "initial_viewpoint_coordinates",
        FieldKind.COORDINATES,
        optional=True,
    ),
    FieldSpec("LocatorFields", "locator_fields", FieldKind.STRINGS, optional=True),
    FieldSpec(
        "ContactCardDisplayFields", "contact_card_display_fields", FieldKind.STRINGS, optional=True
    ),
    FieldSpec("MinScale", "min_scale", FieldKind.INT),
    FieldSpec("MaxScale", "max_scale", FieldKind.INT),
)


def find_field(name: str) -> FieldSpec:
    """Look up a schema entry by tag (``MinScale``) or attribute (``min_scale``).

    Raises:
        KeyError: If no field has that name
    """
    for spec in SETTINGS_SCHEMA:
        if name in (spec.tag, spec.attr):
            return spec
    raise KeyError(name)


# ── encoding ────────────────────────────────────────────────────────────────


def format_double(value: float) -> str:
    """Format a double the way XmlSerializer does for round-trip values."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def _text(spec: FieldSpec, value: str) -> str:
    if not isinstance(value, str):
        raise SettingsEncodeError(f"{spec.tag}: expected a string, got {type(value).__name__}")
    if _ILLEGAL_XML_CHARS.search(value):
        raise SettingsEncodeError(f"{spec.tag}: value contains characters not allowed in XML")
    return value


def _format_scalar(spec: FieldSpec, value: Any) -> str:
    if spec.kind is FieldKind.STRING:
        return _text(spec, value)
    if spec.kind is FieldKind.BOOL:
        return "true" if value else "false"
    if spec.kind is FieldKind.INT:
        return str(int(value))
    if spec.kind is FieldKind.DOUBLE:
        return format_double(float(value))
    # Date-only; XmlSerializer always wrote a midnight time part
    return f"{value.isoformat()}T00:00:00"


def _append_sequence(parent: ET.Element, spec: FieldSpec, values: list[Any]) -> None:
    wrapper = ET.SubElement(parent, spec.tag)
    if spec.kind is FieldKind.STRINGS:
        for item in values:
            ET.SubElement(wrapper, STRING_TAG).text = _text(spec, item)
        return

    for pair in values:
        if not isinstance(pair, CoordinatesKeyValuePair):
            raise SettingsEncodeError(
                f"{spec.tag}: expected CoordinatesKeyValuePair, got {type(pair).__name__}"
            )
    duplicate = find_duplicate_label(values)
    if duplicate is not None:
        raise SettingsEncodeError(f"{spec.tag}: duplicate coordinate label {duplicate!r}")
    for pair in values:
        entry = ET.SubElement(wrapper, PAIR_TAG)
        ET.SubElement(entry, "Key").text = _text(spec, pair.key)
        ET.SubElement(entry, "Value").text = format_double(pair.value)


def encode(settings: AppSettings) -> bytes:
    """Serialize settings to a UTF-8 XML document.

    Args:
        settings: Settings to encode

    Returns:
        The complete document, including the XML declaration

    Raises:
        SettingsEncodeError: If a value cannot be represented, e.g. a
            coordinate list mutated in place to hold a duplicate label
    """
    root = ET.Element(ROOT_TAG, {"xmlns:xsi": XSI_NS, "xmlns:xsd": XSD_NS})
    for spec in SETTINGS_SCHEMA:
        value = getattr(settings, spec.attr)
        if spec.is_sequence:
            if spec.omit_empty and not value:
                continue
            _append_sequence(root, spec, value)
        else:
            ET.SubElement(root, spec.tag).text = _format_scalar(spec, value)

    ET.indent(root, space="  ")
    document = ET.tostring(root, encoding="utf-8", xml_declaration=True)
    # Parsers normalize a raw CR to LF; only text values can contain one
    return document.replace(b"\r", b"&#13;") + b"\n"


# ── decoding ────────────────────────────────────────────────────────────────


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_double(tag: str, text: str) -> float:
    stripped = text.strip()
    if not _XSD_DOUBLE.fullmatch(stripped):
        raise ValueError(f"{tag}: {text!r} is not a number")
    return float(stripped)


def _parse_scalar(spec: FieldSpec, text: str) -> Any:
    if spec.kind is FieldKind.STRING:
        return text
    stripped = text.strip()
    if spec.kind is FieldKind.BOOL:
        if stripped not in _BOOL_VALUES:
            raise ValueError(f"{spec.tag}: {text!r} is not a boolean")
        return _BOOL_VALUES[stripped]
    if spec.kind is FieldKind.INT:
        if not _XSD_INT.fullmatch(stripped):
            raise ValueError(f"{spec.tag}: {text!r} is not an integer")
        return int(stripped)
    if spec.kind is FieldKind.DOUBLE:
        return _parse_double(spec.tag, text)
    # Accepts both date-only and full datetime forms; the time part is dropped
    try:
        return datetime.fromisoformat(stripped).date()
    except ValueError as exc:
        raise ValueError(f"{spec.tag}: {text!r} is not a date") from exc


def _parse_sequence(spec: FieldSpec, wrapper: ET.Element) -> list[Any]:
    expected = STRING_TAG if spec.kind is FieldKind.STRINGS else PAIR_TAG
    items: list[Any] = []
    for child in wrapper:
        if _local_name(child.tag) != expected:
            raise ValueError(f"{spec.tag}: unexpected element <{_local_name(child.tag)}>")
        if spec.kind is FieldKind.STRINGS:
            items.append(child.text or "")
            continue
        key = child.find("Key")
        value = child.find("Value")
        if key is None or value is None or value.text is None:
            raise ValueError(f"{spec.tag}: entry must have <Key> and <Value>")
        items.append(
            CoordinatesKeyValuePair(
                key=key.text or "", value=_parse_double(f"{spec.tag}/Value", value.text)
            )
        )
    return items


def decode(data: bytes | str, path: Optional[Path] = None) -> AppSettings:
    """Parse a settings document.

    Args:
        data: Raw document contents
        path: File the data came from, used in error messages

    Returns:
        Validated AppSettings

    Raises:
        MalformedSettingsError: If the document is not well-formed XML,
            has the wrong root element, lacks a required field, holds an
            unparseable value or repeats a coordinate label
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise MalformedSettingsError("Settings file is not well-formed XML", path, exc) from exc

    if _local_name(root.tag) != ROOT_TAG:
        raise MalformedSettingsError(
            f"Expected <{ROOT_TAG}> root element, found <{_local_name(root.tag)}>", path
        )

    # Unknown elements are ignored; the first occurrence of a known one wins
    elements: dict[str, ET.Element] = {}
    for child in root:
        elements.setdefault(_local_name(child.tag), child)

    values: dict[str, Any] = {}
    try:
        for spec in SETTINGS_SCHEMA:
            element = elements.get(spec.tag)
            if element is None:
                if not spec.optional:
                    raise ValueError(f"missing required element <{spec.tag}>")
                continue
            if spec.is_sequence:
                values[spec.attr] = _parse_sequence(spec, element)
            else:
                values[spec.attr] = _parse_scalar(spec, element.text or "")
    except ValueError as exc:
        raise MalformedSettingsError(f"Invalid settings: {exc}", path, exc) from exc

    try:
        settings = AppSettings.model_validate(values)
    except ValidationError as err:
        raise MalformedSettingsError(f"Invalid settings:\n{err}", path, err) from err

    logger.debug("Decoded settings for item %s", settings.item_id)
    return settings
