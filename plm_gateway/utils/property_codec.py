"""
Property codec

Converts between the remote property-bag wire format
({name: {dbValues: [...], uiValues: [...], type}}) and flat gateway records,
and builds write payloads keyed by remote property names.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from plm_gateway.models.item import ItemCreate, ItemUpdate, RemoteProperty
from plm_gateway.utils.errors import InvalidDate, PropertyKeyCollision

DEFAULT_ITEM_TYPE = "Item"

# Gateway field name -> remote property name
CREATE_FIELD_MAP = {
    "item_id": "item_id",
    "name": "object_name",
    "description": "object_desc",
    "type": "item_type",
}
UPDATE_FIELD_MAP = {
    "name": "object_name",
    "description": "object_desc",
}
RESERVED_PROPERTY_NAMES = frozenset(CREATE_FIELD_MAP.values())


def _first_db_value(entry: Any) -> Any:
    if isinstance(entry, Mapping):
        values = entry.get("dbValues")
        if isinstance(values, (list, tuple)) and values:
            return values[0]
        return None
    # Some endpoints return already-flattened values
    return entry


def extract_scalar(properties: Optional[Mapping[str, Any]], name: str) -> Any:
    """
    Return the first stored value of a property

    Args:
        properties: Property bag (may be None)
        name: Remote property name

    Returns:
        The scalar value, or None when the bag lacks the key or its
        stored-value list is empty
    """
    if not properties or name not in properties:
        return None
    return _first_db_value(properties[name])


def extract_all_scalars(properties: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Collapse a whole bag; keys with no stored values map to None"""
    if not properties:
        return {}
    return {key: _first_db_value(entry) for key, entry in properties.items()}


def parse_date(value: Any) -> datetime:
    """Parse an ISO-8601 string or epoch milliseconds into a datetime"""
    if isinstance(value, bool):
        raise InvalidDate(details={"value": value})
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidDate(details={"value": value}) from e
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidDate(details={"value": value}) from e
    raise InvalidDate(details={"value": repr(value)})


def extract_date(properties: Optional[Mapping[str, Any]], name: str) -> Optional[datetime]:
    """
    Extract a date property

    Raises:
        InvalidDate: when a value is present but cannot be parsed
    """
    value = extract_scalar(properties, name)
    if value is None or value == "":
        return None
    try:
        return parse_date(value)
    except InvalidDate as e:
        e.details["property"] = name
        raise


def _merge_free_form(payload: Dict[str, Any], properties: Optional[Mapping[str, Any]]) -> None:
    if not properties:
        return
    collisions = sorted(key for key in properties if key in RESERVED_PROPERTY_NAMES)
    if collisions:
        raise PropertyKeyCollision(
            f"Reserved property names cannot be set through properties: {', '.join(collisions)}",
            details={"keys": collisions},
        )
    payload.update(properties)


def to_create_payload(item: ItemCreate) -> Dict[str, Any]:
    """Build the remote create body for an Item"""
    payload = {
        "item_id": item.item_id,
        "object_name": item.name,
        "object_desc": item.description or "",
        "item_type": item.type or DEFAULT_ITEM_TYPE,
    }
    _merge_free_form(payload, item.properties)
    return payload


def to_update_payload(updates: ItemUpdate) -> Dict[str, Any]:
    """Build a partial remote update body; only non-empty fields are emitted"""
    payload: Dict[str, Any] = {}
    for field, remote_name in UPDATE_FIELD_MAP.items():
        value = getattr(updates, field)
        if value:
            payload[remote_name] = value
    _merge_free_form(payload, updates.properties)
    return payload


def to_property_bag(values: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Wrap a flat remote payload into property-bag shape"""
    bag = {}
    for key, value in values.items():
        db_values = [] if value is None else [value]
        prop = RemoteProperty(
            db_values=db_values,
            ui_values=[str(v) for v in db_values],
            type=type(value).__name__ if value is not None else None,
        )
        bag[key] = prop.model_dump(by_alias=True)
    return bag
