"""Mapping between local records and Notion database properties.

Adapt the property names below to the schema of the target database. Both
functions are pure and never raise for inputs of their declared type.
"""

from typing import Any, Dict, List, Optional

from shared.models import LocalRecord, RemoteRecord

NAME_PROPERTY = "Name"
DESCRIPTION_PROPERTY = "Description"
STATUS_PROPERTY = "Status"
TAGS_PROPERTY = "Tags"

DEFAULT_NAME = "Untitled"
DEFAULT_DESCRIPTION = ""
DEFAULT_STATUS = "Draft"


def local_to_remote(record: LocalRecord) -> Dict[str, Any]:
    """
    Build Notion page properties from a local record.

    Args:
        record: Local record; missing fields fall back to fixed defaults

    Returns:
        Dictionary of Notion page properties
    """
    # Collapse duplicates, Notion rejects repeated multi_select options
    tags = list(dict.fromkeys(record.tags or []))

    return {
        NAME_PROPERTY: {
            "title": [{"text": {"content": record.name or DEFAULT_NAME}}]
        },
        DESCRIPTION_PROPERTY: {
            "rich_text": [{"text": {"content": record.description or DEFAULT_DESCRIPTION}}]
        },
        STATUS_PROPERTY: {
            "select": {"name": record.status or DEFAULT_STATUS}
        },
        TAGS_PROPERTY: {
            "multi_select": [{"name": tag} for tag in tags]
        },
    }


def remote_to_local(remote: RemoteRecord) -> LocalRecord:
    """
    Build a local record from a Notion page.

    Args:
        remote: Page as returned by fetch_records

    Returns:
        LocalRecord linked to the page, with timestamps copied over
    """
    properties = remote.properties if isinstance(remote.properties, dict) else {}

    return LocalRecord(
        notion_page_id=remote.id,
        name=_read_text(properties, NAME_PROPERTY, "title"),
        description=_read_text(properties, DESCRIPTION_PROPERTY, "rich_text"),
        status=_read_select(properties, STATUS_PROPERTY),
        tags=_read_multi_select(properties, TAGS_PROPERTY),
        created_at=remote.created_time,
        updated_at=remote.last_edited_time,
    )


def _property_value(properties: Dict[str, Any], name: str, kind: str) -> Optional[Any]:
    """Return the typed payload of a property, or None if it is missing or malformed."""
    prop = properties.get(name)
    if not isinstance(prop, dict):
        return None
    return prop.get(kind)


def _read_text(properties: Dict[str, Any], name: str, kind: str) -> str:
    """First text fragment of a title or rich_text property."""
    fragments = _property_value(properties, name, kind)
    if not isinstance(fragments, list) or not fragments:
        return ""

    first = fragments[0]
    if not isinstance(first, dict):
        return ""

    text = first.get("text")
    if isinstance(text, dict) and isinstance(text.get("content"), str):
        return text["content"]

    # Mentions and equations only carry plain_text
    plain_text = first.get("plain_text")
    return plain_text if isinstance(plain_text, str) else ""


def _read_select(properties: Dict[str, Any], name: str) -> str:
    option = _property_value(properties, name, "select")
    if not isinstance(option, dict) or not isinstance(option.get("name"), str):
        return ""
    return option["name"]


def _read_multi_select(properties: Dict[str, Any], name: str) -> List[str]:
    options = _property_value(properties, name, "multi_select")
    if not isinstance(options, list):
        return []
    return [
        option["name"]
        for option in options
        if isinstance(option, dict) and isinstance(option.get("name"), str)
    ]
