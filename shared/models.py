"""Shared data models for the Notion record sync connector."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RemoteRecord:
    """Represents a page in a Notion database."""
    id: str
    properties: Dict[str, Any]
    created_time: Optional[str] = None
    last_edited_time: Optional[str] = None

    @classmethod
    def from_api_response(cls, page: Dict[str, Any]) -> "RemoteRecord":
        """Create RemoteRecord from a Notion page object."""
        return cls(
            id=page["id"],
            properties=page.get("properties") or {},
            created_time=page.get("created_time"),
            last_edited_time=page.get("last_edited_time"),
        )


@dataclass
class LocalRecord:
    """Caller-side record, optionally linked to a Notion page."""
    notion_page_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    tags: List[str] = field(default_factory=list)  # order is not significant
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    # Pre-built Notion properties; pushed verbatim when set
    properties: Optional[Dict[str, Any]] = None


@dataclass
class SyncError:
    """A record that failed to push during a sync, with the failure message."""
    record: LocalRecord
    error: str


@dataclass
class SyncResult:
    """Outcome of one sync invocation."""
    pulled: List[RemoteRecord] = field(default_factory=list)
    pushed: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[SyncError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
