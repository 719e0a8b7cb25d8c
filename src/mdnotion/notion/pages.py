"""Request and response models for the Notion pages and search endpoints"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class PageContentType(str, Enum):
    paragraph = "paragraph"
    child_page = "child_page"
    unknown = "unknown"

    @classmethod
    def _missing_(cls, value):
        return cls.unknown


class PageContent(BaseModel):
    """One child of a page as listed by GET /blocks/{id}/children."""
    id: str
    content_type: PageContentType = PageContentType.unknown

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PageContent":
        return cls(id=data["id"], content_type=PageContentType(data.get("type", "unknown")))


class SearchResultItem(BaseModel):
    """A page returned by POST /search, flattened to the fields the tool uses."""
    id: str
    url: str = ""
    parent_id: Optional[str] = None
    title: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SearchResultItem":
        fragments = data.get("properties", {}).get("title", {}).get("title", [])
        return cls(
            id=data["id"],
            url=data.get("url", ""),
            parent_id=(data.get("parent") or {}).get("page_id"),
            title=fragments[0].get("plain_text", "") if fragments else "",
        )


class CreatePageRequest(BaseModel):
    """Body of POST /pages creating an empty child page."""
    parent: dict[str, str]
    properties: dict[str, Any]
    children: list[Any] = []
    icon: Optional[dict[str, str]] = None

    @classmethod
    def new(cls, parent_id: str, title: str, emoji: Optional[str] = None) -> "CreatePageRequest":
        return cls(
            parent={"page_id": parent_id},
            properties={
                "title": {
                    "id": "title",
                    "type": "title",
                    "title": [{"type": "text", "text": {"content": title}}],
                },
            },
            icon={"type": "emoji", "emoji": emoji} if emoji else None,
        )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


def search_request(query: str, start_cursor: Optional[str] = None) -> dict[str, Any]:
    """Body of POST /search restricted to pages."""
    body: dict[str, Any] = {
        "query": query,
        "filter": {"value": "page", "property": "object"},
    }
    if start_cursor:
        body["start_cursor"] = start_cursor
    return body
