"""Notion REST API client used as the remote workspace.

This module wraps a requests.Session and translates non-success responses and
transport failures into RemoteAPIError. No call is retried: the first failure
propagates to the caller and aborts the run.
"""

import logging
from typing import Any, Iterator, Optional

import requests

from mdnotion.config import Settings
from mdnotion.errors import AmbiguousLookupError, RemoteAPIError
from mdnotion.notion.models import BlockRequest, MAX_BLOCKS_PER_REQUEST
from mdnotion.notion.pages import (
    CreatePageRequest,
    PageContent,
    PageContentType,
    SearchResultItem,
    search_request,
)

logger = logging.getLogger(__name__)


class NotionClient:
    """Thin client over the Notion pages, blocks and search endpoints.

    Example:
        >>> client = NotionClient(load_config().require_remote())
        >>> root_id = client.get_parent_id_by_name(client.parent_page_name)
        >>> page_id = client.create_page(root_id, "Guide", emoji="📘")
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        """Initialize the client with settings and an optional preconfigured session.

        Args:
            settings: Settings carrying the token, API URL and version
            session: Session to send requests with; a new one is created if omitted
        """
        self.base_endpoint = settings.api_url.rstrip('/')
        self.parent_page_name = settings.parent_page
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {settings.notion_token}",
            "Notion-Version": settings.api_version,
            "Content-Type": "application/json",
        })

    def _request(self, method: str, path: str, operation: str,
                 body: Optional[dict] = None, params: Optional[dict] = None) -> dict[str, Any]:
        """Send one request and return its decoded JSON body.

        Raises:
            RemoteAPIError: On transport failure or a non-200 status
        """
        url = f"{self.base_endpoint}{path}"
        logger.debug(f"Notion API: {method} {path}")
        try:
            response = self._session.request(method, url, json=body, params=params)
        except requests.RequestException as e:
            raise RemoteAPIError(operation, None, str(e)) from e
        if response.status_code != 200:
            raise RemoteAPIError(operation, response.status_code, response.text)
        try:
            return response.json()
        except ValueError as e:
            raise RemoteAPIError(operation, response.status_code, f"invalid JSON response: {e}") from e

    def _paginate(self, method: str, path: str, operation: str,
                  body: Optional[dict] = None) -> Iterator[dict[str, Any]]:
        """Yield every result across next_cursor pages."""
        cursor = None
        while True:
            if method == "GET":
                params = {"start_cursor": cursor} if cursor else None
                data = self._request(method, path, operation, params=params)
            else:
                page_body = dict(body or {})
                if cursor:
                    page_body["start_cursor"] = cursor
                data = self._request(method, path, operation, body=page_body)
            yield from data.get("results", [])
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break

    def find_all_pages_related_to_name(self, page_name: str) -> list[SearchResultItem]:
        """Return every page the search endpoint relates to page_name."""
        return [
            SearchResultItem.from_api(r)
            for r in self._paginate("POST", "/search", "search pages", search_request(page_name))
            if r.get("object", "page") == "page"
        ]

    def search_pages_by_title(self, page_name: str) -> list[SearchResultItem]:
        """Return the pages whose title equals page_name, ignoring case."""
        lower_name = page_name.lower()
        return [p for p in self.find_all_pages_related_to_name(page_name) if p.title.lower() == lower_name]

    def get_parent_id_by_name(self, parent_name: str) -> str:
        """Return the id of the single page titled parent_name.

        Raises:
            AmbiguousLookupError: If zero or several pages carry that title
        """
        matches = self.search_pages_by_title(parent_name)
        if len(matches) != 1:
            raise AmbiguousLookupError(parent_name, [m.url for m in matches])
        return matches[0].id

    def create_page(self, parent_id: str, title: str, emoji: Optional[str] = None) -> str:
        """Create an empty child page under parent_id and return its id."""
        request = CreatePageRequest.new(parent_id, title, emoji)
        data = self._request("POST", "/pages", f"create page '{title}'", body=request.to_payload())
        logger.info(f"Created page '{title}' ({data['id']}) under {parent_id}")
        return data["id"]

    def append_blocks(self, target_id: str, request: BlockRequest) -> None:
        """Append the request's children under target_id, in order.

        The API takes at most 100 children per call, so larger requests are
        sent as consecutive batches. A table with more than 100 rows is created
        with its first 100 and the remaining rows are appended under it.
        """
        for batch in request.batches(MAX_BLOCKS_PER_REQUEST):
            children, overflow = [], {}
            for index, child in enumerate(batch.children):
                head, rest = child.split_rows()
                children.append(head)
                if rest:
                    overflow[index] = rest
            data = self._request(
                "PATCH", f"/blocks/{target_id}/children", "append block",
                body=BlockRequest(children=children).to_payload(),
            )
            if not overflow:
                continue
            created = data.get("results", [])
            for index, rows in overflow.items():
                if index >= len(created):
                    raise RemoteAPIError("append table rows", None, f"no block id returned for child {index}")
                self.append_blocks(created[index]["id"], BlockRequest(children=rows))

    def get_children(self, page_id: str) -> list[PageContent]:
        """List the direct children (blocks and child pages) of a page."""
        return [
            PageContent.from_api(r)
            for r in self._paginate("GET", f"/blocks/{page_id}/children", "list page content")
        ]

    def archive(self, resource_id: str, content_type: PageContentType) -> None:
        """Move a child page or block to the trash."""
        if content_type == PageContentType.child_page:
            path = f"/pages/{resource_id}"
        else:
            path = f"/blocks/{resource_id}"
        self._request("PATCH", path, f"archive {content_type.value} {resource_id}", body={"in_trash": True})

    def clear(self, parent_id: str, children: Optional[list[PageContent]] = None) -> int:
        """Archive every child of parent_id; returns how many were archived."""
        if children is None:
            children = self.get_children(parent_id)
        for child in children:
            self.archive(child.id, child.content_type)
        logger.info(f"Archived {len(children)} item(s) under {parent_id}")
        return len(children)
