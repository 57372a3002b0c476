"""NotionClient: publishes translated pages through the Notion REST API.

Tagged pages are filed into one inline database per tag under the parent
page; untagged pages go directly under the parent. Pages that already exist
(same title) are left alone, so re-running a migration is safe.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Sequence
from datetime import datetime, timezone

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from scrapbox2notion.config.models import NotionConfig
from scrapbox2notion.notion.blocks import markdown_to_blocks, rich_text
from scrapbox2notion.notion.models import NotionError

logger = logging.getLogger(__name__)

# The API accepts at most this many children per request
MAX_CHILDREN = 100

_RETRYABLE_STATUS = (429, 500, 502, 503, 504)


def _retry(config: NotionConfig, status_forcelist: tuple[int, ...], read: int | None = None) -> Retry:
    return Retry(
        total=config.max_retries,
        read=read,
        backoff_factor=config.retry_delay,
        status_forcelist=status_forcelist,
        allowed_methods=None,  # Notion reads and writes are both POST
        respect_retry_after_header=True,
        raise_on_status=False,
    )


def _build_session(config: NotionConfig, token: str) -> requests.Session:
    """Session whose retry policy depends on whether a call can write.

    Search and database queries are read-only POSTs and retry on 429 and 5xx.
    Everything else (page and database creation, child appends) may have been
    applied before a 5xx or a read timeout, so it only retries on 429, which
    Notion returns before doing any work.
    """
    base = config.api_url.rstrip("/")
    reads = HTTPAdapter(max_retries=_retry(config, _RETRYABLE_STATUS))

    session = requests.Session()
    session.mount("https://", HTTPAdapter(max_retries=_retry(config, (429,), read=0)))
    session.mount(f"{base}/search", reads)
    # trailing slash: /databases/{id}/query, not POST /databases
    session.mount(f"{base}/databases/", reads)
    session.headers.update({
        "Authorization": f"Bearer {token}",
        "Notion-Version": config.api_version,
        "Content-Type": "application/json",
    })
    return session


class NotionClient:
    def __init__(
        self,
        config: NotionConfig,
        token: str,
        parent_page_id: str,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.parent_page_id = parent_page_id
        self._base_url = config.api_url.rstrip("/")
        self._session = session or _build_session(config, token)

    # -- Public API ----------------------------------------------------------

    def create_page(self, title: str, markdown: str, tags: Sequence[str]) -> list[str]:
        """Publish one page. Returns the ids of the pages actually created."""
        logger.debug("Creating Notion page %s", title, extra={"page": title, "tags": list(tags)})
        blocks = markdown_to_blocks(markdown)
        created: list[str] = []

        # Repeated tags in the source would only hit the duplicate check
        for tag in dict.fromkeys(tags):
            database_id = self._ensure_tag_database(tag)
            if self._database_has_page(database_id, title):
                logger.info(
                    "Notion page %s already exists in %s, skipping",
                    title, tag, extra={"page": title, "tags": [tag]},
                )
                continue
            page_id = self._create_page_with_children(
                {
                    "parent": {"type": "database_id", "database_id": database_id},
                    "properties": {
                        "Name": {"title": rich_text(title)},
                        "Tag": {"select": {"name": tag}},
                        "Created": {"date": {"start": datetime.now(timezone.utc).isoformat()}},
                    },
                },
                blocks,
            )
            self._confirm_page(page_id)
            created.append(page_id)
            logger.info("Created Notion page %s", title, extra={"page": title, "tags": [tag]})

        if not tags:
            if self._find_page(title) is not None:
                logger.info("Notion page %s already exists, skipping", title, extra={"page": title})
                return created
            page_id = self._create_page_with_children(
                {
                    "parent": {"type": "page_id", "page_id": self.parent_page_id},
                    "properties": {"title": {"title": rich_text(title)}},
                },
                blocks,
            )
            created.append(page_id)
            logger.info("Created Notion page %s", title, extra={"page": title})

        return created

    # -- Tag databases -------------------------------------------------------

    def find_tag_database(self, tag: str) -> dict | None:
        """Return the database whose title is exactly `tag`, if any."""
        results = self._search(tag, "database")
        for result in results:
            if result.get("object") != "database":
                continue
            title = result.get("title") or []
            if title and (title[0].get("text") or {}).get("content") == tag:
                return result
        return None

    def _ensure_tag_database(self, tag: str) -> str:
        existing = self.find_tag_database(tag)
        if existing is not None:
            return existing["id"]

        self._request(
            "POST",
            "/databases",
            "create_database",
            {
                "parent": {"type": "page_id", "page_id": self.parent_page_id},
                "title": rich_text(tag),
                "is_inline": True,
                "properties": {
                    "Name": {"title": {}},
                    "Tag": {"select": {"options": []}},
                    "Created": {"date": {}},
                },
            },
        )
        logger.info("Created tag database %s", tag, extra={"tags": [tag]})

        # Search is eventually consistent; wait until the new database shows up
        for attempt in range(1, self.config.database_confirm_attempts + 1):
            try:
                found = self.find_tag_database(tag)
            except NotionError as exc:
                logger.debug("confirm search failed: %s", exc, extra={"attempt": attempt})
                found = None
            if found is not None:
                return found["id"]
            time.sleep(self.config.confirm_delay)

        raise NotionError("confirm_database", f"database {tag!r} not visible after creation")

    def _database_has_page(self, database_id: str, title: str) -> bool:
        data = self._request(
            "POST",
            f"/databases/{database_id}/query",
            "query_database",
            {"filter": {"property": "Name", "title": {"equals": title}}, "page_size": 1},
        )
        return bool(data.get("results"))

    # -- Pages ---------------------------------------------------------------

    def _find_page(self, title: str) -> dict | None:
        for result in self._search(title, "page"):
            if _page_title(result) == title:
                return result
        return None

    def _create_page_with_children(self, payload: dict, blocks: list[dict]) -> str:
        page = self._request(
            "POST",
            "/pages",
            "create_page",
            {**payload, "children": blocks[:MAX_CHILDREN]},
        )
        page_id = page["id"]
        for start in range(MAX_CHILDREN, len(blocks), MAX_CHILDREN):
            self._request(
                "PATCH",
                f"/blocks/{page_id}/children",
                "append_children",
                {"children": blocks[start:start + MAX_CHILDREN]},
            )
        return page_id

    def _confirm_page(self, page_id: str) -> None:
        for attempt in range(1, self.config.page_confirm_attempts + 1):
            try:
                page = self._request("GET", f"/pages/{page_id}", "get_page")
            except NotionError as exc:
                logger.debug("confirm get failed: %s", exc, extra={"attempt": attempt})
            else:
                if page.get("id") == page_id:
                    return
            time.sleep(self.config.confirm_delay)
        raise NotionError("confirm_page", f"page {page_id} not retrievable after creation")

    # -- Transport -----------------------------------------------------------

    def _search(self, query: str, object_type: str) -> list[dict]:
        data = self._request(
            "POST",
            "/search",
            "search",
            {"query": query, "filter": {"property": "object", "value": object_type}},
        )
        return data.get("results") or []

    def _request(
        self, method: str, path: str, operation: str, payload: dict | None = None
    ) -> dict:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(
                method, url, json=payload, timeout=self.config.timeout
            )
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise NotionError(
                operation, e, retryable=status in _RETRYABLE_STATUS, status=status
            ) from e
        except requests.RequestException as e:
            retryable = isinstance(e, (requests.ConnectionError, requests.Timeout))
            raise NotionError(operation, e, retryable=retryable) from e
        logger.debug(
            "%s %s -> %s", method, path, resp.status_code,
            extra={"operation": operation, "status": resp.status_code},
        )
        return resp.json()


def _page_title(page: dict) -> str:
    """Plain-text title of a page object, whatever its title property is called."""
    for prop in (page.get("properties") or {}).values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            return "".join(
                part.get("plain_text") or (part.get("text") or {}).get("content", "")
                for part in prop.get("title") or []
            )
    return ""


def create_notion_client(
    config: NotionConfig, session: requests.Session | None = None
) -> NotionClient:
    """Create a NotionClient from config.

    Resolves the token and parent page id from the environment variables
    named in the config.
    """
    token = os.environ.get(config.token_env, "")
    if not token:
        raise ValueError(
            f"Notion token not found. Set the {config.token_env} environment variable."
        )
    parent_page_id = os.environ.get(config.parent_page_env, "")
    if not parent_page_id:
        raise ValueError(
            f"Notion parent page not found. Set the {config.parent_page_env} environment variable."
        )
    return NotionClient(config, token=token, parent_page_id=parent_page_id, session=session)
