"""
Catalog API service.
- Thin async wrapper over the external album REST/JSON API.
- Every call is a single round trip; failures propagate to the caller.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

import aiohttp

from tracker.services.models import (
    Album,
    PlayHistoryEntry,
    PlayRecord,
    expect_list,
    parse_album,
    parse_play_entry,
    parse_play_record,
)
from tracker.utils.http_client import fetch_json, send

logger = logging.getLogger(__name__)


class CatalogApi:
    def __init__(self, session: aiohttp.ClientSession, base_url: str, id_field: str = "id"):
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._id_field = id_field

    @property
    def base_url(self) -> str:
        return self._base_url

    async def list_albums(self) -> list[Album]:
        data = expect_list(await fetch_json(self._session, f"{self._base_url}/albums"))
        logger.debug("Fetched albums", extra={"count": len(data)})
        return [parse_album(item, self._id_field) for item in data]

    async def create_album(self, payload: dict) -> str:
        return await send(self._session, "POST", f"{self._base_url}/albums", json_body=payload)

    async def delete_album(self, album_id: int) -> str:
        return await send(self._session, "DELETE", f"{self._base_url}/albums/{album_id}")

    async def list_play_history(self, album_id: int) -> list[PlayHistoryEntry]:
        data = await fetch_json(self._session, f"{self._base_url}/play_history/{album_id}")
        return [parse_play_entry(item) for item in expect_list(data)]

    async def list_all_plays(self) -> list[PlayRecord]:
        data = await fetch_json(self._session, f"{self._base_url}/play_history")
        return [parse_play_record(item) for item in expect_list(data)]

    async def log_play(self, album_id: int, finished_on: Optional[str] = None) -> str:
        payload: dict = {"album_id": album_id}
        if finished_on is not None:
            payload["finished_on"] = finished_on
        return await send(self._session, "POST", f"{self._base_url}/play_history", json_body=payload)


def utc_timestamp() -> str:
    """Current time as RFC 3339, the format the backend parses."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")
