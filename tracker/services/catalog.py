"""
Catalog components: one request, one render, no intermediate state.

Failures stop at the component boundary: they are logged and reported
as a False/None result, never raised to the caller. A display that
cannot show a result does not undo the request that produced it.
"""
import asyncio
import logging
from typing import Optional

import aiohttp

from tracker.config.variants import VariantProfile
from tracker.services.catalog_api import CatalogApi, utc_timestamp
from tracker.services.models import Album, AlbumDraft, PlayRecord
from tracker.utils.http_client import HttpError
from tracker.views.base import AlbumRow, CatalogView, RenderError

logger = logging.getLogger(__name__)

# Transport, status and decoding failures (JSONDecodeError and ApiFormatError are ValueErrors)
FAILURES = (aiohttp.ClientError, asyncio.TimeoutError, HttpError, ValueError)

ADDED = "Album added successfully!"
ADD_FAILED = "Failed to add album."
DELETED = "Album deleted successfully!"
CONFIRM_DELETE = "Are you sure you want to delete this album?"


class CatalogLoader:
    def __init__(self, api: CatalogApi, view: CatalogView, profile: VariantProfile, placeholder: str):
        self._api = api
        self._view = view
        self._profile = profile
        self._placeholder = placeholder

    async def load(self) -> Optional[list[Album]]:
        try:
            albums = await self._api.list_albums()
        except FAILURES as exc:
            logger.warning("Error fetching albums", extra={"error": str(exc)})
            return None

        rows = [self._row(album) for album in albums]
        count_text = f"Total Albums: {len(albums)}" if self._profile.shows_count else None
        await _show(self._view.render_catalog(rows, count_text), "catalog")
        return albums

    def _row(self, album: Album) -> AlbumRow:
        return AlbumRow(
            album_id=album.album_id,
            title=album.title,
            artist=album.artist,
            cover_url=album.cover_url or self._placeholder,
            deletable=self._profile.supports_delete,
            selectable=self._profile.supports_history,
        )


class AlbumCreator:
    def __init__(self, api: CatalogApi, view: CatalogView, profile: VariantProfile, loader: CatalogLoader):
        self._api = api
        self._view = view
        self._profile = profile
        self._loader = loader

    async def submit(self, draft: AlbumDraft) -> bool:
        payload = draft.to_payload(self._profile.empty_cover)
        try:
            await self._api.create_album(payload)
        except FAILURES as exc:
            logger.warning("Error adding album", extra={"error": str(exc), "title": draft.title})
            if self._profile.alert_on_create_failure:
                await _show(self._view.alert(ADD_FAILED), "alert")
            return False

        await _show(self._view.alert(ADDED), "alert")
        await self._loader.load()
        if self._profile.closes_dialog:
            await _show(self._view.close_add_dialog(), "add dialog")
        await _show(self._view.reset_form(), "form reset")
        return True


class AlbumRemover:
    def __init__(self, api: CatalogApi, view: CatalogView, loader: CatalogLoader):
        self._api = api
        self._view = view
        self._loader = loader

    async def remove(self, album_id: int) -> bool:
        try:
            confirmed = await self._view.confirm(CONFIRM_DELETE)
        except RenderError as exc:
            logger.warning("Could not ask for confirmation", extra={"error": str(exc), "album_id": album_id})
            return False
        if not confirmed:
            return False
        try:
            await self._api.delete_album(album_id)
        except FAILURES as exc:
            logger.warning("Error deleting album", extra={"error": str(exc), "album_id": album_id})
            return False

        await _show(self._view.alert(DELETED), "alert")
        await self._loader.load()
        return True


class HistoryViewer:
    def __init__(self, api: CatalogApi, view: CatalogView):
        self._api = api
        self._view = view

    async def show(self, album_id: int) -> Optional[list[str]]:
        try:
            entries = await self._api.list_play_history(album_id)
        except FAILURES as exc:
            logger.warning("Error fetching play history", extra={"error": str(exc), "album_id": album_id})
            return None

        lines = [f"Played on {entry.played_on}" for entry in entries]
        await _show(self._view.render_history(lines), "history")
        return lines


class PlayLogger:
    """Start/finish markers for a listening session of one album."""

    def __init__(self, api: CatalogApi, view: CatalogView):
        self._api = api
        self._view = view

    async def start(self, album_id: int) -> bool:
        try:
            await self._api.log_play(album_id)
        except FAILURES as exc:
            logger.warning("Error logging play", extra={"error": str(exc), "album_id": album_id})
            return False
        await _show(self._view.alert("Play started."), "alert")
        return True

    async def finish(self, album_id: int, finished_on: Optional[str] = None) -> bool:
        finished_on = finished_on or utc_timestamp()
        try:
            await self._api.log_play(album_id, finished_on=finished_on)
        except FAILURES as exc:
            logger.warning("Error finishing play", extra={"error": str(exc), "album_id": album_id})
            return False
        await _show(self._view.alert("Play finished."), "alert")
        return True


class RecentPlays:
    def __init__(self, api: CatalogApi, view: CatalogView):
        self._api = api
        self._view = view

    async def show(self) -> Optional[list[str]]:
        try:
            records = await self._api.list_all_plays()
        except FAILURES as exc:
            logger.warning("Error fetching recent plays", extra={"error": str(exc)})
            return None

        lines = [format_play(record) for record in records]
        await _show(self._view.render_plays(lines), "recent plays")
        return lines


def format_play(record: PlayRecord) -> str:
    line = f"{record.title} by {record.artist}, played on {record.played_on}"
    if record.duration:
        line += f" ({record.duration})"
    return line


async def _show(rendering, what: str) -> bool:
    try:
        await rendering
    except RenderError as exc:
        logger.warning("Error rendering %s", what, extra={"error": str(exc)})
        return False
    return True
