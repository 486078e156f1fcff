"""In-memory stand-ins for the catalog API and the display surface."""
import asyncio
from typing import Any, Optional

from tracker.services.models import Album, PlayHistoryEntry, PlayRecord
from tracker.views.base import AlbumRow, CatalogView, RenderError


class RecordingView(CatalogView):
    """Keeps the current rendering and a log of every call made on it."""

    def __init__(self, confirm_answer: bool = True):
        self.rows: list[AlbumRow] = []
        self.count_text: Optional[str] = None
        self.history: list[str] = []
        self.plays: list[str] = []
        self.alerts: list[str] = []
        self.prompts: list[str] = []
        self.calls: list[str] = []
        self.form: dict = {"title": "T", "artist": "A", "cover_url": ""}
        self.dialog_open = True
        self.confirm_answer = confirm_answer
        self.broken: set[str] = set()

    def _maybe_fail(self, name: str) -> None:
        if name in self.broken:
            raise RenderError(f"{name} failed: message is too long")

    async def render_catalog(self, rows, count_text):
        self.calls.append("render_catalog")
        self._maybe_fail("render_catalog")
        self.rows = list(rows)
        if count_text is not None:
            self.count_text = count_text

    async def render_history(self, lines):
        self.calls.append("render_history")
        self._maybe_fail("render_history")
        self.history = list(lines)

    async def render_plays(self, lines):
        self.calls.append("render_plays")
        self._maybe_fail("render_plays")
        self.plays = list(lines)

    async def alert(self, text):
        self.calls.append("alert")
        self._maybe_fail("alert")
        self.alerts.append(text)

    async def confirm(self, prompt):
        self.calls.append("confirm")
        self._maybe_fail("confirm")
        self.prompts.append(prompt)
        return self.confirm_answer

    async def close_add_dialog(self):
        self.calls.append("close_add_dialog")
        self._maybe_fail("close_add_dialog")
        self.dialog_open = False

    async def reset_form(self):
        self.calls.append("reset_form")
        self._maybe_fail("reset_form")
        self.form = {"title": "", "artist": "", "cover_url": ""}


class FakeApi:
    """Scripted CatalogApi: each method returns or raises what the test set up."""

    def __init__(self, albums: Optional[list[Album]] = None):
        self.albums = albums or []
        self.history: dict[int, list[PlayHistoryEntry]] = {}
        self.records: list[PlayRecord] = []
        self.requests: list[tuple[str, str, Any]] = []
        self.fail: dict[str, Exception] = {}
        self.delays: dict[str, float] = {}

    async def _call(self, name: str, method: str, path: str, body: Any = None):
        self.requests.append((method, path, body))
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.fail:
            raise self.fail[name]

    async def list_albums(self):
        snapshot = list(self.albums)
        await self._call("list_albums", "GET", "/albums")
        return snapshot

    async def create_album(self, payload):
        await self._call("create_album", "POST", "/albums", payload)
        return ""

    async def delete_album(self, album_id):
        await self._call("delete_album", "DELETE", f"/albums/{album_id}")
        return ""

    async def list_play_history(self, album_id):
        await self._call("list_play_history", "GET", f"/play_history/{album_id}")
        return self.history.get(album_id, [])

    async def list_all_plays(self):
        await self._call("list_all_plays", "GET", "/play_history")
        return list(self.records)

    async def log_play(self, album_id, finished_on=None):
        body = {"album_id": album_id}
        if finished_on is not None:
            body["finished_on"] = finished_on
        await self._call("log_play", "POST", "/play_history", body)
        return ""

    def count(self, method: str, path: str) -> int:
        return sum(1 for m, p, _ in self.requests if m == method and p == path)
