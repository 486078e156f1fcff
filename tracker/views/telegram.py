"""
Telegram rendering of the catalog.
- The album list, history and recent plays each live in a run of
  messages that is edited wholesale on every render. A run is split
  into pages so no message exceeds Telegram's text and keyboard limits.
- confirm() posts a Yes/No keyboard and suspends until the callback
  arrives (or the wait times out, which counts as "no").
"""
import asyncio
import logging
import secrets
from contextlib import suppress
from typing import Optional

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
from aiogram.filters.callback_data import CallbackData
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from tracker.views.base import AlbumRow, CatalogView, RenderError

logger = logging.getLogger(__name__)

MESSAGE_LIMIT = 4096
ROWS_PER_PAGE = 40

Page = tuple[str, Optional[InlineKeyboardMarkup]]


class AddAlbumForm(StatesGroup):
    title = State()
    artist = State()
    cover_url = State()


class AlbumAction(CallbackData, prefix="alb"):
    action: str  # "delete" | "select"
    album_id: int


class ConfirmAnswer(CallbackData, prefix="cfm"):
    token: str
    answer: bool


class Confirmations:
    """Pending yes/no questions keyed by a short random token."""

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Future] = {}

    def open(self) -> tuple[str, asyncio.Future]:
        token = secrets.token_hex(4)
        future = asyncio.get_running_loop().create_future()
        self._pending[token] = future
        return token, future

    def resolve(self, token: str, answer: bool) -> bool:
        future = self._pending.pop(token, None)
        if future is None or future.done():
            return False
        future.set_result(answer)
        return True

    def discard(self, token: str) -> None:
        self._pending.pop(token, None)

    def __len__(self) -> int:
        return len(self._pending)


class ChatView(CatalogView):
    def __init__(self, bot: Bot, chat_id: int, confirmations: Confirmations, confirm_timeout: float):
        self._bot = bot
        self._chat_id = chat_id
        self._confirmations = confirmations
        self._confirm_timeout = confirm_timeout
        self._state: Optional[FSMContext] = None
        self._catalog_messages: list[int] = []
        self._history_messages: list[int] = []
        self._plays_messages: list[int] = []

    def bind_state(self, state: FSMContext) -> None:
        self._state = state

    async def render_catalog(self, rows: list[AlbumRow], count_text: Optional[str]) -> None:
        self._catalog_messages = await self._replace(self._catalog_messages, catalog_pages(rows, count_text))

    async def render_history(self, lines: list[str]) -> None:
        self._history_messages = await self._replace(self._history_messages, list_pages("Play history", lines))

    async def render_plays(self, lines: list[str]) -> None:
        self._plays_messages = await self._replace(self._plays_messages, list_pages("Recent plays", lines))

    async def alert(self, text: str) -> None:
        try:
            await self._bot.send_message(self._chat_id, esc(text))
        except TelegramAPIError as exc:
            raise RenderError(str(exc)) from exc

    async def confirm(self, prompt: str) -> bool:
        token, future = self._confirmations.open()
        try:
            message = await self._bot.send_message(
                self._chat_id, esc(prompt), reply_markup=confirm_keyboard(token)
            )
        except TelegramAPIError as exc:
            self._confirmations.discard(token)
            raise RenderError(str(exc)) from exc
        try:
            return await asyncio.wait_for(future, self._confirm_timeout)
        except asyncio.TimeoutError:
            logger.info("Confirmation expired", extra={"chat_id": self._chat_id})
            return False
        finally:
            self._confirmations.discard(token)
            with suppress(TelegramAPIError):
                await self._bot.delete_message(self._chat_id, message.message_id)

    async def close_add_dialog(self) -> None:
        if self._state is not None:
            await self._state.set_state(None)

    async def reset_form(self) -> None:
        if self._state is None:
            return
        await self._state.set_data({})
        # A form that stays open goes back to its first field
        if await self._state.get_state() is not None:
            await self._state.set_state(AddAlbumForm.title)
            await self.alert("Album title?")

    async def _replace(self, message_ids: list[int], pages: list[Page]) -> list[int]:
        """Edit the previous run page by page, send what is new, drop the leftovers."""
        rendered: list[int] = []
        try:
            for index, (text, markup) in enumerate(pages):
                previous = message_ids[index] if index < len(message_ids) else None
                rendered.append(await self._put(previous, text, markup))
        except TelegramAPIError as exc:
            raise RenderError(str(exc)) from exc

        for stale in message_ids[len(pages):]:
            with suppress(TelegramAPIError):
                await self._bot.delete_message(self._chat_id, stale)
        return rendered

    async def _put(self, message_id: Optional[int], text: str, markup: Optional[InlineKeyboardMarkup]) -> int:
        if message_id is not None:
            try:
                await self._bot.edit_message_text(
                    text=text,
                    chat_id=self._chat_id,
                    message_id=message_id,
                    reply_markup=markup,
                )
                return message_id
            except TelegramBadRequest as exc:
                if "not modified" in str(exc):
                    return message_id
                logger.info("Rendering into a new message", extra={"error": str(exc)})
        message = await self._bot.send_message(self._chat_id, text, reply_markup=markup)
        return message.message_id


def catalog_pages(rows: list[AlbumRow], count_text: Optional[str]) -> list[Page]:
    header = [f"<b>{esc(count_text)}</b>"] if count_text is not None else []
    if not rows:
        return [("\n".join(header + ["No albums yet."]), None)]
    lines = [
        f'<a href="{esc(_clip(row.cover_url, 300))}">🖼</a> '
        f"<b>{esc(_clip(row.title, 100))}</b> by {esc(_clip(row.artist, 100))}"
        for row in rows
    ]
    return [
        ("\n".join(text), catalog_keyboard(rows[start:end]))
        for text, start, end in _paginate(header, lines)
    ]


def catalog_keyboard(rows: list[AlbumRow]) -> Optional[InlineKeyboardMarkup]:
    buttons = []
    for row in rows:
        if row.deletable:
            buttons.append([InlineKeyboardButton(
                text=f"Delete: {row.title}"[:64],
                callback_data=AlbumAction(action="delete", album_id=row.album_id).pack(),
            )])
        elif row.selectable:
            buttons.append([InlineKeyboardButton(
                text=row.label[:64],
                callback_data=AlbumAction(action="select", album_id=row.album_id).pack(),
            )])
    if not buttons:
        return None
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def confirm_keyboard(token: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[[
        InlineKeyboardButton(text="Yes", callback_data=ConfirmAnswer(token=token, answer=True).pack()),
        InlineKeyboardButton(text="No", callback_data=ConfirmAnswer(token=token, answer=False).pack()),
    ]])


def list_pages(heading: str, lines: list[str]) -> list[Page]:
    header = [f"<b>{esc(heading)}</b>"]
    if not lines:
        return [("\n".join(header + ["Nothing here yet."]), None)]
    items = [f"• {esc(_clip(line, 500))}" for line in lines]
    return [("\n".join(text), None) for text, _, _ in _paginate(header, items)]


def _paginate(header: list[str], lines: list[str]) -> list[tuple[list[str], int, int]]:
    """Greedy split into (page lines, first item, end item); the header opens page one."""
    pages = []
    current, start, size = list(header), 0, len("\n".join(header))
    for index, line in enumerate(lines):
        items = index - start
        grown = size + len(line) + (1 if current else 0)
        if items and (items >= ROWS_PER_PAGE or grown > MESSAGE_LIMIT):
            pages.append((current, start, index))
            current, start, size = [], index, 0
            grown = len(line)
        current.append(line)
        size = grown
    pages.append((current, start, len(lines)))
    return pages


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def esc(text: str) -> str:
    """Minimal HTML escape for Telegram."""
    return (
        text.replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
    )
