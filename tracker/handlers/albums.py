"""
Telegram handlers for the album catalog.
- /start, /albums   → (re)load the catalog
- /add              → title → artist → cover URL (or /skip) → create
- Delete / select   → inline buttons on the catalog message
- /play, /stop, /plays → play logging and the recent-plays feed
"""
import logging
from typing import Any, Optional

from aiogram import Bot, F, Router
from aiogram.filters import Command, CommandObject, CommandStart, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from tracker.handlers.hub import CatalogHub
from tracker.services.client import (
    AlbumSelected,
    AlbumSubmitted,
    DeleteRequested,
    PageLoaded,
    PlayFinished,
    PlayStarted,
    RecentPlaysRequested,
    UnsupportedEvent,
)
from tracker.services.models import AlbumDraft
from tracker.views.telegram import AddAlbumForm, AlbumAction, ConfirmAnswer

logger = logging.getLogger(__name__)
router = Router()

_HELP = (
    "📀 <b>Record tracker</b>\n"
    "/albums: show the catalog\n"
    "/add: add an album\n"
    "/play &lt;id&gt;, /stop &lt;id&gt;: log a listening session\n"
    "/plays: recent plays"
)


async def _dispatch(hub: CatalogHub, bot: Bot, chat_id: int, event: Any, state: Optional[FSMContext] = None) -> Any:
    client, view = hub.for_chat(bot, chat_id)
    if state is not None:
        view.bind_state(state)
    try:
        return await client.dispatch(event)
    except UnsupportedEvent as exc:
        await bot.send_message(chat_id, f"⛔ {exc}")
    except Exception:
        logger.exception("Unexpected error", extra={"chat_id": chat_id, "event": type(event).__name__})
        await bot.send_message(chat_id, "😕 An unexpected error occurred. Please try again later.")
    return None


@router.message(CommandStart())
async def cmd_start(message: Message, bot: Bot, hub: CatalogHub) -> None:
    await message.answer(_HELP)
    await _dispatch(hub, bot, message.chat.id, PageLoaded())


@router.message(Command("albums"))
async def cmd_albums(message: Message, bot: Bot, hub: CatalogHub) -> None:
    await _dispatch(hub, bot, message.chat.id, PageLoaded())


# ── Add-album form ───────────────────────────────────────────────────────────

@router.message(Command("add"))
async def cmd_add(message: Message, state: FSMContext) -> None:
    await state.set_state(AddAlbumForm.title)
    await state.set_data({})
    await message.answer("Album title?")


@router.message(Command("cancel"), StateFilter(AddAlbumForm))
async def cmd_cancel(message: Message, state: FSMContext) -> None:
    await state.clear()
    await message.answer("Cancelled.")


@router.message(AddAlbumForm.title, F.text)
async def form_title(message: Message, state: FSMContext) -> None:
    await state.update_data(title=message.text)
    await state.set_state(AddAlbumForm.artist)
    await message.answer("Artist?")


@router.message(AddAlbumForm.artist, F.text)
async def form_artist(message: Message, state: FSMContext) -> None:
    await state.update_data(artist=message.text)
    await state.set_state(AddAlbumForm.cover_url)
    await message.answer("Cover URL? Send /skip to leave it empty.")


@router.message(AddAlbumForm.cover_url, F.text)
async def form_cover(message: Message, bot: Bot, state: FSMContext, hub: CatalogHub) -> None:
    cover_url = "" if message.text.strip() == "/skip" else message.text.strip()
    data = await state.get_data()
    draft = AlbumDraft(
        title=data.get("title", ""),
        artist=data.get("artist", ""),
        cover_url=cover_url,
    )
    await _dispatch(hub, bot, message.chat.id, AlbumSubmitted(draft), state)


# ── Inline buttons ───────────────────────────────────────────────────────────

@router.callback_query(AlbumAction.filter(F.action == "delete"))
async def on_delete(callback: CallbackQuery, callback_data: AlbumAction, bot: Bot, hub: CatalogHub) -> None:
    await callback.answer()
    await _dispatch(hub, bot, callback.message.chat.id, DeleteRequested(callback_data.album_id))


@router.callback_query(AlbumAction.filter(F.action == "select"))
async def on_select(callback: CallbackQuery, callback_data: AlbumAction, bot: Bot, hub: CatalogHub) -> None:
    await callback.answer()
    await _dispatch(hub, bot, callback.message.chat.id, AlbumSelected(callback_data.album_id))


@router.callback_query(ConfirmAnswer.filter())
async def on_confirm(callback: CallbackQuery, callback_data: ConfirmAnswer, hub: CatalogHub) -> None:
    if not hub.confirmations.resolve(callback_data.token, callback_data.answer):
        await callback.answer("This question has expired.")
        return
    await callback.answer()


# ── Plays ────────────────────────────────────────────────────────────────────

@router.message(Command("play", "stop"))
async def cmd_play(message: Message, command: CommandObject, bot: Bot, hub: CatalogHub) -> None:
    try:
        album_id = int((command.args or "").strip())
    except ValueError:
        await message.reply(f"Usage: /{command.command} &lt;album id&gt;")
        return
    event = PlayStarted(album_id) if command.command == "play" else PlayFinished(album_id)
    await _dispatch(hub, bot, message.chat.id, event)


@router.message(Command("plays"))
async def cmd_plays(message: Message, bot: Bot, hub: CatalogHub) -> None:
    await _dispatch(hub, bot, message.chat.id, RecentPlaysRequested())
