"""Per-chat catalog clients sharing one API client."""
import logging
from collections import OrderedDict

from aiogram import Bot

from tracker.config.variants import VariantProfile
from tracker.services.catalog_api import CatalogApi
from tracker.services.client import CatalogClient
from tracker.views.telegram import ChatView, Confirmations

logger = logging.getLogger(__name__)


class CatalogHub:
    """
    Keeps the most recently active chats only. An evicted chat starts over
    with a fresh view: its next render sends new messages instead of
    editing the old ones.
    """

    def __init__(
        self,
        api: CatalogApi,
        profile: VariantProfile,
        placeholder: str,
        confirm_timeout: float,
        max_chats: int = 1000,
    ):
        self.api = api
        self.profile = profile
        self.confirmations = Confirmations()
        self._placeholder = placeholder
        self._confirm_timeout = confirm_timeout
        self._max_chats = max_chats
        self._chats: OrderedDict[int, tuple[CatalogClient, ChatView]] = OrderedDict()

    def for_chat(self, bot: Bot, chat_id: int) -> tuple[CatalogClient, ChatView]:
        entry = self._chats.get(chat_id)
        if entry is not None:
            self._chats.move_to_end(chat_id)
            return entry

        view = ChatView(bot, chat_id, self.confirmations, self._confirm_timeout)
        client = CatalogClient(self.api, view, self.profile, self._placeholder)
        entry = self._chats[chat_id] = (client, view)
        while len(self._chats) > self._max_chats:
            evicted, _ = self._chats.popitem(last=False)
            logger.debug("Dropped idle chat", extra={"chat_id": evicted})
        return entry

    def __len__(self) -> int:
        return len(self._chats)
