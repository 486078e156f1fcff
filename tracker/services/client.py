"""
Catalog client: wires the components of one variant to a view and
exposes the event → handler registration used by the host.
"""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from tracker.config.variants import VariantProfile
from tracker.services.catalog import (
    AlbumCreator,
    AlbumRemover,
    CatalogLoader,
    HistoryViewer,
    PlayLogger,
    RecentPlays,
)
from tracker.services.catalog_api import CatalogApi
from tracker.services.models import AlbumDraft
from tracker.views.base import CatalogView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageLoaded:
    pass


@dataclass(frozen=True)
class AlbumSubmitted:
    draft: AlbumDraft


@dataclass(frozen=True)
class DeleteRequested:
    album_id: int


@dataclass(frozen=True)
class AlbumSelected:
    album_id: int


@dataclass(frozen=True)
class PlayStarted:
    album_id: int


@dataclass(frozen=True)
class PlayFinished:
    album_id: int
    finished_on: Optional[str] = None


@dataclass(frozen=True)
class RecentPlaysRequested:
    pass


Handler = Callable[[Any], Awaitable[Any]]


class UnsupportedEvent(Exception):
    def __init__(self, event: Any, variant: str):
        self.event = event
        super().__init__(f"{type(event).__name__} is not available in the {variant} variant")


class CatalogClient:
    def __init__(self, api: CatalogApi, view: CatalogView, profile: VariantProfile, placeholder: str):
        self.profile = profile
        self.loader = CatalogLoader(api, view, profile, placeholder)
        self.creator = AlbumCreator(api, view, profile, self.loader)
        self.plays = PlayLogger(api, view)
        self.recent = RecentPlays(api, view)
        self.remover = AlbumRemover(api, view, self.loader) if profile.supports_delete else None
        self.history = HistoryViewer(api, view) if profile.supports_history else None

        self._handlers: dict[type, Handler] = {}
        self.on(PageLoaded, lambda event: self.loader.load())
        self.on(AlbumSubmitted, lambda event: self.creator.submit(event.draft))
        self.on(PlayStarted, lambda event: self.plays.start(event.album_id))
        self.on(PlayFinished, lambda event: self.plays.finish(event.album_id, event.finished_on))
        self.on(RecentPlaysRequested, lambda event: self.recent.show())
        if self.remover is not None:
            self.on(DeleteRequested, lambda event: self.remover.remove(event.album_id))
        if self.history is not None:
            self.on(AlbumSelected, lambda event: self.history.show(event.album_id))

    def on(self, event_type: type, handler: Handler) -> None:
        self._handlers[event_type] = handler

    def handles(self, event_type: type) -> bool:
        return event_type in self._handlers

    async def dispatch(self, event: Any) -> Any:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise UnsupportedEvent(event, self.profile.variant.value)
        logger.debug("Dispatching event", extra={"event": type(event).__name__})
        return await handler(event)
