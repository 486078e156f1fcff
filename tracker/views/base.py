"""
Display surface the catalog components render into.
Every render replaces the previous contents wholesale; nothing is diffed.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class RenderError(Exception):
    """The display surface refused or failed to show something."""


@dataclass
class AlbumRow:
    album_id: int
    title: str
    artist: str
    cover_url: str
    deletable: bool = False
    selectable: bool = False

    @property
    def label(self) -> str:
        return f"{self.title} by {self.artist}"


class CatalogView(ABC):
    @abstractmethod
    async def render_catalog(self, rows: list[AlbumRow], count_text: Optional[str]) -> None:
        """Clear the album list and repopulate it; update the count display if given."""

    @abstractmethod
    async def render_history(self, lines: list[str]) -> None:
        """Clear the play-history list and repopulate it."""

    @abstractmethod
    async def render_plays(self, lines: list[str]) -> None:
        """Clear the recent-plays list and repopulate it."""

    @abstractmethod
    async def alert(self, text: str) -> None:
        ...

    @abstractmethod
    async def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question; suspends until the user answers."""

    @abstractmethod
    async def close_add_dialog(self) -> None:
        ...

    @abstractmethod
    async def reset_form(self) -> None:
        ...
