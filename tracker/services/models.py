from dataclasses import dataclass
from typing import Optional


class ApiFormatError(ValueError):
    """The API answered with JSON of an unexpected shape."""


@dataclass
class Album:
    album_id: int
    title: str
    artist: str
    cover_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.title} by {self.artist}"


@dataclass
class PlayHistoryEntry:
    played_on: str


@dataclass
class PlayRecord:
    album_id: int
    title: str
    artist: str
    played_on: str
    cover_url: Optional[str] = None
    duration: Optional[str] = None


@dataclass
class AlbumDraft:
    """Unvalidated form values, alive only until submission."""
    title: str = ""
    artist: str = ""
    cover_url: str = ""

    def to_payload(self, empty_cover: Optional[str]) -> dict:
        return {
            "title": self.title,
            "artist": self.artist,
            "cover_url": self.cover_url or empty_cover,
        }


def parse_album(data: dict, id_field: str = "id") -> Album:
    try:
        return Album(
            album_id=data[id_field],
            title=data["title"],
            artist=data["artist"],
            cover_url=data.get("cover_url") or None,
        )
    except (KeyError, TypeError) as exc:
        raise ApiFormatError(f"Malformed album: {exc!r}") from exc


def parse_play_entry(data: dict) -> PlayHistoryEntry:
    try:
        return PlayHistoryEntry(played_on=data["played_on"])
    except (KeyError, TypeError) as exc:
        raise ApiFormatError(f"Malformed play history entry: {exc!r}") from exc


def parse_play_record(data: dict) -> PlayRecord:
    try:
        return PlayRecord(
            album_id=data["album_id"],
            title=data["title"],
            artist=data["artist"],
            played_on=data["played_on"],
            cover_url=data.get("cover_url") or None,
            duration=data.get("duration"),
        )
    except (KeyError, TypeError) as exc:
        raise ApiFormatError(f"Malformed play record: {exc!r}") from exc


def expect_list(data) -> list:
    if not isinstance(data, list):
        raise ApiFormatError(f"Expected a JSON array, got {type(data).__name__}")
    return data
