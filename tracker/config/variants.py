"""
Client variants.
The primary page talks to an absolute API origin and can delete albums;
the legacy page shows per-album play history instead.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Variant(str, Enum):
    PRIMARY = "primary"
    LEGACY = "legacy"


@dataclass(frozen=True)
class VariantProfile:
    variant: Variant
    id_field: str                  # key carrying the album id in API payloads
    empty_cover: Optional[str]     # sent as cover_url when the form field is blank
    default_base_url: str
    supports_delete: bool
    supports_history: bool
    shows_count: bool
    alert_on_create_failure: bool
    closes_dialog: bool


def build_profile(variant: Variant, legacy_cover: str = "default-cover.jpg") -> VariantProfile:
    if variant == Variant.PRIMARY:
        return VariantProfile(
            variant=variant,
            id_field="id",
            empty_cover=None,
            default_base_url="http://127.0.0.1:8080",
            supports_delete=True,
            supports_history=False,
            shows_count=True,
            alert_on_create_failure=False,
            closes_dialog=True,
        )
    return VariantProfile(
        variant=variant,
        id_field="album_id",
        empty_cover=legacy_cover,
        default_base_url="http://localhost:3000",
        supports_delete=False,
        supports_history=True,
        shows_count=False,
        alert_on_create_failure=True,
        closes_dialog=False,
    )
