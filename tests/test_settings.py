import pytest
from pydantic import ValidationError

from tracker.config.settings import Settings
from tracker.config.variants import Variant, build_profile
from tracker.services.models import AlbumDraft, ApiFormatError, parse_album


class TestSettings:
    def test_defaults_to_primary_origin(self, monkeypatch):
        monkeypatch.delenv("API_BASE_URL", raising=False)
        monkeypatch.delenv("CATALOG_VARIANT", raising=False)
        s = Settings(_env_file=None)
        assert s.CATALOG_VARIANT == Variant.PRIMARY
        assert s.api_base_url == "http://127.0.0.1:8080"
        assert s.HTTP_RETRY_ATTEMPTS == 1

    def test_legacy_from_env(self, monkeypatch):
        monkeypatch.setenv("CATALOG_VARIANT", "legacy")
        monkeypatch.delenv("API_BASE_URL", raising=False)
        s = Settings(_env_file=None)
        assert s.profile.supports_history
        assert s.api_base_url == "http://localhost:3000"

    def test_explicit_base_url_wins(self, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "https://records.example.com/api/")
        s = Settings(_env_file=None)
        assert s.api_base_url == "https://records.example.com/api"

    def test_legacy_cover_is_configurable(self, monkeypatch):
        monkeypatch.setenv("CATALOG_VARIANT", "legacy")
        monkeypatch.setenv("LEGACY_DEFAULT_COVER", "blank.png")
        assert Settings(_env_file=None).profile.empty_cover == "blank.png"

    def test_rejects_zero_attempts(self, monkeypatch):
        monkeypatch.setenv("HTTP_RETRY_ATTEMPTS", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_rejects_zero_chats(self, monkeypatch):
        monkeypatch.setenv("MAX_CHATS", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_rejects_unknown_variant(self, monkeypatch):
        monkeypatch.setenv("CATALOG_VARIANT", "beta")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestProfiles:
    def test_primary(self):
        p = build_profile(Variant.PRIMARY)
        assert (p.id_field, p.empty_cover) == ("id", None)
        assert p.supports_delete and p.shows_count and p.closes_dialog
        assert not p.alert_on_create_failure

    def test_legacy(self):
        p = build_profile(Variant.LEGACY)
        assert (p.id_field, p.empty_cover) == ("album_id", "default-cover.jpg")
        assert p.supports_history and p.alert_on_create_failure
        assert not p.supports_delete


class TestModels:
    def test_parse_album_blank_cover_is_none(self):
        album = parse_album({"id": 3, "title": "T", "artist": "A", "cover_url": ""})
        assert album.cover_url is None
        assert album.display_name == "T by A"

    def test_parse_album_missing_field(self):
        with pytest.raises(ApiFormatError):
            parse_album({"title": "T", "artist": "A"})

    def test_draft_payload_keeps_given_cover(self):
        draft = AlbumDraft("T", "A", "https://img/x.png")
        assert draft.to_payload(None) == {"title": "T", "artist": "A", "cover_url": "https://img/x.png"}
